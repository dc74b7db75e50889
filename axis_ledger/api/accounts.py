"""
Account management endpoints
"""

from fastapi import APIRouter, HTTPException, Depends, Request, status

from .auth import LedgerSystem, get_ledger_system, require_principal
from .schemas import (
    AmountRequest, AccountCreatedResponse, TransactionResponse,
    BalanceResponse, json_body_schema, read_json_object, to_json_number
)
from ..exceptions import AccountNotFound, InvalidAmount, InsufficientFunds
from ..tokens import TokenClaims


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED,
             response_model=AccountCreatedResponse)
async def create_account(
    principal: TokenClaims = Depends(require_principal),
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Create a new account with an initial balance of 0"""
    account = system.account_manager.create_account(created_by=principal.identity)
    return {"account_id": account.id}


@router.post("/{account_id}/deposit", response_model=TransactionResponse,
             openapi_extra=json_body_schema(AmountRequest))
async def deposit(
    account_id: str,
    request: Request,
    principal: TokenClaims = Depends(require_principal),
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Deposit a positive amount and return a transaction id"""
    amount = (await read_json_object(request)).get("amount")
    try:
        transaction_id = system.account_manager.deposit(
            account_id, amount, performed_by=principal.identity
        )
    except AccountNotFound:
        raise HTTPException(status_code=404, detail="Account not found")
    except InvalidAmount:
        raise HTTPException(status_code=400, detail="Invalid deposit amount")

    return {"transaction_id": transaction_id}


@router.post("/{account_id}/withdraw", response_model=TransactionResponse,
             openapi_extra=json_body_schema(AmountRequest))
async def withdraw(
    account_id: str,
    request: Request,
    principal: TokenClaims = Depends(require_principal),
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Withdraw a positive amount not exceeding the balance"""
    amount = (await read_json_object(request)).get("amount")
    try:
        transaction_id = system.account_manager.withdraw(
            account_id, amount, performed_by=principal.identity
        )
    except AccountNotFound:
        raise HTTPException(status_code=404, detail="Account not found")
    except InvalidAmount:
        raise HTTPException(status_code=400, detail="Invalid withdrawal amount")
    except InsufficientFunds:
        raise HTTPException(status_code=400, detail="Insufficient funds")

    return {"transaction_id": transaction_id}


@router.get("/{account_id}/balance", response_model=BalanceResponse)
async def get_balance(
    account_id: str,
    principal: TokenClaims = Depends(require_principal),
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Get the current balance of an account"""
    try:
        balance = system.account_manager.get_balance(account_id)
    except AccountNotFound:
        raise HTTPException(status_code=404, detail="Account not found")

    return {"balance": to_json_number(balance)}
