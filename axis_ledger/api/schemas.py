"""
Pydantic models for API requests/responses
"""

import json
from decimal import Decimal
from typing import Any, Dict, Optional, Type, Union
from fastapi import Request
from pydantic import BaseModel, Field


def to_json_number(value: Decimal) -> Union[int, float]:
    """Render a Decimal balance as a JSON number (int when integral)"""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


async def read_json_object(request: Request) -> Dict[str, Any]:
    """
    Parse the request body as a JSON object

    An absent, malformed or non-object body yields an empty dict, so the
    missing fields are rejected by the ledger (400/401) instead of by
    request validation. Read inside the handler, after the authorization
    dependency has run.
    """
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def json_body_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """OpenAPI requestBody entry for a route that reads its body itself"""
    return {
        "requestBody": {
            "required": False,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


class LoginRequest(BaseModel):
    # Checked by the authenticator so every bad login maps to 401
    username: Optional[Any] = None
    password: Optional[Any] = None


class TokenResponse(BaseModel):
    token: str = Field(..., description="Bearer credential (JWT)")


class AmountRequest(BaseModel):
    # Validated by the ledger so every bad amount maps to 400
    amount: Any = Field(None, description="Positive amount")


class AccountCreatedResponse(BaseModel):
    account_id: int


class TransactionResponse(BaseModel):
    transaction_id: str = Field(..., description="Correlation id, not retained")


class BalanceResponse(BaseModel):
    balance: Union[int, float]
