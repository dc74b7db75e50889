"""
Account Management Module

Ledger operations on top of an account store: account creation, deposits,
withdrawals and balance reads, with amount validation and a transaction id
issued for every successful mutation.
"""

from decimal import Decimal, InvalidOperation
from numbers import Number
from typing import Any, Optional, Union
import math

from .exceptions import AccountNotFound, InvalidAmount, InsufficientFunds
from .storage import Account, AccountStore, InMemoryAccountStore
from .transactions import TransactionIdIssuer
from .logging_config import get_logger, log_action


logger = get_logger(__name__)


def parse_amount(value: Any) -> Decimal:
    """
    Convert a JSON amount to a positive finite Decimal

    Only real numbers are accepted: booleans, strings (numeric or not),
    None and containers are rejected, as are NaN, infinities, zero and
    negative values.

    Raises:
        InvalidAmount
    """
    if isinstance(value, bool) or not isinstance(value, Number):
        raise InvalidAmount("Amount must be a number")

    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidAmount("Amount must be finite")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount("Amount must be a number")

    if not amount.is_finite():
        raise InvalidAmount("Amount must be finite")
    if amount <= 0:
        raise InvalidAmount("Amount must be positive")

    return amount


def parse_account_id(value: Union[int, str]) -> int:
    """
    Convert a path account id to an int

    Anything that is not a base-10 integer >= 1 can never name an account,
    so it is reported as AccountNotFound.
    """
    if isinstance(value, bool):
        raise AccountNotFound(value)
    if isinstance(value, int):
        account_id = value
    elif isinstance(value, str) and value.isdigit() and value.isascii():
        account_id = int(value)
    else:
        raise AccountNotFound(value)

    if account_id < 1:
        raise AccountNotFound(value)
    return account_id


class AccountManager:
    """
    Manages account lifecycle and balance movements

    All balance changes go through the injected store; the manager itself
    keeps no account state.
    """

    def __init__(
        self,
        store: Optional[AccountStore] = None,
        id_issuer: Optional[TransactionIdIssuer] = None
    ):
        self.store = store or InMemoryAccountStore()
        self.id_issuer = id_issuer or TransactionIdIssuer()

    def _require_account(self, account_id: Union[int, str]) -> int:
        parsed = parse_account_id(account_id)
        if not self.store.exists(parsed):
            raise AccountNotFound(account_id)
        return parsed

    def create_account(self, created_by: Optional[str] = None) -> Account:
        """
        Open a new account with a zero balance

        Args:
            created_by: Identity opening the account

        Returns:
            Created Account
        """
        account = self.store.create_account(created_by=created_by)

        log_action(
            logger, "info", f"Account {account.id} created",
            identity=created_by, action="create_account", account_id=account.id
        )
        return account

    def deposit(self, account_id: Union[int, str], amount: Any,
                performed_by: Optional[str] = None) -> str:
        """
        Add funds to an account

        Args:
            account_id: Target account
            amount: Raw amount, must be a positive finite number
            performed_by: Identity performing the deposit

        Returns:
            Transaction id

        Raises:
            AccountNotFound, InvalidAmount
        """
        parsed_id = self._require_account(account_id)
        value = parse_amount(amount)

        self.store.credit(parsed_id, value)
        transaction_id = self.id_issuer.next()

        log_action(
            logger, "info", f"Deposited {value} into account {parsed_id}",
            identity=performed_by, action="deposit", account_id=parsed_id,
            amount=value, transaction_id=transaction_id
        )
        return transaction_id

    def withdraw(self, account_id: Union[int, str], amount: Any,
                 performed_by: Optional[str] = None) -> str:
        """
        Remove funds from an account

        The sufficiency check and the debit happen atomically in the store.

        Returns:
            Transaction id

        Raises:
            AccountNotFound, InvalidAmount, InsufficientFunds
        """
        parsed_id = self._require_account(account_id)
        value = parse_amount(amount)

        try:
            self.store.debit(parsed_id, value)
        except InsufficientFunds:
            log_action(
                logger, "info", f"Withdrawal of {value} from account {parsed_id} refused",
                identity=performed_by, action="withdraw_refused", account_id=parsed_id,
                amount=value, reason="insufficient_funds"
            )
            raise

        transaction_id = self.id_issuer.next()

        log_action(
            logger, "info", f"Withdrew {value} from account {parsed_id}",
            identity=performed_by, action="withdraw", account_id=parsed_id,
            amount=value, transaction_id=transaction_id
        )
        return transaction_id

    def get_balance(self, account_id: Union[int, str]) -> Decimal:
        """Current balance of an account; raises AccountNotFound"""
        return self.store.get_balance(parse_account_id(account_id))
