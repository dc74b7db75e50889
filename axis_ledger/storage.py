"""
Account Storage Module

Provides the abstract account store interface and the in-memory
implementation. The store is the only component that mutates balances and
allocates account ids.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
from decimal import Decimal, Inexact, localcontext
from datetime import datetime, timezone
from dataclasses import dataclass
import threading

from .exceptions import AccountNotFound, InvalidAmount, InsufficientFunds


# Widest coefficient a balance movement may need
MAX_DIGITS = 200


def exact_add(balance: Decimal, delta: Decimal) -> Decimal:
    """
    Add two Decimals without rounding

    Precision is sized to the operands and Inexact is trapped, so the result
    is either exact or InvalidAmount is raised.
    """
    low = min(balance.as_tuple().exponent, delta.as_tuple().exponent)
    high = max(balance.adjusted(), delta.adjusted())
    digits = high - low + 2
    if digits > MAX_DIGITS:
        raise InvalidAmount("Amount exceeds ledger precision")

    with localcontext() as ctx:
        ctx.prec = max(digits, 1)
        ctx.traps[Inexact] = True
        try:
            return balance + delta
        except Inexact:
            raise InvalidAmount("Amount exceeds ledger precision")


@dataclass(frozen=True)
class Account:
    """Point-in-time view of an account"""
    id: int
    balance: Decimal
    created_at: datetime
    created_by: Optional[str] = None  # Recorded, not enforced


class AccountStore(ABC):
    """Abstract interface for account stores"""

    @abstractmethod
    def create_account(self, created_by: Optional[str] = None) -> Account:
        """Allocate the next account id and store a zero balance"""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Load an account, None if absent"""
        pass

    @abstractmethod
    def get_balance(self, account_id: int) -> Decimal:
        """Current balance; raises AccountNotFound"""
        pass

    @abstractmethod
    def credit(self, account_id: int, amount: Decimal) -> Decimal:
        """Add a positive amount and return the new balance"""
        pass

    @abstractmethod
    def debit(self, account_id: int, amount: Decimal) -> Decimal:
        """Subtract a positive amount and return the new balance

        Raises InsufficientFunds, leaving the balance unchanged, when the
        amount exceeds the balance.
        """
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of accounts"""
        pass

    def exists(self, account_id: int) -> bool:
        """Check if an account exists"""
        return self.get_account(account_id) is not None


class _AccountSlot:
    """Mutable balance cell guarded by its own lock"""

    __slots__ = ("id", "balance", "created_at", "created_by", "lock")

    def __init__(self, account_id: int, created_by: Optional[str]):
        self.id = account_id
        self.balance = Decimal("0")
        self.created_at = datetime.now(timezone.utc)
        self.created_by = created_by
        self.lock = threading.Lock()

    def snapshot(self) -> Account:
        return Account(
            id=self.id,
            balance=self.balance,
            created_at=self.created_at,
            created_by=self.created_by
        )


class InMemoryAccountStore(AccountStore):
    """
    In-memory account store

    ``_lock`` guards the account map and the id counter only; each account's
    read-check-mutate runs under that account's own lock, so work on
    different accounts never serializes.
    """

    def __init__(self):
        self._accounts: Dict[int, _AccountSlot] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def _slot(self, account_id: int) -> _AccountSlot:
        with self._lock:
            slot = self._accounts.get(account_id)
        if slot is None:
            raise AccountNotFound(account_id)
        return slot

    @staticmethod
    def _check_positive(amount: Decimal) -> None:
        if not isinstance(amount, Decimal) or not amount.is_finite() or amount <= 0:
            raise InvalidAmount("Amount must be a positive finite number")

    def create_account(self, created_by: Optional[str] = None) -> Account:
        with self._lock:
            account_id = self._next_id
            self._next_id += 1
            slot = _AccountSlot(account_id, created_by)
            self._accounts[account_id] = slot
        return slot.snapshot()

    def get_account(self, account_id: int) -> Optional[Account]:
        with self._lock:
            slot = self._accounts.get(account_id)
        if slot is None:
            return None
        with slot.lock:
            return slot.snapshot()

    def get_balance(self, account_id: int) -> Decimal:
        slot = self._slot(account_id)
        with slot.lock:
            return slot.balance

    def credit(self, account_id: int, amount: Decimal) -> Decimal:
        slot = self._slot(account_id)
        self._check_positive(amount)
        with slot.lock:
            slot.balance = exact_add(slot.balance, amount)
            return slot.balance

    def debit(self, account_id: int, amount: Decimal) -> Decimal:
        slot = self._slot(account_id)
        self._check_positive(amount)
        with slot.lock:
            if amount > slot.balance:
                raise InsufficientFunds(account_id, slot.balance, amount)
            slot.balance = exact_add(slot.balance, -amount)
            return slot.balance

    def count(self) -> int:
        with self._lock:
            return len(self._accounts)
