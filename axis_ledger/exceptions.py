"""Ledger and authentication error types."""


class LedgerError(Exception):
    """Base class for all ledger errors."""


class AuthenticationError(LedgerError):
    """Base class for credential failures."""


class MissingCredential(AuthenticationError):
    """Raised when a call carries no bearer credential."""


class InvalidCredential(AuthenticationError):
    """Raised for a bad login or an unverifiable, tampered or expired token."""


class AccountNotFound(LedgerError, LookupError):
    """Raised when the requested account does not exist."""

    def __init__(self, account_id):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class InvalidAmount(LedgerError, ValueError):
    """Raised when an amount is not a positive finite number."""


class InsufficientFunds(LedgerError):
    """Raised when a withdrawal exceeds the current balance."""

    def __init__(self, account_id: int, balance, amount):
        self.account_id = account_id
        self.balance = balance
        self.amount = amount
        super().__init__("Insufficient funds")
