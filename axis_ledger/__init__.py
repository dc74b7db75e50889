"""
Axis Ledger

A minimal authenticated ledger: bearer-token login, account creation,
deposits, withdrawals and balance reads over an in-memory account store.
"""

__version__ = "1.0.0"
