"""
Test suite for accounts module

Tests account creation, deposits, withdrawals and balance reads through the
AccountManager, including amount validation, error ordering and the
non-negative balance invariant under concurrent withdrawals.
"""

import pytest
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from axis_ledger.accounts import AccountManager, parse_account_id, parse_amount
from axis_ledger.exceptions import AccountNotFound, InvalidAmount, InsufficientFunds
from axis_ledger.storage import InMemoryAccountStore
from axis_ledger.transactions import TransactionIdIssuer


INVALID_AMOUNTS = [
    0, -5, "abc", float("nan"), float("inf"), float("-inf"),
    "100", None, True, [100], {"value": 100}, Decimal("NaN"), 0.0, -0.01
]


class TestParseAmount:
    """Test amount validation"""

    @pytest.mark.parametrize("value,expected", [
        (100, Decimal("100")),
        (0.1, Decimal("0.1")),
        (12.34, Decimal("12.34")),
        (Decimal("5.5"), Decimal("5.5")),
        (1e-9, Decimal("1E-9")),
    ])
    def test_valid_amounts(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", INVALID_AMOUNTS)
    def test_invalid_amounts(self, value):
        with pytest.raises(InvalidAmount):
            parse_amount(value)


class TestParseAccountId:
    """Test path id parsing"""

    @pytest.mark.parametrize("value,expected", [("1", 1), ("42", 42), (7, 7)])
    def test_valid_ids(self, value, expected):
        assert parse_account_id(value) == expected

    @pytest.mark.parametrize("value", ["0", "-1", "abc", "1.5", "", " 1", "١", 0, True])
    def test_ids_that_cannot_name_an_account(self, value):
        with pytest.raises(AccountNotFound):
            parse_account_id(value)


class TestAccountManager:
    """Test ledger operations"""

    def setup_method(self):
        self.manager = AccountManager(InMemoryAccountStore(), TransactionIdIssuer())

    def test_create_account(self):
        first = self.manager.create_account(created_by="admin")
        second = self.manager.create_account()

        assert first.id == 1
        assert second.id == 2
        assert first.balance == Decimal("0")
        assert first.created_by == "admin"
        assert self.manager.get_balance(first.id) == Decimal("0")

    def test_deposit_then_balance(self):
        """Depositing 100 into a fresh account yields exactly 100"""
        account = self.manager.create_account()

        transaction_id = self.manager.deposit(account.id, 100)

        assert isinstance(transaction_id, str) and transaction_id
        assert self.manager.get_balance(account.id) == Decimal("100")

    def test_string_path_ids_accepted(self):
        account = self.manager.create_account()

        self.manager.deposit(str(account.id), 20)
        self.manager.withdraw(str(account.id), 5)

        assert self.manager.get_balance(str(account.id)) == Decimal("15")

    def test_fractional_amounts_are_exact(self):
        account = self.manager.create_account()

        for _ in range(10):
            self.manager.deposit(account.id, 0.1)
        self.manager.withdraw(account.id, 0.3)

        assert self.manager.get_balance(account.id) == Decimal("0.7")

    def test_large_deposit_after_small_is_exact(self):
        account = self.manager.create_account()

        self.manager.deposit(account.id, 1)
        self.manager.deposit(account.id, 10 ** 30)

        assert self.manager.get_balance(account.id) == 10 ** 30 + 1

    def test_withdraw(self):
        account = self.manager.create_account()
        self.manager.deposit(account.id, 200)

        transaction_id = self.manager.withdraw(account.id, 150)

        assert transaction_id
        assert self.manager.get_balance(account.id) == Decimal("50")

    def test_withdraw_insufficient_funds_leaves_balance(self):
        account = self.manager.create_account()
        self.manager.deposit(account.id, 50)

        with pytest.raises(InsufficientFunds):
            self.manager.withdraw(account.id, 50.01)

        assert self.manager.get_balance(account.id) == Decimal("50")

    def test_withdraw_from_empty_account(self):
        account = self.manager.create_account()

        with pytest.raises(InsufficientFunds):
            self.manager.withdraw(account.id, 1)

    @pytest.mark.parametrize("amount", [0, -5, "abc", float("nan"), float("inf")])
    def test_invalid_amount_rejected(self, amount):
        account = self.manager.create_account()
        self.manager.deposit(account.id, 10)

        with pytest.raises(InvalidAmount):
            self.manager.deposit(account.id, amount)
        with pytest.raises(InvalidAmount):
            self.manager.withdraw(account.id, amount)

        assert self.manager.get_balance(account.id) == Decimal("10")

    def test_unknown_account_for_every_operation(self):
        with pytest.raises(AccountNotFound):
            self.manager.deposit(999, 10)
        with pytest.raises(AccountNotFound):
            self.manager.withdraw(999, 10)
        with pytest.raises(AccountNotFound):
            self.manager.get_balance(999)

    def test_unknown_account_checked_before_amount(self):
        """A bad amount on a missing account reports the missing account"""
        with pytest.raises(AccountNotFound):
            self.manager.deposit(999, "abc")
        with pytest.raises(AccountNotFound):
            self.manager.withdraw("nope", -1)

    def test_amount_checked_before_funds(self):
        account = self.manager.create_account()

        with pytest.raises(InvalidAmount):
            self.manager.withdraw(account.id, -1000)

    def test_transaction_ids_are_distinct(self):
        account = self.manager.create_account()
        issued = set()

        for _ in range(50):
            issued.add(self.manager.deposit(account.id, 2))
            issued.add(self.manager.withdraw(account.id, 1))

        assert len(issued) == 100

    def test_failed_operations_issue_no_transaction_id(self):
        class CountingIssuer(TransactionIdIssuer):
            calls = 0

            def next(self):
                CountingIssuer.calls += 1
                return super().next()

        manager = AccountManager(InMemoryAccountStore(), CountingIssuer())
        account = manager.create_account()

        with pytest.raises(InsufficientFunds):
            manager.withdraw(account.id, 1)
        with pytest.raises(InvalidAmount):
            manager.deposit(account.id, 0)

        assert CountingIssuer.calls == 0

    def test_balance_never_negative_random_sequence(self):
        """Balance stays >= 0 over a random mix of operations"""
        rng = random.Random(1234)
        accounts = [self.manager.create_account().id for _ in range(3)]

        for _ in range(500):
            account_id = rng.choice(accounts)
            amount = rng.randint(1, 100)
            try:
                if rng.random() < 0.5:
                    self.manager.deposit(account_id, amount)
                else:
                    self.manager.withdraw(account_id, amount)
            except InsufficientFunds:
                pass
            assert self.manager.get_balance(account_id) >= 0

    def test_default_collaborators(self):
        manager = AccountManager()
        account = manager.create_account()

        assert manager.deposit(account.id, 1)


class TestConcurrentWithdrawals:
    """Test the balance invariant under concurrent withdrawals"""

    def test_exactly_enough_withdrawals_succeed(self):
        manager = AccountManager()
        account = manager.create_account()
        manager.deposit(account.id, 100)
        start = threading.Barrier(20)

        def withdraw():
            start.wait()
            try:
                return manager.withdraw(account.id, 10)
            except InsufficientFunds:
                return None

        with ThreadPoolExecutor(max_workers=20) as pool:
            results = list(pool.map(lambda _: withdraw(), range(20)))

        succeeded = [r for r in results if r is not None]
        assert len(succeeded) == 10
        assert len(set(succeeded)) == 10
        assert results.count(None) == 10
        assert manager.get_balance(account.id) == Decimal("0")

    def test_mixed_sizes_never_overdraw(self):
        manager = AccountManager()
        account = manager.create_account()
        manager.deposit(account.id, 1000)
        amounts = [random.Random(i).randint(1, 200) for i in range(40)]

        def withdraw(amount):
            try:
                manager.withdraw(account.id, amount)
                return amount
            except InsufficientFunds:
                return 0

        with ThreadPoolExecutor(max_workers=16) as pool:
            withdrawn = sum(pool.map(withdraw, amounts))

        balance = manager.get_balance(account.id)
        assert balance >= 0
        assert balance == Decimal(1000 - withdrawn)
