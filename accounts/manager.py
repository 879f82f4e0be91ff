import logging
from typing import List, Optional

from .models import Account
from .storage import IStorage

logger = logging.getLogger(__name__)


class InsufficientFunds(ValueError):
    def __init__(self, identity: str, balance: int, amount: int):
        self.identity = identity
        self.balance = balance
        self.amount = amount
        super().__init__(f"Insufficient funds for {identity}: balance {balance}, needs {amount}")


class AccountManager:
    """
    External balances of the identities that pay the registry.

    Implements the wallet interface `FileRegistry` expects (`debit` and
    `credit`), so it can be handed straight to the registry.
    """

    def __init__(self, storage: IStorage):
        self.storage = storage

    @staticmethod
    def _check_identity(identity: str) -> str:
        if not identity.strip():
            raise ValueError("identity cannot be empty")
        return identity

    @staticmethod
    def _check_amount(amount: int) -> int:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ValueError(f"amount must be a non-negative integer, got {amount!r}")
        return amount

    def open_account(self, identity: str, balance: int = 0) -> Account:
        identity_c = self._check_identity(identity)
        if self.storage.get_account(identity_c):
            raise ValueError("Account already exists.")
        account = Account.new(identity_c, self._check_amount(balance))
        self.storage.save_account(account)
        return account

    def _get_or_open(self, identity_c: str) -> Account:
        account = self.storage.get_account(identity_c)
        if account is None:
            account = Account.new(identity_c)
        return account

    def balance_of(self, identity: str) -> int:
        account = self.storage.get_account(self._check_identity(identity))
        return account.balance if account else 0

    def deposit(self, identity: str, amount: int) -> Account:
        """Add funds from outside the system."""
        return self.credit(identity, amount)

    def credit(self, identity: str, amount: int) -> Account:
        account = self._get_or_open(self._check_identity(identity))
        account = account.with_balance(account.balance + self._check_amount(amount))
        self.storage.save_account(account)
        logger.debug("Credited %d to %s", amount, account.identity)
        return account

    def debit(self, identity: str, amount: int) -> Account:
        identity_c = self._check_identity(identity)
        self._check_amount(amount)
        account = self._get_or_open(identity_c)
        if account.balance < amount:
            raise InsufficientFunds(identity_c, account.balance, amount)
        account = account.with_balance(account.balance - amount)
        self.storage.save_account(account)
        logger.debug("Debited %d from %s", amount, identity_c)
        return account

    def get_account(self, identity: str) -> Optional[Account]:
        return self.storage.get_account(self._check_identity(identity))

    def get_all_accounts(self) -> List[Account]:
        return self.storage.get_all_accounts()
