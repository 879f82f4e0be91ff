from __future__ import annotations

from dataclasses import replace

from .errors import NotOwner, NothingToWithdraw
from .events import EventKind
from .fees import check_u256, checked_add
from .models import AdminConfig
from .transaction import Transaction

FEE_PARAMETERS = ("base_fee", "bytes_fee_multiplier", "grant_fee")


class AdminControl:
    """
    Owner-gated fee parameters and the balance collected from fees.

    The config is an immutable `AdminConfig`; every change swaps in a new
    value and registers the old one for rollback.
    """

    def __init__(self, config: AdminConfig, balance: int = 0):
        self._config = config
        self._balance = balance

    @property
    def config(self) -> AdminConfig:
        return self._config

    @property
    def owner(self) -> str:
        return self._config.owner

    @property
    def balance(self) -> int:
        return self._balance

    def require_owner(self, caller: str) -> None:
        if caller != self._config.owner:
            raise NotOwner(caller, self._config.owner)

    def _swap_config(self, tx: Transaction, config: AdminConfig) -> AdminConfig:
        old = self._config
        self._config = config

        def undo() -> None:
            self._config = old

        tx.on_rollback(undo)
        return old

    def set_owner(self, tx: Transaction, caller: str, new_owner: str) -> None:
        self.require_owner(caller)
        old = self._swap_config(tx, replace(self._config, owner=new_owner))
        tx.emit(EventKind.OWNER_CHANGED.value, old=old.owner, new=new_owner)

    def set_fee(self, tx: Transaction, caller: str, parameter: str, value: int) -> None:
        if parameter not in FEE_PARAMETERS:
            raise ValueError(f"Unknown fee parameter: {parameter}")
        self.require_owner(caller)
        check_u256(value, parameter)
        old = self._swap_config(tx, replace(self._config, **{parameter: value}))
        tx.emit(
            EventKind.FEE_CHANGED.value,
            parameter=parameter,
            old=getattr(old, parameter),
            new=value,
        )

    def collect(self, tx: Transaction, amount: int) -> None:
        old = self._balance
        self._balance = checked_add(old, amount, "collected balance")

        def undo() -> None:
            self._balance = old

        tx.on_rollback(undo)

    def sweep(self, tx: Transaction, caller: str) -> int:
        """Take the whole balance for the owner. Returns the amount taken."""
        self.require_owner(caller)
        amount = self._balance
        if amount == 0:
            raise NothingToWithdraw()
        self._balance = 0

        def undo() -> None:
            self._balance = amount

        tx.on_rollback(undo)
        tx.emit(EventKind.FEES_WITHDRAWN.value, owner=self._config.owner, amount=amount)
        return amount
