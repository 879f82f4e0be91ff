"""
Sealed File Registry

Fee-metered, append-only registry of encrypted files and the wrapped keys
handed out for them.

Usage:
    registry = FileRegistry(AdminConfig(owner="alice", base_fee=100, bytes_fee_multiplier=1, grant_fee=10))

    fee = registry.required_creation_fee(payload)
    index = registry.add_file("alice", payload, wrapped_for_alice, amount=fee)

    registry.grant("alice", index, "bob", wrapped_for_bob, amount=registry.required_grant_fee())
    registry.has_access_key(index, "bob")  # True

Every mutating call runs under one lock as a single transaction: either all
of its effects (records, counters, collected fee, wallet movements, persisted
snapshot) happen, or none do and a `RegistryError` is raised.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Tuple
import logging
import threading
import time

from .access_grants import AccessGrantRegistry
from .admin import AdminControl
from .errors import InvalidValue, RegistryError
from .events import EventKind, EventLog
from .fees import check_tendered, check_u256, creation_fee_for, required_grant_fee
from .file_store import FileStore
from .identity import check_identity
from .models import AccessKey, AdminConfig, FilePayload, FileRecord
from .storage import IStorage, JSONStorage, MemoryStorage, STATE_VERSION
from .transaction import Transaction

logger = logging.getLogger(__name__)


class Wallet(Protocol):
    """External balance book the registry moves payments through."""
    def debit(self, identity: str, amount: int) -> Any: ...
    def credit(self, identity: str, amount: int) -> Any: ...


def _as_bytes(value: Any, what: str) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise InvalidValue(f"{what} must be bytes, got {type(value).__name__}")


class FileRegistry:
    def __init__(
        self,
        config: Optional[AdminConfig] = None,
        *,
        storage: Optional[IStorage] = None,
        wallet: Optional[Wallet] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            config: Initial admin parameters. Ignored when `storage` already holds state.
            storage: Durable snapshot location (in-memory by default)
            wallet: Optional balance book; tendered amounts are debited from callers
                and withdrawals credited to the owner
            clock: Source of creation timestamps (unix seconds)
        """
        self._lock = threading.RLock()
        self._storage = storage if storage is not None else MemoryStorage()
        self._wallet = wallet
        self._clock = clock

        state = self._storage.load()
        if state:
            self._restore(state)
            logger.info(
                "Registry resumed at block %d with %d files", self._block, self._files.count()
            )
            return

        if config is None:
            raise InvalidValue("an initial AdminConfig is required for an empty registry")
        for parameter in ("base_fee", "bytes_fee_multiplier", "grant_fee"):
            check_u256(getattr(config, parameter), parameter)
        config = AdminConfig(
            owner=check_identity(config.owner),
            base_fee=config.base_fee,
            bytes_fee_multiplier=config.bytes_fee_multiplier,
            grant_fee=config.grant_fee,
        )

        self._block = 0
        self._files = FileStore()
        self._grants = AccessGrantRegistry()
        self._admin = AdminControl(config)
        self._events = EventLog()
        self._storage.save(self._snapshot())
        logger.info("Registry created with owner %s", config.owner)

    @classmethod
    def from_settings(cls, settings, *, wallet: Optional[Wallet] = None) -> "FileRegistry":
        """Build a registry persisted at the configured state path."""
        from .logging_config import setup_logging

        setup_logging("registry", settings.log_level)
        storage = JSONStorage(settings.state_path)
        config = None if storage.path.exists() else settings.admin_config()
        return cls(config, storage=storage, wallet=wallet)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def _snapshot(self) -> Dict[str, Any]:
        grants = self._grants.to_dict()
        return {
            "version": STATE_VERSION,
            "block": self._block,
            "config": self._admin.config.to_dict(),
            "balance": self._admin.balance,
            "total_access_count": grants["total_access_count"],
            "files": self._files.to_list(),
            "access_keys": grants["access_keys"],
            "events": self._events.to_list(),
        }

    def _restore(self, state: Dict[str, Any]) -> None:
        self._block = state.get("block", 0)
        self._files = FileStore.from_list(state.get("files", []))
        self._grants = AccessGrantRegistry.from_dict(state)
        self._admin = AdminControl(AdminConfig.from_dict(state["config"]), state.get("balance", 0))
        self._events = EventLog.from_list(state.get("events", []))

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Transaction]:
        with self._lock:
            tx = Transaction(block=self._block + 1, timestamp=int(self._clock()))
            try:
                yield tx
                previous_block = self._block
                self._block = tx.block

                def undo_block() -> None:
                    self._block = previous_block

                tx.on_rollback(undo_block)
                recorded = self._events.record(tx)
                self._storage.save(self._snapshot())
            except RegistryError as exc:
                tx.rollback()
                logger.warning("%s rejected: %s", operation, exc)
                raise
            except Exception:
                tx.rollback()
                logger.debug("%s rolled back", operation, exc_info=True)
                raise
            logger.info("%s committed at block %d (%d events)", operation, tx.block, len(recorded))
            self._events.notify(recorded)

    def _collect(self, tx: Transaction, caller: str, amount: int) -> None:
        if self._wallet is not None and amount > 0:
            wallet = self._wallet
            wallet.debit(caller, amount)
            tx.on_rollback(lambda: wallet.credit(caller, amount))
        self._admin.collect(tx, amount)

    # ------------------------------------------------------------------
    # Fees
    # ------------------------------------------------------------------

    def required_creation_fee(self, payload: FilePayload) -> int:
        with self._lock:
            return creation_fee_for(self._admin.config, payload)

    def required_grant_fee(self) -> int:
        with self._lock:
            return required_grant_fee(self._admin.config)

    # ------------------------------------------------------------------
    # Files and grants
    # ------------------------------------------------------------------

    def add_file(
        self,
        caller: str,
        payload: FilePayload,
        self_wrapped_key: bytes,
        amount: int,
    ) -> int:
        """
        Store an encrypted file and the caller's own wrapped key for it.

        Args:
            caller: Identity creating the file; becomes its first access holder
            payload: Opaque encrypted content
            self_wrapped_key: The file key wrapped for the caller
            amount: Tendered payment, must equal `required_creation_fee(payload)`

        Returns:
            Index of the new file

        Raises:
            InvalidFee: amount is not exactly the creation fee
            ArithmeticOverflow: the fee does not fit in 256 bits
        """
        caller = check_identity(caller)
        payload = FilePayload(
            ciphertext=_as_bytes(payload.ciphertext, "ciphertext"),
            encrypted_name=_as_bytes(payload.encrypted_name, "encrypted_name"),
            encrypted_folder=_as_bytes(payload.encrypted_folder, "encrypted_folder"),
            encrypted_kind=_as_bytes(payload.encrypted_kind, "encrypted_kind"),
            iv=_as_bytes(payload.iv, "iv"),
        )
        self_wrapped_key = _as_bytes(self_wrapped_key, "self_wrapped_key")

        with self._transaction("add_file") as tx:
            check_tendered(creation_fee_for(self._admin.config, payload), amount)
            self._collect(tx, caller, amount)

            record = FileRecord.new(
                payload,
                caller,
                created_at=tx.timestamp,
                created_block=tx.block,
            )
            file_index = self._files.append(tx, record)
            self._grants.record(
                tx,
                caller,
                AccessKey(grantor=caller, file_index=file_index, wrapped_key=self_wrapped_key),
            )
            tx.emit(EventKind.FILE_CREATED.value, file_index=file_index, creator=caller, fee=amount)
            tx.emit(EventKind.ACCESS_GRANTED.value, file_index=file_index, grantor=caller, grantee=caller)
        return file_index

    def grant(
        self,
        caller: str,
        file_index: int,
        grantee: str,
        wrapped_key: bytes,
        amount: int,
    ) -> None:
        """
        Hand `grantee` a wrapped key for an existing file.

        Any caller may grant any existing file to anyone; the registry only
        checks the index and the fee, not whether the caller holds access.

        Raises:
            IndexOutOfRange: file_index >= file_count(), checked before the fee
            InvalidFee: amount is not exactly the grant fee
        """
        caller = check_identity(caller)
        grantee = check_identity(grantee)
        wrapped_key = _as_bytes(wrapped_key, "wrapped_key")

        with self._transaction("grant") as tx:
            self._files.ensure_index(file_index)
            check_tendered(required_grant_fee(self._admin.config), amount)
            self._collect(tx, caller, amount)

            self._grants.record(
                tx,
                grantee,
                AccessKey(grantor=caller, file_index=file_index, wrapped_key=wrapped_key),
            )
            self._files.add_holder(tx, file_index, grantee)
            tx.emit(EventKind.ACCESS_GRANTED.value, file_index=file_index, grantor=caller, grantee=grantee)

    def has_access_key(self, file_index: int, identity: str) -> bool:
        identity = check_identity(identity)
        with self._lock:
            return self._grants.has_access_key(file_index, identity)

    def access_keys_of(self, identity: str) -> List[AccessKey]:
        identity = check_identity(identity)
        with self._lock:
            return self._grants.access_keys_of(identity)

    def file_count(self) -> int:
        with self._lock:
            return self._files.count()

    def file_access_holder_count(self, file_index: int) -> int:
        with self._lock:
            return self._files.holder_count(file_index)

    def file_access_holders(self, file_index: int) -> Tuple[str, ...]:
        with self._lock:
            return self._files.holders(file_index)

    def total_access_count(self) -> int:
        with self._lock:
            return self._grants.total_access_count

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    @property
    def config(self) -> AdminConfig:
        with self._lock:
            return self._admin.config

    @property
    def owner(self) -> str:
        return self.config.owner

    @property
    def balance(self) -> int:
        with self._lock:
            return self._admin.balance

    @property
    def block(self) -> int:
        with self._lock:
            return self._block

    @property
    def events(self) -> EventLog:
        return self._events

    def set_owner(self, caller: str, new_owner: str) -> None:
        caller = check_identity(caller)
        new_owner = check_identity(new_owner)
        with self._transaction("set_owner") as tx:
            self._admin.set_owner(tx, caller, new_owner)

    def set_base_fee(self, caller: str, value: int) -> None:
        self._set_fee(caller, "base_fee", value)

    def set_bytes_fee_multiplier(self, caller: str, value: int) -> None:
        self._set_fee(caller, "bytes_fee_multiplier", value)

    def set_grant_fee(self, caller: str, value: int) -> None:
        self._set_fee(caller, "grant_fee", value)

    def _set_fee(self, caller: str, parameter: str, value: int) -> None:
        caller = check_identity(caller)
        with self._transaction(f"set_{parameter}") as tx:
            self._admin.set_fee(tx, caller, parameter, value)

    def withdraw_fees(self, caller: str) -> int:
        """
        Sweep the whole collected balance to the owner.

        Returns:
            The amount transferred

        Raises:
            NotOwner: caller is not the owner
            NothingToWithdraw: the balance is zero
        """
        caller = check_identity(caller)
        with self._transaction("withdraw_fees") as tx:
            amount = self._admin.sweep(tx, caller)
            if self._wallet is not None:
                wallet = self._wallet
                owner = self._admin.owner
                wallet.credit(owner, amount)
                tx.on_rollback(lambda: wallet.debit(owner, amount))
        return amount
