"""Tests for all-or-nothing operation semantics."""

import pytest

from accounts import InsufficientFunds
from registry import FileRegistry, IStorage, InvalidFee, MemoryStorage


class FlakyStorage(IStorage):
    """MemoryStorage that can be told to fail the next save."""

    def __init__(self):
        self.inner = MemoryStorage()
        self.fail_next = False

    def load(self):
        return self.inner.load()

    def save(self, state):
        if self.fail_next:
            self.fail_next = False
            raise OSError("disk full")
        self.inner.save(state)


def test_insufficient_funds_rolls_back(paid_registry, accounts, payload):
    accounts.debit("alice", 900)

    with pytest.raises(InsufficientFunds):
        paid_registry.add_file("alice", payload, b"key-a", 150)

    assert paid_registry.file_count() == 0
    assert paid_registry.balance == 0
    assert accounts.balance_of("alice") == 100
    assert len(paid_registry.events) == 0


def test_invalid_fee_does_not_touch_wallet(paid_registry, accounts, payload):
    with pytest.raises(InvalidFee):
        paid_registry.add_file("alice", payload, b"key-a", 140)
    assert accounts.balance_of("alice") == 1_000


def test_failed_save_rolls_back_everything(admin_config, accounts, payload):
    storage = FlakyStorage()
    registry = FileRegistry(admin_config, storage=storage, wallet=accounts)
    registry.add_file("alice", payload, b"key-a", 150)

    storage.fail_next = True
    with pytest.raises(OSError):
        registry.grant("bob", 0, "carol", b"key-c", 10)

    assert not registry.has_access_key(0, "carol")
    assert registry.access_keys_of("carol") == []
    assert registry.file_access_holder_count(0) == 1
    assert registry.total_access_count() == 1
    assert registry.balance == 150
    assert registry.block == 1
    assert len(registry.events) == 2
    assert accounts.balance_of("bob") == 1_000

    # persisted state matches what is in memory
    assert storage.load()["total_access_count"] == 1


def test_failed_save_on_add_file(admin_config, payload):
    storage = FlakyStorage()
    registry = FileRegistry(admin_config, storage=storage)

    storage.fail_next = True
    with pytest.raises(OSError):
        registry.add_file("alice", payload, b"key-a", 150)

    assert registry.file_count() == 0
    assert registry.access_keys_of("alice") == []
    assert registry.add_file("alice", payload, b"key-a", 150) == 0


def test_failed_save_on_withdraw_keeps_balance(admin_config, accounts, payload):
    storage = FlakyStorage()
    registry = FileRegistry(admin_config, storage=storage, wallet=accounts)
    registry.add_file("alice", payload, b"key-a", 150)

    storage.fail_next = True
    with pytest.raises(OSError):
        registry.withdraw_fees("owner")

    assert registry.balance == 150
    assert accounts.balance_of("owner") == 0


def test_failed_save_on_set_owner(admin_config):
    storage = FlakyStorage()
    registry = FileRegistry(admin_config, storage=storage)

    storage.fail_next = True
    with pytest.raises(OSError):
        registry.set_owner("owner", "alice")
    assert registry.owner == "owner"
