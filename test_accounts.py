"""Tests for the external balance book."""

import pytest

from accounts import AccountManager, InsufficientFunds, JSONStorage, MemoryStorage


def test_open_and_deposit():
    manager = AccountManager(MemoryStorage())
    account = manager.open_account("Alice", 10)
    assert account.identity == "Alice"
    assert manager.balance_of("Alice") == 10
    assert manager.balance_of("alice") == 0

    manager.deposit("Alice", 5)
    assert manager.balance_of("Alice") == 15

    with pytest.raises(ValueError):
        manager.open_account("Alice")
    with pytest.raises(ValueError):
        manager.open_account("  ")


def test_debit_and_credit():
    manager = AccountManager(MemoryStorage())
    manager.credit("bob", 100)
    manager.debit("bob", 40)
    assert manager.balance_of("bob") == 60

    with pytest.raises(InsufficientFunds) as excinfo:
        manager.debit("bob", 61)
    assert excinfo.value.balance == 60
    assert manager.balance_of("bob") == 60


def test_unknown_identity_has_zero_balance():
    manager = AccountManager(MemoryStorage())
    assert manager.balance_of("nobody") == 0
    assert manager.get_account("nobody") is None


def test_rejects_negative_amounts():
    manager = AccountManager(MemoryStorage())
    with pytest.raises(ValueError):
        manager.credit("bob", -1)
    with pytest.raises(ValueError):
        manager.debit("bob", -1)


def test_json_storage_persists(tmp_path):
    path = str(tmp_path / "accounts.json")
    manager = AccountManager(JSONStorage(path))
    manager.open_account("alice", 7)
    manager.credit("alice", 3)
    manager.credit("bob", 1)

    reloaded = AccountManager(JSONStorage(path))
    assert reloaded.balance_of("alice") == 10
    assert sorted(a.identity for a in reloaded.get_all_accounts()) == ["alice", "bob"]
