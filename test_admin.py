"""Tests for owner-gated parameters and fee withdrawal."""

import pytest

from registry import (
    ArithmeticOverflow,
    EventKind,
    InvalidValue,
    NotOwner,
    NothingToWithdraw,
    U256_MAX,
)


@pytest.mark.parametrize(
    "setter, parameter",
    [
        ("set_base_fee", "base_fee"),
        ("set_bytes_fee_multiplier", "bytes_fee_multiplier"),
        ("set_grant_fee", "grant_fee"),
    ],
)
def test_owner_sets_fee_parameters(registry, setter, parameter):
    getattr(registry, setter)("owner", 77)
    assert getattr(registry.config, parameter) == 77

    event = registry.events.events(EventKind.FEE_CHANGED)[-1]
    assert event.data["parameter"] == parameter
    assert event.data["new"] == 77


@pytest.mark.parametrize("setter", ["set_base_fee", "set_bytes_fee_multiplier", "set_grant_fee"])
def test_non_owner_cannot_set_fees(registry, setter):
    before = registry.config
    with pytest.raises(NotOwner):
        getattr(registry, setter)("alice", 1)
    assert registry.config == before
    assert len(registry.events) == 0


def test_fee_changes_apply_to_next_calls(registry, payload):
    registry.set_base_fee("owner", 0)
    registry.set_bytes_fee_multiplier("owner", 2)
    registry.set_grant_fee("owner", 3)

    assert registry.required_creation_fee(payload) == 100
    index = registry.add_file("alice", payload, b"key-a", 100)
    registry.grant("alice", index, "bob", b"key-b", 3)
    assert registry.balance == 103


def test_invalid_fee_values_rejected(registry):
    with pytest.raises(InvalidValue):
        registry.set_grant_fee("owner", -1)
    with pytest.raises(ArithmeticOverflow):
        registry.set_base_fee("owner", U256_MAX + 1)
    assert registry.config.grant_fee == 10
    assert registry.config.base_fee == 100


def test_set_owner_transfers_capability(registry):
    registry.set_owner("owner", "alice")
    assert registry.owner == "alice"

    with pytest.raises(NotOwner):
        registry.set_grant_fee("owner", 1)
    registry.set_grant_fee("alice", 1)

    event = registry.events.events(EventKind.OWNER_CHANGED)[0]
    assert event.data == {"old": "owner", "new": "alice"}


def test_only_owner_can_change_owner(registry):
    with pytest.raises(NotOwner):
        registry.set_owner("alice", "alice")
    assert registry.owner == "owner"


def test_withdraw_nothing(registry):
    with pytest.raises(NothingToWithdraw):
        registry.withdraw_fees("owner")


def test_withdraw_requires_owner(registry, payload):
    registry.add_file("alice", payload, b"key-a", 150)
    with pytest.raises(NotOwner):
        registry.withdraw_fees("alice")
    assert registry.balance == 150


def test_withdraw_sweeps_everything(registry, payload):
    registry.add_file("alice", payload, b"key-a", 150)
    registry.grant("alice", 0, "bob", b"key-b", 10)

    assert registry.withdraw_fees("owner") == 160
    assert registry.balance == 0
    event = registry.events.events(EventKind.FEES_WITHDRAWN)[0]
    assert event.data == {"owner": "owner", "amount": 160}

    with pytest.raises(NothingToWithdraw):
        registry.withdraw_fees("owner")


def test_withdraw_credits_owner_wallet(paid_registry, accounts, payload):
    paid_registry.add_file("alice", payload, b"key-a", 150)
    paid_registry.grant("bob", 0, "carol", b"key-c", 10)
    assert accounts.balance_of("alice") == 850
    assert accounts.balance_of("bob") == 990

    prior = paid_registry.balance
    paid_registry.withdraw_fees("owner")
    assert paid_registry.balance == 0
    assert accounts.balance_of("owner") == prior == 160


def test_withdraw_after_owner_change_pays_new_owner(paid_registry, accounts, payload):
    paid_registry.add_file("alice", payload, b"key-a", 150)
    paid_registry.set_owner("owner", "carol")
    paid_registry.withdraw_fees("carol")
    assert accounts.balance_of("carol") == 1_150
    assert accounts.balance_of("owner") == 0
