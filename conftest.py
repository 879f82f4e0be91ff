"""Shared pytest fixtures for all tests."""

import pytest

from accounts import AccountManager, MemoryStorage as AccountMemoryStorage
from registry import AdminConfig, FilePayload, FileRegistry

FIXED_TIME = 1_700_000_000


def make_payload(total: int = 50) -> FilePayload:
    """
    Build a payload whose billed fields add up to `total` bytes.

    Args:
        total: Combined length of ciphertext, name, folder, kind and iv (>= 20)

    Returns:
        FilePayload with deterministic contents
    """
    fixed = {"encrypted_name": 8, "encrypted_folder": 5, "encrypted_kind": 4, "iv": 3}
    ciphertext_len = total - sum(fixed.values())
    assert ciphertext_len >= 0
    return FilePayload(
        ciphertext=b"c" * ciphertext_len,
        encrypted_name=b"n" * fixed["encrypted_name"],
        encrypted_folder=b"f" * fixed["encrypted_folder"],
        encrypted_kind=b"k" * fixed["encrypted_kind"],
        iv=b"i" * fixed["iv"],
    )


@pytest.fixture
def admin_config():
    """Owner 'owner', base fee 100, 1 per byte, grant fee 10."""
    return AdminConfig(owner="owner", base_fee=100, bytes_fee_multiplier=1, grant_fee=10)


@pytest.fixture
def registry(admin_config):
    """
    In-memory registry with a fixed clock.

    Returns:
        FileRegistry without a wallet (tendered amounts are taken as paid)
    """
    return FileRegistry(admin_config, clock=lambda: FIXED_TIME)


@pytest.fixture
def payload():
    """50-byte payload; costs 150 under the default admin config."""
    return make_payload(50)


@pytest.fixture
def accounts():
    """In-memory balance book with alice, bob and carol funded."""
    manager = AccountManager(AccountMemoryStorage())
    for identity in ("alice", "bob", "carol"):
        manager.open_account(identity, 1_000)
    return manager


@pytest.fixture
def paid_registry(admin_config, accounts):
    """Registry that debits callers through the `accounts` fixture."""
    return FileRegistry(admin_config, wallet=accounts, clock=lambda: FIXED_TIME)
