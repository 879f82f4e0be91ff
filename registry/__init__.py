"""Fee-metered registry of encrypted files and their per-recipient wrapped keys."""

from .errors import (
    RegistryError,
    InvalidFee,
    IndexOutOfRange,
    NotOwner,
    NothingToWithdraw,
    ArithmeticOverflow,
    InvalidValue,
)
from .events import Event, EventKind, EventLog
from .fees import U256_MAX, required_creation_fee
from .models import AccessKey, AdminConfig, FilePayload, FileRecord
from .service import FileRegistry
from .settings import RegistrySettings
from .storage import IStorage, JSONStorage, MemoryStorage

__all__ = [
    # Service
    "FileRegistry",
    "RegistrySettings",
    # Models
    "AccessKey",
    "AdminConfig",
    "FilePayload",
    "FileRecord",
    "Event",
    "EventKind",
    "EventLog",
    # Fees
    "U256_MAX",
    "required_creation_fee",
    # Storage
    "IStorage",
    "JSONStorage",
    "MemoryStorage",
    # Errors
    "RegistryError",
    "InvalidFee",
    "IndexOutOfRange",
    "NotOwner",
    "NothingToWithdraw",
    "ArithmeticOverflow",
    "InvalidValue",
]
