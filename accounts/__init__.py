"""External balance book used to pay registry fees and receive withdrawals."""

from .manager import AccountManager, InsufficientFunds
from .models import Account
from .storage import IStorage, JSONStorage, MemoryStorage

__all__ = [
    "AccountManager",
    "InsufficientFunds",
    "Account",
    "IStorage",
    "JSONStorage",
    "MemoryStorage",
]
