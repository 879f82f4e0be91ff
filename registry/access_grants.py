from __future__ import annotations

from typing import Any, Dict, List, Optional

from .models import AccessKey
from .transaction import Transaction


class AccessGrantRegistry:
    """
    Per-grantee history of wrapped keys.

    Each identity owns an append-only list of `AccessKey` records in the
    order they were granted. Nothing is deduplicated: granting the same file
    to the same identity twice yields two records.
    """

    def __init__(
        self,
        access_keys: Optional[Dict[str, List[AccessKey]]] = None,
        total_access_count: int = 0,
    ):
        self._access_keys: Dict[str, List[AccessKey]] = {
            identity: list(keys) for identity, keys in (access_keys or {}).items()
        }
        self._total_access_count = total_access_count

    @property
    def total_access_count(self) -> int:
        return self._total_access_count

    def record(self, tx: Transaction, grantee: str, access_key: AccessKey) -> int:
        """Append `access_key` to the grantee's history; returns its position."""
        created = grantee not in self._access_keys
        keys = self._access_keys.setdefault(grantee, [])
        keys.append(access_key)
        self._total_access_count += 1

        def undo() -> None:
            keys.pop()
            self._total_access_count -= 1
            if created:
                del self._access_keys[grantee]

        tx.on_rollback(undo)
        return len(keys) - 1

    def has_access_key(self, file_index: int, identity: str) -> bool:
        if isinstance(file_index, bool) or not isinstance(file_index, int):
            return False
        # linear in the number of grants this identity ever received
        for access_key in self._access_keys.get(identity, []):
            if access_key.file_index == file_index:
                return True
        return False

    def access_keys_of(self, identity: str) -> List[AccessKey]:
        return list(self._access_keys.get(identity, []))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_access_count": self._total_access_count,
            "access_keys": {
                identity: [k.to_dict() for k in keys]
                for identity, keys in self._access_keys.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessGrantRegistry":
        access_keys = {
            identity: [AccessKey.from_dict(k) for k in keys]
            for identity, keys in data.get("access_keys", {}).items()
        }
        return cls(access_keys, data.get("total_access_count", 0))
