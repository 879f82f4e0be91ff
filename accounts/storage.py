from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
from dataclasses import asdict, fields
from .models import Account
import json, os, tempfile

# Get valid field names from Account dataclass
_ACCOUNT_FIELDS = {f.name for f in fields(Account)}

def _make_account(data: Dict[str, Any]) -> Account:
    """Create an Account from dict, ignoring unknown fields."""
    filtered = {k: v for k, v in data.items() if k in _ACCOUNT_FIELDS}
    return Account(**filtered)

class IStorage(ABC):
    @abstractmethod
    def get_account(self, identity: str) -> Optional[Account]: ...
    @abstractmethod
    def save_account(self, account: Account) -> None: ...
    @abstractmethod
    def get_all_accounts(self) -> List[Account]: ...

class MemoryStorage(IStorage):
    def __init__(self):
        self._accounts: Dict[str, Account] = {}

    def get_account(self, identity: str) -> Optional[Account]:
        return self._accounts.get(identity)

    def save_account(self, account: Account) -> None:
        self._accounts[account.identity] = account

    def get_all_accounts(self) -> List[Account]:
        return list(self._accounts.values())

class JSONStorage(IStorage):
    def __init__(self, path: str = "accounts.json"):
        self.path = path
        if not os.path.exists(self.path):
            self._save({"accounts": []})

    def _load(self) -> Dict[str, Any]:
        with open(self.path, "r") as f:
            return json.load(f)

    def _save(self, data: Dict[str, Any]) -> None:
        fd, tmp = tempfile.mkstemp(prefix="accounts.", suffix=".tmp", dir=os.path.dirname(self.path) or ".")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)

    def get_account(self, identity: str) -> Optional[Account]:
        data = self._load()
        for a in data["accounts"]:
            if a["identity"] == identity:
                return _make_account(a)
        return None

    def save_account(self, account: Account) -> None:
        """Insert or replace the account with the same identity."""
        data = self._load()
        data["accounts"] = [a for a in data["accounts"] if a["identity"] != account.identity]
        data["accounts"].append(asdict(account))
        self._save(data)

    def get_all_accounts(self) -> List[Account]:
        data = self._load()
        return [_make_account(a) for a in data["accounts"]]
