from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Dict, Any, Union
import copy
import json
import os
import tempfile

STATE_VERSION = 1


class IStorage(ABC):
    """Where the registry keeps its durable snapshot."""
    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]: ...
    @abstractmethod
    def save(self, state: Dict[str, Any]) -> None: ...


class MemoryStorage(IStorage):
    def __init__(self):
        self._state: Optional[Dict[str, Any]] = None

    def load(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._state)

    def save(self, state: Dict[str, Any]) -> None:
        self._state = copy.deepcopy(state)


class JSONStorage(IStorage):
    """
    Whole-state snapshot in one JSON file.

    Every save serializes and rewrites the full state, every ciphertext and
    the whole event log included, so each commit costs time proportional to
    the registry's total history rather than to the size of the change.
    """

    def __init__(self, path: Union[str, Path] = "registry.json"):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        with self.path.open("r", encoding="utf-8") as fh:
            state = json.load(fh)
        version = state.get("version")
        if version != STATE_VERSION:
            raise ValueError(f"Unsupported registry state version: {version}")
        return state

    def save(self, state: Dict[str, Any]) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        payload = dict(state, version=STATE_VERSION)
        # write-then-replace so a crash never leaves a half-written state file
        fd, tmp = tempfile.mkstemp(prefix="registry.", suffix=".json", dir=str(directory))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
            Path(tmp).replace(self.path)
        finally:
            Path(tmp).unlink(missing_ok=True)
