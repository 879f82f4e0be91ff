from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import IndexOutOfRange
from .models import FileRecord
from .transaction import Transaction


class FileStore:
    """
    Append-only arena of files addressed by dense index.

    Indices are handed out as `0, 1, 2, ...` and never reused. The only
    mutation after creation is appending to a file's access holders.
    """

    def __init__(self, files: Optional[Iterable[FileRecord]] = None):
        self._files: List[FileRecord] = list(files or [])

    def count(self) -> int:
        return len(self._files)

    def ensure_index(self, file_index: int) -> int:
        if isinstance(file_index, bool) or not isinstance(file_index, int):
            raise IndexOutOfRange(file_index, len(self._files))
        if file_index < 0 or file_index >= len(self._files):
            raise IndexOutOfRange(file_index, len(self._files))
        return file_index

    def get(self, file_index: int) -> FileRecord:
        return self._files[self.ensure_index(file_index)]

    def holder_count(self, file_index: int) -> int:
        return len(self.get(file_index).access_holders)

    def holders(self, file_index: int) -> Tuple[str, ...]:
        return tuple(self.get(file_index).access_holders)

    def append(self, tx: Transaction, record: FileRecord) -> int:
        """Store a new file and return its index."""
        file_index = len(self._files)
        self._files.append(record)
        tx.on_rollback(self._files.pop)
        return file_index

    def add_holder(self, tx: Transaction, file_index: int, identity: str) -> None:
        # duplicates are kept: one entry per grant
        holders = self.get(file_index).access_holders
        holders.append(identity)
        tx.on_rollback(holders.pop)

    def to_list(self) -> List[Dict[str, Any]]:
        return [record.to_dict() for record in self._files]

    @classmethod
    def from_list(cls, data: Iterable[Dict[str, Any]]) -> "FileStore":
        return cls(FileRecord.from_dict(item) for item in data)
