from typing import Any, Callable, Dict, List, Tuple


class Transaction:
    """
    Journal for one mutating registry operation.

    Components apply their appends immediately and register the inverse with
    `on_rollback`; notifications are only staged here and get published once
    the operation commits. A rollback replays the undo journal newest first,
    so list appends can be undone with a plain `pop`.
    """

    def __init__(self, block: int, timestamp: int):
        self.block = block
        self.timestamp = timestamp
        self._undo: List[Callable[[], None]] = []
        self.staged_events: List[Tuple[str, Dict[str, Any]]] = []

    def on_rollback(self, undo: Callable[[], None]) -> None:
        self._undo.append(undo)

    def emit(self, kind: str, **data: Any) -> None:
        self.staged_events.append((kind, data))

    def rollback(self) -> None:
        while self._undo:
            self._undo.pop()()
        self.staged_events.clear()
