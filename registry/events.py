"""
Event Log

Append-only notification stream. Every committed mutating operation leaves
one or more events here; rolled-back operations leave none. Events are
observational only: nothing in the registry reads them back to make a
decision.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional
import logging

from .transaction import Transaction

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    FILE_CREATED = "FileCreated"
    ACCESS_GRANTED = "AccessGranted"
    FEE_CHANGED = "FeeChanged"
    OWNER_CHANGED = "OwnerChanged"
    FEES_WITHDRAWN = "FeesWithdrawn"


@dataclass(frozen=True)
class Event:
    """
    One notification.

    Attributes:
        sequence: Position in the log (zero-based, dense)
        block: Block marker of the transaction that emitted it
        kind: What happened
        data: JSON-safe details (file_index, grantor, grantee, parameter, ...)
    """
    sequence: int
    block: int
    kind: EventKind
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sequence": self.sequence,
            "block": self.block,
            "kind": self.kind.value,
            "data": dict(self.data),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            sequence=data["sequence"],
            block=data["block"],
            kind=EventKind(data["kind"]),
            data=dict(data.get("data", {})),
        )


Subscriber = Callable[[Event], None]


class EventLog:
    def __init__(self, events: Optional[Iterable[Event]] = None):
        self._events: List[Event] = list(events or [])
        self._subscribers: List[Subscriber] = []

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback` for future events. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def record(self, tx: Transaction) -> List[Event]:
        """Append the events staged in `tx`; they are dropped again if `tx` rolls back."""
        start = len(self._events)
        for kind, data in tx.staged_events:
            self._events.append(
                Event(sequence=len(self._events), block=tx.block, kind=EventKind(kind), data=dict(data))
            )

        def undo() -> None:
            del self._events[start:]

        tx.on_rollback(undo)
        return self._events[start:]

    def notify(self, events: Iterable[Event]) -> None:
        for event in events:
            self._notify(event)

    def _notify(self, event: Event) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                # the operation is already committed; a broken listener cannot undo it
                logger.exception("Event subscriber failed on %s #%d", event.kind.value, event.sequence)

    def events(self, kind: Optional[EventKind] = None, since: int = 0) -> List[Event]:
        """Events with sequence >= `since`, optionally filtered by kind."""
        return [
            e for e in self._events[max(since, 0):]
            if kind is None or e.kind == kind
        ]

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._events]

    @classmethod
    def from_list(cls, data: Iterable[Dict[str, Any]]) -> "EventLog":
        return cls(Event.from_dict(item) for item in data)
