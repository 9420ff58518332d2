"""
Event machine: lifecycle notifications emitted by an account.

The account emits events (transfer sent, deposit received, errors, ...)
through whatever EventMachine its settings carry. Two implementations:

- DiscardEventMachine: drops everything (the settings default)
- CallbackEventMachine: synchronous pub/sub with priority ordering,
  handler error isolation, history and stats
"""

from __future__ import annotations

import abc
import itertools
import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple

from src.infra.logging_cfg import log_event

log = logging.getLogger("account")


class EventType(Enum):
    """Account lifecycle events."""
    # Outgoing transfers
    SENDING_TRANSFER = auto()
    SENT_TRANSFER = auto()
    PROMOTION = auto()
    REATTACHMENT = auto()
    TRANSFER_CONFIRMED = auto()

    # Incoming deposits
    RECEIVING_DEPOSIT = auto()
    RECEIVED_DEPOSIT = auto()
    RECEIVED_MESSAGE = auto()

    # Deposit requests
    DEPOSIT_REQUEST_ADDED = auto()
    DEPOSIT_REQUEST_REMOVED = auto()

    # System
    ERROR = auto()
    SHUTDOWN = auto()


@dataclass
class Event:
    type: EventType
    payload: Any
    timestamp_ms: int = field(default_factory=lambda: int(time.time() * 1000))

    def __str__(self) -> str:
        return f"Event({self.type.name}, ts={self.timestamp_ms})"


Handler = Callable[[Event], None]


@dataclass
class Listener:
    """Internal listener record."""
    id: int
    handler: Handler
    event_types: Tuple[EventType, ...]  # empty = all events
    priority: int = 0  # higher = called first
    name: Optional[str] = None

    def wants(self, event_type: EventType) -> bool:
        return not self.event_types or event_type in self.event_types


class EventMachine(abc.ABC):
    """Sink for account lifecycle events."""

    @abc.abstractmethod
    def emit(self, payload: Any, event_type: EventType) -> None:
        ...

    @abc.abstractmethod
    def register_listener(self, handler: Handler, *event_types: EventType) -> int:
        """Register handler for the given types (all types if none given). Returns a listener id."""

    @abc.abstractmethod
    def unregister_listener(self, listener_id: int) -> bool:
        ...

    @abc.abstractmethod
    def clear(self) -> None:
        ...


class DiscardEventMachine(EventMachine):
    """Event machine that drops every event."""

    def emit(self, payload: Any, event_type: EventType) -> None:
        pass

    def register_listener(self, handler: Handler, *event_types: EventType) -> int:
        return 0

    def unregister_listener(self, listener_id: int) -> bool:
        return False

    def clear(self) -> None:
        pass

    def __repr__(self) -> str:
        return "DiscardEventMachine()"


class CallbackEventMachine(EventMachine):
    """
    Synchronous event machine.

    Usage:
        em = CallbackEventMachine()
        lid = em.register_listener(on_deposit, EventType.RECEIVED_DEPOSIT)
        em.emit({"bundle": ...}, EventType.RECEIVED_DEPOSIT)
        em.unregister_listener(lid)

    Handlers run in the emitting thread, ordered by priority. A failing
    handler is logged and counted; the remaining handlers still run.
    """

    DEFAULT_HISTORY_SIZE = 100

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE) -> None:
        self._listeners: List[Listener] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._history: Deque[Event] = deque(maxlen=history_size if history_size > 0 else None)
        self._history_enabled = history_size > 0
        self._stats = {
            "events_emitted": 0,
            "handler_calls": 0,
            "handler_errors": 0,
        }

    def register_listener(
        self,
        handler: Handler,
        *event_types: EventType,
        priority: int = 0,
        name: Optional[str] = None,
    ) -> int:
        with self._lock:
            listener = Listener(
                id=next(self._ids),
                handler=handler,
                event_types=tuple(event_types),
                priority=priority,
                name=name,
            )
            # stable insert, sorted by priority descending
            insert_idx = len(self._listeners)
            for i, existing in enumerate(self._listeners):
                if existing.priority < priority:
                    insert_idx = i
                    break
            self._listeners.insert(insert_idx, listener)

        log_event(
            log,
            "event_listener_registered",
            level=logging.DEBUG,
            listener_id=listener.id,
            handler_name=name or getattr(handler, "__name__", repr(handler)),
            event_types=[t.name for t in event_types] or ["*"],
            priority=priority,
        )
        return listener.id

    def unregister_listener(self, listener_id: int) -> bool:
        with self._lock:
            for i, listener in enumerate(self._listeners):
                if listener.id == listener_id:
                    del self._listeners[i]
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def emit(self, payload: Any, event_type: EventType) -> None:
        event = Event(type=event_type, payload=payload)
        with self._lock:
            targets = [listener for listener in self._listeners if listener.wants(event_type)]
            self._stats["events_emitted"] += 1
            if self._history_enabled:
                self._history.append(event)

        for listener in targets:
            try:
                listener.handler(event)
                with self._lock:
                    self._stats["handler_calls"] += 1
            except Exception as exc:
                with self._lock:
                    self._stats["handler_errors"] += 1
                log_event(
                    log,
                    "event_handler_error",
                    level=logging.ERROR,
                    event_type=event_type.name,
                    handler_name=listener.name or getattr(listener.handler, "__name__", "?"),
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        with self._lock:
            if event_type is None:
                return len(self._listeners)
            return sum(1 for listener in self._listeners if listener.wants(event_type))

    def get_history(self, event_type: Optional[EventType] = None, limit: int = 100) -> List[Event]:
        with self._lock:
            events = list(self._history)
        if event_type is not None:
            events = [e for e in events if e.type == event_type]
        return events[-limit:]

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {**self._stats, "listeners": len(self._listeners)}
