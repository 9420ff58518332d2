"""
Event package.

Account lifecycle events and the event machines that dispatch them.
"""

from src.event.event_machine import (
    EventType,
    Event,
    EventMachine,
    DiscardEventMachine,
    CallbackEventMachine,
    Listener,
)

__all__ = [
    "EventType",
    "Event",
    "EventMachine",
    "DiscardEventMachine",
    "CallbackEventMachine",
    "Listener",
]
