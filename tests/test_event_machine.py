"""
Tests for the event machines.
"""

import threading

from src.event.event_machine import (
    CallbackEventMachine,
    DiscardEventMachine,
    Event,
    EventMachine,
    EventType,
)


class TestDiscardEventMachine:
    def test_drops_everything(self):
        em = DiscardEventMachine()
        assert isinstance(em, EventMachine)
        calls = []
        em.register_listener(calls.append, EventType.ERROR)
        em.emit("boom", EventType.ERROR)
        assert calls == []


class TestCallbackEventMachine:
    def test_dispatch_by_type(self):
        em = CallbackEventMachine()
        deposits, errors = [], []
        em.register_listener(deposits.append, EventType.RECEIVED_DEPOSIT)
        em.register_listener(errors.append, EventType.ERROR)

        em.emit({"value": 5}, EventType.RECEIVED_DEPOSIT)

        assert len(deposits) == 1
        assert isinstance(deposits[0], Event)
        assert deposits[0].payload == {"value": 5}
        assert errors == []

    def test_listener_without_types_gets_all(self):
        em = CallbackEventMachine()
        seen = []
        em.register_listener(lambda e: seen.append(e.type))
        em.emit(None, EventType.SENT_TRANSFER)
        em.emit(None, EventType.SHUTDOWN)
        assert seen == [EventType.SENT_TRANSFER, EventType.SHUTDOWN]

    def test_priority_order(self):
        em = CallbackEventMachine()
        order = []
        em.register_listener(lambda e: order.append("low"), EventType.ERROR, priority=0)
        em.register_listener(lambda e: order.append("high"), EventType.ERROR, priority=10)
        em.register_listener(lambda e: order.append("low2"), EventType.ERROR, priority=0)
        em.emit(None, EventType.ERROR)
        assert order == ["high", "low", "low2"]

    def test_handler_error_isolated(self):
        em = CallbackEventMachine()
        seen = []

        def bad(event):
            raise RuntimeError("boom")

        em.register_listener(bad, EventType.ERROR, priority=5)
        em.register_listener(seen.append, EventType.ERROR)
        em.emit("x", EventType.ERROR)

        assert len(seen) == 1
        stats = em.get_stats()
        assert stats["handler_errors"] == 1
        assert stats["handler_calls"] == 1
        assert stats["events_emitted"] == 1

    def test_unregister_and_clear(self):
        em = CallbackEventMachine()
        seen = []
        lid = em.register_listener(seen.append, EventType.PROMOTION)
        assert em.unregister_listener(lid) is True
        assert em.unregister_listener(lid) is False
        em.emit(None, EventType.PROMOTION)
        assert seen == []

        em.register_listener(seen.append)
        em.clear()
        assert em.listener_count() == 0

    def test_history(self):
        em = CallbackEventMachine(history_size=2)
        em.emit(1, EventType.SENT_TRANSFER)
        em.emit(2, EventType.ERROR)
        em.emit(3, EventType.SENT_TRANSFER)
        history = em.get_history()
        assert [e.payload for e in history] == [2, 3]
        assert [e.payload for e in em.get_history(EventType.SENT_TRANSFER)] == [3]

    def test_stats_exact_under_concurrent_emits(self):
        em = CallbackEventMachine(history_size=0)

        def bad(event):
            raise RuntimeError("boom")

        em.register_listener(lambda e: None, EventType.SENT_TRANSFER)
        em.register_listener(bad, EventType.SENT_TRANSFER)

        def worker():
            for _ in range(200):
                em.emit(None, EventType.SENT_TRANSFER)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stats = em.get_stats()
        assert stats["events_emitted"] == 1600
        assert stats["handler_calls"] == 1600
        assert stats["handler_errors"] == 1600
        assert stats["listeners"] == 2
