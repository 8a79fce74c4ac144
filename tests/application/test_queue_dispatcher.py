"""Tests for the queue-based observer dispatch."""

import threading

from shophub.application.observers import QueueDispatcher, dispatch_inline


class TestDispatch:

    def test_inline_runs_immediately(self):
        calls = []
        dispatch_inline(lambda: calls.append(1))
        assert calls == [1]

    def test_queue_defers_until_run_pending(self):
        dispatcher = QueueDispatcher()
        calls = []
        dispatcher(lambda: calls.append("a"))
        dispatcher(lambda: calls.append("b"))
        assert calls == []
        assert dispatcher.run_pending() == 2
        assert calls == ["a", "b"]
        assert dispatcher.run_pending() == 0

    def test_run_pending_waits_for_other_thread(self):
        dispatcher = QueueDispatcher()
        calls = []
        producer = threading.Timer(0.05, dispatcher, args=(lambda: calls.append("late"),))
        producer.start()
        try:
            assert dispatcher.run_pending(timeout=2.0) == 1
        finally:
            producer.join()
        assert calls == ["late"]

    def test_run_pending_times_out(self):
        assert QueueDispatcher().run_pending(timeout=0.01) == 0
