"""Tests for debounced write batching."""

import logging
import threading

import pytest

from stagelog.services.batching import WriteBatcher


@pytest.fixture
def batcher():
    batcher = WriteBatcher(delay=30)
    yield batcher
    batcher.cancel()


class TestWriteBatcher:
    def test_operations_wait_for_flush(self, batcher):
        calls = []
        for index in range(3):
            batcher.add(lambda index=index: calls.append(index))
        assert calls == []
        assert batcher.pending == 3
        assert batcher.flush() == 3
        assert calls == [0, 1, 2]
        assert batcher.pending == 0

    def test_flush_with_nothing_pending(self, batcher):
        assert batcher.flush() == 0

    def test_failed_batch_is_dropped(self, batcher, caplog):
        calls = []

        def explode():
            raise RuntimeError("disk full")

        batcher.add(explode)
        batcher.add(lambda: calls.append("after"))
        with caplog.at_level(logging.ERROR, logger="stagelog.services.batching"):
            assert batcher.flush() == 0
        assert calls == []
        assert batcher.pending == 0
        assert "Batch of 2 operations failed" in caplog.text

    def test_zero_delay_runs_immediately(self):
        calls = []
        WriteBatcher(delay=0).add(lambda: calls.append("now"))
        assert calls == ["now"]

    def test_quiet_window_triggers_single_flush(self):
        done = threading.Event()
        calls = []
        batcher = WriteBatcher(delay=0.05)
        batcher.add(lambda: calls.append(1))
        batcher.add(lambda: (calls.append(2), done.set()))
        assert done.wait(timeout=5)
        assert calls == [1, 2]
        assert batcher.pending == 0
