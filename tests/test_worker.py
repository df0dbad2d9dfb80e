"""Tests für die Hintergrund-Ausführung (letzte Anfrage gewinnt)."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from data.fake_data import FakeCatalogGenerator
from solver.generator import ScheduleResult, generate_schedules
from solver.worker import BackgroundGenerator, StaleRequestError


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def make_request(seed: int = 42):
    return FakeCatalogGenerator(seed=seed).generate()


class TestBackgroundGenerator:
    def test_result_matches_direct_call(self):
        request = make_request()
        with BackgroundGenerator() as bg:
            ticket = bg.submit(request)
            result = ticket.result(timeout=30)
        assert isinstance(result, ScheduleResult)
        assert result == generate_schedules(request)

    def test_process_pool_matches_direct_call(self):
        """Im Prozess-Pool entsteht dasselbe Ergebnis wie im Aufrufer."""
        request = make_request(7)
        with BackgroundGenerator(use_processes=True) as bg:
            result = bg.submit(request).result(timeout=60)
        assert result == generate_schedules(request)

    def test_request_ids_increase(self):
        with BackgroundGenerator() as bg:
            first = bg.submit(make_request(1))
            second = bg.submit(make_request(2))
            assert second.request_id == first.request_id + 1
            assert bg.latest_request_id == second.request_id
            second.result(timeout=30)

    def test_superseded_request_is_stale(self):
        """Die ältere Anfrage liefert kein Ergebnis mehr, die neue schon."""
        with BackgroundGenerator() as bg:
            first = bg.submit(make_request(1))
            second = bg.submit(make_request(2))
            assert not first.is_current
            with pytest.raises(StaleRequestError) as exc_info:
                first.result(timeout=30)
            assert exc_info.value.request_id == first.request_id
            assert exc_info.value.latest_id == second.request_id
            assert isinstance(second.result(timeout=30), ScheduleResult)

    def test_pending_request_cancelled(self):
        """Eine noch wartende Anfrage wird abgebrochen, bevor sie startet."""
        gate = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            blocker = executor.submit(gate.wait)
            bg = BackgroundGenerator(executor=executor)
            first = bg.submit(make_request(1))
            second = bg.submit(make_request(2))
            assert first.future.cancelled()
            gate.set()
            blocker.result(timeout=5)
            assert isinstance(second.result(timeout=30), ScheduleResult)
            bg.shutdown()
        finally:
            gate.set()
            executor.shutdown(wait=True)

    def test_external_executor_not_shut_down(self):
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            bg = BackgroundGenerator(executor=executor)
            bg.shutdown()
            assert executor.submit(lambda: 1).result(timeout=5) == 1
        finally:
            executor.shutdown(wait=True)
