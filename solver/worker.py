"""Generator im Hintergrund ausführen (Thread- oder Prozess-Pool).

Die Suche selbst prüft keine Abbruchsignale. Wird eine neue Anfrage gestellt,
bevor die alte fertig ist, gilt "letzte Anfrage gewinnt": die alte wird
abgebrochen, falls sie noch nicht läuft, sonst wird ihr Ergebnis verworfen.
"""

import logging
import threading
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from config.schema import PlannerConfig
from models.plan_request import PlanRequest
from solver.generator import ScheduleResult, generate_schedules

logger = logging.getLogger(__name__)


class StaleRequestError(RuntimeError):
    """Das Ergebnis gehört zu einer inzwischen überholten Anfrage."""

    def __init__(self, request_id: int, latest_id: int) -> None:
        super().__init__(
            f"Anfrage #{request_id} wurde durch #{latest_id} ersetzt"
        )
        self.request_id = request_id
        self.latest_id = latest_id


@dataclass
class PlanTicket:
    """Handle auf eine laufende Generator-Anfrage."""

    request_id: int
    future: Future
    owner: "BackgroundGenerator"

    @property
    def is_current(self) -> bool:
        return self.owner.latest_request_id == self.request_id

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> ScheduleResult:
        """Wartet auf das Ergebnis. Wirft StaleRequestError bei überholten Anfragen."""
        if not self.is_current:
            raise StaleRequestError(self.request_id, self.owner.latest_request_id)
        result = self.future.result(timeout=timeout)
        if not self.is_current:
            logger.debug(f"Ergebnis von Anfrage #{self.request_id} verworfen (veraltet)")
            raise StaleRequestError(self.request_id, self.owner.latest_request_id)
        return result


class BackgroundGenerator:
    """Führt generate_schedules in einem Executor aus.

    Verwendung:
        with BackgroundGenerator() as bg:
            ticket = bg.submit(request)
            result = ticket.result()
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        use_processes: bool = False,
        executor: Optional[Executor] = None,
    ) -> None:
        self.config = config
        self._owns_executor = executor is None
        if executor is not None:
            self._executor = executor
        elif use_processes:
            self._executor = ProcessPoolExecutor(max_workers=1)
        else:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="plan-generator"
            )
        self._lock = threading.Lock()
        self._latest_id = 0
        self._pending: Optional[Future] = None

    @property
    def latest_request_id(self) -> int:
        with self._lock:
            return self._latest_id

    def submit(self, request: PlanRequest) -> PlanTicket:
        """Startet eine neue Anfrage und macht alle vorherigen ungültig."""
        with self._lock:
            self._latest_id += 1
            request_id = self._latest_id
            if self._pending is not None and not self._pending.done():
                if self._pending.cancel():
                    logger.debug(f"Anfrage #{request_id - 1} vor Start abgebrochen")
            future = self._executor.submit(generate_schedules, request, self.config)
            self._pending = future
        return PlanTicket(request_id=request_id, future=future, owner=self)

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> "BackgroundGenerator":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
