import logging
import threading
from dataclasses import dataclass

logger = logging.getLogger("user-registry")


@dataclass(frozen=True)
class DrainResult:
    drained: bool
    remaining: int


class RequestTracker:
    """Admits requests other than the health check and counts the ones still running.

    Admission and the draining check share one condition, so once
    :meth:`begin_drain` returns no request can slip in behind it and be
    missed by :meth:`wait_idle`.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._in_flight = 0
        self._draining = False

    @property
    def draining(self) -> bool:
        with self._cond:
            return self._draining

    @property
    def in_flight(self) -> int:
        with self._cond:
            return self._in_flight

    def admit(self) -> bool:
        with self._cond:
            if self._draining:
                return False
            self._in_flight += 1
            return True

    def release(self) -> None:
        with self._cond:
            if self._in_flight == 0:
                logger.warning("release() called with no request in flight")
                return
            self._in_flight -= 1
            if self._in_flight == 0:
                self._cond.notify_all()

    def begin_drain(self) -> None:
        with self._cond:
            if self._draining:
                return
            self._draining = True
            logger.info("Draining with %d request(s) in flight", self._in_flight)

    def wait_idle(self, timeout: float) -> DrainResult:
        with self._cond:
            drained = self._cond.wait_for(lambda: self._in_flight == 0, timeout=timeout)
            return DrainResult(drained=drained, remaining=self._in_flight)
