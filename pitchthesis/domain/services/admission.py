# pitchthesis/domain/services/admission.py
import threading
import time
from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict

from pitchthesis.core.errors import RateLimitError
from pitchthesis.core.logging import get_logger

log = get_logger("admission")

RATE_LIMIT_MAX = 5
RATE_LIMIT_WINDOW_SECONDS = 60 * 60
RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again after an hour"


class Admission(str, Enum):
    ALLOWED = "allowed"
    DENIED = "denied"


class AdmissionGate:
    """
    Sliding-window limiter keyed by client identity.

    At most `limit` requests are admitted per identity in any rolling
    `window_seconds` period. Denied requests are not recorded.
    State is process-local; one gate is built per app and shared by the
    protected routes, so /upload and /analyze draw on the same budget.
    """

    def __init__(
        self,
        limit: int = RATE_LIMIT_MAX,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def admit(self, identity: str) -> Admission:
        with self._lock:
            now = self._clock()
            hits = self._hits.setdefault(identity, deque())
            cutoff = now - self.window_seconds
            while hits and hits[0] <= cutoff:
                hits.popleft()

            if len(hits) >= self.limit:
                log.warning("admission_denied", extra={"identity": identity, "in_window": len(hits)})
                return Admission.DENIED

            hits.append(now)
            return Admission.ALLOWED

    def require(self, identity: str) -> None:
        if self.admit(identity) is Admission.DENIED:
            raise RateLimitError(RATE_LIMIT_MESSAGE)

    def remaining(self, identity: str) -> int:
        with self._lock:
            hits = self._hits.get(identity)
            if not hits:
                return self.limit
            cutoff = self._clock() - self.window_seconds
            live = sum(1 for t in hits if t > cutoff)
            return max(0, self.limit - live)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
