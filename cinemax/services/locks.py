import logging
import threading
from contextlib import contextmanager
from uuid import UUID

from cinemax.core.errors import StorageContentionError

logger = logging.getLogger(__name__)


class HallLockRegistry:
    """
    One mutex per hall, created on first use.

    Requests for different halls never share a lock, so they run in parallel.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[UUID, threading.Lock] = {}

    def get_lock(self, hall_id: UUID) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(hall_id)
            if lock is None:
                lock = self._locks[hall_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, hall_id: UUID, timeout: float):
        lock = self.get_lock(hall_id)
        if not lock.acquire(timeout=timeout):
            logger.warning("Timed out after %.2fs waiting for hall %s lock.", timeout, hall_id)
            raise StorageContentionError(f"Hall {hall_id} is busy, please retry")
        try:
            yield
        finally:
            lock.release()


# Process-wide registry shared by every scheduler instance
hall_locks = HallLockRegistry()
