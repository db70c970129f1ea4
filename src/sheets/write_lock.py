"""
Process-wide advisory lock for sheet writers.

Every OrderStore in the process shares the lock from get_default_lock()
unless it is handed a private one. Readers never take the lock.
"""
from contextlib import contextmanager
from threading import Lock

from sheets.errors import StoreBusyError


class WriteLock:
    """Mutex with a bounded wait."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self._lock = Lock()

    @contextmanager
    def hold(self):
        """
        Hold the lock for the body of a with-block.

        Raises:
            StoreBusyError: if the lock is not free within ``timeout`` seconds.
        """
        if not self._lock.acquire(timeout=self.timeout):
            raise StoreBusyError(self.timeout)
        try:
            yield
        finally:
            self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()


_default_lock = None


def get_default_lock() -> WriteLock:
    """Return the shared lock, creating it with the configured timeout."""
    global _default_lock
    if _default_lock is None:
        import config
        _default_lock = WriteLock(timeout=config.WRITE_LOCK_TIMEOUT_SECONDS)
    return _default_lock
