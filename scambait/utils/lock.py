import threading
from contextlib import contextmanager

_guard = threading.Lock()
# session_id -> [lock, number of holders and waiters]
_locks = {}


@contextmanager
def session_lock(session_id: str, timeout_sec: float = 30.0):
    """
    Single writer per session: turns of the same session are processed one
    at a time, different sessions never wait on each other.
    """
    with _guard:
        entry = _locks.setdefault(session_id, [threading.Lock(), 0])
        entry[1] += 1
    lk = entry[0]
    try:
        if not lk.acquire(timeout=timeout_sec):
            raise RuntimeError(f"Could not acquire lock for session {session_id}")
        try:
            yield
        finally:
            lk.release()
    finally:
        with _guard:
            entry[1] -= 1


def release_session_lock(session_id: str) -> None:
    """Forget the lock of a finished session once nobody holds or waits on it."""
    with _guard:
        entry = _locks.get(session_id)
        if entry is not None and entry[1] == 0:
            del _locks[session_id]
