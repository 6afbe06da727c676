import threading
from typing import Dict, Optional

from scambait.store.models import SessionState
from scambait.utils.time import now_ms

# Process-local: sessions live for the lifetime of the worker only.
_sessions: Dict[str, SessionState] = {}
_guard = threading.Lock()


class SessionNotFound(KeyError):
    """No live session under the given id."""


def load_session(session_id: str) -> SessionState:
    """Return the live session, creating it on first turn."""
    with _guard:
        s = _sessions.get(session_id)
        if s is None:
            s = SessionState(sessionId=session_id)
            s.firstSeenAtMs = now_ms()
            _sessions[session_id] = s
        return s


def get_session(session_id: str) -> SessionState:
    with _guard:
        s = _sessions.get(session_id)
    if s is None:
        raise SessionNotFound(session_id)
    return s


def save_session(session: SessionState) -> None:
    session.lastSeenAtMs = now_ms()
    with _guard:
        _sessions[session.sessionId] = session


def drop_session(session_id: str) -> Optional[SessionState]:
    with _guard:
        return _sessions.pop(session_id, None)


def clear_sessions() -> None:
    with _guard:
        _sessions.clear()
