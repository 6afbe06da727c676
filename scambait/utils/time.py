import time
from datetime import datetime, timezone


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_timestamp_ms(ts) -> int:
    """
    Normalize timestamps to epoch milliseconds (int).
    Accepts:
    - int/float: treated as epoch ms (or seconds if suspiciously small)
    - ISO-8601 string: parsed via datetime.fromisoformat (supports trailing 'Z')
    Returns 0 when the value is missing or unparseable.
    """
    if ts is None or isinstance(ts, bool):
        return 0
    if isinstance(ts, (int, float)):
        v = int(ts)
        # Looks like seconds (< 10^12): convert to ms
        return v * 1000 if 0 < v < 10**12 else max(v, 0)
    if isinstance(ts, str):
        s = ts.strip()
        if not s:
            return 0
        if s.isdigit():
            return parse_timestamp_ms(int(s))
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return 0
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return int(dt.timestamp() * 1000)
    return 0


def compute_engagement_seconds(conversation, first_seen_ms: int = 0, last_seen_ms: int = 0) -> int:
    """
    Engagement window in whole seconds, clamped to >= 0.

    The larger of the wall-clock window (first_seen_ms -> last_seen_ms)
    recorded by the session layer and the span between the earliest and
    latest parseable message timestamps.
    """
    wall_ms = 0
    fs = int(first_seen_ms or 0)
    ls = int(last_seen_ms or 0)
    if fs > 0 and ls > fs:
        wall_ms = ls - fs

    stamps = [parse_timestamp_ms(m.timestamp) for m in (conversation or [])]
    stamps = [s for s in stamps if s > 0]
    span_ms = (max(stamps) - min(stamps)) if len(stamps) >= 2 else 0

    return int(max(wall_ms, span_ms, 0) // 1000)
