import json
import time
from scambait.settings import settings

# Values under these keys carry conversation text and are redacted when enabled
SENSITIVE_KEYS = {"text", "message", "reply", "payload", "content"}


def _redact_value(v):
    if isinstance(v, str) and len(v) > 0:
        return f"[REDACTED:{len(v)}chars]"
    if isinstance(v, dict):
        return {k: _redact_value(val) for k, val in v.items()}
    if isinstance(v, (list, tuple, set)):
        return [_redact_value(x) for x in v]
    return v


def _redact_fields(fields: dict) -> dict:
    clean = {}
    for k, v in fields.items():
        if k in SENSITIVE_KEYS:
            clean[k] = _redact_value(v)
        elif isinstance(v, dict):
            clean[k] = {sk: (_redact_value(sv) if sk in SENSITIVE_KEYS else sv) for sk, sv in v.items()}
        else:
            clean[k] = v
    return clean


def log(event: str, **fields):
    """Emit one JSON line per event on stdout."""
    payload = {"ts": int(time.time()), "event": event}
    if settings.ENABLE_PII_REDACTION:
        payload.update(_redact_fields(fields))
    else:
        payload.update(fields)
    print(json.dumps(payload, ensure_ascii=False, default=str))
