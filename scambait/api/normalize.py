def _normalize_message(msg, payload: dict):
    if isinstance(msg, str):
        # Plain string message
        return {"sender": payload.get("sender") or "scammer", "text": msg, "timestamp": payload.get("timestamp")}
    if not isinstance(msg, dict):
        # Text at top level
        text = payload.get("text") or payload.get("messageText") or payload.get("content")
        if text is None:
            return None
        return {"sender": payload.get("sender") or "scammer", "text": text, "timestamp": payload.get("timestamp")}
    return {
        "sender": msg.get("sender") or "scammer",
        "text": msg.get("text") if msg.get("text") is not None else msg.get("message"),
        "timestamp": msg.get("timestamp"),
    }


def _normalize_sender(sender):
    s = (sender or "").strip().lower() if isinstance(sender, str) else sender
    if s in ("attacker", "fraudster"):
        return "scammer"
    if s in ("agent", "assistant", "bot"):
        return "honeypot"
    return s


def normalize_honeypot_payload(payload: dict) -> dict:
    """
    Accepts the common input shape variants and converts them into the
    canonical structure expected by HoneypotRequest:

    {
      "sessionId": "...",
      "message": {"sender": "scammer|honeypot|user", "text": "...", "timestamp": ...},
      "conversationHistory": [...],
      "metadata": {...}
    }

    Required fields are never invented: a payload without a session id or
    message text stays incomplete and fails validation.
    """
    if payload is None:
        payload = {}

    out = {}

    session_id = payload.get("sessionId") or payload.get("session_id")
    if session_id is not None:
        out["sessionId"] = session_id

    msg = _normalize_message(payload.get("message"), payload)
    if msg is not None:
        msg["sender"] = _normalize_sender(msg.get("sender"))
        out["message"] = msg

    history = payload.get("conversationHistory")
    if history is None:
        history = payload.get("history")
    if isinstance(history, list):
        out["conversationHistory"] = [
            dict(h, sender=_normalize_sender(h.get("sender") or "scammer")) if isinstance(h, dict) else h
            for h in history
        ]
    elif history is not None:
        out["conversationHistory"] = history

    metadata = payload.get("metadata")
    if metadata is not None:
        out["metadata"] = metadata

    return out
