# Lexical scam indicators. A single hit marks the session as scam-related.

SCAM_KEYWORDS = [
    "urgent",
    "blocked",
    "verify",
    "otp",
    "account compromised",
    "cashback",
    "won",
    "claim",
    "link",
    "expires",
    "congratulations",
    "reward",
    "offer",
    "limited time",
    "important security alert",
    "suspicious activity",
    "update your information",
    "login now",
    "verify your identity",
    "click here",
    "download now",
    "payment failed",
    "transaction alert",
    "prize",
    "lucky draw",
    "your package is delayed",
]


def matched_keywords(text: str):
    t = (text or "").lower()
    hits = []
    for k in SCAM_KEYWORDS:
        if k in t:
            hits.append(k)
    return hits


def detect_scam(text: str, current_flag: bool) -> bool:
    """
    One-way latch: once a session is flagged it stays flagged.
    Otherwise true iff any indicator phrase occurs (case-insensitive substring).
    """
    if current_flag:
        return True
    t = (text or "").lower()
    if not t.strip():
        return False
    return any(k in t for k in SCAM_KEYWORDS)
