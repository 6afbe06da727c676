import secrets

from fastapi import Header, HTTPException

from scambait.settings import settings

API_KEY_HEADER = "x-api-key"


def require_api_key(x_api_key: str = Header(default="", alias=API_KEY_HEADER)):
    """Shared deployment key; checked only when API_KEY is configured."""
    expected = settings.API_KEY or ""
    if not expected:
        return
    if not secrets.compare_digest(x_api_key.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail=f"missing or invalid {API_KEY_HEADER} header")
