from typing import List, Optional

import httpx

from scambait.settings import settings
from scambait.store.models import Message, SENDER_SCAMMER

# Gemini Developer API (REST)
# POST {GEMINI_BASE_URL}/models/{model}:generateContent

# Reuse a single client for keep-alive
_client = httpx.Client(timeout=settings.GEMINI_TIMEOUT_SEC)


class ReplyGenerationError(RuntimeError):
    """The model could not produce a usable reply."""


def _conversation_parts(history: List[Message], latest_text: str) -> List[dict]:
    parts = [{"text": f"{m.sender}: {m.text}"} for m in history]
    # The latest turn always goes in from the counterparty's side
    parts.append({"text": f"{SENDER_SCAMMER}: {latest_text}"})
    return parts


def _extract_text(data: dict) -> Optional[str]:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return None
    text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
    return text.strip() or None


def generate_reply(history: List[Message], latest_text: str, system_instruction: str) -> str:
    """Generate the next honeypot turn via Gemini.

    Exactly one HTTP request per call; any failure (missing key, transport
    error, non-2xx, malformed or empty body) raises ReplyGenerationError.
    """
    if not settings.GEMINI_API_KEY:
        raise ReplyGenerationError("GEMINI_API_KEY is not set")

    url = f"{settings.GEMINI_BASE_URL}/models/{settings.GEMINI_MODEL}:generateContent"

    body = {
        "systemInstruction": {"parts": [{"text": system_instruction}]},
        "contents": [{"role": "user", "parts": _conversation_parts(history, latest_text)}],
        "generationConfig": {
            "temperature": float(settings.GEMINI_TEMPERATURE),
            "topP": float(settings.GEMINI_TOP_P),
            "topK": int(settings.GEMINI_TOP_K),
            "maxOutputTokens": int(settings.GEMINI_MAX_OUTPUT_TOKENS),
        },
    }

    headers = {
        "x-goog-api-key": settings.GEMINI_API_KEY,
        "Content-Type": "application/json",
    }

    try:
        resp = _client.post(url, headers=headers, json=body)
    except httpx.HTTPError as e:
        raise ReplyGenerationError(f"Gemini request failed: {e}") from e

    if resp.status_code >= 400:
        raise ReplyGenerationError(f"Gemini returned {resp.status_code}: {resp.text[:200]}")

    try:
        data = resp.json()
    except ValueError as e:
        raise ReplyGenerationError("Gemini returned a non-JSON body") from e

    text = _extract_text(data)
    if not text:
        raise ReplyGenerationError("Gemini returned an empty reply")
    return text
