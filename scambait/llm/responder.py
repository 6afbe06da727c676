import logging
from functools import lru_cache
from typing import Callable, List, Optional

from scambait.llm import gemini_client
from scambait.observability.logging import log
from scambait.settings import settings
from scambait.store.models import Message, SENDER_USER

logger = logging.getLogger("honeypot_responder")

# Keeps the persona intact when the model is unavailable
FALLBACK_REPLY = (
    "I am experiencing some technical difficulties. "
    "Could you please provide that information again?"
)

# (filtered history, latest counterparty text, persona instruction) -> reply text
ReplyGenerator = Callable[[List[Message], str, str], str]


@lru_cache(maxsize=4)
def _load_prompt(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip()


def persona_instruction() -> str:
    return _load_prompt(settings.PERSONA_PROMPT_PATH)


def filter_history(conversation: List[Message]) -> List[Message]:
    """Keep only counterparty and honeypot turns; API-caller turns never reach the model."""
    return [m for m in (conversation or []) if m.sender != SENDER_USER]


def generate_reply(
    conversation: List[Message],
    latest_message_text: str,
    *,
    generator: Optional[ReplyGenerator] = None,
    session_id: str = "",
) -> str:
    """
    Produce the next honeypot turn.

    `conversation` is the history before the latest counterparty message.
    At most one generator call; any failure or blank reply yields
    FALLBACK_REPLY and is logged, never raised.
    """
    history = filter_history(conversation)
    gen = generator or gemini_client.generate_reply

    try:
        reply = gen(history, latest_message_text or "", persona_instruction())
    except Exception as e:
        logger.warning("reply generation failed: %s", e)
        log(
            "reply_generation_failed",
            sessionId=session_id,
            reason=type(e).__name__,
            detail=str(e)[:200],
            history_len=len(history),
        )
        return FALLBACK_REPLY

    reply = (reply or "").strip() if isinstance(reply, str) else ""
    if not reply:
        log("reply_generation_failed", sessionId=session_id, reason="empty_reply", history_len=len(history))
        return FALLBACK_REPLY
    return reply
