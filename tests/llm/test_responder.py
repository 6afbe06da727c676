from unittest.mock import MagicMock, patch

import pytest

from scambait.llm import responder
from scambait.llm.responder import FALLBACK_REPLY, filter_history, generate_reply, persona_instruction
from scambait.store.models import Message


@pytest.fixture
def conversation():
    return [
        Message(sender="scammer", text="Your account is blocked", timestamp="2025-02-11T10:30:00Z"),
        Message(sender="user", text="internal: start session", timestamp="2025-02-11T10:30:01Z"),
        Message(sender="honeypot", text="Oh no, which bank is this?", timestamp="2025-02-11T10:30:05Z"),
    ]


def test_filter_history_drops_api_caller_turns(conversation):
    kept = filter_history(conversation)
    assert [m.sender for m in kept] == ["scammer", "honeypot"]


def test_generator_receives_filtered_history_latest_text_and_persona(conversation):
    gen = MagicMock(return_value="  Which branch are you calling from?  ")
    reply = generate_reply(conversation, "Share the OTP now", generator=gen)

    assert reply == "Which branch are you calling from?"
    gen.assert_called_once()
    history, latest, persona = gen.call_args.args
    assert all(m.sender != "user" for m in history)
    assert latest == "Share the OTP now"
    assert persona == persona_instruction()
    assert persona


@patch("scambait.llm.responder.log")
def test_generator_exception_falls_back(mock_log, conversation):
    gen = MagicMock(side_effect=RuntimeError("timeout"))
    reply = generate_reply(conversation, "hello", generator=gen, session_id="s1")

    assert reply == FALLBACK_REPLY
    gen.assert_called_once()  # no retries
    assert mock_log.call_args.args[0] == "reply_generation_failed"
    assert mock_log.call_args.kwargs["sessionId"] == "s1"


@pytest.mark.parametrize("bad", ["", "   ", None, 42])
@patch("scambait.llm.responder.log")
def test_blank_or_non_text_reply_falls_back(mock_log, bad, conversation):
    reply = generate_reply(conversation, "hello", generator=MagicMock(return_value=bad))
    assert reply == FALLBACK_REPLY
    assert mock_log.called


@patch("scambait.llm.responder.log")
def test_default_generator_is_gemini_client(mock_log):
    with patch.object(responder.gemini_client, "generate_reply", return_value="Hello?") as gem:
        assert generate_reply([], "hi") == "Hello?"
    gem.assert_called_once()


def test_fallback_keeps_persona():
    text = FALLBACK_REPLY.lower()
    assert "error" not in text
    assert "provide that information again" in text
