import time
from collections import Counter
from typing import Any, Dict, Optional, Tuple

from scambait.core.finalize import FinalOutput, create_final_output
from scambait.core.notes import build_agent_notes
from scambait.core.scenarios import Scenario
from scambait.core.scoring import evaluate_final_output
from scambait.intel.extractor import extract_intelligence, merge_intelligence, populated_categories
from scambait.intel.keywords import detect_scam, matched_keywords
from scambait.llm.responder import ReplyGenerator, generate_reply
from scambait.observability.logging import log
from scambait.store.models import Message, SessionState, SENDER_HONEYPOT, SENDER_SCAMMER, SENDERS
from scambait.store.session_repo import drop_session, get_session, load_session, save_session
from scambait.utils.lock import release_session_lock, session_lock
from scambait.utils.time import compute_engagement_seconds, now_ms


def _normalize_sender(sender: Optional[str]) -> str:
    """Missing sender means the counterparty: inbound turns come from their side."""
    s = (sender or "").strip().lower()
    if not s:
        return SENDER_SCAMMER
    if s in ("attacker", "fraudster"):
        return SENDER_SCAMMER
    if s in ("agent", "assistant", "bot"):
        return SENDER_HONEYPOT
    return s if s in SENDERS else SENDER_SCAMMER


def _to_message(obj: Any) -> Message:
    if isinstance(obj, Message):
        return obj
    if not isinstance(obj, dict):
        md = getattr(obj, "model_dump", None)
        obj = md() if callable(md) else {k: getattr(obj, k, None) for k in ("sender", "text", "timestamp")}
    return Message(
        sender=_normalize_sender(obj.get("sender")),
        text=str(obj.get("text") or ""),
        timestamp=obj.get("timestamp"),
    )


def _msg_key(m: Message) -> Tuple[str, str, str]:
    # Our replies are stored with server time; the client echoes them back with its own
    if m.sender == SENDER_HONEYPOT:
        return (m.sender, m.text.strip(), "")
    return (m.sender, m.text.strip(), str(m.timestamp or ""))


def _analyze(session: SessionState, text: str) -> None:
    """Classifier + extractor for one counterparty message; both only ever add."""
    session.scamDetected = detect_scam(text, session.scamDetected)
    merge_intelligence(session.extractedIntelligence, extract_intelligence(text))
    for k in matched_keywords(text):
        if k not in session.matchedKeywords:
            session.matchedKeywords.append(k)


def _merge_conversation_history(session: SessionState, history) -> int:
    """
    Fold request.conversationHistory into the session with dedupe, so a
    session that first appears mid-conversation still sees earlier turns.
    """
    existing = Counter(_msg_key(m) for m in session.conversation)
    added = 0
    for raw in history or []:
        m = _to_message(raw)
        k = _msg_key(m)
        if not m.text:
            continue
        if existing[k] > 0:
            # each stored turn absorbs one echoed copy
            existing[k] -= 1
            continue
        session.append(m)
        added += 1
        if m.sender == SENDER_SCAMMER:
            _analyze(session, m.text)
    return added


def handle_event(req, *, generator: Optional[ReplyGenerator] = None) -> Dict[str, Any]:
    """Process one inbound turn and return {"reply", "scamDetected"}."""
    start_time = time.time()

    with session_lock(req.sessionId):
        session = load_session(req.sessionId)

        merged = _merge_conversation_history(session, getattr(req, "conversationHistory", None))

        history_before = list(session.conversation)
        incoming = _to_message(req.message)
        session.append(incoming)
        # The inbound message is always analyzed, whatever its sender label
        _analyze(session, incoming.text)

        llm_start = time.time()
        reply = generate_reply(history_before, incoming.text, generator=generator, session_id=session.sessionId)
        llm_latency_ms = int((time.time() - llm_start) * 1000)

        session.append(Message(sender=SENDER_HONEYPOT, text=reply, timestamp=now_ms()))
        save_session(session)

        log(
            "turn_processed",
            sessionId=session.sessionId,
            history_merged=merged,
            total_messages=len(session.conversation),
            scamDetected=session.scamDetected,
            ioc_categories_found=len(populated_categories(session.extractedIntelligence)),
            total_latency_ms=int((time.time() - start_time) * 1000),
            llm_latency_ms=llm_latency_ms,
        )

        return {"reply": reply, "scamDetected": session.scamDetected}


def build_final_output(session: SessionState, agent_notes: Optional[str] = None) -> FinalOutput:
    # Our own replies carry server time; only inbound timestamps share a clock
    inbound = [m for m in session.conversation if m.sender != SENDER_HONEYPOT]
    duration = compute_engagement_seconds(
        inbound,
        first_seen_ms=session.firstSeenAtMs,
        last_seen_ms=session.lastSeenAtMs,
    )
    if agent_notes is None:
        agent_notes = session.agentNotes or build_agent_notes(
            session.extractedIntelligence, session.matchedKeywords
        )
    return create_final_output(
        session.sessionId,
        session.conversation,
        session.scamDetected,
        session.extractedIntelligence,
        duration,
        agent_notes,
    )


def finish_session(
    session_id: str,
    agent_notes: Optional[str] = None,
    scenario: Optional[Scenario] = None,
) -> Dict[str, Any]:
    """
    End a session: build its report once, discard its state and, when a
    scenario is given, grade the report. Raises SessionNotFound.
    """
    try:
        with session_lock(session_id):
            session = get_session(session_id)
            final = build_final_output(session, agent_notes)
            drop_session(session_id)
    finally:
        release_session_lock(session_id)

    out: Dict[str, Any] = {"finalOutput": final.to_dict()}
    if scenario is not None:
        out["score"] = evaluate_final_output(final, scenario, session.conversation).to_dict()

    log(
        "session_finished",
        sessionId=session_id,
        scamDetected=final.scamDetected,
        total_messages=final.totalMessagesExchanged,
        duration_sec=final.engagementMetrics.engagementDurationSeconds,
        scenarioId=getattr(scenario, "scenarioId", None),
        total_score=out.get("score", {}).get("total"),
    )
    return out


def replay_conversation(session_id: str, messages) -> SessionState:
    """Rebuild session state offline from a recorded transcript (no replies generated)."""
    session = SessionState(sessionId=session_id)
    _merge_conversation_history(session, messages)
    return session
