import dataclasses

import pytest

from scambait.core.finalize import FinalOutput, create_final_output
from scambait.core.notes import build_agent_notes
from scambait.intel.extractor import CATEGORIES, empty_intelligence
from scambait.store.models import Message


def _conversation(n):
    return [Message("scammer" if i % 2 == 0 else "honeypot", f"m{i}") for i in range(n)]


def test_final_output_shape():
    intel = empty_intelligence()
    intel["upiIds"].update({"b@ybl", "a@ybl"})
    final = create_final_output("s1", _conversation(5), True, intel, 75, "Signals: urgent")

    d = final.to_dict()
    assert d["sessionId"] == "s1"
    assert d["scamDetected"] is True
    assert d["totalMessagesExchanged"] == 5
    assert d["engagementMetrics"] == {"totalMessagesExchanged": 5, "engagementDurationSeconds": 75}
    assert set(d["extractedIntelligence"].keys()) == set(CATEGORIES)
    assert sorted(d["extractedIntelligence"]["upiIds"]) == ["a@ybl", "b@ybl"]
    assert d["extractedIntelligence"]["phoneNumbers"] == []
    assert d["agentNotes"] == "Signals: urgent"


def test_message_count_is_conversation_length_at_call_time():
    convo = _conversation(3)
    final = create_final_output("s1", convo, False, empty_intelligence(), 0, "")
    convo.append(Message("scammer", "late"))
    assert final.totalMessagesExchanged == 3


def test_missing_categories_become_empty_lists():
    final = create_final_output("s1", [], False, {"phoneNumbers": {"123"}}, 0, "")
    d = final.to_dict()
    assert d["extractedIntelligence"]["phoneNumbers"] == ["123"]
    assert d["extractedIntelligence"]["otherIds"] == []


def test_report_does_not_track_later_merges():
    intel = empty_intelligence()
    final = create_final_output("s1", [], True, intel, 0, "")
    intel["bankAccounts"].add("123456789")
    assert final.to_dict()["extractedIntelligence"]["bankAccounts"] == []


def test_final_output_is_frozen():
    final = create_final_output("s1", [], True, {}, 10, "")
    assert isinstance(final, FinalOutput)
    with pytest.raises(dataclasses.FrozenInstanceError):
        final.scamDetected = False


def test_negative_duration_clamped():
    final = create_final_output("s1", [], True, {}, -5, "")
    assert final.engagementMetrics.engagementDurationSeconds == 0


def test_agent_notes_summary():
    intel = empty_intelligence()
    intel["phoneNumbers"].add("9876543210")
    intel["upiIds"].update({"a@ybl", "b@ybl"})
    notes = build_agent_notes(intel, ["urgent", "verify"])
    assert notes == "Signals: urgent; verify | Collected: phoneNumbers=1, upiIds=2"


def test_agent_notes_empty_when_nothing_seen():
    assert build_agent_notes(empty_intelligence(), []) == ""
