import pytest

from scambait.core.finalize import create_final_output
from scambait.core.scenarios import Scenario
from scambait.core.scoring import ScoreBreakdown, evaluate_final_output


def _output(**overrides):
    out = {
        "sessionId": "s1",
        "scamDetected": True,
        "totalMessagesExchanged": 6,
        "extractedIntelligence": {
            "phoneNumbers": [],
            "bankAccounts": ["1234567890123456"],
            "upiIds": [],
            "phishingLinks": [],
            "emailAddresses": [],
            "otherIds": [],
        },
        "engagementMetrics": {"totalMessagesExchanged": 6, "engagementDurationSeconds": 90},
    }
    out.update(overrides)
    return out


def _scenario(**fake):
    return Scenario(scenarioId="t", fakeData=fake)


def test_reference_example_scores_70():
    score = evaluate_final_output(_output(), _scenario(bankAccount="7890123456"), [])
    assert score == ScoreBreakdown(
        scamDetection=20,
        intelligenceExtraction=10,
        engagementQuality=20,
        responseStructure=20,
        total=70,
    )


def test_scam_detection_is_binary():
    assert evaluate_final_output(_output(scamDetected=False), _scenario()).scamDetection == 0
    assert evaluate_final_output(_output(), _scenario()).scamDetection == 20


def test_intelligence_substring_match_and_mapping():
    out = _output(extractedIntelligence={
        "phoneNumbers": ["919876543210"],
        "upiIds": ["scammer.fraud@fakebank"],
        "phishingLinks": [],
        "emailAddresses": ["offers@fake-deals.com"],
    })
    sc = _scenario(
        phoneNumber="9876543210",
        upiId="scammer.fraud@fakebank",
        phishingLink="http://fake.example/claim",
        emailAddress="offers@fake-deals.com",
    )
    assert evaluate_final_output(out, sc).intelligenceExtraction == 30


def test_intelligence_capped_at_40():
    out = _output(extractedIntelligence={
        "phoneNumbers": ["9876543210"],
        "bankAccounts": ["1234567890123456"],
        "upiIds": ["a@ybl"],
        "phishingLinks": ["http://x.example/a"],
        "emailAddresses": ["a@x.com"],
    })
    sc = _scenario(
        phoneNumber="9876543210",
        bankAccount="1234567890123456",
        upiId="a@ybl",
        phishingLink="http://x.example/a",
        emailAddress="a@x.com",
    )
    assert evaluate_final_output(out, sc).intelligenceExtraction == 40


def test_empty_and_unknown_planted_values_are_skipped():
    sc = _scenario(bankAccount="", upiId=None, mysteryField="abc")
    assert evaluate_final_output(_output(), sc).intelligenceExtraction == 0


def test_unmapped_key_is_used_as_category_name():
    out = _output(extractedIntelligence={"otherIds": ["AB12CD"]})
    assert evaluate_final_output(out, _scenario(otherIds="AB12")).intelligenceExtraction == 10


@pytest.mark.parametrize(
    "duration,messages,expected",
    [
        (0, 0, 0),
        (1, 0, 5),
        (61, 0, 10),
        (60, 4, 10),
        (0, 5, 10),
        (90, 6, 20),
    ],
)
def test_engagement_checks_are_additive(duration, messages, expected):
    out = _output(engagementMetrics={"totalMessagesExchanged": messages, "engagementDurationSeconds": duration})
    assert evaluate_final_output(out, _scenario()).engagementQuality == expected


def test_missing_engagement_metrics_scores_zero():
    out = _output()
    del out["engagementMetrics"]
    assert evaluate_final_output(out, _scenario()).engagementQuality == 0


def test_structure_required_fields_alone_hit_the_cap():
    assert evaluate_final_output(_output(), _scenario()).responseStructure == 20
    assert evaluate_final_output(_output(agentNotes="notes"), _scenario()).responseStructure == 20


def test_structure_optional_bonus_counts_when_required_missing():
    out = _output(agentNotes="Signals: urgent")
    del out["engagementMetrics"]
    del out["totalMessagesExchanged"]
    assert evaluate_final_output(out, _scenario()).responseStructure == 17.5


def test_structure_empty_notes_earn_nothing():
    out = _output(agentNotes="")
    del out["sessionId"]
    del out["scamDetected"]
    assert evaluate_final_output(out, _scenario()).responseStructure == 15


def test_accepts_final_output_object_and_dict_scenario():
    final = create_final_output(
        "s9",
        ["m"] * 6,
        True,
        {"upiIds": {"rahul.kumar@upi"}},
        90,
        "Signals: verify",
    )
    score = evaluate_final_output(final, {"fakeData": {"upiId": "rahul.kumar@upi"}}, [])
    assert score.total == 20 + 10 + 20 + 20


def test_empty_output_scores_zero():
    score = evaluate_final_output({}, _scenario(bankAccount="123"))
    assert score.total == 0


@pytest.mark.parametrize("detected", [True, False])
@pytest.mark.parametrize("duration", [0, 30, 3600])
@pytest.mark.parametrize("hits", [0, 2, 6])
def test_dimension_caps(detected, duration, hits):
    values = [f"v{i}" for i in range(hits)]
    out = _output(
        scamDetected=detected,
        agentNotes="n",
        extractedIntelligence={f"otherIds{i}": [v] for i, v in enumerate(values)},
        engagementMetrics={"totalMessagesExchanged": hits * 3, "engagementDurationSeconds": duration},
    )
    sc = _scenario(**{f"otherIds{i}": f"v{i}" for i in range(hits)})
    s = evaluate_final_output(out, sc)
    assert s.scamDetection in (0, 20)
    assert 0 <= s.intelligenceExtraction <= 40
    assert 0 <= s.engagementQuality <= 20
    assert 0 <= s.responseStructure <= 20
    assert 0 <= s.total <= 100
    assert s.total == s.scamDetection + s.intelligenceExtraction + s.engagementQuality + s.responseStructure


def test_numeric_planted_value_is_compared_as_text():
    score = evaluate_final_output(_output(), {"fakeData": {"bankAccount": 1234567890}})
    assert score.intelligenceExtraction == 10
    assert evaluate_final_output(_output(), {"fakeData": {"bankAccount": None}}).intelligenceExtraction == 0
