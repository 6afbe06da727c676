"""
Scores a finished session report against a scenario's planted values.

Four independent dimensions, each capped, summed for the total:
  scamDetection (0/20), intelligenceExtraction (0-40),
  engagementQuality (0-20), responseStructure (0-20).
"""
from dataclasses import dataclass, asdict
from typing import Union

from scambait.core.finalize import FinalOutput
from scambait.core.scenarios import Scenario

SCAM_DETECTION_POINTS = 20
INTEL_POINTS_PER_HIT = 10
INTEL_CAP = 40
ENGAGEMENT_STEP = 5
STRUCTURE_CAP = 20

# Planted-value key -> extractedIntelligence category. Unmapped keys are
# looked up under their own name.
FAKE_DATA_KEY_MAP = {
    "bankAccount": "bankAccounts",
    "upiId": "upiIds",
    "phoneNumber": "phoneNumbers",
    "phishingLink": "phishingLinks",
    "emailAddress": "emailAddresses",
}

REQUIRED_FIELDS = (
    "sessionId",
    "scamDetected",
    "extractedIntelligence",
    "engagementMetrics",
    "totalMessagesExchanged",
)
OPTIONAL_FIELDS = {"agentNotes": 2.5}


@dataclass(frozen=True)
class ScoreBreakdown:
    scamDetection: float = 0
    intelligenceExtraction: float = 0
    engagementQuality: float = 0
    responseStructure: float = 0
    total: float = 0

    def to_dict(self) -> dict:
        return asdict(self)


def _as_dict(final_output: Union[FinalOutput, dict]) -> dict:
    if isinstance(final_output, FinalOutput):
        return final_output.to_dict()
    return dict(final_output or {})


def _fake_data(scenario) -> dict:
    if isinstance(scenario, Scenario):
        raw = scenario.fakeData
    else:
        raw = (scenario or {}).get("fakeData") or {}
    # planted values compare as text whatever type the fixture used
    return {k: str(v) for k, v in raw.items() if v is not None}


def score_scam_detection(output: dict) -> float:
    return SCAM_DETECTION_POINTS if output.get("scamDetected", False) else 0


def score_intelligence(output: dict, fake_data: dict) -> float:
    extracted = output.get("extractedIntelligence") or {}
    points = 0
    for fake_key, fake_value in fake_data.items():
        if not fake_value:
            continue
        category = FAKE_DATA_KEY_MAP.get(fake_key, fake_key)
        values = extracted.get(category) or []
        if any(fake_value in str(v) for v in values):
            points += INTEL_POINTS_PER_HIT
    return min(points, INTEL_CAP)


def score_engagement(output: dict) -> float:
    metrics = output.get("engagementMetrics") or {}
    duration = metrics.get("engagementDurationSeconds") or 0
    messages = metrics.get("totalMessagesExchanged") or 0

    points = 0
    if duration > 0:
        points += ENGAGEMENT_STEP
    if duration > 60:
        points += ENGAGEMENT_STEP
    if messages > 0:
        points += ENGAGEMENT_STEP
    if messages >= 5:
        points += ENGAGEMENT_STEP
    return points


def score_structure(output: dict) -> float:
    # Required fields alone reach 25 before the cap; the optional bonus only
    # matters when a required field is missing.
    points = 0.0
    for name in REQUIRED_FIELDS:
        if name in output:
            points += 5
    for name, bonus in OPTIONAL_FIELDS.items():
        if output.get(name):
            points += bonus
    return min(points, STRUCTURE_CAP)


def evaluate_final_output(final_output, scenario, conversation=None) -> ScoreBreakdown:
    """
    Grade a report against `scenario.fakeData`. `conversation` is accepted
    for interface parity with the session layer and is not used by any
    dimension.
    """
    output = _as_dict(final_output)

    scam = score_scam_detection(output)
    intel = score_intelligence(output, _fake_data(scenario))
    engagement = score_engagement(output)
    structure = score_structure(output)

    return ScoreBreakdown(
        scamDetection=scam,
        intelligenceExtraction=intel,
        engagementQuality=engagement,
        responseStructure=structure,
        total=scam + intel + engagement + structure,
    )
