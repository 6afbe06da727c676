from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Iterable, Tuple

from scambait.intel.extractor import CATEGORIES


@dataclass(frozen=True)
class EngagementMetrics:
    totalMessagesExchanged: int = 0
    engagementDurationSeconds: int = 0


@dataclass(frozen=True)
class FinalOutput:
    sessionId: str
    scamDetected: bool
    totalMessagesExchanged: int
    # category -> values; tuples keep the report immutable
    extractedIntelligence: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    engagementMetrics: EngagementMetrics = field(default_factory=EngagementMetrics)
    agentNotes: str = ""

    def to_dict(self) -> dict:
        return {
            "sessionId": self.sessionId,
            "scamDetected": bool(self.scamDetected),
            "totalMessagesExchanged": int(self.totalMessagesExchanged),
            "extractedIntelligence": {k: list(v) for k, v in self.extractedIntelligence.items()},
            "engagementMetrics": {
                "totalMessagesExchanged": int(self.engagementMetrics.totalMessagesExchanged),
                "engagementDurationSeconds": int(self.engagementMetrics.engagementDurationSeconds),
            },
            "agentNotes": self.agentNotes,
        }


def create_final_output(
    session_id: str,
    conversation: List,
    scam_detected: bool,
    extracted_intelligence: Mapping[str, Iterable[str]],
    duration_seconds: int,
    agent_notes: str,
) -> FinalOutput:
    """
    Fold the finished session into its report. Message count is the
    conversation length right now; sets become sorted sequences.
    """
    total = len(conversation or [])
    intel = {k: tuple(sorted(extracted_intelligence.get(k) or ())) for k in CATEGORIES}
    return FinalOutput(
        sessionId=session_id,
        scamDetected=bool(scam_detected),
        totalMessagesExchanged=total,
        extractedIntelligence=intel,
        engagementMetrics=EngagementMetrics(
            totalMessagesExchanged=total,
            engagementDurationSeconds=max(0, int(duration_seconds or 0)),
        ),
        agentNotes=agent_notes,
    )
