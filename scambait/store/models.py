from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union

from scambait.intel.extractor import empty_intelligence

# Wire labels for message senders
SENDER_SCAMMER = "scammer"    # counterparty
SENDER_HONEYPOT = "honeypot"  # our persona
SENDER_USER = "user"          # external API caller, never shown to the model

SENDERS = (SENDER_SCAMMER, SENDER_HONEYPOT, SENDER_USER)


@dataclass(frozen=True)
class Message:
    sender: str
    text: str
    # ISO-8601 string or epoch (ms or s); normalized only when durations are computed
    timestamp: Optional[Union[int, float, str]] = None

    def to_dict(self) -> dict:
        return {"sender": self.sender, "text": self.text, "timestamp": self.timestamp}


@dataclass
class SessionState:
    sessionId: str = ""

    # Append-only, arrival order
    conversation: List[Message] = field(default_factory=list)

    # One-way latch
    scamDetected: bool = False

    # category -> unique normalized values; union-merged per turn
    extractedIntelligence: Dict[str, Set[str]] = field(default_factory=empty_intelligence)

    # Indicator phrases seen so far (first-seen order), used for agentNotes
    matchedKeywords: List[str] = field(default_factory=list)

    agentNotes: str = ""

    # Wall-clock engagement window, epoch ms
    firstSeenAtMs: int = 0
    lastSeenAtMs: int = 0

    def append(self, message: Message) -> None:
        self.conversation.append(message)
