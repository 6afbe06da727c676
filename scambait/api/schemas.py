from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

Sender = Literal["scammer", "honeypot", "user"]

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class Message(BaseModel):
    sender: Sender = "scammer"
    text: str = Field(min_length=1)
    # ISO-8601 string or epoch (ms or s)
    timestamp: Optional[Union[int, float, str]] = None


class Metadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    channel: Optional[str] = None  # SMS / WhatsApp / Email / Chat
    language: Optional[str] = None
    locale: Optional[str] = None


class HoneypotRequest(BaseModel):
    sessionId: str = Field(min_length=1)
    message: Message
    conversationHistory: List[Message] = Field(default_factory=list)
    metadata: Metadata = Field(default_factory=Metadata)


class HoneypotResponse(BaseModel):
    status: Literal["success"] = "success"
    reply: str
    # Same text under the alternate names some clients read
    message: str
    text: str

    @classmethod
    def of(cls, reply: str) -> "HoneypotResponse":
        return cls(reply=reply, message=reply, text=reply)


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error: str
    message: str = GENERIC_ERROR_MESSAGE


class FinishRequest(BaseModel):
    agentNotes: Optional[str] = None
    scenario: Optional[Dict[str, Any]] = None
