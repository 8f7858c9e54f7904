"""Pydantic models for the inbound voice-assistant event envelope.

Only the fields the router reads are modelled; everything else the platform
sends is kept (``extra="allow"``) but ignored.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

LAUNCH_REQUEST = "LaunchRequest"
INTENT_REQUEST = "IntentRequest"
SESSION_ENDED_REQUEST = "SessionEndedRequest"

RequestType = Literal["LaunchRequest", "IntentRequest", "SessionEndedRequest"]


class _Envelope(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Application(_Envelope):
    application_id: str = Field(default="", alias="applicationId")


class Session(_Envelope):
    new: bool = False
    session_id: str = Field(default="", alias="sessionId")
    application: Application = Field(default_factory=Application)
    attributes: dict[str, Any] = Field(default_factory=dict)


class Intent(_Envelope):
    name: str = ""
    slots: dict[str, Any] = Field(default_factory=dict)


class SkillRequest(_Envelope):
    type: str
    request_id: str = Field(default="", alias="requestId")
    intent: Optional[Intent] = None
    reason: Optional[str] = None


class SkillEvent(_Envelope):
    session: Session = Field(default_factory=Session)
    request: SkillRequest


__all__ = [
    "Application",
    "INTENT_REQUEST",
    "Intent",
    "LAUNCH_REQUEST",
    "RequestType",
    "SESSION_ENDED_REQUEST",
    "Session",
    "SkillEvent",
    "SkillRequest",
]
