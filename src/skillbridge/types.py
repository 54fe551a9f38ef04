"""Shared types and lightweight data containers.

Everything here lives for exactly one webhook invocation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

ALEXA_RESPONSE_VERSION = "1.0"

LAUNCH_REQUEST = "LaunchRequest"
INTENT_REQUEST = "IntentRequest"
SESSION_ENDED_REQUEST = "SessionEndedRequest"

@dataclass
class InboundRequest:
    method: str
    headers: Dict[str, str]
    body: bytes = b""

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

@dataclass
class ParsedVoiceRequest:
    request_type: str = ""
    intent_name: str = ""
    query: str = ""
    request_id: Optional[str] = None

@dataclass
class OutboundReply:
    """Spoken reply in the platform's response envelope.

    A reprompt keeps the session open; no reprompt ends it.
    """
    text: str
    reprompt: Optional[str] = None

    @property
    def should_end_session(self) -> bool:
        return not self.reprompt

    def to_dict(self) -> Dict[str, Any]:
        response: Dict[str, Any] = {
            "outputSpeech": {"type": "PlainText", "text": self.text},
            "shouldEndSession": self.should_end_session,
        }
        if not self.should_end_session:
            response["reprompt"] = {
                "outputSpeech": {"type": "PlainText", "text": self.reprompt},
            }
        return {"version": ALEXA_RESPONSE_VERSION, "response": response}

@dataclass
class WebhookResponse:
    status_code: int
    body: str = ""
    content_type: str = "text/plain; charset=utf-8"
    extra_headers: Dict[str, str] = field(default_factory=dict)

    @property
    def headers(self) -> Dict[str, str]:
        return {"Content-Type": self.content_type, **self.extra_headers}

    def as_tuple(self) -> Tuple[int, str]:
        return self.status_code, self.body
