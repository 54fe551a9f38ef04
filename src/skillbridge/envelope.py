"""Voice request envelope parsing.

Goals:
- Decode the raw body only after it has been verified.
- Never crash on a missing or oddly typed field: the caller still owes the
  platform a spoken reply, so absent values become empty strings.

Fields we read:
  request.type
  request.requestId
  request.intent.name
  request.intent.slots.query.value
"""
from __future__ import annotations

import json
from typing import Any, Dict

from .errors import MalformedBody
from .types import ParsedVoiceRequest
from .logging_util import get_logger

logger = get_logger(__name__)

QUERY_SLOT = "query"

def _dict(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}

def _str(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""

def decode_body(raw: bytes) -> Dict[str, Any]:
    try:
        obj = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedBody(f"body is not valid JSON: {e}")
    if not isinstance(obj, dict):
        raise MalformedBody(f"body is not a JSON object: {type(obj).__name__}")
    return obj

def parse_voice_request(envelope: Dict[str, Any]) -> ParsedVoiceRequest:
    request = _dict(envelope.get("request"))
    intent = _dict(request.get("intent"))
    slots = _dict(intent.get("slots"))
    query_slot = _dict(slots.get(QUERY_SLOT))

    parsed = ParsedVoiceRequest(
        request_type=_str(request.get("type")),
        intent_name=_str(intent.get("name")),
        query=_str(query_slot.get("value")),
        request_id=_str(request.get("requestId")) or None,
    )
    logger.debug("Parsed voice request: %s", parsed)
    return parsed
