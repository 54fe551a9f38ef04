"""Intent dispatch.

Three branches, all terminal:
- stop/cancel        -> goodbye, session ends
- FreeformQuery      -> ask the query client, answer + follow-up, session stays open
- anything else      -> "not sure" reply, session stays open

Upstream failures are turned into an apology here; they never reach the handler.
"""
from __future__ import annotations

from .adapters.base import BaseQueryClient
from .config import Speech
from .errors import UpstreamFailure
from .types import OutboundReply
from .logging_util import get_logger

logger = get_logger(__name__)

STOP_INTENTS = frozenset({"AMAZON.StopIntent", "AMAZON.CancelIntent"})
FREEFORM_INTENT = "FreeformQuery"

def dispatch_intent(intent_name: str, slot_value: str, client: BaseQueryClient, speech: Speech) -> OutboundReply:
    if intent_name in STOP_INTENTS:
        return OutboundReply(text=speech.goodbye)

    if intent_name == FREEFORM_INTENT:
        return _answer_query(slot_value, client, speech)

    logger.info("Unhandled intent: %r", intent_name)
    return OutboundReply(text=speech.unknown_intent_text, reprompt=speech.unknown_intent_reprompt)

def _answer_query(query: str, client: BaseQueryClient, speech: Speech) -> OutboundReply:
    query = (query or "").strip()
    if not query:
        return OutboundReply(text=speech.missing_query_text, reprompt=speech.missing_query_reprompt)

    try:
        answer = client.query(query)
    except UpstreamFailure as e:
        logger.error("Query client failed: %s", e)
        return OutboundReply(text=speech.upstream_error_text, reprompt=speech.upstream_error_reprompt)

    return OutboundReply(text=f"{answer} {speech.follow_up}", reprompt=speech.answer_reprompt)
