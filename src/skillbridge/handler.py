"""WebhookHandler: single-request orchestrator.

Order matters:
1) GET is a health check, answered without touching the body.
2) POST bodies are read into exact bytes first. Signature verification runs over
   those bytes, so nothing may decode or re-encode them beforehand.
3) Verification failure is the only non-200 outcome of a POST.
4) After verification every error becomes a spoken reply with status 200.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from .adapters.base import BaseQueryClient
from .adapters.gemini import GeminiQueryClient
from .config import Settings, load_settings
from .envelope import decode_body, parse_voice_request
from .errors import MalformedBody, VerificationFailure
from .intents import dispatch_intent
from .types import (
    ALEXA_RESPONSE_VERSION,
    INTENT_REQUEST,
    LAUNCH_REQUEST,
    SESSION_ENDED_REQUEST,
    InboundRequest,
    OutboundReply,
    WebhookResponse,
)
from .verifier import CERT_CHAIN_URL_HEADER, SIGNATURE_HEADER, AlexaSignatureVerifier, SignatureVerifier
from .logging_util import get_logger, log_step

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
_READ_CHUNK = 64 * 1024

def read_raw_body(stream: Any) -> bytes:
    """Drain a body source into bytes without any transformation.

    Accepts bytes, a binary file-like object, or an iterable of byte chunks.
    Text chunks are refused: a text-mode reader may already have rewritten line endings.
    """
    if stream is None:
        return b""
    if isinstance(stream, (bytes, bytearray, memoryview)):
        return bytes(stream)
    if isinstance(stream, str):
        raise TypeError("request body must be bytes, got str")

    read = getattr(stream, "read", None)
    if callable(read):
        chunks = iter(lambda: read(_READ_CHUNK), b"")
    else:
        chunks = iter(stream)

    buf = bytearray()
    for chunk in chunks:
        if isinstance(chunk, str):
            raise TypeError("request body stream yielded str; open it in binary mode")
        buf.extend(chunk)
    return bytes(buf)

def _lower_headers(headers: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    return {str(k).lower(): str(v) for k, v in (headers or {}).items() if v is not None}

def _json_response(payload: Dict[str, Any]) -> WebhookResponse:
    body = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return WebhookResponse(status_code=200, body=body, content_type=JSON_CONTENT_TYPE)

class WebhookHandler:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        verifier: Optional[SignatureVerifier] = None,
        client: Optional[BaseQueryClient] = None,
    ):
        self.settings = settings or load_settings()
        self.speech = self.settings.speech
        self.verifier = verifier or AlexaSignatureVerifier()
        self.client = client or GeminiQueryClient(self.settings)

    def handle(self, method: str, headers: Optional[Mapping[str, Any]], raw_body_stream: Any) -> WebhookResponse:
        method = (method or "").upper()
        log_step(logger, "1", "%s request received", method)

        if method == "GET":
            return WebhookResponse(status_code=200, body=self.speech.health_check)

        if method != "POST":
            return WebhookResponse(
                status_code=405,
                body=f"Method {method or '?'} not allowed",
                extra_headers={"Allow": "GET, POST"},
            )

        req = InboundRequest(method=method, headers=_lower_headers(headers), body=read_raw_body(raw_body_stream))
        log_step(logger, "2", "read raw body (%d bytes)", len(req.body))

        try:
            self.verifier.verify(req.header(SIGNATURE_HEADER), req.header(CERT_CHAIN_URL_HEADER), req.body)
        except VerificationFailure as e:
            logger.warning("Request verification failed: %s", e)
            return WebhookResponse(status_code=400, body=self.speech.verification_failed)
        except Exception as e:
            logger.exception("Verifier raised unexpectedly: %s", e)
            return WebhookResponse(status_code=400, body=self.speech.verification_failed)
        log_step(logger, "3", "signature verified")

        try:
            return self._dispatch(req.body)
        except MalformedBody as e:
            logger.warning("Malformed body: %s", e)
            return _json_response(OutboundReply(text=self.speech.unknown_request).to_dict())
        except Exception as e:
            logger.exception("WebhookHandler.handle failed: %s", e)
            return _json_response(OutboundReply(text=self.speech.internal_error).to_dict())

    def _dispatch(self, raw: bytes) -> WebhookResponse:
        parsed = parse_voice_request(decode_body(raw))
        log_step(logger, "4", "parsed request type=%s", parsed.request_type or "?", request_id=parsed.request_id)

        if parsed.request_type == SESSION_ENDED_REQUEST:
            return _json_response({"version": ALEXA_RESPONSE_VERSION, "response": {}})

        if parsed.request_type == LAUNCH_REQUEST:
            reply = OutboundReply(text=self.speech.launch_text, reprompt=self.speech.launch_reprompt)
        elif parsed.request_type == INTENT_REQUEST:
            log_step(logger, "5", "dispatch intent %s", parsed.intent_name or "?", request_id=parsed.request_id)
            reply = dispatch_intent(parsed.intent_name, parsed.query, self.client, self.speech)
        else:
            logger.info("Unknown request type: %r", parsed.request_type)
            reply = OutboundReply(text=self.speech.unknown_request)

        return _json_response(reply.to_dict())
