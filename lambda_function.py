"""AWS Lambda entrypoint.

Design goals:
- Keep this file small and stable.
- Delegate all real logic to src/skillbridge so that:
  - The same handler can be used from the CLI and from Lambda.
  - The event adaptation below is the only AWS-specific code.

Accepted event shapes:
1) API Gateway REST (payload v1):
   {"httpMethod": "POST", "headers": {...}, "body": "...", "isBase64Encoded": false}

2) HTTP API / Function URL (payload v2):
   {"requestContext": {"http": {"method": "POST"}}, "headers": {...}, "body": "...", "isBase64Encoded": true}

Return:
- statusCode: 200, or 400 when the request cannot be authenticated: the signature check fails,
  or the base64 body is undecodable so there are no exact bytes to verify (405 for other methods).
  Any other failure, including a broken speech config, is a 200 spoken error envelope.
- headers: Content-Type (and Allow on 405)
- body: Alexa response envelope as a JSON string, or plaintext
"""
import base64
import json
from typing import Any, Dict

from src.skillbridge.config import Speech
from src.skillbridge.handler import WebhookHandler
from src.skillbridge.types import OutboundReply
from src.skillbridge.logging_util import get_logger

logger = get_logger(__name__)

_handler = None

def _get_handler() -> WebhookHandler:
    # Built on first invoke so a missing secret never breaks the cold start.
    global _handler
    if _handler is None:
        _handler = WebhookHandler()
    return _handler

def _event_method(event: Dict[str, Any]) -> str:
    http = (event.get("requestContext") or {}).get("http") or {}
    return str(http.get("method") or event.get("httpMethod") or "GET")

def _event_body(event: Dict[str, Any]) -> bytes:
    body = event.get("body")
    if body is None:
        return b""
    if event.get("isBase64Encoded"):
        return base64.b64decode(body)
    if isinstance(body, bytes):
        return body
    return str(body).encode("utf-8")

def lambda_handler(event: Dict[str, Any], context: Any):
    request_id = getattr(context, "aws_request_id", None)
    logger.info("lambda_handler invoked request_id=%s", request_id)

    try:
        raw = _event_body(event)
    except ValueError as e:
        logger.error("Undecodable base64 body: %s", e)
        return {"statusCode": 400, "headers": {"Content-Type": "text/plain; charset=utf-8"}, "body": "Bad request body"}

    try:
        resp = _get_handler().handle(_event_method(event), event.get("headers") or {}, raw)
        return {"statusCode": resp.status_code, "headers": resp.headers, "body": resp.body}

    except Exception as e:
        logger.exception("lambda_handler fatal error: %s", e)
        # Built-in phrases: the configured ones may be what failed to load.
        return {
            "statusCode": 200,
            "headers": {"Content-Type": "application/json; charset=utf-8"},
            "body": json.dumps(OutboundReply(text=Speech().internal_error).to_dict(), ensure_ascii=False),
        }
