"""Local CLI: run one request envelope through the webhook handler.

Usage examples:
- JSON file input (prefix with @):
  python cli.py @request.json

- Inline JSON, no signature check, pretty output:
  python cli.py "{\"request\":{\"type\":\"LaunchRequest\"}}" --skip-verify --pretty

- Signed request captured from the platform:
  python cli.py @request.json --signature "..." --cert-url "https://s3.amazonaws.com/echo.api/echo-api-cert.pem"

Notes:
- File input is read as bytes so the body seen by the verifier is exactly what is on disk.
- GEMINI_API_KEY is read from the environment like in Lambda.
"""
import argparse
import json
import sys
from pathlib import Path

from src.skillbridge.handler import WebhookHandler
from src.skillbridge.verifier import NoopVerifier
from src.skillbridge.logging_util import get_logger

logger = get_logger(__name__)

def _load_body(spec: str) -> bytes:
    if spec.startswith("@"):
        return Path(spec[1:]).read_bytes()
    return spec.encode("utf-8")

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("input", help="JSON string or @path/to/request.json")
    ap.add_argument("--method", default="POST", help="HTTP method (default: POST)")
    ap.add_argument("--signature", default="", help="Value of the signature header")
    ap.add_argument("--cert-url", default="", help="Value of the signaturecertchainurl header")
    ap.add_argument("--skip-verify", action="store_true", help="Do not verify the request signature")
    ap.add_argument("--pretty", action="store_true", help="Pretty print a JSON response body")
    args = ap.parse_args()

    try:
        body = _load_body(args.input)
    except OSError as e:
        logger.error("Failed to read input: %s", e)
        sys.exit(2)

    headers = {"signature": args.signature, "signaturecertchainurl": args.cert_url}
    handler = WebhookHandler(verifier=NoopVerifier()) if args.skip_verify else WebhookHandler()
    resp = handler.handle(args.method, headers, body)

    out = resp.body
    if args.pretty and resp.content_type.startswith("application/json"):
        out = json.dumps(json.loads(resp.body), ensure_ascii=False, indent=2)

    print(f"HTTP {resp.status_code}", file=sys.stderr)
    print(out)
    if resp.status_code >= 400:
        sys.exit(1)

if __name__ == "__main__":
    main()
