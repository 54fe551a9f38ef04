"""Request signature verification.

The handler treats verification as an opaque capability:

    verify(signature, cert_chain_url, raw_body)  -> None, or raises VerificationFailure

The real check (cert URL rules, chain validation, RSA signature over the exact body
bytes) is delegated to ask-sdk-webservice-support. We only hand it the untouched bytes.

The SDK's TimestampVerifier is not applied: it needs a deserialized ask_sdk_model envelope,
which this contract never builds. A captured signed request is therefore accepted on replay.
"""
from __future__ import annotations

from typing import Dict, Optional

from ask_sdk_webservice_support.verifier import RequestVerifier, VerificationException

from .errors import VerificationFailure
from .logging_util import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "signature"
CERT_CHAIN_URL_HEADER = "signaturecertchainurl"

# Header names as the SDK verifier looks them up.
_SDK_CERT_CHAIN_URL_KEY = "SignatureCertChainUrl"
_SDK_SIGNATURE_KEY = "Signature"

class SignatureVerifier:
    def verify(self, signature: Optional[str], cert_chain_url: Optional[str], raw_body: bytes) -> None:
        raise NotImplementedError

class AlexaSignatureVerifier(SignatureVerifier):
    def __init__(self, request_verifier: Optional[RequestVerifier] = None):
        self._verifier = request_verifier or RequestVerifier(
            signature_cert_chain_url_key=_SDK_CERT_CHAIN_URL_KEY,
            signature_key=_SDK_SIGNATURE_KEY,
        )

    def verify(self, signature: Optional[str], cert_chain_url: Optional[str], raw_body: bytes) -> None:
        if not signature or not cert_chain_url:
            raise VerificationFailure("missing signature or certificate chain URL header")

        try:
            serialized = raw_body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise VerificationFailure(f"body is not UTF-8: {e}")

        headers: Dict[str, str] = {
            _SDK_CERT_CHAIN_URL_KEY: cert_chain_url,
            _SDK_SIGNATURE_KEY: signature,
        }
        try:
            # The deserialized envelope is only needed by the SDK's timestamp verifier.
            self._verifier.verify(headers, serialized, None)
        except VerificationException as e:
            raise VerificationFailure(str(e))
        except Exception as e:
            logger.exception("signature verifier crashed: %s", e)
            raise VerificationFailure(f"verifier error: {e}")

class NoopVerifier(SignatureVerifier):
    """Accepts everything. Local CLI runs only."""

    def verify(self, signature: Optional[str], cert_chain_url: Optional[str], raw_body: bytes) -> None:
        logger.warning("signature verification skipped")
