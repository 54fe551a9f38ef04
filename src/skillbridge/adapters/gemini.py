"""Gemini REST client (generateContent)."""
from __future__ import annotations

import hashlib
from typing import Any, Dict, Optional

import requests

from ..config import Settings
from ..errors import DecodeError, MissingApiKey, NetworkError
from ..logging_util import get_logger
from .base import BaseQueryClient

logger = get_logger(__name__)

def _sanitize_api_key(raw: str) -> str:
    k = (raw or "").strip()
    k = k.strip(' "\'`')
    k = k.strip("“”‘’")
    return k

def _build_payload(prompt: str) -> Dict[str, Any]:
    return {"contents": [{"parts": [{"text": prompt}]}]}

def _extract_text(data: Any) -> str:
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise DecodeError("response has no candidates[0].content.parts[0].text")

class GeminiQueryClient(BaseQueryClient):
    def __init__(self, settings: Settings, empty_answer: Optional[str] = None, session: Any = None):
        self.api_key = _sanitize_api_key(settings.gemini_api_key)
        self.model = settings.gemini_model
        self.endpoint = settings.gemini_endpoint
        self.timeout = settings.http_timeout
        self.empty_answer = empty_answer or settings.speech.empty_answer
        self._http = session or requests

    def _redact(self, msg: str) -> str:
        # requests puts the full URL, key included, into connection errors
        return msg.replace(self.api_key, "***") if self.api_key else msg

    @property
    def url(self) -> str:
        return f"{self.endpoint}/{self.model}:generateContent"

    def query(self, prompt: str) -> str:
        if not self.api_key:
            raise MissingApiKey("Missing environment variable: GEMINI_API_KEY")

        sha8 = hashlib.sha256(self.api_key.encode("utf-8")).hexdigest()[:8]
        logger.debug("[GEMINI_KEY] len=%d sha8=%s", len(self.api_key), sha8)

        try:
            r = self._http.post(
                self.url,
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                json=_build_payload(prompt),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(f"request failed: {self._redact(str(e))}")

        if r.status_code != 200:
            raise NetworkError(f"http {r.status_code}: {r.text[:800]}")

        try:
            data = r.json()
        except ValueError as e:
            raise DecodeError(f"response is not JSON: {e}")

        text = _extract_text(data)
        if not isinstance(text, str) or not text.strip():
            logger.warning("Gemini returned empty text, using filler")
            return self.empty_answer
        return text.strip()
