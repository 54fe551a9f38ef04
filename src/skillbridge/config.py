"""Runtime configuration.

Two sources:
- Environment variables, read once into a Settings object at startup.
  GEMINI_API_KEY may be absent here; the outbound call fails instead of the cold start.
- A speech YAML file (src/configs/speech.yaml by default) holding every spoken phrase.
  Keys missing from the file keep their built-in defaults.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError
from .logging_util import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-lite"
DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_TIMEOUT = 30

# <root>/src/skillbridge/config.py -> parents[1] == <root>/src
DEFAULT_SPEECH_FILE = Path(__file__).resolve().parents[1] / "configs" / "speech.yaml"

@dataclass(frozen=True)
class Speech:
    launch_text: str = "Welcome to Gemini Assistant. What would you like to ask?"
    launch_reprompt: str = "You can ask me anything. What would you like to know?"
    goodbye: str = "Goodbye!"
    follow_up: str = "Is there anything else you would like to know?"
    answer_reprompt: str = "Is there anything else you would like to ask?"
    empty_answer: str = "I'm sorry, I don't have an answer for that."
    upstream_error_text: str = "Sorry, I had trouble getting an answer from Gemini. Please try again."
    upstream_error_reprompt: str = "What else would you like to ask?"
    missing_query_text: str = "I didn't catch your question. What would you like to ask?"
    missing_query_reprompt: str = "What would you like to ask?"
    unknown_intent_text: str = "I'm not sure how to handle that. Try asking me a question."
    unknown_intent_reprompt: str = "What would you like to ask?"
    unknown_request: str = "Sorry, I don't understand that request."
    internal_error: str = "Sorry, something went wrong while handling your request."
    health_check: str = "GET request successful. Endpoint is online."
    verification_failed: str = "Verification failed"

# YAML path -> Speech field
_SPEECH_KEYS = {
    ("launch", "text"): "launch_text",
    ("launch", "reprompt"): "launch_reprompt",
    ("goodbye",): "goodbye",
    ("answer", "follow_up"): "follow_up",
    ("answer", "reprompt"): "answer_reprompt",
    ("answer", "empty"): "empty_answer",
    ("upstream_error", "text"): "upstream_error_text",
    ("upstream_error", "reprompt"): "upstream_error_reprompt",
    ("missing_query", "text"): "missing_query_text",
    ("missing_query", "reprompt"): "missing_query_reprompt",
    ("unknown_intent", "text"): "unknown_intent_text",
    ("unknown_intent", "reprompt"): "unknown_intent_reprompt",
    ("unknown_request",): "unknown_request",
    ("internal_error",): "internal_error",
    ("health_check",): "health_check",
    ("verification_failed",): "verification_failed",
}

@dataclass(frozen=True)
class Settings:
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_MODEL
    gemini_endpoint: str = DEFAULT_ENDPOINT
    http_timeout: float = DEFAULT_TIMEOUT
    speech: Speech = field(default_factory=Speech)

def _lookup(data: Mapping[str, Any], path) -> Optional[str]:
    cur: Any = data
    for key in path:
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(key)
    if isinstance(cur, str) and cur.strip():
        return cur.strip()
    return None

def load_speech(path: Optional[Path] = None) -> Speech:
    """Load spoken phrases from YAML.

    The bundled file is optional: if it is missing or broken we log and use the defaults.
    An explicitly given file must exist and parse, otherwise ConfigError.
    """
    explicit = path is not None
    p = Path(path) if explicit else DEFAULT_SPEECH_FILE

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        if explicit:
            raise ConfigError(f"Failed to load speech file: {p} ({e})")
        logger.error("Failed to load YAML: %s (%s)", p, e)
        return Speech()

    if not isinstance(data, Mapping):
        if explicit:
            raise ConfigError(f"Speech file must contain a mapping: {p}")
        logger.error("Speech file is not a mapping: %s", p)
        return Speech()

    overrides: Dict[str, str] = {}
    for yaml_path, attr in _SPEECH_KEYS.items():
        v = _lookup(data, yaml_path)
        if v is not None:
            overrides[attr] = v

    return Speech(**overrides)

def _to_float(v: Any, default: float) -> float:
    if v is None or not str(v).strip():
        return default
    try:
        f = float(v)
    except (TypeError, ValueError):
        logger.warning("Invalid number %r, using default %s", v, default)
        return default
    return f if f > 0 else default

def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env

    speech_file = (env.get("SKILLBRIDGE_SPEECH_FILE") or "").strip()
    speech = load_speech(Path(speech_file) if speech_file else None)

    return Settings(
        gemini_api_key=env.get("GEMINI_API_KEY") or "",
        gemini_model=(env.get("GEMINI_MODEL") or "").strip() or DEFAULT_MODEL,
        gemini_endpoint=(env.get("GEMINI_ENDPOINT") or "").strip().rstrip("/") or DEFAULT_ENDPOINT,
        http_timeout=_to_float(env.get("SKILLBRIDGE_HTTP_TIMEOUT"), DEFAULT_TIMEOUT),
        speech=speech,
    )
