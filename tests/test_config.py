import pytest

from src.skillbridge.config import DEFAULT_MODEL, Speech, load_settings, load_speech
from src.skillbridge.errors import ConfigError

def test_bundled_speech_file_loads():
    speech = load_speech()
    assert speech.goodbye == "Goodbye!"
    assert speech.launch_reprompt

def test_partial_speech_file_keeps_defaults(tmp_path):
    p = tmp_path / "speech.yaml"
    p.write_text("goodbye: See you later\nlaunch:\n  text: Hi there\n", encoding="utf-8")
    speech = load_speech(p)
    assert speech.goodbye == "See you later"
    assert speech.launch_text == "Hi there"
    assert speech.launch_reprompt == Speech().launch_reprompt

def test_explicit_missing_speech_file_is_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_speech(tmp_path / "nope.yaml")

def test_explicit_non_mapping_speech_file_is_config_error(tmp_path):
    p = tmp_path / "speech.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_speech(p)

def test_settings_from_env():
    s = load_settings({
        "GEMINI_API_KEY": "k",
        "GEMINI_MODEL": "gemini-pro",
        "GEMINI_ENDPOINT": "http://localhost:9000/models/",
        "SKILLBRIDGE_HTTP_TIMEOUT": "2.5",
    })
    assert s.gemini_api_key == "k"
    assert s.gemini_model == "gemini-pro"
    assert s.gemini_endpoint == "http://localhost:9000/models"
    assert s.http_timeout == 2.5

def test_settings_defaults_without_key():
    s = load_settings({"SKILLBRIDGE_HTTP_TIMEOUT": "soon"})
    assert s.gemini_api_key == ""
    assert s.gemini_model == DEFAULT_MODEL
    assert s.http_timeout == 30
