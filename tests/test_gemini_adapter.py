import pytest
import requests

from src.skillbridge.adapters.gemini import GeminiQueryClient
from src.skillbridge.config import Settings
from src.skillbridge.errors import DecodeError, MissingApiKey, NetworkError

class FakeResponse:
    def __init__(self, status_code=200, data=None, text=""):
        self.status_code = status_code
        self._data = data
        self.text = text

    def json(self):
        if isinstance(self._data, Exception):
            raise self._data
        return self._data

class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc:
            raise self.exc
        return self.response

def _answer(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}

def _client(session, key='"secret-key" '):
    return GeminiQueryClient(Settings(gemini_api_key=key, gemini_model="gemini-test", http_timeout=5), session=session)

def test_query_posts_prompt_and_returns_first_candidate():
    session = FakeSession(FakeResponse(data=_answer("Forty-two.")))
    assert _client(session).query("meaning of life") == "Forty-two."

    url, kwargs = session.calls[0]
    assert url == "https://generativelanguage.googleapis.com/v1beta/models/gemini-test:generateContent"
    assert kwargs["params"] == {"key": "secret-key"}
    assert kwargs["json"] == {"contents": [{"parts": [{"text": "meaning of life"}]}]}
    assert kwargs["timeout"] == 5

def test_missing_key_fails_at_call_time():
    session = FakeSession(FakeResponse(data=_answer("x")))
    with pytest.raises(MissingApiKey):
        _client(session, key="").query("hi")
    assert session.calls == []

def test_empty_text_uses_filler():
    client = _client(FakeSession(FakeResponse(data=_answer("   "))))
    assert client.query("hi") == client.empty_answer

def test_http_error_is_network_error():
    with pytest.raises(NetworkError):
        _client(FakeSession(FakeResponse(status_code=429, text="quota"))).query("hi")

def test_transport_error_is_network_error_and_redacted():
    exc = requests.ConnectionError("Max retries exceeded with url: /x?key=secret-key")
    with pytest.raises(NetworkError) as ei:
        _client(FakeSession(exc=exc)).query("hi")
    assert "secret-key" not in str(ei.value)

@pytest.mark.parametrize("data", [{}, {"candidates": []}, {"candidates": [{"content": {}}]}, ValueError("not json")])
def test_unexpected_shape_is_decode_error(data):
    with pytest.raises(DecodeError):
        _client(FakeSession(FakeResponse(data=data))).query("hi")
