import pytest

from src.skillbridge.config import Settings, Speech
from src.skillbridge.handler import WebhookHandler
from tests.fakes import FakeClient, FakeVerifier

@pytest.fixture
def speech():
    return Speech()

@pytest.fixture
def verifier():
    return FakeVerifier()

@pytest.fixture
def client():
    return FakeClient()

@pytest.fixture
def handler(verifier, client):
    return WebhookHandler(settings=Settings(), verifier=verifier, client=client)
