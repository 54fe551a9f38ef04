from src.skillbridge.errors import DecodeError
from src.skillbridge.intents import dispatch_intent
from tests.fakes import FakeClient

def test_cancel_is_goodbye(speech):
    reply = dispatch_intent("AMAZON.CancelIntent", "", FakeClient(), speech)
    assert reply.text == speech.goodbye
    assert reply.should_end_session
    assert "reprompt" not in reply.to_dict()["response"]

def test_freeform_appends_follow_up(speech):
    reply = dispatch_intent("FreeformQuery", "six times seven", FakeClient("42"), speech)
    assert reply.text == f"42 {speech.follow_up}"
    assert reply.reprompt == speech.answer_reprompt

def test_freeform_failure_has_distinct_reprompt(speech):
    class Failing:
        def query(self, prompt):
            raise DecodeError("no candidates")

    reply = dispatch_intent("FreeformQuery", "hello", Failing(), speech)
    assert reply.text == speech.upstream_error_text
    assert reply.reprompt == speech.upstream_error_reprompt
    assert reply.reprompt != speech.answer_reprompt

def test_freeform_without_query_skips_client(speech):
    client = FakeClient()
    reply = dispatch_intent("FreeformQuery", "  ", client, speech)
    assert client.prompts == []
    assert not reply.should_end_session

def test_unknown_intent_keeps_session_open(speech):
    reply = dispatch_intent("AMAZON.HelpIntent", "", FakeClient(), speech)
    assert reply.text == speech.unknown_intent_text
    body = reply.to_dict()["response"]
    assert body["shouldEndSession"] is False
    assert body["reprompt"]["outputSpeech"]["type"] == "PlainText"
