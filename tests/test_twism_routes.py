from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.twism_routes import build_state_machine_router
from twiml.composer import say
from twism.cookie import COOKIE_NAME, decode_session, encode_session
from twism.machine import StateMachineBuilder

from conftest import TEST_SECRET


def test_initial_request_returns_twiml_and_session_cookie(client):
    resp = client.get("/twism/numbergame/")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/xml")
    assert resp.headers["cache-control"] == "no-cache"
    assert resp.text.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<Response>')
    assert '<Gather action="/twism/numbergame/CHECK_NUMBER" numDigits="1">' in resp.text
    assert decode_session(resp.cookies[COOKIE_NAME], TEST_SECRET) == {}


def test_session_survives_between_steps(client):
    first = client.post("/twism/numbergame/CHECK_NUMBER", data={"CallSid": "CA1", "Digits": "2"})
    assert "higher" in first.text

    second = client.post("/twism/numbergame/CHECK_NUMBER", data={"CallSid": "CA1", "Digits": "5"})

    assert "You win after 2 guesses!" in second.text
    assert decode_session(second.cookies[COOKIE_NAME], TEST_SECRET) == {"guesses": "2"}


def test_tampered_cookie_is_rejected_and_cleared(client):
    client.cookies.set(COOKIE_NAME, encode_session({"guesses": "1"}, "someone-elses-secret"))

    resp = client.post("/twism/numbergame/CHECK_NUMBER", data={"Digits": "5"})

    assert resp.status_code == 403
    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith(f"{COOKIE_NAME}=")
    assert "Max-Age=0" in set_cookie


def test_unknown_state_is_404(client):
    resp = client.get("/twism/numbergame/NO_SUCH_STATE")

    assert resp.status_code == 404


def test_callback_state_returns_empty_body(client):
    client.cookies.set(COOKIE_NAME, encode_session({"U_RECORDING_URL": "http://rec/1"}, TEST_SECRET))

    resp = client.post("/twism/voicerecord/C_HANGUP", data={"CallSid": "CA9", "CallStatus": "completed"})

    assert resp.status_code == 200
    assert resp.text == ""
    assert decode_session(resp.cookies[COOKIE_NAME], TEST_SECRET) == {}


def test_voice_record_keeps_recording_url_in_session(client):
    resp = client.post(
        "/twism/voicerecord/H_REVIEW_MESSAGE",
        data={"RecordingUrl": "http://rec/2", "RecordingDuration": "12"},
    )

    assert "<Play>http://rec/2</Play>" in resp.text
    assert 'action="/twism/voicerecord/H_REVIEW_MESSAGE_CHOICE"' in resp.text
    assert decode_session(resp.cookies[COOKIE_NAME], TEST_SECRET) == {"U_RECORDING_URL": "http://rec/2"}


def test_call_center_hold_music_reads_queue_position(client):
    hotline = client.post("/twism/callcenter/")
    assert '<Enqueue waitUrl="/twism/callcenter/H_HOLD_MUSIC">CallCenterQueue</Enqueue>' in hotline.text

    hold = client.post("/twism/callcenter/H_HOLD_MUSIC", data={"QueuePosition": "3"})

    assert "You are number 3 in the queue." in hold.text
    assert "<Play>" in hold.text


def test_missing_secret_is_a_server_error():
    def no_secret() -> str:
        from twism.errors import ConfigurationError

        raise ConfigurationError()

    builder = StateMachineBuilder()
    builder.handler("start").responds_with(say("hi"))
    app = FastAPI()
    app.include_router(
        build_state_machine_router(builder.build(initial_state="start"), "/flow", secret_provider=no_secret)
    )

    with TestClient(app) as test_client:
        resp = test_client.get("/flow/")

    assert resp.status_code == 500


def test_custom_mount_uses_string_states():
    builder = StateMachineBuilder()
    builder.handler("start").responds_with(say("hi"))
    app = FastAPI()
    app.include_router(
        build_state_machine_router(builder.build(initial_state="start"), "/flow/", secret_provider=lambda: TEST_SECRET)
    )

    with TestClient(app) as test_client:
        resp = test_client.get("/flow/start")

    assert resp.status_code == 200
    assert resp.text.endswith("<Response><Say>hi</Say></Response>")


def test_malformed_queue_position_is_400(client):
    resp = client.post("/twism/callcenter/H_HOLD_MUSIC", data={"QueuePosition": "unknown"})

    assert resp.status_code == 400
