from __future__ import annotations

from flows.call_center import hold_music
from flows.number_game import NumberGameState, build_machine as build_number_game
from flows.voice_record import (
    RECORDING_URL_KEY,
    VoiceRecordState,
    build_machine as build_voice_record,
    check_call_in_code,
    review_message,
)
from twiml.render import render
from twism.parameters import TwilioParameters


def test_number_game_states_cover_the_enum():
    machine = build_number_game()

    assert set(machine.handlers) == set(NumberGameState)
    assert not machine.callbacks


def test_number_game_without_digits_asks_again():
    machine = build_number_game()

    step = machine.advance("/CHECK_NUMBER", TwilioParameters(), "/g/")

    assert "I did not get that." in step.twiml
    assert step.session == {"guesses": "1"}


def test_lower_guess_is_told_to_go_lower():
    machine = build_number_game()

    step = machine.advance("/CHECK_NUMBER", TwilioParameters({"Digits": "8"}), "/g/")

    assert "Pick again, lower." in step.twiml


def test_voice_record_registers_hangup_as_callback():
    machine = build_voice_record()

    assert set(machine.callbacks) == {VoiceRecordState.C_HANGUP}
    assert VoiceRecordState.C_HANGUP not in machine.handlers


def test_call_in_code_must_be_six_digits():
    ok = check_call_in_code(TwilioParameters({"Digits": "123456"}))
    bad = check_call_in_code(TwilioParameters({"Digits": "12"}))

    assert render(ok, "/v/") == "<Redirect>/v/H_RECORD_MESSAGE</Redirect>"
    assert "/v/H_GATHER_CALL_IN_CODE" in render(bad, "/v/")
    assert "not valid" in render(bad, "/v/")


def test_hangup_during_recording_drops_stored_url():
    params = TwilioParameters({"Digits": "hangup"}, session={RECORDING_URL_KEY: "http://old"})

    node = review_message(params)

    assert render(node, "/") == "<Hangup/>"
    assert params.session == {}


def test_hold_music_without_position():
    xml = render(hold_music(TwilioParameters()), "/")

    assert xml.startswith('<Response><Say voice="woman">Please hold.</Say><Play>')
