"""Record an outbound voice message after checking a call-in code.

By convention handler states start with ``H_`` and callback states with ``C_``.
"""

from __future__ import annotations

import logging
from enum import Enum

from twiml.composer import gather, hangup, play, record, redirect, response, say
from twiml.nodes import Node
from twism.machine import StateMachine, StateMachineBuilder, enum_lookup
from twism.parameters import TwilioParameters

LOGGER = logging.getLogger(__name__)

RECORDING_URL_KEY = "U_RECORDING_URL"
CALL_IN_CODE_LENGTH = 6
REVIEW_PROMPT = "Press 1 to accept this recording. Press 2 to record the message again."


class VoiceRecordState(Enum):
    H_GATHER_CALL_IN_CODE = "gather_call_in_code"
    H_CHECK_CALL_IN_CODE = "check_call_in_code"
    H_RECORD_MESSAGE = "record_message"
    H_REVIEW_MESSAGE = "review_message"
    H_REVIEW_MESSAGE_CHOICE = "review_message_choice"
    H_MESSAGE_READY_GOODBYE = "message_ready_goodbye"
    C_HANGUP = "hangup"


def is_valid_call_in_code(digits: str | None) -> bool:
    return bool(digits) and len(digits) == CALL_IN_CODE_LENGTH and digits.isdigit()


def check_call_in_code(params: TwilioParameters) -> Node:
    if is_valid_call_in_code(params.gather().digits):
        return redirect(VoiceRecordState.H_RECORD_MESSAGE)
    return response(
        say("That call in code is not valid. You may try again."),
        redirect(VoiceRecordState.H_GATHER_CALL_IN_CODE),
    )


def review_message(params: TwilioParameters) -> Node:
    recording = params.record()
    if recording.is_hangup or not recording.recording_url:
        LOGGER.info("Caller abandoned the recording (call %s)", params.call().call_sid)
        params.session.pop(RECORDING_URL_KEY, None)
        return hangup()

    params.session[RECORDING_URL_KEY] = recording.recording_url
    return (
        gather(
            say("Review your message.").voice_woman(),
            play(recording.recording_url),
            say(REVIEW_PROMPT).voice_woman(),
        )
        .num_digits(1)
        .action(VoiceRecordState.H_REVIEW_MESSAGE_CHOICE)
    )


def review_message_choice(params: TwilioParameters) -> Node:
    digits = params.gather().digits
    if digits == "1":
        return redirect(VoiceRecordState.H_MESSAGE_READY_GOODBYE)
    if digits == "2":
        return redirect(VoiceRecordState.H_RECORD_MESSAGE)
    return (
        gather(say(REVIEW_PROMPT).voice_woman())
        .num_digits(1)
        .action(VoiceRecordState.H_REVIEW_MESSAGE_CHOICE)
    )


def message_ready(params: TwilioParameters) -> Node:
    LOGGER.info("Recorded message ready at %s", params.session.get(RECORDING_URL_KEY))
    return say("The recorded message is now ready. Goodbye.").voice_woman()


def hangup_cleanup(params: TwilioParameters) -> None:
    LOGGER.info(
        "Call %s ended with status %s", params.call().call_sid, params.call().call_status
    )
    params.session.clear()


def build_machine() -> StateMachine[VoiceRecordState]:
    builder: StateMachineBuilder[VoiceRecordState] = StateMachineBuilder()
    builder.handler(VoiceRecordState.H_GATHER_CALL_IN_CODE).responds_with(
        gather(say(f"Enter your {CALL_IN_CODE_LENGTH} digit code.").voice_woman())
        .num_digits(CALL_IN_CODE_LENGTH)
        .action(VoiceRecordState.H_CHECK_CALL_IN_CODE)
    )
    builder.handler(VoiceRecordState.H_CHECK_CALL_IN_CODE).responds_with(check_call_in_code)
    builder.handler(VoiceRecordState.H_RECORD_MESSAGE).responds_with(
        response(
            say("After the beep, record your outbound message. Press pound when done.").voice_woman(),
            record().finish_on_key_hash().max_length(120).action(VoiceRecordState.H_REVIEW_MESSAGE),
        )
    )
    builder.handler(VoiceRecordState.H_REVIEW_MESSAGE).responds_with(review_message)
    builder.handler(VoiceRecordState.H_REVIEW_MESSAGE_CHOICE).responds_with(review_message_choice)
    builder.handler(VoiceRecordState.H_MESSAGE_READY_GOODBYE).responds_with(message_ready)
    builder.callback(VoiceRecordState.C_HANGUP).executes(hangup_cleanup)
    return builder.build(
        initial_state=VoiceRecordState.H_GATHER_CALL_IN_CODE,
        lookup_state=enum_lookup(VoiceRecordState),
    )
