"""Hotline callers wait in a queue with hold music until an agent dials in."""

from __future__ import annotations

from enum import Enum

from twiml.composer import dial, enqueue, play, queue, response, say
from twiml.nodes import Node
from twism.machine import StateMachine, StateMachineBuilder, enum_lookup
from twism.parameters import TwilioParameters

ELEVATOR_MUSIC = "http://twilio4j.googlecode.com/svn/trunk/twilio4j/misc/mp3/ipanema.mp3"
CALL_CENTER_QUEUE_NAME = "CallCenterQueue"


class CallCenterState(Enum):
    H_CALL_CENTER_HOTLINE = "hotline"
    H_HOLD_MUSIC = "hold_music"
    H_CALL_CENTER_AGENT = "agent"


def hold_music(params: TwilioParameters) -> Node:
    position = params.enqueue_wait().queue_position
    if position is None:
        announcement = say("Please hold.").voice_woman()
    else:
        announcement = say(f"You are number {position} in the queue. Please hold.").voice_woman()
    return response(announcement, play(ELEVATOR_MUSIC))


def build_machine() -> StateMachine[CallCenterState]:
    builder: StateMachineBuilder[CallCenterState] = StateMachineBuilder()
    builder.handler(CallCenterState.H_CALL_CENTER_HOTLINE).responds_with(
        enqueue(CALL_CENTER_QUEUE_NAME).wait_url(CallCenterState.H_HOLD_MUSIC)
    )
    builder.handler(CallCenterState.H_HOLD_MUSIC).responds_with(hold_music)
    builder.handler(CallCenterState.H_CALL_CENTER_AGENT).responds_with(
        response(dial(queue(CALL_CENTER_QUEUE_NAME)))
    )
    return builder.build(
        initial_state=CallCenterState.H_CALL_CENTER_HOTLINE,
        lookup_state=enum_lookup(CallCenterState),
    )
