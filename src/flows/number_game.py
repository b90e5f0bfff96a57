"""Guess-the-number call flow."""

from __future__ import annotations

from enum import Enum

from twiml.composer import gather, say
from twiml.nodes import Node
from twism.machine import StateMachine, StateMachineBuilder, enum_lookup
from twism.parameters import TwilioParameters

WINNING_DIGIT = "5"
GUESSES_KEY = "guesses"


class NumberGameState(Enum):
    PICK_NUMBER = "pick_number"
    CHECK_NUMBER = "check_number"


def _ask(prompt: str) -> Node:
    return gather(say(prompt)).action(NumberGameState.CHECK_NUMBER).num_digits(1)


def check_number(params: TwilioParameters) -> Node:
    digit = (params.gather().digits or "")[:1]
    guesses = int(params.session.get(GUESSES_KEY, "0")) + 1
    params.session[GUESSES_KEY] = str(guesses)

    if digit == WINNING_DIGIT:
        return say(f"You win after {guesses} guesses! Goodbye.")
    if not digit:
        return _ask("I did not get that. Pick a number between zero and nine.")
    if digit < WINNING_DIGIT:
        return _ask("Pick again, higher.")
    return _ask("Pick again, lower.")


def build_machine() -> StateMachine[NumberGameState]:
    builder: StateMachineBuilder[NumberGameState] = StateMachineBuilder()
    builder.handler(NumberGameState.PICK_NUMBER).responds_with(
        _ask("pick a number between zero and nine.")
    )
    builder.handler(NumberGameState.CHECK_NUMBER).responds_with(check_number)
    return builder.build(
        initial_state=NumberGameState.PICK_NUMBER,
        lookup_state=enum_lookup(NumberGameState),
    )
