"""Call-flow state machine.

A flow is a set of states. Each state is either a *handler*, which answers
Twilio with a TwiML document, or a *callback*, which only performs a side
effect (status callbacks, transcription callbacks). Twilio requests
``<mount>/<STATE>`` and every request advances the call by exactly one step.

Registration happens once, through ``StateMachineBuilder``::

    builder = StateMachineBuilder()
    builder.handler(State.PICK).responds_with(
        gather(say("pick a number")).action(State.CHECK).num_digits(1)
    )
    builder.handler(State.CHECK).responds_with(check_number)
    builder.callback(State.HANGUP).executes(cleanup)
    machine = builder.build(initial_state=State.PICK, lookup_state=enum_lookup(State))

The resulting ``StateMachine`` is read-only and may be shared between requests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Generic, TypeVar

from twiml.nodes import Node, as_response
from twiml.render import render
from twism.errors import StateRegistrationError, UnhandledStateError, UnknownStateError
from twism.parameters import TwilioParameters

LOGGER = logging.getLogger(__name__)

StateT = TypeVar("StateT", bound=Hashable)
EnumT = TypeVar("EnumT", bound=Enum)

TwilioHandler = Callable[[TwilioParameters], Node]
TwilioCallback = Callable[[TwilioParameters], None]
StateLookup = Callable[[str], StateT]
InitialState = Callable[[TwilioParameters], StateT]


@dataclass(frozen=True)
class Step:
    """Outcome of one request: rendered TwiML (``None`` for callbacks) and the session to persist."""

    twiml: str | None
    session: dict[str, str]


def enum_lookup(enum_type: type[EnumT]) -> Callable[[str], EnumT]:
    """Resolve path segments to members of ``enum_type`` by name."""

    def lookup(name: str) -> EnumT:
        try:
            return enum_type[name]
        except KeyError:
            raise UnknownStateError(f"Unknown state {name!r}.") from None

    return lookup


def _identity(name: str):
    return name


class StateMachine(Generic[StateT]):
    def __init__(
        self,
        handlers: Mapping[StateT, TwilioHandler],
        callbacks: Mapping[StateT, TwilioCallback],
        initial_state: InitialState,
        lookup_state: StateLookup,
    ) -> None:
        self.handlers = MappingProxyType(dict(handlers))
        self.callbacks = MappingProxyType(dict(callbacks))
        self._initial_state = initial_state
        self._lookup_state = lookup_state

    def resolve_state(self, path_info: str | None, params: TwilioParameters) -> StateT:
        """The state named by the path suffix, or the flow's initial state when there is none."""

        suffix = (path_info or "").lstrip("/")
        if suffix:
            return self._lookup_state(suffix)
        return self._initial_state(params)

    def advance(self, path_info: str | None, params: TwilioParameters, base_url: str) -> Step:
        state = self.resolve_state(path_info, params)

        handler = self.handlers.get(state)
        if handler is not None:
            LOGGER.debug("Running handler for state %s", state)
            root = handler(params)
            twiml = render(as_response(root), base_url)
            return Step(twiml=twiml, session=params.session)

        callback = self.callbacks.get(state)
        if callback is not None:
            LOGGER.debug("Running callback for state %s", state)
            callback(params)
            return Step(twiml=None, session=params.session)

        raise UnhandledStateError(f"No handler or callback registered for state {state!r}.")


class RespondsWith(Generic[StateT]):
    def __init__(self, builder: StateMachineBuilder[StateT], state: StateT) -> None:
        self._builder = builder
        self._state = state

    def responds_with(self, response: Node | TwilioHandler) -> StateMachineBuilder[StateT]:
        """Register a fixed document, or a function building one per request."""

        if isinstance(response, Node):
            document = response

            def handler(params: TwilioParameters) -> Node:
                return document

        elif callable(response):
            handler = response
        else:
            raise StateRegistrationError(f"Handler for {self._state!r} must be a TwiML node or callable.")
        self._builder._register(self._state, handler, self._builder._handlers)
        return self._builder


class Executes(Generic[StateT]):
    def __init__(self, builder: StateMachineBuilder[StateT], state: StateT) -> None:
        self._builder = builder
        self._state = state

    def executes(self, callback: TwilioCallback) -> StateMachineBuilder[StateT]:
        if not callable(callback):
            raise StateRegistrationError(f"Callback for {self._state!r} must be callable.")
        self._builder._register(self._state, callback, self._builder._callbacks)
        return self._builder


class StateMachineBuilder(Generic[StateT]):
    def __init__(self) -> None:
        self._handlers: dict[StateT, TwilioHandler] = {}
        self._callbacks: dict[StateT, TwilioCallback] = {}

    def _register(self, state: StateT, function: Callable, target: dict) -> None:
        if state in self._handlers or state in self._callbacks:
            raise StateRegistrationError(f"State {state!r} is already registered.")
        target[state] = function

    def handler(self, state: StateT) -> RespondsWith[StateT]:
        return RespondsWith(self, state)

    def callback(self, state: StateT) -> Executes[StateT]:
        return Executes(self, state)

    def build(
        self,
        *,
        initial_state: StateT | InitialState,
        lookup_state: StateLookup | None = None,
    ) -> StateMachine[StateT]:
        """Freeze the registrations.

        ``initial_state`` is either a state or a function of the request
        parameters, which lets one mount point host several flows chosen from
        the session.
        """

        if callable(initial_state) and not isinstance(initial_state, Enum):
            pick_initial = initial_state
        else:
            fixed = initial_state

            def pick_initial(params: TwilioParameters):
                return fixed

        return StateMachine(
            handlers=self._handlers,
            callbacks=self._callbacks,
            initial_state=pick_initial,
            lookup_state=lookup_state or _identity,
        )
