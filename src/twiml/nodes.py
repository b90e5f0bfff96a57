"""TwiML verbs and nouns.

Every node stores its optional attributes under their TwiML wire names in
``attrs``; unset attributes are simply absent and are never rendered. Setters
return the node so call flows can be written as chained expressions::

    Gather(Say("pick a number")).action(State.CHECK).num_digits(1)

Attributes that name the next step of a call (``action``, ``url``,
``waitUrl``, ``statusCallback``, ``transcribeCallback`` and the target of
``Redirect``) hold state identifiers, not URLs. They are resolved against a
base URL only when the document is rendered.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from enum import Enum
from typing import Any, ClassVar

LOGGER = logging.getLogger(__name__)

DTMF_KEYS = frozenset("0123456789#*")

# Attribute kinds understood by the renderer.
STATE = "state"
ENUM = "enum"
BOOL = "bool"
INT = "int"
TEXT = "text"
WAIT_URL = "wait_url"

# attrs key of a literal waitUrl; never rendered under its own name.
WAIT_URL_LITERAL = "waitUrlLiteral"


class Method(Enum):
    GET = "GET"
    POST = "POST"


class Voice(Enum):
    MAN = "man"
    WOMAN = "woman"


class Language(Enum):
    EN = "en"
    EN_GB = "en-gb"
    ES = "es"
    FR = "fr"
    DE = "de"


class RejectReason(Enum):
    REJECTED = "rejected"
    BUSY = "busy"


def _check_int(name: str, value: int, minimum: int, maximum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f">= {minimum}" if maximum is None else f"between {minimum} and {maximum}"
        raise ValueError(f"{name} must be {bounds}, got {value}")
    return value


def _check_bool(name: str, value: bool) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean, got {value!r}")
    return value


def _check_enum(name: str, value: Enum, enum_type: type[Enum]) -> Enum:
    if not isinstance(value, enum_type):
        raise ValueError(f"{name} must be a {enum_type.__name__}, got {value!r}")
    return value


def _check_keys(name: str, value: str, *, single: bool) -> str:
    if not isinstance(value, str) or any(key not in DTMF_KEYS for key in value):
        raise ValueError(f"{name} may only contain the keys 0-9, # and *, got {value!r}")
    if single and len(value) > 1:
        raise ValueError(f"{name} must be a single key, got {value!r}")
    return value


class Node:
    """Base class for everything that can appear in a TwiML document."""

    tag: ClassVar[str] = ""
    # Declared rendering order of (wire name, kind).
    attribute_kinds: ClassVar[tuple[tuple[str, str], ...]] = ()

    def __init__(self) -> None:
        self.attrs: dict[str, Any] = {}

    def _set(self, name: str, value: Any):
        self.attrs[name] = value
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(name, default)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.attrs!r})"


class _MethodMixin:
    def method(self, method: Method):
        return self._set("method", _check_enum("method", method, Method))

    def method_get(self):
        return self.method(Method.GET)

    def method_post(self):
        return self.method(Method.POST)


class _ActionMixin(_MethodMixin):
    def action(self, state: Hashable):
        return self._set("action", state)


class _UrlMixin(_MethodMixin):
    def url(self, state: Hashable):
        return self._set("url", state)


class _WaitUrlMixin:
    """``waitUrl`` may be a state or a literal URL; the literal wins when both are set."""

    def wait_url(self, state: Hashable):
        return self._set("waitUrl", state)

    def wait_url_literal(self, url: str):
        return self._set(WAIT_URL_LITERAL, url)

    def wait_method(self, method: Method):
        return self._set("waitMethod", _check_enum("wait_method", method, Method))

    def wait_method_get(self):
        return self.wait_method(Method.GET)

    def wait_method_post(self):
        return self.wait_method(Method.POST)


class Say(Node):
    tag = "Say"
    attribute_kinds = (("voice", ENUM), ("language", ENUM), ("loop", INT))

    def __init__(self, phrase: str) -> None:
        super().__init__()
        self.phrase = phrase

    def voice(self, voice: Voice) -> Say:
        return self._set("voice", _check_enum("voice", voice, Voice))

    def voice_man(self) -> Say:
        return self.voice(Voice.MAN)

    def voice_woman(self) -> Say:
        return self.voice(Voice.WOMAN)

    def language(self, language: Language) -> Say:
        return self._set("language", _check_enum("language", language, Language))

    def language_en(self) -> Say:
        return self.language(Language.EN)

    def language_en_gb(self) -> Say:
        return self.language(Language.EN_GB)

    def language_es(self) -> Say:
        return self.language(Language.ES)

    def language_fr(self) -> Say:
        return self.language(Language.FR)

    def language_de(self) -> Say:
        return self.language(Language.DE)

    def loop(self, count: int) -> Say:
        """Repeat the phrase ``count`` times; 0 loops until the call ends."""

        return self._set("loop", _check_int("loop", count, 0))


class Play(Node):
    tag = "Play"
    attribute_kinds = (("loop", INT),)

    def __init__(self, audio_url: str) -> None:
        super().__init__()
        self.audio_url = audio_url

    def loop(self, count: int) -> Play:
        return self._set("loop", _check_int("loop", count, 0))


class Pause(Node):
    tag = "Pause"
    attribute_kinds = (("length", INT),)

    def length(self, seconds: int) -> Pause:
        return self._set("length", _check_int("length", seconds, 1))


class Hangup(Node):
    tag = "Hangup"


class Leave(Node):
    tag = "Leave"


class Reject(Node):
    tag = "Reject"
    attribute_kinds = (("reason", ENUM),)

    def reason(self, reason: RejectReason) -> Reject:
        return self._set("reason", _check_enum("reason", reason, RejectReason))

    def reason_busy(self) -> Reject:
        return self.reason(RejectReason.BUSY)

    def reason_rejected(self) -> Reject:
        return self.reason(RejectReason.REJECTED)


class Redirect(_MethodMixin, Node):
    tag = "Redirect"
    attribute_kinds = (("method", ENUM),)

    def __init__(self, next_state: Hashable) -> None:
        super().__init__()
        self.next_state = next_state


class Record(_ActionMixin, Node):
    tag = "Record"
    attribute_kinds = (
        ("action", STATE),
        ("method", ENUM),
        ("timeout", INT),
        ("finishOnKey", TEXT),
        ("maxLength", INT),
        ("transcribe", BOOL),
        ("transcribeCallback", STATE),
        ("playBeep", BOOL),
    )

    def timeout(self, seconds_of_silence: int) -> Record:
        return self._set("timeout", _check_int("timeout", seconds_of_silence, 1))

    def finish_on_key(self, keys: str) -> Record:
        """Any of the given keys ends the recording."""

        return self._set("finishOnKey", _check_keys("finish_on_key", keys, single=False))

    def finish_on_key_hash(self) -> Record:
        return self.finish_on_key("#")

    def finish_on_key_star(self) -> Record:
        return self.finish_on_key("*")

    def max_length(self, seconds: int) -> Record:
        return self._set("maxLength", _check_int("max_length", seconds, 1))

    def transcribe(self, enabled: bool) -> Record:
        return self._set("transcribe", _check_bool("transcribe", enabled))

    def transcribe_callback(self, state: Hashable) -> Record:
        return self._set("transcribeCallback", state)

    def play_beep(self, enabled: bool) -> Record:
        return self._set("playBeep", _check_bool("play_beep", enabled))


class Sms(_ActionMixin, Node):
    tag = "Sms"
    attribute_kinds = (
        ("to", TEXT),
        ("from", TEXT),
        ("action", STATE),
        ("method", ENUM),
        ("statusCallback", STATE),
    )

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def to(self, number: str) -> Sms:
        return self._set("to", number)

    def from_(self, number: str) -> Sms:
        return self._set("from", number)

    def status_callback(self, state: Hashable) -> Sms:
        return self._set("statusCallback", state)


class Number(_UrlMixin, Node):
    tag = "Number"
    attribute_kinds = (("sendDigits", TEXT), ("url", STATE), ("method", ENUM))

    def __init__(self, number: str) -> None:
        super().__init__()
        self.number = number

    def send_digits(self, digits: str) -> Number:
        return self._set("sendDigits", digits)


class Client(_UrlMixin, Node):
    tag = "Client"
    attribute_kinds = (("url", STATE), ("method", ENUM))

    def __init__(self, identifier: str) -> None:
        super().__init__()
        self.identifier = identifier


class Queue(_UrlMixin, Node):
    tag = "Queue"
    attribute_kinds = (("url", STATE), ("method", ENUM))

    def __init__(self, name: str) -> None:
        super().__init__()
        self.name = name


class Conference(_WaitUrlMixin, Node):
    tag = "Conference"
    attribute_kinds = (
        ("muted", BOOL),
        ("beep", BOOL),
        ("startConferenceOnEnter", BOOL),
        ("endConferenceOnExit", BOOL),
        ("waitUrl", WAIT_URL),
        ("waitMethod", ENUM),
        ("maxParticipants", INT),
    )

    def __init__(self, room_name: str) -> None:
        super().__init__()
        self.room_name = room_name

    def muted(self, muted: bool) -> Conference:
        return self._set("muted", _check_bool("muted", muted))

    def beep(self, beep: bool) -> Conference:
        return self._set("beep", _check_bool("beep", beep))

    def start_conference_on_enter(self, start: bool) -> Conference:
        return self._set("startConferenceOnEnter", _check_bool("start_conference_on_enter", start))

    def end_conference_on_exit(self, end: bool) -> Conference:
        return self._set("endConferenceOnExit", _check_bool("end_conference_on_exit", end))

    def max_participants(self, count: int) -> Conference:
        return self._set("maxParticipants", _check_int("max_participants", count, 2, 40))


class Enqueue(_ActionMixin, _WaitUrlMixin, Node):
    tag = "Enqueue"
    attribute_kinds = (
        ("action", STATE),
        ("method", ENUM),
        ("waitUrl", WAIT_URL),
        ("waitMethod", ENUM),
    )

    def __init__(self, queue_name: str) -> None:
        super().__init__()
        self.queue_name = queue_name


GatherNoun = Say | Play | Pause
DialNoun = Number | Conference | Client | Queue


def _checked_children(parent: str, children: Iterable[Any], allowed: Any) -> list[Any]:
    checked = []
    for child in children:
        if not isinstance(child, allowed):
            raise TypeError(f"{type(child).__name__} cannot be nested in <{parent}>")
        checked.append(child)
    return checked


class Gather(_ActionMixin, Node):
    """Collects digits; may only contain Say, Play and Pause."""

    tag = "Gather"
    attribute_kinds = (
        ("action", STATE),
        ("method", ENUM),
        ("timeout", INT),
        ("finishOnKey", TEXT),
        ("numDigits", INT),
    )

    def __init__(self, *nested: GatherNoun) -> None:
        super().__init__()
        self.children: list[GatherNoun] = _checked_children(self.tag, nested, GatherNoun)

    def _add(self, child: GatherNoun) -> Gather:
        self.children.extend(_checked_children(self.tag, [child], GatherNoun))
        return self

    def add_say(self, say: Say) -> Gather:
        return self._add(say)

    def add_play(self, play: Play) -> Gather:
        return self._add(play)

    def add_pause(self, pause: Pause) -> Gather:
        return self._add(pause)

    def timeout(self, seconds: int) -> Gather:
        return self._set("timeout", _check_int("timeout", seconds, 1))

    def finish_on_key(self, key: str) -> Gather:
        """A single key, or ``""`` to disable finishing on a key."""

        return self._set("finishOnKey", _check_keys("finish_on_key", key, single=True))

    def finish_on_key_hash(self) -> Gather:
        return self.finish_on_key("#")

    def finish_on_key_star(self) -> Gather:
        return self.finish_on_key("*")

    def num_digits(self, count: int) -> Gather:
        return self._set("numDigits", _check_int("num_digits", count, 1))


class Dial(_ActionMixin, Node):
    """Connects the caller to a Number, Conference, Client or Queue."""

    tag = "Dial"
    attribute_kinds = (
        ("action", STATE),
        ("method", ENUM),
        ("timeout", INT),
        ("hangupOnStar", BOOL),
        ("timeLimit", INT),
        ("callerId", TEXT),
        ("record", BOOL),
    )

    def __init__(self, *nested: DialNoun) -> None:
        super().__init__()
        self.children: list[DialNoun] = _checked_children(self.tag, nested, DialNoun)

    def _add(self, child: DialNoun) -> Dial:
        self.children.extend(_checked_children(self.tag, [child], DialNoun))
        return self

    def add_number(self, number: Number) -> Dial:
        return self._add(number)

    def add_conference(self, conference: Conference) -> Dial:
        return self._add(conference)

    def add_client(self, client: Client) -> Dial:
        return self._add(client)

    def add_queue(self, queue: Queue) -> Dial:
        return self._add(queue)

    def timeout(self, seconds_to_answer: int) -> Dial:
        return self._set("timeout", _check_int("timeout", seconds_to_answer, 1))

    def hangup_on_star(self, enabled: bool) -> Dial:
        return self._set("hangupOnStar", _check_bool("hangup_on_star", enabled))

    def time_limit(self, max_seconds: int) -> Dial:
        return self._set("timeLimit", _check_int("time_limit", max_seconds, 1))

    def caller_id(self, caller_id: str) -> Dial:
        return self._set("callerId", caller_id)

    def record(self, enabled: bool) -> Dial:
        return self._set("record", _check_bool("record", enabled))


class Response(Node):
    """Root of a TwiML document. ``None`` entries are tolerated and skipped on render."""

    tag = "Response"

    def __init__(self, *verbs: Node | None) -> None:
        super().__init__()
        self.children: list[Node | None] = []
        for verb in verbs:
            self.add_verb(verb)

    def add_verb(self, verb: Node | None) -> Response:
        if verb is not None and not isinstance(verb, Node):
            raise TypeError(f"{type(verb).__name__} is not a TwiML node")
        self.children.append(verb)
        return self


def as_response(root: Node) -> Response:
    if isinstance(root, Response):
        return root
    return Response(root)
