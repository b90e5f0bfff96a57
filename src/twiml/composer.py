"""Declarative builders for TwiML documents.

Lets a call flow read as one nested expression::

    response(
        say("listen to this!"),
        play("http://example.com/ipanema.mp3"),
        say("that was fun!"),
        hangup(),
    )
"""

from __future__ import annotations

from collections.abc import Hashable

from twiml.nodes import (
    Client,
    Conference,
    Dial,
    DialNoun,
    Enqueue,
    Gather,
    GatherNoun,
    Hangup,
    Leave,
    Node,
    Number,
    Pause,
    Play,
    Queue,
    Record,
    Redirect,
    Reject,
    Response,
    Say,
    Sms,
)


def response(*verbs: Node | None) -> Response:
    return Response(*verbs)


def say(phrase: str) -> Say:
    return Say(phrase)


def play(audio_url: str) -> Play:
    return Play(audio_url)


def gather(*nested: GatherNoun) -> Gather:
    return Gather(*nested)


def record() -> Record:
    return Record()


def sms(message: str) -> Sms:
    return Sms(message)


def dial(*nested: DialNoun) -> Dial:
    return Dial(*nested)


def number(phone_number: str) -> Number:
    return Number(phone_number)


def client(identifier: str) -> Client:
    return Client(identifier)


def conference(room_name: str) -> Conference:
    return Conference(room_name)


def queue(name: str) -> Queue:
    return Queue(name)


def enqueue(queue_name: str) -> Enqueue:
    return Enqueue(queue_name)


def leave() -> Leave:
    return Leave()


def hangup() -> Hangup:
    return Hangup()


def redirect(next_state: Hashable) -> Redirect:
    return Redirect(next_state)


def reject() -> Reject:
    return Reject()


def pause() -> Pause:
    return Pause()
