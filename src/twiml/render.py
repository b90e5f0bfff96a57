"""Serialize TwiML node trees to markup text."""

from __future__ import annotations

import logging
from enum import Enum
from functools import singledispatch
from typing import Any
from xml.sax.saxutils import escape

from twiml.nodes import (
    BOOL,
    ENUM,
    INT,
    STATE,
    TEXT,
    WAIT_URL,
    WAIT_URL_LITERAL,
    Client,
    Conference,
    Dial,
    Enqueue,
    Gather,
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
from twiml.states import state_url

LOGGER = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_ATTRIBUTE_ENTITIES = {'"': "&quot;"}


def _attribute_value(node: Node, name: str, kind: str, base_url: str) -> str | None:
    if kind == WAIT_URL:
        literal = node.attrs.get(WAIT_URL_LITERAL)
        if literal is not None:
            return literal
        kind = STATE

    value: Any = node.attrs.get(name)
    if value is None:
        return None
    if kind == STATE:
        return state_url(base_url, value)
    if kind == ENUM:
        return value.value if isinstance(value, Enum) else str(value)
    if kind == BOOL:
        return "true" if value else "false"
    if kind in (INT, TEXT):
        return str(value)
    raise ValueError(f"Unknown attribute kind {kind!r} for {name}")


def _open(node: Node, base_url: str) -> str:
    parts = [f"<{node.tag}"]
    for name, kind in node.attribute_kinds:
        value = _attribute_value(node, name, kind, base_url)
        if value is not None:
            parts.append(f' {name}="{escape(value, _ATTRIBUTE_ENTITIES)}"')
    return "".join(parts)


def _empty(node: Node, base_url: str) -> str:
    return _open(node, base_url) + "/>"


def _with_text(node: Node, text: str, base_url: str) -> str:
    return f"{_open(node, base_url)}>{escape(text)}</{node.tag}>"


def _with_children(node: Node, children: list[Any], base_url: str) -> str:
    inner = "".join(render(child, base_url) for child in children)
    return f"{_open(node, base_url)}>{inner}</{node.tag}>"


@singledispatch
def render(node: Node, base_url: str) -> str:
    """Render ``node`` and its children, resolving state targets against ``base_url``."""

    raise TypeError(f"Cannot render {type(node).__name__}")


@render.register
def _(node: Response, base_url: str) -> str:
    parts = ["<Response>"]
    for child in node.children:
        if child is None:
            LOGGER.warning("Skipping null nested item in <Response>")
            continue
        parts.append(render(child, base_url))
    parts.append("</Response>")
    return "".join(parts)


@render.register(Gather)
@render.register(Dial)
def _(node: Gather | Dial, base_url: str) -> str:
    return _with_children(node, node.children, base_url)


@render.register
def _(node: Say, base_url: str) -> str:
    return _with_text(node, node.phrase, base_url)


@render.register
def _(node: Play, base_url: str) -> str:
    return _with_text(node, node.audio_url, base_url)


@render.register
def _(node: Sms, base_url: str) -> str:
    return _with_text(node, node.message, base_url)


@render.register
def _(node: Number, base_url: str) -> str:
    return _with_text(node, node.number, base_url)


@render.register
def _(node: Client, base_url: str) -> str:
    return _with_text(node, node.identifier, base_url)


@render.register
def _(node: Queue, base_url: str) -> str:
    return _with_text(node, node.name, base_url)


@render.register
def _(node: Conference, base_url: str) -> str:
    return _with_text(node, node.room_name, base_url)


@render.register
def _(node: Enqueue, base_url: str) -> str:
    return _with_text(node, node.queue_name, base_url)


@render.register
def _(node: Redirect, base_url: str) -> str:
    return _with_text(node, state_url(base_url, node.next_state), base_url)


@render.register(Record)
@render.register(Pause)
@render.register(Reject)
@render.register(Hangup)
@render.register(Leave)
def _(node: Node, base_url: str) -> str:
    return _empty(node, base_url)

