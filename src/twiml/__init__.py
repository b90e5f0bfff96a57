"""Typed TwiML document model with a declarative builder."""

from twiml.nodes import (
    Client,
    Conference,
    Dial,
    Enqueue,
    Gather,
    Hangup,
    Language,
    Leave,
    Method,
    Node,
    Number,
    Pause,
    Play,
    Queue,
    Record,
    Redirect,
    Reject,
    RejectReason,
    Response,
    Say,
    Sms,
    Voice,
)
from twiml.render import XML_DECLARATION, render

__all__ = [
    "Client",
    "Conference",
    "Dial",
    "Enqueue",
    "Gather",
    "Hangup",
    "Language",
    "Leave",
    "Method",
    "Node",
    "Number",
    "Pause",
    "Play",
    "Queue",
    "Record",
    "Redirect",
    "Reject",
    "RejectReason",
    "Response",
    "Say",
    "Sms",
    "Voice",
    "XML_DECLARATION",
    "render",
]
