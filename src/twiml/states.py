"""State identifiers used as symbolic TwiML targets."""

from __future__ import annotations

from collections.abc import Hashable
from enum import Enum

from twism.errors import StateNameError


def state_name(state: Hashable) -> str:
    """Return the URL path segment for a state.

    Enum members render as their ``name``; plain strings render as themselves.
    """

    if isinstance(state, Enum):
        name = state.name
    elif isinstance(state, str):
        name = state
    else:
        raise StateNameError(f"State {state!r} has no renderable name.")
    if not name:
        raise StateNameError(f"State {state!r} has an empty name.")
    return name


def state_url(base_url: str, state: Hashable) -> str:
    return base_url + state_name(state)
