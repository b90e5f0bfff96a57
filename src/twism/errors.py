"""Exceptions raised by the state machine engine.

Each error carries the HTTP status the transport should answer with.
"""

from __future__ import annotations


class TwismError(Exception):
    status_code: int = 500
    default_detail: str = "State machine error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class CookieTamperedError(TwismError):
    status_code = 403
    default_detail = "Session cookie failed verification."


class UnhandledStateError(TwismError):
    status_code = 404
    default_detail = "No such state handler found."


class UnknownStateError(UnhandledStateError):
    default_detail = "Unknown state."


class StateRegistrationError(TwismError):
    default_detail = "Invalid state registration."


class StateNameError(TwismError, ValueError):
    default_detail = "State has no renderable name."


class ConfigurationError(TwismError):
    default_detail = "State machine is not configured."


class InvalidRequestError(TwismError):
    status_code = 400
    default_detail = "Malformed webhook parameters."
