"""Signed session cookie.

Twilio calls back statelessly for every step of a call but echoes cookies,
so the per-call session parameters travel in a single cookie::

    <hex mac>|<base64url("k1=v1&k2=v2")>

The MAC covers everything from the first ``|`` onward and is checked before
any field is trusted. Further ``|`` separated fields are reserved; only
field 0 is used today.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import re
from collections.abc import Mapping
from urllib.parse import quote_plus, unquote_plus

from fastapi import Response

from twism.errors import CookieTamperedError

LOGGER = logging.getLogger(__name__)

COOKIE_NAME = "twism"
COOKIE_PATH = "/"
_DELIMITER = "|"
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _mac(payload: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def _b64encode(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def _b64decode(blob: str) -> str:
    padded = blob + "=" * (-len(blob) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise CookieTamperedError("Session payload is not valid base64.") from exc


def _flatten(params: Mapping[str, str]) -> str:
    pairs = []
    for key, value in params.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError(f"Session parameters must be strings, got {key!r}={value!r}")
        pairs.append(f"{quote_plus(key)}={quote_plus(value)}")
    return "&".join(pairs)


def _unflatten(chunk: str) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in chunk.split("&"):
        kv = pair.split("=")
        if len(kv) != 2:
            continue
        if _BAD_ESCAPE.search(pair):
            LOGGER.debug("Dropping malformed session pair %r", pair)
            continue
        try:
            key = unquote_plus(kv[0], errors="strict")
            value = unquote_plus(kv[1], errors="strict")
        except UnicodeDecodeError:
            LOGGER.debug("Dropping undecodable session pair %r", pair)
            continue
        params[key] = value
    return params


def encode_session(params: Mapping[str, str], secret: str) -> str:
    """Return the signed cookie value for ``params``."""

    payload = _DELIMITER
    if params:
        payload += _b64encode(_flatten(params))
    return _mac(payload, secret) + payload


def _field(fields: list[str], index: int) -> str:
    try:
        return fields[index]
    except IndexError:
        raise CookieTamperedError("Invalid number of fields.") from None


def verify_payload(value: str, secret: str) -> list[str]:
    """Check the MAC and return the payload fields that follow the first ``|``."""

    pipe = value.find(_DELIMITER)
    if pipe < 0:
        raise CookieTamperedError("Invalid cookie payload.")
    received, payload = value[:pipe], value[pipe:]
    if not hmac.compare_digest(received.encode("utf-8"), _mac(payload, secret).encode("utf-8")):
        raise CookieTamperedError("Invalid cookie.")
    return payload[1:].split(_DELIMITER)


def decode_session(value: str, secret: str) -> dict[str, str]:
    """Verify a cookie value and recover its session parameters.

    Raises ``CookieTamperedError`` when the MAC does not match.
    """

    fields = verify_payload(value, secret)
    return _unflatten(_b64decode(_field(fields, 0)))


def read_session(cookies: Mapping[str, str], secret: str) -> dict[str, str]:
    """Session parameters carried by a request; empty on first contact."""

    value = cookies.get(COOKIE_NAME)
    if not value:
        return {}
    return decode_session(value, secret)


def set_session_cookie(response: Response, params: Mapping[str, str], secret: str) -> str:
    value = encode_session(params, secret)
    # No max-age: the cookie lives for the client session only.
    response.set_cookie(COOKIE_NAME, value, path=COOKIE_PATH)
    return value


def remove_session_cookie(response: Response) -> None:
    response.delete_cookie(COOKIE_NAME, path=COOKIE_PATH)
