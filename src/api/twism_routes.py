"""HTTP transport for call-flow state machines.

Twilio requests ``<prefix>/`` to start a call and ``<prefix>/<STATE>`` for
every later step, with GET or POST. The session parameters of the call ride
along in the signed ``twism`` cookie.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, HTTPException, Request, Response

from config.settings import get_cookie_secret
from twiml.render import XML_DECLARATION
from twism.cookie import read_session, remove_session_cookie, set_session_cookie
from twism.errors import CookieTamperedError, TwismError
from twism.machine import StateMachine
from twism.parameters import TwilioParameters

LOGGER = logging.getLogger(__name__)


async def _request_params(request: Request) -> dict[str, Any]:
    params: dict[str, Any] = dict(request.query_params)
    if request.method == "POST":
        form = await request.form()
        params.update({key: value for key, value in form.items() if isinstance(value, str)})
    return params


def _twiml_response(twiml: str) -> Response:
    return Response(
        content=f"{XML_DECLARATION}\n{twiml}",
        media_type="text/xml",
        headers={"Cache-Control": "no-cache"},
    )


def build_state_machine_router(
    machine: StateMachine,
    prefix: str,
    *,
    secret_provider: Callable[[], str] = get_cookie_secret,
    tags: list[str] | None = None,
) -> APIRouter:
    """Expose ``machine`` under ``prefix``.

    State targets in rendered TwiML resolve to ``<root_path><prefix>/<STATE>``.
    """

    prefix = prefix.rstrip("/")
    router = APIRouter(prefix=prefix, tags=tags or ["twism"])

    async def advance(request: Request) -> Response:
        state = request.path_params.get("state", "")
        base_url = f"{request.scope.get('root_path', '')}{prefix}/"
        try:
            secret = secret_provider()
            session = read_session(request.cookies, secret)
            params = TwilioParameters(await _request_params(request), session)
            step = machine.advance(state, params, base_url)
        except CookieTamperedError as exc:
            LOGGER.warning("Rejecting request to %s%s: %s", base_url, state, exc.detail)
            response = Response(content=exc.detail, status_code=exc.status_code, media_type="text/plain")
            remove_session_cookie(response)
            return response
        except TwismError as exc:
            LOGGER.error("State machine failure at %s%s: %s", base_url, state, exc.detail)
            raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc

        if step.twiml is not None:
            response = _twiml_response(step.twiml)
        else:
            response = Response(status_code=200)
        set_session_cookie(response, step.session, secret)
        return response

    router.add_api_route("/", advance, methods=["GET", "POST"], include_in_schema=False)
    router.add_api_route("/{state}", advance, methods=["GET", "POST"], include_in_schema=False)
    return router
