# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Starlette wiring that answers failed requests with ``application/problem+json``."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from shielderrors.handler import GlobalExceptionHandler
from shielderrors.kernel.exceptions import (
    DataIntegrityViolationException,
    MalformedRequestException,
    RequestValidationException,
)
from shielderrors.problem_detail import PROBLEM_JSON_MEDIA_TYPE, ProblemDetail

HANDLER_STATE_ATTR = "shield_exception_handler"

ExceptionHandlerFunc = Callable[[Request, Exception], Awaitable[JSONResponse]]

# Answered by Starlette's ExceptionMiddleware; everything else reaches
# ProblemDetailsMiddleware
FRAMEWORK_EXCEPTION_TYPES: tuple[type[Exception], ...] = (
    RequestValidationException,
    ValidationError,
    MalformedRequestException,
    json.JSONDecodeError,
    DataIntegrityViolationException,
    IntegrityError,
)


def problem_response(status: int, problem: ProblemDetail) -> JSONResponse:
    """Render a problem detail with a matching HTTP status line."""
    return JSONResponse(
        problem.to_dict(),
        status_code=status,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


def make_exception_handler(handler: GlobalExceptionHandler) -> ExceptionHandlerFunc:
    """Adapt a :class:`GlobalExceptionHandler` to Starlette's handler signature."""

    async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
        status, problem = handler.handle(exc)
        return problem_response(status, problem)

    return exception_handler


class ProblemDetailsMiddleware:
    """Pure ASGI middleware that turns escaping exceptions into problem responses.

    It sits inside Starlette's ``ServerErrorMiddleware``, so a handled
    exception ends here and never reaches the server. Declared domain
    exceptions and unexpected failures take this route. Once the
    downstream app has started its response nothing can be replaced and
    the exception propagates unchanged.
    """

    def __init__(self, app: ASGIApp, handler: GlobalExceptionHandler) -> None:
        self.app = app
        self._handler = handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def _send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, _send)
        except Exception as exc:
            if response_started:
                raise
            status, problem = self._handler.handle(exc)
            await problem_response(status, problem)(scope, receive, send)


def register_exception_handlers(
    app: Starlette,
    handler: GlobalExceptionHandler | None = None,
) -> GlobalExceptionHandler:
    """Install Shield Errors on a Starlette application.

    The framework kinds get explicit exception handlers and
    :class:`ProblemDetailsMiddleware` answers the rest. Both go through
    :meth:`GlobalExceptionHandler.handle`, so declared error metadata keeps
    precedence over the framework kinds. Must be called before the app
    serves its first request.
    """
    handler = handler or GlobalExceptionHandler()
    exception_handler = make_exception_handler(handler)

    for exc_type in FRAMEWORK_EXCEPTION_TYPES:
        app.add_exception_handler(exc_type, exception_handler)
    app.add_middleware(ProblemDetailsMiddleware, handler=handler)

    setattr(app.state, HANDLER_STATE_ATTR, handler)
    return handler
