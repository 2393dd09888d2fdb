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
"""FastAPI exception handlers built on the Starlette ones."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from shielderrors.handler import GlobalExceptionHandler
from shielderrors.web.adapters.starlette.errors import make_exception_handler
from shielderrors.web.adapters.starlette.errors import register_exception_handlers as register_starlette_handlers


def register_exception_handlers(
    app: FastAPI,
    handler: GlobalExceptionHandler | None = None,
) -> GlobalExceptionHandler:
    """Install Shield Errors on a FastAPI application.

    FastAPI extends Starlette, so the same handlers apply. FastAPI's own
    ``RequestValidationError`` handler is replaced as well; request bodies
    that are not valid JSON take the malformed-request path.
    """
    handler = register_starlette_handlers(app, handler)
    app.add_exception_handler(RequestValidationError, make_exception_handler(handler))
    return handler
