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
"""Installs Shield Errors on an application from configuration."""

from __future__ import annotations

import structlog
from fastapi import FastAPI
from starlette.applications import Starlette

from shielderrors.core.config import Config
from shielderrors.core.properties import LoggingProperties, ShieldErrorsProperties
from shielderrors.handler import GlobalExceptionHandler
from shielderrors.logging.structlog_adapter import StructlogAdapter
from shielderrors.sanitizer import DetailSanitizer
from shielderrors.web.adapters.fastapi.errors import register_exception_handlers as register_fastapi
from shielderrors.web.adapters.starlette.errors import HANDLER_STATE_ATTR
from shielderrors.web.adapters.starlette.errors import register_exception_handlers as register_starlette

logger = structlog.get_logger("shielderrors.web")


def build_exception_handler(props: ShieldErrorsProperties) -> GlobalExceptionHandler:
    """Create a handler whose redaction follows *props*."""
    sanitizer = DetailSanitizer(keys=props.redacted_keys, placeholder=props.redaction_placeholder)
    return GlobalExceptionHandler(sanitizer=sanitizer)


def auto_configure(app: Starlette, config: Config | None = None) -> GlobalExceptionHandler | None:
    """Install the global exception handler on *app* unless disabled.

    An already installed handler is kept and returned. Returns ``None``
    when ``shield.errors.enabled`` is false. With ``shield.logging.enabled``
    structlog is configured from ``shield.logging.*`` before the handler
    is built.
    """
    config = config or Config.defaults()
    props = config.bind(ShieldErrorsProperties)
    if not props.enabled:
        logger.info("shield_errors_disabled")
        return None

    existing = getattr(app.state, HANDLER_STATE_ATTR, None)
    if isinstance(existing, GlobalExceptionHandler):
        return existing

    logging_props = config.bind(LoggingProperties)
    if logging_props.enabled:
        StructlogAdapter(logging_props).configure()

    handler = build_exception_handler(props)
    if isinstance(app, FastAPI):
        register_fastapi(app, handler)
        adapter = "fastapi"
    else:
        register_starlette(app, handler)
        adapter = "starlette"

    logger.info("shield_errors_installed", adapter=adapter, redacted_keys=list(props.redacted_keys))
    return handler
