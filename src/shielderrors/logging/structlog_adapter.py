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
"""structlog setup driven by ``shield.logging.*``."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from shielderrors.core.config import Config
from shielderrors.core.properties import LoggingProperties

LOG_FORMATS = ("console", "json")


def _add_service(service: str) -> structlog.types.Processor:
    def add_service(logger: Any, method_name: str, event_dict: structlog.types.EventDict) -> structlog.types.EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return add_service


def build_processors(log_format: str, service: str = "") -> list[structlog.types.Processor]:
    """Processor chain for *log_format*; ``json`` renders tracebacks as dicts."""
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format {log_format!r}, expected one of {', '.join(LOG_FORMATS)}")

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if service:
        processors.append(_add_service(service))

    if log_format == "json":
        processors.extend([structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()])
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def level_number(value: Any) -> int:
    """``"debug"`` -> ``logging.DEBUG``; unknown names raise ``ValueError``."""
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level {value!r}")
    return level


class StructlogAdapter:
    """Applies :class:`LoggingProperties` to structlog and the stdlib loggers.

    The handler's events (``annotated_exception``, ``unhandled_exception``
    and the rest) are emitted on the ``shielderrors`` logger, so
    ``shield.logging.level.shielderrors`` controls them separately from
    the root level.
    """

    def __init__(self, props: LoggingProperties | None = None) -> None:
        self._props = props or LoggingProperties()

    @classmethod
    def from_config(cls, config: Config) -> StructlogAdapter:
        return cls(config.bind(LoggingProperties))

    @property
    def properties(self) -> LoggingProperties:
        return self._props

    def configure(self) -> None:
        """Install the processor chain and log levels.

        Raises:
            ValueError: On an unknown format or level; nothing is changed then.
        """
        processors = build_processors(str(self._props.format).lower(), self._props.service)
        levels = {name: level_number(value) for name, value in self._props.level.items()}
        root_level = levels.pop("root", logging.INFO)

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
        )
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=root_level, force=True)
        for name, level in levels.items():
            logging.getLogger(name).setLevel(level)
