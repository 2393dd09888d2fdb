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
"""Configuration properties for Shield Errors."""

from __future__ import annotations

from dataclasses import dataclass, field

from shielderrors.core.config import config_properties
from shielderrors.sanitizer import DEFAULT_PLACEHOLDER, DEFAULT_REDACTED_KEYS


@config_properties(prefix="shield.errors")
@dataclass
class ShieldErrorsProperties:
    """Configuration for exception handling (shield.errors.*)."""

    enabled: bool = True
    redacted_keys: list[str] = field(default_factory=lambda: list(DEFAULT_REDACTED_KEYS))
    redaction_placeholder: str = DEFAULT_PLACEHOLDER


@config_properties(prefix="shield.logging")
@dataclass
class LoggingProperties:
    """Logging setup applied by ``auto_configure`` (shield.logging.*).

    Off by default so an application that configures logging itself is
    left alone.
    """

    enabled: bool = False
    format: str = "console"
    service: str = ""
    level: dict[str, str] = field(default_factory=lambda: {"root": "INFO"})
