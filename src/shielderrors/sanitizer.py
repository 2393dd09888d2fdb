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
"""Redaction of sensitive ``key=value`` pairs in client-visible messages."""

from __future__ import annotations

import re
from collections.abc import Iterable

DEFAULT_REDACTED_KEYS: tuple[str, ...] = ("password", "token", "secret")
DEFAULT_PLACEHOLDER = "[REDACTED]"


class DetailSanitizer:
    """Replaces the value following ``<key>=`` or ``<key>:`` with a placeholder.

    Keys match case-insensitively and must be followed immediately by the
    separator. Only the non-whitespace value run is replaced; the text
    before it is kept as written.
    """

    def __init__(
        self,
        keys: Iterable[str] = DEFAULT_REDACTED_KEYS,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ) -> None:
        self._keys = tuple(k for k in keys if k)
        self._placeholder = placeholder
        self._pattern: re.Pattern[str] | None = None
        if self._keys:
            alternatives = "|".join(re.escape(k) for k in self._keys)
            self._pattern = re.compile(rf"({alternatives})([=:]\s*)\S+", re.IGNORECASE)

    @property
    def keys(self) -> tuple[str, ...]:
        return self._keys

    @property
    def placeholder(self) -> str:
        return self._placeholder

    def sanitize(self, message: str | None) -> str | None:
        """Return *message* with every sensitive value redacted."""
        if message is None or self._pattern is None:
            return message
        return self._pattern.sub(lambda m: f"{m.group(1)}{m.group(2)}{self._placeholder}", message)


_default_sanitizer = DetailSanitizer()


def sanitize_detail(message: str | None) -> str | None:
    """Redact ``password``, ``token`` and ``secret`` values in *message*."""
    return _default_sanitizer.sanitize(message)
