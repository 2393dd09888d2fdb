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
"""Exception hierarchy for Shield Errors.

Categories:
- Request exceptions: the framework-level kinds the dispatcher recognises
  (validation failures, unreadable bodies, constraint violations). Host
  applications raise these when their own stack has no native equivalent.
- Construction exceptions: raised while building a problem detail.
"""

from __future__ import annotations

from collections.abc import Iterable

from shielderrors.kernel.types import FieldError


class ShieldErrorsException(Exception):
    """Base exception for all Shield Errors types.

    Args:
        message: Human-readable error description (server-side only).
        code: Machine-readable error code.
        context: Arbitrary key-value pairs for logging and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Request Exceptions
# =============================================================================


class RequestValidationException(ShieldErrorsException):
    """One or more request fields failed validation.

    Carries the ordered field errors; rejected values are never kept.
    """

    def __init__(self, field_errors: Iterable[FieldError], message: str = "Request validation failed") -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field_errors: list[FieldError] = list(field_errors)


class MalformedRequestException(ShieldErrorsException):
    """The request body could not be read or parsed."""

    def __init__(self, message: str = "Request body is not readable") -> None:
        super().__init__(message, code="MALFORMED_REQUEST")


class DataIntegrityViolationException(ShieldErrorsException):
    """A storage-layer constraint was violated."""

    def __init__(self, message: str = "Data integrity violation") -> None:
        super().__init__(message, code="DATA_INTEGRITY_VIOLATION")


# =============================================================================
# Construction Exceptions
# =============================================================================


class InvalidProblemTypeException(ShieldErrorsException, ValueError):
    """The documentation link of a problem detail is not a valid URI."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid problem type URI: {value!r}",
            code="INVALID_PROBLEM_TYPE",
            context={"value": value},
        )
        self.value = value
