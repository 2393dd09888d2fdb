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
"""Maps raised exceptions to an ``ErrorKind``.

Matchers form a chain of responsibility: the first matcher that can
handle an exception decides its kind. Declared error metadata always
wins over the matchers, and anything left unmatched is ``GENERIC``.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any, Protocol

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from shielderrors.kernel.exceptions import (
    DataIntegrityViolationException,
    MalformedRequestException,
    RequestValidationException,
)
from shielderrors.kernel.types import ErrorKind, FieldError
from shielderrors.metadata import has_error_code

# Leading ``loc`` segments FastAPI adds to say where a parameter came from
_REQUEST_PARTS = frozenset({"body", "query", "path", "header", "cookie"})

_ROOT_FIELD = "request"


class KindMatcher(Protocol):
    """Recognises one framework-level exception kind."""

    kind: ErrorKind

    def can_handle(self, exc: BaseException) -> bool: ...


def _is_invalid_json(exc: RequestValidationError) -> bool:
    errors = exc.errors()
    return bool(errors) and all(e.get("type") == "json_invalid" for e in errors)


class ValidationMatcher:
    """Request validation failures (own, Pydantic and FastAPI)."""

    kind = ErrorKind.VALIDATION

    def can_handle(self, exc: BaseException) -> bool:
        if isinstance(exc, RequestValidationError):
            return not _is_invalid_json(exc)
        return isinstance(exc, (RequestValidationException, ValidationError))


class MalformedRequestMatcher:
    """Unreadable request bodies."""

    kind = ErrorKind.MALFORMED_REQUEST

    def can_handle(self, exc: BaseException) -> bool:
        if isinstance(exc, RequestValidationError):
            return _is_invalid_json(exc)
        return isinstance(exc, (MalformedRequestException, json.JSONDecodeError))


class DataIntegrityMatcher:
    """Storage-layer constraint violations."""

    kind = ErrorKind.DATA_INTEGRITY

    def can_handle(self, exc: BaseException) -> bool:
        return isinstance(exc, (DataIntegrityViolationException, IntegrityError))


class ExceptionClassifier:
    """Decides which handling path an exception takes."""

    def __init__(self, matchers: Sequence[KindMatcher] | None = None) -> None:
        self._matchers: list[KindMatcher] = (
            list(matchers)
            if matchers is not None
            else [ValidationMatcher(), MalformedRequestMatcher(), DataIntegrityMatcher()]
        )

    def classify(self, exc: BaseException) -> ErrorKind:
        if has_error_code(exc):
            return ErrorKind.ANNOTATED
        for matcher in self._matchers:
            if matcher.can_handle(exc):
                return matcher.kind
        return ErrorKind.GENERIC


_default_classifier = ExceptionClassifier()


def classify(exc: BaseException) -> ErrorKind:
    """Classify *exc* with the default matcher chain."""
    return _default_classifier.classify(exc)


def _field_name(loc: Sequence[Any], strip_request_part: bool) -> str:
    parts = [str(p) for p in loc]
    if strip_request_part and parts and parts[0] in _REQUEST_PARTS:
        parts = parts[1:]
    return ".".join(parts) or _ROOT_FIELD


def field_errors_of(exc: BaseException) -> list[FieldError]:
    """Ordered field errors carried by a validation exception.

    Only the field location and message are kept, never the rejected input.
    Exceptions of other kinds yield an empty list.
    """
    if isinstance(exc, RequestValidationException):
        return list(exc.field_errors)
    if isinstance(exc, RequestValidationError):
        return [FieldError(_field_name(e.get("loc", ()), True), str(e.get("msg", ""))) for e in exc.errors()]
    if isinstance(exc, ValidationError):
        return [FieldError(_field_name(e["loc"], False), e["msg"]) for e in exc.errors()]
    return []
