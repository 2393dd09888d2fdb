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
"""Declarative error metadata for domain exceptions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from http import HTTPStatus
from typing import TypeVar

from shielderrors.problem_detail import validate_problem_type

E = TypeVar("E", bound=type[BaseException])

_ERROR_CODE_ATTR = "__shield_error_code__"

_registry: dict[type[BaseException], ErrorCode] = {}


@dataclass(frozen=True)
class ErrorCode:
    """Error metadata attached to one exception class.

    Args:
        code: Business or technical error code (e.g. ``"LOAN_NOT_FOUND"``).
        status: HTTP status to respond with.
        doc: Documentation URI; blank means no ``type`` in the response.
        title: Short summary; blank means the exception message is used.

    Raises:
        InvalidProblemTypeException: If *doc* is not a valid URI.
    """

    code: str
    status: int = HTTPStatus.INTERNAL_SERVER_ERROR
    doc: str = ""
    title: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", int(self.status))
        if self.doc.strip():
            validate_problem_type(self.doc)


def error_code(
    code: str,
    status: int = HTTPStatus.INTERNAL_SERVER_ERROR,
    doc: str = "",
    title: str = "",
) -> Callable[[E], E]:
    """Attach error metadata to an exception class.

    The metadata belongs to the decorated class only; subclasses must
    declare their own.

    Usage::

        @error_code("LOAN_NOT_FOUND", status=404, title="Loan Not Found")
        class LoanNotFoundError(Exception):
            pass
    """
    metadata = ErrorCode(code=code, status=status, doc=doc, title=title)

    def decorator(cls: E) -> E:
        setattr(cls, _ERROR_CODE_ATTR, metadata)
        return cls

    return decorator


def register_error_code(exc_type: type[BaseException], metadata: ErrorCode) -> None:
    """Declare error metadata for an exception class you cannot decorate."""
    _registry[exc_type] = metadata


def unregister_error_code(exc_type: type[BaseException]) -> None:
    """Remove an explicit registration, if any."""
    _registry.pop(exc_type, None)


def find_error_code(exc_type: type[BaseException]) -> ErrorCode | None:
    """Return the metadata declared for exactly *exc_type*, or ``None``."""
    registered = _registry.get(exc_type)
    if registered is not None:
        return registered
    declared = exc_type.__dict__.get(_ERROR_CODE_ATTR)
    return declared if isinstance(declared, ErrorCode) else None
