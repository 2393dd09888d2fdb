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
"""RFC 7807 problem detail model and builder functions."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any
from urllib.parse import urlsplit

from shielderrors.kernel.exceptions import InvalidProblemTypeException

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"

GENERIC_ERROR_DETAIL = "An unexpected error occurred. Please contact support if the problem persists."
MALFORMED_REQUEST_DETAIL = "The request body is malformed or contains invalid JSON."
DATA_INTEGRITY_DETAIL = "The operation conflicts with existing data constraints."

# RFC 3986 unreserved, reserved and percent characters
_URI_CHARS_RE = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+$")
_BAD_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


@dataclass(frozen=True)
class ProblemDetail:
    """RFC 7807 problem details with ``code``, ``traceId`` and ``timestamp`` extensions.

    ``type`` and ``detail`` are omitted from ``to_dict()`` output when absent.
    """

    title: str
    status: int
    code: str
    trace_id: str
    timestamp: str
    type: str | None = None
    detail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dict in wire field order, suitable for JSON responses."""
        result: dict[str, Any] = {}
        if self.type is not None:
            result["type"] = self.type
        result["title"] = self.title
        result["status"] = self.status
        if self.detail is not None:
            result["detail"] = self.detail
        result["code"] = self.code
        result["traceId"] = self.trace_id
        result["timestamp"] = self.timestamp
        return result


def new_trace_id() -> str:
    """Generate a random 128-bit correlation identifier."""
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """Current UTC instant in ISO-8601 form with a ``Z`` suffix."""
    return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


def validate_problem_type(doc: str) -> str:
    """Return *doc* unchanged if it is a syntactically valid URI reference.

    Raises:
        InvalidProblemTypeException: If *doc* cannot be used as a ``type`` URI.
    """
    if not _URI_CHARS_RE.match(doc) or _BAD_PERCENT_RE.search(doc):
        raise InvalidProblemTypeException(doc)
    # a colon in the first segment can only terminate a scheme
    first_segment = re.split(r"[/?#]", doc, maxsplit=1)[0]
    if ":" in first_segment and not _SCHEME_RE.match(first_segment.split(":", 1)[0]):
        raise InvalidProblemTypeException(doc)
    try:
        urlsplit(doc)
    except ValueError as exc:
        raise InvalidProblemTypeException(doc) from exc
    return doc


def create_problem_detail(
    status: int,
    title: str,
    code: str,
    detail: str | None = None,
    doc: str | None = None,
    trace_id: str | None = None,
) -> ProblemDetail:
    """Create a problem detail.

    Args:
        status: HTTP status code.
        title: Short, human-readable summary.
        code: Business or technical error code.
        detail: Client-safe explanation, omitted when ``None``.
        doc: Documentation URI, used as ``type`` when non-blank.
        trace_id: Correlation id; a fresh one is generated when ``None``.

    Raises:
        InvalidProblemTypeException: If *doc* is not a valid URI.
    """
    problem_type = validate_problem_type(doc) if doc is not None and doc.strip() else None
    return ProblemDetail(
        type=problem_type,
        title=title,
        status=int(status),
        detail=detail,
        code=code,
        trace_id=trace_id if trace_id is not None else new_trace_id(),
        timestamp=utc_timestamp(),
    )


def create_generic_error(trace_id: str | None = None) -> ProblemDetail:
    """Internal server error without any exception-derived text."""
    return create_problem_detail(
        status=HTTPStatus.INTERNAL_SERVER_ERROR,
        title="Internal Server Error",
        detail=GENERIC_ERROR_DETAIL,
        code="INTERNAL_SERVER_ERROR",
        trace_id=trace_id,
    )


def create_validation_error(detail: str, trace_id: str | None = None) -> ProblemDetail:
    return create_problem_detail(
        status=HTTPStatus.BAD_REQUEST,
        title="Validation Error",
        detail=detail,
        code="VALIDATION_ERROR",
        trace_id=trace_id,
    )


def create_malformed_request_error(trace_id: str | None = None) -> ProblemDetail:
    return create_problem_detail(
        status=HTTPStatus.BAD_REQUEST,
        title="Malformed Request",
        detail=MALFORMED_REQUEST_DETAIL,
        code="MALFORMED_REQUEST",
        trace_id=trace_id,
    )


def create_data_integrity_error(trace_id: str | None = None) -> ProblemDetail:
    return create_problem_detail(
        status=HTTPStatus.CONFLICT,
        title="Data Conflict",
        detail=DATA_INTEGRITY_DETAIL,
        code="DATA_INTEGRITY_VIOLATION",
        trace_id=trace_id,
    )
