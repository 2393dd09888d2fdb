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
"""Converts any exception into an RFC 7807 problem detail."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from shielderrors.classifier import ExceptionClassifier, field_errors_of
from shielderrors.kernel.types import ErrorKind
from shielderrors.metadata import extract_metadata
from shielderrors.problem_detail import (
    ProblemDetail,
    create_data_integrity_error,
    create_generic_error,
    create_malformed_request_error,
    create_problem_detail,
    create_validation_error,
    new_trace_id,
)
from shielderrors.sanitizer import DetailSanitizer

ProblemResult = tuple[int, ProblemDetail]


class GlobalExceptionHandler:
    """Turns any exception into a ``(status, ProblemDetail)`` pair.

    One entry point exists per handling path so a host framework can wire
    each of its exception kinds explicitly; :meth:`handle` classifies and
    dispatches on its own. Every path logs the occurrence once, with the
    trace id and the raw exception message. Only the annotated path puts
    exception text in the response, after redaction.

    Args:
        sanitizer: Redaction applied to annotated exception messages.
        trace_id_generator: Returns a fresh correlation id per call.
        logger: structlog-style logger; defaults to ``shielderrors``.
        classifier: Decides the path taken by :meth:`handle`.
    """

    def __init__(
        self,
        sanitizer: DetailSanitizer | None = None,
        trace_id_generator: Callable[[], str] = new_trace_id,
        logger: Any = None,
        classifier: ExceptionClassifier | None = None,
    ) -> None:
        self._sanitizer = sanitizer or DetailSanitizer()
        self._new_trace_id = trace_id_generator
        self._logger = logger if logger is not None else structlog.get_logger("shielderrors")
        self._classifier = classifier or ExceptionClassifier()
        self._handlers: dict[ErrorKind, Callable[[BaseException], ProblemResult]] = {
            ErrorKind.ANNOTATED: self.handle_annotated_exception,
            ErrorKind.VALIDATION: self.handle_validation_exception,
            ErrorKind.MALFORMED_REQUEST: self.handle_malformed_request_exception,
            ErrorKind.DATA_INTEGRITY: self.handle_data_integrity_violation,
            ErrorKind.GENERIC: self.handle_generic_exception,
        }

    def handle(self, exc: BaseException) -> ProblemResult:
        """Classify *exc* and run the matching handling path."""
        return self._handlers[self._classifier.classify(exc)](exc)

    def handle_annotated_exception(self, exc: BaseException) -> ProblemResult:
        """Domain exception with declared metadata; falls back to generic without it."""
        trace_id = self._new_trace_id()
        metadata = extract_metadata(exc)
        if metadata is None:
            return self.handle_generic_exception(exc, trace_id=trace_id)

        self._logger.warning(
            "annotated_exception",
            trace_id=trace_id,
            code=metadata.code,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        problem = create_problem_detail(
            status=metadata.status,
            title=metadata.title,
            detail=self._sanitizer.sanitize(str(exc) or None),
            code=metadata.code,
            doc=metadata.doc if metadata.doc.strip() else None,
            trace_id=trace_id,
        )
        return problem.status, problem

    def handle_validation_exception(self, exc: BaseException) -> ProblemResult:
        trace_id = self._new_trace_id()
        self._logger.warning(
            "validation_exception",
            trace_id=trace_id,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        failures = "; ".join(str(fe) for fe in field_errors_of(exc))
        problem = create_validation_error(detail=f"Validation failed: {failures}", trace_id=trace_id)
        return problem.status, problem

    def handle_malformed_request_exception(self, exc: BaseException) -> ProblemResult:
        trace_id = self._new_trace_id()
        self._logger.warning(
            "malformed_request",
            trace_id=trace_id,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        problem = create_malformed_request_error(trace_id=trace_id)
        return problem.status, problem

    def handle_data_integrity_violation(self, exc: BaseException) -> ProblemResult:
        trace_id = self._new_trace_id()
        self._logger.error(
            "data_integrity_violation",
            trace_id=trace_id,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        problem = create_data_integrity_error(trace_id=trace_id)
        return problem.status, problem

    def handle_generic_exception(self, exc: BaseException, trace_id: str | None = None) -> ProblemResult:
        """Unclassified failure; nothing about *exc* reaches the client."""
        trace_id = trace_id if trace_id is not None else self._new_trace_id()
        self._logger.error(
            "unhandled_exception",
            trace_id=trace_id,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        problem = create_generic_error(trace_id=trace_id)
        return problem.status, problem
