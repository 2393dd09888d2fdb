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
"""RFC 7807 problem details for Starlette and FastAPI services.

Declare error metadata on domain exceptions, and let the global exception
handler turn anything raised while serving a request into an
``application/problem+json`` response without leaking internals.
"""

from shielderrors.annotations import ErrorCode, error_code, find_error_code, register_error_code
from shielderrors.classifier import ExceptionClassifier, classify, field_errors_of
from shielderrors.handler import GlobalExceptionHandler
from shielderrors.kernel import (
    DataIntegrityViolationException,
    ErrorKind,
    FieldError,
    InvalidProblemTypeException,
    MalformedRequestException,
    RequestValidationException,
    ShieldErrorsException,
)
from shielderrors.metadata import ExceptionMetadata, extract_metadata, has_error_code
from shielderrors.problem_detail import (
    ProblemDetail,
    create_data_integrity_error,
    create_generic_error,
    create_malformed_request_error,
    create_problem_detail,
    create_validation_error,
    new_trace_id,
)
from shielderrors.sanitizer import DetailSanitizer, sanitize_detail

__version__ = "0.1.0"

__all__ = [
    # Declaration
    "ErrorCode",
    "error_code",
    "find_error_code",
    "register_error_code",
    # Extraction
    "ExceptionMetadata",
    "extract_metadata",
    "has_error_code",
    # Builder
    "ProblemDetail",
    "create_problem_detail",
    "create_generic_error",
    "create_validation_error",
    "create_malformed_request_error",
    "create_data_integrity_error",
    "new_trace_id",
    # Dispatch
    "DetailSanitizer",
    "ExceptionClassifier",
    "GlobalExceptionHandler",
    "classify",
    "field_errors_of",
    "sanitize_detail",
    # Kernel
    "ErrorKind",
    "FieldError",
    "ShieldErrorsException",
    "RequestValidationException",
    "MalformedRequestException",
    "DataIntegrityViolationException",
    "InvalidProblemTypeException",
]
