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
"""Extraction of effective error metadata from exception instances."""

from __future__ import annotations

from dataclasses import dataclass

from shielderrors.annotations import find_error_code

DEFAULT_TITLE = "An error occurred"


@dataclass(frozen=True)
class ExceptionMetadata:
    """Metadata resolved for one raised exception."""

    code: str
    status: int
    doc: str
    title: str


def extract_metadata(exception: BaseException) -> ExceptionMetadata | None:
    """Resolve the declared metadata of *exception*'s class.

    Returns ``None`` when the class carries no declaration. The title
    falls back to the exception message, then to a generic string.
    """
    declared = find_error_code(type(exception))
    if declared is None:
        return None

    if declared.title.strip():
        title = declared.title
    else:
        message = str(exception)
        title = message if message.strip() else DEFAULT_TITLE

    return ExceptionMetadata(
        code=declared.code,
        status=declared.status,
        doc=declared.doc,
        title=title,
    )


def has_error_code(exception: BaseException) -> bool:
    """Whether *exception*'s class declares error metadata."""
    return extract_metadata(exception) is not None
