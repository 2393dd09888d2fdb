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
"""Error enums and value types shared across Shield Errors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """The handling path an exception is routed to."""

    ANNOTATED = "ANNOTATED"
    VALIDATION = "VALIDATION"
    MALFORMED_REQUEST = "MALFORMED_REQUEST"
    DATA_INTEGRITY = "DATA_INTEGRITY"
    GENERIC = "GENERIC"


@dataclass(frozen=True)
class FieldError:
    """Describes a validation error on a single field."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"
