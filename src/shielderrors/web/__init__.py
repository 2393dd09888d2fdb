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
"""Host framework wiring for Shield Errors.

The Starlette adapter is re-exported as the default.
"""

from shielderrors.web.adapters.starlette import problem_response, register_exception_handlers
from shielderrors.web.auto_configuration import auto_configure, build_exception_handler

__all__ = [
    "auto_configure",
    "build_exception_handler",
    "problem_response",
    "register_exception_handlers",
]
