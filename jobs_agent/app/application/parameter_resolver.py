# Copyright 2026 icecake0141
# SPDX-License-Identifier: Apache-2.0
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
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review required for correctness, security, and licensing.
"""Resolution of job parameter placeholders from the local environment."""

from __future__ import annotations

import os
import re
from typing import Mapping, Optional

PARAMETER_PATTERN = re.compile(r"\$\{aws:iot:parameter:([^}]+)\}")


class ParameterResolver:
    """Replaces ${aws:iot:parameter:<name>} with the value of env var NAME."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def resolve(self, text: str) -> str:
        """
        Substitute every placeholder in text.

        Args:
            text: Command or user name as written in the job document

        Returns:
            Text with placeholders replaced; unset variables become ""
        """
        if not text:
            return text
        environ = self.environ
        return PARAMETER_PATTERN.sub(
            lambda match: environ.get(match.group(1).upper(), ""), text
        )
