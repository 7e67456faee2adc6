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
"""Domain models for the jobs agent."""

from dataclasses import dataclass
from typing import Optional
from enum import Enum

RUN_COMMAND_ACTION = "runCommand"
QUEUED_BUCKET = "QUEUED"
NOTIFY_SUFFIX = "/jobs/notify"


class JobStatus(str, Enum):
    """Execution states reported to the orchestrator."""

    IN_PROGRESS = "IN_PROGRESS"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class JobTopics:
    """Topic addresses derived from one device identity."""

    thing_name: str

    @property
    def prefix(self) -> str:
        return f"$aws/things/{self.thing_name}/jobs"

    @property
    def subscription(self) -> str:
        """Wildcard filter covering every jobs topic for this device."""
        return f"{self.prefix}/#"

    @property
    def response_marker(self) -> str:
        """Path fragment that marks job-specific response topics."""
        return f"/jobs/{self.thing_name}/jobs/"

    def get(self, job_id: str) -> str:
        return f"{self.prefix}/{job_id}/get"

    def update(self, job_id: str) -> str:
        return f"{self.prefix}/{job_id}/update"

    def is_notification(self, topic: str) -> bool:
        """True for job-queue notifications, matched by topic suffix."""
        return topic.endswith(NOTIFY_SUFFIX)

    def is_job_response(self, topic: str) -> bool:
        """True for per-job reply topics (get/update accepted and friends)."""
        return self.response_marker in topic or topic.startswith(f"{self.prefix}/")


@dataclass(frozen=True)
class JobExecutionResult:
    """Outcome of one processed job document."""

    job_id: str
    status: JobStatus
    details: str


@dataclass
class CommandResult:
    """Result for one shell command."""

    status: str
    output: str = ""
    error: Optional[str] = None
    returncode: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"
