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
"""Wire schemas for the jobs topics.

Inbound models are lenient: missing or null fields fall back to empty
defaults and unknown fields are ignored. Only what the agent cannot act
without (the job id of a document response) is required.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class WireModel(BaseModel):
    """Base for camelCase payloads."""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        """Treat an explicit JSON null like an absent field."""
        if value is not None:
            return value
        field = cls.model_fields[info.field_name]
        if field.is_required():
            return value
        return field.get_default(call_default_factory=True)


class JobSummary(WireModel):
    """One entry of a notification status bucket."""

    job_id: str = Field(default="", alias="jobId")
    queued_at: int = Field(default=0, alias="queuedAt")
    last_updated_at: int = Field(default=0, alias="lastUpdatedAt")
    execution_number: int = Field(default=0, alias="executionNumber")
    version_number: int = Field(default=0, alias="versionNumber")


class JobNotification(WireModel):
    """Payload published on the notify topic."""

    timestamp: int = 0
    jobs: Dict[str, Optional[List[JobSummary]]] = Field(default_factory=dict)

    def bucket(self, status: str) -> List[JobSummary]:
        return self.jobs.get(status) or []


class ActionInput(WireModel):
    command: str = ""


class Action(WireModel):
    """Single executable action of a step."""

    name: str = ""
    type: str = ""
    input: ActionInput = Field(default_factory=ActionInput)
    run_as_user: str = Field(default="", alias="runAsUser")


class Step(WireModel):
    action: Action = Field(default_factory=Action)


class JobDocument(WireModel):
    """Ordered steps to run for a job."""

    version: str = ""
    steps: List[Step] = Field(default_factory=list)


class JobExecution(WireModel):
    job_id: str = Field(alias="jobId", min_length=1)
    status: str = ""
    job_document: JobDocument = Field(default_factory=JobDocument, alias="jobDocument")


class JobDocumentResponse(WireModel):
    """Payload delivered on a job's get/accepted topic."""

    execution: JobExecution


class StatusDetails(WireModel):
    details: str


class StatusUpdate(WireModel):
    """Body published on a job's update topic."""

    status: str
    status_details: StatusDetails = Field(alias="statusDetails")

    @classmethod
    def build(cls, status: str, details: str) -> StatusUpdate:
        return cls(status=status, status_details=StatusDetails(details=details))

    def to_payload(self) -> str:
        return self.model_dump_json(by_alias=True)
