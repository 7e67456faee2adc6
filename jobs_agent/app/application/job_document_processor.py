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
"""Job document execution with fail-fast step ordering."""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import ValidationError

from jobs_agent.app.application.parameter_resolver import ParameterResolver
from jobs_agent.app.application.status_reporter import StatusReporter
from jobs_agent.app.domain.messages import JobDocumentResponse
from jobs_agent.app.domain.models import (
    CommandResult,
    JobExecutionResult,
    JobStatus,
    RUN_COMMAND_ACTION,
)

logger = logging.getLogger(__name__)

SUCCESS_DETAILS = "All steps executed"


class CommandExecutor(Protocol):
    """Runs one shell command (shell adapter lives in infrastructure)."""

    def execute(self, command: str, run_as_user: str = "") -> CommandResult:
        """Execute command, optionally as another local user."""


class JobDocumentProcessor:
    """Runs the steps of a fetched job document and reports the outcome."""

    def __init__(
        self,
        executor: CommandExecutor,
        reporter: StatusReporter,
        resolver: ParameterResolver | None = None,
    ):
        self.executor = executor
        self.reporter = reporter
        self.resolver = resolver or ParameterResolver()

    def on_document(self, payload: bytes) -> JobExecutionResult | None:
        """Execute the document in payload; None when it cannot be parsed."""
        try:
            response = JobDocumentResponse.model_validate_json(payload)
        except ValidationError as e:
            logger.error("Failed to parse job document: %s", e)
            return None

        execution = response.execution
        logger.info("Processing job document for: %s", execution.job_id)

        error: str | None = None
        for index, step in enumerate(execution.job_document.steps, start=1):
            action = step.action
            if action.type != RUN_COMMAND_ACTION:
                logger.info("Skipping step %d with action type: %s", index, action.type)
                continue

            command = self.resolver.resolve(action.input.command)
            run_as_user = self.resolver.resolve(action.run_as_user)
            result = self.executor.execute(command, run_as_user)
            if not result.ok:
                error = result.error or "command failed"
                logger.error(
                    "Step %d (%s) failed: %s, Output: %s",
                    index,
                    action.name,
                    error,
                    result.output,
                )
                break
            logger.info("Command executed successfully: %s", result.output)

        if error is None:
            outcome = JobExecutionResult(
                job_id=execution.job_id,
                status=JobStatus.SUCCEEDED,
                details=SUCCESS_DETAILS,
            )
        else:
            outcome = JobExecutionResult(
                job_id=execution.job_id,
                status=JobStatus.FAILED,
                details=f"Error: {error}",
            )
        self.reporter.report(outcome.job_id, outcome.status, outcome.details)
        return outcome
