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
"""Handling of job-queue notifications."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from jobs_agent.app.application.status_reporter import StatusReporter
from jobs_agent.app.application.transport import Transport
from jobs_agent.app.domain.messages import JobNotification
from jobs_agent.app.domain.models import JobStatus, JobTopics, QUEUED_BUCKET

logger = logging.getLogger(__name__)

DOCUMENT_REQUEST_PAYLOAD = "{}"


class JobNotificationProcessor:
    """Marks each newly queued job in progress and asks for its document."""

    def __init__(
        self, topics: JobTopics, transport: Transport, reporter: StatusReporter
    ):
        self.topics = topics
        self.transport = transport
        self.reporter = reporter

    def on_notification(self, payload: bytes) -> None:
        try:
            notification = JobNotification.model_validate_json(payload)
        except ValidationError as e:
            logger.error("Failed to parse job notification: %s", e)
            return

        queued = notification.bucket(QUEUED_BUCKET)
        if not queued:
            logger.info("No QUEUED jobs to process")
            return

        # Sequential and unbounded: no guard against a job id seen twice.
        for summary in queued:
            logger.info("Processing QUEUED job: %s", summary.job_id)
            self.reporter.report(summary.job_id, JobStatus.IN_PROGRESS, "Job started")
            self.request_job_document(summary.job_id)

    def request_job_document(self, job_id: str) -> None:
        topic = self.topics.get(job_id)
        try:
            token = self.transport.publish(topic, DOCUMENT_REQUEST_PAYLOAD, qos=1)
        except Exception:
            logger.exception("Failed to request job document for %s", job_id)
            return
        # The ack cannot be awaited here: this runs on the broker delivery thread.
        if token.error:
            logger.error(
                "Failed to request job document for %s: %s", job_id, token.error
            )
