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
"""Job status publication with detached acknowledgment wait."""

from __future__ import annotations

import logging
from threading import Thread
from typing import Callable

from jobs_agent.app.application.transport import PublishToken, Transport
from jobs_agent.app.domain.messages import StatusUpdate
from jobs_agent.app.domain.models import JobStatus, JobTopics

logger = logging.getLogger(__name__)

ACK_TIMEOUT_SECONDS = 5.0

Launcher = Callable[[Callable[[], None]], None]


def start_daemon_thread(target: Callable[[], None]) -> None:
    """Run target on a background thread nobody joins."""
    Thread(target=target, daemon=True).start()


class StatusReporter:
    """Publishes {status, statusDetails} to a job's update topic."""

    def __init__(
        self,
        topics: JobTopics,
        transport: Transport,
        ack_timeout: float = ACK_TIMEOUT_SECONDS,
        launcher: Launcher = start_daemon_thread,
    ):
        self.topics = topics
        self.transport = transport
        self.ack_timeout = ack_timeout
        self.launcher = launcher

    def report(self, job_id: str, status: JobStatus | str, details: str) -> None:
        """Publish a status update; delivery problems are only logged."""
        status_value = status.value if isinstance(status, JobStatus) else status
        topic = self.topics.update(job_id)
        payload = StatusUpdate.build(status_value, details).to_payload()
        try:
            token = self.transport.publish(topic, payload, qos=1)
        except Exception:
            logger.exception(
                "Failed to publish status %s for job %s", status_value, job_id
            )
            return
        self.launcher(lambda: self._await_ack(job_id, status_value, token))

    def _await_ack(self, job_id: str, status: str, token: PublishToken) -> None:
        try:
            delivered = token.wait(self.ack_timeout)
        except Exception as e:
            logger.error(
                "Failed to publish status %s for job %s: %s", status, job_id, e
            )
            return
        if token.error:
            logger.error(
                "Failed to publish status %s for job %s: %s",
                status,
                job_id,
                token.error,
            )
        elif not delivered:
            logger.warning(
                "Status %s for job %s not acknowledged within %.1fs",
                status,
                job_id,
                self.ack_timeout,
            )
        else:
            logger.debug("Status %s for job %s acknowledged", status, job_id)
