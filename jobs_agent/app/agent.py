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
"""Pipeline wiring for one device identity."""

from __future__ import annotations

import logging

from jobs_agent.app.application.job_document_processor import (
    CommandExecutor,
    JobDocumentProcessor,
)
from jobs_agent.app.application.job_notification_processor import (
    JobNotificationProcessor,
)
from jobs_agent.app.application.message_router import MessageRouter
from jobs_agent.app.application.parameter_resolver import ParameterResolver
from jobs_agent.app.application.status_reporter import (
    ACK_TIMEOUT_SECONDS,
    Launcher,
    StatusReporter,
    start_daemon_thread,
)
from jobs_agent.app.application.transport import Transport
from jobs_agent.app.domain.models import JobTopics
from jobs_agent.app.infrastructure.shell_command_executor import ShellCommandExecutor

logger = logging.getLogger(__name__)


class JobsAgent:
    """Builds the notify/fetch/execute/report pipeline over a transport."""

    def __init__(
        self,
        thing_name: str,
        transport: Transport,
        executor: CommandExecutor | None = None,
        resolver: ParameterResolver | None = None,
        ack_timeout: float = ACK_TIMEOUT_SECONDS,
        launcher: Launcher = start_daemon_thread,
    ):
        self.topics = JobTopics(thing_name=thing_name)
        self.transport = transport
        self.reporter = StatusReporter(
            topics=self.topics,
            transport=transport,
            ack_timeout=ack_timeout,
            launcher=launcher,
        )
        self.router = MessageRouter(
            topics=self.topics,
            notifications=JobNotificationProcessor(
                topics=self.topics, transport=transport, reporter=self.reporter
            ),
            documents=JobDocumentProcessor(
                executor=executor or ShellCommandExecutor(),
                reporter=self.reporter,
                resolver=resolver,
            ),
        )

    def start(self) -> None:
        """Subscribe the router to every jobs topic of this device."""
        logger.info(
            "Subscribing %s to %s", self.topics.thing_name, self.topics.subscription
        )
        self.transport.subscribe(self.topics.subscription, self.router.handle_message)
