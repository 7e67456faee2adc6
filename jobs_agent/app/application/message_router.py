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
"""Single entry point for inbound jobs messages."""

from __future__ import annotations

import logging

from jobs_agent.app.application.job_document_processor import JobDocumentProcessor
from jobs_agent.app.application.job_notification_processor import (
    JobNotificationProcessor,
)
from jobs_agent.app.application.transport import InboundMessage
from jobs_agent.app.domain.models import JobTopics

logger = logging.getLogger(__name__)


class MessageRouter:
    """Classifies topics and dispatches; holds no per-message state."""

    def __init__(
        self,
        topics: JobTopics,
        notifications: JobNotificationProcessor,
        documents: JobDocumentProcessor,
    ):
        self.topics = topics
        self.notifications = notifications
        self.documents = documents

    def handle_message(self, message: InboundMessage) -> None:
        """Route one delivery and always acknowledge it afterwards."""
        topic = message.topic
        try:
            self.route(topic, message.payload)
        except Exception:
            logger.exception("Unexpected error while handling message on %s", topic)
        finally:
            message.ack()

    def route(self, topic: str, payload: bytes) -> None:
        logger.info("Received message on topic: %s", topic)
        logger.debug("Payload: %r", payload)

        if self.topics.is_notification(topic):
            self.notifications.on_notification(payload)
        elif self.topics.is_job_response(topic):
            if topic.endswith("/get/accepted"):
                self.documents.on_document(payload)
            elif topic.endswith("/update/accepted"):
                logger.info("Job status update acknowledged: %s", topic)
            else:
                logger.info("Unhandled job-related message: %s", topic)
        else:
            logger.warning("Unknown message type on topic: %s", topic)
