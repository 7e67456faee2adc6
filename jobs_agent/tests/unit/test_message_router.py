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
"""Unit tests for topic classification and acknowledgment."""

import logging

import pytest

from jobs_agent.app.application.message_router import MessageRouter
from jobs_agent.app.domain.models import JobTopics
from jobs_agent.app.infrastructure.in_memory_transport import InMemoryInboundMessage


class RecordingProcessor:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.payloads: list[bytes] = []

    def on_notification(self, payload: bytes) -> None:
        self._record(payload)

    def on_document(self, payload: bytes) -> None:
        self._record(payload)

    def _record(self, payload: bytes) -> None:
        self.payloads.append(payload)
        if self.fail:
            raise RuntimeError("processor exploded")


def build_router(fail: bool = False):
    notifications = RecordingProcessor(fail=fail)
    documents = RecordingProcessor(fail=fail)
    router = MessageRouter(
        topics=JobTopics(thing_name="dev-1"),
        notifications=notifications,
        documents=documents,
    )
    return router, notifications, documents


def test_notify_topic_goes_to_notification_processor():
    router, notifications, documents = build_router()

    router.route("$aws/things/dev-1/jobs/notify", b"{}")

    assert notifications.payloads == [b"{}"]
    assert documents.payloads == []


@pytest.mark.parametrize(
    "topic",
    [
        "$aws/things/dev-1/jobs/dev-1/jobs/j1/get/accepted",
        "$aws/things/dev-1/jobs/j1/get/accepted",
    ],
)
def test_get_accepted_goes_to_document_processor(topic):
    router, notifications, documents = build_router()

    router.route(topic, b"doc")

    assert documents.payloads == [b"doc"]
    assert notifications.payloads == []


def test_update_accepted_is_only_logged(caplog):
    router, notifications, documents = build_router()

    with caplog.at_level(logging.INFO):
        router.route("$aws/things/dev-1/jobs/j1/update/accepted", b"{}")

    assert notifications.payloads == [] and documents.payloads == []
    assert "Job status update acknowledged" in caplog.text


def test_other_job_suffix_is_unhandled(caplog):
    router, notifications, documents = build_router()

    with caplog.at_level(logging.INFO):
        router.route("$aws/things/dev-1/jobs/j1/update/rejected", b"{}")

    assert notifications.payloads == [] and documents.payloads == []
    assert "Unhandled job-related message" in caplog.text


def test_foreign_topic_is_unknown(caplog):
    router, notifications, documents = build_router()

    with caplog.at_level(logging.WARNING):
        router.route("$aws/things/other-device/jobs/j1/get/accepted", b"{}")
        router.route("sensors/temperature", b"21.5")

    assert notifications.payloads == [] and documents.payloads == []
    assert caplog.text.count("Unknown message type") == 2


@pytest.mark.parametrize(
    "topic",
    [
        "$aws/things/dev-1/jobs/notify",
        "$aws/things/dev-1/jobs/j1/get/accepted",
        "$aws/things/dev-1/jobs/j1/update/accepted",
        "somewhere/else",
    ],
)
def test_every_message_is_acknowledged(topic):
    router, _, _ = build_router()
    message = InMemoryInboundMessage(topic=topic, payload=b"garbage")

    router.handle_message(message)

    assert message.acked is True


def test_processor_exception_is_logged_and_message_acked(caplog):
    router, notifications, _ = build_router(fail=True)
    message = InMemoryInboundMessage(topic="$aws/things/dev-1/jobs/notify", payload=b"{}")

    with caplog.at_level(logging.ERROR):
        router.handle_message(message)

    assert notifications.payloads == [b"{}"]
    assert message.acked is True
    assert "Unexpected error while handling message" in caplog.text


@pytest.mark.parametrize(
    ("topic", "expected"),
    [
        ("$aws/things/dev-1/jobs/notify", True),
        ("prefix/jobs/notify", True),
        ("$aws/things/dev-1/jobs/notify-next", False),
        ("$aws/things/dev-1/jobs/j1/get/accepted", False),
    ],
)
def test_notification_topics_are_matched_by_suffix(topic, expected):
    assert JobTopics(thing_name="dev-1").is_notification(topic) is expected
