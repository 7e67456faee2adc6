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
"""Thread-safe in-memory transport for local wiring and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Optional

from jobs_agent.app.application.transport import (
    MessageHandler,
    Transport,
)


@dataclass(frozen=True)
class PublishedMessage:
    topic: str
    payload: str
    qos: int


@dataclass
class InMemoryPublishToken:
    """Token with a fixed outcome."""

    acknowledged: bool = True
    error: Optional[str] = None
    waits: list[float] = field(default_factory=list)

    def wait(self, timeout: float) -> bool:
        self.waits.append(timeout)
        return self.acknowledged


@dataclass
class InMemoryInboundMessage:
    topic: str
    payload: bytes
    acked: bool = False

    def ack(self) -> None:
        self.acked = True


def _topic_matches(pattern: str, topic: str) -> bool:
    """MQTT filter match supporting + and trailing #."""
    pattern_parts = pattern.split("/")
    topic_parts = topic.split("/")
    for index, part in enumerate(pattern_parts):
        if part == "#":
            return True
        if index >= len(topic_parts):
            return False
        if part != "+" and part != topic_parts[index]:
            return False
    return len(pattern_parts) == len(topic_parts)


class InMemoryTransport(Transport):
    """Records publishes and delivers injected messages to subscribers."""

    def __init__(self, acknowledged: bool = True, error: Optional[str] = None) -> None:
        self._lock = Lock()
        self._published: list[PublishedMessage] = []
        self._handlers: dict[str, MessageHandler] = {}
        self.acknowledged = acknowledged
        self.error = error
        self.tokens: list[InMemoryPublishToken] = []

    def subscribe(self, topic_pattern: str, handler: MessageHandler) -> None:
        with self._lock:
            self._handlers[topic_pattern] = handler

    def publish(self, topic: str, payload: str, qos: int = 1) -> InMemoryPublishToken:
        token = InMemoryPublishToken(acknowledged=self.acknowledged, error=self.error)
        with self._lock:
            self._published.append(
                PublishedMessage(topic=topic, payload=payload, qos=qos)
            )
            self.tokens.append(token)
        return token

    def deliver(self, topic: str, payload: bytes | str) -> InMemoryInboundMessage:
        """Hand one inbound message to every matching subscriber."""
        body = payload.encode("utf-8") if isinstance(payload, str) else payload
        message = InMemoryInboundMessage(topic=topic, payload=body)
        with self._lock:
            handlers = [
                handler
                for pattern, handler in self._handlers.items()
                if _topic_matches(pattern, topic)
            ]
        for handler in handlers:
            handler(message)
        return message

    def published(self, start_index: int = 0) -> list[PublishedMessage]:
        with self._lock:
            return list(self._published[start_index:])

    def subscriptions(self) -> list[str]:
        with self._lock:
            return list(self._handlers)
