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
"""Broker transport contracts consumed by the jobs pipeline."""

from __future__ import annotations

from typing import Callable, Protocol


class TransportError(RuntimeError):
    """Raised when the broker connection cannot be established."""


class PublishToken(Protocol):
    """Handle for one outbound publish."""

    @property
    def error(self) -> str | None:
        """Delivery error, if one is known at this point."""

    def wait(self, timeout: float) -> bool:
        """Block up to timeout seconds; True once the broker acknowledged."""


class InboundMessage(Protocol):
    """Message delivered by the broker."""

    @property
    def topic(self) -> str:
        """Topic the message arrived on."""

    @property
    def payload(self) -> bytes:
        """Raw message body."""

    def ack(self) -> None:
        """Acknowledge delivery to the broker."""


MessageHandler = Callable[[InboundMessage], None]


class Transport(Protocol):
    """Publish/subscribe connection shared by all pipeline stages."""

    def subscribe(self, topic_pattern: str, handler: MessageHandler) -> None:
        """Register handler for topic_pattern (re-applied on reconnect)."""

    def publish(self, topic: str, payload: str, qos: int = 1) -> PublishToken:
        """Queue one message and return its delivery token."""
