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
"""paho-mqtt transport adapter with mutual TLS."""

from __future__ import annotations

import logging
import ssl
from threading import Lock
from typing import Any, Optional

import paho.mqtt.client as mqtt

from jobs_agent.app.application.transport import (
    MessageHandler,
    PublishToken,
    Transport,
    TransportError,
)
from jobs_agent.app.infrastructure.config_loader import EnvironmentConfig

logger = logging.getLogger(__name__)

BROKER_PORT = 8883
KEEPALIVE_SECONDS = 30
RECONNECT_MIN_DELAY = 1
RECONNECT_MAX_DELAY = 120


class MqttPublishToken(PublishToken):
    """Wraps paho's MQTTMessageInfo."""

    def __init__(self, info: mqtt.MQTTMessageInfo):
        self._info = info
        self._error: Optional[str] = None
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self._error = mqtt.error_string(info.rc)

    @property
    def error(self) -> Optional[str]:
        return self._error

    def wait(self, timeout: float) -> bool:
        try:
            self._info.wait_for_publish(timeout=timeout)
        except (RuntimeError, ValueError) as e:
            self._error = str(e)
            return False
        return self._info.is_published()


class MqttInboundMessage:
    """Delivered message acknowledged through the client's manual ack."""

    def __init__(self, client: mqtt.Client, message: mqtt.MQTTMessage):
        self._client = client
        self._message = message

    @property
    def topic(self) -> str:
        return self._message.topic

    @property
    def payload(self) -> bytes:
        return self._message.payload

    def ack(self) -> None:
        if self._message.qos > 0:
            self._client.ack(self._message.mid, self._message.qos)


class MqttTransport(Transport):
    """Connects to the broker and re-subscribes on every (re)connect."""

    def __init__(self, env: EnvironmentConfig, client: Optional[mqtt.Client] = None):
        self.env = env
        self._lock = Lock()
        self._subscriptions: dict[str, MessageHandler] = {}
        self.client = client or mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=env.thing_name,
            manual_ack=True,
        )
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

    def configure_tls(self) -> None:
        logger.info(
            "Using certificates: Root CA: %s, Device Cert: %s, Private Key: %s",
            self.env.root_ca_path,
            self.env.cert_path,
            self.env.key_path,
        )
        context = ssl.create_default_context(
            ssl.Purpose.SERVER_AUTH, cafile=self.env.root_ca_path
        )
        context.minimum_version = ssl.TLSVersion.TLSv1_2
        context.load_cert_chain(certfile=self.env.cert_path, keyfile=self.env.key_path)
        self.client.tls_set_context(context)

    def connect(self) -> None:
        """Open the TLS session and start paho's network loop."""
        try:
            self.configure_tls()
            self.client.reconnect_delay_set(
                min_delay=RECONNECT_MIN_DELAY, max_delay=RECONNECT_MAX_DELAY
            )
            self.client.connect(
                self.env.iot_endpoint, BROKER_PORT, keepalive=KEEPALIVE_SECONDS
            )
        except (OSError, ssl.SSLError, ValueError) as e:
            raise TransportError(f"failed to connect: {e}") from e
        self.client.loop_start()

    def close(self) -> None:
        self.client.disconnect()
        self.client.loop_stop()
        logger.info("Disconnected from MQTT broker")

    def subscribe(self, topic_pattern: str, handler: MessageHandler) -> None:
        with self._lock:
            self._subscriptions[topic_pattern] = handler
        self.client.message_callback_add(topic_pattern, self._dispatcher(handler))
        if self.client.is_connected():
            self._subscribe_now(topic_pattern)

    def publish(self, topic: str, payload: str, qos: int = 1) -> MqttPublishToken:
        info = self.client.publish(topic, payload, qos=qos, retain=False)
        return MqttPublishToken(info)

    def _dispatcher(self, handler: MessageHandler):
        def on_message(client: mqtt.Client, userdata: Any, message: mqtt.MQTTMessage):
            handler(MqttInboundMessage(client, message))

        return on_message

    def _subscribe_now(self, topic_pattern: str) -> None:
        logger.info("Subscribing to %s", topic_pattern)
        result, _ = self.client.subscribe(topic_pattern, qos=1)
        if result != mqtt.MQTT_ERR_SUCCESS:
            logger.error(
                "Error subscribing to %s: %s", topic_pattern, mqtt.error_string(result)
            )

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            logger.error("Connection refused by broker: %s", reason_code)
            return
        logger.info("Connected to %s", self.env.iot_endpoint)
        with self._lock:
            patterns = list(self._subscriptions)
        for pattern in patterns:
            self._subscribe_now(pattern)

    def _on_disconnect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            logger.warning("Connection lost: %s", reason_code)
        else:
            logger.info("Disconnected: %s", reason_code)
