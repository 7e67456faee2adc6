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
"""CLI entrypoint for the jobs agent."""

import logging
import signal
import threading
from pathlib import Path
from typing import Optional

import click

from jobs_agent.app.agent import JobsAgent
from jobs_agent.app.application.transport import TransportError
from jobs_agent.app.infrastructure.config_loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    load_config,
)
from jobs_agent.app.infrastructure.mqtt_transport import MqttTransport

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)


def wait_for_shutdown() -> None:
    """Block until SIGINT or SIGTERM."""
    stop = threading.Event()

    def handle_signal(signum, frame):
        del frame
        logger.info("Received signal %s", signal.Signals(signum).name)
        stop.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)
    stop.wait()


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to config file.",
)
@click.option("--env", "env_name", default=None, help="Override environment name.")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="INFO",
    show_default=True,
)
def main(config_path: Path, env_name: Optional[str], log_level: str) -> None:
    """Run the device-side jobs agent until interrupted."""
    configure_logging(log_level)
    try:
        env = load_config(config_path).get_current_environment(env_name)
        env.validate_settings()
    except ConfigError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    transport = MqttTransport(env)
    agent = JobsAgent(thing_name=env.thing_name, transport=transport)
    agent.start()
    try:
        transport.connect()
    except TransportError as e:
        raise click.ClickException(str(e)) from e

    logger.info("IoT Agent started. Press CTRL+C to exit")
    try:
        wait_for_shutdown()
    finally:
        logger.info("Shutting down...")
        transport.close()


if __name__ == "__main__":
    main()
