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
"""Tests for the agent CLI entrypoint."""

from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from jobs_agent.app.application.transport import TransportError
from jobs_agent.app.cli.main import main


def write_config(tmp_path: Path) -> Path:
    for name in ("device.crt", "device.key", "root.pem"):
        (tmp_path / name).write_text("pem", encoding="utf-8")
    path = tmp_path / "config.yaml"
    path.write_text(
        "\n".join(
            [
                "current_environment: dev",
                "environments:",
                "  dev:",
                "    thing_name: dev-device",
                "    iot_endpoint: broker.example.com",
                f"    cert_path: {tmp_path / 'device.crt'}",
                f"    key_path: {tmp_path / 'device.key'}",
                f"    root_ca_path: {tmp_path / 'root.pem'}",
            ]
        ),
        encoding="utf-8",
    )
    return path


@patch("jobs_agent.app.cli.main.wait_for_shutdown")
@patch("jobs_agent.app.cli.main.MqttTransport")
def test_main_subscribes_connects_and_closes(mock_transport_cls, mock_wait, tmp_path):
    config_path = write_config(tmp_path)

    result = CliRunner().invoke(main, ["--config", str(config_path)])

    assert result.exit_code == 0, result.output
    transport = mock_transport_cls.return_value
    assert mock_transport_cls.call_args.args[0].thing_name == "dev-device"
    assert transport.subscribe.call_args.args[0] == "$aws/things/dev-device/jobs/#"
    transport.connect.assert_called_once()
    mock_wait.assert_called_once()
    transport.close.assert_called_once()


def test_main_rejects_missing_config(tmp_path):
    result = CliRunner().invoke(main, ["--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_main_rejects_unknown_environment(tmp_path):
    config_path = write_config(tmp_path)

    result = CliRunner().invoke(main, ["--config", str(config_path), "--env", "prod"])

    assert result.exit_code == 1
    assert "environment prod does not exist" in result.output


@patch("jobs_agent.app.cli.main.wait_for_shutdown")
@patch("jobs_agent.app.cli.main.MqttTransport")
def test_main_reports_connection_failure(mock_transport_cls, mock_wait, tmp_path):
    config_path = write_config(tmp_path)
    mock_transport_cls.return_value.connect.side_effect = TransportError(
        "failed to connect: timed out"
    )

    result = CliRunner().invoke(main, ["--config", str(config_path)])

    assert result.exit_code == 1
    assert "failed to connect: timed out" in result.output
    mock_wait.assert_not_called()
