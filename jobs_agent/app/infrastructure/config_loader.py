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
"""YAML configuration with named environments."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

DEFAULT_CONFIG_PATH = "configs/config.yaml"
REQUIRED_FIELDS = (
    "thing_name",
    "iot_endpoint",
    "cert_path",
    "key_path",
    "root_ca_path",
)
CERTIFICATE_FIELDS = ("cert_path", "key_path", "root_ca_path")


class ConfigError(ValueError):
    """Raised for unreadable, unknown or incomplete configuration."""


class CommonConfig(BaseModel):
    """Settings shared by every environment."""

    polling_interval: int = 0
    region: str = ""

    def merge(self, other: CommonConfig) -> CommonConfig:
        """Return a copy where non-empty values from other win."""
        return CommonConfig(
            polling_interval=other.polling_interval or self.polling_interval,
            region=other.region or self.region,
        )


class EnvironmentConfig(CommonConfig):
    """Connection settings for one device environment."""

    thing_name: str = ""
    iot_endpoint: str = ""
    cert_path: str = ""
    key_path: str = ""
    root_ca_path: str = ""

    def validate_settings(self) -> None:
        """Raise ConfigError if a required value or certificate file is missing."""
        for name in REQUIRED_FIELDS:
            if not getattr(self, name):
                raise ConfigError(f"{name} must be set")
        for name in CERTIFICATE_FIELDS:
            path = Path(getattr(self, name))
            if not path.exists():
                raise ConfigError(f"certificate file {path} does not exist")


class AgentConfig(BaseModel):
    """Top-level configuration file."""

    common: CommonConfig = Field(default_factory=CommonConfig)
    environments: Dict[str, EnvironmentConfig] = Field(default_factory=dict)
    current_environment: str = ""

    def get_current_environment(
        self, override: Optional[str] = None
    ) -> EnvironmentConfig:
        """
        Select an environment and merge the common section into it.

        Args:
            override: Environment name taking precedence over current_environment

        Returns:
            Environment settings with common defaults applied
        """
        name = override or self.current_environment
        env = self.environments.get(name)
        if env is None:
            raise ConfigError(f"environment {name} does not exist")
        merged = self.common.merge(env)
        return env.model_copy(update=merged.model_dump())


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> AgentConfig:
    """Read and parse a YAML configuration file."""
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file: {e}") from e
    try:
        data = yaml.safe_load(raw) or {}
        return AgentConfig.model_validate(data)
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigError(f"failed to parse config file: {e}") from e
