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
"""Shell-based command executor for job steps."""

from __future__ import annotations

import logging
import signal
import subprocess
from typing import List

from jobs_agent.app.application.job_document_processor import CommandExecutor
from jobs_agent.app.domain.models import CommandResult

logger = logging.getLogger(__name__)

SHELL = "sh"
SUDO = "sudo"


def build_argv(command: str, run_as_user: str = "") -> List[str]:
    """
    Build the process argv for a step.

    The command string is handed to the shell untouched, so job documents get
    full shell syntax (pipes, redirects, expansions).

    Args:
        command: Resolved command text
        run_as_user: Local user to run as; empty means the agent's own user

    Returns:
        Argument vector for subprocess
    """
    argv = [SHELL, "-c", command]
    if run_as_user:
        return [SUDO, "-u", run_as_user, *argv]
    return argv


def describe_exit(returncode: int) -> str:
    """Render a non-zero return code; negative codes mean a fatal signal."""
    if returncode >= 0:
        return f"exit status {returncode}"
    try:
        return f"signal {signal.Signals(-returncode).name}"
    except ValueError:
        return f"signal {-returncode}"


class ShellCommandExecutor(CommandExecutor):
    """Runs commands through sh -c with combined stdout/stderr capture."""

    def execute(self, command: str, run_as_user: str = "") -> CommandResult:
        argv = build_argv(command, run_as_user)
        if run_as_user:
            logger.info("Executing command as %s: %s", run_as_user, command)
        else:
            logger.info("Executing command: %s", command)
        try:
            # No timeout: a hung command blocks its job until it exits.
            completed = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except OSError as e:
            return CommandResult(status="failed", error=f"failed to start: {e}")

        output = completed.stdout.decode("utf-8", errors="replace")
        if completed.returncode != 0:
            return CommandResult(
                status="failed",
                output=output,
                error=f"{describe_exit(completed.returncode)}: {output}",
                returncode=completed.returncode,
            )
        return CommandResult(status="success", output=output, returncode=0)
