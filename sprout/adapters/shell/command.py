"""
Shell command adapter — run external commands and capture their output.

This is the most fundamental adapter (the command runner): git and the
toolchain builders are built on top of it. Commands are always argument
lists, never shell strings.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path

from sprout.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter:
    """Execute commands and turn the outcome into a Receipt.

    Args:
        timeout: Seconds before a captured command is abandoned.
            ``None`` (default) lets builds run to completion.
    """

    def __init__(self, timeout: int | None = None):
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "shell"

    def run(
        self,
        cmd: list[str],
        cwd: Path | None = None,
        verbose: bool = False,
        adapter: str | None = None,
        operation: str | None = None,
    ) -> Receipt:
        """Run ``cmd`` to completion.

        In verbose mode the child's output goes straight to the terminal
        and only the exit status is recorded.
        """
        adapter = adapter or self.name
        operation = operation or cmd[0]
        command = " ".join(cmd)

        logger.debug("Executing: %s (cwd=%s)", command, cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=not verbose,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=adapter,
                operation=operation,
                error=f"Command timed out after {self._timeout}s",
                metadata={"command": command, "timeout": self._timeout},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=adapter,
                operation=operation,
                error=f"Command execution error: {e}",
                metadata={"command": command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=adapter,
                operation=operation,
                output=output,
                duration_ms=elapsed_ms,
                metadata={
                    "command": command,
                    "return_code": result.returncode,
                    "stderr": stderr,
                },
            )

        logger.debug("Command failed (exit %d): %s", result.returncode, command)
        return Receipt.failure(
            adapter=adapter,
            operation=operation,
            error=stderr or output or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={
                "command": command,
                "return_code": result.returncode,
                "stdout": output,
            },
        )

    def run_interactive(
        self,
        cmd: list[str],
        env_overrides: dict[str, str] | None = None,
    ) -> int:
        """Run ``cmd`` attached to the caller's terminal and return its exit code."""
        env = os.environ.copy()
        if env_overrides:
            env.update(env_overrides)

        logger.debug("Running interactively: %s", " ".join(cmd))
        try:
            return subprocess.run(cmd, env=env).returncode
        except OSError as e:
            logger.error("Cannot execute %s: %s", cmd[0], e)
            return 127
