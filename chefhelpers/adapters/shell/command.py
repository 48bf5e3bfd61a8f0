"""
Shell command runner: execute command lines through the system shell.

Commands are run through the shell because helpers rely on shell
features such as output redirection (``knife ... > env.json``).
"""

from __future__ import annotations

import logging
import subprocess
import time

from chefhelpers.adapters.base import ProcessRunner
from chefhelpers.core.models.receipt import Receipt, utc_now_iso

logger = logging.getLogger(__name__)


class ShellCommandRunner(ProcessRunner):
    """Run commands and capture their output.

    Args:
        timeout: Seconds to wait for each command (default: 300).
        cwd: Working directory for the commands (default: current).
    """

    def __init__(self, timeout: int = 300, cwd: str | None = None):
        self._timeout = timeout
        self._cwd = cwd

    @property
    def name(self) -> str:
        return "shell"

    def execute(self, command: str) -> Receipt:
        logger.debug("Executing: %s (cwd=%s)", command, self._cwd)
        started_at = utc_now_iso()
        start = time.monotonic()

        try:
            result = subprocess.run(
                command,
                shell=True,
                cwd=self._cwd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )

            elapsed_ms = int((time.monotonic() - start) * 1000)
            output = result.stdout.strip()
            stderr = result.stderr.strip()

            if result.returncode == 0:
                return Receipt.success(
                    source=self.name,
                    step=command,
                    started_at=started_at,
                    output=output,
                    duration_ms=elapsed_ms,
                    metadata={
                        "return_code": result.returncode,
                        "stderr": stderr,
                    },
                )
            return Receipt.failure(
                source=self.name,
                step=command,
                started_at=started_at,
                error=stderr or f"Command exited with code {result.returncode}",
                duration_ms=elapsed_ms,
                metadata={
                    "return_code": result.returncode,
                    "stdout": output,
                },
            )

        except subprocess.TimeoutExpired:
            return Receipt.failure(
                source=self.name,
                step=command,
                started_at=started_at,
                error=f"Command timed out after {self._timeout}s",
                metadata={"timeout": self._timeout},
            )
        except OSError as e:
            return Receipt.failure(
                source=self.name,
                step=command,
                started_at=started_at,
                error=f"Command execution error: {e}",
            )
