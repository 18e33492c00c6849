"""External process execution.

Everything that spawns a process goes through a Runner so that the build
logic can be tested with a fake that records commands.
"""

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class RunResult:
    """Outcome of a finished process."""

    stdout: str
    returncode: int
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Runner(Protocol):
    """Runs a command to completion and captures its output."""

    def run(self, args: Sequence[str], *, env: Mapping[str, str] | None = None) -> RunResult:
        ...


class SubprocessRunner:
    """Runner backed by subprocess.run.

    Args:
        timeout: Seconds before the process is killed, or None to wait forever
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def run(self, args: Sequence[str], *, env: Mapping[str, str] | None = None) -> RunResult:
        """Run ``args`` with ``env`` layered over the current environment.

        Raises:
            FileNotFoundError: If the executable does not exist
            subprocess.TimeoutExpired: If the timeout elapses
        """
        full_env = None
        if env:
            full_env = {**os.environ, **env}

        result = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            env=full_env,
            timeout=self.timeout,
        )
        return RunResult(stdout=result.stdout, returncode=result.returncode, stderr=result.stderr)
