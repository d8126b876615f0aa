"""Results of runc invocations and the executors that run them."""

from __future__ import annotations

import abc
import enum
import os
import subprocess
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidCommandError, ProcessSpawnError
from .io import Command


@dataclass(frozen=True)
class Response:
    """The pid, exit status and output of a finished runc command."""

    pid: int
    status: int
    output: str

    @property
    def success(self) -> bool:
        """True when the command exited with status zero."""
        return self.status == 0


@dataclass(frozen=True)
class Version:
    """Version details reported by the runc binary."""

    runc_version: Optional[str] = None
    spec_version: Optional[str] = None
    commit: Optional[str] = None


class LogFormat(enum.Enum):
    """Log format runc writes in; text is the default."""

    JSON = "json"
    TEXT = "text"

    def __str__(self) -> str:
        return self.value


class Spawner(abc.ABC):
    """Runs a command to completion."""

    @abc.abstractmethod
    def execute(self, cmd: Command) -> tuple[int, int, str, str]:
        """Run ``cmd`` and return ``(status, pid, stdout, stderr)``."""


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


class DefaultExecutor(Spawner):
    """Run commands as child processes and collect their output."""

    def execute(self, cmd: Command) -> tuple[int, int, str, str]:
        env = None
        if cmd.env_remove:
            env = {k: v for k, v in os.environ.items() if k not in cmd.env_remove}
        try:
            child = subprocess.Popen(
                cmd.full_args(),
                stdin=cmd.stdin,
                stdout=cmd.stdout,
                stderr=cmd.stderr,
                env=env,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise ProcessSpawnError(exc) from exc

        pid = child.pid
        try:
            stdout, stderr = child.communicate()
        except (OSError, subprocess.SubprocessError) as exc:
            child.kill()
            child.wait()
            raise InvalidCommandError(exc) from exc
        return child.returncode, pid, _decode(stdout), _decode(stderr)

    def __repr__(self) -> str:
        return "DefaultExecutor()"