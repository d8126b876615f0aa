"""Option sets that become runc command-line flags."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .client import Runc
from .errors import NotFoundError
from .io import Io
from .process import DefaultExecutor, LogFormat, Spawner
from .utils import PathLike, abs_string, binary_path

JSON = LogFormat.JSON.value
TEXT = LogFormat.TEXT.value

DEFAULT_COMMAND = "runc"

# Global flags.
DEBUG = "--debug"
LOG = "--log"
LOG_FORMAT = "--log-format"
ROOT = "--root"
ROOTLESS = "--rootless"
SYSTEMD_CGROUP = "--systemd-cgroup"

# Flags of create and exec.
CONSOLE_SOCKET = "--console-socket"
DETACH = "--detach"
NO_NEW_KEYRING = "--no-new-keyring"
NO_PIVOT = "--no-pivot"
PID_FILE = "--pid-file"

# Flag of kill.
ALL = "--all"

# Flag of delete.
FORCE = "--force"


@dataclass
class GlobalOpts:
    """Options passed to every runc call made by the built client.

    ``rootless`` of ``None`` leaves runc on its automatic detection, which
    differs from an explicit ``True`` or ``False``. ``timeout`` is in seconds.
    """

    command: Optional[PathLike] = None
    debug: bool = False
    log: Optional[PathLike] = None
    log_format: LogFormat = LogFormat.TEXT
    root: Optional[PathLike] = None
    rootless: Optional[bool] = None
    set_pgid: bool = False
    systemd_cgroup: bool = False
    timeout: float = 0.0
    executor: Optional[Spawner] = None

    def args(self) -> list[str]:
        """Return the global flags, in the order runc receives them."""
        args: list[str] = []
        if self.root is not None:
            args += [ROOT, abs_string(self.root)]
        if self.debug:
            args.append(DEBUG)
        if self.log is not None:
            args += [LOG, abs_string(self.log)]
        args += [LOG_FORMAT, str(LogFormat(self.log_format))]
        if self.systemd_cgroup:
            args.append(SYSTEMD_CGROUP)
        if self.rootless is not None:
            args.append(f"{ROOTLESS}={'true' if self.rootless else 'false'}")
        return args

    def build(self) -> Runc:
        """Locate the runc binary on ``$PATH`` and return a client using these options."""
        command = binary_path(self.command if self.command is not None else DEFAULT_COMMAND)
        if command is None:
            raise NotFoundError()
        spawner = self.executor if self.executor is not None else DefaultExecutor()
        return Runc(command=command, args=self.args(), spawner=spawner)


@dataclass
class CreateOpts:
    """Options for ``runc create`` and ``runc run``."""

    io: Optional[Io] = field(default=None, compare=False)
    pid_file: Optional[PathLike] = None
    console_socket: Optional[PathLike] = None
    detach: bool = False
    no_pivot: bool = False
    no_new_keyring: bool = False

    def args(self) -> list[str]:
        """Return the flags for these options."""
        args: list[str] = []
        if self.pid_file is not None:
            args += [PID_FILE, abs_string(self.pid_file)]
        if self.console_socket is not None:
            args += [CONSOLE_SOCKET, abs_string(self.console_socket)]
        if self.no_pivot:
            args.append(NO_PIVOT)
        if self.no_new_keyring:
            args.append(NO_NEW_KEYRING)
        if self.detach:
            args.append(DETACH)
        return args


@dataclass
class ExecOpts:
    """Options for ``runc exec``."""

    io: Optional[Io] = field(default=None, compare=False)
    pid_file: Optional[PathLike] = None
    console_socket: Optional[PathLike] = None
    detach: bool = False

    def args(self) -> list[str]:
        """Return the flags for these options."""
        args: list[str] = []
        if self.pid_file is not None:
            args += [PID_FILE, abs_string(self.pid_file)]
        if self.console_socket is not None:
            args += [CONSOLE_SOCKET, abs_string(self.console_socket)]
        if self.detach:
            args.append(DETACH)
        return args


@dataclass
class DeleteOpts:
    """Options for ``runc delete``; ``force`` removes a running container too."""

    force: bool = False

    def args(self) -> list[str]:
        """Return the flags for these options."""
        return [FORCE] if self.force else []


@dataclass
class KillOpts:
    """Options for ``runc kill``; ``all`` signals every process in the container."""

    all: bool = False

    def args(self) -> list[str]:
        """Return the flags for these options."""
        return [ALL] if self.all else []