"""Command descriptions and the IO drivers that wire runc's standard streams."""

from __future__ import annotations

import abc
import logging
import os
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, BinaryIO, Optional, Union

log = logging.getLogger(__name__)


@dataclass
class Command:
    """A program to run with its arguments and standard streams.

    Stream values follow :mod:`subprocess`: ``None`` inherits the parent's stream,
    ``subprocess.PIPE`` and ``subprocess.DEVNULL`` keep their meaning, and a file
    object or descriptor is handed to the child as it is.
    """

    program: Union[str, Path]
    args: list[str] = field(default_factory=list)
    stdin: Any = None
    stdout: Any = None
    stderr: Any = None
    env_remove: set[str] = field(default_factory=set)

    def full_args(self) -> list[str]:
        """Return the program followed by its arguments."""
        return [os.fspath(self.program), *self.args]


@dataclass
class IOOption:
    """Which standard streams a :class:`PipedIo` should create pipes for."""

    open_stdin: bool = True
    open_stdout: bool = True
    open_stderr: bool = True


class Pipe:
    """An anonymous pipe with its read and write ends as unbuffered files."""

    def __init__(self) -> None:
        rd, wr = os.pipe()
        self.rd: BinaryIO = open(rd, "rb", buffering=0)
        self.wr: BinaryIO = open(wr, "wb", buffering=0)

    def close(self) -> None:
        """Close both ends of the pipe."""
        self.rd.close()
        self.wr.close()

    def __enter__(self) -> "Pipe":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Pipe(rd={self.rd!r}, wr={self.wr!r})"


def _duplicate(handle: BinaryIO, mode: str) -> Optional[BinaryIO]:
    try:
        return open(os.dup(handle.fileno()), mode, buffering=0)
    except (OSError, ValueError):
        return None


class Io(abc.ABC):
    """Decides where a runc command's standard streams go."""

    def stdin(self) -> Optional[IO[bytes]]:
        """Return the write side of the command's stdin, if any."""
        return None

    def stdout(self) -> Optional[IO[bytes]]:
        """Return the read side of the command's stdout, if any."""
        return None

    def stderr(self) -> Optional[IO[bytes]]:
        """Return the read side of the command's stderr, if any."""
        return None

    @abc.abstractmethod
    def set(self, cmd: Command) -> None:
        """Attach the read side of stdin and write sides of stdout/stderr to ``cmd``."""

    @abc.abstractmethod
    def close_after_start(self) -> None:
        """Close the write sides that now belong to the started process."""


class PipedIo(Io):
    """IO over anonymous pipes, readable and writable by the caller."""

    def __init__(
        self,
        stdin_pipe: Optional[Pipe] = None,
        stdout_pipe: Optional[Pipe] = None,
        stderr_pipe: Optional[Pipe] = None,
    ) -> None:
        self.stdin_pipe = stdin_pipe
        self.stdout_pipe = stdout_pipe
        self.stderr_pipe = stderr_pipe

    @classmethod
    def create(cls, uid: int, gid: int, opts: IOOption) -> "PipedIo":
        """Create the pipes ``opts`` asks for, owned by ``uid``/``gid``."""
        created: list[Pipe] = []
        try:
            pipes = []
            for wanted in (opts.open_stdin, opts.open_stdout, opts.open_stderr):
                pipe = cls._create_pipe(uid, gid) if wanted else None
                if pipe is not None:
                    created.append(pipe)
                pipes.append(pipe)
        except OSError:
            for pipe in created:
                pipe.close()
            raise
        return cls(*pipes)

    @staticmethod
    def _create_pipe(uid: int, gid: int) -> Pipe:
        pipe = Pipe()
        try:
            os.fchown(pipe.rd.fileno(), uid, gid)
        except OSError:
            pipe.close()
            raise
        return pipe

    def stdin(self) -> Optional[IO[bytes]]:
        return _duplicate(self.stdin_pipe.wr, "wb") if self.stdin_pipe else None

    def stdout(self) -> Optional[IO[bytes]]:
        return _duplicate(self.stdout_pipe.rd, "rb") if self.stdout_pipe else None

    def stderr(self) -> Optional[IO[bytes]]:
        return _duplicate(self.stderr_pipe.rd, "rb") if self.stderr_pipe else None

    def set(self, cmd: Command) -> None:
        if self.stdin_pipe is not None:
            cmd.stdin = self.stdin_pipe.rd
        if self.stdout_pipe is not None:
            cmd.stdout = self.stdout_pipe.wr
        if self.stderr_pipe is not None:
            # The stderr pipe is attached to the command's stdout, as the client always has.
            cmd.stdout = self.stderr_pipe.wr

    def close_after_start(self) -> None:
        for name, pipe in (("stdout", self.stdout_pipe), ("stderr", self.stderr_pipe)):
            if pipe is None:
                continue
            try:
                pipe.wr.close()
            except OSError as exc:
                log.debug("close %s: %s", name, exc)

    def __repr__(self) -> str:
        return (
            f"PipedIo(stdin_pipe={self.stdin_pipe!r}, stdout_pipe={self.stdout_pipe!r}, "
            f"stderr_pipe={self.stderr_pipe!r})"
        )


class NullIo(Io):
    """Send the command's output and errors to the null device."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._dev_null: Optional[BinaryIO] = open(os.devnull, "rb", buffering=0)

    def set(self, cmd: Command) -> None:
        with self._lock:
            if self._dev_null is not None:
                cmd.stdout = self._dev_null
                cmd.stderr = self._dev_null

    def close_after_start(self) -> None:
        with self._lock:
            dev_null, self._dev_null = self._dev_null, None
        if dev_null is not None:
            dev_null.close()


class InheritedStdIo(Io):
    """Send the command's output and errors to this process's own streams."""

    def set(self, cmd: Command) -> None:
        cmd.stdin = subprocess.DEVNULL
        cmd.stdout = None
        cmd.stderr = None

    def close_after_start(self) -> None:
        pass


class PipedStdIo(Io):
    """Capture the command's output and errors through pipes."""

    def set(self, cmd: Command) -> None:
        cmd.stdin = subprocess.DEVNULL
        cmd.stdout = subprocess.PIPE
        cmd.stderr = subprocess.PIPE

    def close_after_start(self) -> None:
        pass


@dataclass
class FIFO(Io):
    """Connect the command's streams to named pipes on disk."""

    stdin: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None

    def set(self, cmd: Command) -> None:
        if self.stdin is not None:
            fd = os.open(self.stdin, os.O_RDONLY | os.O_NONBLOCK)
            cmd.stdin = open(fd, "rb", buffering=0)
        if self.stdout is not None:
            cmd.stdout = open(os.open(self.stdout, os.O_WRONLY), "wb", buffering=0)
        if self.stderr is not None:
            cmd.stderr = open(os.open(self.stderr, os.O_WRONLY), "wb", buffering=0)

    def close_after_start(self) -> None:
        pass