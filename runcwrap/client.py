"""A client that drives the runc binary."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .container import Container
from .errors import (
    CommandFailedError,
    IoSetError,
    JsonDeserializationError,
    MissingContainerStatsError,
    UnimplementedError,
)
from .events import Event, Stats
from .io import Command
from .process import DefaultExecutor, Response, Spawner
from .utils import PathLike, abs_string, temp_value_file


def _decode_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise JsonDeserializationError(exc) from exc


def _decode_array(text: str) -> list:
    output = text.strip()
    # runc prints "null" rather than "[]" for an empty list.
    if output == "null":
        return []
    data = _decode_json(output)
    if not isinstance(data, list):
        raise JsonDeserializationError("expected a JSON array")
    return data


def _as_pid(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise JsonDeserializationError(f"expected a pid, got {value!r}")
    return value


@dataclass
class Runc:
    """Runs runc commands with a fixed binary, global arguments and spawner."""

    command: Union[str, Path]
    args: list = field(default_factory=list)
    spawner: Spawner = field(default_factory=DefaultExecutor)

    def _command(self, args: list) -> Command:
        # NOTIFY_SOCKET changes runc's behaviour and is only meant for systemd.
        return Command(
            program=self.command,
            args=[*self.args, *args],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env_remove={"NOTIFY_SOCKET"},
        )

    def _launch(self, cmd: Command, combined_output: bool = True) -> Response:
        status, pid, stdout, stderr = self.spawner.execute(cmd)
        if status != 0:
            raise CommandFailedError(status, stdout, stderr)
        output = stdout + stderr if combined_output else stdout
        return Response(pid=pid, status=status, output=output)

    @staticmethod
    def _set_io(io: Any, cmd: Command) -> None:
        try:
            io.set(cmd)
        except OSError as exc:
            raise IoSetError(exc) from exc

    @staticmethod
    def _opts_args(opts: Any) -> list:
        return list(opts.args()) if opts is not None else []

    def create(self, container_id: str, bundle: PathLike, opts: Any = None) -> Response:
        """Create a new container."""
        args = ["create", "--bundle", abs_string(bundle), *self._opts_args(opts), container_id]
        cmd = self._command(args)
        io = getattr(opts, "io", None)
        if io is None:
            return self._launch(cmd)
        self._set_io(io, cmd)
        response = self._launch(cmd)
        io.close_after_start()
        return response

    def delete(self, container_id: str, opts: Any = None) -> None:
        """Delete a container."""
        self._launch(self._command(["delete", *self._opts_args(opts), container_id]))

    def exec(self, container_id: str, spec: Any, opts: Any = None) -> None:
        """Execute an additional process, described by ``spec``, inside the container."""
        with temp_value_file(spec) as filename:
            args = ["exec", "--process", filename, *self._opts_args(opts), container_id]
            cmd = self._command(args)
            io = getattr(opts, "io", None)
            if io is None:
                self._launch(cmd)
                return
            self._set_io(io, cmd)
            self._launch(cmd)
            io.close_after_start()

    def kill(self, container_id: str, sig: int, opts: Any = None) -> None:
        """Send signal ``sig`` to processes inside the container."""
        args = ["kill", *self._opts_args(opts), container_id, str(sig)]
        self._launch(self._command(args))

    def list(self) -> list[Container]:
        """List all containers known to this runc instance."""
        response = self._launch(self._command(["list", "--format=json"]))
        return [Container.from_dict(item) for item in _decode_array(response.output)]

    def pause(self, container_id: str) -> None:
        """Pause a container."""
        self._launch(self._command(["pause", container_id]))

    def resume(self, container_id: str) -> None:
        """Resume a paused container."""
        self._launch(self._command(["resume", container_id]))

    def checkpoint(self) -> None:
        """Checkpointing is not supported."""
        raise UnimplementedError("checkpoint")

    def restore(self) -> None:
        """Restoring is not supported."""
        raise UnimplementedError("restore")

    def ps(self, container_id: str) -> list[int]:
        """Return the pids of all processes inside the container."""
        response = self._launch(
            self._command(["ps", "--format=json", container_id]), combined_output=False
        )
        return [_as_pid(item) for item in _decode_array(response.output)]

    def run(self, container_id: str, bundle: PathLike, opts: Any = None) -> Response:
        """Create, start and delete a container, returning the result."""
        args = ["run", "--bundle", abs_string(bundle), *self._opts_args(opts), container_id]
        cmd = self._command(args)
        io = getattr(opts, "io", None)
        if io is not None:
            self._set_io(io, cmd)
        return self._launch(cmd)

    def start(self, container_id: str) -> Response:
        """Start an already created container."""
        return self._launch(self._command(["start", container_id]))

    def state(self, container_id: str) -> Container:
        """Return the state of a container."""
        response = self._launch(self._command(["state", container_id]))
        return Container.from_json(response.output)

    def stats(self, container_id: str) -> Stats:
        """Return the latest statistics of a container."""
        response = self._launch(self._command(["events", "--stats", container_id]))
        event = Event.from_json(response.output)
        if event.stats is None:
            raise MissingContainerStatsError()
        return event.stats

    def update(self, container_id: str, resources: Any) -> None:
        """Update a container with the given resource spec."""
        with temp_value_file(resources) as filename:
            self._launch(self._command(["update", "--resources", filename, container_id]))

    def __repr__(self) -> str:
        return f"Runc(command={self.command!r}, args={self.args!r}, spawner={self.spawner!r})"


__all__ = ["Runc", "Optional"]