"""Exceptions raised while driving the runc binary."""

from __future__ import annotations


class RuncError(Exception):
    """Base class for every error raised by this package."""


class _CausedError(RuncError):
    """An error that wraps an underlying cause and formats it into its message."""

    _template = "{}"

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(self._template.format(cause))


class JsonDeserializationError(_CausedError, ValueError):
    """JSON produced or consumed by runc could not be (de)serialized."""


class ProcessSpawnError(_CausedError):
    """The runc process could not be started."""


class InvalidCommandError(_CausedError):
    """The runc process failed while it was being waited on."""

    _template = "Error occured in runc: {}"


class InvalidPathError(_CausedError):
    """A path could not be made absolute or is not valid UTF-8."""

    _template = "Invalid path: {}"


class SpecFileCreationError(_CausedError):
    """A temporary spec file could not be written."""

    _template = "Failed to spec file: {}"


class UnimplementedError(_CausedError):
    """The requested runc operation is not supported by this client."""

    _template = "Sorry, this part of api is not implemented: {}"


class IoSetError(_CausedError):
    """The IO of a command could not be configured."""

    _template = "Failed to set cmd io: {}"


class MissingContainerStatsError(RuncError):
    """An events response carried no statistics."""

    def __init__(self) -> None:
        super().__init__("Missing container statistics")


class NotFoundError(RuncError):
    """The runc binary could not be located."""

    def __init__(self) -> None:
        super().__init__("Unable to locate the runc")


class CommandFailedError(RuncError):
    """runc exited with a non-zero status."""

    def __init__(self, status: int, stdout: str, stderr: str) -> None:
        self.status = status
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f'Runc command failed: status={status}, stdout="{stdout}", stderr="{stderr}"'
        )