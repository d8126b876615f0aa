import pytest

from runcwrap.errors import (
    CommandFailedError,
    InvalidCommandError,
    InvalidPathError,
    IoSetError,
    JsonDeserializationError,
    MissingContainerStatsError,
    NotFoundError,
    ProcessSpawnError,
    RuncError,
    SpecFileCreationError,
    UnimplementedError,
)


def test_command_failed_keeps_outputs():
    err = CommandFailedError(1, "out", "err")
    assert err.status == 1
    assert err.stdout == "out"
    assert err.stderr == "err"
    assert str(err) == 'Runc command failed: status=1, stdout="out", stderr="err"'


@pytest.mark.parametrize(
    "cls, prefix",
    [
        (InvalidCommandError, "Error occured in runc: "),
        (InvalidPathError, "Invalid path: "),
        (SpecFileCreationError, "Failed to spec file: "),
        (UnimplementedError, "Sorry, this part of api is not implemented: "),
        (IoSetError, "Failed to set cmd io: "),
    ],
)
def test_wrapped_messages(cls, prefix):
    cause = OSError("boom")
    err = cls(cause)
    assert err.cause is cause
    assert str(err) == prefix + str(cause)
    assert isinstance(err, RuncError)


@pytest.mark.parametrize("cls", [JsonDeserializationError, ProcessSpawnError])
def test_transparent_messages(cls):
    cause = ValueError("bad input")
    err = cls(cause)
    assert str(err) == str(cause)
    assert err.cause is cause


def test_fixed_messages():
    assert str(MissingContainerStatsError()) == "Missing container statistics"
    assert str(NotFoundError()) == "Unable to locate the runc"


def test_json_error_is_value_error():
    cause = ValueError("x")
    err = JsonDeserializationError(cause)
    assert isinstance(err, ValueError)
    assert isinstance(err, RuncError)
    assert str(err) == "x"


def test_unimplemented_can_be_caught_as_base():
    err = UnimplementedError("checkpoint")
    assert isinstance(err, RuncError)
    assert str(err) == "Sorry, this part of api is not implemented: checkpoint"