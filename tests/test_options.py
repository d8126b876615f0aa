import os
import stat

import pytest

from runcwrap.errors import NotFoundError
from runcwrap.io import PipedStdIo
from runcwrap.options import CreateOpts, DeleteOpts, ExecOpts, GlobalOpts, KillOpts
from runcwrap.process import DefaultExecutor, LogFormat, Spawner


class RecordingSpawner(Spawner):
    def __init__(self):
        self.commands = []

    def execute(self, cmd):
        self.commands.append(cmd)
        return 0, 42, "out", ""


@pytest.fixture
def fake_runc(tmp_path, monkeypatch):
    binary = tmp_path / "fake-runc"
    binary.write_text("#!/bin/sh\nexit 0\n")
    binary.chmod(binary.stat().st_mode | stat.S_IXUSR)
    monkeypatch.setenv("PATH", str(tmp_path))
    return binary


def test_create_opts_empty():
    assert CreateOpts().args() == []


def test_create_opts_pid_file():
    assert CreateOpts(pid_file=".").args() == ["--pid-file", os.getcwd()]


def test_create_opts_console_socket():
    assert CreateOpts(console_socket="..").args() == [
        "--console-socket",
        os.path.dirname(os.getcwd()),
    ]


def test_create_opts_flags_order():
    opts = CreateOpts(detach=True, no_pivot=True, no_new_keyring=True)
    assert opts.args() == ["--no-pivot", "--no-new-keyring", "--detach"]


def test_create_opts_io_adds_no_flags():
    assert CreateOpts(io=PipedStdIo(), detach=True).args() == ["--detach"]


def test_exec_opts_empty():
    assert ExecOpts().args() == []


def test_exec_opts_pid_file():
    assert ExecOpts(pid_file=".").args() == ["--pid-file", os.getcwd()]


def test_exec_opts_console_socket():
    assert ExecOpts(console_socket="..").args() == [
        "--console-socket",
        os.path.dirname(os.getcwd()),
    ]


def test_exec_opts_detach():
    assert ExecOpts(detach=True).args() == ["--detach"]


def test_delete_opts():
    assert DeleteOpts(force=False).args() == []
    assert DeleteOpts(force=True).args() == ["--force"]


def test_kill_opts():
    assert KillOpts(all=False).args() == []
    assert KillOpts(all=True).args() == ["--all"]


def test_global_opts_defaults(fake_runc):
    runc = GlobalOpts(command="fake-runc").build()
    assert runc.args == ["--log-format", "text"]
    assert runc.command == fake_runc
    assert isinstance(runc.spawner, DefaultExecutor)


def test_global_opts_absolute_command(fake_runc):
    runc = GlobalOpts(command=str(fake_runc)).build()
    assert runc.command == fake_runc
    assert len(runc.args) == 2


def test_global_opts_all(fake_runc):
    opts = GlobalOpts(
        command="fake-runc",
        root="/tmp",
        debug=True,
        log="/tmp/runc.log",
        log_format=LogFormat.JSON,
        systemd_cgroup=True,
        rootless=True,
    )
    args = opts.build().args
    assert args == [
        "--root",
        "/tmp",
        "--debug",
        "--log",
        "/tmp/runc.log",
        "--log-format",
        "json",
        "--systemd-cgroup",
        "--rootless=true",
    ]
    assert len(args) == 9


def test_global_opts_rootless_false():
    assert GlobalOpts(rootless=False).args()[-1] == "--rootless=false"


def test_global_opts_rootless_auto_has_no_flag():
    assert not any(arg.startswith("--rootless") for arg in GlobalOpts().args())


def test_global_opts_not_found(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    with pytest.raises(NotFoundError):
        GlobalOpts(command="no-such-runc").build()


def test_global_opts_default_command_is_runc(tmp_path, monkeypatch):
    binary = tmp_path / "runc"
    binary.write_text("")
    monkeypatch.setenv("PATH", str(tmp_path))
    assert GlobalOpts().build().command == binary


def test_global_opts_custom_spawner(fake_runc):
    spawner = RecordingSpawner()
    runc = GlobalOpts(command="fake-runc", debug=True, executor=spawner).build()
    response = runc.start("fake-id")
    assert response.pid == 42
    assert response.output == "out"
    assert spawner.commands[0].args == ["--debug", "--log-format", "text", "start", "fake-id"]