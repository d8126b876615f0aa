# runcwrap

`runcwrap` drives the `runc` container runtime binary from Python. It builds
`runc` command lines from option objects, runs them as child processes, and
decodes the JSON that `runc` prints into Python dataclasses.

It also parses the flags that containerd hands to a shim binary, and it
defines the task event topics that shims publish.

The package has no dependencies beyond the standard library.

## Building a client

`runcwrap.options.GlobalOpts` is a dataclass that holds the flags passed on
every `runc` call. `build()` looks the binary up in the directories of `PATH`
(`runc` when `command` is not set) and returns a `runcwrap.client.Runc`:

```python
from runcwrap.options import GlobalOpts
from runcwrap.process import LogFormat

runc = GlobalOpts(
    root="/run/runc",
    log="/tmp/runc.log",
    log_format=LogFormat.JSON,
    systemd_cgroup=True,
).build()
```

`GlobalOpts.args()` returns the global flags in the order `runc` receives
them: `--root`, `--debug`, `--log`, `--log-format`, `--systemd-cgroup` and
`--rootless=true|false`. Paths are made absolute. `rootless=None`, the
default, leaves `runc` on its own automatic detection. `--log-format` is
always passed, `text` by default.

If the binary cannot be found, `build()` raises
`runcwrap.errors.NotFoundError`. A `Runc` can also be constructed directly
with `Runc(command=..., args=[...], spawner=...)`.

## Managing containers

```python
from runcwrap.options import CreateOpts, DeleteOpts, KillOpts

runc.create("web", "/path/to/bundle", CreateOpts(pid_file="web.pid", detach=True))
runc.start("web")

state = runc.state("web")        # runcwrap.container.Container
print(state.status, state.pid, state.created)

print(runc.ps("web"))            # list of pids
stats = runc.stats("web")        # runcwrap.events.Stats

runc.kill("web", 15, KillOpts(all=True))
runc.delete("web", DeleteOpts(force=True))
```

The client also has `run`, `pause`, `resume`, `list`, `exec` and `update`.
`create`, `run` and `start` return a `runcwrap.process.Response` with the
`pid`, exit `status` and `output` of the command. The output is stdout
followed by stderr, except for `ps`, which reads stdout alone. `list` and
`ps` treat the output `null` as an empty list.

`exec` takes an OCI process spec and `update` takes a resources description.
Both are plain JSON-serialisable values. Each is written to a temporary file
named `runc-process-<uuid>` in `$XDG_RUNTIME_DIR`, or in the system temporary
directory when that variable is unset. The file is removed when the call ends.

`NOTIFY_SOCKET` is removed from the environment of every `runc` process.

## Errors

Every error derives from `runcwrap.errors.RuncError`:

- `CommandFailedError` is raised when `runc` exits with a non-zero status. It
  carries `status`, `stdout` and `stderr`.
- `JsonDeserializationError` is raised for JSON that cannot be decoded into
  the expected shape. It is also a `ValueError`.
- `MissingContainerStatsError` is raised when `stats` gets an event without
  data.
- `ProcessSpawnError` and `InvalidCommandError` are raised when the process
  cannot be started or waited on.
- `InvalidPathError`, `SpecFileCreationError` and `IoSetError` cover path,
  spec-file and IO set-up failures.
- `UnimplementedError` is raised by `checkpoint()` and `restore()`.

## Data models

- `runcwrap.container.Container` has `id`, `pid`, `status`, `bundle`,
  `rootfs`, `created` (a UTC `datetime` read from a Unix timestamp) and
  `annotations`. It provides `from_json`, `from_dict` and `to_dict`.
- `runcwrap.events.Event` holds an `EventType` (`stats` or `oom`), the
  container `id` and optional `Stats`. `Stats` breaks down into `Cpu`,
  `Memory`, `Pids`, `BlkIO` and `HugeTLB`. `from_dict` and `to_dict` use
  runc's JSON keys, such as `blkio`, `failcnt` and `ioServiceBytesRecursive`.

## Process IO

Set an `Io` driver on `CreateOpts.io` or `ExecOpts.io` to choose where the
command's standard streams go:

- `runcwrap.io.PipedStdIo` captures stdout and stderr. This is also what the
  client does when no driver is given.
- `runcwrap.io.InheritedStdIo` sends output to the caller's own streams, so
  the response output is empty.
- `runcwrap.io.NullIo` sends output to the null device.
- `runcwrap.io.FIFO(stdin=..., stdout=..., stderr=...)` opens named pipes by
  path. stdin is opened non-blocking.
- `runcwrap.io.PipedIo.create(uid, gid, IOOption())` makes anonymous pipes
  owned by the given user and group. `stdin()`, `stdout()` and `stderr()`
  return the caller's ends. `close_after_start()` closes the write ends of
  the output pipes. When a stderr pipe exists, `set()` attaches it to the
  command's stdout, which replaces the stdout pipe.

## Custom spawners

Subclass `runcwrap.process.Spawner` and implement `execute(cmd)` to change
how commands are run. It receives a `runcwrap.io.Command` and returns
`(status, pid, stdout, stderr)`. Pass the spawner as `GlobalOpts(executor=...)`.
The default, `DefaultExecutor`, uses `subprocess`.

## Shim arguments

```python
from runcwrap.shim_args import parse

flags = parse(["-namespace", "default", "-id", "123", "start"])
assert flags.action == "start"
```

`parse` reads single-dash and double-dash flags the way Go's `flag` package
does. It accepts `-debug`, `-v`, `-info`, `-namespace`, `-id`, `-socket`,
`-bundle`, `-address` and `-publish-binary`. Parsing stops at the first
argument that is not a flag, and that argument becomes `action`. Unknown or
malformed flags raise `runcwrap.shim_args.ArgumentError`.

Topic names for task events, such as `TASK_OOM_EVENT_TOPIC`, are defined in
`runcwrap.topics`.

## What it does not do

- The client is synchronous only. There is no asyncio variant.
- It cannot stream events: `stats` reads a single `events --stats` result.
- `checkpoint` and `restore` are not supported.
- `GlobalOpts.timeout` and `GlobalOpts.set_pgid` are stored but not used by
  the client.
- It provides no shim server, no containerd connection and no event
  publishing. `shim_args` and `topics` cover only argument parsing and topic
  names.
- There is no command-line program.