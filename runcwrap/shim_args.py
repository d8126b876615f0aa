"""Command-line flags that containerd passes to a shim binary."""

from __future__ import annotations

import os
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Union

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_BOOL_FLAGS = {"debug": "debug", "v": "version", "info": "info"}
_STRING_FLAGS = {
    "namespace": "namespace",
    "id": "id",
    "socket": "socket",
    "bundle": "bundle",
    "address": "address",
    "publish-binary": "publish_binary",
}


class ArgumentError(ValueError):
    """The shim's command line could not be parsed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid argument: {detail}")


@dataclass
class Flags:
    """Flags given to a shim by the containerd daemon."""

    debug: bool = False
    namespace: str = ""
    id: str = ""
    socket: str = ""
    bundle: str = ""
    address: str = ""
    publish_binary: str = ""
    action: str = ""
    version: bool = False
    info: bool = False


def _parse_bool(name: str, value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ArgumentError(f'invalid boolean value "{value}" for -{name}: parse error')


def parse(args: Iterable[Union[str, bytes, "os.PathLike[str]"]]) -> Flags:
    """Parse shim arguments the way Go's flag package does.

    Flag parsing stops at the first non-flag argument or after ``--``;
    the first remaining argument becomes the action.
    """
    flags = Flags()
    pending = deque(os.fsdecode(arg) for arg in args)

    while pending:
        arg = pending[0]
        if len(arg) < 2 or not arg.startswith("-"):
            break
        pending.popleft()
        body = arg[1:]
        if body.startswith("-"):
            body = body[1:]
            if not body:
                break
        if not body or body[0] in "-=":
            raise ArgumentError(f"bad flag syntax: {arg}")

        name, has_value, value = body.partition("=")
        if name in _BOOL_FLAGS:
            setattr(flags, _BOOL_FLAGS[name], _parse_bool(name, value) if has_value else True)
        elif name in _STRING_FLAGS:
            if not has_value:
                if not pending:
                    raise ArgumentError(f"flag needs an argument: -{name}")
                value = pending.popleft()
            setattr(flags, _STRING_FLAGS[name], value)
        else:
            raise ArgumentError(f"flag provided but not defined: -{name}")

    if pending:
        flags.action = pending[0]
    return flags