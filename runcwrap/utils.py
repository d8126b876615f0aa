"""Path helpers and temporary spec files."""

from __future__ import annotations

import json
import os
import tempfile
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from .errors import InvalidPathError, JsonDeserializationError, SpecFileCreationError

PathLike = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]


def abs_path(path: PathLike) -> Path:
    """Make ``path`` absolute against the working directory, without resolving links."""
    try:
        return Path(os.path.abspath(os.fsdecode(path)))
    except OSError as exc:
        raise InvalidPathError(exc) from exc


def abs_string(path: PathLike) -> str:
    """Return the absolute form of ``path`` as a UTF-8 string."""
    resolved = str(abs_path(path))
    try:
        resolved.encode("utf-8")
    except UnicodeEncodeError:
        lossy = resolved.encode("utf-8", "replace").decode("utf-8")
        raise InvalidPathError(f"invalid UTF-8 string: {lossy}") from None
    return resolved


def runtime_dir() -> str:
    """Return ``$XDG_RUNTIME_DIR``, else the temporary directory, else ``.``."""
    env = os.environ.get("XDG_RUNTIME_DIR")
    if env is not None:
        return env
    try:
        return abs_string(tempfile.gettempdir())
    except InvalidPathError:
        return "."


@contextmanager
def temp_value_file(value: Any) -> Iterator[str]:
    """Write ``value`` as JSON to a fresh file and yield its name; remove it on exit."""
    try:
        payload = json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise JsonDeserializationError(exc) from exc

    filename = f"{runtime_dir()}/runc-process-{uuid.uuid4()}"
    try:
        with open(filename, "x", encoding="utf-8") as handle:
            handle.write(payload)
    except OSError as exc:
        raise SpecFileCreationError(exc) from exc
    try:
        yield filename
    finally:
        Path(filename).unlink(missing_ok=True)


def binary_path(path: PathLike) -> Optional[Path]:
    """Find ``path`` in the directories of ``$PATH``; absolute paths are checked as they are."""
    search = os.environ.get("PATH")
    if search is None:
        return None
    name = os.fsdecode(path)
    for directory in search.split(os.pathsep):
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None