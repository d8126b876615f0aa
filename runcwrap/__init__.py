"""Client for the runc binary, with container and event models, IO drivers and shim argument parsing."""

__version__ = "0.1.0"

__all__ = [
    "client",
    "container",
    "errors",
    "events",
    "io",
    "options",
    "process",
    "shim_args",
    "topics",
    "utils",
]