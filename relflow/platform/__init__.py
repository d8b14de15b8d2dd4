"""Process and filesystem primitives."""

from .files import atomic_write_text, remove_tree, reset_dir
from .process import ProcessError, run, run_streaming

__all__ = [
    "ProcessError",
    "atomic_write_text",
    "remove_tree",
    "reset_dir",
    "run",
    "run_streaming",
]
