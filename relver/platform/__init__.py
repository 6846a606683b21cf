"""Process and filesystem helpers."""

from relver.platform.files import atomic_write_text
from relver.platform.process import ProcessError, run

__all__ = ["ProcessError", "atomic_write_text", "run"]
