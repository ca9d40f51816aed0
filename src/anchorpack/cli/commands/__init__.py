"""
CLI Commands Package.

Each command is implemented in its own module.
"""

from . import resolve
from . import stats

__all__ = [
    "resolve",
    "stats",
]
