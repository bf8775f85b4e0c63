"""Run logging for the command-line tool.

The parsing core never logs; only CLI commands emit stage events.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
