"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
"""

from __future__ import annotations

SUCCESS: int = 0
"""The run completed — including a run with an unrecognized command."""

FAILURE: int = 1
"""An exception escaped the command; it was logged with its traceback."""

KEYBOARD_INTERRUPT: int = 130
"""Operator pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""
