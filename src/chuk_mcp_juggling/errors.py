"""
Error types for the juggling notation compiler.

Two categories:
- JuggleUserError: malformed input. Always recoverable by the caller; carries
  the 1-based column or beat of the offending input where one applies.
- JuggleInternalError: a compiler invariant was violated (a defect in the
  compiler itself, never caused by valid user input).
"""

from __future__ import annotations


class JuggleError(Exception):
    """Base class for all juggling notation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class JuggleUserError(JuggleError):
    """Malformed user input."""

    def __init__(self, message: str, column: int | None = None, beat: int | None = None):
        super().__init__(message)
        self.column = column
        self.beat = beat

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for tool responses."""
        d: dict[str, object] = {"message": self.message, "error_type": "user"}
        if self.column is not None:
            d["column"] = self.column
        if self.beat is not None:
            d["beat"] = self.beat
        return d


class JuggleInternalError(JuggleError):
    """Violated compiler invariant."""

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for tool responses."""
        return {"message": self.message, "error_type": "internal"}
