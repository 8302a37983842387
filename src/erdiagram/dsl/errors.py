"""Errors raised by the DSL pipeline."""

from typing import Optional


class DSLSyntaxError(ValueError):
    """Raised when DSL text cannot be turned into a diagram.

    Carries the 1-based line number, the offending line and the reason so
    callers can point a human (or an LLM) at the exact problem.
    """

    def __init__(self, reason: str, line: str = "", line_number: Optional[int] = None):
        self.reason = reason
        self.line = line
        self.line_number = line_number

        location = f"line {line_number}: " if line_number is not None else ""
        message = f"{location}{reason}"
        if line:
            message = f"{message} ({line.strip()!r})"
        super().__init__(message)
