"""Exception types raised while parsing and rendering guides.

Every error raised for a single guide derives from :class:`GuideError`, which
carries an optional source name and line number so batch reports can point
at the offending location (``guides/inserts.guide:14: ...``).
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from typing import Self


class GuideError(Exception):
    """Base class for failures local to one guide document."""

    def __init__(
        self, message: str, *, source: str | None = None, line: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.line = line

    def locate(self, *, source: str | None = None, line: int | None = None) -> Self:
        """Fill in location details that were unknown where the error was raised."""
        if self.source is None:
            self.source = source
        if self.line is None:
            self.line = line
        return self

    @property
    def location(self) -> str:
        """Return ``source:line`` (or whichever part is known)."""
        parts = [part for part in (self.source, self.line) if part is not None]
        return ":".join(str(part) for part in parts)

    def __str__(self) -> str:
        location = self.location
        return f"{location}: {self.message}" if location else self.message


class ParseError(GuideError):
    """Raised when guide source text does not follow the block grammar."""


class UnresolvedReferenceError(GuideError):
    """Raised when a link reference cannot be turned into a non-empty URL."""


class DanglingReferenceError(GuideError):
    """Raised when a reference-style link names an undefined label."""

    def __init__(
        self, label: str, *, source: str | None = None, line: int | None = None
    ) -> None:
        msg = (
            f"reference-style link '[{label}]' has no matching "
            f"'[{label}]: url' definition"
        )
        super().__init__(msg, source=source, line=line)
        self.label = label


__all__ = [
    "DanglingReferenceError",
    "GuideError",
    "ParseError",
    "UnresolvedReferenceError",
]
