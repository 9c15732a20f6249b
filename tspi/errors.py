"""Errors reported by the extractor.

Everything the tool reports derives from ``ExtractionError`` so callers can
catch one type; the CLI turns it into a diagnostic and a non-zero exit.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourceSpan:
    """1-based position of a syntax node in its source file."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class ExtractionError(Exception):
    pass


class ParseUnavailable(ExtractionError):
    def __init__(self, message: str, path: str | Path | None = None):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None


class UnsupportedSyntax(ExtractionError):
    def __init__(self, message: str, kind: str, span: SourceSpan | None = None):
        super().__init__(f"{message} at {span}" if span else message)
        self.message = message
        self.kind = kind
        self.span = span


class DepthExceeded(UnsupportedSyntax):
    pass


class OutputError(ExtractionError):
    def __init__(self, message: str, path: str | Path):
        super().__init__(message)
        self.message = message
        self.path = str(path)
