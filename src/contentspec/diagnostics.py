from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .config import logger
from .constants import CS_LINE_MSG, LINE
from .enums import Severity

_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.INFO: logging.INFO,
    Severity.DEBUG: logging.DEBUG,
}


@dataclass(frozen=True)
class Diagnostic:
    """One reported problem, tied to the line that caused it where there is one."""

    severity: Severity
    message: str
    line_number: Optional[int] = None
    line: Optional[str] = None

    def format(self) -> str:
        text = self.message
        if self.line_number is not None:
            text = LINE.format(line=self.line_number) + text
        if self.line is not None:
            text += CS_LINE_MSG.format(text=self.line)
        return text

    def __str__(self) -> str:
        return self.format()


class ErrorLogger:
    """Ordered sink for parser diagnostics.

    Every entry is kept in the order it was reported and mirrored to the ``contentspec``
    logger. Info and debug notes are only kept when ``verbosity`` allows it.
    """

    def __init__(self, verbosity: int = 0):
        self.verbosity = verbosity
        self.diagnostics: List[Diagnostic] = []

    def _add(self, severity: Severity, message: str, line_number: Optional[int], line: Optional[str]) -> Diagnostic:
        diagnostic = Diagnostic(severity=severity, message=message, line_number=line_number, line=line)
        self.diagnostics.append(diagnostic)
        logger.log(_LOG_LEVELS[severity], diagnostic.format())
        return diagnostic

    def error(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None) -> Diagnostic:
        return self._add(Severity.ERROR, message, line_number, line)

    def warn(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None) -> Diagnostic:
        return self._add(Severity.WARNING, message, line_number, line)

    def info(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None) -> Optional[Diagnostic]:
        if self.verbosity < 1:
            return None
        return self._add(Severity.INFO, message, line_number, line)

    def debug(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None) -> Optional[Diagnostic]:
        if self.verbosity < 2:
            return None
        return self._add(Severity.DEBUG, message, line_number, line)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        """Take over entries recorded by another logger. They have already been logged."""
        for diagnostic in diagnostics:
            if diagnostic.severity is Severity.INFO and self.verbosity < 1:
                continue
            if diagnostic.severity is Severity.DEBUG and self.verbosity < 2:
                continue
            self.diagnostics.append(diagnostic)

    def clear(self) -> None:
        self.diagnostics.clear()

    def __len__(self) -> int:
        return len(self.diagnostics)

    def __iter__(self):
        return iter(self.diagnostics)
