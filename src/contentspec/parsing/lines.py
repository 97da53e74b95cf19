from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional


class LineBuffer:
    """Queue of physical lines with one line of lookahead.

    ``line_number`` is the 1-based number of the line most recently returned by :meth:`poll`.
    """

    def __init__(self, lines: Optional[Iterable[str]] = None):
        self._lines: Deque[str] = deque()
        self.line_number = 0
        if lines is not None:
            for line in lines:
                self.add_line(line)

    @classmethod
    def from_text(cls, text: str) -> "LineBuffer":
        return cls(text.splitlines())

    def add_line(self, text: str) -> None:
        self._lines.append(text)

    def peek(self) -> Optional[str]:
        return self._lines[0] if self._lines else None

    def poll(self) -> Optional[str]:
        if not self._lines:
            return None
        self.line_number += 1
        return self._lines.popleft()

    def remaining(self) -> List[str]:
        """Unconsumed lines, without consuming them."""
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)
