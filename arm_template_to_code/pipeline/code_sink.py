"""
Output sink handed to the type generator.
"""

from __future__ import annotations

from collections.abc import Iterable


class CodeSink:
    """Accumulates generated source lines."""

    def __init__(self):
        self._lines: list[str] = []

    def line(self, text: str = "") -> None:
        self._lines.append(text)

    def lines(self, texts: Iterable[str]) -> None:
        for text in texts:
            self.line(text)

    def getvalue(self) -> str:
        return "\n".join(self._lines) + "\n" if self._lines else ""
