"""
Match data model

MatchResult is the unit the engine collects, trims and finally selects:
a styled span of the analysed buffer.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MatchResult:
    """
    A styled span of the buffer produced while applying brush rules

    Spans are immutable. Overlap resolution never edits a span, it
    replaces it with a new, shorter one.

    Attributes:
        offset: Position in the buffer where the span starts
        length: Number of characters covered
        styleKey: Style key for the span (e.g. "keyword", "script")
        bold: Bold override for the style; None leaves the style's own
              weight untouched

    Example:
        For "int x" with "int" matched as a keyword:
        MatchResult(offset=0, length=3, styleKey="keyword", bold=None)
    """
    offset: int
    length: int
    styleKey: str
    bold: Optional[bool] = None

    def __post_init__(self) -> None:
        if not self.styleKey:
            raise ValueError("argument 'styleKey' cannot be empty")

    @property
    def end(self) -> int:
        """Position just past the last character of the span"""
        return self.offset + self.length

    def span_slice(self, start: int, end: int) -> "MatchResult":
        """Return a copy covering [start, end) with the same style"""
        return MatchResult(start, end - start, self.styleKey, self.bold)

    def __str__(self) -> str:
        return f"[{self.offset}, {self.length}, {self.styleKey}, {self.bold}]"
