"""
Source Location (Span)

Rust Pattern: rustc_span::Span
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location (Rust Span pattern).

    Rust Pattern: rustc_span::Span

    Line and column are 1-based; `start` and `end` are 0-based character
    offsets into the source text the node was parsed from. Offsets are what
    the emitter uses to slice verbatim text back out of the item.
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column (Rust pattern)"""
        return f"{self.file}:{self.line}:{self.column}"

    def slice(self, source: str) -> str:
        """Source text covered by this span."""
        return source[self.start:self.end]


def location_at(source: str, offset: int, source_file: str) -> SourceLocation:
    """Build a one-character location for an absolute offset into `source`."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    column = offset - line_start + 1
    return SourceLocation(
        file=source_file,
        line=line,
        column=column,
        start=offset,
        end=offset + 1,
        end_line=line,
        end_column=column + 1,
    )
