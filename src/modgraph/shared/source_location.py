"""
Source Location (Span)

Rust Pattern: rustc_span::Span
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Position of a node in a module source.

    file is the URI of the module. line and column are 1-based;
    end_column is one past the last character, 0 when unknown.
    Hashable, so locations can be collected in sets and used as keys.
    """
    file: str
    line: int
    column: int
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"
