"""
Diagnostics

Rust Pattern: rustc_errors::{Diagnostic, emitter::EmitterWriter}

Every error raised by modgraph is a ModgraphError. Errors that point into
a module source (parse errors, unresolved imports, unknown symbols,
duplicate names) are ModgraphSourceErrors: they carry a Diagnostic and
the text of the module they point into, and render as

    error[E0583]: module 'utils' not found
     --> file:///work/main.mg:1:6
      |
    1 | from utils import Helper
      |      ^^^^^ unresolved import
      |
      = help: Maybe you meant: util
"""

import os
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from .source_location import SourceLocation
from ..utils.config import ERROR_POINTER_CHAR

_ANSI = {
    "bold": "\033[1m",
    "red": "\033[31m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}
_ANSI_RESET = "\033[0m"

# Characters that end a token when a location has no end column
_SPAN_BREAKS = frozenset(" \t,:{}()")


def colors_enabled() -> bool:
    """NO_COLOR (any value) or MODGRAPH_COLOR=0/false/no/never turn colors off"""
    if os.environ.get("NO_COLOR"):
        return False
    return os.environ.get("MODGRAPH_COLOR", "").lower() not in ("0", "false", "no", "never")


@dataclass(frozen=True)
class Diagnostic:
    """One renderable diagnostic (error code, message, span, help/note/label)"""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


class DiagnosticRenderer:
    """
    Renders Diagnostics against a set of known sources (file -> text).

    Locations whose file is unknown, or whose line is out of range, are
    rendered as a bare `--> file:line:col` without a snippet.
    """

    def __init__(self, source_files: Optional[Dict[str, str]] = None, color: bool = False):
        self.source_files = dict(source_files or {})
        self.color = color

    def paint(self, text: str, *styles: str) -> str:
        if not self.color or not styles:
            return text
        return "".join(_ANSI[s] for s in styles) + text + _ANSI_RESET

    def render(self, diagnostic: Diagnostic) -> str:
        code = f"[{diagnostic.code}]" if diagnostic.code else ""
        lines = [self.paint(f"error{code}", "bold", "red") + self.paint(f": {diagnostic.message}", "bold")]

        loc = diagnostic.location
        source_line = self._source_line(loc)
        if source_line is None:
            where = str(loc) if loc is not None else "<unknown location>"
            lines.append(self.paint(" --> ", "bold", "blue") + where)
            gutter = 1
        else:
            gutter = len(str(loc.line))
            lines.extend(self._snippet(diagnostic, loc, source_line, gutter))

        extras = [(kind, text) for kind, text in (("help", diagnostic.help), ("note", diagnostic.note)) if text]
        if extras:
            margin = " " * (gutter + 1)
            lines.append(self.paint(margin + "|", "bold", "blue"))
            for kind, text in extras:
                lines.append(self.paint(f"{margin}= ", "bold", "cyan") + self.paint(f"{kind}: ", "bold") + text)
        return "\n".join(lines)

    def _source_line(self, loc: Optional[SourceLocation]) -> Optional[str]:
        if loc is None or loc.file not in self.source_files:
            return None
        source_lines = self.source_files[loc.file].split("\n")
        if not 0 < loc.line <= len(source_lines):
            return None
        return source_lines[loc.line - 1]

    def _snippet(self, diagnostic: Diagnostic, loc: SourceLocation, source_line: str, gutter: int) -> List[str]:
        margin = " " * (gutter + 1)
        start = max(loc.column, 1) - 1
        pointer = " " * start + ERROR_POINTER_CHAR * _span_width(loc, source_line, start)
        if diagnostic.label:
            pointer += f" {diagnostic.label}"
        return [
            self.paint(" " * gutter + "--> ", "bold", "blue") + str(loc),
            self.paint(margin + "|", "bold", "blue"),
            self.paint(f"{loc.line:>{gutter}} | ", "bold", "blue") + source_line,
            self.paint(margin + "| ", "bold", "blue") + self.paint(pointer, "bold", "red"),
        ]


def _span_width(loc: SourceLocation, source_line: str, start: int) -> int:
    """Caret count: the location's own span on this line, else the token at start"""
    if loc.end_column > loc.column and loc.end_line in (0, loc.line):
        return loc.end_column - loc.column
    width = 0
    for ch in source_line[start:]:
        if ch in _SPAN_BREAKS:
            break
        width += 1
    return max(1, width)


def format_diagnostic(diagnostic: Diagnostic, source_files: Dict[str, str], color: bool = False) -> str:
    """Render a single diagnostic in rustc style"""
    return DiagnosticRenderer(source_files, color).render(diagnostic)


class ModgraphError(Exception):
    """Base exception for all modgraph errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location is None:
            return self.message
        return f"{self.message}\n --> {self.location}"


class ModgraphSourceError(ModgraphError):
    """
    Error located in a module source, rendered rustc style.

    Subclasses fix the error code and build help/note/label text; the
    source text is the decoded module the location points into.
    """
    def __init__(self, message: str, location: Optional[SourceLocation] = None, error_code: str = "E0001",
                 source_code: Optional[str] = None, help: Optional[str] = None,
                 note: Optional[str] = None, label: Optional[str] = None):
        super().__init__(message, location)
        self.source_code = source_code
        self.diagnostic = Diagnostic(message, location, error_code, help, note, label)

    @property
    def error_code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def help_text(self) -> Optional[str]:
        return self.diagnostic.help

    @property
    def note_text(self) -> Optional[str]:
        return self.diagnostic.note

    @property
    def label_text(self) -> Optional[str]:
        return self.diagnostic.label

    def to_diagnostic(self) -> Diagnostic:
        # message/location may have been reassigned after construction
        return replace(self.diagnostic, message=self.message, location=self.location)

    def render(self, color: Optional[bool] = None) -> str:
        sources = {}
        if self.location is not None and self.source_code is not None:
            sources[self.location.file] = self.source_code
        renderer = DiagnosticRenderer(sources, colors_enabled() if color is None else color)
        return renderer.render(self.to_diagnostic())

    def __str__(self):
        return self.render()
