"""
Parser

Rust Pattern: rustc_parse
"""

import logging
from pathlib import Path
from typing import Optional

from lark import Lark
from lark.exceptions import (
    UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken,
    ParseError as LarkParseError,
)

from .transformer import ModuleTransformer
from ..shared.errors import ModgraphSourceError
from ..shared.nodes import Program
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_PARSER_CACHE_FILE

logger = logging.getLogger("modgraph.frontend.parser")


class ParseError(ModgraphSourceError):
    """Parse error with source location"""
    def __init__(self, message: str, source_file: str, location: Optional[SourceLocation] = None,
                 source_code: Optional[str] = None, note: Optional[str] = None):
        super().__init__(message, location, error_code="E0001", source_code=source_code, note=note)
        self.source_file = source_file


class Parser:
    """
    Parser (Rust naming: rustc_parse).

    - Takes module source text, returns the AST (Program)
    - Preserves source locations (file = module URI)
    - Converts Lark errors into ParseError
    - Uses Lark LALR with native grammar caching

    Stateless between calls: a fresh transformer is built per parse, so
    one Parser can be shared by every crawl in the process.
    """

    def __init__(self, cache_file: str = DEFAULT_PARSER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            str(grammar_path),
            start='program',
            parser='lalr',              # Required for caching
            cache=cache_file,           # Built-in caching
            propagate_positions=True,   # Position tracking for diagnostics
            maybe_placeholders=False,
        )

    def parse(self, source: str, source_file: str = "<input>", include_documentation: bool = False) -> Program:
        """
        Parse source code to AST.

        Rust Pattern: rustc_parse::parse()
        """
        transformer = ModuleTransformer(source_file, include_documentation=include_documentation)
        try:
            tree = self.parser.parse(source)
        except UnexpectedInput as e:
            raise self._convert_error(e, source, source_file) from e
        except LarkParseError as e:
            raise ParseError(f"Parse error: {e}", source_file, source_code=source) from e
        logger.debug(f"Parsed {source_file}")
        return transformer.transform(tree)

    def _convert_error(self, error: UnexpectedInput, source: str, source_file: str) -> ParseError:
        note = None
        if isinstance(error, UnexpectedEOF):
            lines = source.split("\n")
            location = SourceLocation(file=source_file, line=len(lines), column=len(lines[-1]) + 1)
            message = "Parse error: unexpected end of input"
            note = _expected_note(error.expected)
        elif isinstance(error, UnexpectedToken):
            location = SourceLocation(file=source_file, line=error.line, column=error.column,
                                      end_line=error.token.end_line or 0,
                                      end_column=error.token.end_column or 0)
            if error.token.type == "$END":
                message = "Parse error: unexpected end of input"
            else:
                message = f"Parse error: unexpected token {str(error.token)!r}"
            note = _expected_note(error.accepts or error.expected)
        elif isinstance(error, UnexpectedCharacters):
            location = SourceLocation(file=source_file, line=error.line, column=error.column)
            message = f"Parse error: unexpected character {error.char!r}"
        else:
            location = SourceLocation(file=source_file, line=max(error.line, 1), column=max(error.column, 1))
            message = f"Parse error: {error}"
        return ParseError(message, source_file, location, source_code=source, note=note)


def _expected_note(expected) -> Optional[str]:
    if not expected:
        return None
    return f"expected one of: {', '.join(sorted(expected))}"
