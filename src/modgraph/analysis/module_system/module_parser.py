"""
Module Parser

ModuleSource -> ModuleRecord: decode, parse to AST, build the initial
(unresolved) symbol table.

Rust Pattern: rustc_parse::new_parser_from_source_str + rustc_resolve::build_reduced_graph
"""

import logging
from functools import lru_cache
from typing import Optional

from .configuration import ModuleParsingConfiguration
from .module_record import ModuleRecord
from .module_source import ModuleSource
from .symbol_table import build_symbol_table
from ...frontend.parser import ParseError, Parser
from ...utils.io_utils import decode_source

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def shared_parser() -> Parser:
    """Process-wide Parser (the Lark grammar is loaded once)"""
    return Parser()


class ModuleParser:
    """Builds ModuleRecords from ModuleSources"""

    def __init__(self, configuration: ModuleParsingConfiguration, parser: Optional[Parser] = None):
        self.configuration = configuration
        self.parser = parser if parser is not None else shared_parser()

    def parse(self, source: ModuleSource) -> ModuleRecord:
        """
        Raises:
            ParseError: content is not valid module syntax or cannot be decoded
            DuplicateSymbolError: the module binds a name twice
            OSError: content cannot be read
        """
        raw = source.read_bytes()
        try:
            text = decode_source(raw, self.configuration.charset)
        except UnicodeDecodeError as e:
            raise ParseError(
                f"Cannot decode module with charset '{self.configuration.charset}': {e.reason}",
                source.uri,
            ) from e

        program = self.parser.parse(
            text, source.uri, include_documentation=self.configuration.include_documentation
        )
        symbol_table = build_symbol_table(source.uri, program, text)
        logger.debug(f"Parsed module {source.uri}")
        return ModuleRecord(source.uri, program, symbol_table, text)
