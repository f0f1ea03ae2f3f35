"""
Modules

Public entry point of the resolution core: parse root -> crawl -> resolve.

Rust Pattern: rustc_driver::driver (phase sequencing only)

Errors from any stage surface unchanged; this layer adds none of its own.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from ..analysis.module_system.cache import ModuleCache
from ..analysis.module_system.configuration import ModuleParsingConfiguration
from ..analysis.module_system.crawler import ModuleCrawler
from ..analysis.module_system.finder import FileSystemModuleFinder, ModuleFinder
from ..analysis.module_system.module_parser import ModuleParser, shared_parser
from ..analysis.module_system.module_source import StringModuleSource
from ..analysis.module_system.suggestions import CandidateLister
from ..analysis.module_system.symbol_resolver import ResolvedReferences, SymbolReferenceResolver
from ..analysis.module_system.symbol_table import SymbolTable
from ..frontend.parser import Parser
from ..shared.nodes import Program
from ..utils.io_utils import RawInput, read_source_bytes, to_uri

logger = logging.getLogger(__name__)


@dataclass
class ModuleParsedResult:
    """
    - program: AST of the root module
    - symbol_tables: module URI -> SymbolTable for every crawled module
    - resolved_references: defining module URI -> {declaration: [reference sites]}
    """
    root_uri: str
    program: Program
    symbol_tables: Dict[str, SymbolTable]
    resolved_references: ResolvedReferences


class Modules:
    """
    Orchestrates module parsing for one process (or one tool session).

    Holds the ModuleCache shared by every parse_module() call made through
    it; pass a cache explicitly to share it wider or to start clean.
    """

    def __init__(
        self,
        configuration: Optional[ModuleParsingConfiguration] = None,
        finder: Optional[ModuleFinder] = None,
        cache: Optional[ModuleCache] = None,
        parser: Optional[Parser] = None,
        candidate_lister: Optional[CandidateLister] = None,
    ):
        """
        Args:
            configuration: default configuration for calls that pass None
            finder: module finder (FileSystemModuleFinder over the
                    configuration's package paths if None)
            cache: module cache (a fresh one if None)
            parser: frontend parser (the process-wide one if None)
            candidate_lister: source of import suggestions (filesystem if None)
        """
        self.configuration = configuration if configuration is not None else ModuleParsingConfiguration()
        self.finder = finder
        self.cache = cache if cache is not None else ModuleCache()
        self.parser = parser if parser is not None else shared_parser()
        self.candidate_lister = candidate_lister
        self.resolver = SymbolReferenceResolver()

    def parse_module(
        self,
        configuration: Optional[ModuleParsingConfiguration],
        raw_input: RawInput,
        base_location: Union[Path, str],
    ) -> ModuleParsedResult:
        """
        Parse a root module and everything it imports.

        Args:
            configuration: parsing options (the instance default if None)
            raw_input: root module content (bytes, text, or binary stream)
            base_location: path or URI of the root module; relative imports
                           resolve from its directory

        Raises:
            ParseError, DuplicateSymbolError, ModuleResolutionError,
            SymbolNotFoundError, OSError
        """
        configuration = configuration if configuration is not None else self.configuration
        module_parser = ModuleParser(configuration, self.parser)
        finder = self.finder if self.finder is not None else FileSystemModuleFinder(configuration.package_paths)

        content = raw_input if isinstance(raw_input, (bytes, str)) else raw_input.read()
        root_source = StringModuleSource(to_uri(base_location), content, configuration.charset)

        # Phase 1: parse root
        root = module_parser.parse(root_source)
        # Phase 2: crawl imports
        crawler = ModuleCrawler(configuration, finder, self.cache, module_parser, self.candidate_lister)
        crawl_result = crawler.crawl(root)
        # Phase 3: resolve symbols
        references = self.resolver.resolve(crawl_result)

        logger.debug(f"Parsed {root.uri}: {len(crawl_result)} modules, "
                     f"{sum(len(v) for v in references.values())} referenced declarations")
        return ModuleParsedResult(
            root_uri=root.uri,
            program=root.program,
            symbol_tables=crawl_result.symbol_tables(),
            resolved_references=references,
        )

    def parse_file(self, path: Union[Path, str],
                   configuration: Optional[ModuleParsingConfiguration] = None) -> ModuleParsedResult:
        """parse_module() for a module on disk, using its own path as base location"""
        path = Path(path)
        return self.parse_module(configuration, read_source_bytes(path), path)
