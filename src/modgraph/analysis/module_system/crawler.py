"""
Module Crawler

Discovers and parses, exactly once, every module transitively reachable
from a root module through its imports.

Rust Pattern: rustc_metadata::creader (crate loading) driving rustc_resolve

Breadth-first walk over located imports:
- the result set answers "seen in this crawl" (cycles and diamonds stop here)
- the ModuleCache answers "seen ever" (no re-parse across crawls)
- a module's imports are all located before it is cached, so a failed
  crawl never leaves a half-resolved record in the cache
- located sources live only in the queue; records keep URIs, not content
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Sequence

from .cache import ModuleCache
from .configuration import ModuleParsingConfiguration
from .finder import ModuleFinder, ModuleNotFound
from .module_parser import ModuleParser
from .module_record import CrawlResult, ModuleRecord
from .module_source import ModuleSource
from .suggestions import (
    CandidateLister, FilesystemCandidateLister, candidate_modules, format_help, suggest,
)
from .symbol_table import ImportRequest, ResolvedImport
from ...shared.errors import ModgraphError, ModgraphSourceError
from ...shared.source_location import SourceLocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _PendingModule:
    """Queued dependency: its URI, the import that named it and, when just located, its source"""
    uri: str
    importer: ModuleRecord
    request: ResolvedImport
    source: Optional[ModuleSource] = None


class ModuleResolutionError(ModgraphSourceError):
    """Raised when an import path cannot be located"""
    def __init__(self, not_found: ModuleNotFound, location: Optional[SourceLocation],
                 suggestions: Sequence[str], candidates: Sequence[str],
                 source_code: Optional[str] = None):
        super().__init__(
            not_found.message,
            location,
            error_code="E0583",
            source_code=source_code,
            help=format_help(not_found.import_path, suggestions, candidates),
            label="unresolved import",
        )
        self.import_path = not_found.import_path
        self.looked_paths = not_found.looked_paths
        self.requesting_uri = not_found.requesting_uri
        self.suggestions = list(suggestions)
        self.candidates = list(candidates)


class ModuleCrawler:
    """
    Breadth-first, cache-augmented import graph traversal.

    The first import that cannot be located (in breadth-first order)
    aborts the crawl with ModuleResolutionError; parse errors of
    discovered modules propagate unchanged.
    """

    def __init__(
        self,
        configuration: ModuleParsingConfiguration,
        finder: ModuleFinder,
        cache: ModuleCache,
        parser: Optional[ModuleParser] = None,
        candidate_lister: Optional[CandidateLister] = None,
    ):
        self.configuration = configuration
        self.finder = finder
        self.cache = cache
        self.parser = parser if parser is not None else ModuleParser(configuration)
        self.candidate_lister = candidate_lister if candidate_lister is not None else FilesystemCandidateLister()

    def crawl(self, root: ModuleRecord) -> CrawlResult:
        """
        Args:
            root: parsed root module (its imports may still be unresolved)

        Returns:
            CrawlResult with the root and every reachable module

        Raises:
            ModuleResolutionError: an import path cannot be located
            ParseError / DuplicateSymbolError: a discovered module is invalid
            OSError: a discovered module cannot be read
        """
        result = CrawlResult()
        result.add(root)
        queue: Deque[_PendingModule] = deque(self._resolve_imports(root))
        self.cache.put_if_absent(root)

        while queue:
            pending = queue.popleft()
            if pending.uri in result:
                continue

            record = self.cache.get(pending.uri)
            if record is None:
                logger.debug(f"Cache miss: {pending.uri}")
                source = pending.source if pending.source is not None else self._relocate(pending)
                parsed = self.parser.parse(source)
                located = self._resolve_imports(parsed)
                # Another crawl may have cached the same URI meanwhile; keep the first
                record = self.cache.put_if_absent(parsed)
                queue.extend(located if record is parsed else self._dependencies(record))
            else:
                logger.debug(f"Cache hit: {pending.uri}")
                queue.extend(self._dependencies(record))
            result.add(record)

        logger.debug(f"Crawled {len(result)} modules from {root.uri}")
        return result

    def _resolve_imports(self, record: ModuleRecord) -> List[_PendingModule]:
        """Locate every unresolved import path of record, in import order"""
        table = record.symbol_table
        pending: List[_PendingModule] = []
        for index, request in enumerate(table.imports):
            if isinstance(request, ResolvedImport):
                pending.append(_PendingModule(request.target_uri, record, request))
                continue
            found = self.finder.find(record.uri, request.path)
            if isinstance(found, ModuleNotFound):
                raise self._not_found_error(record, request, found)
            pending.append(_PendingModule(found.uri, record, table.resolve_import(index, found), found))
        return pending

    @staticmethod
    def _dependencies(record: ModuleRecord) -> List[_PendingModule]:
        return [_PendingModule(r.target_uri, record, r) for r in record.symbol_table.resolved_imports()]

    def _relocate(self, pending: _PendingModule) -> ModuleSource:
        """
        Locate a dependency of a cached record again.

        Records keep only the URIs of their imports. A dependency that never
        made it into the cache (its crawl failed after the importer was
        cached) has no source left and goes back through the finder.
        """
        found = self.finder.find(pending.importer.uri, pending.request.path)
        if isinstance(found, ModuleNotFound):
            raise self._not_found_error(pending.importer, pending.request, found)
        if found.uri != pending.uri:
            raise ModgraphError(
                f"Import '{pending.request.path}' in {pending.importer.uri} now resolves to "
                f"{found.uri}, previously {pending.uri}",
                pending.request.location,
            )
        return found

    def _not_found_error(self, record: ModuleRecord, request: ImportRequest,
                         not_found: ModuleNotFound) -> ModuleResolutionError:
        candidates = list(self.candidate_lister.list_candidates(not_found.looked_paths))
        suggestions = suggest(not_found.import_path, candidates)
        logger.debug(f"Import '{not_found.import_path}' in {record.uri} failed; "
                     f"{len(suggestions)} suggestions from {len(candidates)} candidates")
        return ModuleResolutionError(
            not_found,
            location=request.location,
            suggestions=suggestions,
            candidates=candidate_modules(candidates),
            source_code=record.source_code,
        )


def crawl(
    root: ModuleRecord,
    configuration: ModuleParsingConfiguration,
    finder: ModuleFinder,
    cache: ModuleCache,
    parser: Optional[ModuleParser] = None,
    candidate_lister: Optional[CandidateLister] = None,
) -> CrawlResult:
    """Crawl the dependencies of root (see ModuleCrawler.crawl)"""
    return ModuleCrawler(configuration, finder, cache, parser, candidate_lister).crawl(root)
