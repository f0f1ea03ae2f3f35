"""
Symbol Reference Resolution

Binds every imported-symbol reference of every crawled module to the
declaration it names in the defining module.

Rust Pattern: rustc_resolve::UseTree resolution

Names are matched exactly against the defining module's declarations;
fuzzy matching is reserved for path diagnostics. This class is stateless
and can be shared/reused.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .module_record import CrawlResult
from .symbol_table import ImportedSymbol, ResolvedImport, SymbolInfo
from ...shared.errors import ModgraphError, ModgraphSourceError
from ...shared.nodes import ImportPath
from ...shared.source_location import SourceLocation

logger = logging.getLogger(__name__)

# defining module URI -> declaration -> every site referencing it
ResolvedReferences = Dict[str, Dict[SymbolInfo, List[SourceLocation]]]


class SymbolNotFoundError(ModgraphSourceError):
    """Raised when an imported module does not declare the imported name"""
    def __init__(self, symbol: str, location: Optional[SourceLocation], module_uri: str,
                 import_path: ImportPath, declared: Iterable[str], source_code: Optional[str] = None):
        declared = sorted(declared)
        super().__init__(
            f"symbol '{symbol}' is not declared in module '{module_uri}'",
            location,
            error_code="E0432",
            source_code=source_code,
            help=(f"'{import_path}' declares: {', '.join(declared)}" if declared
                  else f"'{import_path}' declares no symbols"),
            label=f"no '{symbol}' in '{import_path}'",
        )
        self.symbol = symbol
        self.module_uri = module_uri
        self.import_path = import_path


class SymbolReferenceResolver:
    """
    Resolves imported symbols across a CrawlResult.

    The first symbol that is missing from its defining module (modules in
    crawl order, imports in source order) aborts resolution.
    """

    def resolve(self, crawl_result: CrawlResult) -> ResolvedReferences:
        """
        Returns:
            defining module URI -> {declaration: [reference sites]}

        Raises:
            SymbolNotFoundError: an imported name is not declared by its module
        """
        references: ResolvedReferences = {}
        for record in crawl_result.records():
            for request, imported in record.symbol_table.imported_symbols():
                if not isinstance(request, ResolvedImport):
                    raise ModgraphError(
                        f"Import '{request.path}' in {record.uri} was never located; crawl before resolving",
                        request.location,
                    )
                declaration = self._lookup(crawl_result, request, imported, record.source_code)
                sites = references.setdefault(declaration.module_uri, {}).setdefault(declaration, [])
                sites.extend(imported.sites)

        logger.debug(f"Resolved references into {len(references)} modules")
        return references

    def _lookup(self, crawl_result: CrawlResult, request: ResolvedImport, imported: ImportedSymbol,
                importer_source: Optional[str]) -> SymbolInfo:
        target = crawl_result.get(request.target_uri)
        if target is None:
            raise ModgraphError(
                f"Module {request.target_uri} is missing from the crawl result",
                request.location,
            )
        declaration = target.symbol_table.lookup(imported.name)
        if declaration is None:
            raise SymbolNotFoundError(
                imported.name,
                imported.location,
                target.uri,
                request.path,
                target.symbol_table.declared.keys(),
                source_code=importer_source,
            )
        return declaration


def resolve(crawl_result: CrawlResult) -> ResolvedReferences:
    """Resolve every imported symbol in crawl_result (see SymbolReferenceResolver.resolve)"""
    return SymbolReferenceResolver().resolve(crawl_result)
