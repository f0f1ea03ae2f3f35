"""
Module Records and Crawl Results

Rust Pattern: rustc_resolve::module::Module
"""

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from .symbol_table import SymbolTable
from ...shared.nodes import Program


class ModuleRecord:
    """
    A parsed, not yet cross-resolved module.

    Identity is the URI of the ModuleSource it was parsed from; the source
    itself is not kept, only the decoded text (for diagnostics). Immutable
    after construction except for the import-request slots of its symbol
    table, which the crawler fills before the record is cached.
    """
    __slots__ = ('uri', 'program', 'symbol_table', 'source_code')

    def __init__(self, uri: str, program: Program, symbol_table: SymbolTable,
                 source_code: Optional[str] = None):
        self.uri = uri
        self.program = program
        self.symbol_table = symbol_table
        self.source_code = source_code

    def dependencies(self) -> List[str]:
        """URIs of the resolved imports, in import order"""
        return [request.target_uri for request in self.symbol_table.resolved_imports()]

    def __repr__(self) -> str:
        return f"ModuleRecord({self.uri}, declared={sorted(self.symbol_table.declared)})"


class CrawlResult:
    """
    Every module reachable from a root, keyed by URI (root first, then
    breadth-first discovery order).
    """

    def __init__(self):
        self._records: Dict[str, ModuleRecord] = {}

    def add(self, record: ModuleRecord) -> None:
        self._records[record.uri] = record

    def __contains__(self, uri: object) -> bool:
        return uri in self._records

    def __getitem__(self, uri: str) -> ModuleRecord:
        return self._records[uri]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, uri: str) -> Optional[ModuleRecord]:
        return self._records.get(uri)

    def records(self) -> List[ModuleRecord]:
        return list(self._records.values())

    def to_map(self) -> Mapping[str, ModuleRecord]:
        """Read-only view of uri -> ModuleRecord"""
        return MappingProxyType(self._records)

    def symbol_tables(self) -> Dict[str, SymbolTable]:
        return {uri: record.symbol_table for uri, record in self._records.items()}

    def __repr__(self) -> str:
        return f"CrawlResult({list(self._records)})"
