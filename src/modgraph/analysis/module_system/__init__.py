"""Module system: sources, finders, symbol tables, crawling, symbol resolution."""

from .module_source import ModuleSource, FileModuleSource, StringModuleSource
from .configuration import ModuleParsingConfiguration
from .symbol_table import (
    SymbolTable, SymbolInfo, ImportedSymbol, ImportRequest, UnresolvedImport, ResolvedImport,
    DuplicateSymbolError, build_symbol_table,
)
from .module_record import ModuleRecord, CrawlResult
from .finder import ModuleFinder, FileSystemModuleFinder, InMemoryModuleFinder, ModuleNotFound, FindResult
from .module_parser import ModuleParser
from .cache import ModuleCache
from .suggestions import CandidateLister, FilesystemCandidateLister, StaticCandidateLister, suggest
from .crawler import ModuleCrawler, ModuleResolutionError, crawl
from .symbol_resolver import SymbolReferenceResolver, SymbolNotFoundError, ResolvedReferences, resolve

__all__ = [
    'ModuleSource', 'FileModuleSource', 'StringModuleSource',
    'ModuleParsingConfiguration',
    'SymbolTable', 'SymbolInfo', 'ImportedSymbol', 'ImportRequest', 'UnresolvedImport', 'ResolvedImport',
    'DuplicateSymbolError', 'build_symbol_table',
    'ModuleRecord', 'CrawlResult',
    'ModuleFinder', 'FileSystemModuleFinder', 'InMemoryModuleFinder', 'ModuleNotFound', 'FindResult',
    'ModuleParser',
    'ModuleCache',
    'CandidateLister', 'FilesystemCandidateLister', 'StaticCandidateLister', 'suggest',
    'ModuleCrawler', 'ModuleResolutionError', 'crawl',
    'SymbolReferenceResolver', 'SymbolNotFoundError', 'ResolvedReferences', 'resolve',
]
