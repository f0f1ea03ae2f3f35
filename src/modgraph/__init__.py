"""
modgraph: module resolution for `.mg` service-description sources.

Given a root module, discovers every module reachable through imports,
parses each once, builds per-module symbol tables and binds every
imported symbol to its declaration.

    from modgraph import Modules
    result = Modules().parse_file("main.mg")
"""

from .compiler.modules import Modules, ModuleParsedResult
from .analysis.module_system import (
    ModuleParsingConfiguration, ModuleCache, ModuleCrawler, SymbolReferenceResolver,
    FileSystemModuleFinder, InMemoryModuleFinder,
    ModuleResolutionError, SymbolNotFoundError, DuplicateSymbolError,
)
from .frontend.parser import ParseError
from .shared.errors import ModgraphError

__all__ = [
    "Modules", "ModuleParsedResult",
    "ModuleParsingConfiguration", "ModuleCache", "ModuleCrawler", "SymbolReferenceResolver",
    "FileSystemModuleFinder", "InMemoryModuleFinder",
    "ModuleResolutionError", "SymbolNotFoundError", "DuplicateSymbolError",
    "ParseError", "ModgraphError",
]
