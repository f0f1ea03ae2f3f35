"""
Symbol Tables

Per-module record of declared symbols and of import requests.

Rust Pattern: rustc_resolve::imports::ImportDirective

Import requests are a two-state value: an UnresolvedImport (path +
imported symbols with their reference sites) becomes a ResolvedImport
(adds the URI of the module the path resolved to) once the finder located
the module. A path is resolved once per module and shared by every
reference site that uses it.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .module_source import ModuleSource
from ...shared.ast_visitor import ASTVisitor
from ...shared.errors import ModgraphSourceError
from ...shared.nodes import DeclarationKind, ImportPath, ImportTarget, Program, TypeReference
from ...shared.source_location import SourceLocation

logger = logging.getLogger(__name__)


class DuplicateSymbolError(ModgraphSourceError):
    """Raised when a module binds the same name twice (declaration or import)"""
    def __init__(self, name: str, location: Optional[SourceLocation],
                 previous: Optional[SourceLocation], source_code: Optional[str] = None):
        super().__init__(
            f"the name '{name}' is defined multiple times",
            location,
            error_code="E0428",
            source_code=source_code,
            note=f"previous definition of '{name}' at {previous}" if previous else None,
            label=f"'{name}' redefined here",
        )
        self.name = name
        self.previous = previous


@dataclass(frozen=True)
class SymbolInfo:
    """A declaration exposed by a module"""
    name: str
    kind: DeclarationKind
    module_uri: str
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        return f"{self.kind.value} {self.name}"


@dataclass(frozen=True)
class ImportedSymbol:
    """
    One name imported from a module.

    location is the import statement site, usages are the places in the
    module body that refer to the imported name.
    """
    name: str
    local_name: str
    location: Optional[SourceLocation]
    usages: Tuple[SourceLocation, ...] = ()

    @property
    def sites(self) -> List[SourceLocation]:
        """Every reference site, import statement first"""
        head = [self.location] if self.location is not None else []
        return head + list(self.usages)


@dataclass(frozen=True)
class UnresolvedImport:
    """Import request whose path has not been located yet"""
    path: ImportPath
    symbols: Tuple[ImportedSymbol, ...]
    location: Optional[SourceLocation] = None  # span of the path in the first statement using it

    def resolve(self, source: ModuleSource) -> 'ResolvedImport':
        return ResolvedImport(path=self.path, symbols=self.symbols, location=self.location, target_uri=source.uri)


@dataclass(frozen=True)
class ResolvedImport:
    """Import request bound to the URI of the module its path resolved to"""
    path: ImportPath
    symbols: Tuple[ImportedSymbol, ...]
    location: Optional[SourceLocation]
    target_uri: str


ImportRequest = Union[UnresolvedImport, ResolvedImport]


class SymbolTable:
    """
    Symbols of one module.

    - declared: name -> SymbolInfo (unique per name)
    - imports: ordered import requests, one per distinct import path
    """

    def __init__(self, uri: str):
        self.uri = uri
        self.declared: Dict[str, SymbolInfo] = {}
        self._imports: List[ImportRequest] = []

    @property
    def imports(self) -> Tuple[ImportRequest, ...]:
        return tuple(self._imports)

    def declare(self, symbol: SymbolInfo, source_code: Optional[str] = None) -> None:
        previous = self.declared.get(symbol.name)
        if previous is not None:
            raise DuplicateSymbolError(symbol.name, symbol.location, previous.location, source_code)
        self.declared[symbol.name] = symbol

    def lookup(self, name: str) -> Optional[SymbolInfo]:
        return self.declared.get(name)

    def add_import(self, request: ImportRequest) -> None:
        self._imports.append(request)

    def resolve_import(self, index: int, source: ModuleSource) -> ResolvedImport:
        """Bind import request `index` to `source` (once; re-binding to the same URI is a no-op)"""
        request = self._imports[index]
        if isinstance(request, ResolvedImport):
            if request.target_uri != source.uri:
                raise ValueError(
                    f"Import '{request.path}' in {self.uri} already resolved to {request.target_uri}"
                )
            return request
        resolved = request.resolve(source)
        self._imports[index] = resolved
        return resolved

    def resolved_imports(self) -> List[ResolvedImport]:
        return [r for r in self._imports if isinstance(r, ResolvedImport)]

    def unresolved_imports(self) -> List[UnresolvedImport]:
        return [r for r in self._imports if isinstance(r, UnresolvedImport)]

    def is_fully_resolved(self) -> bool:
        return all(isinstance(r, ResolvedImport) for r in self._imports)

    def imported_symbols(self) -> Iterator[Tuple[ImportRequest, ImportedSymbol]]:
        for request in self._imports:
            for symbol in request.symbols:
                yield request, symbol

    def __repr__(self) -> str:
        return (f"SymbolTable({self.uri}, declared={sorted(self.declared)}, "
                f"imports={[str(r.path) for r in self._imports]})")


class _ReferenceCollector(ASTVisitor[None]):
    """Collects type references whose name is one of the imported local names"""

    def __init__(self, imported_names: Dict[str, ImportTarget]):
        self.imported_names = imported_names
        self.usages: Dict[str, List[SourceLocation]] = {name: [] for name in imported_names}

    def visit_type_reference(self, node: TypeReference) -> None:
        if node.is_builtin or node.location is None:
            return
        if node.name in self.imported_names:
            self.usages[node.name].append(node.location)


def build_symbol_table(uri: str, program: Program, source_code: Optional[str] = None) -> SymbolTable:
    """
    Build the initial (unresolved) symbol table of a parsed module.

    Raises:
        DuplicateSymbolError: a name is declared twice, or an imported
            name clashes with a declaration or another import
    """
    table = SymbolTable(uri)
    for decl in program.declarations:
        table.declare(SymbolInfo(decl.name, decl.kind, uri, decl.location), source_code)

    # Group targets by path, preserving first-appearance order
    targets_by_path: Dict[ImportPath, List[ImportTarget]] = {}
    path_locations: Dict[ImportPath, Optional[SourceLocation]] = {}
    bound: Dict[str, ImportTarget] = {}
    for stmt in program.imports:
        targets = targets_by_path.setdefault(stmt.path, [])
        path_locations.setdefault(stmt.path, stmt.path_location)
        for target in stmt.targets:
            local = target.local_name
            previous = table.declared.get(local)
            if previous is not None:
                raise DuplicateSymbolError(local, target.location, previous.location, source_code)
            if local in bound:
                raise DuplicateSymbolError(local, target.location, bound[local].location, source_code)
            bound[local] = target
            targets.append(target)

    collector = _ReferenceCollector(bound)
    for decl in program.declarations:
        decl.accept(collector)

    for path, targets in targets_by_path.items():
        symbols = tuple(
            ImportedSymbol(
                name=t.name,
                local_name=t.local_name,
                location=t.location,
                usages=tuple(collector.usages[t.local_name]),
            )
            for t in targets
        )
        table.add_import(UnresolvedImport(path=path, symbols=symbols, location=path_locations[path]))

    logger.debug(f"Symbol table for {uri}: {len(table.declared)} declared, {len(table.imports)} import paths")
    return table
