"""
AST Nodes

Rust Pattern: rustc_ast::ast

Nodes for module sources: import statements and the three declaration
forms (type, interface, service). Every node carries its SourceLocation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, TypeVar, Union, TYPE_CHECKING

from .source_location import SourceLocation
from ..utils.config import BUILTIN_TYPE_NAMES, IMPORT_PATH_SEPARATOR

if TYPE_CHECKING:
    from .ast_visitor import ASTVisitor

T = TypeVar('T')


class NodeType(Enum):
    PROGRAM = "program"
    IMPORT_STMT = "import_stmt"
    IMPORT_TARGET = "import_target"
    TYPE_DECL = "type_decl"
    INTERFACE_DECL = "interface_decl"
    SERVICE_DECL = "service_decl"
    OPERATION = "operation"
    TYPE_REF = "type_ref"
    RECORD_TYPE = "record_type"
    FIELD = "field"


class DeclarationKind(Enum):
    TYPE = "type"
    INTERFACE = "interface"
    SERVICE = "service"


@dataclass(frozen=True)
class ImportPath:
    """
    Import path as written in a `from ... import` statement.

    level is the number of leading dots (0 = absolute path).

        ImportPath.parse("a.b")   -> level=0, parts=('a', 'b')
        ImportPath.parse("..a")   -> level=2, parts=('a',)
    """
    level: int
    parts: Tuple[str, ...]

    @classmethod
    def parse(cls, text: str) -> 'ImportPath':
        stripped = text.lstrip(IMPORT_PATH_SEPARATOR)
        level = len(text) - len(stripped)
        parts = tuple(stripped.split(IMPORT_PATH_SEPARATOR)) if stripped else ()
        return cls(level=level, parts=parts)

    @property
    def is_relative(self) -> bool:
        return self.level > 0

    @property
    def dotted_name(self) -> str:
        """The path without its relative prefix ('..a.b' -> 'a.b')"""
        return IMPORT_PATH_SEPARATOR.join(self.parts)

    def __str__(self) -> str:
        return IMPORT_PATH_SEPARATOR * self.level + self.dotted_name


class ASTNode:
    """
    Base class for all AST nodes

    Visitor Pattern Support (LLVM-style):
    - All nodes have accept() method for polymorphic dispatch
    """
    __slots__ = ('node_type', 'location')

    def __init__(self, node_type: NodeType, location: Optional[SourceLocation]):
        self.node_type = node_type
        self.location = location

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        raise NotImplementedError(f"{type(self).__name__} does not implement accept()")


class TypeReference(ASTNode):
    """A type used by name (`type Order: Item`, `op(Request)`)"""
    __slots__ = ('name',)

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.TYPE_REF, location)
        self.name = name

    @property
    def is_builtin(self) -> bool:
        return self.name in BUILTIN_TYPE_NAMES

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_type_reference(self)

    def __repr__(self) -> str:
        return f"TypeReference({self.name!r})"


class Field(ASTNode):
    """Record field `name: type-expr`"""
    __slots__ = ('name', 'type_expr', 'documentation')

    def __init__(self, name: str, type_expr: 'TypeExpression', documentation: Optional[str] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.FIELD, location)
        self.name = name
        self.type_expr = type_expr
        self.documentation = documentation

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_field(self)


class RecordType(ASTNode):
    """Inline record `{ field: type ... }`"""
    __slots__ = ('fields',)

    def __init__(self, fields: List[Field], location: Optional[SourceLocation] = None):
        super().__init__(NodeType.RECORD_TYPE, location)
        self.fields = fields

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_record_type(self)


TypeExpression = Union[TypeReference, RecordType]


class ImportTarget(ASTNode):
    """One imported name, optionally renamed: `Name as Alias`"""
    __slots__ = ('name', 'alias')

    def __init__(self, name: str, alias: Optional[str] = None, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.IMPORT_TARGET, location)
        self.name = name
        self.alias = alias

    @property
    def local_name(self) -> str:
        """Name the symbol is bound to inside the importing module"""
        return self.alias or self.name

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_import_target(self)

    def __repr__(self) -> str:
        alias = f" as {self.alias}" if self.alias else ""
        return f"ImportTarget({self.name}{alias})"


class ImportStatement(ASTNode):
    """`from <path> import <target>, ...`"""
    __slots__ = ('path', 'targets', 'path_location')

    def __init__(self, path: ImportPath, targets: List[ImportTarget],
                 path_location: Optional[SourceLocation] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.IMPORT_STMT, location)
        self.path = path
        self.targets = targets
        # Span of the path token itself, used for "module not found" diagnostics
        self.path_location = path_location

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_import_statement(self)

    def __repr__(self) -> str:
        return f"ImportStatement(from {self.path} import {', '.join(t.local_name for t in self.targets)})"


class Declaration(ASTNode):
    """Base class for top-level named declarations"""
    __slots__ = ('name', 'documentation')
    kind: DeclarationKind

    def __init__(self, node_type: NodeType, name: str, documentation: Optional[str],
                 location: Optional[SourceLocation]):
        super().__init__(node_type, location)
        self.name = name
        self.documentation = documentation


class TypeDeclaration(Declaration):
    """`type Name: type-expr`"""
    __slots__ = ('type_expr',)
    kind = DeclarationKind.TYPE

    def __init__(self, name: str, type_expr: TypeExpression, documentation: Optional[str] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.TYPE_DECL, name, documentation, location)
        self.type_expr = type_expr

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_type_declaration(self)


class Operation(ASTNode):
    """Interface operation `name(Request) -> Response`"""
    __slots__ = ('name', 'request', 'response', 'documentation')

    def __init__(self, name: str, request: Optional[TypeReference] = None,
                 response: Optional[TypeReference] = None, documentation: Optional[str] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.OPERATION, location)
        self.name = name
        self.request = request
        self.response = response
        self.documentation = documentation

    @property
    def is_one_way(self) -> bool:
        return self.response is None

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_operation(self)


class InterfaceDeclaration(Declaration):
    """`interface Name { op(...) -> ... }`"""
    __slots__ = ('operations',)
    kind = DeclarationKind.INTERFACE

    def __init__(self, name: str, operations: List[Operation], documentation: Optional[str] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.INTERFACE_DECL, name, documentation, location)
        self.operations = operations

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_interface_declaration(self)


class ServiceDeclaration(Declaration):
    """`service Name { embeds X  implements A, B }`"""
    __slots__ = ('embeds', 'implements')
    kind = DeclarationKind.SERVICE

    def __init__(self, name: str, embeds: List[TypeReference], implements: List[TypeReference],
                 documentation: Optional[str] = None, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.SERVICE_DECL, name, documentation, location)
        self.embeds = embeds
        self.implements = implements

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_service_declaration(self)


Statement = Union[ImportStatement, Declaration]


class Program(ASTNode):
    """Program root node"""
    __slots__ = ('statements',)

    def __init__(self, statements: List[Statement], location: Optional[SourceLocation] = None):
        super().__init__(NodeType.PROGRAM, location)
        self.statements = statements

    @property
    def imports(self) -> List[ImportStatement]:
        return [stmt for stmt in self.statements if isinstance(stmt, ImportStatement)]

    @property
    def declarations(self) -> List[Declaration]:
        return [stmt for stmt in self.statements if isinstance(stmt, Declaration)]

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_program(self)
