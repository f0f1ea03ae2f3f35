"""
Shared components: source locations, AST nodes, diagnostics.

Rust Pattern: Shared foundational types and utilities
"""

from .source_location import SourceLocation
from .errors import Diagnostic, DiagnosticRenderer, format_diagnostic, ModgraphError, ModgraphSourceError
from .nodes import (
    ASTNode, NodeType, DeclarationKind, ImportPath,
    Program, ImportStatement, ImportTarget, Declaration,
    TypeDeclaration, InterfaceDeclaration, ServiceDeclaration,
    Operation, TypeReference, RecordType, Field,
)
from .ast_visitor import ASTVisitor
