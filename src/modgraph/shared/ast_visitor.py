"""
AST Visitor

Abstract visitor with one visit_* method per node type. The default
implementations walk children and return None, so a pass only overrides
the nodes it cares about.
"""

from typing import Generic, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from .nodes import (
        Program, ImportStatement, ImportTarget, TypeDeclaration, InterfaceDeclaration,
        ServiceDeclaration, Operation, TypeReference, RecordType, Field,
    )

T = TypeVar('T')


class ASTVisitor(Generic[T]):
    """Base visitor (standard compiler pattern: LLVM, Rust MIR)."""

    def visit_program(self, node: 'Program') -> T:
        for stmt in node.statements:
            stmt.accept(self)
        return None

    def visit_import_statement(self, node: 'ImportStatement') -> T:
        for target in node.targets:
            target.accept(self)
        return None

    def visit_import_target(self, node: 'ImportTarget') -> T:
        return None

    def visit_type_declaration(self, node: 'TypeDeclaration') -> T:
        node.type_expr.accept(self)
        return None

    def visit_interface_declaration(self, node: 'InterfaceDeclaration') -> T:
        for operation in node.operations:
            operation.accept(self)
        return None

    def visit_operation(self, node: 'Operation') -> T:
        if node.request is not None:
            node.request.accept(self)
        if node.response is not None:
            node.response.accept(self)
        return None

    def visit_service_declaration(self, node: 'ServiceDeclaration') -> T:
        for ref in node.embeds:
            ref.accept(self)
        for ref in node.implements:
            ref.accept(self)
        return None

    def visit_record_type(self, node: 'RecordType') -> T:
        for field in node.fields:
            field.accept(self)
        return None

    def visit_field(self, node: 'Field') -> T:
        node.type_expr.accept(self)
        return None

    def visit_type_reference(self, node: 'TypeReference') -> T:
        return None
