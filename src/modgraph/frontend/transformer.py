"""
Module AST Transformer
Converts the Lark parse tree of a module source to modgraph AST nodes
"""

import logging
from typing import List, Optional, Tuple

from lark import Transformer, v_args
from lark.lexer import Token
from typing_extensions import TypeAlias

from ..shared.nodes import (
    Field, ImportPath, ImportStatement, ImportTarget, InterfaceDeclaration, Operation,
    Program, RecordType, ServiceDeclaration, Statement, TypeDeclaration, TypeExpression,
    TypeReference,
)
from ..shared.source_location import SourceLocation

# Lark Meta object carries the propagated positions of a rule
LarkMeta: TypeAlias = object
ServiceItem: TypeAlias = Tuple[str, List[TypeReference]]

logger: logging.Logger = logging.getLogger(__name__)

DOC_COMMENT_PREFIX = "///"


@v_args(inline=True, meta=True)
class ModuleTransformer(Transformer):
    """
    Parse tree -> AST.

    One instance per parse: it remembers which file the locations belong
    to and whether doc comments are kept.
    """

    def __init__(self, current_file: str = "<input>", include_documentation: bool = False) -> None:
        super().__init__()
        self.current_file = current_file
        self.include_documentation = include_documentation

    def _location(self, meta: LarkMeta) -> Optional[SourceLocation]:
        """Extract location from Lark meta object (None for empty rules)"""
        if meta is None or getattr(meta, 'empty', True):
            return None
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    def _token_location(self, token: Token) -> SourceLocation:
        return SourceLocation(
            file=self.current_file,
            line=token.line,
            column=token.column,
            end_line=token.end_line,
            end_column=token.end_column,
        )

    # ---- program / imports ----------------------------------------------

    def program(self, meta: LarkMeta, *statements: Statement) -> Program:
        return Program(list(statements), location=self._location(meta))

    def import_stmt(self, meta: LarkMeta, path: Token, *targets: ImportTarget) -> ImportStatement:
        return ImportStatement(
            path=ImportPath.parse(str(path)),
            targets=list(targets),
            path_location=self._token_location(path),
            location=self._location(meta),
        )

    def import_target(self, meta: LarkMeta, name: Token, alias: Optional[Token] = None) -> ImportTarget:
        return ImportTarget(
            name=str(name),
            alias=str(alias) if alias is not None else None,
            location=self._location(meta),
        )

    # ---- declarations ---------------------------------------------------

    def doc(self, meta: LarkMeta, *comments: Token) -> Optional[str]:
        if not comments or not self.include_documentation:
            return None
        lines = []
        for comment in comments:
            text = str(comment)[len(DOC_COMMENT_PREFIX):]
            lines.append(text[1:] if text.startswith(" ") else text)
        return "\n".join(lines)

    def type_decl(self, meta: LarkMeta, doc: Optional[str], name: Token,
                  type_expr: TypeExpression) -> TypeDeclaration:
        return TypeDeclaration(str(name), type_expr, documentation=doc, location=self._location(meta))

    def type_ref(self, meta: LarkMeta, name: Token) -> TypeReference:
        return TypeReference(str(name), location=self._token_location(name))

    def record_type(self, meta: LarkMeta, *fields: Field) -> RecordType:
        return RecordType(list(fields), location=self._location(meta))

    def field_ref(self, meta: LarkMeta, name: Token) -> TypeReference:
        return TypeReference(str(name), location=self._token_location(name))

    def field_record(self, meta: LarkMeta, *fields: Field) -> RecordType:
        return RecordType(list(fields), location=self._location(meta))

    def field(self, meta: LarkMeta, doc: Optional[str], name: Token, type_expr: TypeExpression) -> Field:
        return Field(str(name), type_expr, documentation=doc, location=self._location(meta))

    def interface_decl(self, meta: LarkMeta, doc: Optional[str], name: Token,
                       *operations: Operation) -> InterfaceDeclaration:
        return InterfaceDeclaration(str(name), list(operations), documentation=doc, location=self._location(meta))

    def operation(self, meta: LarkMeta, doc: Optional[str], name: Token, request: Optional[TypeReference],
                  response: Optional[TypeReference] = None) -> Operation:
        return Operation(str(name), request=request, response=response, documentation=doc,
                         location=self._location(meta))

    def request(self, meta: LarkMeta, type_ref: Optional[TypeReference] = None) -> Optional[TypeReference]:
        return type_ref

    def response(self, meta: LarkMeta, name: Token) -> TypeReference:
        return TypeReference(str(name), location=self._token_location(name))

    def service_decl(self, meta: LarkMeta, doc: Optional[str], name: Token,
                     *items: ServiceItem) -> ServiceDeclaration:
        embeds: List[TypeReference] = []
        implements: List[TypeReference] = []
        for clause, refs in items:
            (embeds if clause == "embeds" else implements).extend(refs)
        return ServiceDeclaration(str(name), embeds, implements, documentation=doc,
                                  location=self._location(meta))

    def embeds_clause(self, meta: LarkMeta, type_ref: TypeReference) -> ServiceItem:
        return ("embeds", [type_ref])

    def implements_clause(self, meta: LarkMeta, *type_refs: TypeReference) -> ServiceItem:
        return ("implements", list(type_refs))
