"""Frontend: lark grammar, parse-tree transformer, Parser."""

from .parser import Parser, ParseError
from .transformer import ModuleTransformer

__all__ = ["Parser", "ParseError", "ModuleTransformer"]
