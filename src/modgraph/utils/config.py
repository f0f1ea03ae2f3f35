"""
Configuration constants to replace magic numbers throughout modgraph
"""

import os
import tempfile

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "modgraph_parser.cache")

# Module resolution constants
MODULE_FILE_EXTENSION = ".mg"
PACKAGE_ENTRY_FILE = "mod"  # a/b/mod.mg stands for module a.b
IMPORT_PATH_SEPARATOR = "."
MEMORY_URI_SCHEME = "memory"

# Environment variables read by ModuleParsingConfiguration.from_env()
PACKAGE_PATH_ENV = "MODGRAPH_PATH"
CHARSET_ENV = "MODGRAPH_CHARSET"

# Type names that never refer to a declaration
BUILTIN_TYPE_NAMES = frozenset({
    "void", "bool", "int", "long", "double", "string", "raw", "any",
})

# Import suggestion constants
MAX_SUGGESTION_DISTANCE = 2  # Levenshtein distance for "maybe you meant"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Error reporting constants
ERROR_POINTER_CHAR = "^"
