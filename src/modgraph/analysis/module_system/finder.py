"""
Module Finder

Import path -> ModuleSource resolution, relative to the requesting module.

Rust Pattern: rustc_resolve::module::PathResolution

Lookup never raises for a missing module: the result is either a
ModuleSource or a ModuleNotFound payload listing every location that was
tried, which the crawler turns into a diagnostic.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from .module_source import FileModuleSource, ModuleSource, StringModuleSource
from ...shared.nodes import ImportPath
from ...utils.config import (
    IMPORT_PATH_SEPARATOR, MEMORY_URI_SCHEME, MODULE_FILE_EXTENSION, PACKAGE_ENTRY_FILE,
)
from ...utils.io_utils import is_file_uri, uri_to_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModuleNotFound:
    """Structured "not found" result of a lookup"""
    import_path: ImportPath
    looked_paths: Tuple[str, ...]
    requesting_uri: str = ""

    @property
    def message(self) -> str:
        return f"module '{self.import_path}' not found"


FindResult = Union[ModuleSource, ModuleNotFound]


class ModuleFinder(ABC):
    """Locates the module an import path refers to"""

    @abstractmethod
    def find(self, requesting_uri: str, import_path: ImportPath) -> FindResult:
        """
        Args:
            requesting_uri: URI of the module containing the import
            import_path: path as written in the import statement

        Returns:
            ModuleSource on success, ModuleNotFound otherwise
        """


class FileSystemModuleFinder(ModuleFinder):
    """
    Resolves import paths to `.mg` files.

    - `.a.b` (relative) -> <requesting dir>/a/b.mg or <requesting dir>/a/b/mod.mg;
      every extra leading dot moves one directory up
    - `a.b` (absolute) -> same candidates under the requesting module's
      directory, then under each package path in order
    """

    def __init__(self, package_paths: Iterable[Union[Path, str]] = ()):
        self.package_paths: Tuple[Path, ...] = tuple(Path(p).resolve() for p in package_paths)

    def find(self, requesting_uri: str, import_path: ImportPath) -> FindResult:
        looked: List[str] = []
        for base in self._search_bases(requesting_uri, import_path):
            for candidate in self._candidates(base, import_path.parts):
                looked.append(str(candidate))
                if candidate.is_file():
                    logger.debug(f"Resolved '{import_path}' from {requesting_uri} to {candidate}")
                    return FileModuleSource(candidate)
        logger.debug(f"Module '{import_path}' not found from {requesting_uri}; looked in {len(looked)} places")
        return ModuleNotFound(import_path, tuple(looked), requesting_uri)

    def _search_bases(self, requesting_uri: str, import_path: ImportPath) -> List[Path]:
        requesting_dir = uri_to_path(requesting_uri).parent if is_file_uri(requesting_uri) else None

        if import_path.is_relative:
            if requesting_dir is None:
                return []
            base = requesting_dir
            for _ in range(import_path.level - 1):
                base = base.parent
            return [base]

        bases: List[Path] = []
        for base in ([requesting_dir] if requesting_dir else []) + list(self.package_paths):
            if base not in bases:
                bases.append(base)
        return bases

    @staticmethod
    def _candidates(base: Path, parts: Tuple[str, ...]) -> List[Path]:
        target = base.joinpath(*parts)
        return [
            target.parent / f"{target.name}{MODULE_FILE_EXTENSION}",
            target / f"{PACKAGE_ENTRY_FILE}{MODULE_FILE_EXTENSION}",
        ]


class InMemoryModuleFinder(ModuleFinder):
    """
    Finder over in-memory module sources (module name -> text).

    Module `a.b` gets the URI `memory:///a/b.mg`. Relative paths resolve
    against the requesting module's name: from `pkg.main`, `.util` is
    `pkg.util` and `..util` is `util`.
    """

    def __init__(self, sources: Mapping[str, Union[str, bytes]], charset: str = "utf-8"):
        self.sources = dict(sources)
        self.charset = charset

    @staticmethod
    def uri_for(module_name: str) -> str:
        return f"{MEMORY_URI_SCHEME}:///{module_name.replace(IMPORT_PATH_SEPARATOR, '/')}{MODULE_FILE_EXTENSION}"

    @staticmethod
    def module_name(uri: str) -> Optional[str]:
        parsed = urlparse(uri)
        if parsed.scheme != MEMORY_URI_SCHEME or not parsed.path.endswith(MODULE_FILE_EXTENSION):
            return None
        return parsed.path.lstrip("/")[:-len(MODULE_FILE_EXTENSION)].replace("/", IMPORT_PATH_SEPARATOR)

    def find(self, requesting_uri: str, import_path: ImportPath) -> FindResult:
        name = self._absolute_name(requesting_uri, import_path)
        if name is None:
            return ModuleNotFound(import_path, (), requesting_uri)
        uri = self.uri_for(name)
        if name in self.sources:
            return StringModuleSource(uri, self.sources[name], self.charset)
        return ModuleNotFound(import_path, (uri,), requesting_uri)

    def _absolute_name(self, requesting_uri: str, import_path: ImportPath) -> Optional[str]:
        if not import_path.is_relative:
            return import_path.dotted_name
        requesting = self.module_name(requesting_uri)
        if requesting is None:
            return None
        package = requesting.split(IMPORT_PATH_SEPARATOR)[:-1]
        up = import_path.level - 1
        if up > len(package):
            return None
        package = package[:len(package) - up]
        return IMPORT_PATH_SEPARATOR.join(package + list(import_path.parts))
