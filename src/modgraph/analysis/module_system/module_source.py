"""
Module Sources

A ModuleSource is an opaque handle to one loadable module: its canonical
URI plus a way to obtain the raw bytes. Finders produce them, the module
parser consumes them.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from ...utils.io_utils import read_source_bytes


class ModuleSource(ABC):
    """Loadable module: canonical URI + raw content"""

    @property
    @abstractmethod
    def uri(self) -> str:
        """Canonical identity; never reused for two distinct contents within a run"""

    @abstractmethod
    def read_bytes(self) -> bytes:
        """Raw module content"""

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ModuleSource) and other.uri == self.uri

    def __hash__(self) -> int:
        return hash(self.uri)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uri})"


class FileModuleSource(ModuleSource):
    """Module stored on disk"""

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path).resolve()
        self._uri = self._path.as_uri()

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def path(self) -> Path:
        return self._path

    def read_bytes(self) -> bytes:
        return read_source_bytes(self._path)


class StringModuleSource(ModuleSource):
    """Module whose content is already in memory (root input, in-memory finder)"""

    def __init__(self, uri: str, content: Union[bytes, str], charset: str = "utf-8"):
        self._uri = uri
        self._content = content.encode(charset) if isinstance(content, str) else bytes(content)

    @property
    def uri(self) -> str:
        return self._uri

    def read_bytes(self) -> bytes:
        return self._content
