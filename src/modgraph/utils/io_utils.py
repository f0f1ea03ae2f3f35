"""
Centralized source I/O utilities.

- Single place for encoding and URI/path handling
- Module sources are read as bytes; decoding happens with the configured charset
"""

from pathlib import Path
from typing import BinaryIO, Union
from urllib.parse import unquote, urlparse

from .config import DEFAULT_FILE_ENCODING

RawInput = Union[bytes, str, BinaryIO]


def read_source_bytes(path: Union[Path, str]) -> bytes:
    """Read a source file as raw bytes."""
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_bytes()


def decode_source(data: RawInput, charset: str = DEFAULT_FILE_ENCODING) -> str:
    """Decode raw module input (bytes, text, or a binary stream) to text."""
    if isinstance(data, str):
        return data
    if not isinstance(data, (bytes, bytearray)):
        data = data.read()
    return bytes(data).decode(charset)


def to_uri(location: Union[Path, str]) -> str:
    """Canonical URI for a path or an already-formed URI."""
    if isinstance(location, str) and "://" in location:
        return location
    return Path(location).resolve().as_uri()


def uri_to_path(uri: str) -> Path:
    """Filesystem path of a file:// URI."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        raise ValueError(f"Not a file URI: {uri}")
    return Path(unquote(parsed.path))


def is_file_uri(uri: str) -> bool:
    return urlparse(uri).scheme == "file"
