"""
modgraph utilities package
"""

from .io_utils import read_source_bytes, decode_source, to_uri, uri_to_path, is_file_uri

__all__ = ["read_source_bytes", "decode_source", "to_uri", "uri_to_path", "is_file_uri"]
