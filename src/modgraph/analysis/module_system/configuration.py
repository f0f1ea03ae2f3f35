"""
Module Parsing Configuration

Options threaded through the resolution core to the finder and parser;
the core itself does not interpret them.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping, Optional, Tuple, Union

from ...utils.config import CHARSET_ENV, DEFAULT_FILE_ENCODING, PACKAGE_PATH_ENV


@dataclass(frozen=True)
class ModuleParsingConfiguration:
    """
    - package_paths: ordered search roots for absolute import paths
    - charset: text decoding for module sources
    - include_documentation: keep `///` doc comments in the AST
    """
    package_paths: Tuple[Path, ...] = field(default_factory=tuple)
    charset: str = DEFAULT_FILE_ENCODING
    include_documentation: bool = False

    def __post_init__(self):
        # Accept any iterable of str/Path, store a tuple of Paths
        object.__setattr__(self, 'package_paths', tuple(Path(p) for p in self.package_paths))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 include_documentation: bool = False) -> 'ModuleParsingConfiguration':
        """Read MODGRAPH_PATH (os.pathsep separated) and MODGRAPH_CHARSET"""
        env = os.environ if environ is None else environ
        raw_paths = env.get(PACKAGE_PATH_ENV, "")
        package_paths = [p for p in raw_paths.split(os.pathsep) if p]
        return cls(
            package_paths=tuple(Path(p) for p in package_paths),
            charset=env.get(CHARSET_ENV) or DEFAULT_FILE_ENCODING,
            include_documentation=include_documentation,
        )

    def with_package_paths(self, paths: Iterable[Union[Path, str]]) -> 'ModuleParsingConfiguration':
        return ModuleParsingConfiguration(
            package_paths=tuple(Path(p) for p in paths),
            charset=self.charset,
            include_documentation=self.include_documentation,
        )
