"""
Import Suggestions

Best-effort "did you mean" help for imports that could not be located.
Only diagnostic text depends on this module, never a resolution outcome.

Candidate discovery sits behind CandidateLister so it can be replaced
(StaticCandidateLister) or switched off (StaticCandidateLister(())) where
touching the filesystem is unwanted.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from rapidfuzz.distance import Levenshtein

from ...shared.nodes import ImportPath
from ...utils.config import MAX_SUGGESTION_DISTANCE

logger = logging.getLogger(__name__)


class CandidateLister(ABC):
    """Lists file names near the places a failed lookup searched"""

    @abstractmethod
    def list_candidates(self, looked_paths: Sequence[str]) -> Iterable[str]:
        """File names (not paths) that could have been meant"""


class FilesystemCandidateLister(CandidateLister):
    """
    Regular files in the nearest existing directory of every looked path,
    plus the current working directory.
    """

    def __init__(self, include_cwd: bool = True):
        self.include_cwd = include_cwd

    def list_candidates(self, looked_paths: Sequence[str]) -> List[str]:
        directories: List[Path] = []
        if self.include_cwd:
            directories.append(Path.cwd())
        for looked in looked_paths:
            directory = _nearest_directory(Path(looked))
            if directory is not None and directory not in directories:
                directories.append(directory)

        names = set()
        for directory in directories:
            try:
                names.update(entry.name for entry in directory.iterdir() if entry.is_file())
            except OSError as e:
                logger.debug(f"Skipping {directory} for import suggestions: {e}")
        return sorted(names)


class StaticCandidateLister(CandidateLister):
    """Fixed candidate names (tests, in-memory modules)"""

    def __init__(self, names: Iterable[str] = ()):
        self.names = list(names)

    def list_candidates(self, looked_paths: Sequence[str]) -> List[str]:
        return list(self.names)


def _nearest_directory(path: Path) -> Optional[Path]:
    current = path
    while not current.is_dir():
        parent = current.parent
        if parent == current:
            return None
        current = parent
    return current


def module_name_of(file_name: str) -> str:
    """'util.mg' -> 'util', 'archive.tar.gz' -> 'archive'"""
    return file_name.split(".", 1)[0]


def candidate_modules(candidates: Iterable[str]) -> List[str]:
    """Sorted, de-duplicated module names for candidate file names"""
    return sorted({name for name in map(module_name_of, candidates) if name})


def suggest(import_path: ImportPath, candidates: Iterable[str],
            max_distance: int = MAX_SUGGESTION_DISTANCE) -> List[str]:
    """Candidate module names within `max_distance` edits of the import path"""
    target = import_path.dotted_name
    return [
        name for name in candidate_modules(candidates)
        if Levenshtein.distance(target, name, score_cutoff=max_distance) <= max_distance
    ]


def format_help(import_path: ImportPath, suggestions: Sequence[str], modules: Sequence[str]) -> str:
    if suggestions:
        return f"Maybe you meant: {', '.join(suggestions)}"
    if modules:
        return (f"Could not find modules matching \"{import_path}\". "
                f"Here are some modules that can be imported: {', '.join(modules)}")
    return f"Could not find modules matching \"{import_path}\", and no importable modules were found nearby."
