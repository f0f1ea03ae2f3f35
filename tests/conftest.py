"""
Pytest configuration and shared fixtures for modgraph tests.

The Lark parser is built once per session (grammar caching makes it
cheap, but it is stateless and safe to share). Everything that holds
state, the module cache in particular, is function-scoped.
"""

import sys
import pytest
from pathlib import Path
from typing import Callable, Dict

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from modgraph.analysis.module_system import (
    InMemoryModuleFinder, ModuleCache, ModuleParser, ModuleParsingConfiguration,
    StaticCandidateLister, StringModuleSource,
)
from modgraph.analysis.module_system.module_record import ModuleRecord
from modgraph.frontend.parser import Parser
from tests.test_utils import CountingModuleParser


# =============================================================================
# Session-scoped fixtures
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """Session-scoped parser shared across all tests (stateless between parses)."""
    return Parser()


# =============================================================================
# Function-scoped fixtures
# =============================================================================

@pytest.fixture
def configuration():
    return ModuleParsingConfiguration()


@pytest.fixture
def cache():
    """Fresh module cache per test; never share cached records between tests."""
    return ModuleCache()


@pytest.fixture
def module_parser(configuration, session_parser):
    return ModuleParser(configuration, session_parser)


@pytest.fixture
def no_suggestions():
    """Candidate lister that never touches the filesystem."""
    return StaticCandidateLister(())


@pytest.fixture
def write_modules(tmp_path) -> Callable[[Dict[str, str]], Path]:
    """
    Write a tree of module files under tmp_path.

        write_modules({"main.mg": "...", "lib/util.mg": "..."}) -> tmp_path
    """
    def _write(files: Dict[str, str]) -> Path:
        for relative, text in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def memory_modules(module_parser):
    """
    Factory for in-memory module graphs.

    Returns (finder, parse_root) where parse_root(name) parses the named
    module into a ModuleRecord ready to crawl.
    """
    def _factory(sources: Dict[str, str]):
        finder = InMemoryModuleFinder(sources)

        def parse_root(name: str) -> ModuleRecord:
            return module_parser.parse(StringModuleSource(finder.uri_for(name), sources[name]))

        return finder, parse_root

    return _factory

@pytest.fixture
def counting_parser(configuration, session_parser):
    return CountingModuleParser(configuration, session_parser)

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
