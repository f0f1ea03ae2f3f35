"""
Tests for "maybe you meant" import suggestions.
"""

from modgraph.analysis.module_system import FilesystemCandidateLister, StaticCandidateLister, suggest
from modgraph.analysis.module_system.suggestions import candidate_modules, format_help, module_name_of
from modgraph.shared.nodes import ImportPath


class TestSuggest:

    def test_module_name_of(self):
        assert module_name_of("util.mg") == "util"
        assert module_name_of("archive.tar.gz") == "archive"
        assert module_name_of("README") == "README"

    def test_candidates_deduplicated_and_sorted(self):
        assert candidate_modules(["b.mg", "a.mg", "b.txt", ".hidden"]) == ["a", "b"]

    def test_within_distance(self):
        names = ["util.mg", "utils.mg", "types.mg", "zzzzzz.mg"]
        assert suggest(ImportPath.parse("utl"), names) == ["util", "utils"]

    def test_distance_limit(self):
        assert suggest(ImportPath.parse("abc"), ["abcdef.mg"]) == []
        assert suggest(ImportPath.parse("abc"), ["abcdef.mg"], max_distance=3) == ["abcdef"]

    def test_relative_prefix_ignored(self):
        assert suggest(ImportPath.parse("..utl"), ["util.mg"]) == ["util"]

    def test_no_candidates(self):
        assert suggest(ImportPath.parse("util"), []) == []


class TestFormatHelp:

    def test_with_suggestions(self):
        assert format_help(ImportPath.parse("utl"), ["util"], ["util", "x"]) == "Maybe you meant: util"

    def test_with_modules_only(self):
        text = format_help(ImportPath.parse("q"), [], ["alpha", "beta"])
        assert text == ('Could not find modules matching "q". '
                        'Here are some modules that can be imported: alpha, beta')

    def test_nothing_nearby(self):
        assert "no importable modules" in format_help(ImportPath.parse("q"), [], [])


class TestCandidateListers:

    def test_static(self):
        lister = StaticCandidateLister(["a.mg"])
        assert lister.list_candidates(["/anything"]) == ["a.mg"]

    def test_filesystem_uses_nearest_existing_directory(self, write_modules):
        root = write_modules({"app/util.mg": "", "app/types.mg": "", "app/sub/deep.mg": ""})
        lister = FilesystemCandidateLister(include_cwd=False)
        names = lister.list_candidates([str(root / "app" / "missing" / "x.mg")])
        assert names == ["types.mg", "util.mg"]

    def test_filesystem_without_looked_paths(self):
        assert FilesystemCandidateLister(include_cwd=False).list_candidates([]) == []
