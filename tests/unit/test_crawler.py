"""
Tests for ModuleCrawler: breadth-first discovery, cycles, diamonds,
cache reuse and unresolved-import diagnostics.
"""

import pytest
from modgraph.analysis.module_system import (
    FileSystemModuleFinder, InMemoryModuleFinder, ModuleCrawler, ModuleResolutionError,
    StaticCandidateLister, StringModuleSource, crawl, resolve,
)
from modgraph.frontend.parser import ParseError
from tests.test_utils import module_names, strip_ansi


DIAMOND = {
    "main": "from b import B\nfrom c import C",
    "b": "from d import D\ntype B: D",
    "c": "from d import D\ntype C: D",
    "d": "type D: string",
}


class TestCrawlGraphs:
    """Shape of the crawl result"""

    def test_single_module(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules({"main": "type A: string"})
        result = ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("main"))
        assert module_names(result) == ["main"]

    def test_breadth_first_order(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules({
            "main": "from a import A\nfrom b import B",
            "a": "from a1 import X\ntype A: X",
            "b": "type B: string",
            "a1": "type X: string",
        })
        result = ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("main"))
        assert module_names(result) == ["main", "a", "b", "a1"]

    def test_diamond_parsed_once(self, memory_modules, configuration, cache, counting_parser, no_suggestions):
        finder, parse_root = memory_modules(DIAMOND)
        crawler = ModuleCrawler(configuration, finder, cache, counting_parser, no_suggestions)
        result = crawler.crawl(parse_root("main"))
        assert module_names(result) == ["main", "b", "c", "d"]
        assert module_names(counting_parser.parsed) == ["b", "c", "d"]

        # both importers point at the same record
        (b_dep,) = result["memory:///b.mg"].dependencies()
        (c_dep,) = result["memory:///c.mg"].dependencies()
        assert b_dep == c_dep == "memory:///d.mg"
        assert result[b_dep] is result[c_dep] is cache.get("memory:///d.mg")

        # and the resolver binds both imports to that record's single declaration
        references = resolve(result)
        ((d_declaration, sites),) = references["memory:///d.mg"].items()
        assert d_declaration is result["memory:///d.mg"].symbol_table.lookup("D")
        assert [s.file for s in sites] == ["memory:///b.mg"] * 2 + ["memory:///c.mg"] * 2

    def test_cycle_terminates(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules({
            "a": "from b import B\ntype A: B",
            "b": "from a import A\ntype B: A",
        })
        result = ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("a"))
        assert module_names(result) == ["a", "b"]

    def test_self_import(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules({"a": "from a import A\n"})
        root = parse_root("a")
        result = ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(root)
        assert list(result) == ["memory:///a.mg"]
        assert result["memory:///a.mg"] is root

    def test_every_record_fully_resolved(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules(DIAMOND)
        result = ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("main"))
        assert all(record.symbol_table.is_fully_resolved() for record in result.records())
        assert set(result.symbol_tables()) == set(result)

    def test_result_map_is_read_only(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules({"main": ""})
        result = ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("main"))
        with pytest.raises(TypeError):
            result.to_map()["memory:///x.mg"] = None

    def test_module_level_crawl(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules({"main": "from a import A", "a": "type A: int"})
        result = crawl(parse_root("main"), configuration, finder, cache, candidate_lister=no_suggestions)
        assert len(result) == 2


class TestCrawlCache:
    """Modules are parsed at most once per cache"""

    def test_cache_filled(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules(DIAMOND)
        ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("main"))
        assert len(cache) == 4
        assert "memory:///main.mg" in cache

    def test_second_crawl_parses_nothing(self, memory_modules, configuration, cache, counting_parser,
                                         no_suggestions):
        finder, parse_root = memory_modules(DIAMOND)
        crawler = ModuleCrawler(configuration, finder, cache, counting_parser, no_suggestions)
        first = crawler.crawl(parse_root("main"))
        counting_parser.parsed.clear()

        second = crawler.crawl(parse_root("main"))
        assert counting_parser.parsed == []
        assert list(second) == list(first)
        for uri in ("memory:///b.mg", "memory:///c.mg", "memory:///d.mg"):
            assert second[uri] is first[uri]

    def test_cache_hit_still_enqueues_dependencies(self, memory_modules, configuration, cache,
                                                   no_suggestions):
        finder, parse_root = memory_modules(DIAMOND)
        crawler = ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions)
        crawler.crawl(parse_root("b"))  # caches b and d

        result = crawler.crawl(parse_root("main"))
        assert module_names(result) == ["main", "b", "c", "d"]

    def test_cache_shared_across_roots(self, memory_modules, configuration, cache, counting_parser,
                                       no_suggestions):
        finder, parse_root = memory_modules({
            "one": "from shared import S",
            "two": "from shared import S",
            "shared": "type S: string",
        })
        crawler = ModuleCrawler(configuration, finder, cache, counting_parser, no_suggestions)
        crawler.crawl(parse_root("one"))
        crawler.crawl(parse_root("two"))
        assert module_names(counting_parser.parsed) == ["shared"]

    def test_failed_crawl_does_not_poison_cache(self, memory_modules, configuration, cache,
                                                no_suggestions):
        sources = {"main": "from a import A", "a": "from missing import M\ntype A: M"}
        finder, parse_root = memory_modules(sources)
        crawler = ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions)
        with pytest.raises(ModuleResolutionError):
            crawler.crawl(parse_root("main"))
        assert "memory:///a.mg" not in cache

        # the fixed module set crawls cleanly with the same cache
        finder.sources["missing"] = "type M: string"
        result = crawler.crawl(parse_root("main"))
        assert module_names(result) == ["main", "a", "missing"]

    def test_cached_records_keep_only_uris(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules(DIAMOND)
        ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("main"))
        record = cache.get("memory:///b.mg")
        assert not hasattr(record, "source")
        assert record.uri == "memory:///b.mg"

        (request,) = record.symbol_table.imports
        assert request.target_uri == "memory:///d.mg"
        assert not hasattr(request, "source")
        assert record.dependencies() == ["memory:///d.mg"]

    def test_uncached_dependency_of_cached_record_located_again(self, memory_modules, configuration, cache,
                                                                counting_parser, no_suggestions):
        sources = {"main": "from a import A", "a": "from b import B\ntype A: B", "b": "type {"}
        finder, parse_root = memory_modules(sources)
        crawler = ModuleCrawler(configuration, finder, cache, counting_parser, no_suggestions)
        with pytest.raises(ParseError):
            crawler.crawl(parse_root("main"))
        # a resolved all its imports before b failed to parse
        assert "memory:///a.mg" in cache
        assert "memory:///b.mg" not in cache

        finder.sources["b"] = "type B: string"
        counting_parser.parsed.clear()
        result = crawler.crawl(parse_root("main"))
        assert module_names(result) == ["main", "a", "b"]
        assert module_names(counting_parser.parsed) == ["b"]
        assert result["memory:///b.mg"].symbol_table.lookup("B") is not None


class TestUnresolvedImports:
    """First unresolved import aborts the crawl with a located diagnostic"""

    def test_error_points_at_import_path(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules({"main": "type A: string\nfrom nowhere import X"})
        with pytest.raises(ModuleResolutionError) as exc_info:
            ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("main"))
        err = exc_info.value
        assert err.error_code == "E0583"
        assert err.message == "module 'nowhere' not found"
        assert err.requesting_uri == "memory:///main.mg"
        assert err.location.file == "memory:///main.mg"
        assert (err.location.line, err.location.column) == (2, 6)
        assert err.looked_paths == ("memory:///nowhere.mg",)
        assert err.suggestions == []
        assert err.candidates == []

    def test_error_in_discovered_module(self, memory_modules, configuration, cache, no_suggestions):
        finder, parse_root = memory_modules({"main": "from a import A", "a": "from gone import G"})
        with pytest.raises(ModuleResolutionError) as exc_info:
            ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("main"))
        assert exc_info.value.location.file == "memory:///a.mg"
        assert exc_info.value.requesting_uri == "memory:///a.mg"

    def test_first_failure_in_breadth_first_order(self, memory_modules, configuration, cache,
                                                  no_suggestions):
        finder, parse_root = memory_modules({
            "main": "from a import A\nfrom b import B",
            "a": "from deep_missing import X",
            "b": "from shallow_missing import Y",
        })
        with pytest.raises(ModuleResolutionError) as exc_info:
            ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("main"))
        assert str(exc_info.value.import_path) == "deep_missing"

    def test_suggestions(self, memory_modules, configuration, cache):
        finder, parse_root = memory_modules({"main": "from utl import X"})
        lister = StaticCandidateLister(["util.mg", "types.mg"])
        with pytest.raises(ModuleResolutionError) as exc_info:
            ModuleCrawler(configuration, finder, cache, candidate_lister=lister).crawl(parse_root("main"))
        err = exc_info.value
        assert err.suggestions == ["util"]
        assert err.candidates == ["types", "util"]
        assert err.help_text == "Maybe you meant: util"

    def test_no_close_match_lists_modules(self, memory_modules, configuration, cache):
        finder, parse_root = memory_modules({"main": "from qqqqqq import X"})
        lister = StaticCandidateLister(["util.mg", "types.mg"])
        with pytest.raises(ModuleResolutionError) as exc_info:
            ModuleCrawler(configuration, finder, cache, candidate_lister=lister).crawl(parse_root("main"))
        assert exc_info.value.suggestions == []
        assert "Here are some modules that can be imported: types, util" in exc_info.value.help_text

    def test_filesystem_suggestions(self, write_modules, configuration, cache, module_parser):
        root = write_modules({"app/main.mg": "from utils import U", "app/util.mg": "type U: int"})
        main = root / "app" / "main.mg"
        record = module_parser.parse(StringModuleSource(main.as_uri(), main.read_text()))
        crawler = ModuleCrawler(configuration, FileSystemModuleFinder(), cache, module_parser)
        with pytest.raises(ModuleResolutionError) as exc_info:
            crawler.crawl(record)
        assert "util" in exc_info.value.suggestions

    def test_rendered_diagnostic(self, memory_modules, configuration, cache):
        finder, parse_root = memory_modules({"main": "from utl import X"})
        lister = StaticCandidateLister(["util.mg"])
        with pytest.raises(ModuleResolutionError) as exc_info:
            ModuleCrawler(configuration, finder, cache, candidate_lister=lister).crawl(parse_root("main"))
        out = strip_ansi(exc_info.value.render(color=False))
        assert "error[E0583]: module 'utl' not found" in out
        assert "--> memory:///main.mg:1:6" in out
        assert "1 | from utl import X" in out
        assert "^^^ unresolved import" in out
        assert "= help: Maybe you meant: util" in out

    def test_parse_error_in_dependency_propagates(self, memory_modules, configuration, cache,
                                                  no_suggestions):
        finder, parse_root = memory_modules({"main": "from broken import B", "broken": "type {"})
        with pytest.raises(ParseError) as exc_info:
            ModuleCrawler(configuration, finder, cache, candidate_lister=no_suggestions).crawl(parse_root("main"))
        assert exc_info.value.source_file == "memory:///broken.mg"
        assert "memory:///broken.mg" not in cache
