"""
Embedded language (HTML-Script) tests

Tests how registered brushes override the host brush inside their
regions, how deep embedding goes, and the registry operations.
"""

import dataclasses
import re
from concurrent.futures import ThreadPoolExecutor

import pytest

from brushparse.config import AppSettings
from brushparse.lib.matches import spans_flatten
from brushparse.lib.parser import Parser
from brushparse.models.brush import Brush, RegExpRule
from brushparse.models.match import MatchResult


PAGE = '<p><script>var a = 1;</script></p>'


class TestScriptRegions:
    """Test a single embedded brush inside a host document"""

    def test_region_overrides_host(self, script_parser, html_brush):
        """Host spans in the region are replaced by the embedded brush's spans"""
        result = script_parser.parse(html_brush, True, PAGE)
        assert result == {
            "keyword": [
                MatchResult(0, 3, "keyword"),
                MatchResult(11, 3, "keyword"),
                MatchResult(30, 4, "keyword"),
            ],
            "script": [MatchResult(3, 8, "script"), MatchResult(21, 9, "script")],
            "value": [MatchResult(19, 1, "value")],
        }

    def test_delimiters_have_no_bold_override(self, script_parser, html_brush):
        """Delimiter spans leave the style's weight alone"""
        result = script_parser.parse(html_brush, True, PAGE)
        assert all(match.bold is None for match in result["script"])

    def test_html_script_off(self, script_parser, html_brush):
        """With HTML-Script off only the host brush runs"""
        result = script_parser.parse(html_brush, False, PAGE)
        assert result == {
            "keyword": [
                MatchResult(0, 3, "keyword"),
                MatchResult(3, 8, "keyword"),
                MatchResult(21, 9, "keyword"),
                MatchResult(30, 4, "keyword"),
            ]
        }

    def test_no_registered_brushes(self, parser, html_brush):
        """HTML-Script on with an empty registry changes nothing"""
        assert parser.parse(html_brush, True, PAGE) == parser.parse(html_brush, False, PAGE)

    def test_several_regions(self, script_parser, html_brush):
        """Every region in the range is handled"""
        text = '<script>var</script><i></i><script>1</script>'
        result = script_parser.parse(html_brush, True, text)
        assert result["script"] == [
            MatchResult(0, 8, "script"),
            MatchResult(11, 9, "script"),
            MatchResult(27, 8, "script"),
            MatchResult(36, 9, "script"),
        ]
        assert result["keyword"] == [
            MatchResult(8, 3, "keyword"),
            MatchResult(20, 3, "keyword"),
            MatchResult(23, 4, "keyword"),
        ]
        assert result["value"] == [MatchResult(35, 1, "value")]

    def test_region_inside_host_comment(self, script_parser, html_brush):
        """A host span covering the whole region is left alone and wins"""
        text = '<!-- <script>var</script> -->'
        result = script_parser.parse(html_brush, True, text)
        assert result == {"comments": [MatchResult(0, len(text), "comments")]}

    def test_region_in_sub_range(self, script_parser, html_brush):
        """Regions are searched in the range only, with absolute offsets"""
        text = '<script>var</script>|<script>var</script>'
        result = script_parser.parse(html_brush, True, text, 21, 20)
        assert result == {
            "script": [MatchResult(21, 8, "script"), MatchResult(32, 9, "script")],
            "keyword": [MatchResult(29, 3, "keyword")],
        }

    def test_custom_script_style_key(self, js_brush, html_brush):
        """Delimiter style key comes from the settings"""
        parser = Parser(settings=AppSettings(script_style_key="embedded"))
        parser.htmlScriptBrush_add(js_brush)
        result = parser.parse(html_brush, True, PAGE)
        assert "script" not in result
        assert result["embedded"] == [MatchResult(3, 8, "embedded"), MatchResult(21, 9, "embedded")]

    def test_idempotent(self, script_parser, html_brush):
        """Same input and registry twice gives equal results"""
        first = script_parser.parse(html_brush, True, PAGE)
        second = script_parser.parse(html_brush, True, PAGE)
        assert first == second

    def test_accepted_spans_never_overlap(self, script_parser, html_brush):
        """Overrides keep the final spans disjoint"""
        text = '<div class="x"><script>"a" 1 var</script><!-- c --></div>'
        spans = spans_flatten(script_parser.parse(html_brush, True, text))
        for current, following in zip(spans, spans[1:]):
            assert current.end <= following.offset


class TestEmbeddingDepth:
    """Test that embedding nests one level only"""

    def test_no_third_level(self, parser, html_brush):
        """Script tags inside a script region are not treated as a region"""
        greedy = Brush(
            "javascript",
            [RegExpRule(r'\bvar\b', {0: 'keyword'})],
            htmlScriptPattern=re.compile(r'(<script>)(.*)(</script>)', re.DOTALL),
        )
        parser.htmlScriptBrush_add(greedy)
        text = '<script>var <script>var</script></script>'

        result = parser.parse(html_brush, True, text)
        assert result == {
            "script": [MatchResult(0, 8, "script"), MatchResult(32, 9, "script")],
            "keyword": [MatchResult(8, 3, "keyword"), MatchResult(20, 3, "keyword")],
        }


class TestSeveralBrushes:
    """Test more than one registered brush"""

    def test_later_brush_truncates_earlier_spans(self, parser, html_brush, js_brush, php_brush):
        """A later region cuts spans emitted by an earlier brush"""
        parser.htmlScriptBrushes_set([js_brush, php_brush])
        text = '<script>"ab<?x"?></script>'

        result = parser.parse(html_brush, True, text)
        assert result == {
            "script": [
                MatchResult(0, 8, "script"),
                MatchResult(11, 2, "script"),
                MatchResult(15, 2, "script"),
                MatchResult(17, 9, "script"),
            ],
            "string": [MatchResult(8, 3, "string")],
            "variable": [MatchResult(13, 1, "variable")],
        }

    def test_spanning_earlier_span_survives(self, parser, html_brush, js_brush, php_brush):
        """An earlier span enclosing a later region is not split"""
        parser.htmlScriptBrushes_set([js_brush, php_brush])
        text = '<script>s = "<?x?>";</script>'

        result = parser.parse(html_brush, True, text)
        assert result == {
            "script": [MatchResult(0, 8, "script"), MatchResult(20, 9, "script")],
            "string": [MatchResult(12, 7, "string")],
        }

    def test_registration_order(self, parser, html_brush, js_brush, php_brush):
        """Reversing the order changes which brush has the last word"""
        parser.htmlScriptBrushes_set([php_brush, js_brush])
        text = '<script>"ab<?x"?></script>'

        result = parser.parse(html_brush, True, text)
        assert result == {
            "script": [MatchResult(0, 8, "script"), MatchResult(17, 9, "script")],
            "string": [MatchResult(8, 7, "string")],
        }


class TestRegistry:
    """Test the embedded brush registry"""

    def test_add_keeps_order(self, parser, js_brush, php_brush):
        parser.htmlScriptBrush_add(js_brush)
        parser.htmlScriptBrush_add(php_brush)
        assert parser.htmlScriptBrushes_get() == [js_brush, php_brush]

    def test_add_none_ignored(self, parser):
        parser.htmlScriptBrush_add(None)
        assert parser.htmlScriptBrushes_get() == []

    def test_get_returns_copy(self, script_parser):
        """Changing the returned list leaves the registry alone"""
        brushes = script_parser.htmlScriptBrushes_get()
        brushes.clear()
        assert len(script_parser.htmlScriptBrushes_get()) == 1

    def test_set_replaces(self, script_parser, php_brush):
        script_parser.htmlScriptBrushes_set([php_brush])
        assert script_parser.htmlScriptBrushes_get() == [php_brush]

    def test_set_none_clears(self, script_parser):
        script_parser.htmlScriptBrushes_set(None)
        assert script_parser.htmlScriptBrushes_get() == []

    def test_set_copies_input(self, parser, js_brush):
        """Later changes to the caller's list do not leak in"""
        brushes = [js_brush]
        parser.htmlScriptBrushes_set(brushes)
        brushes.clear()
        assert parser.htmlScriptBrushes_get() == [js_brush]

    def test_brush_without_pattern_rejected(self, parser, html_brush):
        with pytest.raises(ValueError, match="no htmlScriptPattern"):
            parser.htmlScriptBrush_add(html_brush)

    def test_pattern_with_too_few_groups_rejected(self, parser):
        brush = Brush("bad", htmlScriptPattern=re.compile(r'(<%)(.*?)%>'))
        with pytest.raises(ValueError, match="3 groups"):
            parser.htmlScriptBrush_add(brush)

    def test_invalid_set_leaves_registry_untouched(self, script_parser, js_brush, html_brush):
        with pytest.raises(ValueError):
            script_parser.htmlScriptBrushes_set([html_brush])
        assert script_parser.htmlScriptBrushes_get() == [js_brush]

    def test_string_pattern_compiled(self):
        """A pattern given as a string is compiled with DOTALL"""
        brush = Brush("asp", htmlScriptPattern=r'(<%)(.*?)(%>)')
        assert brush.htmlScriptPattern.flags & re.DOTALL
        assert brush.htmlScript_has()

    def test_brush_fields(self):
        """A brush is a name, its rules and an optional region pattern"""
        brush = Brush("plain")
        assert [f.name for f in dataclasses.fields(Brush)] == ["name", "rules", "htmlScriptPattern"]
        assert brush.rules == []
        assert not brush.htmlScript_has()

    def test_patterns_are_compiled(self, js_brush):
        """Rule and region patterns are stdlib compiled patterns"""
        assert isinstance(js_brush.htmlScriptPattern, re.Pattern)
        assert all(isinstance(rule.pattern, re.Pattern) for rule in js_brush.rules)

    def test_concurrent_use(self, html_brush, js_brush, php_brush):
        """Parsing while the registry changes from other threads is safe"""
        parser = Parser()
        parser.htmlScriptBrush_add(js_brush)
        expected = parser.parse(html_brush, False, PAGE)

        def work(index: int):
            if index % 3 == 0:
                parser.htmlScriptBrushes_set([js_brush, php_brush])
            elif index % 3 == 1:
                parser.htmlScriptBrush_add(php_brush)
            else:
                parser.parse(html_brush, True, PAGE)
            return len(parser.htmlScriptBrushes_get()), parser.parse(html_brush, False, PAGE)

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(work, range(60)))

        assert all(count >= 1 for count, _ in outcomes)
        assert all(result == expected for _, result in outcomes)
