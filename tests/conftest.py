"""
Shared sample brushes for the parser tests

The brushes are tiny, with just enough rules to make offsets
easy to compute by hand.
"""

import re

import pytest

from brushparse.lib.parser import Parser
from brushparse.models.brush import Brush, RegExpRule


@pytest.fixture
def html_brush() -> Brush:
    """Host brush: comments and tags"""
    return Brush(
        "html",
        [
            RegExpRule(r'<!--.*?-->', {0: 'comments'}, flags=re.DOTALL),
            RegExpRule(r'</?\w+[^>]*>', {0: 'keyword'}),
        ],
    )


@pytest.fixture
def js_brush() -> Brush:
    """Embedded brush found between <script> tags"""
    return Brush(
        "javascript",
        [
            RegExpRule(r'\b(?:var|function|return)\b', {0: 'keyword'}),
            RegExpRule(r'"[^"]*"', {0: 'string'}),
            RegExpRule(r'\b\d+\b', {0: 'value'}),
        ],
        htmlScriptPattern=re.compile(r'(<script[^>]*>)(.*?)(</script>)', re.DOTALL),
    )


@pytest.fixture
def php_brush() -> Brush:
    """Embedded brush found between <? and ?>"""
    return Brush(
        "php",
        [RegExpRule(r'\w+', {0: 'variable'})],
        htmlScriptPattern=re.compile(r'(<\?)(.*?)(\?>)', re.DOTALL),
    )


@pytest.fixture
def parser() -> Parser:
    return Parser()


@pytest.fixture
def script_parser(js_brush: Brush) -> Parser:
    """Parser with the javascript brush registered"""
    parser = Parser()
    parser.htmlScriptBrush_add(js_brush)
    return parser
