"""
Pygments bridge for brushparse

Exposes a brush as a Pygments lexer so parse results can be rendered
by any Pygments formatter (HTML, terminal, LaTeX, ...).

Style keys map to token types:
- comments → Comment
- string → String
- keyword → Keyword
- preprocessor → Comment.Preproc
- variable → Name.Variable
- value → Literal
- functions → Name.Function
- constants → Name.Constant
- script → Name.Tag
- color1, color2, color3 → Name.Builtin, Name.Attribute, Name.Entity
- plain and anything unknown → the unstyled token (Text by default)

Example:
    >>> from pygments import highlight
    >>> from pygments.formatters import HtmlFormatter
    >>> highlight("int x;", BrushLexer(brush=c_brush), HtmlFormatter())
"""

from typing import Dict, Iterator, Optional, Tuple

from pygments.lexer import Lexer
from pygments.token import (
    Comment,
    Keyword,
    Literal,
    Name,
    String,
    _TokenType,
    string_to_tokentype,
)

from ..models.brush import Brush
from .matches import spans_flatten
from .parser import Parser


STYLE_TOKENS: Dict[str, _TokenType] = {
    'comments': Comment,
    'string': String,
    'keyword': Keyword,
    'preprocessor': Comment.Preproc,
    'variable': Name.Variable,
    'value': Literal,
    'functions': Name.Function,
    'constants': Name.Constant,
    'script': Name.Tag,
    'color1': Name.Builtin,
    'color2': Name.Attribute,
    'color3': Name.Entity,
}


class BrushLexer(Lexer):
    """
    Pygments lexer driven by a brush

    Every character of the input is covered: spans accepted by the
    parser yield their mapped token, gaps yield the unstyled token.
    Bold overrides have no token equivalent and are dropped.
    """

    name = 'Brush'
    aliases = ['brush']
    filenames = []

    def __init__(
        self,
        brush: Optional[Brush] = None,
        parser: Optional[Parser] = None,
        htmlScript: bool = False,
        style_tokens: Optional[Dict[str, _TokenType]] = None,
        **options,
    ):
        """
        Args:
            brush: Brush used to parse the text
            parser: Parser to use, e.g. one with embedded brushes
                    registered; a fresh Parser by default
            htmlScript: Apply the parser's embedded brushes
            style_tokens: Extra or replacement style key → token entries
            **options: Standard Pygments lexer options
        """
        Lexer.__init__(self, **options)
        self.brush = brush
        self.parser = parser if parser is not None else Parser()
        self.htmlScript = htmlScript
        self.style_tokens = dict(STYLE_TOKENS)
        if style_tokens:
            self.style_tokens.update(style_tokens)
        self.unstyled = string_to_tokentype(self.parser.settings.unstyled_token)

    def token_get(self, styleKey: str) -> _TokenType:
        """Map a style key to its token type"""
        return self.style_tokens.get(styleKey, self.unstyled)

    def get_tokens_unprocessed(self, text: str) -> Iterator[Tuple[int, _TokenType, str]]:
        styles = self.parser.parse(self.brush, self.htmlScript, text)

        pos = 0
        for match in spans_flatten(styles):
            if match.length == 0:
                continue
            if match.offset > pos:
                yield pos, self.unstyled, text[pos:match.offset]
            yield match.offset, self.token_get(match.styleKey), text[match.offset:match.end]
            pos = match.end

        if pos < len(text):
            yield pos, self.unstyled, text[pos:]


def get_lexer(brush: Brush, **options) -> BrushLexer:
    """
    Get a BrushLexer for a brush

    Returns:
        BrushLexer instance ready for use with Pygments
    """
    return BrushLexer(brush=brush, **options)
