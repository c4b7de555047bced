"""
brushparse - Rule-based syntax highlighting engine

Resolves regular-expression rule tables (brushes) against text into
non-overlapping styled spans.
"""

__version__ = "1.0.0"

from .parser import Parser
from .matches import MatchCollector, spans_flatten
from .lexer import BrushLexer, STYLE_TOKENS
from .log import LOG, state_connectToLogger, state_disconnectFromLogger

__all__ = [
    "Parser",
    "MatchCollector",
    "spans_flatten",
    "BrushLexer",
    "STYLE_TOKENS",
    "LOG",
    "state_connectToLogger",
    "state_disconnectFromLogger",
    "__version__",
]
