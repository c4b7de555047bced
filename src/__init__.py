"""
brushparse - Rule-based syntax highlighting engine

Applies the rule table of a language (a brush) to a buffer, lets
embedded languages override the host language inside their regions,
and reduces the candidates to one style per character.
"""

__version__ = "1.0.0"

from .lib import Parser, MatchCollector, BrushLexer, LOG, state_connectToLogger
from .models import Brush, RegExpRule, MatchResult

__all__ = [
    "Parser",
    "MatchCollector",
    "BrushLexer",
    "Brush",
    "RegExpRule",
    "MatchResult",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
