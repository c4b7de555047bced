"""
Models package for brushparse

Contains data structures and type definitions for the parse pipeline.
"""

from .state import ParseState, pipeline
from .match import MatchResult
from .brush import Brush, RegExpRule, StyleAction, RuleAction, GroupAction, action_make

__all__ = [
    "ParseState",
    "pipeline",
    "MatchResult",
    "Brush",
    "RegExpRule",
    "StyleAction",
    "RuleAction",
    "GroupAction",
    "action_make",
]
