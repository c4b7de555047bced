"""
Brush and rule models

A brush is the rule table for one language: an ordered list of
RegExpRule objects, plus an optional HTML-Script pattern used when the
brush is embedded inside another language (e.g. <script> in HTML).

The engine only consumes these objects; building the tables for real
languages is up to the caller.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class StyleAction:
    """Group action: style the captured text with styleKey"""
    styleKey: str


@dataclass(frozen=True)
class RuleAction:
    """Group action: run a nested rule over the captured text"""
    rule: "RegExpRule"


GroupAction = Union[StyleAction, RuleAction]


def action_make(operation: Union[str, "RegExpRule", StyleAction, RuleAction]) -> GroupAction:
    """
    Normalise a group operation into a tagged action

    Args:
        operation: A style key, a nested RegExpRule, or an action instance

    Returns:
        StyleAction or RuleAction

    Raises:
        TypeError: If operation is none of the accepted kinds
        ValueError: If operation is an empty style key
    """
    if isinstance(operation, (StyleAction, RuleAction)):
        return operation
    if isinstance(operation, RegExpRule):
        return RuleAction(operation)
    if isinstance(operation, str):
        if not operation:
            raise ValueError("Style key for a group operation cannot be empty")
        return StyleAction(operation)
    raise TypeError(
        f"Group operation must be a style key or a RegExpRule, got {type(operation).__name__}"
    )


class RegExpRule:
    """
    A regular expression plus what to do with each capture group

    Every group listed in groupOperations either receives a style, or is
    handed to a nested rule which is evaluated over the captured text
    only. Group 0 is the whole match.

    Example:
        # Highlight a string literal, with escapes inside it styled apart
        escapes = RegExpRule(r'\\\\.', {0: 'value'})
        strings = RegExpRule(r'"((?:[^"\\\\]|\\\\.)*)"', {0: 'string', 1: escapes})
    """

    def __init__(
        self,
        pattern: Union[str, re.Pattern[str]],
        groupOperations: Optional[Dict[int, Union[str, "RegExpRule", GroupAction]]] = None,
        bold: Optional[bool] = None,
        flags: int = 0,
    ):
        """
        Args:
            pattern: Regex source or an already compiled pattern
            groupOperations: Mapping of group index to a style key or a
                             nested rule. Defaults to styling nothing.
            bold: Bold override attached to every span this rule emits
            flags: re flags, only used when pattern is a string

        Raises:
            ValueError: If a group index does not exist in the pattern
            TypeError: If a group operation has the wrong type
            re.error: If the pattern does not compile
        """
        if isinstance(pattern, str):
            pattern = re.compile(pattern, flags)
        self.pattern: re.Pattern[str] = pattern
        self.bold = bold

        self.groupOperations: Dict[int, GroupAction] = {}
        for groupId in sorted((groupOperations or {}).keys()):
            if groupId < 0 or groupId > self.pattern.groups:
                raise ValueError(
                    f"Group {groupId} not in pattern {self.pattern.pattern!r} "
                    f"({self.pattern.groups} groups)"
                )
            self.groupOperations[groupId] = action_make(groupOperations[groupId])

    def __repr__(self) -> str:
        return f"RegExpRule({self.pattern.pattern!r}, groups={sorted(self.groupOperations)})"


@dataclass
class Brush:
    """
    Rule table for one language

    Attributes:
        name: Brush name (e.g. "html", "javascript")
        rules: Rules in declaration order. The order decides which rule
               wins when two candidates at the same offset tie on length.
        htmlScriptPattern: Pattern locating this language inside a host
                           document. Must have three groups: opening
                           delimiter, embedded content, closing delimiter.
    """
    name: str
    rules: List[RegExpRule] = field(default_factory=list)
    htmlScriptPattern: Optional[re.Pattern[str]] = None

    def __post_init__(self) -> None:
        if isinstance(self.htmlScriptPattern, str):
            self.htmlScriptPattern = re.compile(self.htmlScriptPattern, re.DOTALL)

    def htmlScript_has(self) -> bool:
        """Check if this brush can be embedded in a host document"""
        return self.htmlScriptPattern is not None and self.htmlScriptPattern.groups >= 3
