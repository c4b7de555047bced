"""
Parse state model and pipeline helper

Defines ParseState dataclass for the functional pipeline pattern and
the pipeline() helper for composing parse stages.
"""

from typing import Any, Callable, Dict, List, Optional, TypeVar, TYPE_CHECKING
from dataclasses import dataclass, field

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from ..lib.matches import MatchCollector
    from .brush import Brush
    from .match import MatchResult


PS = TypeVar("PS", bound="ParseState")


@dataclass
class ParseState:
    """
    State container for a single parse call (state bus pattern).

    Carries the inputs and intermediate results of one Parser.parse()
    call through the stages. Nothing in here outlives the call.

    Pipeline stages and their state additions:
        - Initial: brush, htmlScript, content, offset, length, verbosity, matches
        - rules_apply: ruleCount
        - scripts_apply: scriptBrushes, scriptRegionCount
        - styles_resolve: styles

    Attributes:
        brush: Host brush whose rules are applied first
        htmlScript: Whether registered embedded brushes are applied
        content: The full buffer
        offset: Start of the analysed sub-range
        length: Length of the analysed sub-range
        verbosity: Logging verbosity level (0-3)
        matches: Candidate spans collected so far (shared by all stages)
        ruleCount: Number of top-level rules applied
        scriptBrushes: Snapshot of the embedded brush registry
        scriptRegionCount: Number of embedded regions found
        styles: Final style key -> accepted spans mapping
    """

    brush: Optional["Brush"] = field(default=None)
    htmlScript: bool = field(default=False)
    content: str = field(default="")
    offset: int = field(default=0)
    length: int = field(default=0)
    verbosity: int = field(default=0)
    matches: Optional["MatchCollector"] = field(default=None)

    ruleCount: int = field(default=0)
    scriptBrushes: List[Any] = field(default_factory=list)
    scriptRegionCount: int = field(default=0)
    styles: Optional[Dict[str, List["MatchResult"]]] = field(default=None)

    @property
    def end(self) -> int:
        return self.offset + self.length

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ParseState instance.

        The match collector is shared between copies: every
        stage adds to, or trims, the same candidate set.

        Returns:
            A new ParseState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ParseState, *stages: Callable[[ParseState], ParseState]
) -> ParseState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ParseState) -> ParseState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            rules_apply,
            scripts_apply,
            styles_resolve,
        )

    This is equivalent to:
        styles_resolve(scripts_apply(rules_apply(initial_state)))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
