"""
Parser: applies brushes to text and resolves the styled spans

Turns a buffer plus a brush (the rule table of one language) into a
mapping of style key -> non-overlapping spans.

The parser operates in three stages:
1. Rules: every rule of the host brush is run over the range, in
   declaration order, and all captured groups become candidate spans
2. Scripts: when HTML-Script is on, every registered embedded brush
   locates its regions (e.g. <script>...</script>), wipes the host
   candidates there and adds its own
3. Styles: candidates are reduced to one winner per position, longest
   match first

Key features:
- Nested rules: a capture group can be handed to another rule, which
  only sees the captured text
- Embedded languages nest one level deep: a region's content is parsed
  with HTML-Script off
- The embedded brush registry is shared by all parse calls and guarded
  by a lock; everything else lives in the per-call ParseState

Example:
    >>> brush = Brush("demo", [RegExpRule(r'\\bint\\b', {0: 'keyword'})])
    >>> Parser().parse(brush, False, "int x")
    {'keyword': [MatchResult(offset=0, length=3, styleKey='keyword', bold=None)]}
"""

import threading
from typing import Dict, List, Optional

from ..config import appsettings, AppSettings
from ..models.brush import Brush, RegExpRule, StyleAction
from ..models.match import MatchResult
from ..models.state import ParseState, pipeline
from .log import LOG, state_connectToLogger, state_disconnectFromLogger
from .matches import MatchCollector


class Parser:
    """
    Syntax highlighting parser

    Holds the registry of embedded (HTML-Script) brushes. A single
    Parser may be used from several threads at once.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        """
        Args:
            settings: Engine settings; defaults to the appsettings singleton

        Attributes:
            settings: Settings in effect for this parser
            htmlScriptBrushes: Embedded brushes, applied in registration order
            htmlScriptLock: Guards every read and write of htmlScriptBrushes
        """
        self.settings = settings if settings is not None else appsettings
        self.htmlScriptBrushes: List[Brush] = []
        self.htmlScriptLock = threading.Lock()

    def parse(
        self,
        brush: Optional[Brush],
        htmlScript: bool,
        content: Optional[str],
        offset: int = 0,
        length: Optional[int] = None,
    ) -> Optional[Dict[str, List[MatchResult]]]:
        """
        Parse content[offset:offset + length] with the brush

        Main entry point. Bounds are not checked: the caller passes a
        range inside content.

        Args:
            brush: Host brush
            htmlScript: Apply the registered embedded brushes as well
            content: The full buffer
            offset: Start of the range to analyse
            length: Length of the range; None means up to the end

        Returns:
            Dict mapping style key to accepted spans in ascending offset
            order, with offsets relative to the full buffer. None if
            brush or content is missing.

        Example:
            >>> parser.parse(html_brush, True, "<p><script>var a;</script></p>")
            {'keyword': [...], 'script': [...], ...}
        """
        if brush is None or content is None:
            LOG("Nothing to parse: brush or content missing", level=1)
            return None

        if length is None:
            length = len(content) - offset

        state = ParseState(
            brush=brush,
            htmlScript=htmlScript,
            content=content,
            offset=offset,
            length=length,
            verbosity=self.settings.verbosity,
            matches=MatchCollector(),
        )
        token = state_connectToLogger(state)
        try:
            LOG(f"Parsing {length} characters at {offset} with brush '{brush.name}'", level=1)
            final = pipeline(state, self.rules_apply, self.scripts_apply, self.styles_resolve)
        finally:
            state_disconnectFromLogger(token)
        return final.styles

    def rules_apply(self, inputstate: ParseState) -> ParseState:
        """
        Stage 1: collect candidates from every rule of the host brush

        Returns:
            ParseState with ruleCount set
        """
        state = inputstate.copy()
        self.brush_apply(state.matches, state.brush, state.content, state.offset, state.length)
        state.ruleCount = len(state.brush.rules)
        LOG(f"Applied {state.ruleCount} rules, {len(state.matches)} candidates", level=1)
        return state

    def scripts_apply(self, inputstate: ParseState) -> ParseState:
        """
        Stage 2: let the embedded brushes claim their regions

        For each registered brush, in registration order, and each
        region its htmlScriptPattern finds in the analysed range:
            1. all candidates inside the whole region are removed
            2. group 1 (opening delimiter) is styled as a script delimiter
            3. group 2 (content) is parsed with the embedded brush rules
            4. group 3 (closing delimiter) is styled as a script delimiter

        A later brush overrides an earlier brush's regions the same way.

        Returns:
            ParseState with scriptBrushes and scriptRegionCount set.
            Unchanged apart from that when HTML-Script is off.
        """
        state = inputstate.copy()
        if not state.htmlScript:
            return state

        state.scriptBrushes = self.htmlScriptBrushes_get()
        segment = state.content[state.offset:state.end]
        scriptStyleKey = self.settings.script_style_key

        for scriptBrush in state.scriptBrushes:
            for match in scriptBrush.htmlScriptPattern.finditer(segment):
                # the embedded brush has superior priority over the host brush
                state.matches.matches_remove(match.start() + state.offset, match.end() + state.offset)

                start, end = match.span(1)
                if start != -1:
                    state.matches.match_add(
                        MatchResult(start + state.offset, end - start, scriptStyleKey)
                    )

                start, end = match.span(2)
                if start != -1:
                    self.brush_apply(
                        state.matches, scriptBrush, state.content, start + state.offset, end - start
                    )

                start, end = match.span(3)
                if start != -1:
                    state.matches.match_add(
                        MatchResult(start + state.offset, end - start, scriptStyleKey)
                    )

                state.scriptRegionCount += 1
                LOG(
                    f"Script region [{match.start() + state.offset}, {match.end() + state.offset}) "
                    f"parsed with brush '{scriptBrush.name}'",
                    level=2,
                )

        LOG(f"Found {state.scriptRegionCount} embedded regions", level=1)
        return state

    def styles_resolve(self, inputstate: ParseState) -> ParseState:
        """
        Stage 3: reduce candidates to the final spans

        Returns:
            ParseState with styles set
        """
        state = inputstate.copy()
        state.styles = state.matches.styles_get(state.offset)
        LOG(
            f"Accepted {sum(len(spans) for spans in state.styles.values())} spans "
            f"in {len(state.styles)} styles",
            level=1,
        )
        return state

    def brush_apply(
        self, matches: MatchCollector, brush: Brush, content: str, offset: int, length: int
    ) -> None:
        """
        Run every rule of the brush over [offset, offset + length)

        Rules run in declaration order, which is the order their
        candidates land in at a shared offset.
        """
        for rule in brush.rules:
            before = len(matches)
            self.rule_apply(matches, rule, content, offset, length)
            LOG(f"{rule!r}: {len(matches) - before} candidates", level=2)

    def rule_apply(
        self, matches: MatchCollector, rule: RegExpRule, content: str, offset: int, length: int
    ) -> None:
        """
        Run one rule over [offset, offset + length) and collect its groups

        The rule only sees the range, so anchors and look-behind stop at
        its edges. Matches are found left to right and never overlap each
        other. For every match, each group with an operation is either
        styled or handed to its nested rule, which then only sees that
        group's text. Groups that did not take part in the match are
        skipped.

        Args:
            matches: Collector receiving the candidates
            rule: Rule to apply
            content: The full buffer
            offset: Start of the range
            length: Length of the range
        """
        segment = content[offset:offset + length]

        for match in rule.pattern.finditer(segment):
            for groupId, operation in rule.groupOperations.items():
                start, end = match.span(groupId)
                if start == -1:
                    continue
                start += offset
                end += offset

                if isinstance(operation, StyleAction):
                    LOG(f"[{start}, {end}) -> {operation.styleKey}", level=3)
                    matches.match_add(MatchResult(start, end - start, operation.styleKey, rule.bold))
                else:
                    self.rule_apply(matches, operation.rule, content, start, end - start)

    def htmlScriptBrushes_get(self) -> List[Brush]:
        """
        Get the embedded brushes

        Returns:
            A copy of the registry, safe to iterate while others modify it
        """
        with self.htmlScriptLock:
            return list(self.htmlScriptBrushes)

    def htmlScriptBrushes_set(self, brushes: Optional[List[Brush]]) -> None:
        """
        Replace the embedded brushes. Clears all previously registered ones.

        Args:
            brushes: New registry contents; None just clears it

        Raises:
            ValueError: If a brush has no usable htmlScriptPattern
        """
        brushes = [brush for brush in (brushes or []) if brush is not None]
        for brush in brushes:
            self.htmlScriptBrush_validate(brush)
        with self.htmlScriptLock:
            self.htmlScriptBrushes.clear()
            self.htmlScriptBrushes.extend(brushes)

    def htmlScriptBrush_add(self, brush: Optional[Brush]) -> None:
        """
        Register an embedded brush after the existing ones

        Args:
            brush: Brush to add; None is ignored

        Raises:
            ValueError: If the brush has no usable htmlScriptPattern
        """
        if brush is None:
            return
        self.htmlScriptBrush_validate(brush)
        with self.htmlScriptLock:
            self.htmlScriptBrushes.append(brush)

    @staticmethod
    def htmlScriptBrush_validate(brush: Brush) -> None:
        """Check that a brush can locate its regions in a host document"""
        if brush.htmlScriptPattern is None:
            raise ValueError(f"Brush '{brush.name}' has no htmlScriptPattern")
        if not brush.htmlScript_has():
            raise ValueError(
                f"htmlScriptPattern of brush '{brush.name}' needs 3 groups "
                f"(opening, content, closing), has {brush.htmlScriptPattern.groups}"
            )
