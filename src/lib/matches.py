"""
Candidate match collection and overlap resolution

MatchCollector holds every candidate span found while applying brush
rules, keyed by start offset. Within one offset, candidates keep the
order they were found in, which is the order the rules were declared.

Two operations reduce the candidates:
1. matches_remove(): clear a range so a higher priority source (an
   embedded language) can claim it
2. styles_get(): walk offsets left to right, keep the longest candidate
   at each offset and skip everything it covers

Example:
    >>> collector = MatchCollector()
    >>> collector.match_add(MatchResult(0, 3, "keyword"))
    >>> collector.match_add(MatchResult(0, 5, "plain"))
    >>> collector.styles_get()
    {'plain': [MatchResult(offset=0, length=5, styleKey='plain', bold=None)]}
"""

from typing import Dict, Iterator, List, Optional, Tuple

from ..models.match import MatchResult


class MatchCollector:
    """
    Offset-keyed store of candidate spans

    Each stored span starts exactly at the offset it is filed under.
    Iteration is always in ascending offset order.
    """

    def __init__(self) -> None:
        self.matches: Dict[int, List[MatchResult]] = {}

    def __len__(self) -> int:
        return sum(len(candidates) for candidates in self.matches.values())

    def __iter__(self) -> Iterator[Tuple[int, List[MatchResult]]]:
        for offset in sorted(self.matches):
            yield offset, self.matches[offset]

    def match_add(self, match: Optional[MatchResult]) -> None:
        """
        Append a candidate to the list for its start offset

        No deduplication: the same span added twice is stored twice.

        Args:
            match: Candidate span; None is ignored
        """
        if match is None:
            return
        self.matches.setdefault(match.offset, []).append(match)

    def candidates_get(self, offset: int) -> List[MatchResult]:
        """Get a copy of the candidates starting at offset"""
        return list(self.matches.get(offset, []))

    def matches_remove(self, start: int, end: int) -> None:
        """
        Clear [start, end) of previously collected candidates

        Each stored span [s, e) is compared against the range:
            - disjoint: kept as is
            - inside the range: dropped
            - crossing start only: cut down to [s, start)
            - crossing end only: cut down to [end, e)
            - crossing both start and end: kept as is

        The last case leaves a span that still overlaps the range. The
        embedded region then competes with it in styles_get() like any
        other candidate.

        A span cut down to [end, e) now starts at end and is refiled
        under that offset, after any candidates already there.

        Args:
            start: First position of the range
            end: Position just past the range
        """
        refiled: List[MatchResult] = []

        for offset in sorted(self.matches):
            kept: List[MatchResult] = []

            for match in self.matches[offset]:
                _start, _end = match.offset, match.end

                if _start >= end or _end <= start:
                    # out of the range
                    kept.append(match)
                elif _start >= start and _end <= end:
                    # within range
                    continue
                elif _end <= end:
                    # overlap with the start
                    kept.append(match.span_slice(_start, start))
                elif _start >= start:
                    # overlap with the end
                    refiled.append(match.span_slice(end, _end))
                else:
                    kept.append(match)

            if kept:
                self.matches[offset] = kept
            else:
                del self.matches[offset]

        for match in refiled:
            self.match_add(match)

    def styles_get(self, start: int = 0) -> Dict[str, List[MatchResult]]:
        """
        Select the final, non-overlapping spans grouped by style key

        Walks offsets in ascending order with a cursor. Offsets the
        cursor has already passed are skipped. At every other offset the
        longest candidate wins (the earliest found wins a tie), and the
        cursor moves to its end.

        Args:
            start: Initial cursor position (start of the analysed range)

        Returns:
            Dict mapping style key to accepted spans in ascending offset
            order. Empty when nothing matched.
        """
        styles: Dict[str, List[MatchResult]] = {}
        cursor = start

        for offset, candidates in self:
            if offset < cursor or not candidates:
                continue

            # get only the candidate with maximum length and ignore all others
            longest = candidates[0]
            for match in candidates[1:]:
                if match.length > longest.length:
                    longest = match

            cursor = longest.end
            styles.setdefault(longest.styleKey, []).append(longest)

        return styles


def spans_flatten(styles: Optional[Dict[str, List[MatchResult]]]) -> List[MatchResult]:
    """
    Merge a style mapping back into one list ordered by offset

    Args:
        styles: Result of MatchCollector.styles_get() or Parser.parse()

    Returns:
        All spans sorted by offset; empty for None
    """
    if not styles:
        return []
    spans = [match for matches in styles.values() for match in matches]
    return sorted(spans, key=lambda match: match.offset)
