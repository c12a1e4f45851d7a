# latex_renderer/latex/segment_splitter.py

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from ..models.types import Segment, SegmentType
from .placeholder_store import TOKEN_PATTERN


@dataclass(frozen=True)
class MathSpan:
    """A delimited formula found in a line."""
    start: int
    end: int
    segment_type: SegmentType
    content: str


TokenResolver = Callable[[str], Segment]


def is_escaped(line: str, pos: int) -> bool:
    """True when the character at `pos` follows an odd run of backslashes."""
    backslashes = 0
    while pos - backslashes > 0 and line[pos - backslashes - 1] == '\\':
        backslashes += 1
    return backslashes % 2 == 1


def find_dollar(line: str, start: int) -> int:
    """Index of the next unescaped `$` at or after `start`, or -1."""
    pos = line.find('$', start)
    while pos != -1 and is_escaped(line, pos):
        pos = line.find('$', pos + 1)
    return pos


def match_math_at(line: str, pos: int) -> Optional[MathSpan]:
    """
    Try to read a formula starting at the `$` at `pos`.

    `$$...$$` is tried before `$...$`; neither may be empty or contain an
    unescaped dollar sign. `\\$` never opens or closes a formula.
    """
    if is_escaped(line, pos):
        return None

    if line.startswith('$$', pos):
        close = find_dollar(line, pos + 2)
        if close > pos + 2 and line.startswith('$$', close):
            return MathSpan(pos, close + 2, SegmentType.DISPLAY_MATH, line[pos + 2:close])

    close = find_dollar(line, pos + 1)
    if close > pos + 1:
        return MathSpan(pos, close + 1, SegmentType.INLINE_MATH, line[pos + 1:close])

    return None


def iter_math_spans(line: str) -> Iterator[MathSpan]:
    """Yield formulas left to right; an unmatched `$` is skipped as literal text."""
    pos = 0
    while True:
        dollar = find_dollar(line, pos)
        if dollar == -1:
            return
        span = match_math_at(line, dollar)
        if span is None:
            pos = dollar + 1
            continue
        yield span
        pos = span.end


class SegmentSplitter:
    """
    Splits one line into plain-text and math segments in source order.

    Plain runs are taken as they are; callers escape them beforehand. When a
    token resolver is given, placeholder tokens found in plain runs become
    segments of their own so structural blocks never pass through the
    dollar scan.
    """

    def __init__(self, resolve_token: Optional[TokenResolver] = None):
        self.resolve_token = resolve_token

    def split(self, line: str) -> List[Segment]:
        segments: List[Segment] = []
        plain_start = 0

        for span in iter_math_spans(line):
            self._emit_plain(segments, line[plain_start:span.start])
            segments.append(Segment(span.segment_type, span.content))
            plain_start = span.end

        self._emit_plain(segments, line[plain_start:])

        if not segments:
            segments.append(Segment(SegmentType.PLAIN_TEXT, line))
        return segments

    def _emit_plain(self, segments: List[Segment], run: str) -> None:
        if not run:
            return
        if self.resolve_token is None:
            segments.append(Segment(SegmentType.PLAIN_TEXT, run))
            return

        pos = 0
        for match in TOKEN_PATTERN.finditer(run):
            if match.start() > pos:
                segments.append(Segment(SegmentType.PLAIN_TEXT, run[pos:match.start()]))
            segments.append(self.resolve_token(match.group(0)))
            pos = match.end()
        if pos < len(run):
            segments.append(Segment(SegmentType.PLAIN_TEXT, run[pos:]))


def split_segments(line: str, resolve_token: Optional[TokenResolver] = None) -> List[Segment]:
    """Split a line into an ordered sequence of segments."""
    return SegmentSplitter(resolve_token).split(line)
