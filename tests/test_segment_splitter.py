from latex_renderer.latex.segment_splitter import iter_math_spans, split_segments
from latex_renderer.models.types import Segment, SegmentType


def test_inline_math_splits_into_three_segments():
    assert split_segments('The value is $x^2$ today.') == [
        Segment(SegmentType.PLAIN_TEXT, 'The value is '),
        Segment(SegmentType.INLINE_MATH, 'x^2'),
        Segment(SegmentType.PLAIN_TEXT, ' today.'),
    ]


def test_display_math():
    assert split_segments('a $$b$$ c') == [
        Segment(SegmentType.PLAIN_TEXT, 'a '),
        Segment(SegmentType.DISPLAY_MATH, 'b'),
        Segment(SegmentType.PLAIN_TEXT, ' c'),
    ]


def test_no_delimiters_gives_one_plain_segment():
    assert split_segments('just words') == [Segment(SegmentType.PLAIN_TEXT, 'just words')]
    assert split_segments('') == [Segment(SegmentType.PLAIN_TEXT, '')]


def test_empty_plain_runs_are_not_emitted():
    assert split_segments('$x$') == [Segment(SegmentType.INLINE_MATH, 'x')]


def test_unmatched_dollar_is_literal():
    assert split_segments('costs $5') == [Segment(SegmentType.PLAIN_TEXT, 'costs $5')]
    assert split_segments('$$') == [Segment(SegmentType.PLAIN_TEXT, '$$')]


def test_adjacent_inline_spans():
    segments = split_segments('$a$$b$')
    assert [segment.segment_type for segment in segments] == [SegmentType.INLINE_MATH] * 2
    assert [segment.content for segment in segments] == ['a', 'b']


def test_first_delimiter_wins():
    spans = list(iter_math_spans('$a$ and $$b$$'))
    assert [(span.segment_type, span.content) for span in spans] == [
        (SegmentType.INLINE_MATH, 'a'),
        (SegmentType.DISPLAY_MATH, 'b'),
    ]


def test_tokens_become_their_own_segments():
    block = Segment(SegmentType.STRUCTURAL_BLOCK, '<div>$x$</div>')
    segments = split_segments('a \ue000ENV0\ue001 b $y$', resolve_token=lambda token: block)

    assert segments == [
        Segment(SegmentType.PLAIN_TEXT, 'a '),
        block,
        Segment(SegmentType.PLAIN_TEXT, ' b '),
        Segment(SegmentType.INLINE_MATH, 'y'),
    ]


def test_segment_to_dict():
    assert Segment(SegmentType.INLINE_MATH, 'x').to_dict() == {'type': 'inline_math', 'content': 'x'}


def test_escaped_dollar_is_literal():
    assert split_segments('costs \\$5 and \\$6') == [Segment(SegmentType.PLAIN_TEXT, 'costs \\$5 and \\$6')]


def test_escaped_dollar_inside_formula():
    assert split_segments('$a \\$ b$') == [Segment(SegmentType.INLINE_MATH, 'a \\$ b')]


def test_dollar_after_double_backslash_opens_formula():
    assert split_segments('\\\\$x$') == [
        Segment(SegmentType.PLAIN_TEXT, '\\\\'),
        Segment(SegmentType.INLINE_MATH, 'x'),
    ]
