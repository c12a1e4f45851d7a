# latex_renderer/latex/inline_commands.py

import re
from typing import Callable, List, Tuple

from markupsafe import Markup, escape

from ..models.types import HTMLString
from .scanner import read_group, replace_command
from .segment_splitter import iter_math_spans


TRIANGLE_PATTERN = re.compile(r'\\triangle(?![A-Za-z])\s*')

# Applied in this order
TEXT_COMMANDS: List[Tuple[str, str]] = [
    ('textbf', '<strong>{}</strong>'),
    ('textit', '<em>{}</em>'),
    ('emph', '<em>{}</em>'),
    ('text', '{}'),
]

STRUCTURE_COMMANDS: List[Tuple[str, str]] = [
    ('subsection*', '<h3 class="latex-subsection">{}</h3>'),
    ('subsection', '<h3 class="latex-subsection">{}</h3>'),
    ('section*', '<h2 class="latex-section">{}</h2>'),
    ('section', '<h2 class="latex-section">{}</h2>'),
]


def _replace_script(text: str, marker: str, tag: str) -> str:
    """Turn `_{X}` / `^{X}` written outside math mode into sub/sup markup."""
    result = []
    pos = 0
    while True:
        start = text.find(marker + '{', pos)
        if start == -1:
            break
        group = read_group(text, start + 1)
        if group is None:
            break
        content, end = group
        result.append(text[pos:start])
        result.append(f'<{tag}>{content}</{tag}>')
        pos = end
    result.append(text[pos:])
    return ''.join(result)


def apply_inline_commands(text: str) -> str:
    """
    Apply the text-formatting substitutions to a run containing no math.

    The run is expected to be HTML-escaped already.
    """
    for name, template in TEXT_COMMANDS:
        text = replace_command(text, name, template)
    text = TRIANGLE_PATTERN.sub('\u25b3', text)
    text = _replace_script(text, '_', 'sub')
    text = _replace_script(text, '^', 'sup')
    return text


def process_structure_commands(text: str) -> str:
    """Turn `\\section*{T}` and `\\subsection*{T}` into headings."""
    for name, template in STRUCTURE_COMMANDS:
        text = replace_command(text, name, template)
    return text


def _format_plain(text: str) -> str:
    return process_structure_commands(apply_inline_commands(str(escape(text))))


def _transform_outside_math(text: str, math: Callable[[str], str]) -> str:
    pieces = []
    plain_start = 0
    for span in iter_math_spans(text):
        pieces.append(_format_plain(text[plain_start:span.start]))
        pieces.append(math(text[span.start:span.end]))
        plain_start = span.end
    pieces.append(_format_plain(text[plain_start:]))
    return ''.join(pieces)


def process_inline_commands(line: str) -> str:
    """
    Escape and format the text of one line, leaving math spans raw.

    The result mixes HTML-safe text with unescaped formulas, ready for the
    segment splitter.
    """
    return _transform_outside_math(line, lambda formula: formula)


def format_text(text: str) -> HTMLString:
    """Format text for use inside structural markup; formulas are escaped too."""
    return Markup(_transform_outside_math(text, lambda formula: str(escape(formula))))
