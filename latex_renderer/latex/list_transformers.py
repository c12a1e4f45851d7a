# latex_renderer/latex/list_transformers.py

import logging
import re
from typing import List, Tuple

from markupsafe import Markup

from ..models.types import HTMLString, ListItem
from ..utils.html_helpers import wrap_content
from .inline_commands import format_text
from .scanner import find_command, read_group, skip_whitespace


COUNTER_PATTERN = re.compile(r'\\setcounter\{enumi\}\{(\d+)\}')

logger = logging.getLogger(__name__)


def parse_counter_start(content: str) -> Tuple[int, str]:
    """
    Read a `\\setcounter{enumi}{N}` directive.

    Returns:
        (starting number, content with every directive removed)
    """
    match = COUNTER_PATTERN.search(content)
    if match is None:
        return 1, content
    return int(match.group(1)), COUNTER_PATTERN.sub('', content)


def parse_items(content: str, with_terms: bool = False) -> List[ListItem]:
    """
    Split list content into items.

    Each item runs from one `\\item` to the next `\\item` or the end of the
    content. Text before the first `\\item` is ignored. With `with_terms`,
    an optional `[term]` right after `\\item` becomes the item's term.
    """
    markers = []
    pos = find_command(content, 'item')
    while pos != -1:
        markers.append(pos)
        pos = find_command(content, 'item', pos + len('\\item'))

    items = []
    for index, start in enumerate(markers):
        end = markers[index + 1] if index + 1 < len(markers) else len(content)
        body_start = start + len('\\item')
        term = None

        if with_terms:
            bracket = read_group(content, skip_whitespace(content, body_start), '[', ']')
            if bracket is not None:
                term, body_start = bracket[0].strip(), bracket[1]

        items.append(ListItem(body=content[body_start:end].strip(), term=term))

    return items


def transform_enumerate(content: str, options: str = "") -> HTMLString:
    """Ordered list, honouring a `\\setcounter{enumi}{N}` starting number."""
    start, content = parse_counter_start(content)
    items = parse_items(content)
    logger.debug(f"enumerate: {len(items)} item(s) starting at {start}")

    body = Markup('').join(
        wrap_content(format_text(item.body), 'li', ['enumerate-item'])
        for item in items
    )
    attrs = {'start': start} if start != 1 else None
    return wrap_content(body, 'ol', ['enumerate-list'], attrs)


def transform_itemize(content: str, options: str = "") -> HTMLString:
    items = parse_items(content)
    body = Markup('').join(
        wrap_content(format_text(item.body), 'li', ['itemize-item'])
        for item in items
    )
    return wrap_content(body, 'ul', ['itemize-list'])


def transform_description(content: str, options: str = "") -> HTMLString:
    """Term/definition pairs; the term element is left out when an item has none."""
    parts = []
    for item in parse_items(content, with_terms=True):
        if item.term:
            parts.append(wrap_content(format_text(item.term), 'dt', ['description-term']))
        parts.append(wrap_content(format_text(item.body), 'dd', ['description-item']))
    return wrap_content(Markup('').join(parts), 'dl', ['description-list'])
