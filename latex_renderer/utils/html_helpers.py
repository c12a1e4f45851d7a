# latex_renderer/utils/html_helpers.py

import re
from typing import Dict, List, Optional, Union

from markupsafe import Markup

from ..models.types import HTMLString


LINE_BREAK_PATTERN = re.compile(r'\\\\(?:\[[^\]]*\])?')


def wrap_content(
    content: Union[str, HTMLString],
    wrapper_tag: str,
    classes: Optional[List[str]] = None,
    attrs: Optional[Dict[str, Union[str, int]]] = None
) -> HTMLString:
    """
    Wrap content in HTML tag.

    Args:
        content: Content to wrap; plain strings are escaped
        wrapper_tag: HTML tag to wrap with
        classes: Optional classes to add
        attrs: Optional extra attributes, rendered in the given order

    Returns:
        Wrapped content
    """
    attributes = Markup('')
    if classes:
        attributes += Markup(' class="{}"').format(' '.join(classes))
    for name, value in (attrs or {}).items():
        attributes += Markup(' {}="{}"').format(name, value)

    return Markup('<{tag}{attributes}>{content}</{tag}>').format(
        tag=Markup(wrapper_tag),
        attributes=attributes,
        content=content
    )


def convert_line_breaks(content: HTMLString) -> HTMLString:
    """Turn LaTeX `\\\\` line breaks inside a text block into `<br>` tags."""
    parts = LINE_BREAK_PATTERN.split(str(content))
    return Markup('<br>').join(Markup(part) for part in parts)


def error_marker(formula: str, message: str) -> HTMLString:
    """Visible inline marker shown in place of a formula that failed to render."""
    return Markup('<span class="katex-error" title="{}">{}</span>').format(message, formula)
