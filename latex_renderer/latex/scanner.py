# latex_renderer/latex/scanner.py

"""Small helpers for walking LaTeX source one delimited group at a time."""

import re
from typing import List, Optional, Tuple


COMMAND_NAME = re.compile(r'[A-Za-z]+\*?')

Group = Tuple[str, int]


def read_group(text: str, pos: int, opener: str = '{', closer: str = '}') -> Optional[Group]:
    """
    Read a delimited group starting exactly at `pos`.

    Nested delimiters are balanced and `\\{`-style escapes are skipped.

    Returns:
        (inner content, index just past the closing delimiter), or None when
        no group starts at `pos` or it is never closed.
    """
    if pos >= len(text) or text[pos] != opener:
        return None

    depth = 0
    i = pos
    while i < len(text):
        char = text[i]
        if char == '\\':
            i += 2
            continue
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return text[pos + 1:i], i + 1
        i += 1
    return None


def read_groups(text: str, pos: int, count: int) -> Optional[Tuple[List[str], int]]:
    """Read `count` consecutive braced groups, allowing whitespace between them."""
    groups = []
    for _ in range(count):
        pos = skip_whitespace(text, pos)
        group = read_group(text, pos)
        if group is None:
            return None
        content, pos = group
        groups.append(content)
    return groups, pos


def skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def find_command(text: str, name: str, start: int = 0) -> int:
    """
    Find `\\name` at or after `start`, ignoring longer commands that share the prefix.

    Returns -1 when absent.
    """
    marker = '\\' + name
    pos = text.find(marker, start)
    while pos != -1:
        end = pos + len(marker)
        if end >= len(text) or not text[end].isalpha():
            return pos
        pos = text.find(marker, end)
    return -1


def replace_command(text: str, name: str, template: str) -> str:
    """
    Replace every `\\name{X}` with `template.format(X)`.

    One braced argument is read with balanced nesting; its content is not
    processed again. Occurrences without a closed argument are left alone.
    """
    result = []
    pos = 0
    while True:
        start = find_command(text, name, pos)
        if start == -1:
            break
        arg_start = skip_whitespace(text, start + len(name) + 1)
        group = read_group(text, arg_start)
        if group is None:
            result.append(text[pos:arg_start])
            pos = arg_start
            continue
        content, end = group
        result.append(text[pos:start])
        result.append(template.format(content))
        pos = end
    result.append(text[pos:])
    return ''.join(result)
