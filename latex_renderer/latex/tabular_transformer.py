# latex_renderer/latex/tabular_transformer.py

import logging
import re
from typing import List, Optional

from markupsafe import Markup, escape

from ..models.types import Alignment, ColumnSpec, HTMLString, TableCell, TableRow
from ..utils.html_helpers import wrap_content
from .definitions import ROW_SEPARATOR, RULE_MARKER, SPAN_DIRECTIVE
from .inline_commands import format_text
from .scanner import find_command, read_group, read_groups, skip_whitespace


PROTECTED_AMPERSAND = "\ue002AMP\ue003"
TEXT_PLACEHOLDER = "\ue004TEXT{}\ue005"
TEXT_PLACEHOLDER_PATTERN = re.compile(r'\ue004TEXT(\d+)\ue005')

ROMAN_LABEL = re.compile(r'^\([IVX]+\)$')
LETTER_LABEL = re.compile(r'^\([A-Za-z]\)$')
LATEX_COMMAND = re.compile(r'\\[A-Za-z]+')
SPAN_MATH_HINT = re.compile(r'[\\_^$+=<>]')
RULE_PATTERN = re.compile(re.escape(RULE_MARKER) + r'(?![A-Za-z])')


def parse_column_spec(raw_options: str) -> List[ColumnSpec]:
    """
    Parse a column specification such as `{l|c|r}`.

    The last braced group of the options is used, so a leading position
    argument (`[t]`) or width (`{\\textwidth}`) is skipped. Each column
    letter appends one column; a `|` right before a column gives it a left
    border. Braced arguments of column types (`p{3cm}`, `@{}`) are skipped.
    """
    spec = _last_braced_group(raw_options)
    if spec is None:
        spec = raw_options

    columns: List[ColumnSpec] = []
    border_pending = False
    pos = 0
    while pos < len(spec):
        char = spec[pos]
        if char == '{':
            group = read_group(spec, pos)
            pos = group[1] if group else pos + 1
            continue
        if char == '|':
            border_pending = True
        elif char in 'lcrpmb':
            columns.append(ColumnSpec(Alignment.from_letter(char), border_pending))
            border_pending = False
        pos += 1

    return columns


def _last_braced_group(text: str) -> Optional[str]:
    last = None
    pos = 0
    while pos < len(text):
        if text[pos] == '{':
            group = read_group(text, pos)
            if group is None:
                break
            last, pos = group
        else:
            pos += 1
    return last


def protect_span_ampersands(row: str) -> str:
    """Hide `&` inside span-directive content so it cannot split cells."""
    result = []
    pos = 0
    while True:
        start = find_command(row, SPAN_DIRECTIVE, pos)
        if start == -1:
            break
        parsed = read_groups(row, start + len(SPAN_DIRECTIVE) + 1, 3)
        if parsed is None:
            result.append(row[pos:start + 1])
            pos = start + 1
            continue
        end = parsed[1]
        result.append(row[pos:start])
        result.append(row[start:end].replace('&', PROTECTED_AMPERSAND))
        pos = end
    result.append(row[pos:])
    return ''.join(result)


def _has_span_directive(text: str) -> bool:
    return find_command(text, SPAN_DIRECTIVE) != -1


def split_cells(row: str) -> List[str]:
    """Split a row on `&`, except inside span directives."""
    protected = protect_span_ampersands(row)
    return [cell.strip().replace(PROTECTED_AMPERSAND, '&') for cell in protected.split('&')]


def split_rows(content: str) -> List[TableRow]:
    """
    Split tabular content into rows.

    A row containing `\\hline` is flagged as ruled and the marker removed; a
    row holding nothing but rules passes its flag on to the next row.
    """
    rows: List[TableRow] = []
    rule_pending = False

    for raw_row in content.split(ROW_SEPARATOR):
        has_rule = RULE_PATTERN.search(raw_row) is not None
        row_text = RULE_PATTERN.sub('', raw_row).strip() if has_rule else raw_row.strip()
        rule_pending = rule_pending or has_rule

        if not row_text:
            continue

        rows.append(TableRow(
            cells=[TableCell(content=cell) for cell in split_cells(row_text)],
            has_rule_above=rule_pending
        ))
        rule_pending = False

    return rows


def parse_multicolumn(cell: str) -> Optional[TableCell]:
    """
    Parse a `\\multicolumn{span}{format}{content}` cell.

    Returns:
        The spanning cell, or None when the directive is malformed
    """
    start = find_command(cell, SPAN_DIRECTIVE)
    if start == -1:
        return None
    parsed = read_groups(cell, start + len(SPAN_DIRECTIVE) + 1, 3)
    if parsed is None:
        return None
    (span, column_format, content), _ = parsed

    try:
        column_span = int(span.strip())
    except ValueError:
        return None

    alignment = Alignment.CENTER
    if 'l' in column_format:
        alignment = Alignment.LEFT
    if 'r' in column_format:
        alignment = Alignment.RIGHT

    content = content.strip()
    if SPAN_MATH_HINT.search(content) and not content.startswith('$'):
        content = f'${content}$'

    return TableCell(
        content=content,
        column_span=max(column_span, 1),
        alignment=alignment,
        has_math_content=classify_cell(content)
    )


def classify_cell(content: str) -> bool:
    """A cell holds math when it has a dollar sign or a LaTeX command."""
    stripped = content.strip()
    if ROMAN_LABEL.match(stripped) or LETTER_LABEL.match(stripped):
        return False
    return '$' in content or bool(LATEX_COMMAND.search(content))


def normalize_math(content: str) -> str:
    """
    Wrap a math cell in `$` delimiters with its whitespace collapsed.

    `\\text{...}` spans are set aside first and restored verbatim, so their
    words and spacing are not treated as formula syntax.
    """
    protected = []

    def protect(text: str) -> str:
        result = []
        pos = 0
        while True:
            start = find_command(text, 'text', pos)
            if start == -1:
                break
            group = read_group(text, skip_whitespace(text, start + len('\\text')))
            if group is None:
                break
            result.append(text[pos:start])
            result.append(TEXT_PLACEHOLDER.format(len(protected)))
            protected.append(group[0])
            pos = group[1]
        result.append(text[pos:])
        return ''.join(result)

    normalized = ' '.join(protect(content).split())
    if not normalized.startswith('$'):
        normalized = f'${normalized}$'

    return TEXT_PLACEHOLDER_PATTERN.sub(
        lambda match: '\\text{' + protected[int(match.group(1))] + '}',
        normalized
    )


def format_cell_content(cell: str) -> HTMLString:
    """Render the inside of one table cell."""
    stripped = cell.strip()

    if len(stripped) > 1 and stripped.startswith('$') and stripped.endswith('$'):
        return escape(stripped)
    if ROMAN_LABEL.match(stripped):
        return wrap_content(stripped, 'span', ['roman-numeral'])
    if LETTER_LABEL.match(stripped):
        return wrap_content(stripped, 'span', ['label-notation'])

    if classify_cell(stripped) and '$' not in stripped:
        return escape(normalize_math(stripped))

    return format_text(stripped)


class TabularTransformer:
    """Converts tabular content into an HTML table."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def parse(self, content: str, raw_options: str) -> List[TableRow]:
        """
        Build the row/cell structure of a table.

        Plain cells take their alignment from the column at the current
        logical index; spanning cells advance the index by their span.
        Cells past the declared column count are dropped.
        """
        columns = parse_column_spec(raw_options)
        rows = split_rows(content)

        if not columns:
            width = max((len(row.cells) for row in rows), default=0)
            self.logger.warning(f"Tabular without column spec {raw_options!r}; assuming {width} centered columns")
            columns = [ColumnSpec(Alignment.CENTER)] * width

        for row in rows:
            placed: List[TableCell] = []
            column = 0
            for cell in row.cells:
                if column >= len(columns):
                    self.logger.debug(f"Dropping cell beyond {len(columns)} column(s): {cell.content!r}")
                    continue

                has_directive = _has_span_directive(cell.content)
                spanning = parse_multicolumn(cell.content) if has_directive else None
                if spanning is not None:
                    placed.append(spanning)
                    column += spanning.column_span
                    continue

                if has_directive:
                    self.logger.warning(f"Malformed span directive treated as text: {cell.content!r}")
                    placed.append(TableCell(content=cell.content, alignment=Alignment.CENTER))
                else:
                    placed.append(TableCell(
                        content=cell.content,
                        alignment=columns[column].alignment,
                        has_math_content=classify_cell(cell.content)
                    ))
                column += 1
            row.cells = placed

        return rows

    def transform(self, content: str, raw_options: str = "") -> HTMLString:
        columns = parse_column_spec(raw_options)
        rows = self.parse(content, raw_options)
        bordered = '|' in raw_options

        html_rows = []
        for row in rows:
            html_cells = []
            column = 0
            for cell in row.cells:
                classes = ['tabular-cell']
                attrs = {}
                if cell.column_span > 1:
                    classes.append('multicolumn-cell')
                    attrs['colspan'] = cell.column_span
                if column < len(columns) and columns[column].border_before:
                    classes.append('border-left')
                attrs['style'] = f'text-align: {cell.alignment.value}'

                if _has_span_directive(cell.content):
                    inner = format_text(cell.content)
                else:
                    inner = format_cell_content(cell.content)
                html_cells.append(wrap_content(inner, 'td', classes, attrs))
                column += cell.column_span

            html_rows.append(wrap_content(
                Markup('').join(html_cells),
                'tr',
                ['with-hline'] if row.has_rule_above else None
            ))

        table_classes = ['latex-tabular', 'latex-tabular-bordered'] if bordered else ['latex-tabular']
        self.logger.debug(f"Tabular rendered with {len(rows)} row(s) and {len(columns)} column(s)")
        return wrap_content(Markup('').join(html_rows), 'table', table_classes)
