# latex_renderer/latex/environment_registry.py

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from markupsafe import Markup, escape

from ..models.types import EnvironmentRecord, HTMLString, ProcessingError
from ..utils.html_helpers import convert_line_breaks, wrap_content
from .definitions import MATH_ENVIRONMENTS, TEXT_BLOCKS, THEOREM_LABELS
from .environment_extractor import EnvironmentExtractor
from .inline_commands import format_text
from .list_transformers import transform_description, transform_enumerate, transform_itemize
from .placeholder_store import PlaceholderStore
from .scanner import find_command, read_group, skip_whitespace
from .tabular_transformer import TabularTransformer


HandlerFunc = Callable[[str, str], HTMLString]

MATH_ENVIRONMENT_CLASS = 'latex-math-environment'
VERBATIM_CLASS = 'latex-verbatim'

CENTERING_PATTERN = re.compile(r'\\centering(?![A-Za-z])\s*')


@dataclass(frozen=True)
class EnvironmentHandler:
    """
    A structural conversion for one environment name.

    Raw handlers receive the content untouched; all others receive it with
    nested environments already swapped for placeholder tokens.
    """
    func: HandlerFunc
    raw: bool = False


def _text_block(name: str, tag: str) -> HandlerFunc:
    def handler(content: str, options: str) -> HTMLString:
        return wrap_content(convert_line_breaks(format_text(content.strip())), tag, [f'latex-{name}'])
    return handler


def _theorem_block(name: str, label: str) -> HandlerFunc:
    def handler(content: str, options: str) -> HTMLString:
        title = read_group(options, 0, '[', ']')
        heading = f'{label} ({title[0].strip()}).' if title else f'{label}.'
        body = convert_line_breaks(format_text(content.strip()))
        return wrap_content(
            Markup('{} {}').format(wrap_content(heading, 'strong'), body),
            'div',
            [f'latex-{name}']
        )
    return handler


def transform_verbatim(content: str, options: str = "") -> HTMLString:
    return wrap_content(escape(content.strip('\n')), 'pre', [VERBATIM_CLASS])


def transform_table(content: str, options: str = "") -> HTMLString:
    """Float wrapper: `\\centering` is dropped and `\\caption{...}` gets its own block."""
    content = CENTERING_PATTERN.sub('', content)
    captions = []
    pos = find_command(content, 'caption')
    while pos != -1:
        group = read_group(content, skip_whitespace(content, pos + len('\\caption')))
        if group is None:
            break
        captions.append(group[0])
        content = content[:pos] + content[group[1]:]
        pos = find_command(content, 'caption', pos)

    body = format_text(content.strip())
    for caption in captions:
        body += wrap_content(format_text(caption.strip()), 'div', ['latex-caption'])
    return wrap_content(body, 'div', ['latex-table'])


class EnvironmentRegistry:
    """
    Maps environment names to conversion functions.

    Dispatch order: registered structural handler, then pass-through for
    environments the math renderer understands, then a generic container
    named after the environment.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.tabular = TabularTransformer()
        self._handlers: Dict[str, EnvironmentHandler] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        self.register('enumerate', transform_enumerate)
        self.register('itemize', transform_itemize)
        self.register('description', transform_description)

        for name, tag in TEXT_BLOCKS.items():
            self.register(name, _text_block(name, tag))
        for name, label in THEOREM_LABELS.items():
            self.register(name, _theorem_block(name, label))

        self.register('verbatim', transform_verbatim, raw=True)
        self.register('table', transform_table)
        self.register('tabular', self.tabular.transform)
        self.register('tabular*', self.tabular.transform)

    def register(self, name: str, func: HandlerFunc, raw: bool = False) -> None:
        """Register or replace the structural handler for an environment."""
        self._handlers[name] = EnvironmentHandler(func=func, raw=raw)

    def is_math_environment(self, name: str) -> bool:
        return name not in self._handlers and name in MATH_ENVIRONMENTS

    def transform(self, record: EnvironmentRecord, store: Optional[PlaceholderStore] = None) -> str:
        """
        Convert one environment.

        Args:
            record: The extracted environment
            store: Placeholder store of the current pass; a private one is
                used when omitted

        Returns:
            A safe HTML fragment for structural environments, or the
            unchanged LaTeX source (plain `str`) for math environments
        """
        handler = self._handlers.get(record.name)

        if handler is None and record.name in MATH_ENVIRONMENTS:
            return record.source

        if store is None:
            store = PlaceholderStore()

        try:
            if handler is None:
                return self._transform_generic(record, store)
            if handler.raw:
                return handler.func(record.raw_content, record.raw_options)

            nested = EnvironmentExtractor(store).extract(record.raw_content)
            html = handler.func(nested.text, record.raw_options)
            return self._resolve_nested(html, store)

        except ProcessingError:
            raise
        except Exception as e:
            self.logger.error(
                f"Failed to transform environment '{record.name}': {str(e)} "
                f"(source: {record.source[:80]!r})"
            )
            return escape(record.source)

    def _transform_generic(self, record: EnvironmentRecord, store: PlaceholderStore) -> HTMLString:
        self.logger.debug(f"No handler for environment '{record.name}', using generic container")
        nested = EnvironmentExtractor(store).extract(record.raw_content)
        body = convert_line_breaks(format_text(nested.text.strip()))
        html = wrap_content(body, 'div', [f'latex-{record.name}'])
        return self._resolve_nested(html, store)

    def _resolve_nested(self, html: HTMLString, store: PlaceholderStore) -> HTMLString:
        """Substitute nested environments back into a handler's output."""
        return Markup(store.substitute_all(str(html), lambda nested: str(self._nested_html(nested, store))))

    def _nested_html(self, record: EnvironmentRecord, store: PlaceholderStore) -> HTMLString:
        if self.is_math_environment(record.name):
            # Kept as source in a marked container for the math renderer
            return wrap_content(record.source, 'div', [MATH_ENVIRONMENT_CLASS])
        return escape(self.transform(record, store))
