# latex_renderer/latex/environment_extractor.py

import logging
import re

from ..models.types import EnvironmentRecord, ExtractionResult
from .definitions import ENVIRONMENT_ARGUMENTS, OPTIONAL_ARGUMENT_ENVIRONMENTS
from .placeholder_store import PlaceholderStore
from .scanner import read_group


BEGIN_PATTERN = re.compile(r'\\begin\{([^{}\s]+)\}')


class EnvironmentExtractor:
    """
    Lifts `\\begin{name}...\\end{name}` blocks out of text.

    Each block closes at the first `\\end{name}` of the same name after it.
    A block nested inside another of the same name therefore closes the
    outer `\\begin` early; blocks of other names nested inside are carried
    along as part of the outer block's content.
    """

    def __init__(self, store: PlaceholderStore):
        self.logger = logging.getLogger(__name__)
        self.store = store

    def extract(self, text: str) -> ExtractionResult:
        """
        Replace every complete environment block with a placeholder token.

        Args:
            text: Source text

        Returns:
            ExtractionResult with the substituted text and the records in
            document order
        """
        records = []
        pieces = []
        copied_up_to = 0
        search_from = 0

        while True:
            begin = BEGIN_PATTERN.search(text, search_from)
            if begin is None:
                break

            name = begin.group(1)
            content_start = self._skip_options(text, begin.end(), name)
            end_marker = f'\\end{{{name}}}'
            content_end = text.find(end_marker, content_start)

            if content_end == -1:
                self.logger.warning(
                    f"Unterminated environment '{name}' at offset {begin.start()}: "
                    f"{text[begin.start():begin.start() + 60]!r}"
                )
                search_from = begin.end()
                continue

            block_end = content_end + len(end_marker)
            record = self.store.reserve(EnvironmentRecord(
                name=name,
                raw_options=text[begin.end():content_start],
                raw_content=text[content_start:content_end],
                source_span=(begin.start(), block_end)
            ))
            records.append(record)

            pieces.append(text[copied_up_to:begin.start()])
            pieces.append(record.token)
            copied_up_to = search_from = block_end

        pieces.append(text[copied_up_to:])

        if records:
            self.logger.debug(f"Extracted {len(records)} environment(s): {[r.name for r in records]}")

        return ExtractionResult(text=''.join(pieces), records=records)

    def _skip_options(self, text: str, pos: int, name: str) -> int:
        """Return the index where content starts after any option groups."""
        if name in OPTIONAL_ARGUMENT_ENVIRONMENTS:
            bracket = read_group(text, pos, '[', ']')
            if bracket is not None:
                pos = bracket[1]

        for _ in range(ENVIRONMENT_ARGUMENTS.get(name, 0)):
            group = read_group(text, pos)
            if group is None:
                break
            pos = group[1]

        return pos
