# latex_renderer/latex/latex_processor.py

import re
from html import unescape
from itertools import count
from typing import Iterator, List, Optional

from markupsafe import Markup

from ..models.types import (
    ExtractionResult,
    HTMLString,
    MathRenderer,
    ProcessingError,
    ProcessingPhase,
    RenderedLine,
    Segment,
    SegmentType
)
from ..utils.html_helpers import wrap_content
from ..utils.logger import RendererLogger, log_processing_phase
from .definitions import ROW_SEPARATOR
from .environment_extractor import EnvironmentExtractor
from .environment_registry import MATH_ENVIRONMENT_CLASS, VERBATIM_CLASS, EnvironmentRegistry
from .inline_commands import process_inline_commands
from .placeholder_store import PlaceholderStore
from .segment_splitter import SegmentSplitter, iter_math_spans


# Escaped content cannot contain the closing tags, so a lazy match is exact
PROTECTED_BLOCK_PATTERN = re.compile(
    f'<pre class="{VERBATIM_CLASS}">.*?</pre>'
    f'|<div class="{MATH_ENVIRONMENT_CLASS}">(?P<math>.*?)</div>',
    re.DOTALL
)


class LaTeXProcessor:
    """
    Main orchestrator for one transformation pass.

    Instances hold only their collaborators and keep no per-pass state, so
    a single processor may serve many requests.
    """

    def __init__(
        self,
        registry: Optional[EnvironmentRegistry] = None,
        renderer: Optional[MathRenderer] = None,
        logger: Optional[RendererLogger] = None
    ):
        self.logger = logger or RendererLogger()
        self.registry = registry or EnvironmentRegistry()
        self.renderer = renderer

    def process(self, text: str) -> List[RenderedLine]:
        """
        Transform source text into lines of ordered segments.

        Args:
            text: LaTeX-flavoured source

        Returns:
            One RenderedLine per `\\\\`-separated line

        Raises:
            ProcessingError: If a placeholder cannot be resolved or the pass
                fails unexpectedly
        """
        store = PlaceholderStore()
        try:
            extracted = self._extract(text, store)
            lines = self._segment(extracted.text, store)
            self._check_resolved(lines, store)
            return lines

        except ProcessingError:
            raise
        except Exception as e:
            raise ProcessingError(
                error_type="latex_processing",
                message=f"LaTeX processing failed: {str(e)}",
                context=text[:80]
            ) from e

    @log_processing_phase(ProcessingPhase.RENDERING)
    def render_html(self, text: str, renderer: Optional[MathRenderer] = None) -> HTMLString:
        """
        Transform source text and emit the final HTML.

        Without a renderer, formulas are left for client-side typesetting
        inside `\\(...\\)` and `\\[...\\]` delimiters. With one, every formula
        (including those inside tables and lists) is handed to it.
        """
        renderer = renderer or self.renderer
        equation_ids = (f"eq-{n}" for n in count(1))

        html_lines = []
        for line in self.process(text):
            parts = [self._render_segment(segment, renderer, equation_ids) for segment in line.segments]
            html_lines.append(wrap_content(Markup('').join(parts), 'div', ['math-line']))

        return wrap_content(Markup('').join(html_lines), 'div', ['math-renderer'])

    @log_processing_phase(ProcessingPhase.EXTRACTION)
    def _extract(self, text: str, store: PlaceholderStore) -> ExtractionResult:
        return EnvironmentExtractor(store).extract(text)

    @log_processing_phase(ProcessingPhase.SEGMENTATION)
    def _segment(self, text: str, store: PlaceholderStore) -> List[RenderedLine]:
        splitter = SegmentSplitter(lambda token: self._resolve_token(token, store))
        lines = []

        for index, line in enumerate(text.split(ROW_SEPARATOR)):
            segments = []
            for segment in splitter.split(process_inline_commands(line)):
                if segment.is_math and store.find_tokens(segment.content):
                    # A formula wrapped around an environment keeps its source
                    segment = Segment(segment.segment_type, store.substitute_all(segment.content))
                segments.append(segment)
            lines.append(RenderedLine(index=index, segments=segments))

        self.logger.debug(f"Segmented {len(lines)} line(s)")
        return lines

    def _resolve_token(self, token: str, store: PlaceholderStore) -> Segment:
        record = store.resolve(token)
        if self.registry.is_math_environment(record.name):
            return Segment(SegmentType.DISPLAY_MATH, record.source)

        html = self.registry.transform(record, store)
        return Segment(SegmentType.STRUCTURAL_BLOCK, str(html))

    def _check_resolved(self, lines: List[RenderedLine], store: PlaceholderStore) -> None:
        output = ''.join(segment.content for line in lines for segment in line.segments)
        store.assert_resolved(output)

        dropped = store.outstanding()
        if dropped:
            self.logger.warning(f"Environments never emitted: {[record.name for record in dropped]}")

    def _render_segment(
        self,
        segment: Segment,
        renderer: Optional[MathRenderer],
        equation_ids: Iterator[str]
    ) -> HTMLString:
        if segment.segment_type == SegmentType.PLAIN_TEXT:
            return wrap_content(Markup(segment.content), 'span')

        if segment.segment_type == SegmentType.STRUCTURAL_BLOCK:
            if renderer is None:
                return Markup(segment.content)
            return self._render_embedded_math(segment.content, renderer, equation_ids)

        display = segment.segment_type == SegmentType.DISPLAY_MATH
        if renderer is not None:
            return renderer.render(segment.content, display, next(equation_ids))

        if not display:
            return wrap_content(f'\\({segment.content}\\)', 'span')
        if segment.content.lstrip().startswith('\\begin{'):
            return wrap_content(segment.content, 'div', ['block', 'my-2'])
        return wrap_content(f'\\[{segment.content}\\]', 'div', ['block', 'my-2'])

    def _render_embedded_math(
        self,
        html: str,
        renderer: MathRenderer,
        equation_ids: Iterator[str]
    ) -> HTMLString:
        """
        Typeset formulas left inside structural markup.

        Marked math environments are rendered as display formulas; verbatim
        blocks are copied through untouched.
        """
        pieces = []
        position = 0
        for block in PROTECTED_BLOCK_PATTERN.finditer(html):
            pieces.append(self._render_dollar_math(html[position:block.start()], renderer, equation_ids))
            if block.group('math') is None:
                pieces.append(Markup(block.group(0)))
            else:
                pieces.append(renderer.render(unescape(block.group('math')), True, next(equation_ids)))
            position = block.end()
        pieces.append(self._render_dollar_math(html[position:], renderer, equation_ids))
        return Markup('').join(pieces)

    def _render_dollar_math(
        self,
        html: str,
        renderer: MathRenderer,
        equation_ids: Iterator[str]
    ) -> HTMLString:
        pieces = []
        position = 0
        for span in iter_math_spans(html):
            display = span.segment_type == SegmentType.DISPLAY_MATH
            pieces.append(Markup(html[position:span.start]))
            pieces.append(renderer.render(unescape(span.content), display, next(equation_ids)))
            position = span.end
        pieces.append(Markup(html[position:]))
        return Markup('').join(pieces)
