# latex_renderer/latex/katex_renderer.py

import logging
from typing import Dict, Optional

from ..models.types import HTMLString, ProcessingError
from ..utils.html_helpers import error_marker, wrap_content
from .latex_validator import LaTeXValidator


class KaTeXRenderer:
    """
    Emits markup for KaTeX to typeset in the browser.

    The formula is carried as escaped text inside a mount element; the
    client renders every `.katex-equation` element using the macro table
    served by `/api/macros` and the `data-display` flag.
    """

    def __init__(self, macros: Optional[Dict[str, str]] = None, throw_on_error: bool = False):
        self.logger = logging.getLogger(__name__)
        self.validator = LaTeXValidator()
        self.macros = dict(macros or {})
        self.throw_on_error = throw_on_error

    def render(self, formula: str, display: bool, equation_id: Optional[str] = None) -> HTMLString:
        """
        Render LaTeX equation to HTML.

        Args:
            formula: Raw formula without delimiters
            display: Block (True) or inline (False) layout
            equation_id: Optional id carried as `data-equation-id`

        Returns:
            Mount element, or an error marker when the formula is invalid

        Raises:
            ProcessingError: If the formula is invalid and throw_on_error is set
        """
        if not self.validator.validate_equation(formula):
            problems = self.validator.problems(formula)
            return self._fail(formula, f"Invalid LaTeX: {', '.join(problems)}", equation_id)

        # Prepare equation class based on type
        equation_class = "display-equation" if display else "inline-equation"
        attrs = {'data-display': 'true' if display else 'false'}
        if equation_id:
            attrs['data-equation-id'] = equation_id

        return wrap_content(
            formula,
            'div' if display else 'span',
            ['katex-equation', equation_class],
            attrs
        )

    def _fail(self, formula: str, message: str, equation_id: Optional[str]) -> HTMLString:
        if self.throw_on_error:
            raise ProcessingError(
                error_type="latex_rendering",
                message=message,
                context=formula,
                element_id=equation_id
            )
        self.logger.warning(f"Failed to render equation {equation_id or formula!r}: {message}")
        return error_marker(formula, message)
