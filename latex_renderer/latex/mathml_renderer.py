# latex_renderer/latex/mathml_renderer.py

import logging
import re
from typing import Dict, Optional

import latex2mathml.converter
from markupsafe import Markup

from ..models.types import HTMLString, ProcessingError
from ..utils.html_helpers import error_marker, wrap_content


def expand_macros(formula: str, macros: Dict[str, str]) -> str:
    """
    Replace user macros with their definitions.

    A macro only matches a whole command, so `\\R` does not touch `\\Rightarrow`.
    Longer names are expanded first.
    """
    for name in sorted(macros, key=len, reverse=True):
        pattern = re.escape(name) + (r'(?![A-Za-z])' if name[-1:].isalpha() else '')
        expansion = macros[name]
        formula = re.sub(pattern, lambda _match: expansion, formula)
    return formula


class MathMLRenderer:
    """Typesets formulas on the server as MathML."""

    def __init__(self, macros: Optional[Dict[str, str]] = None, throw_on_error: bool = False):
        self.logger = logging.getLogger(__name__)
        self.macros = dict(macros or {})
        self.throw_on_error = throw_on_error

    def render(self, formula: str, display: bool, equation_id: Optional[str] = None) -> HTMLString:
        latex = expand_macros(formula, self.macros)
        try:
            mathml = latex2mathml.converter.convert(latex, display='block' if display else 'inline')
        except Exception as e:
            if self.throw_on_error:
                raise ProcessingError(
                    error_type="latex_rendering",
                    message=f"MathML conversion failed: {str(e)}",
                    context=formula,
                    element_id=equation_id
                )
            self.logger.warning(f"MathML conversion failed for {formula[:50]!r}: {str(e)}")
            return error_marker(formula, str(e))

        attrs = {'data-equation-id': equation_id} if equation_id else None
        equation_class = "display-equation" if display else "inline-equation"
        return wrap_content(
            Markup(mathml),
            'div' if display else 'span',
            ['mathml-equation', equation_class],
            attrs
        )
