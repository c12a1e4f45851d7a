# latex_renderer/latex/latex_validator.py

import logging
import re
from typing import List

from .segment_splitter import find_dollar


BEGIN_NAME = re.compile(r'\\begin\{([^}]*)\}')
END_NAME = re.compile(r'\\end\{([^}]*)\}')


class LaTeXValidator:
    """Cheap structural checks run on a formula before it is rendered."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def validate_equation(self, latex: str) -> bool:
        problems = self.problems(latex)
        if problems:
            self.logger.debug(f"Invalid LaTeX {latex!r}: {', '.join(problems)}")
            return False
        return True

    def problems(self, latex: str) -> List[str]:
        """Human-readable reasons a formula fails validation."""
        found = []
        if not self._braces_balanced(latex):
            found.append("unbalanced braces")
        if self._unescaped_dollars(latex) % 2 != 0:
            found.append("odd number of dollar signs")
        if not self._check_environments(latex):
            found.append("\\begin/\\end mismatch")
        return found

    def _check_environments(self, latex: str) -> bool:
        begins = BEGIN_NAME.findall(latex)
        ends = END_NAME.findall(latex)
        return sorted(begins) == sorted(ends)

    @staticmethod
    def _braces_balanced(latex: str) -> bool:
        depth = 0
        pos = 0
        while pos < len(latex):
            char = latex[pos]
            if char == '\\':
                pos += 2
                continue
            if char == '{':
                depth += 1
            elif char == '}':
                depth -= 1
                if depth < 0:
                    return False
            pos += 1
        return depth == 0

    @staticmethod
    def _unescaped_dollars(latex: str) -> int:
        """Dollar signs the segment splitter would treat as delimiters."""
        count = 0
        pos = find_dollar(latex, 0)
        while pos != -1:
            count += 1
            pos = find_dollar(latex, pos + 1)
        return count
