# latex_renderer/latex/definitions.py

from typing import Dict, FrozenSet


# Environments the math renderer understands natively; passed through untouched
MATH_ENVIRONMENTS: FrozenSet[str] = frozenset({
    'equation', 'equation*', 'align', 'align*', 'aligned', 'gather', 'gather*',
    'gathered', 'eqnarray', 'multline', 'split', 'array', 'matrix', 'pmatrix',
    'bmatrix', 'vmatrix', 'Vmatrix', 'cases', 'subequations'
})

# Mandatory braced arguments following `\begin{name}`
ENVIRONMENT_ARGUMENTS: Dict[str, int] = {
    'tabular': 1,
    'tabular*': 2,
    'array': 1,
    'minipage': 1,
}

THEOREM_LABELS: Dict[str, str] = {
    'theorem': 'Theorem',
    'lemma': 'Lemma',
    'proof': 'Proof',
    'definition': 'Definition',
}

TEXT_BLOCKS: Dict[str, str] = {
    'center': 'div',
    'flushleft': 'div',
    'flushright': 'div',
    'quote': 'blockquote',
    'quotation': 'blockquote',
    'minipage': 'div',
}

ROW_SEPARATOR = '\\\\'
RULE_MARKER = '\\hline'
SPAN_DIRECTIVE = 'multicolumn'

# Environments whose `\begin{name}` may be followed by a `[...]` option group
OPTIONAL_ARGUMENT_ENVIRONMENTS: FrozenSet[str] = frozenset({
    'theorem', 'lemma', 'proof', 'definition', 'minipage', 'table',
    'enumerate', 'itemize', 'description', 'tabular', 'array'
})
