from markupsafe import Markup

from latex_renderer.latex.inline_commands import (
    format_text,
    process_inline_commands,
    process_structure_commands
)


def test_text_formatting_commands():
    result = process_inline_commands('\\textbf{bold} and \\textit{it} and \\emph{em}')
    assert result == '<strong>bold</strong> and <em>it</em> and <em>em</em>'


def test_text_command_is_unwrapped():
    assert process_inline_commands('\\text{plain}') == 'plain'


def test_nested_braces_are_kept():
    assert process_inline_commands('\\textbf{a {b} c}') == '<strong>a {b} c</strong>'


def test_triangle_symbol():
    assert process_inline_commands('\\triangle ABC') == '△ABC'


def test_scripts_outside_math():
    assert process_inline_commands('H_{2}O and x^{2}') == 'H<sub>2</sub>O and x<sup>2</sup>'


def test_math_spans_are_untouched():
    line = 'see $\\textbf{x}_{1} < 2$ and $$a^{2}$$ here'
    assert process_inline_commands(line) == line


def test_plain_text_is_escaped():
    assert process_inline_commands('a < b & c') == 'a &lt; b &amp; c'
    assert '<script>' not in process_inline_commands('<script>alert(1)</script>')


def test_command_arguments_are_escaped():
    assert process_inline_commands('\\textbf{<i>}') == '<strong>&lt;i&gt;</strong>'


def test_stray_item_is_left_alone():
    assert process_inline_commands('\\item a') == '\\item a'


def test_structure_commands():
    assert process_structure_commands('\\section*{Intro}') == '<h2 class="latex-section">Intro</h2>'
    assert process_structure_commands('\\section{Intro}') == '<h2 class="latex-section">Intro</h2>'
    assert process_structure_commands('\\subsection*{Details}') == '<h3 class="latex-subsection">Details</h3>'
    assert process_inline_commands('\\subsection{A \\textbf{B}}') == (
        '<h3 class="latex-subsection">A <strong>B</strong></h3>'
    )


def test_format_text_escapes_formulas():
    result = format_text('\\emph{if} $x<y$')
    assert isinstance(result, Markup)
    assert result == '<em>if</em> $x&lt;y$'
