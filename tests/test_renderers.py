import logging

import latex2mathml.converter
import pytest
from bs4 import BeautifulSoup

from latex_renderer.config import LaTeXConfig, RendererConfig, default_macros
from latex_renderer.latex.katex_renderer import KaTeXRenderer
from latex_renderer.latex.mathml_renderer import MathMLRenderer, expand_macros
from latex_renderer.models.types import ProcessingError


def parse_html(html):
    return BeautifulSoup(str(html), 'html.parser')


def test_katex_inline_markup():
    span = parse_html(KaTeXRenderer().render('x^2', False, 'eq-1')).find('span')

    assert span['class'] == ['katex-equation', 'inline-equation']
    assert span['data-display'] == 'false'
    assert span['data-equation-id'] == 'eq-1'
    assert span.get_text() == 'x^2'


def test_katex_display_markup_escapes_formula():
    html = KaTeXRenderer().render('a<b', True)

    assert str(html).startswith('<div class="katex-equation display-equation" data-display="true">')
    assert 'a&lt;b' in str(html)


def test_katex_error_marker():
    marker = parse_html(KaTeXRenderer().render('\\frac{1}{2', False)).find('span', class_='katex-error')

    assert marker.get_text() == '\\frac{1}{2'
    assert 'unbalanced braces' in marker['title']


def test_renderer_keeps_own_macro_table():
    macros = default_macros()
    renderer = KaTeXRenderer(macros=macros)
    macros['\\R'] = 'changed'

    assert renderer.macros['\\R'] == '\\mathbb{R}'


def test_expand_macros_matches_whole_commands():
    macros = {'\\R': '\\mathbb{R}', '\\implies': '\\Rightarrow'}
    assert expand_macros('\\R \\implies \\Rightarrow', macros) == '\\mathbb{R} \\Rightarrow \\Rightarrow'


def test_mathml_render():
    inline = str(MathMLRenderer().render('x^2', False, 'eq-3'))
    block = str(MathMLRenderer().render('x^2', True))

    assert inline.startswith('<span class="mathml-equation inline-equation" data-equation-id="eq-3"><math')
    assert 'display="inline"' in inline
    assert '<msup>' in inline
    assert block.startswith('<div class="mathml-equation display-equation"><math')
    assert 'display="block"' in block


def test_mathml_applies_macros(monkeypatch):
    seen = []

    def fake_convert(latex, display='inline'):
        seen.append(latex)
        return '<math></math>'

    monkeypatch.setattr(latex2mathml.converter, 'convert', fake_convert)
    MathMLRenderer(macros=default_macros()).render('x \\in \\N', False)

    assert seen == ['x \\in \\mathbb{N}']


def test_mathml_failure(monkeypatch, caplog):
    def failing_convert(latex, display='inline'):
        raise ValueError("bad formula")

    monkeypatch.setattr(latex2mathml.converter, 'convert', failing_convert)

    with caplog.at_level(logging.WARNING):
        html = MathMLRenderer().render('\\oops', False)
    assert 'class="katex-error"' in str(html)
    assert 'MathML conversion failed' in caplog.text

    with pytest.raises(ProcessingError) as exc_info:
        MathMLRenderer(throw_on_error=True).render('\\oops', True, 'eq-9')
    assert exc_info.value.element_id == 'eq-9'


def test_default_macros_have_no_identity_entries():
    macros = default_macros()
    assert all(name != expansion for name, expansion in macros.items())
    assert macros['\\iff'] == '\\Leftrightarrow'


def test_config_creates_renderer():
    assert isinstance(LaTeXConfig().create_renderer(), KaTeXRenderer)

    renderer = LaTeXConfig(output_mode='mathml', throw_on_error=True).create_renderer()
    assert isinstance(renderer, MathMLRenderer)
    assert renderer.throw_on_error

    with pytest.raises(ValueError):
        LaTeXConfig(output_mode='svg')


def test_renderer_config_from_environment(monkeypatch):
    monkeypatch.setenv('LATEX_RENDERER_OUTPUT_MODE', 'mathml')
    monkeypatch.setenv('LATEX_RENDERER_THROW_ON_ERROR', 'true')
    monkeypatch.setenv('LATEX_RENDERER_LOG_LEVEL', 'debug')
    monkeypatch.setenv('LATEX_RENDERER_LOG_FILE', 'logs/renderer.log')
    monkeypatch.setenv('LATEX_RENDERER_MAX_INPUT', '50')
    monkeypatch.setenv('LATEX_RENDERER_MACROS', '{"\\\\RR": "\\\\mathbb{R}"}')

    renderer_config = RendererConfig.from_environment()

    assert renderer_config.latex.output_mode == 'mathml'
    assert renderer_config.latex.throw_on_error
    assert renderer_config.log_level == logging.DEBUG
    assert str(renderer_config.log_file) == 'logs/renderer.log'
    assert renderer_config.max_input_length == 50
    assert renderer_config.latex.macros['\\RR'] == '\\mathbb{R}'
    assert renderer_config.latex.macros['\\N'] == '\\mathbb{N}'
