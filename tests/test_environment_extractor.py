import logging

from latex_renderer.latex.environment_extractor import EnvironmentExtractor


def test_record_per_begin_marker(extractor, store):
    text = (
        "A \\begin{itemize}\\item x\\end{itemize} B "
        "\\begin{center}hi\\end{center} C"
    )
    result = extractor.extract(text)

    assert len(result.records) == text.count('\\begin')
    assert [record.name for record in result.records] == ['itemize', 'center']
    assert result.text == f"A {result.records[0].token} B {result.records[1].token} C"


def test_substitution_reproduces_source(extractor, store):
    text = (
        "Intro \\begin{tabular}{l|c}a & b\\end{tabular} and "
        "\\begin{theorem}[Fermat] No solutions.\\end{theorem}"
    )
    result = extractor.extract(text)
    assert store.substitute_all(result.text) == text


def test_extraction_is_idempotent(extractor, store):
    result = extractor.extract("x \\begin{quote}q\\end{quote} y")
    again = EnvironmentExtractor(store).extract(result.text)

    assert again.records == []
    assert again.text == result.text


def test_no_environments(extractor):
    result = extractor.extract("plain $x$ text")
    assert result.records == []
    assert result.text == "plain $x$ text"


def test_options_and_arguments_are_split_from_content(extractor):
    result = extractor.extract(
        "\\begin{tabular}{l|c}a & b\\end{tabular}"
        "\\begin{theorem}[Fermat] body\\end{theorem}"
    )
    tabular, theorem = result.records

    assert tabular.raw_options == '{l|c}'
    assert tabular.raw_content == 'a & b'
    assert theorem.raw_options == '[Fermat]'
    assert theorem.raw_content == ' body'


def test_math_environment_keeps_leading_bracket(extractor):
    record = extractor.extract("\\begin{align}[a] &= b\\end{align}").records[0]
    assert record.raw_options == ''
    assert record.raw_content == '[a] &= b'


def test_bracket_after_block_without_options_is_content(extractor):
    record = extractor.extract("\\begin{center}[0,1] is closed\\end{center}").records[0]
    assert record.raw_options == ''
    assert record.raw_content == '[0,1] is closed'


def test_source_span_points_at_block(extractor):
    text = "ab \\begin{center}x\\end{center}"
    record = extractor.extract(text).records[0]
    start, end = record.source_span
    assert text[start:end] == record.source


def test_unterminated_environment_is_left_literal(extractor, caplog):
    text = "\\begin{itemize} \\item a"
    with caplog.at_level(logging.WARNING):
        result = extractor.extract(text)

    assert result.records == []
    assert result.text == text
    assert "Unterminated environment 'itemize'" in caplog.text


def test_scanning_continues_after_unterminated_marker(extractor):
    result = extractor.extract("\\begin{center} x \\begin{quote}y\\end{quote}")

    assert [record.name for record in result.records] == ['quote']
    assert result.text.startswith("\\begin{center} x ")


def test_other_names_nest_inside_outer_record(extractor):
    result = extractor.extract("\\begin{center}\\begin{tabular}{c}x\\end{tabular}\\end{center}")

    assert len(result.records) == 1
    assert result.records[0].raw_content == "\\begin{tabular}{c}x\\end{tabular}"


def test_same_name_nesting_closes_at_first_end(extractor):
    text = "\\begin{itemize}\\item a \\begin{itemize}\\item b\\end{itemize}\\end{itemize}"
    result = extractor.extract(text)

    record = result.records[0]
    assert record.raw_content == "\\item a \\begin{itemize}\\item b"
    assert result.text == f"{record.token}\\end{{itemize}}"
