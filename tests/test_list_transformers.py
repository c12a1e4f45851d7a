from bs4 import BeautifulSoup

from latex_renderer.latex.list_transformers import (
    parse_counter_start,
    parse_items,
    transform_description,
    transform_enumerate,
    transform_itemize
)


def parse_html(html):
    return BeautifulSoup(str(html), 'html.parser')


def test_enumerate_three_items_starts_at_one():
    soup = parse_html(transform_enumerate("\n\\item first\n\\item second\n\\item third\n"))

    ol = soup.find('ol', class_='enumerate-list')
    assert ol is not None
    assert not ol.has_attr('start')
    assert [li.get_text() for li in ol.find_all('li', class_='enumerate-item')] == ['first', 'second', 'third']


def test_enumerate_counter_directive_sets_start():
    soup = parse_html(transform_enumerate("\\setcounter{enumi}{5}\n\\item a\n\\item b"))

    ol = soup.find('ol')
    assert ol['start'] == '5'
    assert [li.get_text() for li in ol.find_all('li')] == ['a', 'b']
    assert 'setcounter' not in str(soup)


def test_enumerate_without_items_is_empty():
    assert str(transform_enumerate("no items")) == '<ol class="enumerate-list"></ol>'


def test_itemize():
    soup = parse_html(transform_itemize("\\item one \\item two"))

    ul = soup.find('ul', class_='itemize-list')
    assert [li.get_text() for li in ul.find_all('li', class_='itemize-item')] == ['one', 'two']


def test_description_terms_are_optional():
    soup = parse_html(transform_description("\\item[Group] a set with an operation \\item untitled"))

    dl = soup.find('dl', class_='description-list')
    assert [dt.get_text() for dt in dl.find_all('dt', class_='description-term')] == ['Group']
    assert [dd.get_text() for dd in dl.find_all('dd', class_='description-item')] == [
        'a set with an operation',
        'untitled'
    ]


def test_item_bodies_are_formatted_and_escaped():
    soup = parse_html(transform_itemize("\\item \\textbf{bold} and $x<y$"))

    li = soup.find('li')
    assert li.find('strong').get_text() == 'bold'
    assert li.get_text() == 'bold and $x<y$'


def test_parse_items_ignores_preamble_and_prefix_commands():
    items = parse_items("preamble \\itemsep0pt \\item a \\item b")
    assert [item.body for item in items] == ['a', 'b']


def test_parse_items_with_terms():
    items = parse_items("\\item [Term] body", with_terms=True)
    assert items[0].term == 'Term'
    assert items[0].body == 'body'


def test_parse_counter_start():
    assert parse_counter_start("\\setcounter{enumi}{3}\\item a") == (3, "\\item a")
    assert parse_counter_start("\\item a") == (1, "\\item a")
