import io
import time

import pytest

from htmltree import parse, HTMLParser, LoadSettings
from htmltree.constants import ParseError, UnterminatedTag, UnterminatedAttributeValue
from htmltree.constants import NestingTooDeep
from htmltree.nodes import Document


def test_attribute_values_are_split():
    document = parse('<a href="x" class="a b c">')
    a = document.children[0]
    assert a.tag_name == "a"
    assert a.attributes == {"href": ["x"], "class": ["a", "b", "c"]}


def test_attribute_value_whitespace_runs():
    a = parse('<a class="  one\t two\n\nthree  " title="">').children[0]
    assert a.attributes["class"] == ["one", "two", "three"]
    assert a.attributes["title"] == []


def test_end_tag_closes_inner_elements():
    document = parse("<div><p>Text</div>")
    div = document.children[0]
    assert div.tag_name == "div"
    assert [child.tag_name for child in div.children] == ["p"]
    p = div.children[0]
    assert [child.text for child in p.children] == ["Text"]


def test_text_segmentation():
    p = parse("<p>Text <sup>child</sup> more text</p>").children[0]
    assert [(child.tag_name, child.text) for child in p.children] == [
        (None, "Text "), ("sup", None), (None, " more text")]
    assert p.children[1].children[0].text == "child"


def test_empty_element_has_no_children():
    assert parse("<div></div>").children[0].children == []


@pytest.mark.parametrize("source", ["", " ", "\n\t  \r\n", "<!-- only a comment -->"])
def test_empty_source(source):
    document = parse(source)
    assert isinstance(document, Document)
    assert document.tag_name is None
    assert document.children == []


def test_text_nodes_have_no_children():
    document = parse("<ul>\n  <li>a <b>b</b></li>\n</ul>tail")
    texts = [node for node in document if node.text is not None]
    assert len(texts) == 5
    for node in texts:
        assert node.children == ()
        assert node.tag_name is None


def test_whitespace_runs_kept_by_default():
    ul = parse("<ul>\n  <li>a</li>\n</ul>").children[0]
    assert [child.text for child in ul.children] == ["\n  ", None, "\n"]


def test_top_level_whitespace_runs():
    document = parse("<a></a> <b></b>")
    assert [child.text for child in document.children] == [None, " ", None]
    # Leading and trailing runs have no sibling on one side
    document = parse("\n<a></a>\n<b></b>\n")
    assert [child.text for child in document.children] == [None, "\n", None]
    document = parse("<a></a> </x>\t<b></b> ")
    assert [child.text for child in document.children] == [None, " ", "\t", None]
    settings = LoadSettings(all_text_separately=False)
    document = parse("<a></a> <b></b>", settings)
    assert [child.tag_name for child in document.children] == ["a", "b"]


def test_whitespace_runs_dropped():
    settings = LoadSettings(all_text_separately=False)
    ul = parse("<ul>\n  <li>a</li>\n</ul>", settings).children[0]
    assert [child.tag_name for child in ul.children] == ["li"]
    assert ul.children[0].children[0].text == "a"


def test_whitespace_inside_text_kept_when_dropping_blank_runs():
    settings = LoadSettings(all_text_separately=False)
    p = parse("<p> a <b>b</b> </p>", settings).children[0]
    assert [child.text for child in p.children] == [" a ", None]


def test_strip_layout_whitespace():
    settings = LoadSettings(strip_layout_whitespace=True)
    document = parse("<ul>\n  <li>\n    Hello\n  </li>\n</ul>", settings)
    ul = document.children[0]
    assert [child.tag_name for child in ul.children] == ["li"]
    assert ul.children[0].children[0].text == "Hello"
    # Runs starting with a space or tab are dropped only when blank
    p = parse("<p>Hello <b>x</b> \t </p>", settings).children[0]
    assert [child.text for child in p.children] == ["Hello ", None]
    p = parse("<p> a <b>x</b>\t\n  <i>y</i></p>", settings).children[0]
    assert [child.text for child in p.children] == [" a ", None, None]


def test_names_are_case_sensitive():
    document = parse('<Div ID="a"></Div>')
    div = document.children[0]
    assert div.tag_name == "Div"
    assert div.attributes == {"ID": ["a"]}
    assert div.closed


def test_entities_not_decoded_by_default():
    a = parse('<a title="a&amp;b">x &lt; y</a>').children[0]
    assert a.attributes["title"] == ["a&amp;b"]
    assert a.children[0].text == "x &lt; y"


def test_decode_entities():
    p = HTMLParser(LoadSettings(decode_entities=True))
    document = p.parse('<a title="a&amp;b &quot;c&quot;">x &lt; y &copy; &#39;z&#39; & w</a>')
    a = document.children[0]
    assert a.attributes["title"] == ["a&b", '"c"']
    assert [child.text for child in a.children] == ["x < y &copy; 'z' & w"]
    assert [error[1] for error in p.errors] == ["unknown-named-entity"]


def test_self_closing():
    document = parse("<p>a<br/>b</p>")
    p = document.children[0]
    assert [(child.tag_name, child.text) for child in p.children] == [
        (None, "a"), ("br", None), (None, "b")]
    assert p.children[1].self_closing
    assert p.children[1].children == []


def test_unclosed_elements_closed_at_end():
    p = HTMLParser()
    document = p.parse("<div><p>text")
    div = document.children[0]
    assert not div.closed
    assert div.children[0].children[0].text == "text"
    assert [error[1] for error in p.errors] == ["expected-closing-tag-but-got-eof"] * 2


def test_error_positions():
    p = HTMLParser()
    p.parse("<div>\n</p>")
    assert p.errors == [((2, 0), "unexpected-end-tag", {"name": "p"}),
                        ((2, 4), "expected-closing-tag-but-got-eof", {"name": "div"})]


def test_end_tag_too_early_names_implied_elements():
    p = HTMLParser()
    p.parse("<a><b><c></a>")
    assert p.errors == [((1, 9), "end-tag-too-early", {"name": "a", "implied": "c, b"})]


@pytest.mark.parametrize("source, errorcode", [
    ("<div", "eof-in-tag-name"),
    ("</div", "eof-in-tag-name"),
    ("<div ", "eof-in-tag"),
    ("<div class", "eof-in-tag"),
    ("<div class=x", "eof-in-tag"),
    ('<div class="x"', "eof-in-tag"),
    ("<br/", "eof-in-tag"),
    ("</div ", "eof-in-end-tag"),
    ("<!DOCTYPE html", "eof-in-markup-declaration"),
    ("<![CDATA[x", "eof-in-markup-declaration"),
    ("<?xml version", "eof-in-processing-instruction"),
])
def test_unterminated_tag(source, errorcode):
    with pytest.raises(UnterminatedTag) as excinfo:
        parse(source)
    assert excinfo.value.errorcode == errorcode
    assert excinfo.value.position == (1, 0)


def test_unterminated_tag_message():
    with pytest.raises(ParseError) as excinfo:
        parse("<p>text</p>\n<div")
    assert str(excinfo.value) == "Line: 2 Col: 0 Unexpected end of file in the tag name (div)."
    assert excinfo.value.datavars == {"name": "div"}


@pytest.mark.parametrize("source, errorcode, position", [
    ('<a href="x', "eof-in-attribute-value-double-quote", (1, 8)),
    ("<a href='x", "eof-in-attribute-value-single-quote", (1, 8)),
    ('<p>\n  <a href="x>y</a>', "eof-in-attribute-value-double-quote", (2, 10)),
])
def test_unterminated_attribute_value(source, errorcode, position):
    with pytest.raises(UnterminatedAttributeValue) as excinfo:
        parse(source)
    assert excinfo.value.errorcode == errorcode
    assert excinfo.value.position == position
    assert excinfo.value.datavars == {"name": "href"}


def test_unterminated_comment_recovers():
    p = HTMLParser()
    document = p.parse("<p>a</p><!-- b")
    assert len(document.children) == 1
    assert [error[1] for error in p.errors] == ["eof-in-comment"]


def test_strict_mode():
    p = HTMLParser(strict=True)
    with pytest.raises(ParseError) as excinfo:
        p.parse("<p>a</b></p>")
    assert excinfo.value.errorcode == "unexpected-end-tag"
    assert excinfo.value.position == (1, 4)

    with pytest.raises(ParseError) as excinfo:
        parse("<p>", strict=True)
    assert excinfo.value.errorcode == "expected-closing-tag-but-got-eof"

    assert parse("<p>a</p>", strict=True).children[0].closed


def test_max_depth():
    settings = LoadSettings(max_depth=2)
    document = parse("<a><b>x</b><b><c/></b></a>", settings)
    assert len(document.children[0].children) == 2

    with pytest.raises(NestingTooDeep) as excinfo:
        parse("<a>\n<b><c>", settings)
    assert excinfo.value.errorcode == "too-deeply-nested"
    assert excinfo.value.position == (2, 3)
    assert excinfo.value.datavars == {"name": "c", "depth": 3, "limit": 2}


def test_deep_nesting_without_limit():
    depth = 5000
    document = parse("<b>" * depth + "x")
    node = document
    for _ in range(depth):
        node = node.children[0]
    assert node.children[0].text == "x"


def bestParseTime(source, repeat=3):
    best = None
    for _ in range(repeat):
        start = time.perf_counter()
        HTMLParser().parse(source)
        elapsed = time.perf_counter() - start
        if best is None or elapsed < best:
            best = elapsed
    return best


@pytest.mark.parametrize("unit", [
    "a < b ",
    "a\n</x> ",
    "<b>x</i>",
])
def test_recovery_cost_is_linear(unit):
    # Quadruple the input; a quadratic parser takes about sixteen times as long
    small = bestParseTime(unit * 5000)
    large = bestParseTime(unit * 20000)
    assert large < small * 8


def test_recovery_positions_on_one_line():
    p = HTMLParser()
    p.parse("a < b " * 1000)
    assert len(p.errors) == 1000
    assert p.errors[-1][0] == (1, 6 * 999 + 2)


def test_parser_reuse():
    p = HTMLParser()
    p.parse("</x>")
    assert len(p.errors) == 1
    document = p.parse("<p>a</p>")
    assert p.errors == []
    assert document.children[0].tag_name == "p"


def test_settings_type():
    with pytest.raises(TypeError):
        HTMLParser({"all_text_separately": False})


def test_bytes_input():
    document = parse("<p>café</p>".encode("utf-8"))
    assert document.children[0].children[0].text == "café"


def test_bytes_input_with_encoding():
    p = HTMLParser()
    document = p.parse(b"<p>caf\xe9</p>", encoding="iso-8859-1")
    assert document.children[0].children[0].text == "café"
    assert p.documentEncoding == "windows-1252"


def test_byte_order_mark_overrides_encoding():
    p = HTMLParser()
    document = p.parse(b"\xef\xbb\xbf<p>caf\xc3\xa9</p>", encoding="iso-8859-1")
    assert document.children[0].children[0].text == "café"
    assert p.documentEncoding == "utf-8"


def test_unknown_encoding():
    with pytest.raises(LookupError):
        parse(b"<p>x</p>", encoding="not-an-encoding")


@pytest.mark.parametrize("source", [3, None, ["<p>x</p>"]])
def test_rejects_other_source_types(source):
    with pytest.raises(TypeError):
        parse(source)


def test_encoding_with_str_input():
    with pytest.raises(TypeError):
        parse("<p>x</p>", encoding="utf-8")


@pytest.mark.parametrize("stream", [
    io.StringIO("<p class='a'>x</p>"),
    io.BytesIO(b"<p class='a'>x</p>"),
])
def test_file_like_input(stream):
    document = parse(stream)
    p = document.children[0]
    assert p.attributes == {"class": ["a"]}
    assert p.children[0].text == "x"
