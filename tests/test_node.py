from __future__ import annotations

import pytest

from justhead.node import Document, ElementNode, TextNode


def test_create_builds_skeleton() -> None:
    document = Document.create(title="Hello", html_attributes={"lang": "en"})
    assert document.to_html() == '<html lang="en"><head><title>Hello</title></head><body></body></html>'
    assert document.title == "Hello"
    assert document.head is not None
    assert document.document_element is not None
    assert document.document_element.get_attribute("lang") == "en"


def test_title_setter_creates_title_element() -> None:
    document = Document.create()
    assert document.title_element is None
    document.title = "New"
    assert document.title_element is not None
    assert document.title_element.text_content == "New"
    document.title = ""
    assert document.title_element.children == []


def test_ensure_head_on_bare_document() -> None:
    document = Document()
    head = document.ensure_head()
    assert head.parent is document.document_element
    assert document.head is head


class TestOuterHtml:
    def test_void_element_attributes_in_insertion_order(self) -> None:
        element = ElementNode("meta", {"name": "description", "content": 'This is "quoted" & \'.'})
        element.set_attribute("data-justhead", "true")
        assert element.outer_html == (
            '<meta name="description" content="This is &quot;quoted&quot; &amp; \'." data-justhead="true">'
        )

    def test_flags_render_with_empty_value(self) -> None:
        element = ElementNode("script", {"src": "foo.js"})
        element.set_attribute("async", None)
        assert element.outer_html == '<script src="foo.js" async=""></script>'

    def test_raw_text_bodies_are_not_escaped(self) -> None:
        element = ElementNode("noscript", {"id": "foo"})
        element.append_child(TextNode('<link rel="stylesheet" href="/style.css" />'))
        assert element.outer_html == '<noscript id="foo"><link rel="stylesheet" href="/style.css" /></noscript>'

    def test_title_text_is_escaped(self) -> None:
        element = ElementNode("title")
        element.text_content = "Dangerous <script> include"
        assert element.outer_html == "<title>Dangerous &lt;script&gt; include</title>"


class TestAttributes:
    def test_get_set_remove(self) -> None:
        element = ElementNode("html")
        assert element.get_attribute("lang") is None
        element.set_attribute("lang", "en")
        element.set_attribute("hidden", None)
        assert element.get_attribute("lang") == "en"
        assert element.get_attribute("hidden") == ""
        assert element.has_attribute("hidden")
        element.remove_attribute("hidden")
        element.remove_attribute("missing")
        assert element.attrs == {"lang": "en"}


class TestIsEqualNode:
    def test_attribute_order_is_irrelevant(self) -> None:
        a = ElementNode("meta", {"name": "d", "content": "x"})
        b = ElementNode("meta", {"content": "x", "name": "d"})
        assert a.is_equal_node(b)

    def test_values_and_children_matter(self) -> None:
        a = ElementNode("style", {"type": "text/css"})
        a.append_child(TextNode("p {}"))
        b = ElementNode("style", {"type": "text/css"})
        b.append_child(TextNode("p {}"))
        assert a.is_equal_node(b)
        b.children[0].data = "a {}"
        assert not a.is_equal_node(b)
        assert not a.is_equal_node(ElementNode("style", {"type": "text/plain"}))

    def test_flag_equals_empty_value(self) -> None:
        assert ElementNode("script", {"async": None}).is_equal_node(ElementNode("script", {"async": ""}))


class TestTreeEditing:
    def test_append_moves_node(self) -> None:
        first, second = ElementNode("div"), ElementNode("div")
        child = ElementNode("span")
        first.append_child(child)
        second.append_child(child)
        assert first.children == []
        assert child.parent is second

    def test_insert_before(self) -> None:
        parent = ElementNode("head")
        a, b, c = ElementNode("a"), ElementNode("b"), ElementNode("c")
        parent.append_child(a)
        parent.append_child(c)
        parent.insert_before(b, c)
        assert [child.name for child in parent.children] == ["a", "b", "c"]
        with pytest.raises(ValueError, match="Reference node"):
            parent.insert_before(ElementNode("d"), ElementNode("x"))

    def test_iter_elements_in_document_order(self) -> None:
        document = Document.create()
        head = document.ensure_head()
        for name in ("meta", "link", "meta"):
            head.append_child(ElementNode(name))
        assert [element.name for element in head.iter_elements()] == ["meta", "link", "meta"]
        assert len(document.get_elements_by_tag_name("meta")) == 2
        assert document.find("body") is not None
