from __future__ import annotations

import pytest

from justhead.identity import accepted_tags, identity_key, is_accepted
from justhead.tags import HeadTag


def meta(**attrs: str | None) -> HeadTag:
    return HeadTag("meta", {key.replace("_", "-"): value for key, value in attrs.items()})


class TestMeta:
    @pytest.mark.parametrize(
        ("attrs", "expected"),
        [
            ({"charset": "utf-8"}, ("charset", "utf-8")),
            ({"name": "description", "content": "x"}, ("name", "description")),
            ({"property": "og:type", "content": "article"}, ("property", "og:type")),
            ({"http_equiv": "content-type", "content": "text/html"}, ("http-equiv", "content-type")),
            ({"itemprop": "name", "content": "x"}, ("itemprop", "name")),
        ],
    )
    def test_identity_attributes(self, attrs: dict[str, str], expected: tuple[str, str]) -> None:
        assert identity_key("meta", meta(**attrs)) == expected

    def test_fixed_priority_when_several_are_present(self) -> None:
        tag = HeadTag("meta", {"itemprop": "x", "property": "og:title", "name": "title"})
        assert identity_key("meta", tag) == ("name", "title")
        tag = HeadTag("meta", {"name": "title", "charset": "utf-8"})
        assert identity_key("meta", tag) == ("charset", "utf-8")

    def test_rejects_tags_without_identity(self) -> None:
        assert not is_accepted("meta", HeadTag("meta", {"content": "orphan"}))
        assert not is_accepted("meta", HeadTag("meta", {"name": None, "content": "flagged name"}))

    def test_values_compare_case_insensitively(self) -> None:
        assert identity_key("meta", meta(name="Description")) == identity_key("meta", meta(name="description"))


class TestLink:
    def test_rel_is_the_identity(self) -> None:
        tag = HeadTag("link", {"href": "http://localhost/helmet", "rel": "canonical"})
        assert identity_key("link", tag) == ("rel", "canonical")

    def test_stylesheets_are_identified_by_href(self) -> None:
        tag = HeadTag("link", {"rel": "StyleSheet", "href": "http://localhost/style.css"})
        assert identity_key("link", tag) == ("href", "http://localhost/style.css")

    def test_rejected_without_rel(self) -> None:
        assert not is_accepted("link", HeadTag("link", {"href": "http://localhost/only-href"}))
        assert not is_accepted("link", HeadTag("link", {"name": "foo"}))

    def test_stylesheet_without_href_is_rejected(self) -> None:
        assert not is_accepted("link", HeadTag("link", {"rel": "stylesheet"}))


class TestBodies:
    def test_script_prefers_src(self) -> None:
        tag = HeadTag("script", {"src": "foo.js"}, "console.log(1)")
        assert identity_key("script", tag) == ("src", "foo.js")

    def test_inline_script(self) -> None:
        tag = HeadTag("script", {"type": "text/javascript"}, "console.log(1)")
        assert identity_key("script", tag) == ("innerHTML", "console.log(1)")

    def test_script_without_src_or_body_is_rejected(self) -> None:
        assert not is_accepted("script", HeadTag("script", {"type": "text/javascript"}))

    def test_noscript_and_style(self) -> None:
        assert identity_key("noscript", HeadTag("noscript", {"id": "bar"}, "<p>hi</p>")) == ("innerHTML", "<p>hi</p>")
        assert identity_key("style", HeadTag("style", {}, "p {}")) == ("cssText", "p {}")
        assert not is_accepted("noscript", HeadTag("noscript", {"id": "bar"}))
        assert not is_accepted("style", HeadTag("style", {"type": "text/css"}))


def test_base_requires_href() -> None:
    assert is_accepted("base", HeadTag("base", {"href": "http://mysite.com/"}))
    assert not is_accepted("base", HeadTag("base", {"property": "x"}))


def test_accepted_tags_keeps_order_and_duplicates() -> None:
    first = meta(name="d", content="1")
    dropped = meta(content="no identity")
    second = meta(name="d", content="2")
    result = accepted_tags("meta", (first, dropped, second))
    assert [tag for _key, tag in result] == [first, second]
    assert [key for key, _tag in result] == [("name", "d"), ("name", "d")]


def test_unknown_category() -> None:
    with pytest.raises(ValueError, match="Unknown tag category"):
        identity_key("body", HeadTag("body"))
