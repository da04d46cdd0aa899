"""HTML serialization for justhead.

Two renderers live here. ``to_html`` serializes live DOM nodes the way a
browser's ``outerHTML`` does. ``render_static`` turns a HeadState snapshot
into strings and component descriptors for server-side rendering, without
touching any document.
"""

from __future__ import annotations

# ruff: noqa: PERF401

from typing import TYPE_CHECKING, Any

from justhead.constants import BASE, LIST_CATEGORIES, MARKER_ATTRIBUTE, RAW_TEXT_ELEMENTS, VOID_ELEMENTS

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .tags import HeadState, HeadTag


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("\xa0", "&nbsp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str | None) -> str:
    if value is None:
        return ""
    return str(value).replace("&", "&amp;").replace("\xa0", "&nbsp;").replace('"', "&quot;")


def encode_special_characters(value: str | None) -> str:
    """Entity-escape the characters that can break out of text or a quoted attribute."""
    if not value:
        return ""
    return (
        str(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
    )


def serialize_start_tag(name: str, attrs: Mapping[str, str | None] | None) -> str:
    attrs = attrs or {}
    parts: list[str] = ["<", name]
    for key, value in attrs.items():
        parts.extend([" ", key, '="', _escape_attr_value(value), '"'])
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def to_html(node: Any) -> str:
    """Serialize ``node`` the way a browser's ``outerHTML`` does (``innerHTML`` for the document)."""
    if node.name == "#document":
        # Document root - just render children
        return "".join(_node_to_html(child) for child in node.children or [])
    return _node_to_html(node)


def _node_to_html(node: Any, raw_text: bool = False) -> str:
    name: str = node.name

    # Text node
    if name == "#text":
        text: str | None = node.data
        if not text:
            return ""
        return text if raw_text else _escape_text(text)

    # Element node
    open_tag = serialize_start_tag(name, node.attrs)

    # Void elements
    if name in VOID_ELEMENTS:
        return open_tag

    # Script, style and noscript bodies are emitted verbatim.
    raw = name in RAW_TEXT_ELEMENTS
    body = "".join(_node_to_html(child, raw_text=raw) for child in node.children or [])
    return f"{open_tag}{body}{serialize_end_tag(name)}"


# ---------------------------------------------------------------------------
# Static rendering of a HeadState
# ---------------------------------------------------------------------------


def _attributes_to_string(attrs: Mapping[str, str | None], encode: bool) -> str:
    parts: list[str] = []
    for key, value in attrs.items():
        if value is None:
            parts.append(key)
        else:
            parts.append(f'{key}="{encode_special_characters(value) if encode else value}"')
    return " ".join(parts)


def _marked(attrs: Mapping[str, str | None]) -> dict[str, str | None]:
    marked: dict[str, str | None] = {MARKER_ATTRIBUTE: "true"}
    marked.update(attrs)
    return marked


def tag_to_string(tag: HeadTag, encode: bool = True) -> str:
    """Render one managed tag for server output: marker first, void tags self-closed."""
    attributes = _attributes_to_string(_marked(tag.attrs), encode)
    if tag.name in VOID_ELEMENTS:
        return f"<{tag.name} {attributes}/>"
    return f"<{tag.name} {attributes}>{tag.content or ''}</{tag.name}>"


def tag_to_component(tag: HeadTag) -> dict[str, Any]:
    attributes = {key: "" if value is None else value for key, value in _marked(tag.attrs).items()}
    component: dict[str, Any] = {"tag_name": tag.name, "attributes": attributes}
    if tag.content is not None:
        component["content"] = tag.content
    return component


class TitleView:
    __slots__ = ("_state",)

    def __init__(self, state: HeadState) -> None:
        self._state = state

    def to_string(self) -> str:
        state = self._state
        encode = state.encode_special_characters
        attributes = _attributes_to_string(_marked(state.title_attributes), encode)
        title = encode_special_characters(state.title) if encode else state.title
        return f"<title {attributes}>{title}</title>"

    def to_component(self) -> dict[str, Any]:
        return {
            "tag_name": "title",
            "attributes": dict(_marked(self._state.title_attributes)),
            "content": self._state.title,
        }

    def __str__(self) -> str:
        return self.to_string()


class AttributesView:
    """Root element attributes; rendered bare, without the marker."""

    __slots__ = ("_state",)

    def __init__(self, state: HeadState) -> None:
        self._state = state

    def to_string(self) -> str:
        return _attributes_to_string(self._state.html_attributes, self._state.encode_special_characters)

    def to_component(self) -> dict[str, str]:
        return dict(self._state.html_attributes)

    def __str__(self) -> str:
        return self.to_string()


class BaseView:
    __slots__ = ("_state",)

    def __init__(self, state: HeadState) -> None:
        self._state = state

    def to_string(self) -> str:
        base = self._state.base
        if base is None:
            return ""
        return tag_to_string(base, self._state.encode_special_characters)

    def to_component(self) -> dict[str, Any]:
        base = self._state.base
        if base is None:
            return {}
        return tag_to_component(base)

    def __str__(self) -> str:
        return self.to_string()


class TagsView:
    __slots__ = ("_category", "_state")

    def __init__(self, state: HeadState, category: str) -> None:
        self._state = state
        self._category = category

    def to_string(self) -> str:
        encode = self._state.encode_special_characters
        return "".join(tag_to_string(tag, encode) for tag in self._state.tags(self._category))

    def to_component(self) -> list[dict[str, Any]]:
        return [tag_to_component(tag) for tag in self._state.tags(self._category)]

    def __str__(self) -> str:
        return self.to_string()


class StaticHead:
    """Per-category string and component accessors over one HeadState."""

    __slots__ = ("base", "html_attributes", "link", "meta", "noscript", "script", "state", "style", "title")

    state: HeadState
    title: TitleView
    html_attributes: AttributesView
    base: BaseView
    meta: TagsView
    link: TagsView
    script: TagsView
    noscript: TagsView
    style: TagsView

    def __init__(self, state: HeadState) -> None:
        self.state = state
        self.title = TitleView(state)
        self.html_attributes = AttributesView(state)
        self.base = BaseView(state)
        for category in LIST_CATEGORIES:
            setattr(self, category, TagsView(state, category))

    def to_string(self) -> str:
        """Concatenate every head category, in patch order, for direct embedding."""
        parts = [self.title.to_string()]
        for category in (BASE, *LIST_CATEGORIES):
            parts.append(getattr(self, category).to_string())
        return "".join(parts)


def render_static(state: HeadState) -> StaticHead:
    return StaticHead(state)
