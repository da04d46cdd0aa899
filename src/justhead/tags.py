from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .constants import BODY_KEYS, LIST_CATEGORIES

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    ChangeCallback = Callable[["HeadState", dict[str, list[Any]], dict[str, list[Any]]], Any]


class HeadTag:
    """One head element: a name, ordered attributes and an optional inline body.

    Attribute values of ``None`` are flags (valueless attributes such as
    ``async``). ``content`` is the inline body of script, noscript and style
    tags.
    """

    __slots__ = ("attrs", "content", "name")

    name: str
    attrs: dict[str, str | None]
    content: str | None

    def __init__(
        self,
        name: str,
        attrs: Mapping[str, str | None] | None = None,
        content: str | None = None,
    ) -> None:
        self.name = name
        self.attrs = dict(attrs) if attrs is not None else {}
        self.content = content

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeadTag):
            return NotImplemented
        return self.name == other.name and self.attrs == other.attrs and self.content == other.content

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self.attrs.items()), self.content))

    def __repr__(self) -> str:
        if self.content is None:
            return f"HeadTag({self.name!r}, {self.attrs!r})"
        return f"HeadTag({self.name!r}, {self.attrs!r}, content={self.content!r})"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.attrs)
        if self.content is not None:
            data[BODY_KEYS.get(self.name, "content")] = self.content
        return data


class Instance:
    """Validated contribution of one declaration point.

    Every field is ``None`` when the declaration point does not define it.
    List categories hold tuples of :class:`HeadTag`; filtering by identity
    happens later, in the merge.
    """

    __slots__ = (
        "base",
        "default_title",
        "defer",
        "depth",
        "encode_special_characters",
        "html_attributes",
        "link",
        "meta",
        "noscript",
        "on_change_client_state",
        "script",
        "style",
        "title",
        "title_attributes",
        "title_template",
    )

    depth: int
    title: str | None
    default_title: str | None
    title_template: str | None
    title_attributes: dict[str, str | None] | None
    html_attributes: dict[str, str | None] | None
    base: HeadTag | None
    meta: tuple[HeadTag, ...] | None
    link: tuple[HeadTag, ...] | None
    script: tuple[HeadTag, ...] | None
    noscript: tuple[HeadTag, ...] | None
    style: tuple[HeadTag, ...] | None
    on_change_client_state: ChangeCallback | None
    defer: bool | None
    encode_special_characters: bool | None

    def __init__(self, depth: int = 0, **fields: Any) -> None:
        self.depth = depth
        for name in self.__slots__:
            if name != "depth":
                setattr(self, name, fields.pop(name, None))
        if fields:
            raise TypeError(f"Unknown instance fields: {', '.join(sorted(fields))}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instance):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        defined = ", ".join(
            f"{name}={getattr(self, name)!r}"
            for name in self.__slots__
            if name != "depth" and getattr(self, name) is not None
        )
        return f"Instance(depth={self.depth}{', ' if defined else ''}{defined})"

    def tags(self, category: str) -> tuple[HeadTag, ...]:
        value = getattr(self, category)
        if value is None:
            return ()
        return tuple(value)


class HeadState:
    """Canonical snapshot of everything destined for the document head.

    Built fresh by :func:`justhead.merge.merge_instances` on every flush and
    never modified afterwards.
    """

    __slots__ = (
        "base",
        "default_title",
        "defer",
        "encode_special_characters",
        "html_attributes",
        "link",
        "meta",
        "noscript",
        "on_change_client_state",
        "script",
        "style",
        "title",
        "title_attributes",
        "title_template",
    )

    title: str
    default_title: str | None
    title_template: str | None
    defer: bool
    encode_special_characters: bool
    on_change_client_state: ChangeCallback | None
    title_attributes: dict[str, str]
    html_attributes: dict[str, str]
    base: HeadTag | None
    meta: tuple[HeadTag, ...]
    link: tuple[HeadTag, ...]
    script: tuple[HeadTag, ...]
    noscript: tuple[HeadTag, ...]
    style: tuple[HeadTag, ...]

    def __init__(
        self,
        title: str = "",
        *,
        default_title: str | None = None,
        title_template: str | None = None,
        defer: bool = True,
        encode_special_characters: bool = True,
        on_change_client_state: ChangeCallback | None = None,
        title_attributes: Mapping[str, str] | None = None,
        html_attributes: Mapping[str, str] | None = None,
        base: HeadTag | None = None,
        meta: tuple[HeadTag, ...] = (),
        link: tuple[HeadTag, ...] = (),
        script: tuple[HeadTag, ...] = (),
        noscript: tuple[HeadTag, ...] = (),
        style: tuple[HeadTag, ...] = (),
    ) -> None:
        self.title = title
        self.default_title = default_title
        self.title_template = title_template
        self.defer = defer
        self.encode_special_characters = encode_special_characters
        self.on_change_client_state = on_change_client_state
        self.title_attributes = dict(title_attributes or {})
        self.html_attributes = dict(html_attributes or {})
        self.base = base
        self.meta = tuple(meta)
        self.link = tuple(link)
        self.script = tuple(script)
        self.noscript = tuple(noscript)
        self.style = tuple(style)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeadState):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"HeadState(title={self.title!r})"

    def tags(self, category: str) -> tuple[HeadTag, ...]:
        """Return the target tag list for ``category``; ``base`` is a one-tag list."""
        if category == "base":
            return (self.base,) if self.base is not None else ()
        return getattr(self, category)  # type: ignore[no-any-return]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "title": self.title,
            "default_title": self.default_title,
            "title_template": self.title_template,
            "defer": self.defer,
            "encode_special_characters": self.encode_special_characters,
            "title_attributes": dict(self.title_attributes),
            "html_attributes": dict(self.html_attributes),
            "base": self.base.to_dict() if self.base is not None else None,
        }
        for category in LIST_CATEGORIES:
            data[category] = [tag.to_dict() for tag in getattr(self, category)]
        return data
