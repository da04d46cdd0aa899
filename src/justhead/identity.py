"""Per-category tag acceptance and identity keys.

Two tags with the same identity key occupy the same slot: a deeper
declaration claiming a key evicts every shallower tag holding it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import BASE, CSS_TEXT, INNER_HTML, LINK, META, META_IDENTITY_ATTRIBUTES, NOSCRIPT, SCRIPT, STYLE

if TYPE_CHECKING:
    from .tags import HeadTag

IdentityKey = tuple[str, str]


def _meta_key(tag: HeadTag) -> IdentityKey | None:
    for attr in META_IDENTITY_ATTRIBUTES:
        value = tag.attrs.get(attr)
        if value is not None:
            return (attr, value.lower())
    return None


def _link_key(tag: HeadTag) -> IdentityKey | None:
    rel = tag.attrs.get("rel")
    if rel is None:
        return None
    if rel.lower() == "stylesheet":
        href = tag.attrs.get("href")
        if href is None:
            return None
        return ("href", href.lower())
    return ("rel", rel.lower())


def _script_key(tag: HeadTag) -> IdentityKey | None:
    src = tag.attrs.get("src")
    if src is not None:
        return ("src", src.lower())
    if tag.content is not None:
        return (INNER_HTML, tag.content.lower())
    return None


def _noscript_key(tag: HeadTag) -> IdentityKey | None:
    if tag.content is None:
        return None
    return (INNER_HTML, tag.content.lower())


def _style_key(tag: HeadTag) -> IdentityKey | None:
    if tag.content is None:
        return None
    return (CSS_TEXT, tag.content.lower())


def _base_key(tag: HeadTag) -> IdentityKey | None:
    href = tag.attrs.get("href")
    if href is None:
        return None
    return ("href", href.lower())


_KEY_FUNCTIONS = {
    BASE: _base_key,
    META: _meta_key,
    LINK: _link_key,
    SCRIPT: _script_key,
    NOSCRIPT: _noscript_key,
    STYLE: _style_key,
}


def identity_key(category: str, tag: HeadTag) -> IdentityKey | None:
    """Return the ``(attribute, value)`` slot ``tag`` claims, or None if rejected.

    Values are lowercased so slots compare case-insensitively. When a tag
    carries several identity attributes, the first in the category's fixed
    priority order wins (for meta: charset, name, property, http-equiv,
    itemprop).
    """
    try:
        key_function = _KEY_FUNCTIONS[category]
    except KeyError:
        raise ValueError(f"Unknown tag category: {category}") from None
    return key_function(tag)


def is_accepted(category: str, tag: HeadTag) -> bool:
    return identity_key(category, tag) is not None


def accepted_tags(category: str, tags: tuple[HeadTag, ...]) -> list[tuple[IdentityKey, HeadTag]]:
    """Filter ``tags`` down to the acceptable ones, paired with their keys, in order."""
    result: list[tuple[IdentityKey, HeadTag]] = []
    for tag in tags:
        key = identity_key(category, tag)
        if key is not None:
            result.append((key, tag))
    return result
