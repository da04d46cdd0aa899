from __future__ import annotations

# Reserved attribute stamped on everything the engine owns.
MARKER_ATTRIBUTE: str = "data-justhead"

BASE: str = "base"
META: str = "meta"
LINK: str = "link"
SCRIPT: str = "script"
NOSCRIPT: str = "noscript"
STYLE: str = "style"

LIST_CATEGORIES: tuple[str, ...] = (META, LINK, SCRIPT, NOSCRIPT, STYLE)

# Patch order: base first so relative URLs in later tags resolve against it.
TAG_CATEGORIES: tuple[str, ...] = (BASE, *LIST_CATEGORIES)

# Categories applied eagerly for instances that opt out of batching.
EAGER_CATEGORIES: tuple[str, ...] = (SCRIPT, NOSCRIPT)

# Descriptor keys holding an element's inline body rather than an attribute.
INNER_HTML: str = "innerHTML"
CSS_TEXT: str = "cssText"

BODY_KEYS: dict[str, str] = {
    SCRIPT: INNER_HTML,
    NOSCRIPT: INNER_HTML,
    STYLE: CSS_TEXT,
}

META_IDENTITY_ATTRIBUTES: tuple[str, ...] = ("charset", "name", "property", "http-equiv", "itemprop")

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose children browsers serialize without escaping.
RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style", "noscript"})

SCALAR_FIELDS: tuple[str, ...] = (
    "title",
    "default_title",
    "title_template",
    "defer",
    "encode_special_characters",
    "on_change_client_state",
)

ATTRIBUTE_FIELDS: tuple[str, ...] = ("title_attributes", "html_attributes")
