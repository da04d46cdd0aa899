from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .constants import ATTRIBUTE_FIELDS, BASE, BODY_KEYS, LIST_CATEGORIES
from .errors import report
from .tags import HeadTag, Instance

logger = logging.getLogger(__name__)

_STRING_FIELDS: tuple[str, ...] = ("title", "default_title", "title_template")
_BOOL_FIELDS: tuple[str, ...] = ("defer", "encode_special_characters")

# Points warnings at the caller of HeadContext.mount.
_STACKLEVEL = 4


def _type_name(value: Any) -> str:
    return type(value).__name__


def _invalid_field(name: str, expected: str, value: Any) -> None:
    report("invalid-field-type", field=name, expected=expected, actual=_type_name(value), stacklevel=_STACKLEVEL + 1)


def _normalize_attributes(field: str, attrs: Mapping[Any, Any]) -> dict[str, str | None]:
    result: dict[str, str | None] = {}
    for key, value in attrs.items():
        if value is None or value is True:
            result[str(key)] = None
        elif value is False:
            continue
        elif isinstance(value, str):
            result[str(key)] = value
        elif isinstance(value, (int, float)):
            result[str(key)] = str(value)
        else:
            report(
                "invalid-attribute-value",
                field=field,
                expected="str",
                actual=_type_name(value),
                stacklevel=_STACKLEVEL + 1,
            )
    return result


def _normalize_tag(category: str, field: str, value: Any) -> HeadTag | None:
    if not isinstance(value, Mapping):
        report(
            "invalid-tag-type",
            field=field,
            expected="dict",
            actual=_type_name(value),
            stacklevel=_STACKLEVEL + 1,
        )
        return None
    attrs = dict(value)
    content: str | None = None
    body_key = BODY_KEYS.get(category)
    if body_key is not None and body_key in attrs:
        body = attrs.pop(body_key)
        if body is not None:
            content = str(body)
    return HeadTag(category, _normalize_attributes(field, attrs), content)


def normalize_props(props: Mapping[str, Any], depth: int = 0) -> Instance:
    """Validate a raw declaration and turn it into an :class:`Instance`.

    Fields of the wrong shape are reported and dropped; everything else in the
    declaration is kept.
    """
    fields: dict[str, Any] = {}

    for name, value in props.items():
        if value is None:
            continue

        if name in _STRING_FIELDS:
            if isinstance(value, str):
                fields[name] = value
            else:
                _invalid_field(name, "str", value)

        elif name in _BOOL_FIELDS:
            if isinstance(value, bool):
                fields[name] = value
            else:
                _invalid_field(name, "bool", value)

        elif name == "on_change_client_state":
            if callable(value):
                fields[name] = value
            else:
                _invalid_field(name, "callable", value)

        elif name in ATTRIBUTE_FIELDS:
            if isinstance(value, Mapping):
                fields[name] = _normalize_attributes(name, value)
            else:
                _invalid_field(name, "dict", value)

        elif name == BASE:
            if isinstance(value, Mapping):
                fields[name] = _normalize_tag(BASE, name, value)
            else:
                _invalid_field(name, "dict", value)

        elif name in LIST_CATEGORIES:
            if isinstance(value, (list, tuple)):
                tags = (_normalize_tag(name, name, item) for item in value)
                fields[name] = tuple(tag for tag in tags if tag is not None)
            else:
                _invalid_field(name, "list", value)

        else:
            report("unknown-field", field=name, level=logging.WARNING, stacklevel=_STACKLEVEL)

    return Instance(depth, **fields)


class _Entry:
    __slots__ = ("instance", "nested", "seq")

    instance: Instance
    nested: bool
    seq: int

    def __init__(self, instance: Instance, nested: bool, seq: int) -> None:
        self.instance = instance
        self.nested = nested
        self.seq = seq


class InstanceRegistry:
    """The active instances of one context, kept in nesting order.

    Instances sort by depth, shallow first; instances at the same depth keep
    the order in which they were added. Nested instances are tracked but
    never returned by :meth:`instances`.
    """

    __slots__ = ("_entries", "_next_seq")

    _entries: dict[int, _Entry]
    _next_seq: int

    def __init__(self) -> None:
        self._entries = {}
        self._next_seq = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def add(self, instance: Instance, *, nested: bool = False) -> int:
        key = self._next_seq
        self._next_seq += 1
        self._entries[key] = _Entry(instance, nested, key)
        logger.debug("Registered instance %d at depth %d%s", key, instance.depth, " (nested)" if nested else "")
        return key

    def get(self, key: int) -> Instance | None:
        entry = self._entries.get(key)
        return entry.instance if entry is not None else None

    def is_nested(self, key: int) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.nested

    def replace(self, key: int, instance: Instance) -> bool:
        """Swap in ``instance`` for ``key``; return False if nothing changed."""
        entry = self._entries.get(key)
        if entry is None:
            raise KeyError(key)
        if entry.instance == instance:
            return False
        entry.instance = instance
        return True

    def remove(self, key: int) -> bool:
        return self._entries.pop(key, None) is not None

    def instances(self) -> list[Instance]:
        entries = sorted(self._entries.values(), key=lambda entry: (entry.instance.depth, entry.seq))
        return [entry.instance for entry in entries if not entry.nested]
