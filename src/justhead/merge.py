"""Fold an ordered stack of instances into one HeadState.

Instances are ordered shallow to deep. Scalars use last-defined-wins,
attribute maps fold key by key, ``base`` is a whole-object singleton and
the list categories use identity-based eviction (see :mod:`justhead.identity`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .constants import ATTRIBUTE_FIELDS, BASE, LIST_CATEGORIES, SCALAR_FIELDS
from .identity import IdentityKey, accepted_tags, is_accepted
from .tags import HeadState, HeadTag

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .tags import Instance


def format_title(title: str, template: str | None) -> str:
    """Substitute ``title`` for every literal ``%s`` in ``template``.

    The title is inserted verbatim; nothing in it is treated as
    substitution syntax.
    """
    if not template:
        return title
    return template.replace("%s", title)


def _fold_attributes(target: dict[str, str], incoming: Mapping[str, str | None]) -> None:
    for key, value in incoming.items():
        # Flag attributes are recorded with an empty value.
        target[key] = "" if value is None else value


def _fold_tags(
    accumulated: list[tuple[IdentityKey, HeadTag]],
    category: str,
    tags: tuple[HeadTag, ...],
) -> list[tuple[IdentityKey, HeadTag]]:
    incoming = accepted_tags(category, tags)
    if not incoming:
        return accumulated
    claimed = {key for key, _tag in incoming}
    kept = [entry for entry in accumulated if entry[0] not in claimed]
    kept.extend(incoming)
    return kept


def merge_instances(instances: Iterable[Instance]) -> HeadState:
    """Reduce ``instances`` (shallow to deep) into the canonical HeadState.

    This is a pure function of the ordered input: the same instances in the
    same order always produce an equal state.
    """
    scalars: dict[str, Any] = {}
    attributes: dict[str, dict[str, str]] = {name: {} for name in ATTRIBUTE_FIELDS}
    base: HeadTag | None = None
    lists: dict[str, list[tuple[IdentityKey, HeadTag]]] = {category: [] for category in LIST_CATEGORIES}

    for instance in instances:
        for name in SCALAR_FIELDS:
            value = getattr(instance, name)
            if value is not None:
                scalars[name] = value

        for name in ATTRIBUTE_FIELDS:
            incoming = getattr(instance, name)
            if incoming:
                _fold_attributes(attributes[name], incoming)

        if instance.base is not None and is_accepted(BASE, instance.base):
            base = instance.base

        for category in LIST_CATEGORIES:
            tags = instance.tags(category)
            if tags:
                lists[category] = _fold_tags(lists[category], category, tags)

    title: str = scalars.get("title") or ""
    default_title: str | None = scalars.get("default_title")
    title_template: str | None = scalars.get("title_template")
    if not title and default_title:
        # The default title is used as-is, never run through the template.
        title = default_title
    elif title:
        title = format_title(title, title_template)

    return HeadState(
        title,
        default_title=default_title,
        title_template=title_template,
        defer=scalars.get("defer", True),
        encode_special_characters=scalars.get("encode_special_characters", True),
        on_change_client_state=scalars.get("on_change_client_state"),
        title_attributes=attributes["title_attributes"],
        html_attributes=attributes["html_attributes"],
        base=base,
        **{category: tuple(tag for _key, tag in lists[category]) for category in LIST_CATEGORIES},
    )
