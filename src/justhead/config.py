"""Process-wide settings.

``settings.can_use_dom`` decides whether live-document mutation is attempted
at all. It starts from the ``JUSTHEAD_CAN_USE_DOM`` environment variable and
defaults to on.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in _FALSE_VALUES


class Settings:
    __slots__ = ("can_use_dom",)

    can_use_dom: bool

    def __init__(self, can_use_dom: bool = True) -> None:
        self.can_use_dom = can_use_dom

    def __repr__(self) -> str:
        return f"Settings(can_use_dom={self.can_use_dom!r})"


settings = Settings(can_use_dom=_env_flag("JUSTHEAD_CAN_USE_DOM", True))


@contextmanager
def use_dom(enabled: bool) -> Iterator[Settings]:
    """Temporarily switch live-document mutation on or off."""
    previous = settings.can_use_dom
    settings.can_use_dom = enabled
    try:
        yield settings
    finally:
        settings.can_use_dom = previous
