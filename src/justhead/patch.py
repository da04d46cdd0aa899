"""Apply a HeadState to a live document with as few mutations as possible.

The patcher only ever touches what it owns. Owned elements carry the marker
attribute with the value ``"true"``; owned attributes on the title and root
elements are listed, comma-separated, in those elements' marker attribute.
Ownership is tracked in an :class:`AppliedRecord` rather than re-read from
the document on every flush.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .constants import MARKER_ATTRIBUTE, TAG_CATEGORIES
from .node import ElementNode, TextNode

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .node import Document
    from .tags import HeadState, HeadTag

logger = logging.getLogger(__name__)

TagChanges = dict[str, list[ElementNode]]

TITLE: str = "title"
ROOT: str = "html"


class AppliedRecord:
    """What the patcher created and owns in one document."""

    __slots__ = ("adopted", "attributes", "elements", "pending_added")

    adopted: bool
    attributes: dict[str, list[str]]
    elements: dict[str, list[ElementNode]]
    pending_added: dict[str, list[ElementNode]]

    def __init__(self) -> None:
        self.adopted = False
        self.attributes = {TITLE: [], ROOT: []}
        self.elements = {category: [] for category in TAG_CATEGORIES}
        # Elements created eagerly, reported by the next flush.
        self.pending_added = {}

    def managed_elements(self, category: str) -> list[ElementNode]:
        return list(self.elements[category])


def build_element(tag: HeadTag) -> ElementNode:
    """Create the marked DOM element for ``tag``; it is not inserted anywhere."""
    element = ElementNode(tag.name)
    for key, value in tag.attrs.items():
        element.set_attribute(key, value)
    if tag.content is not None:
        element.append_child(TextNode(tag.content))
    element.set_attribute(MARKER_ATTRIBUTE, "true")
    return element


def _take_match(candidates: list[ElementNode], element: ElementNode) -> ElementNode | None:
    for index, existing in enumerate(candidates):
        if existing.is_equal_node(element):
            return candidates.pop(index)
    return None


class Patcher:
    __slots__ = ("document", "record")

    document: Document
    record: AppliedRecord

    def __init__(self, document: Document, record: AppliedRecord | None = None) -> None:
        self.document = document
        self.record = record if record is not None else AppliedRecord()

    def adopt(self) -> None:
        """Take ownership of marked head elements already in the document.

        Runs once, before the first flush. Title attributes named in the title
        element's marker are adopted too. Root element attributes present at
        this point stay out-of-band whatever their marker says.
        """
        record = self.record
        if record.adopted:
            return
        record.adopted = True
        title = self.document.title_element
        if title is not None:
            marker = title.get_attribute(MARKER_ATTRIBUTE)
            if marker and marker != "true":
                record.attributes[TITLE] = [key for key in marker.split(",") if title.has_attribute(key)]
        head = self.document.head
        if head is None:
            return
        adopted = 0
        for category in TAG_CATEGORIES:
            for element in head.iter_elements(category):
                if element.get_attribute(MARKER_ATTRIBUTE) == "true" and element not in record.elements[category]:
                    record.elements[category].append(element)
                    adopted += 1
        if adopted:
            logger.debug("Adopted %d pre-rendered head elements", adopted)

    def apply(self, state: HeadState) -> tuple[TagChanges, TagChanges]:
        """Bring the document in line with ``state``.

        Returns ``(added, removed)``: newly created and detached elements per
        category, listing only categories that changed.
        """
        self.adopt()
        self._apply_title(state.title, state.title_attributes)
        root = self.document.document_element
        if root is not None:
            self._apply_attributes(ROOT, root, state.html_attributes)

        added: TagChanges = {}
        removed: TagChanges = {}
        pending = self.record.pending_added
        self.record.pending_added = {}

        for category in TAG_CATEGORIES:
            created, detached = self._apply_tags(category, state.tags(category))
            # Eager elements this flush detached again are only reported as removed.
            still_present = [element for element in pending.get(category, ()) if element not in detached]
            if still_present or created:
                added[category] = still_present + created
            if detached:
                removed[category] = detached
        return added, removed

    def apply_eagerly(self, category: str, tags: Iterable[HeadTag]) -> list[ElementNode]:
        """Insert any of ``tags`` not already present; never removes anything."""
        self.adopt()
        available = self.record.managed_elements(category)
        created: list[ElementNode] = []
        for tag in tags:
            element = build_element(tag)
            if _take_match(available, element) is not None:
                continue
            self.document.ensure_head().append_child(element)
            self.record.elements[category].append(element)
            created.append(element)
        if created:
            self.record.pending_added.setdefault(category, []).extend(created)
        return created

    def _apply_title(self, title: str, attributes: Mapping[str, str]) -> None:
        element = self.document.title_element
        if element is None:
            if not title and not attributes and not self.record.attributes[TITLE]:
                return
            element = self.document.ensure_title_element()
        # An unresolved title leaves whatever text the page already has.
        if title and element.text_content != title:
            element.text_content = title
        self._apply_attributes(TITLE, element, attributes)

    def _apply_attributes(self, target: str, element: ElementNode, attributes: Mapping[str, str]) -> None:
        managed = self.record.attributes[target]
        for key, value in attributes.items():
            if element.get_attribute(key) != value:
                element.set_attribute(key, value)
        for key in managed:
            if key not in attributes:
                element.remove_attribute(key)

        managed_now = list(attributes)
        self.record.attributes[target] = managed_now
        marker = ",".join(managed_now)
        if not managed_now:
            element.remove_attribute(MARKER_ATTRIBUTE)
        elif element.get_attribute(MARKER_ATTRIBUTE) != marker:
            element.set_attribute(MARKER_ATTRIBUTE, marker)

    def _apply_tags(self, category: str, tags: Iterable[HeadTag]) -> tuple[list[ElementNode], list[ElementNode]]:
        leftover = self.record.managed_elements(category)
        kept: list[ElementNode] = []
        created: list[ElementNode] = []
        for tag in tags:
            element = build_element(tag)
            existing = _take_match(leftover, element)
            if existing is not None:
                kept.append(existing)
            else:
                created.append(element)

        for element in leftover:
            if element.parent is not None:
                element.parent.remove_child(element)

        if created:
            head = self.document.ensure_head()
            for element in created:
                head.append_child(element)

        self.record.elements[category] = kept + created
        return created, leftover
