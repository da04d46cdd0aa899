from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .serialize import to_html

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


class SimpleDomNode:
    __slots__ = ("attrs", "children", "data", "name", "parent")

    name: str
    parent: SimpleDomNode | None
    attrs: dict[str, str | None] | None
    children: list[Any] | None
    data: str | None

    def __init__(
        self,
        name: str,
        attrs: dict[str, str | None] | None = None,
        data: str | None = None,
    ) -> None:
        self.name = name
        self.parent = None
        self.data = data
        self.children = []
        self.attrs = attrs if attrs is not None else {}

    def append_child(self, node: Any) -> None:
        if self.children is not None:
            if node.parent is not None:
                node.parent.remove_child(node)
            self.children.append(node)
            node.parent = self

    def remove_child(self, node: Any) -> None:
        if self.children is not None:
            self.children.remove(node)
            node.parent = None

    def to_html(self) -> str:
        """Convert node to HTML string."""
        return to_html(self)

    def to_text(self) -> str:
        """Return the concatenated text of this node's descendants (DOM ``textContent``)."""
        parts: list[str] = []
        _to_text_collect(self, parts)
        return "".join(parts)

    def insert_before(self, node: Any, reference_node: Any | None) -> None:
        """
        Insert a node before a reference node.

        Args:
            node: The node to insert
            reference_node: The node to insert before. If None, append to end.

        Raises:
            ValueError: If reference_node is not a child of this node
        """
        if self.children is None:
            raise ValueError(f"Node {self.name} cannot have children")

        if reference_node is None:
            self.append_child(node)
            return

        try:
            index = self.children.index(reference_node)
        except ValueError:
            raise ValueError("Reference node is not a child of this node") from None
        if node.parent is not None:
            node.parent.remove_child(node)
            index = self.children.index(reference_node)
        self.children.insert(index, node)
        node.parent = self

    def iter_elements(self, name: str | None = None) -> Iterator[ElementNode]:
        """Yield descendant elements in document order, optionally only those called ``name``."""
        for child in self.children or []:
            if isinstance(child, ElementNode):
                if name is None or child.name == name:
                    yield child
                yield from child.iter_elements(name)

    def get_elements_by_tag_name(self, name: str) -> list[ElementNode]:
        return list(self.iter_elements(name))

    def find(self, name: str) -> ElementNode | None:
        """Return the first descendant element called ``name``."""
        return next(self.iter_elements(name), None)


class ElementNode(SimpleDomNode):
    __slots__ = ()

    children: list[Any]
    attrs: dict[str, str | None]

    def __init__(self, name: str, attrs: Mapping[str, str | None] | None = None) -> None:
        self.name = name
        self.parent = None
        self.data = None
        self.children = []
        self.attrs = dict(attrs) if attrs is not None else {}

    def __repr__(self) -> str:
        return f"<ElementNode {self.name} {self.attrs!r}>"

    def get_attribute(self, name: str) -> str | None:
        """Return the attribute value; valueless attributes read as ``""``, missing ones as None."""
        if name not in self.attrs:
            return None
        value = self.attrs[name]
        return "" if value is None else value

    def set_attribute(self, name: str, value: str | None) -> None:
        self.attrs[name] = "" if value is None else str(value)

    def remove_attribute(self, name: str) -> None:
        self.attrs.pop(name, None)

    def has_attribute(self, name: str) -> bool:
        return name in self.attrs

    @property
    def text_content(self) -> str:
        return self.to_text()

    @text_content.setter
    def text_content(self, value: str) -> None:
        for child in list(self.children):
            self.remove_child(child)
        if value:
            self.append_child(TextNode(value))

    @property
    def outer_html(self) -> str:
        """Serialize this element the way a browser's ``outerHTML`` does."""
        return to_html(self)

    def is_equal_node(self, other: Any) -> bool:
        """DOM ``isEqualNode``: same name, same attribute set (any order), equal children."""
        if not isinstance(other, ElementNode):
            return False
        if self.name != other.name or self.get_attribute_map() != other.get_attribute_map():
            return False
        if len(self.children) != len(other.children):
            return False
        return all(_nodes_equal(a, b) for a, b in zip(self.children, other.children))

    def get_attribute_map(self) -> dict[str, str]:
        return {key: "" if value is None else value for key, value in self.attrs.items()}


class TextNode:
    __slots__ = ("data", "name", "parent")

    data: str | None
    name: str
    parent: SimpleDomNode | ElementNode | None

    def __init__(self, data: str | None) -> None:
        self.data = data
        self.parent = None
        self.name = "#text"

    def __repr__(self) -> str:
        return f"<TextNode {self.data!r}>"

    @property
    def children(self) -> list[Any]:
        """Return empty list for TextNode (leaf node)."""
        return []


class Document(SimpleDomNode):
    """A ``#document`` root with the browser conveniences the patcher relies on.

    ``Document.create()`` builds the usual ``html > head + body`` skeleton.
    """

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("#document")

    @classmethod
    def create(cls, title: str | None = None, html_attributes: Mapping[str, str | None] | None = None) -> Document:
        document = cls()
        html = ElementNode("html", html_attributes)
        html.append_child(ElementNode("head"))
        html.append_child(ElementNode("body"))
        document.append_child(html)
        if title is not None:
            document.title = title
        return document

    @property
    def document_element(self) -> ElementNode | None:
        for child in self.children or []:
            if isinstance(child, ElementNode):
                return child
        return None

    @property
    def head(self) -> ElementNode | None:
        root = self.document_element
        if root is None:
            return None
        for child in root.children:
            if isinstance(child, ElementNode) and child.name == "head":
                return child
        return None

    def ensure_head(self) -> ElementNode:
        head = self.head
        if head is not None:
            return head
        root = self.document_element
        if root is None:
            root = ElementNode("html")
            self.append_child(root)
        head = ElementNode("head")
        root.insert_before(head, root.children[0] if root.children else None)
        return head

    @property
    def title_element(self) -> ElementNode | None:
        head = self.head
        return head.find("title") if head is not None else None

    def ensure_title_element(self) -> ElementNode:
        element = self.title_element
        if element is None:
            element = ElementNode("title")
            self.ensure_head().append_child(element)
        return element

    @property
    def title(self) -> str:
        element = self.title_element
        return element.text_content if element is not None else ""

    @title.setter
    def title(self, value: str) -> None:
        self.ensure_title_element().text_content = value


def _nodes_equal(a: Any, b: Any) -> bool:
    if isinstance(a, ElementNode):
        return a.is_equal_node(b)
    return a.name == b.name and a.data == b.data


def _to_text_collect(node: Any, parts: list[str]) -> None:
    if node.name == "#text":
        if node.data:
            parts.append(node.data)
        return
    for child in node.children or []:
        _to_text_collect(child, parts)
