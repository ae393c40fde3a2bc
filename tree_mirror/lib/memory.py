"""
In-memory host tree with document-like semantics, usable as either side of
a mirror.
"""

from __future__ import annotations

from html import escape
from typing import Any, Iterator

from ..core.host import HostTree
from ..core.types import NodeType

__all__ = [
    "HierarchyError",
    "MemoryNode",
    "MemoryDocument",
    "MemoryElement",
    "MemoryCharacterData",
    "MemoryText",
    "MemoryComment",
    "MemoryDocumentType",
    "MemoryTree",
    "element",
    "text",
    "comment",
    "to_markup",
    "structure",
]

__rollup__ = [
    "HierarchyError",
    "MemoryNode",
    "MemoryDocument",
    "MemoryElement",
    "MemoryCharacterData",
    "MemoryText",
    "MemoryComment",
    "MemoryDocumentType",
    "MemoryTree",
]


class HierarchyError(Exception):
    """
    Raised when an insertion would produce an invalid tree, e.g. a node
    becoming its own ancestor.
    """


class MemoryNode:
    """
    Node with constant-time parent and sibling navigation.
    """

    node_type: NodeType

    parent: MemoryNode | None = None
    first_child: MemoryNode | None = None
    last_child: MemoryNode | None = None
    previous_sibling: MemoryNode | None = None
    next_sibling: MemoryNode | None = None

    # whether this kind of node may have children
    _container: bool = False

    def __repr__(self):
        return f"<{type(self).__name__} {self._describe()}>"

    def _describe(self) -> str:
        return ""

    @property
    def children(self) -> Iterator[MemoryNode]:
        child = self.first_child
        while child is not None:
            yield child
            child = child.next_sibling

    @property
    def child_count(self) -> int:
        return sum(1 for _ in self.children)

    def contains(self, node: MemoryNode) -> bool:
        """
        Whether node is this node or one of its descendants.
        """
        current: MemoryNode | None = node
        while current is not None:
            if current is self:
                return True
            current = current.parent
        return False

    def insert_before(
        self, node: MemoryNode, reference: MemoryNode | None
    ) -> MemoryNode:
        """
        Insert node before reference, or as last child if reference is
        `None`. If node is already in a tree, it's moved.
        """
        if not self._container:
            raise HierarchyError(f"{self} cannot have children")

        if node.contains(self):
            raise HierarchyError(
                f"Inserting {node} under {self} would make it its own ancestor"
            )

        if reference is not None and reference.parent is not self:
            raise HierarchyError(f"{reference} is not a child of {self}")

        if reference is node:
            reference = node.next_sibling

        if node.parent is not None:
            node.parent.remove_child(node)

        previous = (
            self.last_child if reference is None else reference.previous_sibling
        )

        node.parent = self
        node.previous_sibling = previous
        node.next_sibling = reference

        if previous is None:
            self.first_child = node
        else:
            previous.next_sibling = node

        if reference is None:
            self.last_child = node
        else:
            reference.previous_sibling = node

        return node

    def append_child(self, node: MemoryNode) -> MemoryNode:
        return self.insert_before(node, None)

    def remove_child(self, node: MemoryNode) -> MemoryNode:
        if node.parent is not self:
            raise HierarchyError(f"{node} is not a child of {self}")

        if node.previous_sibling is None:
            self.first_child = node.next_sibling
        else:
            node.previous_sibling.next_sibling = node.next_sibling

        if node.next_sibling is None:
            self.last_child = node.previous_sibling
        else:
            node.next_sibling.previous_sibling = node.previous_sibling

        node.parent = None
        node.previous_sibling = None
        node.next_sibling = None

        return node


class MemoryDocument(MemoryNode):
    node_type = NodeType.DOCUMENT
    _container = True


class MemoryElement(MemoryNode):
    node_type = NodeType.ELEMENT
    _container = True

    tag_name: str
    attributes: dict[str, str]

    def __init__(
        self, tag_name: str, attributes: dict[str, str] | None = None
    ):
        self.tag_name = tag_name
        self.attributes = dict(attributes or {})

    def _describe(self) -> str:
        return self.tag_name


class MemoryCharacterData(MemoryNode):
    data: str

    def __init__(self, data: str):
        self.data = data

    def _describe(self) -> str:
        return repr(self.data)


class MemoryText(MemoryCharacterData):
    node_type = NodeType.TEXT


class MemoryComment(MemoryCharacterData):
    node_type = NodeType.COMMENT


class MemoryDocumentType(MemoryNode):
    node_type = NodeType.DOCUMENT_TYPE

    name: str
    public_id: str
    system_id: str

    def __init__(self, name: str, public_id: str = "", system_id: str = ""):
        self.name = name
        self.public_id = public_id
        self.system_id = system_id

    def _describe(self) -> str:
        return self.name


class MemoryTree(HostTree[MemoryNode]):
    """
    Implements {obj}`HostTree` for {obj}`MemoryNode` trees.
    """

    def node_type(self, node: MemoryNode) -> int:
        return node.node_type

    def tag_name(self, node: MemoryNode) -> str:
        assert isinstance(node, MemoryElement)
        return node.tag_name

    def attributes(self, node: MemoryNode) -> dict[str, str]:
        assert isinstance(node, MemoryElement)
        return dict(node.attributes)

    def get_attribute(self, node: MemoryNode, name: str) -> str | None:
        assert isinstance(node, MemoryElement)
        return node.attributes.get(name)

    def text_content(self, node: MemoryNode) -> str:
        if isinstance(node, MemoryCharacterData):
            return node.data

        # concatenated text of descendants, as in the DOM
        return "".join(
            self.text_content(child)
            for child in node.children
            if not isinstance(child, (MemoryComment, MemoryDocumentType))
        )

    def doctype_fields(self, node: MemoryNode) -> tuple[str, str, str]:
        assert isinstance(node, MemoryDocumentType)
        return (node.name, node.public_id, node.system_id)

    def parent(self, node: MemoryNode) -> MemoryNode | None:
        return node.parent

    def first_child(self, node: MemoryNode) -> MemoryNode | None:
        return node.first_child

    def previous_sibling(self, node: MemoryNode) -> MemoryNode | None:
        return node.previous_sibling

    def next_sibling(self, node: MemoryNode) -> MemoryNode | None:
        return node.next_sibling

    def set_attribute(self, node: MemoryNode, name: str, value: str):
        assert isinstance(node, MemoryElement)
        node.attributes[name] = value

    def remove_attribute(self, node: MemoryNode, name: str):
        assert isinstance(node, MemoryElement)
        node.attributes.pop(name, None)

    def set_text_content(self, node: MemoryNode, text: str):
        if isinstance(node, MemoryCharacterData):
            node.data = text
            return

        # replace children with a single text node, as in the DOM
        for child in list(node.children):
            node.remove_child(child)
        if text:
            node.append_child(MemoryText(text))

    def insert_before(
        self,
        parent: MemoryNode,
        node: MemoryNode,
        reference: MemoryNode | None,
    ):
        parent.insert_before(node, reference)

    def remove_child(self, parent: MemoryNode, node: MemoryNode):
        parent.remove_child(node)

    def create_element(self, tag_name: str) -> MemoryNode:
        return MemoryElement(tag_name)

    def create_text(self, text: str) -> MemoryNode:
        return MemoryText(text)

    def create_comment(self, text: str) -> MemoryNode:
        return MemoryComment(text)

    def create_doctype(
        self, name: str, public_id: str, system_id: str
    ) -> MemoryNode:
        return MemoryDocumentType(name, public_id, system_id)


def element(
    tag_name: str,
    attributes: dict[str, str] | None = None,
    *children: MemoryNode,
) -> MemoryElement:
    """
    Build an element with attributes and children, e.g.:

    ```
    element("div", {"id": "a"}, element("span", None, text("hi")))
    ```
    """
    node = MemoryElement(tag_name, attributes)
    for child in children:
        node.append_child(child)
    return node


def text(data: str) -> MemoryText:
    return MemoryText(data)


def comment(data: str) -> MemoryComment:
    return MemoryComment(data)


def to_markup(node: MemoryNode) -> str:
    """
    Render node and its descendants as markup.
    """
    match node:
        case MemoryText():
            return escape(node.data, quote=False)
        case MemoryComment():
            return f"<!--{node.data}-->"
        case MemoryDocumentType():
            return f"<!DOCTYPE {node.name}>"
        case MemoryElement():
            attrs = "".join(
                f' {name}="{escape(value)}"'
                for name, value in node.attributes.items()
            )
            inner = "".join(to_markup(child) for child in node.children)
            return f"<{node.tag_name}{attrs}>{inner}</{node.tag_name}>"

    return "".join(to_markup(child) for child in node.children)


def structure(node: MemoryNode) -> tuple[Any, ...]:
    """
    Get nested tuple describing node and its descendants; two trees are
    isomorphic iff their structures are equal.
    """
    match node:
        case MemoryCharacterData():
            return (node.node_type, node.data)
        case MemoryDocumentType():
            return (node.node_type, node.name, node.public_id, node.system_id)
        case MemoryElement():
            return (
                node.node_type,
                node.tag_name,
                tuple(sorted(node.attributes.items())),
                tuple(structure(child) for child in node.children),
            )

    return (
        node.node_type,
        tuple(structure(child) for child in node.children),
    )
