"""
Capability set through which the serializer and mirror access a tree.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Hashable, Iterator

__all__ = [
    "HostTree",
]


class HostTree[NodeT](ABC):
    """
    Implements access to a concrete tree, e.g. a document tree, a virtual
    tree or a server-side tree. Nodes are opaque to the protocol; every
    read, navigation and mutation goes through this interface so the same
    serializer and mirror work with any backend.
    """

    def identity(self, node: NodeT) -> Hashable:
        """
        Key which uniquely identifies a live node for the purpose of id
        lookups. Defaults to object identity.
        """
        return id(node)

    # reads

    @abstractmethod
    def node_type(self, node: NodeT) -> int:
        """
        Numeric node type, see {obj}`NodeType`.
        """
        ...

    @abstractmethod
    def tag_name(self, node: NodeT) -> str:
        ...

    @abstractmethod
    def attributes(self, node: NodeT) -> dict[str, str]:
        """
        Get all attributes of element as a new mapping.
        """
        ...

    @abstractmethod
    def get_attribute(self, node: NodeT, name: str) -> str | None:
        """
        Get value of attribute, or `None` if the element doesn't have it.
        """
        ...

    @abstractmethod
    def text_content(self, node: NodeT) -> str:
        ...

    @abstractmethod
    def doctype_fields(self, node: NodeT) -> tuple[str, str, str]:
        """
        Get `(name, public_id, system_id)` of document type node.
        """
        ...

    # navigation

    @abstractmethod
    def parent(self, node: NodeT) -> NodeT | None:
        ...

    @abstractmethod
    def first_child(self, node: NodeT) -> NodeT | None:
        ...

    @abstractmethod
    def previous_sibling(self, node: NodeT) -> NodeT | None:
        ...

    @abstractmethod
    def next_sibling(self, node: NodeT) -> NodeT | None:
        ...

    # mutation

    @abstractmethod
    def set_attribute(self, node: NodeT, name: str, value: str):
        ...

    @abstractmethod
    def remove_attribute(self, node: NodeT, name: str):
        ...

    @abstractmethod
    def set_text_content(self, node: NodeT, text: str):
        ...

    @abstractmethod
    def insert_before(
        self, parent: NodeT, node: NodeT, reference: NodeT | None
    ):
        """
        Insert node as a child of parent before reference, or as the last
        child if reference is `None`.
        """
        ...

    @abstractmethod
    def remove_child(self, parent: NodeT, node: NodeT):
        ...

    def append_child(self, parent: NodeT, node: NodeT):
        self.insert_before(parent, node, None)

    # creation

    @abstractmethod
    def create_element(self, tag_name: str) -> NodeT:
        ...

    @abstractmethod
    def create_text(self, text: str) -> NodeT:
        ...

    @abstractmethod
    def create_comment(self, text: str) -> NodeT:
        ...

    @abstractmethod
    def create_doctype(
        self, name: str, public_id: str, system_id: str
    ) -> NodeT:
        ...

    # helpers

    def children(self, node: NodeT) -> Iterator[NodeT]:
        """
        Iterate over children of node from left to right.
        """
        child = self.first_child(node)
        while child is not None:
            yield child
            child = self.next_sibling(child)

    def detach(self, node: NodeT) -> bool:
        """
        Remove node from its parent if it has one. Returns whether it was
        attached.
        """
        parent = self.parent(node)
        if parent is None:
            return False

        self.remove_child(parent, node)
        return True
