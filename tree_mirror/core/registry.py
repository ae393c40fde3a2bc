"""
Bidirectional association of stable integer ids with live nodes.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable

from .exceptions import IdentityCollisionError

__all__ = [
    "IdentityRegistry",
]


class IdentityRegistry[NodeT]:
    """
    Maps ids to nodes and nodes to ids for one side of a mirror. Each
    serializer and each mirror owns its own registry; the same id denotes
    the same logical node on both sides.

    Nodes are indexed by a key derived from the node (its identity by
    default) rather than being used as dict keys themselves, so host trees
    with value-based equality on nodes don't alias distinct nodes.
    """

    _nodes: dict[int, NodeT]
    """Mapping of id to node"""

    _ids: dict[Hashable, int]
    """Mapping of node key to id"""

    _key: Callable[[Any], Hashable]
    """Function returning the lookup key of a node"""

    _next_id: int
    """Next id to assign; ids start at 1 and are never reused"""

    def __init__(self, key: Callable[[Any], Hashable] = id):
        self._nodes = dict()
        self._ids = dict()
        self._key = key
        self._next_id = 1

    def __str__(self):
        return f"IdentityRegistry: nodes={len(self._nodes)}, next_id={self._next_id}"

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    @property
    def next_id(self) -> int:
        """
        Id which will be assigned by the next call to
        {obj}`IdentityRegistry.remember`.
        """
        return self._next_id

    def remember(self, node: NodeT) -> int:
        """
        Assign a new id to a node which doesn't have one yet.
        """
        if self._key(node) in self._ids:
            raise IdentityCollisionError(
                f"Node {node} already registered with id={self._ids[self._key(node)]}"
            )

        node_id = self._next_id
        self._next_id += 1

        self._bind(node_id, node)
        return node_id

    def register(self, node_id: int, node: NodeT):
        """
        Bind an id assigned elsewhere to a node, as done on the mirror side.
        """
        existing = self._nodes.get(node_id)
        if existing is not None:
            if existing is node:
                return
            raise IdentityCollisionError(
                f"Id {node_id} already registered to another node {existing}"
            )

        existing_id = self._ids.get(self._key(node))
        if existing_id is not None:
            raise IdentityCollisionError(
                f"Node {node} already registered with id={existing_id}, attempt to register as id={node_id}"
            )

        self._bind(node_id, node)

        # keep locally assigned ids clear of externally assigned ones
        self._next_id = max(self._next_id, node_id + 1)

    def get_id(self, node: NodeT) -> int | None:
        """
        Get id of node, or `None` if it's not registered.
        """
        return self._ids.get(self._key(node))

    def get_node(self, node_id: int) -> NodeT | None:
        """
        Get node with id, or `None` if no such node is registered.
        """
        return self._nodes.get(node_id)

    def forget_node(self, node: NodeT):
        """
        Remove node from registry if present. Its id is not reused.
        """
        node_id = self._ids.pop(self._key(node), None)
        if node_id is not None:
            del self._nodes[node_id]

    def forget_id(self, node_id: int):
        """
        Remove node with id from registry if present.
        """
        node = self._nodes.pop(node_id, None)
        if node is not None:
            del self._ids[self._key(node)]

    def _bind(self, node_id: int, node: NodeT):
        self._nodes[node_id] = node
        self._ids[self._key(node)] = node_id
