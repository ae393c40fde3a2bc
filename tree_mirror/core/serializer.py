"""
Source-side conversion of live nodes and mutation summaries to wire records.
"""

from __future__ import annotations

import logging
from logging import Logger
from typing import Hashable, Iterable

from .host import HostTree
from .records import (
    AttributeChangeRecord,
    ChangeSet,
    MovedRecord,
    NodeRecord,
    TextChangeRecord,
)
from .registry import IdentityRegistry
from .summary import MutationSummary
from .types import NodeType

__all__ = [
    "Serializer",
]


class Serializer[NodeT]:
    """
    Converts nodes of a source tree to records, assigning ids the first time
    each node is referenced. A node which already has an id is only ever
    sent as a reference.
    """

    _tree: HostTree[NodeT]
    """Tree being serialized"""

    _registry: IdentityRegistry[NodeT]
    """Ids of nodes sent so far"""

    _logger: Logger

    def __init__(
        self,
        tree: HostTree[NodeT],
        *,
        registry: IdentityRegistry[NodeT] | None = None,
        logger: Logger | None = None,
    ):
        """
        :param tree: Source tree
        :param registry: Registry to use, or `None` to create one owned by this serializer
        :param logger: Logger to use, or `None` to use default logger
        """
        self._tree = tree
        self._registry = (
            registry
            if registry is not None
            else IdentityRegistry(key=tree.identity)
        )
        self._logger = logger or logging.getLogger()

    @property
    def registry(self) -> IdentityRegistry[NodeT]:
        return self._registry

    def snapshot(
        self, node: NodeT | None, recursive: bool = False
    ) -> NodeRecord | None:
        """
        Get record of node: a reference if the node is known, otherwise a
        full record. Children of elements are embedded only if `recursive`.
        """
        if node is None:
            return None

        node_id = self._registry.get_id(node)
        if node_id is not None:
            return NodeRecord(id=node_id)

        tree = self._tree
        node_type = tree.node_type(node)
        node_id = self._registry.remember(node)

        match node_type:
            case NodeType.DOCUMENT_TYPE:
                name, public_id, system_id = tree.doctype_fields(node)
                return NodeRecord(
                    id=node_id,
                    node_type=node_type,
                    name=name,
                    public_id=public_id,
                    system_id=system_id,
                )

            case NodeType.TEXT | NodeType.COMMENT:
                return NodeRecord(
                    id=node_id,
                    node_type=node_type,
                    text_content=tree.text_content(node),
                )

            case NodeType.ELEMENT:
                fields = dict(
                    tag_name=tree.tag_name(node),
                    attributes=tree.attributes(node),
                )

                # leave child_nodes unset rather than empty
                if recursive and tree.first_child(node) is not None:
                    fields["child_nodes"] = self.snapshot_children(node)

                return NodeRecord(id=node_id, node_type=node_type, **fields)

        # other node types (e.g. document root) only carry their type
        return NodeRecord(id=node_id, node_type=node_type)

    def snapshot_children(self, node: NodeT) -> list[NodeRecord]:
        """
        Get recursive records of all children of node, as sent in the
        initial snapshot.
        """
        records: list[NodeRecord] = []

        for child in self._tree.children(node):
            record = self.snapshot(child, recursive=True)
            assert record is not None
            records.append(record)

        return records

    def build_removed(self, nodes: Iterable[NodeT]) -> list[NodeRecord]:
        """
        Get records of removed nodes. Ids are kept until
        {obj}`Serializer.forget` is invoked.
        """
        return [self._snapshot_child(node) for node in nodes]

    def build_added_or_moved(
        self,
        added: Iterable[NodeT],
        reparented: Iterable[NodeT],
        reordered: Iterable[NodeT],
    ) -> list[MovedRecord]:
        """
        Get records of added and moved nodes with their final positions.

        Nodes are grouped by parent. Within a group, each contiguous run of
        changed siblings is emitted left to right starting at its left edge,
        so inserting each node after its previous sibling in order
        reproduces the final sibling order. The previous sibling of a run's
        first node is always a node which didn't change.
        """
        tree = self._tree

        # group nodes by current parent, keeping first-seen order
        groups: dict[Hashable, tuple[NodeT, dict[Hashable, NodeT]]] = dict()

        for nodes in (added, reparented, reordered):
            for node in nodes:
                parent = tree.parent(node)

                if parent is None:
                    self._logger.warning(
                        f"Skipping changed node with no parent: {node}"
                    )
                    continue

                parent_key = tree.identity(parent)
                if parent_key not in groups:
                    groups[parent_key] = (parent, dict())

                groups[parent_key][1].setdefault(tree.identity(node), node)

        moved: list[MovedRecord] = []

        for parent, children in groups.values():
            while children:
                node: NodeT | None = next(iter(children.values()))
                assert node is not None

                # find left edge of this run of changed siblings
                prev = tree.previous_sibling(node)
                while prev is not None and tree.identity(prev) in children:
                    node = prev
                    prev = tree.previous_sibling(node)

                # emit run left to right
                while node is not None and tree.identity(node) in children:
                    moved.append(self._build_moved(node, parent))
                    del children[tree.identity(node)]
                    node = tree.next_sibling(node)

        return moved

    def build_attribute_changes(
        self, attribute_changed: dict[str, list[NodeT]]
    ) -> list[AttributeChangeRecord]:
        """
        Get one record per element carrying current values of its changed
        attributes, or `None` for removed ones.
        """
        tree = self._tree
        changes: dict[Hashable, tuple[NodeRecord, dict[str, str | None]]] = (
            dict()
        )

        for name, elements in attribute_changed.items():
            for element in elements:
                key = tree.identity(element)
                if key not in changes:
                    changes[key] = (self._snapshot_child(element), dict())

                changes[key][1][name] = tree.get_attribute(element, name)

        return [
            record.derive(AttributeChangeRecord, attributes=attributes)
            for record, attributes in changes.values()
        ]

    def build_text_changes(
        self, nodes: Iterable[NodeT]
    ) -> list[TextChangeRecord]:
        """
        Get one record per node carrying its current text payload.
        """
        tree = self._tree
        records: dict[Hashable, TextChangeRecord] = dict()

        for node in nodes:
            key = tree.identity(node)
            if key not in records:
                records[key] = self._snapshot_child(node).derive(
                    TextChangeRecord, text_content=tree.text_content(node)
                )

        return list(records.values())

    def build_change_set(self, summary: MutationSummary) -> ChangeSet:
        """
        Get change set from summary of one mutation batch.
        """
        removed = self.build_removed(summary.removed)
        added_or_moved = self.build_added_or_moved(
            summary.added, summary.reparented, summary.reordered
        )
        attributes = self.build_attribute_changes(summary.attribute_changed)
        text = self.build_text_changes(summary.character_data_changed)

        return ChangeSet(
            removed=removed,
            added_or_moved=added_or_moved,
            attributes=attributes,
            text=text,
        )

    def forget(self, nodes: Iterable[NodeT]):
        """
        Forget ids of nodes which are no longer in the tree.
        """
        for node in nodes:
            self._registry.forget_node(node)

    def _snapshot_child(self, node: NodeT) -> NodeRecord:
        record = self.snapshot(node)
        assert record is not None
        return record

    def _build_moved(self, node: NodeT, parent: NodeT) -> MovedRecord:
        # build in this order so new ids are assigned node first
        record = self._snapshot_child(node)
        previous_sibling = self.snapshot(self._tree.previous_sibling(node))
        parent_node = self._snapshot_child(parent)

        return record.derive(
            MovedRecord,
            previous_sibling=previous_sibling,
            parent_node=parent_node,
        )
