"""
Mirror-side reconstruction and incremental patching of a tree.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from logging import Logger

from .delegate import MirrorDelegate
from .exceptions import (
    ConflictingChangeError,
    DanglingReferenceError,
    MirrorStateError,
    UnsupportedNodeTypeError,
)
from .host import HostTree
from .records import ChangeSet, NodeRecord
from .registry import IdentityRegistry
from .types import NodeType

__all__ = [
    "MirrorTarget",
    "TreeMirror",
]


class MirrorTarget(ABC):
    """
    Receiver of an initial snapshot followed by a stream of change sets.
    """

    @abstractmethod
    def initialize(self, root_id: int, children: list[NodeRecord]):
        ...

    @abstractmethod
    def apply_changed(self, change_set: ChangeSet):
        ...


class TreeMirror[NodeT](MirrorTarget):
    """
    Maintains a mirror of a source tree under an existing root node.

    Change sets are applied synchronously in fixed phases. If a record
    fails to apply, the error propagates and the mirror is left with the
    phases before it applied; there is no rollback.
    """

    _root: NodeT
    """Pre-existing root of the mirror"""

    _tree: HostTree[NodeT]
    """Tree containing the mirror"""

    _delegate: MirrorDelegate
    """Hooks provided by the application"""

    _registry: IdentityRegistry[NodeT]
    """Ids of mirrored nodes"""

    _initialized: bool = False

    _logger: Logger

    def __init__(
        self,
        root: NodeT,
        tree: HostTree[NodeT],
        *,
        delegate: MirrorDelegate | None = None,
        logger: Logger | None = None,
    ):
        """
        :param root: Node under which to mirror the source root's children
        :param tree: Tree containing `root`
        :param delegate: Hooks to intercept element creation and attribute assignment, or `None` to always use defaults
        :param logger: Logger to use, or `None` to use default logger
        """
        self._root = root
        self._tree = tree
        self._delegate = delegate or MirrorDelegate()
        self._registry = IdentityRegistry(key=tree.identity)
        self._logger = logger or logging.getLogger()

    def __str__(self):
        return f"TreeMirror: root={self._root}, {self._registry}"

    @property
    def root(self) -> NodeT:
        return self._root

    @property
    def initialized(self) -> bool:
        return self._initialized

    def get_node(self, node_id: int) -> NodeT | None:
        """
        Get mirrored node with id, or `None` if unknown.
        """
        return self._registry.get_node(node_id)

    def get_id(self, node: NodeT) -> int | None:
        """
        Get id of mirrored node, or `None` if it's not mirrored.
        """
        return self._registry.get_id(node)

    def initialize(self, root_id: int, children: list[NodeRecord]):
        """
        Register the root under `root_id` and build its children.
        """
        if self._initialized:
            raise MirrorStateError(f"Mirror already initialized: {self}")

        self._registry.register(root_id, self._root)
        self._initialized = True

        for record in children:
            self.deserialize_node(record, self._root)

        self._logger.debug(
            f"Initialized mirror: root_id={root_id}, nodes={len(self._registry)}"
        )

    def apply_changed(self, change_set: ChangeSet):
        """
        Apply changes from one mutation batch.
        """
        if not self._initialized:
            raise MirrorStateError(
                f"Attempt to apply changes before initializing: {self}"
            )

        self._check_conflicts(change_set)

        self._logger.debug(f"Applying change set: {change_set.summary()}")

        tree = self._tree

        # all moved nodes are detached before any is inserted
        # so an insertion never lands under a not-yet-moved descendant
        for record in change_set.added_or_moved:
            node = self._resolve(record)
            self.deserialize_node(record.previous_sibling)
            self._resolve(record.parent_node)
            tree.detach(node)

        for record in change_set.removed:
            tree.detach(self._resolve(record))

        for record in change_set.added_or_moved:
            node = self._resolve(record)
            parent = self._resolve(record.parent_node)
            previous = self.deserialize_node(record.previous_sibling)

            reference = (
                tree.next_sibling(previous)
                if previous is not None
                else tree.first_child(parent)
            )
            tree.insert_before(parent, node, reference)

        for record in change_set.attributes:
            node = self._resolve(record)

            for name, value in record.attributes.items():
                if value is None:
                    tree.remove_attribute(node, name)
                else:
                    self._set_attribute(node, name, value)

        for record in change_set.text:
            node = self._resolve(record)
            tree.set_text_content(node, record.text_content)

        # last, since earlier phases may resolve removed ids
        for record in change_set.removed:
            self._registry.forget_id(record.id)

    def deserialize_node(
        self, record: NodeRecord | None, parent: NodeT | None = None
    ) -> NodeT | None:
        """
        Get node for record, creating it if its id isn't known yet. If the
        node is created and `parent` is provided, it's appended to
        `parent`; an existing node is returned as-is.
        """
        if record is None:
            return None

        node = self._registry.get_node(record.id)
        if node is not None:
            return node

        if record.is_reference:
            raise DanglingReferenceError(record.id)

        node = self._create_node(record)

        self._registry.register(record.id, node)

        if parent is not None:
            self._tree.append_child(parent, node)

        for child_record in record.child_nodes or []:
            self.deserialize_node(child_record, node)

        return node

    def _resolve(self, record: NodeRecord) -> NodeT:
        node = self.deserialize_node(record)
        assert node is not None
        return node

    def _create_node(self, record: NodeRecord) -> NodeT:
        tree = self._tree
        node: NodeT | None = None

        match record.node_type:
            case NodeType.COMMENT:
                assert record.text_content is not None
                node = tree.create_comment(record.text_content)

            case NodeType.TEXT:
                assert record.text_content is not None
                node = tree.create_text(record.text_content)

            case NodeType.DOCUMENT_TYPE:
                assert record.name is not None
                node = tree.create_doctype(
                    record.name,
                    record.public_id or "",
                    record.system_id or "",
                )

            case NodeType.ELEMENT:
                assert record.tag_name is not None

                node = self._delegate.create_element(record.tag_name)
                if node is None:
                    node = tree.create_element(record.tag_name)

                for name, value in (record.attributes or {}).items():
                    if value is not None:
                        self._set_attribute(node, name, value)

        if node is None:
            raise UnsupportedNodeTypeError(record.node_type, record.id)

        return node

    def _set_attribute(self, node: NodeT, name: str, value: str):
        if not self._delegate.set_attribute(node, name, value):
            self._tree.set_attribute(node, name, value)

    def _check_conflicts(self, change_set: ChangeSet):
        """
        Reject change set if any removed node is added or moved, or is the
        parent or previous sibling of an added or moved node.
        """
        removed_ids = {record.id for record in change_set.removed}
        referenced_ids: set[int] = set()

        for record in change_set.added_or_moved:
            referenced_ids.add(record.id)
            referenced_ids.add(record.parent_node.id)
            if record.previous_sibling is not None:
                referenced_ids.add(record.previous_sibling.id)

        conflicts = sorted(removed_ids & referenced_ids)

        if conflicts:
            raise ConflictingChangeError(conflicts)
