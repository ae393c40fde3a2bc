"""
Wire records exchanged between a serializer and a mirror.

Records are transport-agnostic: {obj}`NodeRecord.to_wire` produces plain
JSON-compatible values with camelCase keys, and only fields which were
explicitly set are emitted. A reference to an already known node is
therefore exactly `{"id": n}`.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from .types import NodeType

__all__ = [
    "NodeRecord",
    "MovedRecord",
    "AttributeChangeRecord",
    "TextChangeRecord",
    "ChangeSet",
    "InitializeCall",
]


class BaseRecord(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class NodeRecord(BaseRecord):
    """
    Either a reference to a known node (only `id` set) or a full description
    of a node. Records are immutable once emitted.
    """

    id: int
    """Id of node, stable for the lifetime of the node"""

    node_type: int | None = None
    """Node type, or `None` for a reference"""

    tag_name: str | None = None
    """Tag name of element"""

    attributes: dict[str, str | None] | None = None
    """
    For full element records, all attributes. For attribute change records,
    only the changed attributes with `None` meaning removed.
    """

    child_nodes: list[NodeRecord] | None = None
    """Child records, only present in recursive snapshots"""

    text_content: str | None = None
    """Text payload of text or comment node"""

    name: str | None = None
    """Document type name"""

    public_id: str | None = None
    """Document type public id"""

    system_id: str | None = None
    """Document type system id"""

    @model_validator(mode="after")
    def validate_full_record(self) -> Self:
        if self.node_type == NodeType.ELEMENT and self.tag_name is None:
            raise ValueError(f"element record id={self.id} missing tagName")

        if (
            self.node_type in (NodeType.TEXT, NodeType.COMMENT)
            and self.text_content is None
        ):
            raise ValueError(
                f"text record id={self.id} missing textContent"
            )

        if self.node_type == NodeType.DOCUMENT_TYPE and self.name is None:
            raise ValueError(f"document type record id={self.id} missing name")

        return self

    @property
    def is_reference(self) -> bool:
        """
        Whether this record only references a node the receiver should
        already know.
        """
        return self.node_type is None

    def derive[RecordT: NodeRecord](
        self, cls: type[RecordT], **fields: Any
    ) -> RecordT:
        """
        Create a record of type `cls` carrying this record's explicitly set
        fields, overridden by `fields`.
        """
        data = {name: getattr(self, name) for name in self.model_fields_set}
        data.update(fields)
        return cls(**data)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Self:
        return cls.model_validate(data)


class MovedRecord(NodeRecord):
    """
    Record of a node which was added or moved, carrying its final position:
    it's inserted under `parent_node` immediately after `previous_sibling`,
    or as the first child if there's no previous sibling.
    """

    parent_node: NodeRecord
    previous_sibling: NodeRecord | None


class AttributeChangeRecord(NodeRecord):
    """
    Record of an element whose attributes changed, carrying only the changed
    attributes.
    """

    attributes: dict[str, str | None]
    """Current value of each changed attribute, or `None` if removed"""


class TextChangeRecord(NodeRecord):
    """
    Record of a text or comment node whose payload changed.
    """

    text_content: str


class ChangeSet(BaseRecord):
    """
    Records produced from one mutation batch. Transient: constructed,
    transmitted, applied, then discarded.
    """

    removed: list[NodeRecord] = []
    """Nodes no longer present in the tree"""

    added_or_moved: list[MovedRecord] = []
    """Nodes added or moved, ordered so sequential insertion reproduces
    the final sibling order"""

    attributes: list[AttributeChangeRecord] = []
    """Elements with changed attributes"""

    text: list[TextChangeRecord] = []
    """Text or comment nodes with changed payload"""

    @property
    def is_empty(self) -> bool:
        return not (
            self.removed or self.added_or_moved or self.attributes or self.text
        )

    def summary(self) -> str:
        """
        Return a brief summary of how many records are in each list.
        """
        desc = "(removed/addedOrMoved/attributes/text) "
        counts = "/".join(
            str(len(records))
            for records in (
                self.removed,
                self.added_or_moved,
                self.attributes,
                self.text,
            )
        )
        return f"{desc}{counts}"

    def to_wire(self) -> dict[str, Any]:
        return {
            "removed": [r.to_wire() for r in self.removed],
            "addedOrMoved": [r.to_wire() for r in self.added_or_moved],
            "attributes": [r.to_wire() for r in self.attributes],
            "text": [r.to_wire() for r in self.text],
        }

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Self:
        return cls.model_validate(data)


class InitializeCall(BaseRecord):
    """
    Initial snapshot: id of the root and recursive records of its children.
    """

    root_id: int
    children: list[NodeRecord] = []

    def to_wire(self) -> dict[str, Any]:
        return {
            "rootId": self.root_id,
            "children": [r.to_wire() for r in self.children],
        }

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Self:
        return cls.model_validate(data)
