__all__ = [
    "MirrorError",
    "UnsupportedNodeTypeError",
    "DanglingReferenceError",
    "IdentityCollisionError",
    "ConflictingChangeError",
    "MirrorStateError",
]


class MirrorError(Exception):
    """
    Base class of errors raised by the synchronization protocol. These are
    protocol or programmer errors rather than expected runtime conditions:
    nothing is retried and a partially applied change set is not rolled back.
    """


class UnsupportedNodeTypeError(MirrorError):
    """
    Raised when deserializing a record whose node type can't be constructed
    and no delegate produced a node for it.
    """

    node_type: int | None

    def __init__(self, node_type: int | None, node_id: int):
        self.node_type = node_type
        super().__init__(
            f"Unsupported node type {node_type} for node id={node_id}"
        )


class DanglingReferenceError(MirrorError):
    """
    Raised when a reference record names an id which is not registered on
    the receiving side. A full record is required the first time a node
    is sent.
    """

    node_id: int

    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"Reference to unknown node id={node_id}")


class IdentityCollisionError(MirrorError):
    """
    Raised when binding an id to a node would give a node two ids or an id
    two nodes.
    """


class ConflictingChangeError(MirrorError):
    """
    Raised when a change set removes a node which an added or moved record
    also refers to, as the node itself or as its position.
    The change set is rejected before any of it is applied.
    """

    node_ids: list[int]

    def __init__(self, node_ids: list[int]):
        self.node_ids = node_ids
        ids_str = ", ".join([str(i) for i in node_ids])
        super().__init__(
            "Change set removes node ids referenced by added or moved nodes: "
            f"{ids_str}"
        )


class MirrorStateError(MirrorError):
    """
    Raised when an operation is invoked in the wrong lifecycle state, e.g.
    applying changes before the mirror was initialized.
    """
