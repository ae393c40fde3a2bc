from enum import IntEnum

from rich.markup import escape

__all__ = [
    "NodeType",
    "SUPPORTED_NODE_TYPES",
]


class NodeType(IntEnum):
    """
    Kind of node, using the same numeric tags as the DOM so records can be
    exchanged with producers running in a browser.
    """

    ELEMENT = 1
    """Element with tag name, attributes and children"""

    TEXT = 3
    """Text node"""

    COMMENT = 8
    """Comment node"""

    DOCUMENT = 9
    """Document root; only ever sent as the root of a mirror"""

    DOCUMENT_TYPE = 10
    """Document type declaration"""

    def __str__(self) -> str:
        color_map = {
            NodeType.ELEMENT: "bright_blue",
            NodeType.TEXT: "bright_green",
            NodeType.COMMENT: "bright_black",
            NodeType.DOCUMENT: "magenta",
            NodeType.DOCUMENT_TYPE: "yellow",
        }

        start = escape("[")
        end = escape("]")
        return f"{start}[{color_map[self]}]{self.name}[/{color_map[self]}]{end}"


SUPPORTED_NODE_TYPES = frozenset(
    {
        NodeType.ELEMENT,
        NodeType.TEXT,
        NodeType.COMMENT,
        NodeType.DOCUMENT_TYPE,
    }
)
"""
Node types which a mirror knows how to construct.
"""
