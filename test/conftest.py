import logging
import os
import sys

from pytest import fixture

from tree_mirror import MemoryDocument, MemoryElement
from tree_mirror.lib.memory import element, text

# enable import of modules in test folder
sys.path.insert(0, os.path.dirname(__file__))

from mirror_utils import MirrorPair, create_pair  # noqa: E402

logging.basicConfig(level=logging.WARNING)


@fixture(autouse=True)
def newline(request):
    """
    Print a newline and underline test name.
    """
    print("\n" + "-" * len(request.node.nodeid))


@fixture
def source() -> MemoryDocument:
    """
    Source document: <div id="a"><span>hi</span></div>
    """
    doc = MemoryDocument()
    doc.append_child(
        element("div", {"id": "a"}, element("span", None, text("hi")))
    )
    return doc


@fixture
def div(source: MemoryDocument) -> MemoryElement:
    node = source.first_child
    assert isinstance(node, MemoryElement)
    return node


@fixture
def span(div: MemoryElement) -> MemoryElement:
    node = div.first_child
    assert isinstance(node, MemoryElement)
    return node


@fixture
def pair(source: MemoryDocument) -> MirrorPair:
    """
    Source document mirrored into an in-memory mirror.
    """
    return create_pair(source)
