import logging

from tree_mirror import (
    IdentityRegistry,
    MemoryDocument,
    MemoryElement,
    MemoryTree,
    MutationSummary,
    NodeRecord,
    NodeType,
    Serializer,
)
from tree_mirror.lib.memory import comment, element, text


def test_snapshot(source: MemoryDocument, div: MemoryElement):
    serializer = Serializer(MemoryTree())

    root = serializer.snapshot(source)
    assert root == NodeRecord(id=1, node_type=NodeType.DOCUMENT)

    # ids assigned in document order
    records = serializer.snapshot_children(source)
    assert [record.to_wire() for record in records] == [
        {
            "id": 2,
            "nodeType": 1,
            "tagName": "div",
            "attributes": {"id": "a"},
            "childNodes": [
                {
                    "id": 3,
                    "nodeType": 1,
                    "tagName": "span",
                    "attributes": {},
                    "childNodes": [
                        {"id": 4, "nodeType": 3, "textContent": "hi"},
                    ],
                }
            ],
        }
    ]

    # known nodes are only referenced
    assert serializer.snapshot(div).to_wire() == {"id": 2}
    assert serializer.snapshot(div, recursive=True).to_wire() == {"id": 2}

    assert serializer.snapshot(None) is None


def test_snapshot_shallow():
    serializer = Serializer(MemoryTree())
    node = element("ul", None, element("li"))

    record = serializer.snapshot(node)
    assert record is not None
    assert record.child_nodes is None
    assert "childNodes" not in record.to_wire()

    # empty elements don't get childNodes even if recursive
    empty = serializer.snapshot(element("br"), recursive=True)
    assert empty is not None
    assert "childNodes" not in empty.to_wire()


def test_snapshot_types():
    serializer = Serializer(MemoryTree())
    doctype = MemoryTree().create_doctype("html", "-//W3C//DTD", "about:x")

    assert serializer.snapshot(doctype).to_wire() == {
        "id": 1,
        "nodeType": 10,
        "name": "html",
        "publicId": "-//W3C//DTD",
        "systemId": "about:x",
    }

    assert serializer.snapshot(comment("c")).to_wire() == {
        "id": 2,
        "nodeType": 8,
        "textContent": "c",
    }


def test_added_or_moved_runs():
    """
    Runs of changed siblings are emitted left to right, each anchored on
    the stable sibling to its left.
    """
    tree = MemoryTree()
    serializer = Serializer(tree)

    a, x, y, b, z = (element(tag) for tag in ["a", "x", "y", "b", "z"])
    parent = element("div", None, a, x, y, b, z)
    serializer.snapshot(parent, recursive=True)

    ids = {node: serializer.registry.get_id(node) for node in [a, x, y, b, z]}

    # report in scrambled order
    records = serializer.build_added_or_moved([z], [y], [x])

    # z is seen first; the x/y run starts at its left edge x
    assert [r.id for r in records] == [ids[z], ids[x], ids[y]]

    by_id = {r.id: r for r in records}
    assert by_id[ids[x]].previous_sibling == NodeRecord(id=ids[a])
    assert by_id[ids[y]].previous_sibling == NodeRecord(id=ids[x])
    assert by_id[ids[z]].previous_sibling == NodeRecord(id=ids[b])

    for record in records:
        assert record.parent_node == NodeRecord(id=1)


def test_added_or_moved_first_child():
    tree = MemoryTree()
    serializer = Serializer(tree)

    parent = element("div", None, element("span"))
    serializer.snapshot(parent, recursive=True)

    new = text("new")
    parent.insert_before(new, parent.first_child)

    records = serializer.build_added_or_moved([new], [], [])
    assert len(records) == 1
    assert records[0].previous_sibling is None
    assert records[0].to_wire() == {
        "id": 3,
        "nodeType": 3,
        "textContent": "new",
        "previousSibling": None,
        "parentNode": {"id": 1},
    }


def test_added_or_moved_dedup():
    serializer = Serializer(MemoryTree())
    node = element("span")
    parent = element("div", None, node)

    records = serializer.build_added_or_moved([node], [node], [node])
    assert len(records) == 1

    # new parent gets a full record since it wasn't known
    assert records[0].parent_node.tag_name == "div"
    assert records[0].parent_node.id == 2
    assert records[0].id == 1

    assert serializer.registry.get_id(parent) == 2


def test_added_or_moved_parentless(caplog):
    serializer = Serializer(MemoryTree())

    with caplog.at_level(logging.WARNING):
        records = serializer.build_added_or_moved([element("p")], [], [])

    assert records == []
    assert "no parent" in caplog.text


def test_attribute_changes():
    tree = MemoryTree()
    serializer = Serializer(tree)

    node1 = element("div", {"a": "1", "b": "2"})
    node2 = element("div", {"a": "3"})
    serializer.snapshot(node1)
    serializer.snapshot(node2)

    tree.set_attribute(node1, "a", "changed")
    tree.remove_attribute(node1, "b")
    tree.set_attribute(node2, "a", "changed2")

    records = serializer.build_attribute_changes(
        {"a": [node1, node2], "b": [node1]}
    )

    # one record per element
    assert [record.to_wire() for record in records] == [
        {"id": 1, "attributes": {"a": "changed", "b": None}},
        {"id": 2, "attributes": {"a": "changed2"}},
    ]


def test_text_changes():
    tree = MemoryTree()
    serializer = Serializer(tree)

    node = text("old")
    serializer.snapshot(node)
    tree.set_text_content(node, "new")

    records = serializer.build_text_changes([node, node])
    assert [record.to_wire() for record in records] == [
        {"id": 1, "textContent": "new"}
    ]


def test_change_set_and_forget(source: MemoryDocument, span: MemoryElement):
    tree = MemoryTree()
    serializer = Serializer(tree)
    serializer.snapshot(source)
    serializer.snapshot_children(source)

    span_id = serializer.registry.get_id(span)
    assert span_id is not None
    tree.detach(span)

    change_set = serializer.build_change_set(MutationSummary(removed=[span]))
    assert change_set.removed == [NodeRecord(id=span_id)]
    assert not change_set.added_or_moved

    serializer.forget([span])
    assert serializer.registry.get_id(span) is None
    assert span_id not in serializer.registry


def test_shared_registry(source: MemoryDocument):
    """
    An empty registry passed in is used rather than replaced.
    """
    tree = MemoryTree()
    registry = IdentityRegistry(key=tree.identity)
    serializer = Serializer(tree, registry=registry)

    serializer.snapshot(source)

    assert serializer.registry is registry
    assert registry.get_id(source) == 1
