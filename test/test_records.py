from pydantic import ValidationError
from pytest import raises

from tree_mirror import (
    ChangeSet,
    InitializeCall,
    MovedRecord,
    NodeRecord,
    NodeType,
)


def test_reference():
    record = NodeRecord(id=1)

    assert record.is_reference
    assert record.to_wire() == {"id": 1}


def test_full_record():
    record = NodeRecord(
        id=2,
        node_type=NodeType.ELEMENT,
        tag_name="div",
        attributes={"id": "a"},
    )

    assert not record.is_reference
    assert record.to_wire() == {
        "id": 2,
        "nodeType": 1,
        "tagName": "div",
        "attributes": {"id": "a"},
    }

    doctype = NodeRecord(
        id=3, node_type=NodeType.DOCUMENT_TYPE, name="html", public_id=""
    )
    assert doctype.to_wire() == {
        "id": 3,
        "nodeType": 10,
        "name": "html",
        "publicId": "",
    }


def test_validation():
    with raises(ValidationError):
        NodeRecord(id=1, node_type=NodeType.ELEMENT)

    with raises(ValidationError):
        NodeRecord(id=1, node_type=NodeType.TEXT)

    with raises(ValidationError):
        NodeRecord(id=1, node_type=NodeType.DOCUMENT_TYPE)

    with raises(ValidationError):
        MovedRecord(id=1)

    # unknown types are rejected by the mirror, not the wire format
    assert NodeRecord(id=1, node_type=99).node_type == 99


def test_change_records():
    """
    Attribute and text changes must carry their payload.
    """
    with raises(ValidationError):
        ChangeSet.from_wire({"attributes": [{"id": 2}]})

    with raises(ValidationError):
        ChangeSet.from_wire({"text": [{"id": 4}]})

    with raises(ValidationError):
        ChangeSet.from_wire({"text": [{"id": 4, "textContent": None}]})

    # empty payloads are valid
    change_set = ChangeSet.from_wire(
        {
            "attributes": [{"id": 2, "attributes": {}}],
            "text": [{"id": 4, "textContent": ""}],
        }
    )
    assert change_set.attributes[0].attributes == {}
    assert change_set.text[0].text_content == ""


def test_immutable():
    record = NodeRecord(id=1)

    with raises(ValidationError):
        record.id = 2


def test_moved_record():
    record = NodeRecord(id=4, node_type=NodeType.TEXT, text_content="hi")
    moved = record.derive(
        MovedRecord, parent_node=NodeRecord(id=2), previous_sibling=None
    )

    # null previous sibling is explicit on the wire
    assert moved.to_wire() == {
        "id": 4,
        "nodeType": 3,
        "textContent": "hi",
        "parentNode": {"id": 2},
        "previousSibling": None,
    }

    assert MovedRecord.from_wire(moved.to_wire()) == moved


def test_change_set():
    change_set = ChangeSet.from_wire(
        {
            "removed": [{"id": 5}],
            "addedOrMoved": [
                {
                    "id": 6,
                    "nodeType": 8,
                    "textContent": "note",
                    "parentNode": {"id": 2},
                    "previousSibling": {"id": 3},
                }
            ],
            "attributes": [{"id": 2, "attributes": {"id": None, "x": "1"}}],
            "text": [{"id": 4, "textContent": "bye"}],
        }
    )

    assert not change_set.is_empty
    assert change_set.removed[0].is_reference
    assert change_set.added_or_moved[0].node_type == NodeType.COMMENT
    assert change_set.added_or_moved[0].previous_sibling == NodeRecord(id=3)
    assert change_set.attributes[0].attributes == {"id": None, "x": "1"}
    assert change_set.text[0].text_content == "bye"
    assert change_set.summary().endswith("1/1/1/1")

    assert ChangeSet.from_wire(change_set.to_wire()) == change_set

    assert ChangeSet().is_empty
    assert ChangeSet().to_wire() == {
        "removed": [],
        "addedOrMoved": [],
        "attributes": [],
        "text": [],
    }


def test_initialize_call():
    call = InitializeCall.from_wire(
        {
            "rootId": 1,
            "children": [
                {
                    "id": 2,
                    "nodeType": 1,
                    "tagName": "div",
                    "attributes": {},
                    "childNodes": [{"id": 3, "nodeType": 3, "textContent": "x"}],
                }
            ],
        }
    )

    assert call.root_id == 1
    child_nodes = call.children[0].child_nodes
    assert child_nodes is not None
    assert child_nodes[0].text_content == "x"

    assert call.to_wire()["children"][0]["childNodes"] == [
        {"id": 3, "nodeType": 3, "textContent": "x"}
    ]
