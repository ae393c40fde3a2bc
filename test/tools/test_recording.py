from pathlib import Path

from mirror_utils import MirrorPair
from pytest import raises

from tree_mirror import (
    ChangeSet,
    MemoryDocument,
    MemoryElement,
    MemoryTree,
    MirrorStateError,
    TreeMirror,
)
from tree_mirror.lib.memory import structure, text
from tree_mirror.tools.recording import Recording, RecordingTarget, replay


def _make_changes(pair: MirrorPair, div: MemoryElement):
    new = text("new")
    div.insert_before(new, div.first_child)
    pair.sync(added=[new])

    MemoryTree().set_attribute(div, "class", "x")
    pair.sync(attribute_changed={"class": [div]})


def test_replay(pair: MirrorPair, div: MemoryElement, tmp_path: Path):
    _make_changes(pair, div)

    recording_path = tmp_path / "recording.yaml"
    pair.recording.dump_yaml(recording_path)

    recording = Recording.load_yaml(recording_path)
    assert recording == pair.recording
    assert recording.summary() == "3 initial nodes, 2 change sets"

    # replayed mirror matches live mirror
    mirror = TreeMirror(MemoryDocument(), MemoryTree())
    assert replay(recording, mirror) == 2
    assert structure(mirror.root) == structure(pair.source)

    # partial replay
    mirror = TreeMirror(MemoryDocument(), MemoryTree())
    assert replay(recording, mirror, steps=1) == 1
    assert mirror.get_node(2).attributes == {"id": "a"}


def test_wire_format(pair: MirrorPair, div: MemoryElement):
    _make_changes(pair, div)

    data = pair.recording.model_dump(
        mode="json", by_alias=True, exclude_unset=True
    )

    assert data["initialize"]["rootId"] == 1
    assert data["changeSets"][0]["addedOrMoved"][0]["previousSibling"] is None
    assert data["changeSets"][1]["attributes"] == [
        {"id": 2, "attributes": {"class": "x"}}
    ]


def test_load_json(tmp_path: Path):
    path = tmp_path / "recording.json"
    path.write_text(
        '{"initialize": {"rootId": 1, "children": '
        '[{"id": 2, "nodeType": 3, "textContent": "x"}]}, "changeSets": []}'
    )

    recording = Recording.load_yaml(path)
    assert recording.initialize is not None
    assert recording.initialize.children[0].text_content == "x"


def test_load_invalid(tmp_path: Path):
    path = tmp_path / "recording.yaml"

    with raises(ValueError):
        Recording.load_yaml(path)

    path.write_text("- not a mapping\n")
    with raises(ValueError):
        Recording.load_yaml(path)


def test_target_state():
    target = RecordingTarget()

    with raises(MirrorStateError):
        target.apply_changed(ChangeSet())

    target.initialize(1, [])
    with raises(MirrorStateError):
        target.initialize(1, [])

    with raises(MirrorStateError):
        replay(Recording(), TreeMirror(MemoryDocument(), MemoryTree()))
