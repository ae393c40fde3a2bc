"""
Recording of a mirror session, and replay of it into a mirror.
"""
from __future__ import annotations

import logging
from logging import Logger

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from ..core import ChangeSet, InitializeCall, MirrorTarget, NodeRecord
from ..core.exceptions import MirrorStateError
from .yaml_model import BaseYamlModel

__all__ = [
    "Recording",
    "RecordingTarget",
    "replay",
]


class Recording(BaseYamlModel):
    """
    Initial snapshot followed by change sets, in the order they were sent.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    initialize: InitializeCall | None = None
    change_sets: list[ChangeSet] = []

    def summary(self) -> str:
        node_count = 0
        if self.initialize is not None:
            node_count = sum(
                _count_records(record) for record in self.initialize.children
            )

        return f"{node_count} initial nodes, {len(self.change_sets)} change sets"


class RecordingTarget(MirrorTarget):
    """
    Mirror target which records everything it receives, optionally
    forwarding to another target.
    """

    recording: Recording

    _forward: MirrorTarget | None

    def __init__(self, forward: MirrorTarget | None = None):
        self.recording = Recording(change_sets=[])
        self._forward = forward

    def initialize(self, root_id: int, children: list[NodeRecord]):
        if self.recording.initialize is not None:
            raise MirrorStateError("Recording already initialized")

        self.recording = Recording(
            initialize=InitializeCall(root_id=root_id, children=children),
            change_sets=self.recording.change_sets,
        )

        if self._forward is not None:
            self._forward.initialize(root_id, children)

    def apply_changed(self, change_set: ChangeSet):
        if self.recording.initialize is None:
            raise MirrorStateError(
                "Attempt to record changes before initializing"
            )

        self.recording.change_sets.append(change_set)

        if self._forward is not None:
            self._forward.apply_changed(change_set)


def replay(
    recording: Recording,
    mirror: MirrorTarget,
    *,
    steps: int | None = None,
    logger: Logger | None = None,
) -> int:
    """
    Initialize mirror from recording and apply up to `steps` change sets, or
    all of them if `steps` is `None`. Returns the number of change sets
    applied.
    """
    logger = logger or logging.getLogger()

    if recording.initialize is None:
        raise MirrorStateError("Recording has no initial snapshot")

    mirror.initialize(
        recording.initialize.root_id, recording.initialize.children
    )

    change_sets = (
        recording.change_sets if steps is None else recording.change_sets[:steps]
    )

    for index, change_set in enumerate(change_sets):
        logger.debug(f"Replaying change set {index}: {change_set.summary()}")
        mirror.apply_changed(change_set)

    return len(change_sets)


def _count_records(record: NodeRecord) -> int:
    return 1 + sum(_count_records(child) for child in record.child_nodes or [])
