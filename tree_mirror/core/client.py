"""
Source-side driver which keeps a mirror in sync with a live tree.
"""

from __future__ import annotations

import logging
from logging import Logger
from typing import Any

from .host import HostTree
from .mirror import MirrorTarget
from .serializer import Serializer
from .summary import ALL_QUERY, MutationSummary, Subscription, Summarizer

__all__ = [
    "MirrorClient",
]


class MirrorClient[NodeT]:
    """
    Sends the initial state of `target` to `mirror`, then subscribes to the
    summarizer and forwards one change set per mutation batch until
    {obj}`MirrorClient.disconnect` is invoked.

    Example:

    ```
    mirror = TreeMirror(mirror_root, MemoryTree(mirror_doc))
    client = MirrorClient(source_root, MemoryTree(source_doc), mirror, summarizer)
    ```
    """

    _target: NodeT
    """Root of source tree"""

    _mirror: MirrorTarget
    """Receiver of records, possibly a transport to another process"""

    _serializer: Serializer[NodeT]

    _subscription: Subscription | None = None
    """Active subscription, or `None` once disconnected"""

    _logger: Logger

    def __init__(
        self,
        target: NodeT,
        tree: HostTree[NodeT],
        mirror: MirrorTarget,
        summarizer: Summarizer,
        *,
        extra_queries: list[dict[str, Any]] | None = None,
        logger: Logger | None = None,
    ):
        """
        :param target: Root of subtree to mirror
        :param tree: Tree containing `target`
        :param mirror: Receiver of initial snapshot and change sets
        :param summarizer: Source of mutation summaries for `target`
        :param extra_queries: Queries to observe in addition to all changes; their summaries are delivered but not mirrored
        :param logger: Logger to use, or `None` to use default logger
        """
        self._target = target
        self._mirror = mirror
        self._logger = logger or logging.getLogger()
        self._serializer = Serializer(tree, logger=self._logger)

        root_record = self._serializer.snapshot(target)
        assert root_record is not None

        children = self._serializer.snapshot_children(target)

        self._mirror.initialize(root_record.id, children)

        self._logger.debug(
            f"Sent initial snapshot: root_id={root_record.id}, children={len(children)}"
        )

        queries = [ALL_QUERY] + (extra_queries or [])
        self._subscription = summarizer.subscribe(
            target, queries, self.apply_changed
        )

    @property
    def serializer(self) -> Serializer[NodeT]:
        return self._serializer

    @property
    def connected(self) -> bool:
        return self._subscription is not None

    def disconnect(self):
        """
        Stop receiving mutation batches. Safe to invoke more than once.
        """
        if self._subscription is not None:
            self._subscription.disconnect()
            self._subscription = None
            self._logger.debug("Disconnected from summarizer")

    def apply_changed(self, summaries: list[MutationSummary]):
        """
        Serialize one mutation batch and send it to the mirror. The first
        summary is the one observing all changes.
        """
        summary = summaries[0]

        change_set = self._serializer.build_change_set(summary)

        self._logger.debug(f"Sending change set: {change_set.summary()}")
        self._mirror.apply_changed(change_set)

        # forget only after records were built and sent, since removal
        # records reference the old ids
        self._serializer.forget(summary.removed)
