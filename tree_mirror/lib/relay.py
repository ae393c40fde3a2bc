"""
Summarizer which forwards summaries produced by an external observer.
"""

from __future__ import annotations

import logging
from logging import Logger
from typing import Any

from ..core.exceptions import MirrorStateError
from ..core.summary import (
    MutationSummary,
    Subscription,
    Summarizer,
    SummaryCallback,
)

__all__ = [
    "RelaySummarizer",
    "RelaySubscription",
]


class RelaySubscription(Subscription):
    """
    Subscription to a {obj}`RelaySummarizer`.
    """

    root: Any
    queries: list[dict[str, Any]]
    callback: SummaryCallback

    _summarizer: RelaySummarizer

    def __init__(
        self,
        summarizer: RelaySummarizer,
        root: Any,
        queries: list[dict[str, Any]],
        callback: SummaryCallback,
    ):
        self._summarizer = summarizer
        self.root = root
        self.queries = queries
        self.callback = callback

    @property
    def active(self) -> bool:
        return self in self._summarizer._subscriptions

    def disconnect(self):
        if self.active:
            self._summarizer._subscriptions.remove(self)


class RelaySummarizer(Summarizer):
    """
    Delivers summaries passed to {obj}`RelaySummarizer.deliver` to every
    active subscription. It doesn't observe the tree itself; the host
    application (or a test) reports what changed.
    """

    _subscriptions: list[RelaySubscription]

    _delivering: bool = False
    """Whether a batch is currently being delivered"""

    _logger: Logger

    def __init__(self, *, logger: Logger | None = None):
        self._subscriptions = list()
        self._logger = logger or logging.getLogger()

    def subscribe(
        self,
        root: Any,
        queries: list[dict[str, Any]],
        callback: SummaryCallback,
    ) -> RelaySubscription:
        subscription = RelaySubscription(self, root, queries, callback)
        self._subscriptions.append(subscription)
        return subscription

    @property
    def subscriptions(self) -> list[RelaySubscription]:
        return list(self._subscriptions)

    def deliver(self, *summaries: MutationSummary):
        """
        Deliver one batch. Subscriptions with more queries than summaries
        provided get empty summaries for the remaining queries.
        """
        if self._delivering:
            raise MirrorStateError(
                "Attempt to deliver a batch while another is being delivered"
            )

        self._delivering = True
        try:
            for subscription in list(self._subscriptions):
                batch = list(summaries)
                batch += [
                    MutationSummary()
                    for _ in range(len(subscription.queries) - len(batch))
                ]

                self._logger.debug(
                    f"Delivering {len(batch)} summaries to {subscription.callback}"
                )
                subscription.callback(batch)
        finally:
            self._delivering = False
