"""
Interface to the external mutation summarizer which observes a tree and
reports batches of changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

__all__ = [
    "MutationSummary",
    "Subscription",
    "Summarizer",
    "SummaryCallback",
    "ALL_QUERY",
]

ALL_QUERY: dict[str, Any] = {"all": True}
"""
Query observing every change in the subtree.
"""


@dataclass
class MutationSummary:
    """
    Net changes observed in one batch. Positions of nodes are read from the
    tree after the changes happened.
    """

    removed: list[Any] = field(default_factory=list)
    """Nodes no longer in the tree"""

    added: list[Any] = field(default_factory=list)
    """Nodes newly in the tree"""

    reparented: list[Any] = field(default_factory=list)
    """Nodes which changed parent"""

    reordered: list[Any] = field(default_factory=list)
    """Nodes which changed position under the same parent"""

    attribute_changed: dict[str, list[Any]] = field(default_factory=dict)
    """Mapping of attribute name to elements whose attribute changed"""

    character_data_changed: list[Any] = field(default_factory=list)
    """Text or comment nodes whose payload changed"""


SummaryCallback = Callable[[list[MutationSummary]], None]
"""
Callback receiving one summary per query, in query order.
"""


class Subscription(ABC):
    """
    Handle to an active subscription.
    """

    @abstractmethod
    def disconnect(self):
        """
        Stop delivering batches to the callback.
        """
        ...


class Summarizer(ABC):
    """
    Source of mutation summaries. Batches are delivered serially, never
    concurrently or reentrantly.
    """

    @abstractmethod
    def subscribe(
        self,
        root: Any,
        queries: list[dict[str, Any]],
        callback: SummaryCallback,
    ) -> Subscription:
        ...
