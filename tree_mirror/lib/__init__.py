"""
Concrete collaborators for the core protocol: an in-memory host tree and a
summarizer which relays externally produced mutation summaries.
"""

from pyrollup import rollup

from . import memory, relay
from .memory import *  # noqa
from .relay import *  # noqa

__all__ = rollup(
    memory,
    relay,
)

__canonical_children__ = [
    "memory",
    "relay",
]
