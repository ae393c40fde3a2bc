"""
This module implements the synchronization protocol: identity registry, wire
records, the source-side serializer and the mirror-side applier.
"""

from pyrollup import rollup

from . import (
    client,
    delegate,
    exceptions,
    host,
    mirror,
    records,
    registry,
    serializer,
    summary,
    types,
)
from .client import *  # noqa
from .delegate import *  # noqa
from .exceptions import *  # noqa
from .host import *  # noqa
from .mirror import *  # noqa
from .records import *  # noqa
from .registry import *  # noqa
from .serializer import *  # noqa
from .summary import *  # noqa
from .types import *  # noqa

__all__ = rollup(
    types,
    records,
    registry,
    host,
    serializer,
    mirror,
    delegate,
    summary,
    client,
    exceptions,
)

__canonical_children__ = [
    "types",
    "records",
    "registry",
    "host",
    "serializer",
    "mirror",
    "delegate",
    "summary",
    "client",
    "exceptions",
]
