"""
TreeMirror: replicate a live tree into an independently owned mirror using
incremental change sets.
"""

from pyrollup import rollup

from . import core, lib
from .core import *  # noqa
from .lib import *  # noqa

__all__ = rollup(core, lib)

__canonical_children__ = [
    "core",
    "lib",
]
