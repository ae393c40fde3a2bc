"""
Utilities specific to CLI functionality.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from click import Parameter
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.tree import Tree
from typer import Context, Typer

from ...core import NodeType
from ...lib.memory import (
    MemoryCharacterData,
    MemoryDocumentType,
    MemoryElement,
    MemoryNode,
)

if TYPE_CHECKING:
    from .main import RootContext


console = Console()

rich_handler = RichHandler(
    console=console,
    rich_tracebacks=True,
    show_level=True,
    show_time=True,
    show_path=False,
)
rich_handler.setFormatter(logging.Formatter("%(message)s"))

logger = logging.getLogger("tree-mirror")
logger.setLevel(logging.INFO)
logger.addHandler(rich_handler)
logger.propagate = False


class MainTyper(Typer):
    """
    Typer app with preconfigured settings.
    """

    def __init__(self, name: str, *, help: str):
        return super().__init__(
            name=name,
            help=help,
            rich_markup_mode="markdown",
            no_args_is_help=True,
            add_completion=False,
        )


def get_root_context(ctx: Context) -> RootContext:
    from .main import RootContext

    root_context = ctx.obj
    assert isinstance(root_context, RootContext)
    return root_context


def lookup_param(ctx: Context, name: str) -> Parameter:
    """
    Lookup param by name.
    """
    param = next((p for p in ctx.command.params if p.name == name), None)
    assert param, f"Could not find param with name: {name}"
    return param


def render_tree(root: MemoryNode, *, label: str = "mirror") -> Tree:
    """
    Build rich tree of node's descendants for display.
    """
    tree = Tree(f"[bold]{escape(label)}[/bold]")
    _add_children(tree, root)
    return tree


def _add_children(tree: Tree, node: MemoryNode):
    for child in node.children:
        branch = tree.add(_node_label(child))
        _add_children(branch, child)


def _node_label(node: MemoryNode) -> str:
    type_str = str(NodeType(node.node_type))

    match node:
        case MemoryElement():
            attrs = " ".join(
                f"{escape(name)}=[green]'{escape(value)}'[/green]"
                for name, value in node.attributes.items()
            )
            return f"{type_str} [bold]{escape(node.tag_name)}[/bold] {attrs}".rstrip()
        case MemoryCharacterData():
            return f"{type_str} {escape(repr(node.data))}"
        case MemoryDocumentType():
            return f"{type_str} {escape(node.name)}"

    return type_str
