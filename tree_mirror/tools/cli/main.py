"""
Entry point of `tree-mirror` CLI.

Planned commands:

- `record`
    - Record change sets from a mirror client connected through a transport,
    once a transport is available
- `diff`
    - Compare two recordings by replaying both and diffing the resulting
    trees
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import dotenv
from click import BadParameter, ClickException
from pydantic import ValidationError
from rich.table import Table
from typer import Argument, Context, Exit, Option

from ...core import MirrorError, TreeMirror
from ...lib import HierarchyError, MemoryDocument, MemoryNode, MemoryTree
from ...lib.memory import to_markup
from ..config import DEFAULT_CONFIG_FILE, Config
from ..recording import Recording, replay as replay_recording
from ._utils import (
    MainTyper,
    console,
    get_root_context,
    logger,
    lookup_param,
    render_tree,
)

dotenv.load_dotenv()

app = MainTyper(
    "tree-mirror",
    help="TreeMirror CLI Toolkit",
)


@app.callback()
def main(
    ctx: Context,
    config_file: Path
    | None = Option(
        None,
        "--config",
        help=f".yaml file containing configuration; defaults to {DEFAULT_CONFIG_FILE} if it exists",
        envvar="TREE_MIRROR_CONFIG",
        dir_okay=False,
    ),
    log_level: str
    | None = Option(
        None,
        help="Logging level, overrides config file",
        envvar="TREE_MIRROR_LOG_LEVEL",
    ),
):
    # Load environment variables from .env file if it exists
    dotenv.load_dotenv(Path(".env").resolve(), override=True)

    root_context = RootContext.from_config(ctx=ctx, config_file=config_file)

    if log_level is not None:
        try:
            root_context.config = Config(
                log_level=log_level, delegate=root_context.config.delegate
            )
        except ValidationError as e:
            raise BadParameter(
                str(e), ctx=ctx, param=lookup_param(ctx, "log_level")
            )

    logger.setLevel(logging.getLevelName(root_context.config.log_level))

    ctx.obj = root_context


@app.command()
def replay(
    ctx: Context,
    recording_file: Path = Argument(
        help="Recording .yaml or .json file",
        dir_okay=False,
    ),
    steps: int
    | None = Option(
        None,
        "--steps",
        help="Number of change sets to apply after the initial snapshot, default all",
        min=0,
    ),
    markup: bool = Option(
        False,
        "--markup",
        help="Print mirror as markup instead of a tree",
    ),
):
    """
    Replay recording into an in-memory mirror and print the result
    """
    root_context = get_root_context(ctx)
    recording = _load_recording(ctx, recording_file)
    mirror = root_context.create_mirror()

    count = _replay(recording, mirror, recording_file, steps=steps)

    logger.info(
        f"Replayed '{recording_file}': initial snapshot + {count} change sets"
    )

    if markup:
        console.print(to_markup(mirror.root), markup=False, highlight=False)
    else:
        console.print(render_tree(mirror.root, label=recording_file.name))


@app.command()
def check(
    ctx: Context,
    recording_file: Path = Argument(
        help="Recording .yaml or .json file",
        dir_okay=False,
    ),
):
    """
    Validate recording and confirm it replays without errors
    """
    root_context = get_root_context(ctx)
    recording = _load_recording(ctx, recording_file)
    mirror = root_context.create_mirror()

    _replay(recording, mirror, recording_file)

    table = Table(title=f"{recording_file.name}: {recording.summary()}")
    table.add_column("#", justify="right")
    table.add_column("removed", justify="right")
    table.add_column("addedOrMoved", justify="right")
    table.add_column("attributes", justify="right")
    table.add_column("text", justify="right")

    for index, change_set in enumerate(recording.change_sets):
        table.add_row(
            str(index),
            str(len(change_set.removed)),
            str(len(change_set.added_or_moved)),
            str(len(change_set.attributes)),
            str(len(change_set.text)),
        )

    console.print(table)
    logger.info(f"Recording '{recording_file}' is consistent")


def run():
    app()


@dataclass(kw_only=True)
class RootContext:
    ctx: Context
    config: Config
    from_file: bool

    @classmethod
    def from_config(
        cls,
        *,
        ctx: Context,
        config_file: Path | None,
    ) -> RootContext:
        if config_file is None:
            default_file = Path(DEFAULT_CONFIG_FILE)
            if not default_file.is_file():
                return RootContext(ctx=ctx, config=Config(), from_file=False)
            config_file = default_file

        # ensure config file exists
        if not config_file.is_file():
            raise BadParameter(
                message=f"file does not exist: {config_file}",
                ctx=ctx,
                param=lookup_param(ctx, "config_file"),
            )

        # get config from file
        try:
            config = Config.load_yaml(config_file)
        except (ValueError, ValidationError) as e:
            raise BadParameter(
                f"failed to load config file '{config_file}': {e}",
                ctx=ctx,
                param=lookup_param(ctx, "config_file"),
            )

        return RootContext(ctx=ctx, config=config, from_file=True)

    def create_mirror(self) -> TreeMirror[MemoryNode]:
        """
        Create mirror rooted at a new in-memory document.
        """
        try:
            delegate = self.config.create_delegate()
        except ValueError as e:
            raise ClickException(str(e))

        return TreeMirror(
            MemoryDocument(), MemoryTree(), delegate=delegate, logger=logger
        )


def _load_recording(ctx: Context, recording_file: Path) -> Recording:
    try:
        return Recording.load_yaml(recording_file)
    except (ValueError, ValidationError) as e:
        raise BadParameter(
            f"failed to load recording '{recording_file}': {e}",
            ctx=ctx,
            param=lookup_param(ctx, "recording_file"),
        )


def _replay(
    recording: Recording,
    mirror: TreeMirror[MemoryNode],
    recording_file: Path,
    *,
    steps: int | None = None,
) -> int:
    try:
        return replay_recording(recording, mirror, steps=steps, logger=logger)
    except (MirrorError, HierarchyError) as e:
        logger.error(f"Failed to replay '{recording_file}': {e}")
        raise Exit(code=1)


if __name__ == "__main__":
    app()
