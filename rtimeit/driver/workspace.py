# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Scoped workspace for the generated benchmark project.

Every run gets its own temporary directory holding Cargo.toml and the bench
source. The directory exists for exactly as long as the run: it is created on
entry and removed on every way out, including build failures, run failures,
Ctrl-C and SIGTERM (which the CLI turns into SystemExit).

Failing to delete the directory is logged and otherwise ignored. It never
turns a successful comparison into a failed one, or the other way round.
"""

import shutil
import tempfile
from pathlib import Path
from types import TracebackType
from typing import Mapping

from rtimeit.logging.logger import get_logger
from rtimeit.utils.filesystem import atomic_write

logger = get_logger(__name__)

WORKSPACE_PREFIX = "rtimeit_"


def _validate_workspace_path(path: Path, workspace_root: Path) -> None:
    """
    Make sure a path doesn't escape the workspace.

    File names come from the synthesizer, not the user, but a `../` in a
    relative path would still write outside the directory we promise to clean.
    """
    resolved = path.resolve()
    root_resolved = workspace_root.resolve()
    if resolved != root_resolved and root_resolved not in resolved.parents:
        raise ValueError(
            f"Path escapes workspace: {path} resolves outside {workspace_root}"
        )


def create_workspace(
    files: Mapping[str, str],
    base_dir: Path | None = None,
) -> Path:
    """
    Create a temporary directory and write the project files into it.

    `files` maps POSIX-style relative paths to their content. Returns the
    workspace path. If writing fails, the half-built directory is removed
    before the error propagates.
    """
    workspace_dir = Path(tempfile.mkdtemp(
        prefix=WORKSPACE_PREFIX,
        dir=str(base_dir) if base_dir else None,
    ))

    try:
        for relative_path, content in sorted(files.items()):
            target = workspace_dir / relative_path
            _validate_workspace_path(target, workspace_dir)
            atomic_write(target, content)

        logger.debug(
            "Workspace created",
            extra={"path": str(workspace_dir), "files": sorted(files)},
        )
        return workspace_dir

    except BaseException:
        shutil.rmtree(workspace_dir, ignore_errors=True)
        raise


def cleanup_workspace(workspace_dir: Path) -> bool:
    """
    Remove a workspace directory and everything inside it.

    Returns True if the directory is gone afterwards. Failures are logged
    as warnings, never raised.
    """
    if not workspace_dir.exists():
        return True

    try:
        shutil.rmtree(workspace_dir)
    except OSError as err:
        logger.warning(
            "Could not remove workspace",
            extra={"path": str(workspace_dir), "error": str(err)},
        )
        return False

    logger.debug("Workspace cleaned up", extra={"path": str(workspace_dir)})
    return True


class Workspace:
    """
    Context manager that creates a workspace on enter and removes it on exit.

    Usage:
        with Workspace(synthesize(snippet)) as workspace_dir:
            # run cargo against workspace_dir / "Cargo.toml"
        # directory is gone here, whatever happened inside the block
    """

    def __init__(
        self,
        files: Mapping[str, str],
        base_dir: Path | None = None,
    ) -> None:
        self._files = dict(files)
        self._base_dir = base_dir
        self._workspace_dir: Path | None = None

    def __enter__(self) -> Path:
        self._workspace_dir = create_workspace(self._files, self._base_dir)
        return self._workspace_dir

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._workspace_dir is not None:
            cleanup_workspace(self._workspace_dir)
