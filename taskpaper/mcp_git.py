"""Git commits for documents edited through the tool endpoints."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from dulwich import porcelain
from dulwich.repo import Repo

from taskpaper.errors import ToolError
from taskpaper.mcp_utils import _atomic_write

logger = logging.getLogger(__name__)


def _ensure_git_repo(library_root: Path) -> Repo:
    try:
        if (library_root / ".git").exists():
            return Repo(str(library_root))
        logger.info("Initializing git repository at %s", library_root)
        return porcelain.init(str(library_root))
    except Exception as exc:
        raise ToolError(
            "GIT_ERROR",
            "Git repository could not be initialized.",
            {"path": str(library_root)},
        ) from exc


def _commit_document_edit(
    repo: Repo, relative_path: PurePosixPath, operation: str
) -> str:
    repo.get_worktree().stage([relative_path.as_posix()])
    commit_sha = porcelain.commit(
        repo, message=f"{operation}: {relative_path.as_posix()}"
    )
    if isinstance(commit_sha, bytes):
        return commit_sha.decode("ascii")
    return str(commit_sha)


def _rollback_document_edit(
    repo: Repo | None,
    target_path: Path,
    relative_path: PurePosixPath,
    original_content: str,
) -> None:
    logger.warning("Rolling back edit to %s", relative_path.as_posix())
    _atomic_write(target_path, original_content)
    if repo is None:
        return
    try:
        repo.get_worktree().stage([relative_path.as_posix()])
    except Exception:
        logger.exception("Could not restage %s after rollback", relative_path.as_posix())
