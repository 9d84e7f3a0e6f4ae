"""Repository capability backed by the ``git`` executable.

Every call is a blocking subprocess; no retries. Any non-zero git exit is
raised as ``RepositoryError`` carrying the command and git's stderr.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Iterator, Optional

from ..errors import RepositoryError
from ..logging import logger
from ..models.diff import BlobDiff
from .base import BLOB, CommitInfo, TreeEntry
from .blobdiff import build_blob_diff


def _clean_git_env() -> dict[str, str]:
    """Return environment with GIT_DIR/GIT_WORK_TREE removed.

    Inherited git context must not override the repository we discovered.
    """
    env = os.environ.copy()
    env.pop("GIT_DIR", None)
    env.pop("GIT_WORK_TREE", None)
    return env


def _run_git(args: list[str], cwd: Path) -> bytes:
    command = ["git", "--literal-pathspecs", *args]
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            env=_clean_git_env(),
            capture_output=True,
            check=True,
        )
    except FileNotFoundError as exc:
        raise RepositoryError("git executable not found", command=command) from exc
    except subprocess.CalledProcessError as exc:
        stderr = exc.stderr.decode("utf-8", errors="replace").strip()
        raise RepositoryError(
            f"git {args[0]} failed: {stderr or f'exit status {exc.returncode}'}",
            command=command,
            stderr=stderr,
        ) from exc
    return result.stdout


def _decode_path(raw: bytes) -> str:
    return raw.decode("utf-8", errors="surrogateescape")


def parse_commit_object(commit_id: str, raw: bytes) -> CommitInfo:
    """Parse the raw body printed by ``git cat-file commit``."""
    header, _, message = raw.partition(b"\n\n")
    tree = ""
    parents: list[str] = []
    for line in header.split(b"\n"):
        key, _, value = line.partition(b" ")
        if key == b"tree":
            tree = value.decode("ascii")
        elif key == b"parent":
            parents.append(value.decode("ascii"))
    if not tree:
        raise RepositoryError(f"commit {commit_id} has no tree header")
    return CommitInfo(
        id=commit_id,
        tree=tree,
        parents=tuple(parents),
        message=message.decode("utf-8", errors="replace"),
    )


def parse_ls_tree(raw: bytes) -> Iterator[TreeEntry]:
    """Parse ``git ls-tree -z`` records: ``<mode> <type> <id>\\t<path>``."""
    for record in raw.split(b"\0"):
        if not record:
            continue
        meta, _, path = record.partition(b"\t")
        mode, kind, object_id = meta.decode("ascii").split(" ")
        yield TreeEntry(path=_decode_path(path), id=object_id, kind=kind, mode=mode)


class GitRepository:
    """Read-only access to a git repository through the command line."""

    def __init__(self, git_dir: Path, workdir: Optional[Path] = None):
        self.git_dir = git_dir
        self.workdir = workdir

    @classmethod
    def discover(cls, start_path: Path | str | None = None) -> "GitRepository":
        """Open the repository containing ``start_path`` (default: cwd)."""
        start = Path(start_path) if start_path is not None else Path.cwd()
        git_dir = Path(_run_git(["rev-parse", "--absolute-git-dir"], start).decode().strip())
        is_bare = _run_git(["rev-parse", "--is-bare-repository"], start).decode().strip() == "true"
        workdir = None
        if not is_bare:
            workdir = Path(_run_git(["rev-parse", "--show-toplevel"], start).decode().strip())
        logger.debug(f"GitRepository: git_dir={git_dir} workdir={workdir}")
        return cls(git_dir=git_dir, workdir=workdir)

    @property
    def _cwd(self) -> Path:
        return self.workdir if self.workdir is not None else self.git_dir

    def _git(self, *args: str) -> bytes:
        return _run_git(list(args), self._cwd)

    def head_commit(self) -> str:
        return self._git("rev-parse", "--verify", "HEAD^{commit}").decode("ascii").strip()

    def read_commit(self, commit_id: str) -> CommitInfo:
        return parse_commit_object(commit_id, self._git("cat-file", "commit", commit_id))

    def iter_tree(self, tree_id: str) -> Iterator[TreeEntry]:
        # -t lists each tree before recursing into it, which gives pre-order.
        yield from parse_ls_tree(self._git("ls-tree", "-r", "-t", "-z", tree_id))

    def find_entry_by_id(self, tree_id: str, object_id: str) -> Optional[TreeEntry]:
        for entry in self.iter_tree(tree_id):
            if entry.kind == BLOB and entry.id == object_id:
                return entry
        return None

    def find_entry_by_path(self, tree_id: str, path: str) -> Optional[TreeEntry]:
        for entry in parse_ls_tree(self._git("ls-tree", "-z", tree_id, "--", path)):
            if entry.path == path:
                return entry
        return None

    def read_blob(self, blob_id: str) -> bytes:
        return self._git("cat-file", "blob", blob_id)

    def diff_blobs(
        self,
        old_id: Optional[str],
        new_id: Optional[str],
        name: str,
        context_lines: int = 3,
    ) -> BlobDiff:
        return build_blob_diff(
            name=name,
            old_id=old_id,
            new_id=new_id,
            old_content=self.read_blob(old_id) if old_id is not None else None,
            new_content=self.read_blob(new_id) if new_id is not None else None,
            context_lines=context_lines,
        )

    def read_workdir_file(self, path: str) -> Optional[bytes]:
        if self.workdir is None:
            return None
        file_path = self.workdir / path
        if not file_path.is_file():
            return None
        try:
            return file_path.read_bytes()
        except OSError as exc:
            raise RepositoryError(f"failed to read {file_path}: {exc}") from exc
