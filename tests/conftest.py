import hashlib
import os
import shutil
import subprocess
from typing import Iterator, Optional

import pytest

from kupli.errors import RepositoryError
from kupli.logging import configure_logging
from kupli.repository.base import BLOB, TREE, CommitInfo, TreeEntry
from kupli.repository.blobdiff import build_blob_diff


def blob_id(content: bytes) -> str:
    return hashlib.sha1(b"blob %d\0" % len(content) + content).hexdigest()


class InMemoryRepository:
    """Repository capability over plain dicts, for unit tests."""

    def __init__(self):
        self.blobs: dict[str, bytes] = {}
        self.trees: dict[str, list[TreeEntry]] = {}
        self.commits: dict[str, CommitInfo] = {}
        self.head: Optional[str] = None
        self.workdir_files: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []

    blob_id = staticmethod(blob_id)

    def _tree(self, files: dict[str, bytes]) -> str:
        entries: list[TreeEntry] = []
        emitted_dirs: set[str] = set()
        for path in sorted(files):
            parts = path.split("/")
            for depth in range(1, len(parts)):
                directory = "/".join(parts[:depth])
                if directory not in emitted_dirs:
                    emitted_dirs.add(directory)
                    entries.append(TreeEntry(path=directory, id=hashlib.sha1(directory.encode()).hexdigest(), kind=TREE, mode="040000"))
            content = files[path]
            object_id = blob_id(content)
            self.blobs[object_id] = content
            entries.append(TreeEntry(path=path, id=object_id, kind=BLOB))
        tree_id = hashlib.sha1(repr([(e.path, e.id) for e in entries]).encode()).hexdigest()
        self.trees[tree_id] = entries
        return tree_id

    def commit(self, files: dict[str, bytes], message: str = "", parents: Optional[tuple[str, ...]] = None) -> str:
        if parents is None:
            parents = (self.head,) if self.head is not None else ()
        tree = self._tree(files)
        commit_id = hashlib.sha1(f"{tree}{parents}{message}{len(self.commits)}".encode()).hexdigest()
        self.commits[commit_id] = CommitInfo(id=commit_id, tree=tree, parents=parents, message=message)
        self.head = commit_id
        return commit_id

    def head_commit(self) -> str:
        if self.head is None:
            raise RepositoryError("HEAD does not point to a commit")
        return self.head

    def read_commit(self, commit_id: str) -> CommitInfo:
        self.calls.append(("read_commit", commit_id))
        try:
            return self.commits[commit_id]
        except KeyError:
            raise RepositoryError(f"commit {commit_id} not found") from None

    def iter_tree(self, tree_id: str) -> Iterator[TreeEntry]:
        yield from self.trees[tree_id]

    def find_entry_by_id(self, tree_id: str, object_id: str) -> Optional[TreeEntry]:
        for entry in self.iter_tree(tree_id):
            if entry.kind == BLOB and entry.id == object_id:
                return entry
        return None

    def find_entry_by_path(self, tree_id: str, path: str) -> Optional[TreeEntry]:
        for entry in self.iter_tree(tree_id):
            if entry.path == path:
                return entry
        return None

    def read_blob(self, blob_id: str) -> bytes:
        try:
            return self.blobs[blob_id]
        except KeyError:
            raise RepositoryError(f"blob {blob_id} not found") from None

    def diff_blobs(self, old_id, new_id, name, context_lines=3):
        return build_blob_diff(
            name=name,
            old_id=old_id,
            new_id=new_id,
            old_content=self.read_blob(old_id) if old_id is not None else None,
            new_content=self.read_blob(new_id) if new_id is not None else None,
            context_lines=context_lines,
        )

    def read_workdir_file(self, path: str) -> Optional[bytes]:
        return self.workdir_files.get(path)


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch):
    monkeypatch.delenv("KUPLI_LOG_LEVEL", raising=False)
    yield
    configure_logging(None)


@pytest.fixture
def repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def three_commit_repo(repo):
    """a.txt is X at C0, X at C1, Y at C2 (head)."""
    c0 = repo.commit({"a.txt": b"X\n", "b.txt": b"one\n"}, "c0")
    c1 = repo.commit({"a.txt": b"X\n", "b.txt": b"two\n"}, "c1")
    c2 = repo.commit({"a.txt": b"Y\n", "b.txt": b"two\n"}, "c2")
    return repo, (c0, c1, c2)


class GitWorkspace:
    """A real git repository under ``tmp_path`` driven through the git CLI."""

    _ENV = {
        "GIT_AUTHOR_NAME": "Test",
        "GIT_AUTHOR_EMAIL": "test@example.com",
        "GIT_COMMITTER_NAME": "Test",
        "GIT_COMMITTER_EMAIL": "test@example.com",
    }

    def __init__(self, root):
        self.root = root
        self.git("init", "-q")

    def git(self, *args: str) -> str:
        env = {**os.environ, **self._ENV}
        env.pop("GIT_DIR", None)
        env.pop("GIT_WORK_TREE", None)
        result = subprocess.run(["git", *args], cwd=self.root, env=env, capture_output=True, text=True, check=True)
        return result.stdout.strip()

    def write(self, files: dict[str, str]) -> None:
        for path, content in files.items():
            target = self.root / path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)

    def commit(self, files: dict[str, str], message: str) -> str:
        self.write(files)
        self.git("add", "-A")
        self.git("commit", "-q", "--allow-empty", "-m", message)
        return self.git("rev-parse", "HEAD")

    def blob(self, rev: str, path: str) -> str:
        return self.git("rev-parse", f"{rev}:{path}")


@pytest.fixture
def git_workspace(tmp_path) -> GitWorkspace:
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
    return GitWorkspace(tmp_path)
