"""Forward walks through first-parent history."""

from .chain import CommitChain, build_commit_chain
from .diff import DiffHandler, DiffReporter, diff_transition
from .resolver import FragmentResolver

__all__ = [
    "CommitChain",
    "DiffHandler",
    "DiffReporter",
    "FragmentResolver",
    "build_commit_chain",
    "diff_transition",
]
