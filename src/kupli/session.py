"""
Resolution session - load link sets, index history, resolve fragments.

A session owns one repository handle. Work is single-threaded and every
repository call blocks; nothing is retried.

RECOVERY POLICY
---------------

- Format errors are recovered per source: a malformed HEAD copy does not
  stop the working-copy copy from loading, and vice versa.
- AnchorNotOnChain fails the whole link set (recorded as the report's
  ``error``); links are never silently skipped.
- Other resolution errors are recorded per fragment as LinkFailure.
- RepositoryError is never caught here; it aborts the session.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import KupliConfig, load_config
from .errors import AnchorNotOnChain, LinkFormatError, ResolutionError
from .history.chain import CommitChain, build_commit_chain
from .history.diff import DiffReporter, diff_transition
from .history.resolver import FragmentResolver
from .logging import configure_logging, logger
from .models.links import LinkSet
from .models.resolution import (
    LinkFailure,
    LinkSetFailure,
    LinkSetSources,
    LinkSource,
    ResolutionReport,
    Transition,
    TransitionDiff,
)
from .records.loader import load_head_link_set, load_workdir_link_set
from .repository.base import Repository
from .repository.git import GitRepository


class ResolutionSession:
    """
    One resolution run over one repository.

    Flow:
    1. Load link sets from HEAD and from the working copy
    2. Build the commit chain once (lazily, on first resolve)
    3. Resolve each fragment link against the shared chain
    4. Optionally diff each diverged transition
    """

    def __init__(self, repository: Repository, config: Optional[KupliConfig] = None):
        self.repository = repository
        self.config = config or KupliConfig()
        if self.config.log_level is not None:
            configure_logging(self.config.log_level)
        self._chain: Optional[CommitChain] = None

    @classmethod
    def discover(
        cls, path: Path | str | None = None, config: Optional[KupliConfig] = None
    ) -> "ResolutionSession":
        return cls(GitRepository.discover(path), config)

    # ========================================================================
    # Loading
    # ========================================================================

    def load_link_sets(self) -> LinkSetSources:
        sources = LinkSetSources()
        loaders = (
            ("head", load_head_link_set),
            ("workdir", load_workdir_link_set),
        )
        for source, loader in loaders:
            try:
                link_set = loader(self.repository, self.config.links_path)
            except LinkFormatError as exc:
                logger.warning(f"Invalid link record ignored ({source}): {exc}")
                sources.errors[source] = LinkSetFailure(
                    kind=exc.kind, message=exc.message, line_number=exc.line_number
                )
                continue
            setattr(sources, source, link_set)
        return sources

    # ========================================================================
    # Resolution
    # ========================================================================

    @property
    def chain(self) -> CommitChain:
        if self._chain is None:
            self._chain = build_commit_chain(self.repository)
            logger.info(f"ResolutionSession: indexed {len(self._chain.commits)} commits")
        return self._chain

    def resolve(self, link_set: LinkSet, source: LinkSource = "head") -> ResolutionReport:
        resolver = FragmentResolver(self.repository, self.chain)
        report = ResolutionReport(source=source, previous_commit=link_set.previous_commit)

        try:
            resolver.check_anchor(link_set.previous_commit)
        except AnchorNotOnChain as exc:
            logger.warning(f"ResolutionSession: {source} link set rejected: {exc}")
            report.error = LinkSetFailure(kind=exc.kind, message=str(exc), commit=exc.commit)
            return report

        for link in link_set.links:
            for index, fragment in link.fragments():
                try:
                    transition = resolver.resolve_fragment(
                        link_set.previous_commit,
                        fragment,
                        link_id=link.id,
                        object_index=index,
                    )
                except ResolutionError as exc:
                    logger.warning(f"ResolutionSession: link {link.id}[{index}] failed: {exc}")
                    report.failures.append(
                        LinkFailure(
                            link_id=link.id,
                            object_index=index,
                            kind=exc.kind,
                            message=str(exc),
                            commit=getattr(exc, "commit", None),
                        )
                    )
                    continue
                report.transitions.append(transition)

        logger.info(
            f"ResolutionSession: {source} resolved {len(report.transitions)} fragments, "
            f"{len(report.failures)} failed"
        )
        return report

    def resolve_all(
        self,
        *,
        with_diffs: bool = False,
        only: Optional[LinkSource] = None,
    ) -> tuple[LinkSetSources, list[ResolutionReport]]:
        sources = self.load_link_sets()
        reports = []
        for source, link_set in sources.items():
            if only is not None and source != only:
                continue
            report = self.resolve(link_set, source)
            if with_diffs:
                report.diffs = [
                    TransitionDiff(transition=transition, events=list(self.diff(transition)))
                    for transition in report.transitions
                    if transition.diverged
                ]
            reports.append(report)
        return sources, reports

    def diff(self, transition: Transition) -> DiffReporter:
        return diff_transition(
            self.repository, transition, context_lines=self.config.context_lines
        )


def resolve(
    path: Path | str | None = None,
    *,
    with_diffs: bool = False,
    config: Optional[KupliConfig] = None,
) -> list[ResolutionReport]:
    """
    Resolve the link sets of the repository containing ``path``.

    Returns one report per loaded source (HEAD first, then working copy).
    """
    session = ResolutionSession.discover(path, config or load_config())
    _, reports = session.resolve_all(with_diffs=with_diffs)
    return reports
