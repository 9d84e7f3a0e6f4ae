"""
Fragment resolver - follows fragment anchors forward through history.

For each fragment of a link:

1. The link set's ``previous_commit`` must have a successor on the commit
   chain; otherwise the whole set fails with AnchorNotOnChain.
2. In the anchor commit's tree, the first blob (pre-order) with the recorded
   blob id gives the tracked name.
3. Walk forward commit by commit, looking the tracked name up in each tree.
   A missing name stops the walk with NameVanished.
4. The first commit where the blob id differs is reported. Nothing past it
   is examined.
5. If head is reached without a difference, the transition points at head
   with the unchanged blob id.

KNOWN LIMITATIONS:
------------------
- Tracking is by name, so a rename breaks the walk (NameVanished). A
  rename-aware strategy can catch NameVanished and continue from there.
- Duplicate content in the anchor tree resolves to the first pre-order match.
"""

from __future__ import annotations

from uuid import UUID

from ..errors import AnchorNotOnChain, BlobNotFoundAtAnchor, NameVanished
from ..logging import logger
from ..models.links import Fragment, Link, LinkSet
from ..models.resolution import Transition
from ..repository.base import BLOB, Repository
from .chain import CommitChain


class FragmentResolver:
    """
    Resolves fragment anchors against one repository and one commit chain.

    The chain is read-only, so a resolver can serve many link sets in the
    same session.
    """

    def __init__(self, repository: Repository, chain: CommitChain):
        self.repository = repository
        self.chain = chain

    def check_anchor(self, anchor_commit: str) -> str:
        """Return the commit following ``anchor_commit`` on the chain."""
        start = self.chain.successor(anchor_commit)
        if start is None:
            raise AnchorNotOnChain(anchor_commit)
        return start

    def tracked_name(self, anchor_commit: str, blob_id: str) -> str:
        tree = self.repository.read_commit(anchor_commit).tree
        entry = self.repository.find_entry_by_id(tree, blob_id)
        if entry is None:
            raise BlobNotFoundAtAnchor(blob_id, anchor_commit)
        return entry.path

    def resolve_fragment(
        self,
        anchor_commit: str,
        fragment: Fragment,
        *,
        link_id: UUID,
        object_index: int = 0,
    ) -> Transition:
        self.check_anchor(anchor_commit)
        name = self.tracked_name(anchor_commit, fragment.blob_id)

        commit = anchor_commit
        current_id = fragment.blob_id
        for commit in self.chain.walk_forward(anchor_commit):
            tree = self.repository.read_commit(commit).tree
            entry = self.repository.find_entry_by_path(tree, name)
            if entry is None or entry.kind != BLOB:
                raise NameVanished(name, commit)
            current_id = entry.id
            if current_id != fragment.blob_id:
                logger.debug(f"FragmentResolver: {name} changed at {commit} ({fragment.blob_id} -> {current_id})")
                break
            logger.trace(f"FragmentResolver: {name} unchanged at {commit}")

        return Transition(
            link_id=link_id,
            object_index=object_index,
            name=name,
            old_blob_id=fragment.blob_id,
            commit=commit,
            new_blob_id=current_id,
        )

    def resolve_link(self, anchor_commit: str, link: Link) -> list[Transition]:
        """Resolve every fragment of ``link``; path objects are skipped."""
        return [
            self.resolve_fragment(anchor_commit, fragment, link_id=link.id, object_index=index)
            for index, fragment in link.fragments()
        ]

    def resolve_link_set(self, link_set: LinkSet) -> list[Transition]:
        """Resolve every fragment in ``link_set``, stopping at the first error."""
        self.check_anchor(link_set.previous_commit)
        transitions: list[Transition] = []
        for link in link_set.links:
            transitions.extend(self.resolve_link(link_set.previous_commit, link))
        logger.info(
            f"FragmentResolver: {len(transitions)} transitions from {len(link_set.links)} links "
            f"anchored at {link_set.previous_commit}"
        )
        return transitions
