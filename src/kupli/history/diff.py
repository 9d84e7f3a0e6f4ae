"""
Diff reporter - exposes a blob comparison as an ordered stream of events.

Per comparison the order is fixed:

    DeltaEvent, [BinaryEvent], (HunkEvent, LineEvent*)*

Consumers either pull from ``events()`` and stop whenever they like, or
hand a callback to ``walk()``. A callback stops the walk by returning
``False`` (reported as ``walk() -> False``) or by raising ``StopDiffWalk``,
which propagates to the caller unchanged.
"""

from __future__ import annotations

from typing import Callable, Iterator, Optional

from ..logging import logger
from ..models.diff import BinaryEvent, DeltaEvent, DiffEvent, HunkEvent, LineEvent
from ..models.resolution import Transition
from ..repository.base import Repository

DiffHandler = Callable[[DiffEvent], Optional[bool]]


class DiffReporter:
    """Lazy event view over ``repository.diff_blobs(old_id, new_id)``."""

    def __init__(
        self,
        repository: Repository,
        old_id: Optional[str],
        new_id: Optional[str],
        name: str,
        *,
        context_lines: int = 3,
    ):
        self.repository = repository
        self.old_id = old_id
        self.new_id = new_id
        self.name = name
        self.context_lines = context_lines

    def events(self) -> Iterator[DiffEvent]:
        diff = self.repository.diff_blobs(self.old_id, self.new_id, self.name, self.context_lines)
        yield DeltaEvent(name=diff.name, old_id=diff.old_id, new_id=diff.new_id, status=diff.status)
        if diff.binary:
            yield BinaryEvent(name=diff.name)
            return
        for hunk in diff.hunks:
            yield HunkEvent(
                header=hunk.header,
                old_start=hunk.old_start,
                old_lines=hunk.old_lines,
                new_start=hunk.new_start,
                new_lines=hunk.new_lines,
            )
            for line in hunk.lines:
                yield LineEvent(
                    origin=line.origin,
                    content=line.content,
                    old_lineno=line.old_lineno,
                    new_lineno=line.new_lineno,
                )

    def __iter__(self) -> Iterator[DiffEvent]:
        return self.events()

    def walk(self, handler: DiffHandler) -> bool:
        """Deliver every event to ``handler``. Returns False if it stopped early."""
        events = self.events()
        try:
            for event in events:
                if handler(event) is False:
                    logger.debug(f"DiffReporter: walk of {self.name} stopped at {event.type} event")
                    return False
        finally:
            events.close()
        return True


def diff_transition(
    repository: Repository, transition: Transition, *, context_lines: int = 3
) -> DiffReporter:
    """Diff reporter between a transition's old and new blobs."""
    return DiffReporter(
        repository,
        transition.old_blob_id,
        transition.new_blob_id,
        transition.name,
        context_lines=context_lines,
    )
