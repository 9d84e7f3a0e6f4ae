"""Line-based structural diff between two blob contents."""

from __future__ import annotations

import difflib
from typing import Optional

from ..models.diff import BlobDiff, DeltaStatus, DiffHunk, DiffLine, LineOrigin

# Same window git inspects before calling a blob binary.
BINARY_SAMPLE_SIZE = 8000
NO_NEWLINE_MESSAGE = "No newline at end of file"


def is_binary_content(content: Optional[bytes], sample_size: int = BINARY_SAMPLE_SIZE) -> bool:
    """Detect binary content by the presence of a NUL byte near the start."""
    if not content:
        return False
    return b"\x00" in content[:sample_size]


def _split_lines(content: Optional[bytes]) -> list[bytes]:
    """Split on LF only, keeping each terminator, as git does."""
    if not content:
        return []
    parts = content.split(b"\n")
    lines = [part + b"\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _diff_lines(
    origin: LineOrigin,
    raw: bytes,
    old_lineno: Optional[int] = None,
    new_lineno: Optional[int] = None,
) -> list[DiffLine]:
    text = raw.decode("utf-8", errors="replace")
    lines = [
        DiffLine(
            origin=origin,
            content=text.removesuffix("\n"),
            old_lineno=old_lineno,
            new_lineno=new_lineno,
        )
    ]
    if not raw.endswith(b"\n"):
        lines.append(DiffLine(origin=LineOrigin.NO_NEWLINE, content=NO_NEWLINE_MESSAGE))
    return lines


def _hunk_from_group(group, old: list[bytes], new: list[bytes]) -> DiffHunk:
    _, i1, _, j1, _ = group[0]
    _, _, i2, _, j2 = group[-1]
    lines: list[DiffLine] = []
    for tag, a1, a2, b1, b2 in group:
        if tag == "equal":
            for offset, raw in enumerate(old[a1:a2]):
                lines.extend(
                    _diff_lines(LineOrigin.CONTEXT, raw, a1 + offset + 1, b1 + offset + 1)
                )
            continue
        if tag in ("replace", "delete"):
            for offset, raw in enumerate(old[a1:a2]):
                lines.extend(_diff_lines(LineOrigin.DELETION, raw, old_lineno=a1 + offset + 1))
        if tag in ("replace", "insert"):
            for offset, raw in enumerate(new[b1:b2]):
                lines.extend(_diff_lines(LineOrigin.ADDITION, raw, new_lineno=b1 + offset + 1))

    old_lines = i2 - i1
    new_lines = j2 - j1
    # Unified diff convention: an empty range starts at the line before it.
    return DiffHunk(
        old_start=i1 + 1 if old_lines else i1,
        old_lines=old_lines,
        new_start=j1 + 1 if new_lines else j1,
        new_lines=new_lines,
        lines=tuple(lines),
    )


def build_blob_diff(
    *,
    name: str,
    old_id: Optional[str],
    new_id: Optional[str],
    old_content: Optional[bytes],
    new_content: Optional[bytes],
    context_lines: int = 3,
) -> BlobDiff:
    """Compare two blob contents. ``None`` ids mark an absent side."""
    if old_id is None and new_id is None:
        raise ValueError("diff needs at least one blob")

    if old_id is None:
        status = DeltaStatus.ADDED
    elif new_id is None:
        status = DeltaStatus.DELETED
    elif old_id == new_id:
        status = DeltaStatus.UNMODIFIED
    else:
        status = DeltaStatus.MODIFIED

    if status is DeltaStatus.UNMODIFIED:
        return BlobDiff(name=name, old_id=old_id, new_id=new_id, status=status)

    if is_binary_content(old_content) or is_binary_content(new_content):
        return BlobDiff(name=name, old_id=old_id, new_id=new_id, status=status, binary=True)

    old = _split_lines(old_content)
    new = _split_lines(new_content)
    matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)
    hunks = [
        _hunk_from_group(group, old, new)
        for group in matcher.get_grouped_opcodes(context_lines)
        if any(tag != "equal" for tag, *_ in group)
    ]
    return BlobDiff(name=name, old_id=old_id, new_id=new_id, status=status, hunks=tuple(hunks))
