"""
Link set loader.

A link record document is line-oriented UTF-8 text:

    <commit-id>
    <uuid> <object> <object>
    ...

The header names the commit the set was captured against. Loading is
all-or-nothing: a single malformed line rejects the whole document, since
the header-to-content correspondence can no longer be trusted.

Two sources exist: the copy committed in HEAD's tree and the copy in the
working directory. A missing source is ``None``, not an error.
"""

from __future__ import annotations

from typing import Optional

from ..errors import InvalidEncoding, InvalidHeaderCommit, LinkFormatError, MissingHeader
from ..logging import logger
from ..models.links import Link, LinkSet, is_object_id
from ..repository.base import BLOB, Repository
from .parser import format_link, parse_link

DEFAULT_LINKS_PATH = ".kupli/links"


def parse_link_set(text: str) -> LinkSet:
    """Parse a whole link record document."""
    lines = []
    # Only LF ends a line; a CR before it is dropped.
    for number, raw in enumerate(text.split("\n"), start=1):
        line = raw.removesuffix("\r")
        if line.strip(" "):
            lines.append((number, line))
    if not lines:
        raise MissingHeader("link record has no header commit line")

    header_number, header = lines[0]
    header = header.strip(" ")
    if not is_object_id(header):
        raise InvalidHeaderCommit(
            f"header is not a commit id: {header!r}", line_number=header_number
        )

    links: list[Link] = []
    for number, line in lines[1:]:
        try:
            links.append(parse_link(line))
        except LinkFormatError as exc:
            exc.line_number = number
            raise
    return LinkSet(previous_commit=header, links=tuple(links))


def format_link_set(link_set: LinkSet) -> str:
    """Render a LinkSet in the record format accepted by :func:`parse_link_set`."""
    lines = [link_set.previous_commit, *(format_link(link) for link in link_set.links)]
    return "\n".join(lines) + "\n"


def _decode(content: bytes, origin: str) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncoding(f"{origin} is not valid UTF-8: {exc}") from exc


def load_head_link_set(
    repository: Repository, links_path: str = DEFAULT_LINKS_PATH
) -> Optional[LinkSet]:
    """Load the link set committed in HEAD's tree."""
    head = repository.read_commit(repository.head_commit())
    entry = repository.find_entry_by_path(head.tree, links_path)
    if entry is None or entry.kind != BLOB:
        logger.info(f"No link record at {links_path} in HEAD ({head.id})")
        return None
    link_set = parse_link_set(_decode(repository.read_blob(entry.id), f"HEAD:{links_path}"))
    logger.debug(f"Loaded {len(link_set.links)} links from HEAD:{links_path}")
    return link_set


def load_workdir_link_set(
    repository: Repository, links_path: str = DEFAULT_LINKS_PATH
) -> Optional[LinkSet]:
    """Load the link set from the working copy, which may be ahead of HEAD."""
    content = repository.read_workdir_file(links_path)
    if content is None:
        logger.info(f"No link record at {links_path} in the working copy")
        return None
    link_set = parse_link_set(_decode(content, links_path))
    logger.debug(f"Loaded {len(link_set.links)} links from working copy {links_path}")
    return link_set
