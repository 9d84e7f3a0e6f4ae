"""Link record text format: line parser and document loader."""

from .loader import (
    DEFAULT_LINKS_PATH,
    format_link_set,
    load_head_link_set,
    load_workdir_link_set,
    parse_link_set,
)
from .parser import format_link, format_object, parse_link, parse_object

__all__ = [
    "DEFAULT_LINKS_PATH",
    "format_link",
    "format_link_set",
    "format_object",
    "load_head_link_set",
    "load_workdir_link_set",
    "parse_link",
    "parse_link_set",
    "parse_object",
]
