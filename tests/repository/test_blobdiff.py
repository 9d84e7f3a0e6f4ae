import pytest

from kupli.models.diff import DeltaStatus, LineOrigin
from kupli.repository.blobdiff import build_blob_diff, is_binary_content

OLD = "1" * 40
NEW = "2" * 40


def test_is_binary_content():
    assert not is_binary_content(None)
    assert not is_binary_content(b"")
    assert not is_binary_content(b"plain text\n")
    assert is_binary_content(b"abc\x00def")
    assert not is_binary_content(b"a" * 8000 + b"\x00")


def test_distant_changes_produce_separate_hunks():
    old = "".join(f"line {i}\n" for i in range(1, 21)).encode()
    new = old.replace(b"line 2\n", b"line two\n").replace(b"line 19\n", b"line nineteen\n")
    diff = build_blob_diff(name="f", old_id=OLD, new_id=NEW, old_content=old, new_content=new)

    assert diff.status == DeltaStatus.MODIFIED
    assert [hunk.header for hunk in diff.hunks] == ["@@ -1,5 +1,5 @@", "@@ -16,5 +16,5 @@"]


def test_context_lines_setting():
    old = b"a\nb\nc\nd\ne\n"
    new = b"a\nb\nC\nd\ne\n"
    diff = build_blob_diff(name="f", old_id=OLD, new_id=NEW, old_content=old, new_content=new, context_lines=0)
    (hunk,) = diff.hunks
    assert hunk.header == "@@ -3,1 +3,1 @@"
    assert [line.origin for line in hunk.lines] == [LineOrigin.DELETION, LineOrigin.ADDITION]


def test_line_numbers_are_one_based():
    diff = build_blob_diff(name="f", old_id=OLD, new_id=NEW, old_content=b"a\nb\n", new_content=b"a\nb\nc\n")
    (hunk,) = diff.hunks
    added = [line for line in hunk.lines if line.origin == LineOrigin.ADDITION]
    assert [(line.content, line.old_lineno, line.new_lineno) for line in added] == [("c", None, 3)]
    context = [line for line in hunk.lines if line.origin == LineOrigin.CONTEXT]
    assert [(line.old_lineno, line.new_lineno) for line in context] == [(1, 1), (2, 2)]


def test_identical_ids_are_unmodified_without_reading_content():
    diff = build_blob_diff(name="f", old_id=OLD, new_id=OLD, old_content=None, new_content=None)
    assert diff.status == DeltaStatus.UNMODIFIED
    assert diff.hunks == ()


def test_both_sides_absent_is_rejected():
    with pytest.raises(ValueError):
        build_blob_diff(name="f", old_id=None, new_id=None, old_content=None, new_content=None)


def test_crlf_to_lf_is_reported_line_by_line():
    diff = build_blob_diff(name="f", old_id=OLD, new_id=NEW, old_content=b"a\r\nb\r\n", new_content=b"a\nb\n")
    (hunk,) = diff.hunks
    assert hunk.header == "@@ -1,2 +1,2 @@"
    assert [(line.origin, line.content) for line in hunk.lines] == [
        (LineOrigin.DELETION, "a\r"),
        (LineOrigin.DELETION, "b\r"),
        (LineOrigin.ADDITION, "a"),
        (LineOrigin.ADDITION, "b"),
    ]


def test_removed_final_newline_is_marked():
    diff = build_blob_diff(name="f", old_id=OLD, new_id=NEW, old_content=b"a\nb\n", new_content=b"a\nb")
    (hunk,) = diff.hunks
    assert hunk.header == "@@ -1,2 +1,2 @@"
    assert [(line.origin, line.content) for line in hunk.lines] == [
        (LineOrigin.CONTEXT, "a"),
        (LineOrigin.DELETION, "b"),
        (LineOrigin.ADDITION, "b"),
        (LineOrigin.NO_NEWLINE, "No newline at end of file"),
    ]
    marker = hunk.lines[-1]
    assert (marker.old_lineno, marker.new_lineno) == (None, None)


def test_only_line_feed_separates_lines():
    old = b"a\x0cb\x0bc\xc2\x85d\nC\n"
    new = b"a\x0cb\x0bc\xc2\x85d\nc\n"
    diff = build_blob_diff(name="f", old_id=OLD, new_id=NEW, old_content=old, new_content=new, context_lines=0)
    (hunk,) = diff.hunks
    assert hunk.header == "@@ -2,1 +2,1 @@"
    assert [(line.content, line.old_lineno, line.new_lineno) for line in hunk.lines] == [
        ("C", 2, None),
        ("c", None, 2),
    ]
