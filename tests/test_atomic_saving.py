"""Test atomic file saving functionality."""

import errno
import os
import threading
from unittest import mock

from hecto.document import Document
from hecto.editor import describe_io_error


def test_failed_replace_keeps_original_file(tmp_path, make_editor):
    target = tmp_path / "keep.txt"
    target.write_text("Original content that should not be lost", encoding="utf-8")
    editor = make_editor(["New content that won't be saved"], filename=str(target))
    editor.document.insert_at(editor.cursor_position, "!")

    with mock.patch("hecto.document.os.replace", side_effect=PermissionError(errno.EACCES, "Permission denied")):
        editor.save()

    assert "Permission denied" in editor.message_bar()
    assert editor.document.is_dirty
    assert target.read_text(encoding="utf-8") == "Original content that should not be lost"
    # The temp file is cleaned up
    assert os.listdir(tmp_path) == ["keep.txt"]


def test_disk_full_is_reported(tmp_path, make_editor):
    editor = make_editor(["abc"], filename=str(tmp_path / "full.txt"))
    with mock.patch("hecto.document.os.fsync", side_effect=OSError(errno.ENOSPC, "No space left on device")):
        editor.save()
    assert editor.message_bar() == "Can't save file: No space left on device"
    assert not (tmp_path / "full.txt").exists()


def test_concurrent_saves_never_interleave(tmp_path):
    target = tmp_path / "shared.txt"
    target.write_text("Initial content", encoding="utf-8")

    def writer(thread_id):
        lines = [f"Content from thread {thread_id}"] * 100
        Document.from_lines(lines, filename=str(target)).save()

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lines = target.read_text(encoding="utf-8").split("\n")
    assert len(lines) == 100
    assert len(set(lines)) == 1
    assert lines[0].startswith("Content from thread")


def test_describe_io_error():
    assert describe_io_error(PermissionError(errno.EACCES, "denied")) == "Permission denied"
    assert describe_io_error(OSError(errno.ENOSPC, "full")) == "No space left on device"
    assert describe_io_error(OSError(errno.EIO, "I/O error")) == "I/O error"
    assert describe_io_error(UnicodeDecodeError("utf-8", b"\xff", 0, 1, "bad")) == "File is not valid UTF-8"
