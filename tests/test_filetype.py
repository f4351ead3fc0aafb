"""Tests for file type detection."""

import pytest

from hecto.filetype import PLAIN, PYTHON, RUST, FileType


@pytest.mark.parametrize("filename,name", [
    ("main.rs", "Rust"),
    ("src/lib.RS", "Rust"),
    ("script.py", "Python"),
    ("stubs.pyi", "Python"),
    ("prog.c", "C"),
    ("prog.h", "C"),
    ("notes.txt", "No filetype"),
    ("Makefile", "No filetype"),
    (None, "No filetype"),
    ("", "No filetype"),
])
def test_from_filename(filename, name):
    assert FileType.from_filename(filename).name == name


def test_options_follow_file_type():
    assert FileType.from_filename("a.rs").highlighting_options is RUST
    assert FileType.from_filename("a.py").highlighting_options is PYTHON
    assert FileType.plain().highlighting_options is PLAIN
    assert not PLAIN.enabled
    assert RUST.enabled
