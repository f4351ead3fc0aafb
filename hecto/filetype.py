"""File type detection and lexical highlighting options."""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class HighlightingOptions:
    numbers: bool = False
    strings: bool = False
    quotes: str = "\"'"
    comment_marker: str = ""
    primary_keywords: frozenset = field(default_factory=frozenset)
    secondary_keywords: frozenset = field(default_factory=frozenset)

    @property
    def enabled(self) -> bool:
        return bool(
            self.numbers
            or self.strings
            or self.comment_marker
            or self.primary_keywords
            or self.secondary_keywords
        )


RUST = HighlightingOptions(
    numbers=True,
    strings=True,
    quotes='"',
    comment_marker="//",
    primary_keywords=frozenset({
        "as", "break", "const", "continue", "crate", "else", "enum", "extern",
        "false", "fn", "for", "if", "impl", "in", "let", "loop", "match", "mod",
        "move", "mut", "pub", "ref", "return", "self", "Self", "static", "struct",
        "super", "trait", "true", "type", "unsafe", "use", "where", "while",
        "dyn", "async", "await",
    }),
    secondary_keywords=frozenset({
        "bool", "char", "i8", "i16", "i32", "i64", "i128", "isize", "u8", "u16",
        "u32", "u64", "u128", "usize", "f32", "f64", "str", "String", "Vec",
        "Option", "Result", "Box",
    }),
)

PYTHON = HighlightingOptions(
    numbers=True,
    strings=True,
    comment_marker="#",
    primary_keywords=frozenset({
        "and", "as", "assert", "async", "await", "break", "class", "continue",
        "def", "del", "elif", "else", "except", "finally", "for", "from",
        "global", "if", "import", "in", "is", "lambda", "nonlocal", "not", "or",
        "pass", "raise", "return", "try", "while", "with", "yield",
    }),
    secondary_keywords=frozenset({
        "True", "False", "None", "self", "cls", "int", "str", "float", "bool",
        "list", "dict", "set", "tuple", "bytes", "object",
    }),
)

C = HighlightingOptions(
    numbers=True,
    strings=True,
    comment_marker="//",
    primary_keywords=frozenset({
        "break", "case", "continue", "default", "do", "else", "enum", "extern",
        "for", "goto", "if", "return", "sizeof", "static", "struct", "switch",
        "typedef", "union", "volatile", "while", "const",
    }),
    secondary_keywords=frozenset({
        "char", "double", "float", "int", "long", "short", "signed", "unsigned",
        "void", "size_t", "NULL",
    }),
)

PLAIN = HighlightingOptions()


@dataclass(frozen=True)
class FileType:
    name: str
    highlighting_options: HighlightingOptions

    @classmethod
    def from_filename(cls, filename) -> "FileType":
        if not filename:
            return cls.plain()
        ext = os.path.splitext(filename)[1].lower()
        for name, extensions, options in _FILE_TYPES:
            if ext in extensions:
                return cls(name, options)
        return cls.plain()

    @classmethod
    def plain(cls) -> "FileType":
        return cls("No filetype", PLAIN)


_FILE_TYPES = (
    ("Rust", (".rs",), RUST),
    ("Python", (".py", ".pyi"), PYTHON),
    ("C", (".c", ".h"), C),
)
