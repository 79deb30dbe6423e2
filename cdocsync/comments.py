"""
Comment Scanning

This module finds the comments of a C/C++ source file without involving the
syntax tree. A small regex lexer walks the text and skips everything that can
hide comment delimiters (string, character and raw string literals, numbers
with digit separators, `#include <...>` header names), so the positions it
reports match what a compiler would see.

Features:
- SourcePosition / Comment value types
- Block and line comment scanning with 1-based positions
- Merging of stacked line comments into one documentation block
"""

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, Optional

from .reporting import Reporter


@dataclass(frozen=True, order=True)
class SourcePosition:
    """
    A 1-based line/column position in a source file.

    Ordering is lexicographic on (line, column); the path is carried along
    for messages only.
    """
    line: int
    column: int
    path: str = field(default="", compare=False)

    def precedes(self, other: "SourcePosition") -> bool:
        return self < other

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Comment:
    """
    A comment as it appears in the source, delimiters included.

    Attributes:
        literal: Comment text, e.g. '// foo' or '/* foo */'
        position: Position of the first character of the comment
    """
    literal: str
    position: SourcePosition

    @property
    def is_line_comment(self) -> bool:
        return self.literal.startswith("//")

    @property
    def end_line(self) -> int:
        return self.position.line + self.literal.count("\n")

    @property
    def end_position(self) -> SourcePosition:
        """Position of the last character of the comment."""
        last_newline = self.literal.rfind("\n")
        if last_newline < 0:
            column = self.position.column + len(self.literal) - 1
        else:
            column = len(self.literal) - last_newline - 1
        return SourcePosition(self.end_line, column, self.position.path)


_TOKEN_RE = re.compile(r"""
      (?P<line_comment>//[^\r\n]*)
    | (?P<block_comment>/\*.*?(?:(?P<block_end>\*/)|\Z))
    | (?P<raw_string>(?:u8|[uUL])?R"(?P<delim>[^()\\\s"]{0,16})\(.*?(?:(?P<raw_end>\)(?P=delim)")|\Z))
    | (?P<string>(?:u8|[uUL])?"(?:[^"\\\n]|\\.)*(?:(?P<string_end>")|$))
    | (?P<char>(?:u8|[uUL])?'(?:[^'\\\n]|\\.)*(?:(?P<char_end>')|$))
    | (?P<number>\.?\d(?:[eEpP][+-]|'(?=\w)|[\w.])*)
    | (?P<identifier>[A-Za-z_]\w*)
    | (?P<include>^[ \t]*\#[ \t]*(?:include|include_next|import)[ \t]*<[^>\n]*>)
    | (?P<directive>^[ \t]*\#)
    | (?P<continuation>\\\r?\n)
    | (?P<newline>\n)
""", re.VERBOSE | re.DOTALL | re.MULTILINE)

_TERMINATORS = {
    "string": "string_end",
    "char": "char_end",
    "raw_string": "raw_end",
}


def _line_starts(source: str) -> List[int]:
    starts = [0]
    for match in re.finditer("\n", source):
        starts.append(match.end())
    return starts


def _position(line_starts: List[int], offset: int, path: str) -> SourcePosition:
    index = bisect_right(line_starts, offset) - 1
    return SourcePosition(index + 1, offset - line_starts[index] + 1, path)


def scan_comments(source: str,
                  path: str = "",
                  reporter: Optional[Reporter] = None) -> List[Comment]:
    """
    Scan source text for comments.

    Args:
        source: Full text of a C/C++ file
        path: File path recorded in the comment positions
        reporter: Receives warnings about lexical errors

    Returns:
        Comments in file order
    """
    line_starts = _line_starts(source)
    comments = []
    in_directive = False

    def lexical_error(offset: int, message: str):
        # Directives are not fully lexed, so errors there are expected.
        if reporter is not None and not in_directive:
            position = _position(line_starts, offset, path)
            reporter.warning(f"{position}: {message}", path=path,
                             line=position.line, column=position.column)

    for match in _TOKEN_RE.finditer(source):
        kind = match.lastgroup
        text = match.group()

        if kind == "newline":
            in_directive = False
        elif kind in ("directive", "include"):
            in_directive = True
        elif kind in ("line_comment", "block_comment"):
            if kind == "block_comment" and match.group("block_end") is None:
                lexical_error(match.start(), "comment not terminated")
            literal = text.replace("\r\n", "\n")
            comments.append(Comment(literal, _position(line_starts, match.start(), path)))
            if "\n" in text:
                in_directive = False
        elif kind in _TERMINATORS and match.group(_TERMINATORS[kind]) is None:
            lexical_error(match.start(), f"{kind.replace('_', ' ')} literal not terminated")

    return comments


def merge_line_comments(comments: List[Comment]) -> List[Comment]:
    """
    Merge runs of line comments on consecutive lines into single comments.

    A '//' comment starting on the line right after the previous '//'
    comment's last line is appended to it, joined by a newline. Block
    comments are never merged.
    """
    merged: List[Comment] = []
    for comment in comments:
        if merged and _is_consecutive(merged[-1], comment):
            previous = merged[-1]
            merged[-1] = Comment(previous.literal + "\n" + comment.literal, previous.position)
        else:
            merged.append(comment)
    return merged


def _is_consecutive(a: Comment, b: Comment) -> bool:
    if not a.is_line_comment or not b.is_line_comment:
        return False
    return a.end_line + 1 == b.position.line
