"""
Base Parser Interface

This module defines the abstract base class for the C/C++ front ends and the
immutable syntax tree they return.

Features:
- Abstract parser interface for consistent behavior
- SyntaxNode value tree (kind, name, position, children)
- ParseResult carrying partial trees together with their errors
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Set, Tuple, Union

from ..comments import SourcePosition
from ..errors import ParsingError
from ..reporting import Reporter, silent_reporter
from ..sources import read_source


class NodeKind(Enum):
    """Discriminant of a SyntaxNode."""
    VARIABLE = "variable"
    FUNCTION = "function"
    NAMESPACE = "namespace"
    OTHER = "other"


@dataclass(frozen=True)
class SyntaxNode:
    """
    Represents one node of a parsed file.

    Only the structure needed to locate declarations is kept: variable and
    function declarations, namespaces with their members, and opaque OTHER
    nodes for everything else at declaration level.

    Attributes:
        kind: What the node declares
        name: Spelled identifier (None for anonymous or OTHER nodes)
        position: Position of the identifier, or of the node start
        children: Member nodes (namespaces and the root only)
    """
    kind: NodeKind
    name: Optional[str]
    position: SourcePosition
    children: Tuple["SyntaxNode", ...] = ()

    @property
    def is_declaration(self) -> bool:
        return self.kind in (NodeKind.VARIABLE, NodeKind.FUNCTION)

    def walk(self) -> Iterator["SyntaxNode"]:
        """Yield this node and all descendants, top-down, each exactly once."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of parsing one file.

    A result with errors still holds whatever tree the parser recovered.
    """
    path: str
    root: SyntaxNode
    errors: Tuple[str, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return not self.errors

    def as_error(self) -> ParsingError:
        """Build a ParsingError summarizing the errors of this result."""
        summary = "; ".join(self.errors[:3])
        if len(self.errors) > 3:
            summary += f" (+{len(self.errors) - 3} more)"
        return ParsingError(summary, self.path)


class BaseParser(ABC):
    """
    Abstract base class for C/C++ front ends.

    Args:
        parser_args: Extra arguments from the command line ('-I', '-D', ...)
        reporter: Receives debug events
    """

    # File extensions mapped to this parser by ParserFactory
    file_extensions: Set[str] = set()

    def __init__(self,
                 parser_args: Optional[List[str]] = None,
                 reporter: Optional[Reporter] = None):
        self.parser_args = list(parser_args or [])
        self.reporter = reporter if reporter is not None else silent_reporter()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the programming language."""
        pass

    @abstractmethod
    def parse_source(self, source: str, file_path: Union[str, Path] = "") -> ParseResult:
        """
        Parse source text.

        Args:
            source: Full text of the file
            file_path: Path recorded in node positions

        Returns:
            ParseResult; syntax errors are listed in it rather than raised
        """
        pass

    def parse_file(self, file_path: Union[str, Path]) -> ParseResult:
        """
        Read and parse a file.

        Raises:
            OSError: If the file cannot be read
        """
        return self.parse_source(read_source(file_path), file_path)
