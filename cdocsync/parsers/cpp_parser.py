"""
C/C++ Parser Implementation

This module provides the C and C++ front ends using Tree-sitter. It implements
the BaseParser interface and turns the concrete syntax tree into the small
SyntaxNode tree the declaration extractor works on.

Features:
- Tree-sitter based C++ and C parsing
- Variable and function declaration detection (definitions and prototypes)
- Namespace members kept as children of their namespace
- Preprocessor conditional blocks (include guards) are transparent
- Partial trees with a list of syntax errors instead of exceptions
"""

from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

import tree_sitter_c
import tree_sitter_cpp
from tree_sitter import Language, Parser

from ..comments import SourcePosition
from ..sources import ENCODING, ERRORS, encode_source
from .base_parser import BaseParser, NodeKind, ParseResult, SyntaxNode

# Containers whose members belong to the enclosing scope.
_TRANSPARENT_BLOCKS = {
    'preproc_if', 'preproc_ifdef', 'preproc_else', 'preproc_elif',
    'preproc_elifdef', 'ERROR',
}

_DECLARATOR_WRAPPERS = {
    'init_declarator', 'pointer_declarator', 'array_declarator',
    'reference_declarator', 'function_declarator', 'parenthesized_declarator',
    'attributed_declarator',
}

_OBJECT_DECLARATORS = {'pointer_declarator', 'array_declarator', 'reference_declarator'}

MAX_REPORTED_ERRORS = 20

CPP_EXTENSIONS = {'.cpp', '.cxx', '.cc', '.c++', '.h', '.hh', '.hpp', '.hxx', '.inl'}
C_EXTENSIONS = {'.c'}


class CppParser(BaseParser):
    """C++ parser implementation using tree-sitter."""

    @property
    def language_name(self) -> str:
        """Return the language name for this parser."""
        return "cpp"

    file_extensions = CPP_EXTENSIONS

    def __init__(self, parser_args: Optional[List[str]] = None, reporter=None):
        """Initialize the parser."""
        super().__init__(parser_args, reporter)

        # Load tree-sitter language
        try:
            self.language = Language(self._grammar())
            self.parser = Parser()
            self.parser.language = self.language
        except Exception as e:
            raise RuntimeError(f"Failed to initialize {self.language_name} parser: {e}")

    def _grammar(self):
        return tree_sitter_cpp.language()

    def parse_source(self, source: str, file_path: Union[str, Path] = "") -> ParseResult:
        """
        Parse C/C++ source text into a SyntaxNode tree.

        Args:
            source: Full text of the file
            file_path: Path recorded in node positions

        Returns:
            ParseResult with the recovered tree and any syntax errors
        """
        path = str(file_path)
        data = encode_source(source)
        lines = data.split(b'\n')

        # The native tree stays local to this call.
        tree = self.parser.parse(data)
        root_node = tree.root_node
        members = tuple(self._convert_members(root_node, lines, path))
        errors = tuple(self._collect_errors(root_node, path)) if root_node.has_error else ()

        root = SyntaxNode(NodeKind.OTHER, None, SourcePosition(1, 1, path), members)
        self.reporter.debug(f"parsed {path or '<source>'} as {self.language_name}: "
                            f"{len(members)} top-level nodes, {len(errors)} errors",
                            path=path, language=self.language_name)
        return ParseResult(path, root, errors)

    def _convert_members(self, scope, lines: List[bytes], path: str) -> Iterator[SyntaxNode]:
        """Convert the declaration-level children of a scope node."""
        for child in scope.named_children:
            node_type = child.type

            if node_type == 'comment':
                continue

            if node_type in _TRANSPARENT_BLOCKS:
                yield from self._convert_members(child, lines, path)

            elif node_type == 'function_definition':
                kind, identifier = self._declared_identifier(child.child_by_field_name('declarator'))
                if identifier is not None and kind is NodeKind.FUNCTION:
                    yield self._declaration_node(kind, identifier, lines, path)
                else:
                    yield self._other_node(child, lines, path)

            elif node_type == 'declaration':
                found = False
                for declarator in child.children_by_field_name('declarator'):
                    kind, identifier = self._declared_identifier(declarator)
                    if identifier is not None:
                        found = True
                        yield self._declaration_node(kind, identifier, lines, path)
                if not found:
                    yield self._other_node(child, lines, path)

            elif node_type == 'namespace_definition':
                name_node = child.child_by_field_name('name')
                body = child.child_by_field_name('body')
                members = tuple(self._convert_members(body, lines, path)) if body is not None else ()
                yield SyntaxNode(
                    NodeKind.NAMESPACE,
                    self._text(name_node) if name_node is not None else None,
                    self._position(child.start_point, lines, path),
                    members,
                )

            else:
                yield self._other_node(child, lines, path)

    def _declared_identifier(self, declarator) -> Tuple[NodeKind, Optional[object]]:
        """
        Find the identifier a declarator declares and what it declares.

        The declarator operator closest to the identifier decides the kind:
        'int *f(void)' declares a function, 'int (*f)(void)' a variable.
        Qualified names, operators and destructors are not plain
        declarations and yield no identifier.
        """
        kind = NodeKind.VARIABLE
        current = declarator
        while current is not None:
            node_type = current.type
            if node_type == 'identifier':
                return kind, current
            if node_type not in _DECLARATOR_WRAPPERS:
                return kind, None
            if node_type == 'function_declarator':
                kind = NodeKind.FUNCTION
            elif node_type in _OBJECT_DECLARATORS:
                kind = NodeKind.VARIABLE
            current = self._inner_declarator(current)
        return kind, None

    def _inner_declarator(self, node):
        inner = node.child_by_field_name('declarator')
        if inner is not None:
            return inner
        # parenthesized/reference declarators have no field name
        named = [c for c in node.named_children if c.type != 'comment']
        return named[-1] if named else None

    def _declaration_node(self, kind: NodeKind, identifier, lines: List[bytes], path: str) -> SyntaxNode:
        return SyntaxNode(kind, self._text(identifier), self._position(identifier.start_point, lines, path))

    def _other_node(self, node, lines: List[bytes], path: str) -> SyntaxNode:
        return SyntaxNode(NodeKind.OTHER, None, self._position(node.start_point, lines, path))

    def _collect_errors(self, root, path: str) -> Iterator[str]:
        """Yield a message for each ERROR or MISSING node, in file order."""
        count = 0
        stack = [root]
        while stack and count < MAX_REPORTED_ERRORS:
            node = stack.pop()
            if node.type == 'ERROR' or node.is_missing:
                row, column = node.start_point
                what = f"missing '{node.type}'" if node.is_missing else "syntax error"
                count += 1
                yield f"{path}:{row + 1}:{column + 1}: {what}"
                if node.is_missing:
                    continue
            stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))

    @staticmethod
    def _text(node) -> str:
        return node.text.decode(ENCODING, errors=ERRORS)

    @staticmethod
    def _position(point, lines: List[bytes], path: str) -> SourcePosition:
        """Convert a tree-sitter (row, byte column) point to a character position."""
        row, byte_column = point
        line = lines[row] if row < len(lines) else b''
        column = len(line[:byte_column].decode(ENCODING, errors=ERRORS)) + 1
        return SourcePosition(row + 1, column, path)


class CParser(CppParser):
    """C parser implementation using tree-sitter."""

    @property
    def language_name(self) -> str:
        return "c"

    file_extensions = C_EXTENSIONS

    def _grammar(self):
        return tree_sitter_c.language()
