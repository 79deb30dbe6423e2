"""
Declaration Extraction

Selects the declarations whose doc comments are tracked: variables and
functions declared directly at file scope, or directly inside the one
namespace a file is wrapped in. Anything nested deeper (several or nested
namespaces, classes, extern "C" blocks, templates) is not supported and is
left out.
"""

from dataclasses import dataclass
from typing import List

from .comments import SourcePosition
from .parsers.base_parser import NodeKind, SyntaxNode


@dataclass(frozen=True)
class Declaration:
    """A top-level variable or function declaration."""
    name: str
    position: SourcePosition
    kind: NodeKind

    @property
    def line(self) -> int:
        return self.position.line


def _declaration_scopes(root: SyntaxNode) -> List[SyntaxNode]:
    scopes = [root]
    namespaces = [child for child in root.children if child.kind is NodeKind.NAMESPACE]
    if len(namespaces) == 1:
        scopes.append(namespaces[0])
    return scopes


def find_global_declarations(root: SyntaxNode) -> List[Declaration]:
    """
    Collect the supported declarations of a parsed file.

    Args:
        root: Root SyntaxNode of a ParseResult

    Returns:
        Declarations sorted by source position
    """
    decls = []
    for scope in _declaration_scopes(root):
        for child in scope.children:
            if child.is_declaration and child.name:
                decls.append(Declaration(child.name, child.position, child.kind))
    decls.sort(key=lambda decl: decl.position)
    return decls


def count_nested_declarations(root: SyntaxNode) -> int:
    """Number of declarations in the tree that find_global_declarations skips."""
    total = sum(1 for node in root.walk() if node.is_declaration and node.name)
    return total - len(find_global_declarations(root))
