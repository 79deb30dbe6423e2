"""
Parsers Package

This package provides the C and C++ front ends with a unified interface.
All parsers implement the BaseParser interface and return an immutable
SyntaxNode tree inside a ParseResult.
"""

from .base_parser import BaseParser, NodeKind, ParseResult, SyntaxNode
from .cpp_parser import CParser, CppParser
from .parser_factory import MultiLanguageParser, ParserFactory, split_parser_args

__all__ = [
    'BaseParser', 'NodeKind', 'ParseResult', 'SyntaxNode', 'CParser', 'CppParser',
    'MultiLanguageParser', 'ParserFactory', 'split_parser_args',
]
