"""
Parser Factory

This module provides a factory for creating the C and C++ front ends. The
grammar is chosen from the parser arguments when they name a language
('-x c', '-std=c99', '-std=gnu++17', ...) and from the file extension
otherwise.

Features:
- Parser registration system
- Language detection from parser arguments and file extensions
- Parser caching across the files of one run
"""

from pathlib import Path
from typing import Dict, List, Optional, Type, Union

from ..reporting import Reporter, silent_reporter
from .base_parser import BaseParser, ParseResult
from .cpp_parser import CParser, CppParser

AUTO = "auto"
DEFAULT_LANGUAGE = "cpp"

_X_LANGUAGES = {
    'c': 'c', 'c-header': 'c', 'cpp-output': 'c',
    'c++': 'cpp', 'c++-header': 'cpp', 'c++-cpp-output': 'cpp',
}


def split_parser_args(raw: Optional[Union[str, List[str]]]) -> List[str]:
    """
    Split a pipe-separated argument string ('-m32|-I./include').

    Empty entries are dropped; a list is returned unchanged (minus empties).
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.split('|')
    return [arg for arg in raw if arg]


def language_from_args(parser_args: List[str]) -> Optional[str]:
    """Return the language named by '-x'/'-std=' arguments, the last one winning."""
    language = None
    args = iter(parser_args)
    for arg in args:
        if arg == '-x':
            value = next(args, '')
        elif arg.startswith('-x'):
            value = arg[2:]
        elif arg.startswith('-std=') or arg.startswith('--std='):
            std = arg.split('=', 1)[1]
            language = 'cpp' if '++' in std else 'c'
            continue
        else:
            continue
        language = _X_LANGUAGES.get(value, language)
    return language


class ParserFactory:
    """
    Factory class for creating language-specific parsers.

    This factory manages parser registration and selects a parser for a
    file from its parser arguments and extension.
    """

    # Registry of available parsers
    _parsers: Dict[str, Type[BaseParser]] = {}
    _extension_map: Dict[str, str] = {}

    @classmethod
    def register_parser(cls, language: str, parser_class: Type[BaseParser]):
        """
        Register a parser for a specific language.

        Args:
            language: Language identifier (e.g., 'c', 'cpp')
            parser_class: Parser class implementing BaseParser; its
                file_extensions are mapped to this language
        """
        cls._parsers[language] = parser_class
        for ext in parser_class.file_extensions:
            cls._extension_map[ext.lower()] = language

    @classmethod
    def get_parser(cls,
                   language: str,
                   parser_args: Optional[List[str]] = None,
                   reporter: Optional[Reporter] = None) -> BaseParser:
        """
        Create a parser for the specified language.

        Raises:
            ValueError: If language is not supported
        """
        if language not in cls._parsers:
            available = list(cls._parsers.keys())
            raise ValueError(f"Unsupported language '{language}'. Available: {available}")

        parser_class = cls._parsers[language]
        return parser_class(parser_args=parser_args, reporter=reporter)

    @classmethod
    def detect_language(cls,
                        file_path: Union[str, Path],
                        parser_args: Optional[List[str]] = None,
                        default: str = AUTO) -> str:
        """
        Detect the language a file should be parsed as.

        Args:
            file_path: Path to the file
            parser_args: Parser arguments, which take precedence
            default: Configured language, used when not 'auto'

        Returns:
            Language identifier
        """
        language = language_from_args(parser_args or [])
        if language is not None:
            return language
        if default and default != AUTO:
            return default
        extension = Path(file_path).suffix.lower()
        return cls._extension_map.get(extension, DEFAULT_LANGUAGE)


# Register built-in parsers
ParserFactory.register_parser('cpp', CppParser)
ParserFactory.register_parser('c', CParser)


class MultiLanguageParser:
    """
    Parses each file with the appropriate front end.

    Parsers are created on first use and reused for later files.
    """

    def __init__(self,
                 parser_args: Optional[List[str]] = None,
                 language: str = AUTO,
                 reporter: Optional[Reporter] = None):
        """
        Initialize multi-language parser.

        Args:
            parser_args: Arguments forwarded to every parser
            language: 'auto', 'c' or 'cpp'
            reporter: Receives debug events
        """
        self.parser_args = split_parser_args(parser_args)
        self.language = language
        self.reporter = reporter if reporter is not None else silent_reporter()
        self._parser_cache: Dict[str, BaseParser] = {}

        ignored = [arg for arg in self.parser_args if not self._selects_language(arg)]
        if ignored:
            self.reporter.debug(f"parser arguments without effect on parsing: {' '.join(ignored)}",
                                ignored=ignored)

    def parser_for(self, file_path: Union[str, Path]) -> BaseParser:
        language = ParserFactory.detect_language(file_path, self.parser_args, self.language)
        if language not in self._parser_cache:
            self._parser_cache[language] = ParserFactory.get_parser(
                language, self.parser_args, self.reporter
            )
        return self._parser_cache[language]

    def parse_source(self, source: str, file_path: Union[str, Path]) -> ParseResult:
        return self.parser_for(file_path).parse_source(source, file_path)

    def parse_file(self, file_path: Union[str, Path]) -> ParseResult:
        return self.parser_for(file_path).parse_file(file_path)

    def _selects_language(self, arg: str) -> bool:
        return arg.startswith('-x') or arg.startswith('-std=') or arg.startswith('--std=') \
            or arg in _X_LANGUAGES
