"""
Doc Comment Extraction

Source file → comments → merged blocks → declarations → identifier/comment
pairs, accumulated into one CommentMap for all input files.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .association import DocComment, associate
from .comments import merge_line_comments, scan_comments
from .declarations import count_nested_declarations, find_global_declarations
from .mapping import CommentMap
from .parsers.base_parser import ParseResult
from .parsers.parser_factory import MultiLanguageParser
from .reporting import Reporter, silent_reporter
from .sources import read_source


@dataclass
class FileExtraction:
    """Doc comments found in one file, plus its parse outcome."""
    path: str
    doc_comments: List[DocComment]
    result: ParseResult

    @property
    def errors(self) -> Tuple[str, ...]:
        return self.result.errors


def extract_source(source: str,
                   file_path: Union[str, Path],
                   parser: MultiLanguageParser,
                   reporter: Optional[Reporter] = None) -> FileExtraction:
    """
    Find the doc comments of source text.

    Args:
        source: Full text of the file
        file_path: Path used for positions and grammar selection
        parser: Front end for the file
        reporter: Receives lexical warnings and debug events

    Returns:
        FileExtraction with doc comments in declaration order
    """
    reporter = reporter if reporter is not None else silent_reporter()
    path = str(file_path)

    comments = merge_line_comments(scan_comments(source, path, reporter))
    result = parser.parse_source(source, file_path)
    decls = find_global_declarations(result.root)

    nested = count_nested_declarations(result.root)
    if nested:
        reporter.debug(f"{path}: ignoring {nested} nested declarations", path=path, nested=nested)

    doc_comments = associate(decls, comments)
    reporter.debug(f"{path}: {len(comments)} comments, {len(decls)} declarations, "
                   f"{len(doc_comments)} doc comments", path=path)
    return FileExtraction(path, doc_comments, result)


def extract_file(file_path: Union[str, Path],
                 parser: MultiLanguageParser,
                 reporter: Optional[Reporter] = None) -> FileExtraction:
    """
    Read a file and find its doc comments.

    Raises:
        OSError: If the file cannot be read
    """
    if reporter is not None:
        reporter.debug(f"parsing {str(file_path)!r}", path=str(file_path))
    return extract_source(read_source(file_path), file_path, parser, reporter)


def extract_files(file_paths: Iterable[Union[str, Path]],
                  comment_map: CommentMap,
                  parser: MultiLanguageParser,
                  reporter: Optional[Reporter] = None,
                  keep_partial: bool = False) -> List[FileExtraction]:
    """
    Extract doc comments from several files into comment_map.

    Files with syntax errors are reported and left out of the map unless
    keep_partial is set.

    Returns:
        The extraction of every file, merged or not
    """
    reporter = reporter if reporter is not None else comment_map.reporter
    extractions = []
    for file_path in file_paths:
        extraction = extract_file(file_path, parser, reporter)
        extractions.append(extraction)

        if extraction.errors:
            error = extraction.result.as_error()
            if not keep_partial:
                reporter.warning(f"{error}; skipping file", path=extraction.path,
                                 errors=list(extraction.errors))
                continue
            reporter.warning(f"{error}; using partial declarations", path=extraction.path,
                             errors=list(extraction.errors))

        for doc in extraction.doc_comments:
            comment_map.put(doc.identifier, doc.comment.literal)
    return extractions
