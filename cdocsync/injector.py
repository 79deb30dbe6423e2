"""
Doc Comment Injection

CommentMap + source file → declarations → line insertions → rewritten text.
A file is only written back when its text actually changes.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .association import associate, plan_insertions
from .comments import merge_line_comments, scan_comments
from .declarations import find_global_declarations
from .mapping import CommentMap
from .parsers.parser_factory import MultiLanguageParser
from .reporting import Reporter, silent_reporter
from .rewriter import rewrite_lines
from .sources import read_source, write_source


@dataclass
class FileInjection:
    """Outcome of injecting comments into one file."""
    path: str
    text: str
    changed: bool
    insertions: Dict[int, str]
    errors: Tuple[str, ...] = ()


def inject_source(source: str,
                  file_path: Union[str, Path],
                  comment_map: CommentMap,
                  parser: MultiLanguageParser,
                  reporter: Optional[Reporter] = None) -> FileInjection:
    """
    Insert remembered doc comments into source text.

    Syntax errors are reported and the declarations the parser still
    recovered are used.

    Args:
        source: Full text of the file
        file_path: Path used for positions and grammar selection
        comment_map: Remembered comments by identifier
        parser: Front end for the file
        reporter: Receives warnings and debug events

    Returns:
        FileInjection holding the new text
    """
    reporter = reporter if reporter is not None else silent_reporter()
    path = str(file_path)

    result = parser.parse_source(source, file_path)
    if not result.ok:
        reporter.warning(f"{result.as_error()}; continuing with partial declarations",
                         path=path, errors=list(result.errors))

    decls = find_global_declarations(result.root)
    existing = associate(decls, merge_line_comments(scan_comments(source, path, reporter)))
    insertions = plan_insertions(decls, comment_map, existing)
    text, changed = rewrite_lines(source, insertions)
    return FileInjection(path, text, changed, insertions, result.errors)


def inject_file(file_path: Union[str, Path],
                comment_map: CommentMap,
                parser: MultiLanguageParser,
                reporter: Optional[Reporter] = None) -> FileInjection:
    """
    Read a file and compute its text with doc comments inserted.

    Raises:
        OSError: If the file cannot be read
    """
    return inject_source(read_source(file_path), file_path, comment_map, parser, reporter)


def inject_files(file_paths: Iterable[Union[str, Path]],
                 comment_map: CommentMap,
                 parser: MultiLanguageParser,
                 reporter: Optional[Reporter] = None,
                 dry_run: bool = False) -> List[FileInjection]:
    """
    Inject doc comments into several files, rewriting them in place.

    Args:
        dry_run: Compute the changes without writing any file

    Raises:
        OSError: If a file cannot be read or written
    """
    reporter = reporter if reporter is not None else comment_map.reporter
    injections = []
    for file_path in file_paths:
        injection = inject_file(file_path, comment_map, parser, reporter)
        injections.append(injection)
        if not injection.changed:
            continue
        if dry_run:
            reporter.debug(f"would add {len(injection.insertions)} comments to {injection.path!r}",
                           path=injection.path)
            continue
        reporter.debug(f"adding comments to {injection.path!r}", path=injection.path)
        write_source(file_path, injection.text)
    return injections
