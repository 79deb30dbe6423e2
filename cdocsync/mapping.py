"""
Identifier → Comment Mapping

The sidecar mapping shared by both tools. Extraction accumulates it across
all input files; injection loads it once from JSON before touching any
source file.
"""

import json
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union

from .errors import SidecarError
from .reporting import Reporter, silent_reporter


class CommentMap:
    """
    Mapping from identifier to doc comment with last-write-wins semantics.

    Args:
        comments: Initial content
        reporter: Receives a warning for each conflicting write
    """

    def __init__(self,
                 comments: Optional[Dict[str, str]] = None,
                 reporter: Optional[Reporter] = None):
        self._comments: Dict[str, str] = dict(comments or {})
        self.reporter = reporter if reporter is not None else silent_reporter()

    def put(self, identifier: str, comment: str):
        """Store a comment, warning when it replaces a different one."""
        old = self._comments.get(identifier)
        if old is not None and old != comment:
            self.reporter.warning(
                f"doc comment for {identifier!r} already present; old {old!r}, new {comment!r}",
                identifier=identifier, old=old, new=comment,
            )
        self._comments[identifier] = comment

    def get(self, identifier: str) -> Tuple[str, bool]:
        """Return (comment, found); a missing identifier gives ('', False)."""
        if identifier in self._comments:
            return self._comments[identifier], True
        return "", False

    def to_dict(self) -> Dict[str, str]:
        return dict(sorted(self._comments.items()))

    def __len__(self) -> int:
        return len(self._comments)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._comments

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._comments))


def load_comment_map(json_path: Union[str, Path],
                     reporter: Optional[Reporter] = None) -> CommentMap:
    """
    Load a doc comments JSON file.

    Raises:
        OSError: If the file cannot be read
        SidecarError: If it is not a flat object of strings
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SidecarError(f"invalid JSON: {e}", json_path) from e
        except UnicodeDecodeError as e:
            raise SidecarError(f"not UTF-8: {e}", json_path) from e

    if not isinstance(data, dict):
        raise SidecarError(f"expected a JSON object, got {type(data).__name__}", json_path)
    for identifier, comment in data.items():
        if not isinstance(comment, str):
            raise SidecarError(f"comment for {identifier!r} is not a string", json_path)

    return CommentMap(data, reporter)


def save_comment_map(json_path: Union[str, Path], comment_map: CommentMap):
    """Write the mapping as JSON with sorted keys."""
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(comment_map.to_dict(), f, indent=2, sort_keys=True, ensure_ascii=False)
        f.write("\n")
