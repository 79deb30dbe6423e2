"""
Comment/Declaration Association

Pairs scanned comments with parsed declarations using nothing but their
positions, and plans where remembered comments go when injecting them back.

The pairing rule is a heuristic: a declaration adopts the closest comment
ending before it, provided that comment ends on the declaration's line or
the line above. A trailing comment on one declaration's line can therefore
end up documenting the declaration on the next line; that is accepted
behavior.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .comments import Comment
from .declarations import Declaration
from .mapping import CommentMap

# Largest line gap between a comment's last line and its declaration.
MAX_LINE_GAP = 1


@dataclass(frozen=True)
class DocComment:
    """A declaration together with the comment documenting it."""
    declaration: Declaration
    comment: Comment

    @property
    def identifier(self) -> str:
        return self.declaration.name


def associate(declarations: List[Declaration], comments: List[Comment]) -> List[DocComment]:
    """
    Attach comments to the declarations they document.

    Both lists must be sorted by position. A single cursor moves forward over
    the comments, so each comment is looked at once.

    Args:
        declarations: Declarations sorted by position
        comments: Comments (usually merged) sorted by position

    Returns:
        DocComments in declaration order
    """
    doc_comments = []
    i = 0  # current comment index
    for decl in declarations:
        candidate = None
        while i < len(comments) and comments[i].end_position.precedes(decl.position):
            candidate = comments[i]
            i += 1
        if candidate is not None and decl.line - candidate.end_line <= MAX_LINE_GAP:
            doc_comments.append(DocComment(decl, candidate))
    return doc_comments


def normalize_comment(comment: str) -> str:
    """Strip one leading slash from every '///' line."""
    lines = comment.replace("\r\n", "\n").split("\n")
    for i, line in enumerate(lines):
        if line.startswith("///"):
            lines[i] = line[1:]
    return "\n".join(lines)


def plan_insertions(declarations: List[Declaration],
                    comment_map: CommentMap,
                    existing: Optional[List[DocComment]] = None) -> Dict[int, str]:
    """
    Decide which comment to insert above which line.

    Args:
        declarations: Declarations of the file being rewritten
        comment_map: Remembered comments by identifier
        existing: Doc comments the file already has; a declaration whose
            current comment equals the remembered one is left alone

    Returns:
        Mapping from 1-based line number to the comment text to insert
    """
    present = {doc.declaration: doc.comment.literal for doc in existing or []}
    comments = {}
    for decl in declarations:
        comment, found = comment_map.get(decl.name)
        if not found:
            continue
        normalized = normalize_comment(comment)
        if present.get(decl) in (comment, normalized):
            continue
        comments[decl.line] = normalized
    return comments
