"""
Text Rewriting

Rebuilds a file's text with comments inserted above given lines. Every
original line is kept, unmodified and in order; output lines are joined with
'\\n' whatever the input used.
"""

from typing import Dict, Tuple


def rewrite_lines(text: str, insertions: Dict[int, str]) -> Tuple[str, bool]:
    """
    Insert comments before 1-based line numbers.

    Args:
        text: Original file text
        insertions: Line number -> comment text (may span several lines)

    Returns:
        (new_text, changed); changed is False when new_text equals text
    """
    if not insertions:
        return text, False

    lines = text.split("\n")
    new_lines = []
    for line_nr, line in enumerate(lines, start=1):
        if line_nr in insertions:
            new_lines.append(insertions[line_nr])
        if line.endswith("\r"):
            line = line[:-1]
        new_lines.append(line)

    new_text = "\n".join(new_lines)
    return new_text, new_text != text
