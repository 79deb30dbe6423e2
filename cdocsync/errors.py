"""
Exception types shared by the extractor and the injector.

Fatal errors (unreadable sidecar, malformed JSON, unreadable source) surface as
CDocsError subclasses or OSError and end the run. ParsingError is raised by the
parser layer and is treated as a warning by the pipelines.
"""

from pathlib import Path
from typing import Optional, Union


class CDocsError(Exception):
    """Base class for all cdocsync errors."""


class ParsingError(CDocsError):
    """Exception raised when parsing fails."""

    def __init__(self, message: str, file_path: Optional[Union[str, Path]] = None):
        """
        Initialize parsing error.

        Args:
            message: Error message
            file_path: File that caused the error (if applicable)
        """
        self.file_path = file_path
        if file_path:
            super().__init__(f"Error parsing {file_path}: {message}")
        else:
            super().__init__(message)


class SidecarError(CDocsError):
    """Raised when the doc comments JSON file is malformed."""

    def __init__(self, message: str, json_path: Union[str, Path]):
        self.json_path = json_path
        super().__init__(f"{json_path}: {message}")
