"""Lossless reading and writing of source files."""

from pathlib import Path
from typing import Union

ENCODING = "utf-8"
# Undecodable bytes survive a read/write cycle unchanged.
ERRORS = "surrogateescape"


def read_source(file_path: Union[str, Path]) -> str:
    """Read a source file without any newline translation."""
    return Path(file_path).read_bytes().decode(ENCODING, errors=ERRORS)


def write_source(file_path: Union[str, Path], text: str):
    Path(file_path).write_bytes(text.encode(ENCODING, errors=ERRORS))


def encode_source(text: str) -> bytes:
    return text.encode(ENCODING, errors=ERRORS)
