"""Small text helpers: trimming, file loading, logging and code page conversion."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Union

TextLike = Union[str, bytes]


def _is_space(ch: Union[str, int]) -> bool:
    code = ch if isinstance(ch, int) else ord(ch)
    return code <= 0x20


def trim(text: TextLike) -> TextLike:
    """Strip control characters and spaces (codes up to 0x20) from both ends."""
    start = 0
    end = len(text)
    while start < end and _is_space(text[start]):
        start += 1
    while end > start and _is_space(text[end - 1]):
        end -= 1
    return text[start:end]


def load_source(path: Union[str, Path]) -> bytes:
    """Return the whole content of a file as bytes."""
    try:
        with open(path, "rb") as stream:
            return stream.read()
    except OSError as exc:
        raise OSError(f"could not open file '{path}'") from exc


def log_message(message: str) -> None:
    """Write a diagnostic message to standard error."""
    sys.stderr.write(message)
    sys.stderr.flush()


def utf8_to_1251(text: TextLike) -> bytes:
    """Convert UTF-8 text (bytes or str) to Windows-1251 bytes."""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    return text.encode("cp1251", errors="replace")


def to_codepage(encoding: str, data: TextLike) -> bytes:
    """Convert Windows-1251 bytes (or a str) to the given encoding."""
    if isinstance(data, bytes):
        data = data.decode("cp1251", errors="replace")
    return data.encode(encoding, errors="replace")