"""Line reader for table source files with comments and one-line push-back."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Optional, Union

_DEFAULT_ENCODING = "cp1251"


def _strip_comment(raw: bytes) -> bytes:
    start = 0
    while start < len(raw) and raw[start] <= 0x20:
        start += 1
    end = len(raw)
    pos = raw.find(b"//", start)
    while pos != -1:
        if pos == start or raw[pos - 1] <= 0x20:
            end = pos
            break
        pos = raw.find(b"//", pos + 1)
    while end > start and raw[end - 1] <= 0x20:
        end -= 1
    return raw[start:end]


class Source:
    """Reads non-empty, comment-stripped lines and tracks the line number."""

    def __init__(
        self,
        path: str,
        stream: IO[bytes],
        encoding: str = _DEFAULT_ENCODING,
    ) -> None:
        self.name = path
        self.encoding = encoding
        self.line = 0
        self._stream = stream
        self._pending: Optional[str] = None

    def open(self, name: str) -> "Source":
        """Open ``name`` relative to the folder of this source."""
        cut = max(self.name.rfind("/"), self.name.rfind("\\"))
        folder = self.name[: cut + 1]
        return open_source(folder + name, self.encoding)

    def get(self) -> str:
        """Return the next meaningful line, or an empty string at end of file."""
        if self._pending:
            line, self._pending = self._pending, None
            self.line += 1
            return line
        for raw in self._stream:
            text = _strip_comment(raw)
            self.line += 1
            if text:
                return text.decode(self.encoding, errors="replace")
        return ""

    def put(self, line: str) -> "Source":
        """Push a line back so that the next ``get`` returns it."""
        if self._pending:
            raise RuntimeError("source buffer overflow")
        self._pending = line
        self.line -= 1
        return self

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "Source":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def open_source(path: Union[str, Path], encoding: str = _DEFAULT_ENCODING) -> Source:
    """Open a source file for reading."""
    path = str(path)
    try:
        stream = open(path, "rb")
    except OSError as exc:
        raise OSError(f"could not open file '{path}'") from exc
    return Source(path, stream, encoding)