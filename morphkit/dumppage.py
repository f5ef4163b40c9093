"""Writing binary tables as C array source files."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Optional


def format_bytes(data: bytes, per_line: int = 12) -> str:
    """Format bytes as comma-separated hex literals, ``per_line`` per line."""
    parts = []
    for index, byte in enumerate(bytes(data)):
        if index == 0:
            sep = ""
        elif index % per_line == 0:
            sep = ",\n    "
        else:
            sep = ","
        parts.append(f"{sep}0x{byte:02x}")
    return "".join(parts)


class BinaryDumper:
    """Writes arrays and text into one source file, opened on first use."""

    def __init__(
        self,
        out_dir: str = "",
        namespace: str = "",
        header: str = "",
        output: str = "",
    ) -> None:
        self.out_dir = out_dir
        self.namespace = namespace
        self.header = header
        self.output = output
        self._stream: Optional[IO[str]] = None

    def _open(self, name: Optional[str]) -> IO[str]:
        if self._stream is None:
            filename = self.output or name
            if not filename:
                raise ValueError("no output file name given")
            slash = "/" if self.out_dir and self.out_dir[-1] not in "/\\" else ""
            path = self.out_dir + slash + filename
            try:
                self._stream = Path(path).open("w", encoding="utf-8", newline="\n")
            except OSError as exc:
                raise OSError(f"could not create file '{path}'") from exc
            if self.header:
                self._stream.write(f"{self.header}\n")
            if self.namespace:
                self._stream.write(f"namespace {self.namespace}\n{{\n\n")
        return self._stream

    def print(self, text: str) -> "BinaryDumper":
        """Write raw text to the output file."""
        self._open(None).write(text)
        return self

    def dump(self, name: str, data: Any) -> "BinaryDumper":
        """Write ``data`` (bytes or an object with ``serialize()``) as an array."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            data = data.serialize()
        stream = self._open(name)
        stream.write(f"  unsigned char {name}[] =\n  {{\n    ")
        stream.write(format_bytes(data))
        stream.write("\n  };\n")
        return self

    def close(self) -> None:
        """Finish the namespace block and close the file."""
        if self._stream is not None:
            if self.namespace:
                self._stream.write("\n}  // end namespace\n\n")
            self._stream.close()
            self._stream = None

    def __enter__(self) -> "BinaryDumper":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()