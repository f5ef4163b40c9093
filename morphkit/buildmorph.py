"""Building the stem dictionary and the lexeme index from dictionary sources."""

from __future__ import annotations

import bisect
from pathlib import Path
from typing import IO, Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .dumppage import BinaryDumper
from .serial import encode_varint, varint_length
from .textutil import log_message, trim
from .wordtree import WordTree

Stem = Union[str, bytes]
Resolver = Callable[[str], Iterable[Tuple[Stem, Any]]]

_LID_MARK = " LID:"
_C_SPACES = " \t\n\r\f\v"


def lexeme_key(nlexid: int) -> bytes:
    """Big-endian key bytes for a lexeme id, as short as the value allows.

    Ids that need four bytes keep only the top, the second lowest and the
    lowest byte.
    """
    if nlexid & ~0xFF == 0:
        return bytes([nlexid & 0xFF])
    if nlexid & ~0xFFFF == 0:
        return bytes([(nlexid >> 8) & 0xFF, nlexid & 0xFF])
    if nlexid & ~0xFFFFFF == 0:
        return bytes([(nlexid >> 16) & 0xFF, (nlexid >> 8) & 0xFF, nlexid & 0xFF])
    return bytes([(nlexid >> 24) & 0xFF, (nlexid >> 8) & 0xFF, nlexid & 0xFF])


def _parse_unsigned(text: str) -> int:
    """Read an unsigned number with C prefixes (0x hex, 0 octal); 0 if none."""
    s = text.lstrip(_C_SPACES)
    negative = False
    if s[:1] in ("+", "-"):
        negative = s[0] == "-"
        s = s[1:]
    if s[:2].lower() == "0x" and s[2:3] and s[2] in "0123456789abcdefABCDEF":
        base, s, allowed = 16, s[2:], "0123456789abcdefABCDEF"
    elif s[:1] == "0":
        base, allowed = 8, "01234567"
    else:
        base, allowed = 10, "0123456789"
    end = 0
    while end < len(s) and s[end] in allowed:
        end += 1
    value = int(s[:end], base) if end else 0
    if negative:
        value = -value
    return value & 0xFFFFFFFF


def _to_key(stem: Stem) -> bytes:
    if isinstance(stem, str):
        return stem.encode("cp1251", errors="replace")
    return bytes(stem)


def _encode_entries(entries: List[Any]) -> bytes:
    return encode_varint(len(entries)) + b"".join(e.serialize() for e in entries)


def _encode_offset(holder: List[int]) -> bytes:
    return encode_varint(holder[0])


class DictBuilder:
    """Collects stems from dictionary lines and writes the compiled trees.

    ``resolver(line)`` returns pairs of a stem and an entry; an entry has a
    settable ``nlexid``, supports ``<`` and has ``serialize()`` returning bytes.
    """

    def __init__(self, resolver: Resolver, license: str = "", encoding: str = "cp1251") -> None:
        self.resolver = resolver
        self.license = license
        self.encoding = encoding
        self.out_dir = ""
        self.namespace = ""
        self.unknowns_path = ""
        self.stems = WordTree(list, _encode_entries, counter_size=1)
        self.lids = WordTree(lambda: [0], _encode_offset, counter_size=2)
        self._unknowns: Optional[IO[str]] = None

    def read_dict(self, lines: Iterable[str]) -> None:
        """Add the words of dictionary lines to the stem tree."""
        for raw in lines:
            line = trim(raw)
            if not line:
                continue
            if line.startswith("//"):
                self.put_unknown(line)
                continue
            pos = line.find(_LID_MARK)
            if pos < 0:
                continue
            nlexid = _parse_unsigned(line[pos + len(_LID_MARK):])
            if nlexid == 0:
                continue
            stems = list(self.resolver(line))
            if not stems:
                self.put_unknown(line)
                continue
            for stem, entry in stems:
                entries = self.stems.insert(_to_key(stem))
                entry.nlexid = nlexid
                bisect.insort_left(entries, entry)

    def create_dict(self, paths: Sequence[Union[str, Path]]) -> None:
        """Read every dictionary file and dump the stem and lexeme trees."""
        for path in paths:
            try:
                stream = open(path, "r", encoding=self.encoding, errors="replace")
            except OSError as exc:
                raise OSError(f"Could not open file '{path}'!") from exc
            with stream:
                log_message(f"Loading {path}...")
                self.read_dict(stream)
                log_message(" OK\n")

        log_message(f"info: main dictionary size is {self.stems.buffer_length()} bytes.\n")

        def register(entries: List[Any], offset: int) -> None:
            offset += varint_length(len(entries))
            for entry in entries:
                self.lids.insert(lexeme_key(entry.nlexid))[0] = offset
                offset += len(entry.serialize())

        self.stems.enumerate(register)

        log_message(f"info: lids dictionary size is {self.lids.buffer_length()} bytes.\n")

        for name, tree in (("stemtree", self.stems), ("lidstree", self.lids)):
            with BinaryDumper(
                out_dir=self.out_dir,
                namespace=self.namespace,
                header=self.license,
                output=f"{name}.cpp",
            ) as dumper:
                dumper.dump(name, tree)

    def put_unknown(self, line: str) -> None:
        """Record a line that could not be resolved, if an unknowns file is set."""
        if self._unknowns is None:
            if not self.unknowns_path:
                return
            try:
                self._unknowns = open(self.unknowns_path, "w", encoding="cp1251", errors="replace")
            except OSError as exc:
                raise OSError(f"could not create file '{self.unknowns_path}'") from exc
        self._unknowns.write(f"{line}\n")

    def close(self) -> None:
        """Close the unknowns file if it was opened."""
        if self._unknowns is not None:
            self._unknowns.close()
            self._unknowns = None

    def __enter__(self) -> "DictBuilder":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()