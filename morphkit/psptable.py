"""Part-of-speech and form frequency tables built from occurrence dumps."""

from __future__ import annotations

import errno
import sys
from typing import Callable, List, Optional, Sequence, Tuple

_HEX = "0123456789abcdefABCDEF"


def to_part_of_speech(ps: int) -> int:
    """Map a technical part of speech to its table group, 0 if not tabulated."""
    if 1 <= ps <= 6:
        return 1
    if ps in (7, 8, 9):
        return 7
    if ps in (13, 14, 15):
        return 13
    if ps in (16, 17, 18):
        return 16
    if ps in (25, 26):
        return 25
    if ps in (27, 38, 39, 40, 42, 44, 45, 46, 47):
        return ps
    return 0


def create_entry_offsets(mapper: Callable[[int], int]) -> List[int]:
    """Row index of each mapped part of speech; 0xff where there is none."""
    table: List[int] = []
    offset = 0
    for tech in range(256):
        dest = mapper(tech)
        if dest == 0:
            continue
        if len(table) < dest + 1:
            table.extend([0xFF] * (dest + 1 - len(table)))
        if table[dest] == 0xFF:
            table[dest] = offset
            offset += 1
    return table


def _skip_space(text: str, pos: int) -> int:
    while pos < len(text) and ord(text[pos]) <= 0x20:
        pos += 1
    return pos


def _strtoul(text: str, pos: int) -> Tuple[int, int]:
    """Read an unsigned C-style number; return value and end position."""
    start = pos
    pos = _skip_space(text, pos)
    negative = False
    if pos < len(text) and text[pos] in "+-":
        negative = text[pos] == "-"
        pos += 1
    if text[pos:pos + 2].lower() == "0x" and pos + 2 < len(text) and text[pos + 2] in _HEX:
        base, allowed, pos = 16, _HEX, pos + 2
    elif text[pos:pos + 1] == "0":
        base, allowed = 8, "01234567"
    else:
        base, allowed = 10, "0123456789"
    end = pos
    while end < len(text) and text[end] in allowed:
        end += 1
    if end == pos:
        return 0, start
    value = int(text[pos:end], base)
    return (-value if negative else value) & 0xFFFFFFFF, end


class PspTable:
    """Accumulates form frequencies by part of speech and renders the tables."""

    def __init__(self) -> None:
        self.entry_offsets = create_entry_offsets(to_part_of_speech)
        self.part_of_speech_prob: List[float] = []
        self.form_id_matrix: List[List[float]] = []

    def parse_line(self, line: str) -> None:
        """Parse ``psp, formid: count, formid: count, ...`` and add the counts."""
        part_sp, end = _strtoul(line, 0)
        if part_sp == 0 or part_sp > 63:
            raise ValueError("invalid file format, part of speach expected")
        end = _skip_space(line, end)
        if end >= len(line) or line[end] != ",":
            raise ValueError("invalid file format, comma expected after part of speach")
        mapped = to_part_of_speech(part_sp)
        if mapped == 0:
            return
        self._parse_forms(self.entry_offsets[mapped], line, _skip_space(line, end + 1))

    def _parse_forms(self, row: int, line: str, pos: int) -> None:
        while True:
            pos = _skip_space(line, pos)
            if pos >= len(line):
                return
            formid, end = _strtoul(line, pos)
            end = _skip_space(line, end)
            if end >= len(line) or line[end] != ":":
                raise ValueError("invalid file format, colon expected after form id")
            uoccur, end = _strtoul(line, _skip_space(line, end + 1))
            if uoccur == 0:
                raise ValueError("invalid file format, 0 frequency")
            end = _skip_space(line, end)
            if end < len(line) and line[end] != ",":
                raise ValueError("invalid file format, comma expected after frequency")
            if formid > 0xFF:
                raise ValueError(
                    "invalid file format, form identifier is grater than 0xff"
                )
            if formid != 0xFF:
                if len(self.form_id_matrix) <= row:
                    self.form_id_matrix.extend([] for _ in range(row + 1 - len(self.form_id_matrix)))
                forms = self.form_id_matrix[row]
                if len(forms) < formid + 1:
                    forms.extend([0.0] * (formid + 1 - len(forms)))
                forms[formid] += uoccur
            pos = end + 1 if end < len(line) else end

    def normalize(self) -> None:
        """Turn counts into form probabilities per row and row probabilities."""
        totals = []
        for row in self.form_id_matrix:
            total = sum(row)
            if total:
                row[:] = [value / total for value in row]
            totals.append(total)
        grand = sum(totals)
        self.part_of_speech_prob = [t / grand if grand else 0.0 for t in totals]

    def render(self) -> str:
        """Source text of the three tables."""
        out = [
            "namespace __libmorphrus__\n{\n",
            f"  unsigned char TableEntryOffset[{len(self.entry_offsets)}] =\n  {{\n",
        ]
        prefix = "    "
        for i, value in enumerate(self.entry_offsets):
            out.append(f"{prefix}0x{value:02x}")
            prefix = ",\n    " if i % 12 == 11 else ", "
        out.append("\n  };\n\n")

        out.append(f"  double  PartOfSpeachProb[{len(self.part_of_speech_prob)}] =\n  {{\n")
        prefix = "    "
        for i, value in enumerate(self.part_of_speech_prob):
            out.append(f"{prefix}{value:6.4f}")
            prefix = ",\n    " if i % 8 == 7 else ", "
        out.append("\n  };\n\n")

        rows = len(self.form_id_matrix)
        out.append(f"  double  FormIdProbMatrix[{rows}][256] =\n  {{\n")
        for index, row in enumerate(self.form_id_matrix):
            prefix = "    { "
            for i, value in enumerate(row):
                out.append(f"{prefix}{value:6.4f}")
                prefix = ",\n      " if i % 8 == 7 else ", "
            out.append(f" }}{',' if index < rows - 1 else ''}\n")
        out.append("  };\n")
        out.append("}\n")
        return "".join(out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Build the probability tables from a dump file and write them out."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        sys.stderr.write("Usage: psptable dump_pos.txt psp-fid-table.cpp\n")
        return errno.EINVAL
    source, output = args
    table = PspTable()
    try:
        with open(source, "r", encoding="utf-8", errors="replace") as stream:
            for line in stream:
                table.parse_line(line)
    except OSError:
        sys.stderr.write(f"could not open file '{source}'\n")
        return errno.ENOENT
    except ValueError as exc:
        sys.stderr.write(f"{exc}\n")
        return errno.EINVAL
    table.normalize()
    try:
        with open(output, "w", encoding="utf-8", newline="\n") as stream:
            stream.write(table.render())
    except OSError:
        sys.stderr.write(f"could not create file '{output}'\n")
        return errno.EACCES
    return 0


if __name__ == "__main__":
    sys.exit(main())