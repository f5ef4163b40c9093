"""Compiler of inflexion table sources into binary tables and a name index."""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence

from .ftable import FlexItem, FlexList, FlexTable
from .gramap import AF_ANIMATED, AF_NOT_ALIVE, GramMap, GramState
from .sourcefile import Source, open_source
from .textutil import log_message, trim

_TABLE_COMMANDS = (".таблица", ".table", ".тип", ".type")
_INCLUDE_COMMANDS = (".включить", ".include")

_ABOUT = (
    "libmorphrus inflexion tables compiler, version 1.0 (portable)\n"
    "Usage: tfc [options] inputname binaryname symbolsname\n"
    "Options are:\n"
    "\t-w\tassume source tables use 1251 Windows Cyrillic instead of 866;\n"
    "\t-lang:rus/ukr - set the tables description syntax, russian or ukrainian;"
    " the detault is russian.\n"
)


@lru_cache(maxsize=1)
def _default_grammar() -> GramMap:
    return GramMap.russian()


def _is_space(ch: str) -> bool:
    return ord(ch) <= 0x20


def _fields(line: str, count: int = 4) -> List[str]:
    size = len(line)

    def skip(pos: int) -> int:
        while pos < size and _is_space(line[pos]):
            pos += 1
        return pos

    fields = []
    pos = skip(0)
    for number in range(count):
        start = pos
        while pos < size and line[pos] != "," and not _is_space(line[pos]):
            pos += 1
        fields.append(line[start:pos])
        if number < count - 1:
            pos = skip(pos)
            if pos < size and line[pos] == ",":
                pos += 1
            pos = skip(pos)
    return fields


def _encode(text: str) -> bytes:
    return text.encode("cp1251", errors="replace")


def map_line(line: str, state: GramState, grammar: Optional[GramMap] = None) -> FlexItem:
    """Parse an inflexion line: tail, grammar, next table and optional table."""
    if grammar is None:
        grammar = _default_grammar()
    tail, grtext, next_name, options = _fields(line)
    if tail == "''":
        tail = ""
    if grtext:
        state = grammar.map_info(grtext, state)
    item = FlexItem(_encode(tail), state.grinfo, state.bflags)
    if next_name:
        item.bflags |= 0x80
        item.next = _encode(next_name)
    elif options:
        item.bflags |= 0x40
        item.next = _encode(options)
    return item


def has_command(line: str, command: str) -> bool:
    """True if ``line`` starts with ``command`` followed by a space."""
    size = len(command)
    return len(line) > size and line.startswith(command) and _is_space(line[size])


def make_table(source: Source, tables: FlexList, grammar: Optional[GramMap] = None) -> None:
    """Read one table declaration from ``source`` and add it to ``tables``."""
    if grammar is None:
        grammar = _default_grammar()
    state = GramState(0, AF_ANIMATED | AF_NOT_ALIVE)
    table = FlexTable()

    header = source.get()
    if not header:
        raise ValueError("unexpected end of file, table header expected")
    for command in _TABLE_COMMANDS:
        if has_command(header, command):
            header = header[len(command) + 1:]
            break
    else:
        raise ValueError("'.table' declaration followed by table index expected")

    header = trim(header)
    if not header:
        raise ValueError("unexpected end of line, table index expected")

    line = source.get()
    if not line:
        raise ValueError("unexpected end of file")
    if line != "{":
        raise ValueError("'{' expected")

    while True:
        line = source.get()
        if not line:
            raise ValueError("unexpected end of file")
        if line == "}":
            break
        if line.startswith("."):
            state = grammar.map_info(line[1:], state)
        else:
            table.insert(map_line(line, state, grammar))

    if not len(table):
        raise ValueError("invalid (empty) inflexion table")
    tables.insert(table, header)


def _where(source: Source) -> str:
    return f"\n\tfrom {source.name}, line {source.line}"


def compile_source(source: Source, tables: FlexList, grammar: Optional[GramMap] = None) -> None:
    """Compile every table and included file of ``source`` into ``tables``."""
    if grammar is None:
        grammar = _default_grammar()
    try:
        while True:
            line = source.get()
            if not line:
                break
            for command in _INCLUDE_COMMANDS:
                if has_command(line, command):
                    name = trim(line[len(command) + 1:])
                    break
            else:
                make_table(source.put(line), tables, grammar)
                continue
            if not name:
                raise ValueError("file name expected")
            with source.open(name) as nested:
                log_message(f"\t{name}\n")
                compile_source(nested, tables, grammar)
    except ValueError as exc:
        raise ValueError(f"{exc}{_where(source)}") from exc
    except OSError as exc:
        raise OSError(f"{exc}{_where(source)}") from exc


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Compile a table source into a binary tables file and a symbols file."""
    args = list(sys.argv[1:] if argv is None else argv)
    grammar = GramMap.russian()
    encoding = "cp866"
    names: List[str] = []

    for arg in args:
        if arg.startswith("-"):
            if arg == "-w":
                encoding = "cp1251"
                continue
            if arg == "-lang:rus":
                grammar = GramMap.russian()
                continue
            if arg == "-lang:ukr":
                grammar = GramMap.ukrainian()
                continue
            sys.stderr.write(f"Invalid switch '{arg}'!\n")
            return -1
        if len(names) == 3:
            break
        names.append(arg)

    if len(names) < 3:
        sys.stderr.write(_ABOUT)
        return -1
    inname, binname, symname = names

    log_message("Compiling tables...\n")
    tables = FlexList()
    try:
        with open_source(inname, encoding) as source:
            log_message(f"\t{inname}\n")
            compile_source(source, tables, grammar)
        tables.relocate()
    except (ValueError, OSError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return -1

    for path, data in ((binname, tables.store_tables()), (symname, tables.store_references())):
        try:
            Path(path).write_bytes(data)
        except OSError:
            sys.stderr.write(f"Could not create file '{path}'!\n")
            return -1
    return 0


if __name__ == "__main__":
    sys.exit(main())