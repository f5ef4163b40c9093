import pytest

from morphkit import gramap
from morphkit.ftable import FlexList
from morphkit.ftables import FlexStripper, noun_levels
from morphkit.gramap import GramMap, GramState
from morphkit.references import TableIndex
from morphkit.sourcefile import open_source
from morphkit.tfc import compile_source, has_command, main, make_table, map_line

START = GramState(0, gramap.AF_ANIMATED | gramap.AF_NOT_ALIVE)

SAMPLE = """.table t1, t2
{
  a  // comment
  b , , t3
}
.table t3
{
  x
}
"""


def _write(path, text, encoding="cp1251"):
    path.write_bytes(text.encode(encoding))
    return path


def _compile(path):
    tables = FlexList()
    with open_source(path, "cp1251") as source:
        compile_source(source, tables)
    tables.relocate()
    return tables


def test_has_command():
    assert has_command(".table t1", ".table")
    assert not has_command(".table", ".table")
    assert not has_command(".tablet1", ".table")
    assert has_command(".таблица\tx", ".таблица")


def test_map_line_with_grammar_and_next():
    item = map_line("ab Р t2", START, GramMap.russian())
    assert item.tail == b"ab"
    assert item.grinfo == 1 << 12
    assert item.bflags & 0x80
    assert item.next == b"t2"


def test_map_line_optional_reference():
    item = map_line("'',,,opt", START)
    assert item.tail == b""
    assert item.bflags == START.bflags | 0x40
    assert item.next == b"opt"


def test_map_line_plain_tail_is_encoded():
    item = map_line("  ая  ", START)
    assert item.tail == "ая".encode("cp1251")
    assert item.next == b""
    assert item.bflags == START.bflags


def test_compile_collects_tables(tmp_path):
    tables = _compile(_write(tmp_path / "main.tab", SAMPLE))
    index = TableIndex.load(tables.store_references())
    assert sorted(index) == ["t1", "t2", "t3"]
    assert index["t1"] == index["t2"]
    blob = tables.store_tables()
    assert blob.startswith(b"inflex")
    assert blob[index["t1"] * 2] == 2


def test_compiled_reference_strips_nested_tail(tmp_path):
    tables = _compile(_write(tmp_path / "main.tab", SAMPLE))
    index = TableIndex.load(tables.store_references())
    stripper = FlexStripper(noun_levels(), tables.store_tables())
    assert stripper.strip(b"wordbx", 0, index["t1"]) == b"word"
    assert stripper.strip(b"worda", 0, index["t1"]) == b"word"


def test_include_is_relative_to_source(tmp_path):
    _write(tmp_path / "sub.tab", ".table inner\n{\n  z\n}\n")
    main_path = _write(tmp_path / "main.tab", ".include sub.tab\n.table outer\n{\n  y\n}\n")
    index = TableIndex.load(_compile(main_path).store_references())
    assert sorted(index) == ["inner", "outer"]


def test_missing_brace_reports_position(tmp_path):
    path = _write(tmp_path / "bad.tab", ".table t1\nx\n")
    with pytest.raises(ValueError) as info:
        _compile(path)
    message = str(info.value)
    assert "'{' expected" in message
    assert f"from {path}, line 2" in message


def test_empty_table_raises(tmp_path):
    path = _write(tmp_path / "empty.tab", ".table t1\n{\n}\n")
    with pytest.raises(ValueError, match="invalid \\(empty\\) inflexion table"):
        _compile(path)


def test_make_table_requires_declaration(tmp_path):
    path = _write(tmp_path / "x.tab", "a\n")
    with open_source(path, "cp1251") as source:
        with pytest.raises(ValueError, match="'.table' declaration"):
            make_table(source, FlexList())


def test_missing_include_raises_oserror(tmp_path):
    path = _write(tmp_path / "main.tab", ".include nothere.tab\n")
    with pytest.raises(OSError, match="nothere.tab"):
        _compile(path)


def test_main_writes_outputs(tmp_path):
    src = _write(tmp_path / "main.tab", SAMPLE, "cp866")
    binary = tmp_path / "out.bin"
    symbols = tmp_path / "out.sym"
    assert main([str(src), str(binary), str(symbols)]) == 0
    assert binary.read_bytes().startswith(b"inflex")
    assert sorted(TableIndex.load(symbols.read_bytes())) == ["t1", "t2", "t3"]


def test_main_language_switch(tmp_path):
    src = _write(tmp_path / "main.tab", ".table t\n{\n.fem\n  a\n}\n", "cp866")
    outputs = [str(tmp_path / "o.bin"), str(tmp_path / "o.sym")]
    assert main([str(src), *outputs]) == -1
    assert main(["-lang:ukr", str(src), *outputs]) == 0


def test_main_usage_and_bad_switch(tmp_path):
    assert main([]) == -1
    assert main(["-x", "a", "b", "c"]) == -1
    assert main([str(tmp_path / "missing.tab"), "b", "c"]) == -1