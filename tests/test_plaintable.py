import pytest

from morphkit.plaintable import FlexTree, GramInfo, create_plain_table


def _entry(flags, grinfo, tail, nxt=None):
    data = bytes([flags]) + grinfo.to_bytes(2, "little") + bytes([len(tail)]) + tail
    if nxt is not None:
        data += nxt.to_bytes(2, "little")
    return data


def _table(*entries):
    data = bytes([len(entries)]) + b"".join(entries)
    if len(data) % 2:
        data += b"\x00"
    return data


def test_graminfo_serialize():
    assert GramInfo(0x0102, 3).serialize() == b"\x02\x01\x03"
    assert GramInfo().buffer_length() == len(GramInfo().serialize())


def test_flat_table_wire_format():
    tables = _table(_entry(0, 0x0001, b"a"), _entry(0, 0x0002, b"b"))
    expected = b"\x02" + b"b\x05\x80\x01\x02\x00\x00" + b"a\x05\x80\x01\x01\x00\x00"
    assert FlexTree(tables).build(0) == expected


def test_call_and_function_agree():
    tables = _table(_entry(0, 0x0001, b"a"), _entry(0, 0x0004, b"ov"))
    assert FlexTree(tables)(0) == create_plain_table(tables, 0)


def test_duplicate_entries_collapse():
    single = _table(_entry(0, 0x0001, b"a"))
    double = _table(_entry(0, 0x0001, b"a"), _entry(0, 0x0001, b"a"))
    assert create_plain_table(double, 0) == create_plain_table(single, 0)


def test_different_grams_on_same_tail_are_kept():
    single = _table(_entry(0, 0x0001, b"a"))
    double = _table(_entry(0, 0x0001, b"a"), _entry(0, 0x0002, b"a"))
    assert len(create_plain_table(double, 0)) == len(create_plain_table(single, 0)) + 3


def test_truncated_table_raises():
    with pytest.raises(ValueError):
        create_plain_table(b"\x01\x00\x01", 0)