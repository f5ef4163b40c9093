import pytest

from morphkit.references import TableIndex


def test_missing_key_is_zero():
    index = TableIndex({"known": 7})
    assert index["unknown"] == 0
    assert index["known"] == 7


def test_bytes_keys_are_decoded():
    index = TableIndex({"таблица".encode("cp1251"): 12})
    assert index["таблица"] == 12
    assert index["таблица".encode("cp1251")] == 12


def test_round_trip():
    index = TableIndex({"a1": 3, "b2": 300, "слово": 65535})
    loaded = TableIndex.load(index.dump())
    assert len(loaded) == 3
    assert sorted(loaded) == sorted(index)
    for name in index:
        assert loaded[name] == index[name]


def test_empty_round_trip():
    loaded = TableIndex.load(TableIndex().dump())
    assert len(loaded) == 0


def test_contains():
    index = TableIndex({"x": 0})
    assert "x" in index
    assert "y" not in index


def test_truncated_data():
    data = TableIndex({"name": 1000}).dump()
    with pytest.raises(ValueError):
        TableIndex.load(data[:-1])