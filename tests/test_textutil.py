import pytest

from morphkit.textutil import load_source, log_message, to_codepage, trim, utf8_to_1251


def test_trim_str():
    assert trim("  \tabc def\r\n") == "abc def"


def test_trim_bytes():
    assert trim(b"\x01\x02x y\x20") == b"x y"


def test_trim_all_space():
    assert trim(" \t\n ") == ""


def test_trim_keeps_inner():
    text = "a  b"
    assert trim(text) == text


def test_load_source_round_trip(tmp_path):
    payload = bytes(range(256)) * 20
    path = tmp_path / "data.bin"
    path.write_bytes(payload)
    assert load_source(path) == payload


def test_load_source_missing(tmp_path):
    with pytest.raises(OSError, match="could not open file"):
        load_source(tmp_path / "missing.txt")


def test_log_message_goes_to_stderr(capsys):
    log_message("Loading dict...")
    captured = capsys.readouterr()
    assert captured.err == "Loading dict..."
    assert captured.out == ""


def test_utf8_to_1251_from_str():
    assert utf8_to_1251(".таблица") == ".таблица".encode("cp1251")


def test_utf8_to_1251_from_bytes():
    raw = "тип".encode("utf-8")
    assert utf8_to_1251(raw).decode("cp1251") == "тип"


def test_to_codepage_utf8():
    source = "включить".encode("cp1251")
    assert to_codepage("utf-8", source) == "включить".encode("utf-8")


def test_to_codepage_866_round_trip():
    source = "абвгд".encode("cp1251")
    assert to_codepage("cp866", source).decode("cp866") == "абвгд"