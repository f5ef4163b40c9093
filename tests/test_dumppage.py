import pytest

from morphkit.dumppage import BinaryDumper, format_bytes


class Blob:
    def serialize(self):
        return b"\x01\x02"


def test_format_bytes_single_line():
    assert format_bytes(bytes([0, 1, 255])) == "0x00,0x01,0xff"


def test_format_bytes_wraps():
    assert format_bytes(bytes([0, 1, 2]), 2) == "0x00,0x01,\n    0x02"


def test_format_bytes_empty():
    assert format_bytes(b"") == ""


def test_dump_with_header_and_namespace(tmp_path):
    with BinaryDumper(str(tmp_path), "ns", "// header", "out.cpp") as dumper:
        dumper.dump("table", bytes([0xAB]))
    text = (tmp_path / "out.cpp").read_text()
    assert text == (
        "// header\n"
        "namespace ns\n{\n\n"
        "  unsigned char table[] =\n  {\n    0xab\n  };\n"
        "\n}  // end namespace\n\n"
    )


def test_dump_uses_variable_name_as_file(tmp_path):
    dumper = BinaryDumper(out_dir=str(tmp_path) + "/")
    dumper.dump("stemtree", Blob())
    dumper.close()
    text = (tmp_path / "stemtree").read_text()
    assert text == "  unsigned char stemtree[] =\n  {\n    0x01,0x02\n  };\n"


def test_print_and_dump_share_file(tmp_path):
    with BinaryDumper(str(tmp_path), output="all.cpp") as dumper:
        dumper.print("  unsigned  ClassNumber = 2;\n").dump("a", b"\x00")
    text = (tmp_path / "all.cpp").read_text()
    assert text.startswith("  unsigned  ClassNumber = 2;\n")
    assert "unsigned char a[]" in text


def test_print_without_name_fails():
    with pytest.raises(ValueError):
        BinaryDumper().print("text")


def test_unwritable_directory(tmp_path):
    dumper = BinaryDumper(str(tmp_path / "missing"), output="x.cpp")
    with pytest.raises(OSError, match="could not create file"):
        dumper.dump("x", b"")