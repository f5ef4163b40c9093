import errno

import pytest

from morphkit.psptable import PspTable, create_entry_offsets, main, to_part_of_speech

SOURCE_OFFSETS = [
    0xff, 0x00, 0xff, 0xff, 0xff, 0xff, 0xff, 0x01, 0xff, 0xff, 0xff, 0xff,
    0xff, 0x02, 0xff, 0xff, 0x03, 0xff, 0xff, 0xff, 0xff, 0xff, 0xff, 0xff,
    0xff, 0x04, 0xff, 0x05, 0xff, 0xff, 0xff, 0xff, 0xff, 0xff, 0xff, 0xff,
    0xff, 0xff, 0x06, 0x07, 0x08, 0xff, 0x09, 0xff, 0x0a, 0x0b, 0x0c, 0x0d,
]


def test_part_of_speech_groups():
    assert [to_part_of_speech(p) for p in range(1, 7)] == [1] * 6
    assert to_part_of_speech(26) == 25
    assert to_part_of_speech(42) == 42
    assert to_part_of_speech(10) == 0
    assert to_part_of_speech(0) == 0


def test_entry_offsets_match_source_table():
    assert create_entry_offsets(to_part_of_speech) == SOURCE_OFFSETS


def test_parse_line_accumulates():
    t = PspTable()
    t.parse_line("1, 0:3, 2:1\n")
    t.parse_line("2, 0:3")
    assert t.form_id_matrix == [[6.0, 0.0, 1.0]]


def test_parse_line_uses_row_of_group():
    t = PspTable()
    t.parse_line("7, 1:4")
    assert t.form_id_matrix[0] == []
    assert t.form_id_matrix[1] == [0.0, 4.0]


def test_parse_line_ignores_ff_and_unmapped():
    t = PspTable()
    t.parse_line("10, 0:5")
    t.parse_line("1, 0xff:5")
    assert t.form_id_matrix == []


@pytest.mark.parametrize(
    "line, message",
    [
        ("0, 1:2", "part of speach expected"),
        ("64, 1:2", "part of speach expected"),
        ("1 1:2", "comma expected after part of speach"),
        ("1, 1 2", "colon expected"),
        ("1, 1:0", "0 frequency"),
        ("1, 1:2 3:4", "comma expected after frequency"),
        ("1, 256:2", "grater than 0xff"),
    ],
)
def test_parse_line_errors(line, message):
    with pytest.raises(ValueError, match=message):
        PspTable().parse_line(line)


def test_normalize_gives_probabilities():
    t = PspTable()
    t.parse_line("1, 0:3, 1:1")
    t.parse_line("7, 0:2, 3:6")
    t.normalize()
    for row in t.form_id_matrix:
        assert sum(row) == pytest.approx(1.0)
    assert sum(t.part_of_speech_prob) == pytest.approx(1.0)
    assert t.part_of_speech_prob[0] == pytest.approx(4 / 12)


def test_render_layout():
    t = PspTable()
    t.parse_line("1, 0:3, 1:1")
    t.normalize()
    text = t.render()
    assert text.startswith("namespace __libmorphrus__\n{\n  unsigned char TableEntryOffset[48] =\n")
    assert "    { 0.7500, 0.2500 }\n" in text
    assert "  double  FormIdProbMatrix[1][256] =\n" in text
    assert text.endswith("  };\n}\n")


def test_main_round_trip(tmp_path):
    source = tmp_path / "dump.txt"
    source.write_text("1, 0:3, 1:1\n13, 2:5\n", encoding="utf-8")
    output = tmp_path / "table.cpp"
    assert main([str(source), str(output)]) == 0
    text = output.read_text(encoding="utf-8")
    assert "PartOfSpeachProb[3]" in text
    assert text.startswith("namespace __libmorphrus__\n")


def test_main_reports_bad_input(tmp_path):
    source = tmp_path / "dump.txt"
    source.write_text("1, 0:0\n", encoding="utf-8")
    assert main([str(source), str(tmp_path / "out.cpp")]) == errno.EINVAL
    assert not (tmp_path / "out.cpp").exists()


def test_main_usage_and_missing_file(tmp_path):
    assert main([]) == errno.EINVAL
    assert main([str(tmp_path / "none.txt"), str(tmp_path / "o.cpp")]) == errno.ENOENT