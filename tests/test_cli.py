"""
Tests for the enumscan command line.
"""

import json

import pytest

from enumscan.compiler.cli import main

FRUIT = "enum Fruit { Apple, Orange, Banana };\n"


@pytest.fixture
def source(tmp_path):
    def write(text, name="decls.enum"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return write


def test_json_output(source, capsys):
    assert main(["--json", source(FRUIT)]) == 0
    doc = json.loads(capsys.readouterr().out)
    (fruit,) = doc["enums"]
    assert fruit["name"] == "Fruit"
    assert fruit["underlying"] == "i32"
    assert fruit["window"] == [-128, 128]
    assert fruit["count"] == 3
    assert [m["name"] for m in fruit["members"]] == ["Apple", "Orange", "Banana"]
    assert [m["offset"] for m in fruit["members"]] == [128, 129, 130]


def test_text_output(source, capsys):
    assert main([source(FRUIT)]) == 0
    out = capsys.readouterr().out
    assert "enum Fruit : i32 in [-128, 128] (3 members)" in out
    assert "Banana" in out


def test_window_from_command_line(source, capsys):
    assert main(["--json", "--min", "0", "--max", "1", source(FRUIT)]) == 1
    captured = capsys.readouterr()
    assert json.loads(captured.out)["enums"][0]["count"] == 2
    assert "CW3002" in captured.err


def test_warnings_exit_one(source, capsys):
    assert main(["--json", source("enum E { A, B = A };")]) == 1
    assert "CW3001" in capsys.readouterr().err


def test_errors_exit_two(source, capsys):
    assert main(["--json", source("enum E { A, A };")]) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "CE3002" in captured.err


def test_parse_error(source, capsys):
    assert main(["--json", source("enum E { A B };")]) == 2
    assert "CE3004" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main(["--json", str(tmp_path / "missing.enum")]) == 2
    assert "RE2021" in capsys.readouterr().err


def test_bad_window(source, capsys):
    assert main(["--json", "--min", "5", "--max", "1", source(FRUIT)]) == 2
    assert "CE1001" in capsys.readouterr().err


def test_no_source(capsys):
    assert main(["--json"]) == 2


def test_version(capsys):
    assert main(["--version"]) == 0
    assert "enumscan" in capsys.readouterr().out


def test_msvc_style_agrees(source, capsys):
    assert main(["--json", "--style", "msvc", source(FRUIT)]) == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc["enums"][0]["count"] == 3


def test_dump_ll(source, capsys):
    assert main(["--dump-ll", source(FRUIT)]) == 0
    out = capsys.readouterr().out
    assert "Fruit_names" in out
    assert "Fruit_count" in out


def test_write_ll(source, tmp_path, capsys):
    out_path = tmp_path / "fruit.ll"
    assert main(["--json", "--write-ll", str(out_path), source(FRUIT)]) == 0
    assert "Fruit_values" in out_path.read_text(encoding="utf-8")


def test_reserved_member_name(source, capsys):
    assert main(["--json", source("enum E { _ignore_, B };")]) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "CE3007" in captured.err
