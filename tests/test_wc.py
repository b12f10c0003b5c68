import io
import sys

import pytest

from minios.wc import Counts, count, main


def test_empty():
    assert count(b"") == Counts(0, 0, 0)


@pytest.mark.parametrize(
    "data",
    [b"hello world\n", b"  a  b\n\nc ", b"one\ntwo\nthree", b"\t\tx\r\ny\v z"],
)
def test_invariants(data):
    result = count(data)
    assert result.chars == len(data)
    assert result.lines == data.count(b"\n")
    assert result.words == len(data.split())


def test_form_feed_is_not_a_separator():
    assert count(b"a\fb").words == 1


def test_nul_is_not_a_separator():
    assert count(b"a\0b").words == 1


def test_main_on_file(tmp_path, capsys):
    path = tmp_path / "f.txt"
    data = b"one two\nthree\n"
    path.write_bytes(data)
    assert main([str(path)]) == 0
    c = count(data)
    assert capsys.readouterr().out == f"{c.lines} {c.words} {c.chars} {path}\n"


def test_main_on_stdin(monkeypatch, capsys):
    data = b"alpha beta\n"
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))
    assert main([]) == 0
    c = count(data)
    assert capsys.readouterr().out == f"{c.lines} {c.words} {c.chars} \n"


def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "nope"
    assert main([str(missing)]) == 1
    assert capsys.readouterr().out == f"wc: cannot open {missing}\n"