import io
import os
import sys
from unittest.mock import patch

from minios.tools import KILL_SIGNAL, cat, echo, kill, ln, mkdir, rm


def test_cat_files(tmp_path, capsysbinary):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_bytes(b"first\n")
    b.write_bytes(b"x" * 2000)
    assert cat([str(a), str(b)]) == 0
    assert capsysbinary.readouterr().out == b"first\n" + b"x" * 2000


def test_cat_stdin(monkeypatch, capsysbinary):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"from stdin")))
    assert cat([]) == 0
    assert capsysbinary.readouterr().out == b"from stdin"


def test_cat_missing_file(tmp_path, capsysbinary):
    missing = tmp_path / "missing"
    assert cat([str(missing)]) == 1
    assert capsysbinary.readouterr().err == f"cat: cannot open {missing}\n".encode()


def test_echo(capsys):
    assert echo(["hello", "world"]) == 0
    assert capsys.readouterr().out == "hello world\n"


def test_echo_nothing(capsys):
    assert echo([]) == 0
    assert capsys.readouterr().out == ""


def test_kill_usage(capsys):
    assert kill([]) == 1
    assert capsys.readouterr().err == "usage: kill pid...\n"


def test_kill_uses_leading_digits():
    with patch("os.kill") as fake:
        assert kill(["1234abc"]) == 0
    fake.assert_called_once_with(1234, KILL_SIGNAL)


def test_kill_skips_zero():
    with patch("os.kill") as fake:
        assert kill(["abc", "0"]) == 0
    assert fake.call_count == 0


def test_ln_creates_link(tmp_path):
    old = tmp_path / "old"
    new = tmp_path / "new"
    old.write_text("data")
    assert ln([str(old), str(new)]) == 0
    assert os.path.samefile(old, new)


def test_ln_usage_and_failure(tmp_path, capsys):
    assert ln(["only"]) == 1
    assert capsys.readouterr().err == "Usage: ln old new\n"
    old = tmp_path / "absent"
    new = tmp_path / "new"
    assert ln([str(old), str(new)]) == 0
    assert capsys.readouterr().err == f"link {old} {new}: failed\n"
    assert not new.exists()


def test_rm_file_and_empty_dir(tmp_path):
    f = tmp_path / "f"
    d = tmp_path / "d"
    f.write_text("x")
    d.mkdir()
    assert rm([str(f), str(d)]) == 0
    assert not f.exists()
    assert not d.exists()


def test_rm_stops_at_failure(tmp_path, capsys):
    missing = tmp_path / "missing"
    keep = tmp_path / "keep"
    keep.write_text("x")
    assert rm([str(missing), str(keep)]) == 0
    assert capsys.readouterr().err == f"rm: {missing} failed to delete\n"
    assert keep.exists()


def test_rm_usage(capsys):
    assert rm([]) == 1
    assert capsys.readouterr().err == "Usage: rm files...\n"


def test_mkdir_creates(tmp_path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    assert mkdir([str(a), str(b)]) == 0
    assert a.is_dir() and b.is_dir()


def test_mkdir_stops_at_failure(tmp_path, capsys):
    existing = tmp_path / "e"
    existing.mkdir()
    later = tmp_path / "later"
    assert mkdir([str(existing), str(later)]) == 0
    assert capsys.readouterr().err == f"mkdir: {existing} failed to create\n"
    assert not later.exists()


def test_mkdir_usage(capsys):
    assert mkdir([]) == 1
    assert capsys.readouterr().err == "Usage: mkdir files...\n"