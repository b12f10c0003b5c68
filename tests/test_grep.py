import io
import sys

import pytest

from minios.grep import grep_lines, main, match


@pytest.mark.parametrize(
    "pattern, text, expected",
    [
        ("^abc", "abcdef", True),
        ("^abc", "xabc", False),
        ("a.c", "xxabcxx", True),
        ("ab*c", "ac", True),
        ("ab*c", "abbbbc", True),
        ("ab*c", "abd", False),
        ("c$", "abc", True),
        ("c$", "abcd", False),
        ("", "anything", True),
        ("^$", "", True),
        ("^$", "x", False),
        (".*", "", True),
        ("^a.*z$", "abcz", True),
        ("^a.*z$", "abczq", False),
        ("x", "", False),
    ],
)
def test_match(pattern, text, expected):
    assert match(pattern, text) is expected


def test_match_long_text_does_not_recurse_deeply():
    text = "a" * 5000
    assert match("^" + "." * 4999 + "a$", text) is True


def test_grep_lines_selects_matching_lines():
    stream = io.StringIO("apple\nbanana\ncherry\n")
    assert list(grep_lines("an", stream)) == ["banana\n"]


def test_grep_lines_ignores_unterminated_last_line():
    stream = io.StringIO("x\nfoo")
    assert list(grep_lines("foo", stream)) == []


def test_grep_lines_stops_at_overlong_line():
    too_long = io.StringIO("a" * 1023 + "\nmatch\n")
    assert list(grep_lines("match", too_long)) == []
    fits = io.StringIO("a" * 1022 + "\nmatch\n")
    assert list(grep_lines("match", fits)) == ["match\n"]


def test_main_usage(capsys):
    assert main([]) == 1
    assert capsys.readouterr().err == "usage: grep pattern [file ...]\n"


def test_main_reads_files(tmp_path, capsys):
    first = tmp_path / "one.txt"
    second = tmp_path / "two.txt"
    first.write_text("red\ngreen\n")
    second.write_text("blue\nreed\n")
    assert main(["re", str(first), str(second)]) == 0
    assert capsys.readouterr().out == "red\ngreen\nreed\n"


def test_main_missing_file(tmp_path, capsys):
    present = tmp_path / "here.txt"
    present.write_text("hit\n")
    missing = tmp_path / "absent.txt"
    assert main(["hit", str(present), str(missing)]) == 1
    assert capsys.readouterr().out == f"hit\ngrep: cannot open {missing}\n"


def test_main_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("one\ntwo\nthree\n"))
    assert main(["^t"]) == 0
    assert capsys.readouterr().out == "two\nthree\n"