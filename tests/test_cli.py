"""
Tests for the hilang command line runner.
"""

import io
import json

import pytest

from hilang.__main__ import main, parse_store_entry
from hilang.runtime import int_val, text_val


def write_program(tmp_path, source, name="program.hi"):
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    return str(path)


class TestArguments:
    """Test argument handling."""

    def test_no_arguments(self, capsys):
        """A missing file argument exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert "usage" in capsys.readouterr().err

    def test_extra_arguments(self, tmp_path):
        """More than one file is a usage error."""
        path = write_program(tmp_path, "pass")
        with pytest.raises(SystemExit) as exc_info:
            main([path, path])
        assert exc_info.value.code == 1

    def test_check_and_dump_exclusive(self, tmp_path):
        """--check and --dump-ast cannot be combined."""
        path = write_program(tmp_path, "pass")
        with pytest.raises(SystemExit) as exc_info:
            main([path, "--check", "--dump-ast"])
        assert exc_info.value.code == 1

    def test_bad_store_entry(self, tmp_path, capsys):
        """A store entry without '=' is rejected."""
        path = write_program(tmp_path, "pass")
        assert main([path, "--store", "oops"]) == 1
        assert "key=value" in capsys.readouterr().err


class TestParseStoreEntry:
    """Test --store value parsing."""

    def test_integer(self):
        """Integer text becomes an Integer."""
        assert parse_store_entry("n=5") == ("n", int_val(5))
        assert parse_store_entry("n=-12") == ("n", int_val(-12))

    def test_text(self):
        """Anything else is Text."""
        assert parse_store_entry("name=bob") == ("name", text_val("bob"))

    def test_quoted_text(self):
        """Quotes keep integer-looking text as Text."""
        assert parse_store_entry('n="5"') == ("n", text_val("5"))

    def test_value_with_equals(self):
        """Only the first '=' separates key and value."""
        assert parse_store_entry("eq=a=b") == ("eq", text_val("a=b"))

    def test_missing_equals(self):
        """An entry without '=' raises ValueError."""
        with pytest.raises(ValueError):
            parse_store_entry("novalue")


class TestFiles:
    """Test source file errors."""

    def test_missing_file(self, tmp_path, capsys):
        """An absent file cannot be opened."""
        missing = str(tmp_path / "absent.hi")
        assert main([missing]) == 1
        assert f"Cannot open file: {missing}" in capsys.readouterr().err

    def test_directory(self, tmp_path, capsys):
        """A directory cannot be opened as a program."""
        assert main([str(tmp_path)]) == 1
        assert "Cannot open file" in capsys.readouterr().err

    def test_undecodable_file(self, tmp_path, capsys):
        """Invalid UTF-8 cannot be read."""
        path = tmp_path / "binary.hi"
        path.write_bytes(b"\xff\xfe\x00pass")
        assert main([str(path)]) == 1
        assert "Cannot read file" in capsys.readouterr().err

    def test_parse_error(self, tmp_path, capsys):
        """Lexical errors are reported as parse failures."""
        path = write_program(tmp_path, "{a}")
        assert main([path]) == 1
        err = capsys.readouterr().err
        assert f"Cannot parse file: {path}" in err
        assert "E001" in err

    def test_structure_error(self, tmp_path, capsys):
        """Missing operands are reported as parse failures."""
        path = write_program(tmp_path, "-> output")
        assert main([path]) == 1
        assert "Cannot parse file" in capsys.readouterr().err


class TestRun:
    """Test running programs."""

    def test_success(self, tmp_path, capsys):
        """A program ending in Empty exits 0."""
        path = write_program(tmp_path, '"hello" -> output')
        assert main([path]) == 0
        captured = capsys.readouterr()
        assert captured.out == "hello\n"
        assert captured.err == ""

    def test_leftover_value(self, tmp_path, capsys):
        """A program ending with a value exits 1."""
        path = write_program(tmp_path, '"5" -> int')
        assert main([path]) == 1
        err = capsys.readouterr().err
        assert f"Cannot execute successfully: {path}" in err
        assert "E402" in err

    def test_soft_failure(self, tmp_path, capsys):
        """An unrecovered soft failure exits 1."""
        path = write_program(tmp_path, '"missing".load')
        assert main([path]) == 1
        assert "E401" in capsys.readouterr().err

    def test_fault(self, tmp_path, capsys):
        """A fault exits 1 and names its code."""
        path = write_program(tmp_path, "frobnicate")
        assert main([path]) == 1
        assert "E303" in capsys.readouterr().err

    def test_output_before_fault_is_kept(self, tmp_path, capsys):
        """Lines written before a fault still reach stdout."""
        path = write_program(tmp_path, '"first" -> output; \\x')
        assert main([path]) == 1
        assert capsys.readouterr().out == "first\n"

    def test_store(self, tmp_path, capsys):
        """--store preloads the global store."""
        path = write_program(tmp_path, '"n".load + "m".load -> output')
        assert main([path, "--store", "n=2", "-s", "m=40"]) == 0
        assert capsys.readouterr().out == "42\n"

    def test_input(self, tmp_path, capsys, monkeypatch):
        """input reads from stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO("20\n"))
        path = write_program(tmp_path, 'input -> int -> "x".store; "x".load + "x".load -> output')
        assert main([path]) == 0
        assert capsys.readouterr().out == "40\n"

    def test_long_program(self, tmp_path, capsys):
        """Thousands of statements run and exit 0."""
        path = write_program(tmp_path, ";\n".join(["pass"] * 5000))
        assert main([path]) == 0
        assert capsys.readouterr().err == ""

    def test_deep_nesting_reports_error(self, tmp_path, capsys):
        """Nesting past the recursion limit is a one-line parse failure."""
        path = write_program(tmp_path, "(" * 5000 + "pass" + ")" * 5000)
        assert main([path]) == 1
        err = capsys.readouterr().err
        assert f"Cannot parse file: {path}" in err
        assert "E103" in err
        assert "Traceback" not in err

    def test_prime_sum(self, tmp_path, capsys, monkeypatch):
        """The prime sum program prints 129 for 30."""
        monkeypatch.setattr("sys.stdin", io.StringIO("30\n"))
        source = (
            'input -> int -> "x".store;\n'
            '"1" -> int -> "i".store;\n'
            '"0" -> int -> "r".store;\n'
            '(\n'
            '    "i".load =< "x".load;\n'
            '    "2" -> int -> "j".store;\n'
            '    (\n'
            '        "j".load < "i".load -> ("i".load % "j".load) != ("0" -> int);\n'
            '        "j".load + ("1" -> int) -> "j".store\n'
            '    ).loop | pass;\n'
            '    "j".load == "i".load -> "r".load + "i".load -> "r".store\n'
            '        | pass;\n'
            '    "i".load + ("1" -> int) -> "i".store\n'
            ').loop | pass;\n'
            '"r".load -> output\n'
        )
        path = write_program(tmp_path, source)
        assert main([path]) == 0
        assert capsys.readouterr().out == "129\n"


class TestModes:
    """Test --check, --dump-ast and --json."""

    def test_check(self, tmp_path, capsys):
        """--check parses without running."""
        path = write_program(tmp_path, '"never" -> output', name="ok.hi")
        assert main([path, "--check"]) == 0
        out = capsys.readouterr().out
        assert out == "OK: ok.hi\n"

    def test_check_does_not_run(self, tmp_path, capsys):
        """--check succeeds for programs that would fault."""
        path = write_program(tmp_path, "frobnicate")
        assert main([path, "--check"]) == 0

    def test_dump_ast(self, tmp_path, capsys):
        """--dump-ast prints the semantic tree."""
        path = write_program(tmp_path, '"k".load -> output')
        assert main([path, "--dump-ast"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "Sequence",
            "  Call",
            "    Text 'k'",
            "    Name load",
            "  Name output",
        ]

    def test_json_parse_error(self, tmp_path, capsys):
        """--json reports parse failures as a JSON object."""
        path = write_program(tmp_path, "a #")
        assert main([path, "--json"]) == 1
        report = json.loads(capsys.readouterr().err)
        assert report["error"] == f"Cannot parse file: {path}"
        assert report["code"] == "E001"

    def test_json_fault(self, tmp_path, capsys):
        """--json reports faults as a JSON object."""
        path = write_program(tmp_path, "\\v")
        assert main([path, "--json"]) == 1
        report = json.loads(capsys.readouterr().err)
        assert report["code"] == "E304"
