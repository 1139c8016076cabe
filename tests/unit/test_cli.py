"""
Unit tests for the cflat command-line interface.
"""

import json

import pytest

from cflat import __version__
from cflat.cli import create_parser, main

VALID = "int32 add(int32 a, int32 b) {\n    return a + b;\n}\n"
INVALID = "void f() {\n    return 1\n}\n"


@pytest.fixture
def source_file(tmp_path):
    """Write source text to a temporary .cf file and return its path."""

    def _write(text: str, name: str = "prog.cf") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


class TestArguments:
    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: cflat" in capsys.readouterr().out

    def test_defaults(self):
        args = create_parser().parse_args(["check", "x.cf"])
        assert args.log_level == "warning"
        assert args.no_color is False
        assert args.json is False

    def test_unknown_log_level_is_rejected(self):
        with pytest.raises(SystemExit):
            main(["--log-level", "loud", "info"])


class TestTokensCommand:
    def test_dump(self, source_file, capsys):
        assert main(["tokens", source_file("x += 1;")]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "(identifier): 'x'",
            "(operator): '+='",
            "(integer_literal): '1'",
            "(punctuator): ';'",
        ]

    def test_lexical_error(self, source_file, capsys):
        assert main(["--no-color", "tokens", source_file("x @")]) == 1
        assert "Unexpected character: '@'" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["tokens", str(tmp_path / "nope.cf")]) == 1
        assert "Source file not found" in capsys.readouterr().err


class TestAstCommand:
    def test_dump(self, source_file, capsys):
        assert main(["ast", source_file(VALID)]) == 0
        out = capsys.readouterr().out
        assert "FunctionDeclaration int32 add(int32 a, int32 b)" in out
        assert "BinaryOperation +" in out

    def test_syntax_error_is_rendered(self, source_file, capsys):
        assert main(["--no-color", "ast", source_file(INVALID)]) == 1
        err = capsys.readouterr().err
        assert "error[E0203]: Expected ';' after return statement" in err
        assert "prog.cf:3:1" in err


class TestCheckCommand:
    def test_ok(self, source_file, capsys):
        assert main(["--no-color", "check", source_file(VALID)]) == 0
        assert "OK:" in capsys.readouterr().out

    def test_failure(self, source_file, capsys):
        assert main(["--no-color", "check", source_file(INVALID)]) == 1
        err = capsys.readouterr().err
        assert "error[E0203]" in err
        assert "\033[" not in err

    def test_json_ok(self, source_file, capsys):
        assert main(["check", "--json", source_file(VALID)]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["success"] is True
        assert report["error"] is None
        assert report["diagnostics"] == []

    def test_json_failure(self, source_file, capsys):
        assert main(["check", "--json", source_file("x = 5;")]) == 1
        report = json.loads(capsys.readouterr().out)
        assert report["success"] is False
        assert report["error"] == "Unexpected global statement encountered"
        (diagnostic,) = report["diagnostics"]
        assert diagnostic["code"] == "E0205"
        assert (diagnostic["line"], diagnostic["column"]) == (1, 1)

    def test_json_missing_file(self, tmp_path, capsys):
        assert main(["check", "--json", str(tmp_path / "nope.cf")]) == 1
        report = json.loads(capsys.readouterr().out)
        assert report["success"] is False
        assert "Source file not found" in report["error"]


class TestInfoCommand:
    def test_lists_keywords(self, capsys):
        assert main(["--no-color", "info"]) == 0
        out = capsys.readouterr().out
        assert "while" in out
        assert "+=" in out
