# tests/test_main.py
"""
Tests for the command line: exit codes, output formats and fix mode.
"""

import json

import pytest

from thriftcheck.main import (
    EXIT_ERROR, EXIT_INFRA, EXIT_OK, EXIT_WARNINGS, main,
)
from tests.conftest import (
    CLEAN_THRIFT, COLOR_CONFLICT_THRIFT, ONEWAY_THROWS_THRIFT,
    OPTIONAL_ARG_THRIFT, REQUIRED_UNION_THRIFT,
)


@pytest.fixture
def write(tmp_path):
    def _write(name, text):
        p = tmp_path / name
        p.write_text(text)
        return str(p)
    return _write


class TestCheckCommand:

    def test_clean_file(self, write, capsys):
        path = write("clean.thrift", CLEAN_THRIFT)
        assert main(["check", path]) == EXIT_OK
        assert capsys.readouterr().out == ""

    def test_semantic_error(self, write, capsys):
        path = write("color.thrift", COLOR_CONFLICT_THRIFT)
        assert main(["check", path]) == EXIT_ERROR
        out = capsys.readouterr().out
        assert out.startswith("error: [IDL grammar error] enum Color")
        assert "'RED' and 'BLUE'" in out

    def test_oneway_throws(self, write, capsys):
        path = write("oneway.thrift", ONEWAY_THROWS_THRIFT)
        assert main(["check", path]) == EXIT_ERROR
        assert "oneway methods can't throw exceptions" in capsys.readouterr().out

    def test_warnings_do_not_fail(self, write, capsys):
        path = write("union.thrift", REQUIRED_UNION_THRIFT)
        assert main(["check", path]) == EXIT_OK
        out = capsys.readouterr().out
        assert out == (
            "warning: union U field a: union members must be optional, "
            "ignoring specified requiredness.\n"
        )

    def test_werror(self, write):
        path = write("args.thrift", OPTIONAL_ARG_THRIFT)
        assert main(["check", "--werror", path]) == EXIT_WARNINGS

    def test_werror_without_warnings(self, write):
        path = write("clean.thrift", CLEAN_THRIFT)
        assert main(["check", "--werror", path]) == EXIT_OK

    def test_fix_still_reports(self, write, capsys):
        path = write("union.thrift", REQUIRED_UNION_THRIFT)
        assert main(["check", "--fix", path]) == EXIT_OK
        assert "union members must be optional" in capsys.readouterr().out

    def test_json_format(self, write, capsys):
        good = write("args.thrift", OPTIONAL_ARG_THRIFT)
        bad = write("color.thrift", COLOR_CONFLICT_THRIFT)
        assert main(["check", "-f", "json", good, bad]) == EXIT_ERROR
        first, second = (json.loads(line) for line in capsys.readouterr().out.splitlines())
        assert first["file"] == good
        assert first["error"] is None
        assert first["warnings"] == [f"{good}: optional keyword is ignored in argument lists."]
        assert second["error"]["code"] == "THRIFT-3002"
        assert second["error"]["category"] == "conflicting_enum_value"

    def test_include_dir(self, tmp_path, write):
        inc = tmp_path / "inc"
        inc.mkdir()
        (inc / "dup.thrift").write_text("struct X {}\nservice X {}")
        path = write("main.thrift", 'include "dup.thrift"')
        assert main(["check", "-I", str(inc), path]) == EXIT_ERROR

    def test_syntax_error(self, write):
        path = write("broken.thrift", "struct {")
        assert main(["check", path]) == EXIT_ERROR

    def test_missing_include(self, write):
        path = write("main.thrift", 'include "gone.thrift"')
        assert main(["check", path]) == EXIT_ERROR

    def test_undecodable_include(self, tmp_path, write, caplog):
        (tmp_path / "bad.thrift").write_bytes(b"struct S { 1: string \xff }")
        path = write("main.thrift", 'include "bad.thrift"')
        assert main(["check", path]) == EXIT_ERROR
        assert "cannot read file" in caplog.text
        assert "Unhandled exception" not in caplog.text

    def test_missing_input(self, tmp_path):
        assert main(["check", str(tmp_path / "absent.thrift")]) == EXIT_INFRA


class TestParseCommand:

    def test_summary(self, write, capsys):
        path = write("clean.thrift", CLEAN_THRIFT)
        assert main(["parse", path]) == EXIT_OK
        out = capsys.readouterr().out
        assert "typedef   UserId = i64" in out
        assert "struct    User (3 fields)" in out
        assert "union     Payload (2 fields)" in out
        assert "service   UserService (2 functions)" in out


class TestTopLevel:

    def test_no_command(self):
        assert main([]) == EXIT_INFRA

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as ei:
            main(["--version"])
        assert ei.value.code == 0
        assert "thriftcheck" in capsys.readouterr().out
