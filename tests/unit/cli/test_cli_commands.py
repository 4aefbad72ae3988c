#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the structcompare CLI commands.

Each command handler is called directly with an argument list, the way
``dispatch_command`` calls it, and its exit code and output are checked.
"""

import argparse
import io
import json

import pytest

from structcompare.cli import main
from structcompare.cli.builder import (
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_FORMAT_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_SECURITY_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    get_exit_code_for_exception,
    read_input,
)
from structcompare.cli.commands.convert import handle_convert_command
from structcompare.cli.commands.diff import handle_diff_command
from structcompare.cli.commands.format import handle_format_command
from structcompare.cli.commands.serve import handle_serve_command
from structcompare.cli.commands.validate import handle_validate_command
from structcompare.exceptions import FormatError, NestingDepthError, ParsingError, SecurityError, ValidationError
from structcompare.utils.security import check_input_size


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every CLI test in an empty directory without config files."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path)


@pytest.fixture
def user_files(write_file, user_original, user_modified):
    """Write the user fixtures to disk and return their paths."""
    return write_file("old.json", json.dumps(user_original)), write_file("new.json", json.dumps(user_modified))


@pytest.mark.unit
@pytest.mark.cli
class TestBuilder:
    """Tests for shared CLI helpers."""

    @pytest.mark.parametrize(
        "exception,expected",
        [
            (SecurityError("x"), EXIT_SECURITY_ERROR),
            (ValidationError("x"), EXIT_VALIDATION_ERROR),
            (NestingDepthError(5), EXIT_VALIDATION_ERROR),
            (argparse.ArgumentTypeError("x"), EXIT_VALIDATION_ERROR),
            (FileNotFoundError("x"), EXIT_FILE_ERROR),
            (FormatError(format_type="toml"), EXIT_FORMAT_ERROR),
            (ParsingError("x"), EXIT_PARSING_ERROR),
            (RuntimeError("x"), EXIT_ERROR),
        ],
    )
    def test_exit_codes(self, exception, expected):
        """Test the exception to exit code mapping."""
        assert get_exit_code_for_exception(exception) == expected

    def test_read_stdin(self, monkeypatch):
        """Test that '-' reads stdin."""
        monkeypatch.setattr("sys.stdin", io.StringIO('{"a": 1}'))
        assert read_input("-") == '{"a": 1}'

    def test_read_empty_stdin(self, monkeypatch):
        """Test that empty stdin is an error."""
        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        with pytest.raises(OSError, match="No data"):
            read_input("-")

    def test_read_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_input(str(tmp_path / "missing.json"))

    @pytest.mark.security
    def test_read_oversized_input(self, write_file, monkeypatch):
        """Test that oversized input raises SecurityError."""
        path = write_file("big.json", "[" + "1," * 50 + "1]")
        monkeypatch.setattr("structcompare.cli.builder.check_input_size", _tiny_limit)
        with pytest.raises(SecurityError):
            read_input(path)


def _tiny_limit(text: str) -> str:
    return check_input_size(text, max_length=10)


@pytest.mark.unit
@pytest.mark.cli
class TestMain:
    """Tests for the top-level entry point."""

    def test_no_arguments_prints_help(self, capsys):
        """Test that running without a command prints help and fails."""
        assert main([]) == EXIT_ERROR
        assert "Commands:" in capsys.readouterr().err

    def test_version(self, capsys):
        """Test --version."""
        assert main(["--version"]) == EXIT_SUCCESS
        assert "structcompare" in capsys.readouterr().out

    def test_unknown_command(self):
        """Test that an unknown command is an argparse error."""
        assert main(["compare"]) == 2

    def test_dispatches_diff(self, user_files, capsys):
        """Test that main routes to the diff command."""
        assert main(["diff", *user_files]) == EXIT_SUCCESS
        assert "differences:" in capsys.readouterr().out


@pytest.mark.unit
@pytest.mark.cli
class TestDiffCommand:
    """Tests for the diff command."""

    def test_summary(self, user_files, capsys):
        """Test the default summary output."""
        assert handle_diff_command(list(user_files)) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "added: 1  removed: 1  modified: 4  unchanged: 3" in out
        assert "differences: 6" in out

    def test_preset_and_flags(self, user_files, capsys):
        """Test that the preset and extra flags both apply."""
        assert handle_diff_command([*user_files, "--preset", "api", "--ignore-array-order"]) == EXIT_SUCCESS
        assert "differences: 3" in capsys.readouterr().out

    def test_ignore_keys_flag(self, user_files, capsys):
        """Test comma-separated --ignore-keys."""
        handle_diff_command([*user_files, "--ignore-keys", "updatedAt,email,name"])
        assert "differences: 3" in capsys.readouterr().out

    def test_config_file_discovered(self, user_files, tmp_path, capsys):
        """Test that a config file in the working directory supplies options."""
        (tmp_path / ".structcompare.toml").write_text('preset = "api"\nignore_array_order = true\n')
        handle_diff_command(list(user_files))
        assert "differences: 3" in capsys.readouterr().out

    def test_identical_documents(self, write_file, capsys):
        """Test the no-difference message."""
        path = write_file("same.json", '{"a": 1}')
        assert handle_diff_command([path, path]) == EXIT_SUCCESS
        assert "No differences found." in capsys.readouterr().out

    def test_show_changes(self, user_files, capsys):
        """Test listing structural changes."""
        handle_diff_command([*user_files, "--show-changes", "--color", "never"])
        out = capsys.readouterr().out
        assert '~ $.name: "Ada" -> "Ada Lovelace"' in out
        assert '- $.email: "ada@example.com"' in out
        assert '+ $.settings.language: "en"' in out

    def test_unified(self, write_file, capsys):
        """Test unified output without color."""
        original = write_file("a.json", '{"a": 1}')
        modified = write_file("b.json", '{"a": 2}')
        handle_diff_command([original, modified, "--format", "unified", "--color", "never"])
        out = capsys.readouterr().out
        assert f"--- {original}" in out
        assert '+  "a": 2' in out
        assert "\033[" not in out

    def test_json_report_to_file(self, user_files, tmp_path, capsys):
        """Test writing a JSON report to a file."""
        output = tmp_path / "report.json"
        assert handle_diff_command([*user_files, "--format", "json", "--output", str(output)]) == EXIT_SUCCESS
        data = json.loads(output.read_text())
        assert data["stats"]["added"] == 1
        assert "Output written to" in capsys.readouterr().err

    @pytest.mark.parametrize("report_format,marker", [("html", "<!DOCTYPE html>"), ("markdown", "# Diff Report")])
    def test_document_formats(self, user_files, capsys, report_format, marker):
        """Test HTML and Markdown reports."""
        handle_diff_command([*user_files, "--format", report_format])
        assert marker in capsys.readouterr().out

    def test_text_mode(self, write_file, capsys):
        """Test line comparison of plain text."""
        original = write_file("a.txt", "one\ntwo\n")
        modified = write_file("b.txt", "one\nthree\nfour\n")
        handle_diff_command([original, modified, "--mode", "text"])
        out = capsys.readouterr().out
        assert "added: 1  removed: 0  modified: 1  unchanged: 1" in out

    def test_cross_format(self, write_file, capsys):
        """Test comparing JSON with YAML."""
        original = write_file("a.json", '{"name": "x", "count": 1}')
        modified = write_file("b.yaml", "name: x\ncount: 1\n")
        handle_diff_command([original, modified])
        assert "No differences found." in capsys.readouterr().out

    def test_rich_summary(self, user_files, capsys):
        """Test the rich table summary."""
        assert handle_diff_command([*user_files, "--rich"]) == EXIT_SUCCESS
        assert "Differences" in capsys.readouterr().out

    def test_missing_file(self, write_file, capsys):
        """Test that a missing input gives the file error code."""
        path = write_file("a.json", "{}")
        assert handle_diff_command([path, "missing.json"]) == EXIT_FILE_ERROR
        assert "Error comparing documents" in capsys.readouterr().err

    def test_invalid_document(self, write_file):
        """Test that unparseable input gives the parsing error code."""
        original = write_file("a.json", '{"a": 1}')
        modified = write_file("b.json", '{"a": ]')
        assert handle_diff_command([original, modified]) == EXIT_PARSING_ERROR

    def test_both_stdin_rejected(self):
        """Test that stdin cannot supply both inputs."""
        assert handle_diff_command(["-", "-"]) == EXIT_FILE_ERROR

    def test_invalid_preset_value_in_config(self, user_files, tmp_path):
        """Test that a bad config file gives the validation error code."""
        (tmp_path / ".structcompare.toml").write_text('preset = "lenient"\n')
        assert handle_diff_command(list(user_files)) == EXIT_VALIDATION_ERROR

    def test_negative_context(self, user_files):
        """Test that argparse rejects negative context."""
        assert handle_diff_command([*user_files, "--context", "-1"]) == 2


@pytest.mark.unit
@pytest.mark.cli
class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_json(self, write_file, capsys):
        """Test a syntax check that passes."""
        assert handle_validate_command([write_file("a.json", "[1, 2]")]) == EXIT_SUCCESS
        assert "Valid JSON" in capsys.readouterr().out

    def test_invalid_json_position(self, write_file, capsys):
        """Test that syntax errors report line and column."""
        path = write_file("a.json", '{\n  "a": ,\n}')
        assert handle_validate_command([path]) == EXIT_VALIDATION_ERROR
        assert "Invalid JSON at line 2, column 8" in capsys.readouterr().err

    def test_template(self, write_file, capsys):
        """Test validating against a built-in template."""
        path = write_file("user.json", '{"id": 1, "name": "Ada"}')
        assert handle_validate_command([path, "--template", "user"]) == EXIT_VALIDATION_ERROR
        err = capsys.readouterr().err
        assert "Invalid: 1 error(s)" in err
        assert "[required]" in err

    def test_schema_file(self, write_file, capsys):
        """Test validating against a schema file."""
        document = write_file("doc.json", '{"a": 1}')
        schema = write_file("schema.json", '{"type": "object", "properties": {"a": {"type": "integer"}}}')
        assert handle_validate_command([document, "--schema", schema]) == EXIT_SUCCESS
        assert "document matches schema" in capsys.readouterr().out

    @pytest.mark.security
    def test_unsafe_schema(self, write_file, capsys):
        """Test that unsafe schemas are refused."""
        document = write_file("doc.json", '"aaaa"')
        schema = write_file("schema.json", '{"type": "string", "pattern": "(a+)+$"}')
        assert handle_validate_command([document, "--schema", schema]) == EXIT_VALIDATION_ERROR
        assert "[security]" in capsys.readouterr().err

    def test_generate_schema(self, write_file, capsys):
        """Test printing an inferred schema."""
        path = write_file("doc.yaml", "name: x\ntags: [a]\n")
        assert handle_validate_command([path, "--generate-schema"]) == EXIT_SUCCESS
        schema = json.loads(capsys.readouterr().out)
        assert schema["required"] == ["name", "tags"]

    def test_yaml_syntax(self, write_file, capsys):
        """Test a syntax check of YAML input."""
        assert handle_validate_command([write_file("a.yaml", "a: 1\n"), "--from", "yaml"]) == EXIT_SUCCESS
        assert "Valid YAML" in capsys.readouterr().out

    def test_schema_and_template_exclusive(self, write_file):
        """Test that --schema and --template cannot be combined."""
        path = write_file("a.json", "{}")
        assert handle_validate_command([path, "--schema", path, "--template", "user"]) == 2


@pytest.mark.unit
@pytest.mark.cli
class TestConvertCommand:
    """Tests for the convert command."""

    def test_yaml_to_json(self, write_file, capsys):
        """Test converting YAML to JSON."""
        assert handle_convert_command([write_file("a.yaml", "a: 1\n"), "--to", "json"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out) == {"a": 1}

    def test_json_to_xml_file(self, write_file, tmp_path):
        """Test converting JSON to an XML file."""
        output = tmp_path / "out.xml"
        path = write_file("a.json", '{"user": {"name": "Ada"}}')
        assert handle_convert_command([path, "--to", "xml", "--output", str(output)]) == EXIT_SUCCESS
        assert "<name>Ada</name>" in output.read_text()

    def test_conversion_failure(self, write_file, capsys):
        """Test that parse failures give the parsing error code."""
        path = write_file("a.json", "{oops}")
        assert handle_convert_command([path, "--from", "json", "--to", "yaml"]) == EXIT_PARSING_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_target_required(self, write_file):
        """Test that --to is required."""
        assert handle_convert_command([write_file("a.json", "{}")]) == 2


@pytest.mark.unit
@pytest.mark.cli
class TestFormatCommand:
    """Tests for the format command."""

    def test_indent_and_sort(self, write_file, capsys):
        """Test custom indentation with sorted keys."""
        path = write_file("a.json", '{"b": 1, "a": [1]}')
        assert handle_format_command([path, "--indent", "4", "--sort-keys"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == '{\n    "a": [\n        1\n    ],\n    "b": 1\n}\n'

    def test_minify(self, write_file, capsys):
        """Test compact output."""
        handle_format_command([write_file("a.yaml", "a: 1\nb: [1, 2]\n"), "--minify"])
        assert capsys.readouterr().out == '{"a":1,"b":[1,2]}\n'

    def test_output_reports_size(self, write_file, tmp_path, capsys):
        """Test that writing to a file reports the size."""
        output = tmp_path / "out.json"
        handle_format_command([write_file("a.json", "[1]"), "--minify", "--output", str(output)])
        assert output.read_text() == "[1]\n"
        assert "Size: 3.0 B" in capsys.readouterr().err

    def test_indent_range(self, write_file):
        """Test that indentation above the maximum is rejected."""
        assert handle_format_command([write_file("a.json", "[1]"), "--indent", "11"]) == 2

    def test_invalid_input(self, write_file):
        """Test that unparseable input gives the parsing error code."""
        assert handle_format_command([write_file("a.json", "[1,"), "--from", "json"]) == EXIT_PARSING_ERROR


@pytest.mark.unit
@pytest.mark.cli
class TestServeCommand:
    """Tests for the serve command's argument handling."""

    def test_invalid_port(self, capsys):
        """Test that invalid settings give the validation error code."""
        assert handle_serve_command(["--port", "99999"]) == EXIT_VALIDATION_ERROR
        assert "Invalid port" in capsys.readouterr().err

    def test_runs_server_with_config(self, monkeypatch):
        """Test that the parsed configuration reaches run_server."""
        seen = {}

        def fake_run_server(config):
            seen["config"] = config
            return EXIT_SUCCESS

        monkeypatch.setattr("structcompare.cli.commands.serve.run_server", fake_run_server)
        assert handle_serve_command(["--port", "0", "--rate-limit", "7"]) == EXIT_SUCCESS
        assert seen["config"].port == 0
        assert seen["config"].rate_limit == 7
