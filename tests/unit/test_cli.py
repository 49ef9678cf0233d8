"""Unit tests for the llmdocs command-line interface."""

import io
import sys

import pytest

from llmdocs import __version__
from llmdocs.cli import create_parser, get_exit_code_for_exception, main
from llmdocs.constants import (
    EXIT_DEPENDENCY_ERROR,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from llmdocs.exceptions import DependencyError, FileError, ValidationError


@pytest.mark.unit
@pytest.mark.cli
class TestCreateParser:
    """Test argument parsing and environment defaults."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LLMDOCS_HTML_PARSER", raising=False)
        monkeypatch.delenv("LLMDOCS_LOG_LEVEL", raising=False)
        args = create_parser().parse_args([])
        assert args.input == "-"
        assert args.out is None
        assert args.html_parser == "html.parser"
        assert args.log_level == "WARNING"
        assert args.detect_code_language is True
        assert args.trace is False

    def test_environment_defaults(self, monkeypatch):
        monkeypatch.setenv("LLMDOCS_HTML_PARSER", "lxml")
        monkeypatch.setenv("LLMDOCS_LOG_LEVEL", "debug")
        args = create_parser().parse_args([])
        assert args.html_parser == "lxml"
        assert args.log_level == "DEBUG"

    def test_arguments_override_environment(self, monkeypatch):
        monkeypatch.setenv("LLMDOCS_HTML_PARSER", "lxml")
        args = create_parser().parse_args(["page.html", "--html-parser", "html5lib", "-o", "out.md"])
        assert args.input == "page.html"
        assert args.html_parser == "html5lib"
        assert args.out == "out.md"

    def test_log_level_is_case_insensitive(self):
        assert create_parser().parse_args(["--log-level", "info"]).log_level == "INFO"

    def test_no_code_language_flag(self):
        assert create_parser().parse_args(["--no-code-language"]).detect_code_language is False

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


@pytest.mark.unit
@pytest.mark.cli
class TestExitCodes:
    @pytest.mark.parametrize(
        "exception,code",
        [
            (DependencyError("x", missing_packages=[("lxml", "")]), EXIT_DEPENDENCY_ERROR),
            (ImportError("lxml"), EXIT_DEPENDENCY_ERROR),
            (ValidationError("bad"), EXIT_VALIDATION_ERROR),
            (FileError("missing"), EXIT_FILE_ERROR),
            (RuntimeError("boom"), EXIT_ERROR),
        ],
    )
    def test_mapping(self, exception, code):
        assert get_exit_code_for_exception(exception) == code


@pytest.mark.unit
@pytest.mark.cli
class TestMain:
    """Test end-to-end CLI runs."""

    def test_file_to_stdout(self, tmp_path, capsys):
        source = tmp_path / "page.html"
        source.write_text("<h1>Title</h1><p>Hello <strong>world</strong>.</p>", encoding="utf-8")

        assert main([str(source)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "# Title\n\nHello **world**.\n"

    def test_file_to_file(self, tmp_path, capsys):
        source = tmp_path / "page.html"
        source.write_text("<ul><li>A</li><li>B</li></ul>", encoding="utf-8")
        target = tmp_path / "page.md"

        assert main([str(source), "--out", str(target)]) == EXIT_SUCCESS
        assert target.read_text(encoding="utf-8") == "- A\n- B\n"
        assert capsys.readouterr().out == ""

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("<ol start='2'><li>Two</li></ol>"))
        assert main([]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "2. Two\n"

    def test_empty_document_writes_nothing(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("<script>x()</script>"))
        assert main(["-"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == ""

    def test_no_code_language(self, tmp_path, capsys):
        source = tmp_path / "code.html"
        source.write_text('<pre><code class="language-python">x = 1</code></pre>', encoding="utf-8")

        assert main([str(source), "--no-code-language"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "```\nx = 1\n```\n"

    def test_missing_input_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.html")]) == EXIT_FILE_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_unwritable_output(self, tmp_path, capsys):
        source = tmp_path / "page.html"
        source.write_text("<p>x</p>", encoding="utf-8")

        assert main([str(source), "--out", str(tmp_path / "no-such-dir" / "out.md")]) == EXIT_FILE_ERROR
        assert "Cannot write output file" in capsys.readouterr().err

    def test_invalid_parser(self, tmp_path, capsys):
        source = tmp_path / "page.html"
        source.write_text("<p>x</p>", encoding="utf-8")

        assert main([str(source), "--html-parser", "bs5"]) == EXIT_VALIDATION_ERROR
        assert "html_parser" in capsys.readouterr().err

    def test_invalid_parser_from_environment(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("LLMDOCS_HTML_PARSER", "bs5")
        source = tmp_path / "page.html"
        source.write_text("<p>x</p>", encoding="utf-8")

        assert main([str(source)]) == EXIT_VALIDATION_ERROR

    def test_missing_parser_backend(self, tmp_path, monkeypatch, capsys):
        import llmdocs.dom
        from bs4 import FeatureNotFound

        def _raise(*args, **kwargs):
            raise FeatureNotFound("Couldn't find a tree builder with the features you requested: lxml.")

        monkeypatch.setattr(llmdocs.dom, "BeautifulSoup", _raise)
        source = tmp_path / "page.html"
        source.write_text("<p>x</p>", encoding="utf-8")

        assert main([str(source), "--html-parser", "lxml"]) == EXIT_DEPENDENCY_ERROR
        assert "pip install --upgrade lxml" in capsys.readouterr().err

    def test_unexpected_error(self, tmp_path, monkeypatch, capsys):
        import llmdocs.cli

        def _boom(self, html):
            raise RuntimeError("boom")

        monkeypatch.setattr(llmdocs.cli.HTMLToMarkdown, "convert", _boom)
        source = tmp_path / "page.html"
        source.write_text("<p>x</p>", encoding="utf-8")

        assert main([str(source)]) == EXIT_ERROR
        assert "Error: boom" in capsys.readouterr().err

    def test_log_file(self, tmp_path, capsys):
        source = tmp_path / "page.html"
        source.write_text('<p><a href="javascript:x()">bad</a>ok</p>', encoding="utf-8")
        log_file = tmp_path / "run.log"

        assert main([str(source), "--log-level", "debug", "--log-file", str(log_file)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "ok\n"
        assert "Dropping link with unsafe destination" in log_file.read_text(encoding="utf-8")
