"""CLI integration tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from markdown_heading_id.cli import _parse_args, main


def _render_help(capsys: pytest.CaptureFixture[str]) -> str:
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    return capsys.readouterr().out


def test_help_includes_tagline_and_usage(capsys: pytest.CaptureFixture[str]) -> None:
    out = _render_help(capsys)
    assert "markdown-heading-id: Markdown to HTML with explicit heading IDs" in out
    assert "Common usage:" in out
    assert '<h2 id="heading-id">Heading</h2>' in out


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--version"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("v") or out.startswith("unknown")


def test_no_input_is_an_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "No input specified" in capsys.readouterr().err


def test_convert_file_to_stdout(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "doc.md").write_text("# Intro {#intro}\n\nBody.\n")
    assert main(["doc.md"]) == 0
    assert capsys.readouterr().out == '<h1 id="intro">Intro</h1>\n<p>Body.</p>\n'


def test_convert_file_to_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "doc.md").write_text("## Part {#part}\n")
    assert main(["doc.md", "-o", "build/out/doc.html"]) == 0
    assert (tmp_path / "build" / "out" / "doc.html").read_text() == '<h2 id="part">Part</h2>'


def test_convert_stdin(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("## From stdin {#stdin}\n"))
    assert main(["-"]) == 0
    assert capsys.readouterr().out == '<h2 id="stdin">From stdin</h2>'


def test_no_heading_ids_flag(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "doc.md").write_text("## Part {#part}\n")
    assert main(["--no-heading-ids", "doc.md"]) == 0
    assert capsys.readouterr().out == "<h2>Part {#part}</h2>\n"


def test_gfm_flag(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "doc.md").write_text("## ~~Old~~ {#old}\n")
    assert main(["--gfm", "doc.md"]) == 0
    assert capsys.readouterr().out == '<h2 id="old"><del>Old</del></h2>'


def test_multiple_files_to_one_output_is_an_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.md").write_text("# A\n")
    (tmp_path / "b.md").write_text("# B\n")
    assert main(["a.md", "b.md", "-o", "out.html"]) == 1
    assert "single output file" in capsys.readouterr().err


def test_missing_file_is_reported(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    assert main(["missing.md"]) == 2
    assert capsys.readouterr().err.startswith("Error: ")


def test_config_file_applies(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "markdown-heading-id.toml").write_text("heading-ids = false\ngfm = true\n")
    (tmp_path / "doc.md").write_text("## ~~Old~~ {#old}\n")
    assert main(["doc.md"]) == 0
    assert capsys.readouterr().out == "<h2><del>Old</del> {#old}</h2>\n"


def test_explicit_flag_beats_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "markdown-heading-id.toml").write_text("gfm = false\n")
    (tmp_path / "doc.md").write_text("## ~~Old~~ {#old}\n")
    assert main(["--gfm", "doc.md"]) == 0
    assert capsys.readouterr().out == '<h2 id="old"><del>Old</del></h2>'


def test_explicit_flags_tracked() -> None:
    _, explicit = _parse_args(["--gfm", "-x", "footnote", "doc.md"])
    assert explicit == {"gfm", "extensions"}

    _, explicit = _parse_args(["--no-heading-ids", "doc.md"])
    assert explicit == {"heading_ids"}

    _, explicit = _parse_args(["doc.md"])
    assert explicit == set()


def test_effective_extensions() -> None:
    options, _ = _parse_args(["--gfm", "-x", "footnote", "doc.md"])
    assert options.effective_extensions == ["gfm", "footnote"]

    options, _ = _parse_args(["-x", "gfm", "doc.md"])
    assert options.effective_extensions == ["gfm"]
