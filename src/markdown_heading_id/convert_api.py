"""
Markdown-to-HTML conversion with explicit heading IDs.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from markdown_heading_id.heading_id import HeadingId
from markdown_heading_id.html_writer import render_html
from markdown_heading_id.marko_events import parse_events

log = logging.getLogger(__name__)


def markdown_to_html(
    text: str, *, heading_ids: bool = True, extensions: Iterable[str] = ()
) -> str:
    """
    Convert Markdown text to HTML.

    With `heading_ids` (the default), headings ending in `{#id}` get that id.
    `extensions` are Marko extension names, such as `"gfm"`.
    """
    events = parse_events(text, extensions=extensions)
    if heading_ids:
        events = HeadingId(events)
    return render_html(events)


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _write_output(path: str, html: str, make_parents: bool) -> None:
    if path == "-":
        sys.stdout.write(html)
        return
    out_path = Path(path)
    if make_parents:
        out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(html, encoding="utf-8")


def convert_file(
    path: str,
    output: str = "-",
    *,
    heading_ids: bool = True,
    extensions: Iterable[str] = (),
    make_parents: bool = False,
) -> None:
    """
    Convert one Markdown file (or `-` for stdin) to HTML, writing to `output`
    (or `-` for stdout).
    """
    log.debug("Converting %s -> %s", path, output)
    html = markdown_to_html(
        _read_input(path), heading_ids=heading_ids, extensions=extensions
    )
    _write_output(output, html, make_parents)


def convert_files(
    files: Sequence[str],
    output: str = "-",
    *,
    heading_ids: bool = True,
    extensions: Iterable[str] = (),
    make_parents: bool = False,
) -> None:
    """
    Convert several Markdown files. With more than one input, output must go to
    stdout, where the results are written one after another.
    """
    if not files:
        raise ValueError("No input files given")
    if len(files) > 1 and output != "-":
        raise ValueError(f"Cannot write {len(files)} input files to a single output file")
    if files.count("-") > 1:
        raise ValueError("Standard input ('-') can only be read once")

    extensions = list(extensions)
    for path in files:
        convert_file(
            path,
            output,
            heading_ids=heading_ids,
            extensions=extensions,
            make_parents=make_parents,
        )
