#!/usr/bin/env python3
"""
markdown-heading-id: Markdown to HTML with explicit heading IDs

Headings ending in `{#id}` get that id:
  ## Heading {#heading-id}  ->  <h2 id="heading-id">Heading</h2>

Common usage:
  markdown-heading-id README.md
  markdown-heading-id --gfm README.md -o build/README.html
  cat notes.md | markdown-heading-id -
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from markdown_heading_id.config import find_config_file, load_config, merge_cli_with_config
from markdown_heading_id.convert_api import convert_files


@dataclass
class Options:
    """Command-line options for the markdown-heading-id tool."""

    files: list[str]
    output: str
    gfm: bool
    extensions: list[str]
    heading_ids: bool
    verbose: bool
    version: bool

    @property
    def effective_extensions(self) -> list[str]:
        """Marko extensions to load: `extensions`, plus `gfm` if enabled."""
        if self.gfm and "gfm" not in self.extensions:
            return ["gfm", *self.extensions]
        return list(self.extensions)


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which flags the user explicitly passed (for config merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Input Markdown files (use '-' for stdin)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout; only with a single input)",
    )
    parser.add_argument(
        "--gfm",
        action="store_true",
        default=False,
        help="Enable GitHub Flavored Markdown (tables, strikethrough, task lists, alerts)",
    )
    parser.add_argument(
        "-x",
        "--extension",
        action="append",
        default=[],
        dest="extensions",
        metavar="NAME",
        help="Load a Marko extension by name. Can be repeated",
    )
    parser.add_argument(
        "--no-heading-ids",
        action="store_true",
        dest="no_heading_ids",
        help="Leave `{#id}` markers in heading text as they are",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages to stderr",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Re-parse with sentinel defaults to detect which flags were actually supplied.
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("--gfm", action="store_true", default=_SENTINEL)
    sentinel_parser.add_argument("-x", "--extension", action="append", dest="extensions")
    sentinel_parser.add_argument(
        "--no-heading-ids", dest="no_heading_ids", action="store_true", default=_SENTINEL
    )
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    if sentinel_opts.gfm is not _SENTINEL:
        explicit_flags.add("gfm")
    if sentinel_opts.extensions is not None:
        explicit_flags.add("extensions")
    if sentinel_opts.no_heading_ids is not _SENTINEL:
        explicit_flags.add("heading_ids")

    return (
        Options(
            files=opts.files,
            output=opts.output,
            gfm=opts.gfm,
            extensions=opts.extensions,
            heading_ids=not opts.no_heading_ids,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the markdown-heading-id CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("markdown-heading-id")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if options.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr
        )

    if not options.files:
        print(
            "Error: No input specified. Provide Markdown files, or '-' for stdin."
            " Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    config_path = find_config_file(Path.cwd())
    if config_path:
        try:
            config = load_config(config_path)
        except ValueError as e:
            print(f"Error: {config_path}: {e}", file=sys.stderr)
            return 1
        merge_cli_with_config(options, config, explicit_flags)

    try:
        convert_files(
            options.files,
            options.output,
            heading_ids=options.heading_ids,
            extensions=options.effective_extensions,
            make_parents=True,
        )
    except ValueError as e:
        # Usage errors reported by convert_files, like several inputs to one output.
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        # Catch other potential file or processing errors.
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
