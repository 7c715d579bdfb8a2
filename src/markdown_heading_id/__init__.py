"""
Explicit heading IDs (`## Heading {#heading-id}`) for Markdown event streams.

Usage::

    from markdown_heading_id import HeadingId, parse_events, render_html

    events = HeadingId(parse_events("## Heading {#heading-id}"))
    assert render_html(events).strip() == '<h2 id="heading-id">Heading</h2>'
"""

from markdown_heading_id.convert_api import markdown_to_html
from markdown_heading_id.heading_id import HeadingId, split_heading_id
from markdown_heading_id.html_writer import render_html, write_html
from markdown_heading_id.marko_events import MarkoEvents, parse_events

__all__ = [
    "HeadingId",
    "MarkoEvents",
    "markdown_to_html",
    "parse_events",
    "render_html",
    "split_heading_id",
    "write_html",
]
