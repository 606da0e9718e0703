"""Convert a Markdown reference document into a website content page."""

import argparse
import json
import logging
import posixpath
import re
import sys
from collections.abc import Iterable, Sequence

_log = logging.getLogger(__name__)

_DOCS_URL = re.compile(
    r"https://[-.0-9A-Za-z]+/[-.0-9A-Za-z_]+/[-.0-9A-Za-z_]+/blob/[-.0-9A-Za-z_]+/docs/[A-Z]+\.md"
)
_NON_STANDARD_PAGE_RENAMES = {
    "HOWTO": "how-to",
    "QUICKSTART": "quick-start",
}
_TOC_MARKER = "<!--- toc --->"


def _page_link(match: "re.Match[str]") -> str:
    name = posixpath.splitext(posixpath.basename(match.group(0)))[0]
    new_name = _NON_STANDARD_PAGE_RENAMES.get(name, name.lower())
    return f"/docs/{new_name}/"


def rewrite_urls(text: str) -> str:
    """Replace links to repository documents with links to site pages."""
    return _DOCS_URL.sub(_page_link, text)


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def convert(lines: Iterable[str], short_title: str, long_title: str) -> str:
    """Return the page: front matter, the long title, then content after the table of contents.

    The first input line is replaced by the long title; everything up to the
    table of contents marker and the block that follows it is dropped.
    """
    out = [f"---\ntitle: {json.dumps(short_title, ensure_ascii=False)}\n---\n\n"]
    state = "replace-title"
    for raw in lines:
        line = _strip_line_ending(raw)
        _log.debug("%s: %r", state, line)
        if state == "replace-title":
            out.append(f"# {long_title}\n\n")
            state = "find-toc"
        elif state == "find-toc":
            if line == _TOC_MARKER:
                state = "skip-toc"
        elif state == "skip-toc":
            if line == "":
                state = "copy-content"
        else:
            out.append(rewrite_urls(line) + "\n")
    return "".join(out)


def main(argv: Sequence[str] | None = None) -> int:
    """Read a document on standard input and write the page to standard output."""
    parser = argparse.ArgumentParser(description="Generate a documentation page.")
    parser.add_argument("-debug", "--debug", action="store_true", help="debug")
    parser.add_argument("-shorttitle", "--shorttitle", default="", help="short title")
    parser.add_argument("-longtitle", "--longtitle", default="", help="long title")
    options = parser.parse_args(argv)
    if options.debug:
        logging.basicConfig(level=logging.DEBUG)
    try:
        sys.stdout.write(convert(sys.stdin, options.shorttitle, options.longtitle))
    except (OSError, UnicodeDecodeError) as exc:
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())