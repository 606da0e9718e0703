"""Check text files in a tree for CRLF line endings, trailing whitespace and final newlines."""

import argparse
import os
import re
import sys
from collections.abc import Iterator, Sequence

_IGNORE_PATTERNS = tuple(
    re.compile(pattern)
    for pattern in (
        r"\.svg\Z",
        r"\A\.devcontainer/library-scripts\Z",
        r"\A\.git\Z",
        r"\A\.vagrant\Z",
        r"\A\.vscode/settings\.json\Z",
        r"\Aassets/chezmoi\.io/public\Z",
        r"\Aassets/chezmoi\.io/resources\Z",
        r"\Aassets/chezmoi\.io/themes/book\Z",
        r"\Aassets/scripts/install\.ps1\Z",
        r"\Acompletions/chezmoi\.ps1\Z",
        r"\Adist\Z",
    )
)

_CRLF_LINE_ENDING = re.compile(rb"\r\Z")
_TRAILING_WHITESPACE = re.compile(rb"[\t\n\f\r ]+\Z")

_SNIFF_LEN = 512
_TEXT_BOMS = (b"\xfe\xff", b"\xff\xfe", b"\xef\xbb\xbf")
# Signatures of formats whose leading bytes look like text but are not.
_NON_TEXT_SIGNATURES = (
    b"%PDF-",
    b"%!PS-Adobe-",
    b"GIF87a",
    b"GIF89a",
    b"BM",
    b"ID3",
    b".snd",
    b"wOFF",
    b"wOF2",
    b"OTTO",
    b"#!AMR\n",
)
_BINARY_BYTES = frozenset(
    [*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)]
)


def _is_text(data: bytes) -> bool:
    head = data[:_SNIFF_LEN]
    if head.startswith(_TEXT_BOMS):
        return True
    if head.startswith(_NON_TEXT_SIGNATURES):
        return False
    return not any(byte in _BINARY_BYTES for byte in head)


def is_ignored(path: str) -> bool:
    """Return whether the slash-separated relative ``path`` is excluded from linting."""
    return any(pattern.search(path) for pattern in _IGNORE_PATTERNS)


def lint_data(filename: str, data: bytes) -> list[str]:
    """Return the problems found in ``data``, reported against ``filename``."""
    if not _is_text(data):
        return []
    problems: list[str] = []
    lines = data.split(b"\n")
    for number, line in enumerate(lines, start=1):
        if _CRLF_LINE_ENDING.search(line):
            problems.append(f"{filename}:{number}: CRLF line ending")
        elif _TRAILING_WHITESPACE.search(line):
            problems.append(f"{filename}:{number}: trailing whitespace")
    if data and lines[-1]:
        problems.append(f"{filename}: no newline at end of file")
    return problems


def lint_file(path: "str | os.PathLike[str]") -> list[str]:
    """Read and lint the file at ``path``; raises ``OSError`` if it cannot be read."""
    with open(path, "rb") as f:
        data = f.read()
    return lint_data(os.fspath(path), data)


def _walk(root: str, rel: str) -> Iterator[tuple[str, os.DirEntry[str]]]:
    directory = os.path.join(root, rel) if rel else root
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda entry: entry.name)
    for entry in entries:
        entry_rel = f"{rel}/{entry.name}" if rel else entry.name
        if is_ignored(entry_rel):
            continue
        yield entry_rel, entry
        if entry.is_dir(follow_symlinks=False):
            yield from _walk(root, entry_rel)


def run(root: "str | os.PathLike[str]" = ".") -> list[str]:
    """Lint every regular file below ``root`` and return all problems found."""
    root_str = os.fspath(root)
    problems: list[str] = []
    for rel, entry in _walk(root_str, ""):
        if not entry.is_file(follow_symlinks=False):
            continue
        try:
            with open(entry.path, "rb") as f:
                data = f.read()
        except OSError as exc:
            problems.append(str(exc))
            continue
        problems.extend(lint_data(rel, data))
    return problems


def main(argv: Sequence[str] | None = None) -> int:
    """Lint the tree and print each problem; return 1 if any were found."""
    parser = argparse.ArgumentParser(description="Check files for whitespace problems.")
    parser.add_argument("root", nargs="?", default=".", help="directory to check")
    options = parser.parse_args(argv)
    try:
        problems = run(options.root)
    except OSError as exc:
        print(exc)
        return 1
    for problem in problems:
        print(problem)
    return 1 if problems else 0


if __name__ == "__main__":
    sys.exit(main())