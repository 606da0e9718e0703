"""Quoting of strings and commands for display as POSIX shell words."""

import re
from collections.abc import Iterable

_NON_SHELL_LITERAL = re.compile(r"[^+\-./0-9=A-Z_a-z]")


def shell_quote(s: str) -> str:
    """Return ``s`` quoted as a shell argument, quoting only when needed."""
    if s == "":
        return "''"
    if not _NON_SHELL_LITERAL.search(s):
        return s

    parts: list[str] = []
    in_single_quotes = False
    for char in s:
        if char == "\\":
            if not in_single_quotes:
                parts.append("'")
                in_single_quotes = True
            parts.append("\\\\")
        elif char == "'":
            if in_single_quotes:
                parts.append("'")
                in_single_quotes = False
            parts.append("\\'")
        else:
            if not in_single_quotes:
                parts.append("'")
                in_single_quotes = True
            parts.append(char)
    if in_single_quotes:
        parts.append("'")
    return "".join(parts)


def shell_quote_command(command: str, args: Iterable[str] | None = None) -> str:
    """Return ``command`` and ``args`` shell quoted and joined by spaces."""
    words = [command, *(args or ())]
    return " ".join(shell_quote(word) for word in words)