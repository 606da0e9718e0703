"""Small helpers shared by the command and template code."""

import io
import re
import subprocess
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

_WELL_KNOWN_ABBREVIATIONS = frozenset({"ANSI", "CPE", "ID", "URL"})

YES_NO_ALL_QUIT = ("yes", "no", "all", "quit")

_STRICT_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_STRICT_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class TemplateError(Exception):
    """An error raised while a template function is being evaluated."""


def english_list(items: Sequence[str]) -> str:
    """Return ``items`` formatted as an English list with an Oxford comma."""
    n = len(items)
    if n == 0:
        return ""
    if n == 1:
        return items[0]
    if n == 2:
        return f"{items[0]} and {items[1]}"
    return ", ".join(items[:-1]) + ", and " + items[-1]


def english_list_with_noun(
    items: Sequence[str], singular: str, plural: str | None = None
) -> str:
    """Return ``items`` as an English list followed by the matching noun form."""
    if len(items) == 1:
        return f"{items[0]} {singular}"
    if not plural:
        plural = pluralize(singular)
    if not items:
        return f"no {plural}"
    return f"{english_list(items)} {plural}"


def first_non_empty_string(*args: str) -> str:
    """Return the first non-empty argument, or ``""`` if all are empty."""
    return next((s for s in args if s != ""), "")


def is_well_known_abbreviation(word: str) -> bool:
    """Return whether ``word`` is a well known abbreviation."""
    return word in _WELL_KNOWN_ABBREVIATIONS


def parse_bool(value: str) -> bool:
    """Parse a boolean, also accepting on/off, y/n and yes/no in any case."""
    lowered = value.strip().lower()
    if lowered in ("n", "no", "off"):
        return False
    if lowered in ("on", "y", "yes"):
        return True
    if value in _STRICT_TRUE:
        return True
    if value in _STRICT_FALSE:
        return False
    raise ValueError(f'parsing "{value}": invalid syntax')


def pluralize(singular: str) -> str:
    """Return the English plural form of ``singular``."""
    if singular.endswith("y"):
        return singular[:-1] + "ies"
    return singular + "s"


def titleize(s: str) -> str:
    """Return ``s`` with its first character in title case."""
    if not s:
        return s
    first = s[0].title()
    if len(first) != 1:
        first = s[0]
    return first + s[1:]


def upper_snake_case_to_camel_case(s: str) -> str:
    """Convert an UPPER_SNAKE_CASE string to camelCase."""
    words = s.split("_")
    converted = [words[0].lower()]
    for word in words[1:]:
        if is_well_known_abbreviation(word):
            converted.append(word)
        else:
            converted.append(titleize(word.lower()))
    return "".join(converted)


def upper_snake_case_to_camel_case_map(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``mapping`` with all keys converted to camelCase."""
    return {upper_snake_case_to_camel_case(key): value for key, value in mapping.items()}


def unique_abbreviations(values: Iterable[str]) -> dict[str, str]:
    """Map every unique prefix of each value to that value.

    Every value always maps to itself, even when it is a prefix of another.
    """
    values = list(values)
    candidates: defaultdict[str, list[str]] = defaultdict(list)
    for value in values:
        for end in range(1, len(value) + 1):
            candidates[value[:end]].append(value)
    result = {
        abbreviation: matches[0]
        for abbreviation, matches in candidates.items()
        if len(matches) == 1
    }
    result.update((value, value) for value in values)
    return result


def validate_keys(data: Any, pattern: "re.Pattern[str] | str") -> None:
    """Raise ``ValueError`` if any mapping key nested in ``data`` does not match."""
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    if isinstance(data, Mapping):
        for key, value in data.items():
            if not regex.search(key):
                raise ValueError(f"{key}: invalid key")
            validate_keys(value, regex)
    elif isinstance(data, list):
        for value in data:
            validate_keys(value, regex)


def run_command(args: Sequence[str], stdin: Any = None, stderr: Any = None) -> bytes:
    """Run ``args`` and return its standard output.

    ``stdin`` may be ``None`` (inherit), bytes or str (fed as input), or a
    file object. If ``stderr`` is given, the command's standard error is
    written to it; otherwise it is inherited. A non-zero exit status raises
    ``subprocess.CalledProcessError``.
    """
    kwargs: dict[str, Any] = {}
    if stdin is None:
        pass
    elif isinstance(stdin, (bytes, bytearray)):
        kwargs["input"] = bytes(stdin)
    elif isinstance(stdin, str):
        kwargs["input"] = stdin.encode()
    else:
        try:
            stdin.fileno()
        except (AttributeError, OSError):
            data = stdin.read()
            kwargs["input"] = data.encode() if isinstance(data, str) else data
        else:
            kwargs["stdin"] = stdin

    capture_stderr = stderr is not None
    completed = subprocess.run(
        list(args),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE if capture_stderr else None,
        check=False,
        **kwargs,
    )
    if capture_stderr and completed.stderr:
        if isinstance(stderr, io.TextIOBase):
            stderr.write(completed.stderr.decode(errors="replace"))
        else:
            stderr.write(completed.stderr)
    if completed.returncode != 0:
        raise subprocess.CalledProcessError(
            completed.returncode,
            list(args),
            output=completed.stdout,
            stderr=completed.stderr,
        )
    return completed.stdout