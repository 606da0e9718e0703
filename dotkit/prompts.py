"""Interactive prompts used by templates, and a simulated variant for testing templates."""

import json
import re
from collections.abc import Mapping
from typing import IO, Any

from dotkit.util import TemplateError, parse_bool

_INT64_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _arity_error(args: tuple[Any, ...]) -> TemplateError:
    return TemplateError(f"want 1 or 2 arguments, got {len(args) + 1}")


def _parse_int64(value: str) -> int:
    if not _INT64_RE.fullmatch(value):
        raise ValueError(f'parsing "{value}": invalid syntax')
    result = int(value, 10)
    if not _INT64_MIN <= result <= _INT64_MAX:
        raise ValueError(f'parsing "{value}": value out of range')
    return result


def _quote(s: str) -> str:
    return json.dumps(s, ensure_ascii=False)


class Prompter:
    """Ask the user for values on a pair of text streams."""

    def __init__(self, stdin: IO[str], stdout: IO[str]) -> None:
        self.stdin = stdin
        self.stdout = stdout

    def read_line(self, prompt: str) -> str:
        """Write ``prompt`` and return the next line without its line ending.

        Raises ``EOFError`` if no more input is available.
        """
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if line == "":
            raise EOFError("unexpected end of input")
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        return line

    def _read(self, prompt: str) -> str:
        try:
            return self.read_line(prompt)
        except (EOFError, OSError) as exc:
            raise TemplateError(str(exc)) from exc

    def prompt_bool(self, field: str, *args: bool) -> bool:
        """Prompt for a boolean, optionally with a default."""
        if len(args) == 0:
            value_str = self.prompt_string(field)
        elif len(args) == 1:
            default = args[0]
            value_str = self.prompt_string(f"{field} (default {str(bool(default)).lower()})")
            if value_str == "":
                return default
        else:
            raise _arity_error(args)
        try:
            return parse_bool(value_str)
        except ValueError as exc:
            raise TemplateError(str(exc)) from exc

    def prompt_int(self, field: str, *args: int) -> int:
        """Prompt for a 64-bit integer, optionally with a default."""
        if len(args) == 0:
            value_str = self.prompt_string(field)
        elif len(args) == 1:
            default = args[0]
            value_str = self.prompt_string(f"{field} (default {default})")
            if value_str == "":
                return default
        else:
            raise _arity_error(args)
        try:
            return _parse_int64(value_str)
        except ValueError as exc:
            raise TemplateError(str(exc)) from exc

    def prompt_string(self, prompt: str, *args: str) -> str:
        """Prompt for a string, optionally with a default; surrounding space is removed."""
        if len(args) == 0:
            return self._read(f"{prompt}? ").strip()
        if len(args) == 1:
            default = args[0].strip()
            value = self._read(f"{prompt} (default {_quote(default)})? ").strip()
            return value or default
        raise _arity_error(args)

    def stdin_is_a_tty(self) -> bool:
        """Return whether standard input is a terminal."""
        try:
            return bool(self.stdin.isatty())
        except (AttributeError, ValueError, OSError):
            return False

    def write_to_stdout(self, *args: str) -> str:
        """Write each argument to standard output and return an empty string."""
        for arg in args:
            self.stdout.write(arg)
        return ""


class SimulatedPrompter:
    """Answer prompts from preset values instead of asking the user."""

    def __init__(
        self,
        prompt_bool: Mapping[str, str] | None = None,
        prompt_int: Mapping[str, int] | None = None,
        prompt_string: Mapping[str, str] | None = None,
        stdin_is_a_tty: bool = False,
    ) -> None:
        self._bools = {key: parse_bool(value) for key, value in (prompt_bool or {}).items()}
        self._ints = dict(prompt_int or {})
        self._strings = dict(prompt_string or {})
        self._stdin_is_a_tty = stdin_is_a_tty

    def prompt_bool(self, prompt: str, *args: bool) -> bool:
        """Return the preset boolean for ``prompt``, the default, or false."""
        if len(args) == 0:
            return self._bools.get(prompt, False)
        if len(args) == 1:
            return self._bools.get(prompt, args[0])
        raise _arity_error(args)

    def prompt_int(self, prompt: str, *args: int) -> int:
        """Return the preset integer for ``prompt``, the default, or zero."""
        if len(args) == 0:
            return self._ints.get(prompt, 0)
        if len(args) == 1:
            return self._ints.get(prompt, args[0])
        raise _arity_error(args)

    def prompt_string(self, prompt: str, *args: str) -> str:
        """Return the preset string for ``prompt``, the default, or the prompt itself."""
        if len(args) == 0:
            return self._strings.get(prompt, prompt)
        if len(args) == 1:
            return self._strings.get(prompt, args[0])
        raise _arity_error(args)

    def stdin_is_a_tty(self) -> bool:
        """Return the simulated terminal flag."""
        return self._stdin_is_a_tty