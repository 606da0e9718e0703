"""Template helpers backed by the gopass, pass and LastPass command line tools."""

import json
import re
import subprocess
from collections.abc import Callable, Sequence
from typing import Any

from semver import Version

from dotkit.shellquote import shell_quote_command
from dotkit.util import TemplateError, run_command

Runner = Callable[[Sequence[str], Any, Any], bytes]

GOPASS_MIN_VERSION = Version(1, 6, 1)
LASTPASS_MIN_VERSION = Version(1, 3, 0)

_GOPASS_VERSION_RE = re.compile(rb"gopass\s+(\d+\.\d+\.\d+)")
_LASTPASS_VERSION_RE = re.compile(rb"LastPass CLI v(\d+\.\d+\.\d+)")
_LASTPASS_NOTE_RE = re.compile(r"([ A-Za-z]*):(.*)")


def _first_line(output: bytes) -> str:
    return output.split(b"\n", 1)[0].decode()


def _check_version(output: bytes, pattern: "re.Pattern[bytes]", minimum: Version) -> None:
    m = pattern.match(output) if pattern is _LASTPASS_VERSION_RE else pattern.search(output)
    if m is None:
        raise TemplateError(f"{output.decode(errors='replace')}: could not extract version")
    try:
        version = Version.parse(m.group(1).decode())
    except ValueError as exc:
        raise TemplateError(str(exc)) from exc
    if version < minimum:
        raise TemplateError(f"version {version} found, need version {minimum} or later")


class _Tool:
    default_command = ""

    def __init__(
        self,
        command: str | None = None,
        stdin: Any = None,
        stderr: Any = None,
        runner: Runner = run_command,
    ) -> None:
        self.command = command or self.default_command
        self.stdin = stdin
        self.stderr = stderr
        self._runner = runner

    def _run(self, args: Sequence[str]) -> bytes:
        return self._runner([self.command, *args], self.stdin, self.stderr)

    def _run_quoted(self, args: Sequence[str]) -> bytes:
        try:
            return self._run(args)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise TemplateError(f"{shell_quote_command(self.command, args)}: {exc}") from exc


class Gopass(_Tool):
    """Read secrets with gopass."""

    default_command = "gopass"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._version_ok = False
        self._cache: dict[str, str] = {}
        self._raw_cache: dict[str, bytes] = {}

    def check_version(self) -> None:
        """Raise ``TemplateError`` unless gopass is recent enough."""
        if self._version_ok:
            return
        try:
            output = self._run(["--version"])
        except (subprocess.CalledProcessError, OSError) as exc:
            raise TemplateError(str(exc)) from exc
        _check_version(output, _GOPASS_VERSION_RE, GOPASS_MIN_VERSION)
        self._version_ok = True

    def raw(self, entry_id: str) -> str:
        """Return the full output of ``gopass show``."""
        self.check_version()
        if entry_id not in self._raw_cache:
            self._raw_cache[entry_id] = self._run_quoted(["show", entry_id])
        return self._raw_cache[entry_id].decode()

    def password(self, entry_id: str) -> str:
        """Return the first line of ``gopass show --password``."""
        self.check_version()
        if entry_id not in self._cache:
            output = self._run_quoted(["show", "--password", entry_id])
            self._cache[entry_id] = _first_line(output)
        return self._cache[entry_id]


class Pass(_Tool):
    """Read secrets with pass."""

    default_command = "pass"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._cache: dict[str, bytes] = {}

    def output(self, entry_id: str) -> bytes:
        """Return the cached output of ``pass show``."""
        if entry_id not in self._cache:
            self._cache[entry_id] = self._run_quoted(["show", entry_id])
        return self._cache[entry_id]

    def password(self, entry_id: str) -> str:
        """Return the first line of the entry."""
        return _first_line(self.output(entry_id))

    def raw(self, entry_id: str) -> str:
        """Return the whole entry."""
        return self.output(entry_id).decode()


class Lastpass(_Tool):
    """Read secrets with the LastPass command line client."""

    default_command = "lpass"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._version_ok = False
        self._cache: dict[str, list[dict[str, Any]]] = {}

    def check_version(self) -> None:
        """Raise ``TemplateError`` unless lpass is recent enough."""
        if self._version_ok:
            return
        try:
            output = self._run(["--version"])
        except (subprocess.CalledProcessError, OSError) as exc:
            raise TemplateError(str(exc)) from exc
        _check_version(output, _LASTPASS_VERSION_RE, LASTPASS_MIN_VERSION)
        self._version_ok = True

    def raw(self, entry_id: str) -> list[dict[str, Any]]:
        """Return the decoded JSON of ``lpass show --json``."""
        self.check_version()
        if entry_id in self._cache:
            return self._cache[entry_id]
        try:
            output = self._run(["show", "--json", entry_id])
        except (subprocess.CalledProcessError, OSError) as exc:
            raise TemplateError(str(exc)) from exc
        try:
            data = json.loads(output)
        except ValueError as exc:
            raise TemplateError(
                f"{output.decode(errors='replace')}: parse error: {exc}"
            ) from exc
        if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
            raise TemplateError(f"{output.decode(errors='replace')}: parse error: not a list of objects")
        self._cache[entry_id] = data
        return data

    def parsed(self, entry_id: str) -> list[dict[str, Any]]:
        """Return the entry with its note split into fields."""
        data = self.raw(entry_id)
        for item in data:
            note = item.get("note")
            if isinstance(note, str):
                item["note"] = lastpass_parse_note(note)
        return data


def lastpass_parse_note(note: str) -> dict[str, str]:
    """Split a LastPass note into camelCase keys and newline-terminated values."""
    result: dict[str, str] = {}
    key = ""
    lines = note.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        if line.endswith("\r"):
            line = line[:-1]
        m = _LASTPASS_NOTE_RE.fullmatch(line)
        if m:
            components = m.group(1).split(" ")
            first = components[0]
            if first:
                components[0] = first[0].lower() + first[1:]
            key = "".join(components)
            result[key] = m.group(2) + "\n"
        else:
            result[key] = result.get(key, "") + line + "\n"
    return result