"""Template helpers backed by the KeePassXC command line client."""

import getpass
import re
import subprocess
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from semver import Version

from dotkit.shellquote import shell_quote_command
from dotkit.util import TemplateError, run_command

Runner = Callable[[Sequence[str], Any, Any], bytes]

NEED_SHOW_PROTECTED_ARG_VERSION = Version(2, 5, 1)

_PAIR_RE = re.compile(r"([^:]+):\s*(.*)")


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_keepassxc_output(output: bytes | str) -> dict[str, str]:
    """Parse ``keepassxc-cli show`` output, skipping its first line."""
    text = output.decode() if isinstance(output, bytes) else output
    data: dict[str, str] = {}
    for line in _lines(text)[1:]:
        m = _PAIR_RE.fullmatch(line)
        if m is None:
            raise TemplateError(f"{line}: parse error")
        data[m.group(1)] = m.group(2)
    return data


class Keepassxc:
    """Read entries and attributes from a KeePassXC database."""

    def __init__(
        self,
        database: str = "",
        command: str = "keepassxc-cli",
        args: Iterable[str] = (),
        password: str | None = None,
        read_password: Callable[[str], str] | None = None,
        stderr: Any = None,
        runner: Runner = run_command,
    ) -> None:
        self.database = database
        self.command = command
        self.args = list(args)
        self._password = password or ""
        self._read_password = read_password or getpass.getpass
        self.stderr = stderr
        self._runner = runner
        self._version: Version | None = None
        self._cache: dict[str, dict[str, str]] = {}
        self._attribute_cache: dict[tuple[str, str], str] = {}

    def version(self) -> Version:
        """Return the version of the client, determined once."""
        if self._version is not None:
            return self._version
        args = ["--version"]
        try:
            output = self._runner([self.command, *args], None, None)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise TemplateError(f"{shell_quote_command(self.command, args)}: {exc}") from exc
        text = output.strip().decode(errors="replace")
        try:
            self._version = Version.parse(text)
        except ValueError as exc:
            raise TemplateError(f"cannot parse version {text}: {exc}") from exc
        return self._version

    def _show_args(self, base: list[str], entry: str) -> list[str]:
        args = list(base)
        if self.version() >= NEED_SHOW_PROTECTED_ARG_VERSION:
            args.append("--show-protected")
        args += self.args
        args += [self.database, entry]
        return args

    def _run(self, args: list[str]) -> bytes:
        if not self._password:
            unlock_prompt = f"Insert password to unlock {self.database}: "
            self._password = self._read_password(unlock_prompt)
        stdin_text = self._password + "\n"
        try:
            return self._runner([self.command, *args], stdin_text, self.stderr)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise TemplateError(f"{shell_quote_command(self.command, args)}: {exc}") from exc

    def _require_database(self) -> None:
        if not self.database:
            raise TemplateError("keepassxc.database not set")

    def attribute(self, entry: str, attribute: str) -> str:
        """Return a single attribute of ``entry``."""
        key = (entry, attribute)
        if key in self._attribute_cache:
            return self._attribute_cache[key]
        self._require_database()
        args = self._show_args(["show", "--attributes", attribute, "--quiet"], entry)
        value = self._run(args).decode().strip()
        self._attribute_cache[key] = value
        return value

    def entry(self, entry: str) -> dict[str, str]:
        """Return all fields of ``entry``."""
        if entry in self._cache:
            return self._cache[entry]
        self._require_database()
        args = self._show_args(["show"], entry)
        output = self._run(args)
        try:
            data = parse_keepassxc_output(output)
        except TemplateError as exc:
            raise TemplateError(f"{shell_quote_command(self.command, args)}: {exc}") from exc
        self._cache[entry] = data
        return data