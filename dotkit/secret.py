"""Template helpers backed by a generic secret command and by Vault."""

import json
import subprocess
from collections.abc import Callable, Sequence
from typing import Any

from dotkit.shellquote import shell_quote_command
from dotkit.util import TemplateError, run_command

Runner = Callable[[Sequence[str], Any, Any], bytes]


def _failure(command: str, args: Sequence[str], exc: Exception, output: bytes) -> TemplateError:
    return TemplateError(
        f"{shell_quote_command(command, args)}: {exc}\n{output.decode(errors='replace')}"
    )


class _Command:
    def __init__(
        self,
        command: str,
        stdin: Any = None,
        stderr: Any = None,
        runner: Runner = run_command,
    ) -> None:
        self.command = command
        self.stdin = stdin
        self.stderr = stderr
        self._runner = runner

    def _run(self, args: Sequence[str]) -> bytes:
        try:
            return self._runner([self.command, *args], self.stdin, self.stderr)
        except subprocess.CalledProcessError as exc:
            raise _failure(self.command, args, exc, exc.output or b"") from exc
        except OSError as exc:
            raise _failure(self.command, args, exc, b"") from exc

    def _json(self, args: Sequence[str]) -> Any:
        output = self._run(args)
        try:
            return json.loads(output)
        except ValueError as exc:
            raise _failure(self.command, args, exc, output) from exc


class Secret(_Command):
    """Read secrets by running a configured command."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._cache: dict[str, str] = {}
        self._json_cache: dict[str, Any] = {}

    def value(self, *args: str) -> str:
        """Return the command's output with surrounding space removed."""
        key = "\x00".join(args)
        if key not in self._cache:
            self._cache[key] = self._run(args).strip().decode()
        return self._cache[key]

    def json(self, *args: str) -> Any:
        """Return the command's output decoded as JSON."""
        key = "\x00".join(args)
        if key not in self._json_cache:
            self._json_cache[key] = self._json(args)
        return self._json_cache[key]


class Vault(_Command):
    """Read key/value secrets from Vault."""

    def __init__(self, command: str = "vault", *args: Any, **kwargs: Any) -> None:
        super().__init__(command, *args, **kwargs)
        self._cache: dict[str, Any] = {}

    def get(self, key: str) -> Any:
        """Return the decoded JSON of ``vault kv get`` for ``key``."""
        if key not in self._cache:
            self._cache[key] = self._json(["kv", "get", "-format=json", key])
        return self._cache[key]