"""Template helpers backed by the 1Password command line client."""

import io
import json
import subprocess
from collections.abc import Callable, Sequence
from typing import Any

from dotkit.shellquote import shell_quote_command
from dotkit.util import TemplateError, run_command

Runner = Callable[[Sequence[str], Any, Any], bytes]


def onepassword_args(base_args: Sequence[str], args: Sequence[str]) -> list[str]:
    """Build arguments from an item name and optional vault and account."""
    if not 1 <= len(args) <= 3:
        raise TemplateError(f"expected 1, 2, or 3 arguments, got {len(args)}")
    result = [*base_args, args[0]]
    if len(args) > 1:
        result += ["--vault", args[1]]
    if len(args) > 2:
        result += ["--account", args[2]]
    return result


class OnePassword:
    """Read items and documents from 1Password."""

    def __init__(
        self, command: str = "op", stdin: Any = None, runner: Runner = run_command
    ) -> None:
        self.command = command
        self.stdin = stdin
        self._runner = runner
        self._output_cache: dict[str, bytes] = {}

    def output(self, args: Sequence[str]) -> bytes:
        """Run the client with ``args``, caching the output."""
        key = "\x00".join(args)
        if key in self._output_cache:
            return self._output_cache[key]
        stderr = io.BytesIO()
        try:
            output = self._runner([self.command, *args], self.stdin, stderr)
        except (subprocess.CalledProcessError, OSError) as exc:
            message = stderr.getvalue().strip().decode(errors="replace")
            raise TemplateError(
                f"{shell_quote_command(self.command, args)}: {exc}: {message}"
            ) from exc
        self._output_cache[key] = output
        return output

    def _json(self, args: Sequence[str]) -> Any:
        output = self.output(args)
        try:
            return json.loads(output)
        except ValueError as exc:
            raise TemplateError(
                f"{shell_quote_command(self.command, args)}: {exc}\n"
                f"{output.decode(errors='replace')}"
            ) from exc

    def get(self, *args: str) -> dict[str, Any]:
        """Return the decoded item."""
        op_args = onepassword_args(["get", "item"], args)
        data = self._json(op_args)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise TemplateError(
                f"{shell_quote_command(self.command, op_args)}: not an object"
            )
        return data

    def item(self, *args: str) -> dict[str, Any]:
        """Return the item's ``details`` with ``fields`` and ``sections`` lists."""
        data = self.get(*args)
        details = data.get("details") or {}
        return {
            "fields": list(details.get("fields") or []),
            "sections": list(details.get("sections") or []),
        }

    def details_fields(self, *args: str) -> dict[str, Any]:
        """Return the item's detail fields keyed by their designation."""
        return {
            field["designation"]: field
            for field in self.item(*args)["fields"]
            if isinstance(field.get("designation"), str)
        }

    def item_fields(self, *args: str) -> dict[str, Any]:
        """Return the fields of every section keyed by their title."""
        result: dict[str, Any] = {}
        for section in self.item(*args)["sections"]:
            for field in section.get("fields") or []:
                if isinstance(field.get("t"), str):
                    result[field["t"]] = field
        return result

    def document(self, *args: str) -> str:
        """Return the contents of a document."""
        return self.output(onepassword_args(["get", "document"], args)).decode()