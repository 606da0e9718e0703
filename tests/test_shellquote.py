import pytest

from dotkit.shellquote import shell_quote, shell_quote_command


@pytest.mark.parametrize(
    ("s", "expected"),
    [
        ("", "''"),
        ("'", "\\'"),
        ("''", "\\'\\'"),
        ("'a'", "\\''a'\\'"),
        ("\\", "'\\\\'"),
        ("\\a", "'\\\\a'"),
        ("$a", "'$a'"),
        ("a", "a"),
        ("a/b", "a/b"),
        ("a b", "'a b'"),
        ("--arg", "--arg"),
        ("--arg=value", "--arg=value"),
    ],
)
def test_shell_quote(s, expected):
    assert shell_quote(s) == expected


@pytest.mark.parametrize(
    ("command", "args", "expected"),
    [
        ("command", [], "command"),
        ("command with spaces", [], "'command with spaces'"),
        ("command", ["arg1"], "command arg1"),
        ("command", ["arg1", "arg 2 with spaces"], "command arg1 'arg 2 with spaces'"),
    ],
)
def test_shell_quote_command(command, args, expected):
    assert shell_quote_command(command, args) == expected


def test_shell_quote_command_without_args_argument():
    assert shell_quote_command("a b") == "'a b'"