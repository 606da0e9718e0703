import io

import pytest

from dotkit.prompts import Prompter, SimulatedPrompter
from dotkit.util import TemplateError


def make(stdin_str):
    stdout = io.StringIO()
    return Prompter(io.StringIO(stdin_str), stdout), stdout


@pytest.mark.parametrize(
    "prompt,args,stdin_str,expected_stdout,expected",
    [
        ("bool", (), "false\n", "bool? ", False),
        ("bool", (True,), "no\n", "bool (default true)? ", False),
        ("bool", (True,), "\n", "bool (default true)? ", True),
    ],
)
def test_prompt_bool(prompt, args, stdin_str, expected_stdout, expected):
    prompter, stdout = make(stdin_str)
    assert prompter.prompt_bool(prompt, *args) is expected
    assert stdout.getvalue() == expected_stdout


@pytest.mark.parametrize(
    "prompt,args,stdin_str",
    [
        ("", (), "invalid\n"),
        ("", (False,), "invalid\n"),
        ("bool", (False, False), "\n"),
    ],
)
def test_prompt_bool_errors(prompt, args, stdin_str):
    prompter, _ = make(stdin_str)
    with pytest.raises(TemplateError):
        prompter.prompt_bool(prompt, *args)


@pytest.mark.parametrize(
    "prompt,args,stdin_str,expected_stdout,expected",
    [
        ("int", (), "1\n", "int? ", 1),
        ("int", (1,), "2\n", "int (default 1)? ", 2),
        ("int", (1,), "\n", "int (default 1)? ", 1),
    ],
)
def test_prompt_int(prompt, args, stdin_str, expected_stdout, expected):
    prompter, stdout = make(stdin_str)
    assert prompter.prompt_int(prompt, *args) == expected
    assert stdout.getvalue() == expected_stdout


@pytest.mark.parametrize(
    "prompt,args,stdin_str",
    [
        ("", (), "invalid\n"),
        ("", (1,), "invalid\n"),
        ("bool", (0, 0), "\n"),
    ],
)
def test_prompt_int_errors(prompt, args, stdin_str):
    prompter, _ = make(stdin_str)
    with pytest.raises(TemplateError):
        prompter.prompt_int(prompt, *args)


@pytest.mark.parametrize(
    "prompt,args,stdin_str,expected_stdout,expected",
    [
        ("string", (), "one\n", "string? ", "one"),
        ("string", ("one",), "two\n", 'string (default "one")? ', "two"),
        ("string", ("one",), " two \n", 'string (default "one")? ', "two"),
        ("string", (" one ",), "\n", 'string (default "one")? ', "one"),
        ("string", ("one",), "\n", 'string (default "one")? ', "one"),
        ("string", ("one",), " \r\n", 'string (default "one")? ', "one"),
    ],
)
def test_prompt_string(prompt, args, stdin_str, expected_stdout, expected):
    prompter, stdout = make(stdin_str)
    assert prompter.prompt_string(prompt, *args) == expected
    assert stdout.getvalue() == expected_stdout


def test_prompt_string_too_many_args():
    prompter, _ = make("\n")
    with pytest.raises(TemplateError, match="want 1 or 2 arguments, got 3"):
        prompter.prompt_string("bool", "", "")


def test_prompt_string_end_of_input():
    prompter, _ = make("")
    with pytest.raises(TemplateError):
        prompter.prompt_string("string")


def test_read_line_strips_line_ending():
    prompter, stdout = make("value\r\n")
    assert prompter.read_line("Name: ") == "value"
    assert stdout.getvalue() == "Name: "


def test_stdin_is_a_tty_false_for_string_stream():
    prompter, _ = make("")
    assert prompter.stdin_is_a_tty() is False


def test_write_to_stdout():
    prompter, stdout = make("")
    assert prompter.write_to_stdout("a", "b") == ""
    assert stdout.getvalue() == "ab"


def test_simulated_prompter_values_and_defaults():
    simulated = SimulatedPrompter(
        prompt_bool={"b": "yes"},
        prompt_int={"i": 7},
        prompt_string={"s": "value"},
        stdin_is_a_tty=True,
    )
    assert simulated.prompt_bool("b") is True
    assert simulated.prompt_bool("missing") is False
    assert simulated.prompt_bool("missing", True) is True
    assert simulated.prompt_int("i") == 7
    assert simulated.prompt_int("missing") == 0
    assert simulated.prompt_int("missing", 3) == 3
    assert simulated.prompt_string("s") == "value"
    assert simulated.prompt_string("missing") == "missing"
    assert simulated.prompt_string("missing", "default") == "default"
    assert simulated.stdin_is_a_tty() is True


def test_simulated_prompter_errors():
    with pytest.raises(ValueError):
        SimulatedPrompter(prompt_bool={"b": "invalid"})
    simulated = SimulatedPrompter()
    with pytest.raises(TemplateError):
        simulated.prompt_string("s", "a", "b")
    with pytest.raises(TemplateError):
        simulated.prompt_int("i", 1, 2)
    with pytest.raises(TemplateError):
        simulated.prompt_bool("b", True, False)