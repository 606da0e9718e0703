"""Guessing of dotfile repository URLs and construction of clone commands."""

import os
import re
from dataclasses import dataclass


@dataclass(frozen=True)
class _RepoGuess:
    pattern: "re.Pattern[str]"
    http_repo: str
    http_username: str
    ssh_repo: str


_GUESSES = (
    _RepoGuess(
        re.compile(r"([-0-9A-Za-z]+)"),
        r"https://github.com/\g<1>/dotfiles.git",
        r"\g<1>",
        r"[email]:\g<1>/dotfiles.git",
    ),
    _RepoGuess(
        re.compile(r"([-0-9A-Za-z]+)/([-0-9A-Za-z]+)(\.git)?"),
        r"https://github.com/\g<1>/\g<2>.git",
        r"\g<1>",
        r"[email]:\g<1>/\g<2>.git",
    ),
    _RepoGuess(
        re.compile(r"([-.0-9A-Za-z]+)/([-0-9A-Za-z]+)"),
        r"https://\g<1>/\g<2>/dotfiles.git",
        r"\g<2>",
        r"git@\g<1>:\g<2>/dotfiles.git",
    ),
    _RepoGuess(
        re.compile(r"([-0-9A-Za-z]+)/([-0-9A-Za-z]+)/([-.0-9A-Za-z]+)"),
        r"https://\g<1>/\g<2>/\g<3>.git",
        r"\g<2>",
        r"git@\g<1>:\g<2>/\g<3>.git",
    ),
    _RepoGuess(
        re.compile(r"([-.0-9A-Za-z]+)/([-0-9A-Za-z]+)/([-0-9A-Za-z]+)(\.git)?"),
        r"https://\g<1>/\g<2>/\g<3>.git",
        r"\g<2>",
        r"git@\g<1>:\g<2>/\g<3>.git",
    ),
    _RepoGuess(
        re.compile(r"(https?://)([-.0-9A-Za-z]+)/([-0-9A-Za-z]+)/([-0-9A-Za-z]+)(\.git)?"),
        r"\g<1>\g<2>/\g<3>/\g<4>.git",
        r"\g<3>",
        r"git@\g<2>:\g<3>/\g<4>.git",
    ),
    _RepoGuess(
        re.compile(r"sr\.ht/~([-0-9A-Za-z]+)"),
        r"https://git.sr.ht/~\g<1>/dotfiles",
        r"\g<1>",
        r"[email]:~\g<1>/dotfiles",
    ),
    _RepoGuess(
        re.compile(r"sr\.ht/~([-0-9A-Za-z]+)/([-0-9A-Za-z]+)"),
        r"https://git.sr.ht/~\g<1>/\g<2>",
        r"\g<1>",
        r"[email]:~\g<1>/\g<2>",
    ),
)


def guess_dotfiles_repo_url(arg: str, ssh: bool = False) -> tuple[str, str]:
    """Guess ``(username, repo_url)`` from a short repository reference.

    When ``ssh`` is true the username is always empty. If nothing matches,
    ``arg`` is returned unchanged as the URL.
    """
    for guess in _GUESSES:
        m = guess.pattern.fullmatch(arg)
        if m is None:
            continue
        if ssh and guess.ssh_repo:
            return "", m.expand(guess.ssh_repo)
        if not ssh and guess.http_repo:
            return m.expand(guess.http_username), m.expand(guess.http_repo)
    return "", arg


def git_clone_args(
    url: str,
    working_tree: "str | os.PathLike[str]",
    branch: str = "",
    depth: int = 0,
) -> list[str]:
    """Return the git arguments that clone ``url`` into ``working_tree``."""
    args = ["clone", "--recurse-submodules"]
    if branch:
        args += ["--branch", branch]
    if depth:
        args += ["--depth", str(depth)]
    args += [url, os.fspath(working_tree)]
    return args