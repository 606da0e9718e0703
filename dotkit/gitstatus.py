"""Parsing of ``git status --ignored --porcelain=v2`` output."""

import re
from dataclasses import dataclass, field

_XY = r"([!.?ACDMRU])([!.?ACDMRU]) "
_SUB = r"(N\.\.\.|S[.C][.M][.U]) "

_ORDINARY = re.compile(
    r"1 " + _XY + _SUB + r"([0-7]+) ([0-7]+) ([0-7]+) ([0-9a-f]+) ([0-9a-f]+) (.*)"
)
_RENAMED_OR_COPIED = re.compile(
    r"2 " + _XY + _SUB
    + r"([0-7]+) ([0-7]+) ([0-7]+) ([0-9a-f]+) ([0-9a-f]+) ([CR])([0-9]+) (.*?)\t(.*)"
)
_UNMERGED = re.compile(
    r"u " + _XY + _SUB
    + r"([0-7]+) ([0-7]+) ([0-7]+) ([0-7]+) ([0-9a-f]+) ([0-9a-f]+) ([0-9a-f]+) (.*)"
)
_UNTRACKED = re.compile(r"\? (.*)")
_IGNORED = re.compile(r"! (.*)")


class ParseError(ValueError):
    """A line of status output that could not be parsed."""

    def __init__(self, text: str) -> None:
        super().__init__(f"{text}: parse error")
        self.text = text


@dataclass(frozen=True)
class OrdinaryStatus:
    """Status of a modified file."""

    x: str
    y: str
    sub: str
    mh: int
    mi: int
    mw: int
    hh: str
    hi: str
    path: str


@dataclass(frozen=True)
class RenamedOrCopiedStatus:
    """Status of a renamed or copied file."""

    x: str
    y: str
    sub: str
    mh: int
    mi: int
    mw: int
    hh: str
    hi: str
    rc: str
    score: int
    path: str
    orig_path: str


@dataclass(frozen=True)
class UnmergedStatus:
    """Status of an unmerged file."""

    x: str
    y: str
    sub: str
    m1: int
    m2: int
    m3: int
    mw: int
    h1: str
    h2: str
    h3: str
    path: str


@dataclass(frozen=True)
class UntrackedStatus:
    """Status of an untracked file."""

    path: str


@dataclass(frozen=True)
class IgnoredStatus:
    """Status of an ignored file."""

    path: str


@dataclass
class Status:
    """The parsed status of a working tree."""

    ordinary: list[OrdinaryStatus] = field(default_factory=list)
    renamed_or_copied: list[RenamedOrCopiedStatus] = field(default_factory=list)
    unmerged: list[UnmergedStatus] = field(default_factory=list)
    untracked: list[UntrackedStatus] = field(default_factory=list)
    ignored: list[IgnoredStatus] = field(default_factory=list)

    def empty(self) -> bool:
        """Return whether no entries are recorded."""
        return not (
            self.ordinary
            or self.renamed_or_copied
            or self.unmerged
            or self.untracked
            or self.ignored
        )


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _match(pattern: "re.Pattern[str]", line: str) -> "re.Match[str]":
    m = pattern.fullmatch(line)
    if m is None:
        raise ParseError(line)
    return m


def parse_status_porcelain_v2(output: bytes | str) -> Status | None:
    """Parse porcelain v2 status output; return ``None`` if there are no entries."""
    text = output.decode("utf-8", "surrogateescape") if isinstance(output, bytes) else output
    status = Status()
    for line in _lines(text):
        kind = line[:1]
        if kind == "1":
            g = _match(_ORDINARY, line).groups()
            status.ordinary.append(
                OrdinaryStatus(
                    x=g[0], y=g[1], sub=g[2],
                    mh=int(g[3], 8), mi=int(g[4], 8), mw=int(g[5], 8),
                    hh=g[6], hi=g[7], path=g[8],
                )
            )
        elif kind == "2":
            g = _match(_RENAMED_OR_COPIED, line).groups()
            status.renamed_or_copied.append(
                RenamedOrCopiedStatus(
                    x=g[0], y=g[1], sub=g[2],
                    mh=int(g[3], 8), mi=int(g[4], 8), mw=int(g[5], 8),
                    hh=g[6], hi=g[7], rc=g[8], score=int(g[9]),
                    path=g[10], orig_path=g[11],
                )
            )
        elif kind == "u":
            g = _match(_UNMERGED, line).groups()
            status.unmerged.append(
                UnmergedStatus(
                    x=g[0], y=g[1], sub=g[2],
                    m1=int(g[3], 8), m2=int(g[4], 8), m3=int(g[5], 8), mw=int(g[6], 8),
                    h1=g[7], h2=g[8], h3=g[9], path=g[10],
                )
            )
        elif kind == "?":
            status.untracked.append(UntrackedStatus(path=_match(_UNTRACKED, line).group(1)))
        elif kind == "!":
            status.ignored.append(IgnoredStatus(path=_match(_IGNORED, line).group(1)))
        elif kind == "#":
            continue
        else:
            raise ParseError(line)
    if status.empty():
        return None
    return status