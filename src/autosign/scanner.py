"""Quote-aware scanning of shell command lines.

The scanner is a three-state machine. Each character is read in the current
state and may move the machine to another one:

    =========  =====  =========
    state      char   next
    =========  =====  =========
    UNQUOTED   '      SINGLE
    UNQUOTED   "      DOUBLE
    SINGLE     '      UNQUOTED
    DOUBLE     "      UNQUOTED
    =========  =====  =========

Any other pair keeps the state. In UNQUOTED and DOUBLE a backslash escapes
the following character, so an escaped quote never changes state and an
escaped separator never ends a command. Inside SINGLE the backslash is an
ordinary character.

A command ends at a bare `&&`, `||`, `;`, `|`, newline or lone `&`. An `&`
that belongs to a redirection (`2>&1`, `&>log`) is not a separator.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass


class QuoteState(enum.Enum):
    UNQUOTED = "unquoted"
    SINGLE = "single"
    DOUBLE = "double"


TRANSITIONS: dict[tuple[QuoteState, str], QuoteState] = {
    (QuoteState.UNQUOTED, "'"): QuoteState.SINGLE,
    (QuoteState.UNQUOTED, '"'): QuoteState.DOUBLE,
    (QuoteState.SINGLE, "'"): QuoteState.UNQUOTED,
    (QuoteState.DOUBLE, '"'): QuoteState.UNQUOTED,
}
ESCAPE = "\\"
ESCAPING_STATES = frozenset({QuoteState.UNQUOTED, QuoteState.DOUBLE})
# Longest first so the reported separator length is right for "&&" and "||".
SEPARATORS = ("&&", "||", "|&", ";", "|", "\n", "&")
REDIRECTS = ("<", ">")


@dataclass(frozen=True)
class ScanStep:
    """One character as seen by the quote machine."""

    index: int
    char: str
    state: QuoteState
    next_state: QuoteState
    escaped: bool = False

    @property
    def is_bare(self) -> bool:
        """True for an unquoted, unescaped character that is not a quote."""

        return self.state is QuoteState.UNQUOTED and self.next_state is QuoteState.UNQUOTED and not self.escaped

    @property
    def closes_quote(self) -> bool:
        return self.state is not QuoteState.UNQUOTED and self.next_state is QuoteState.UNQUOTED


@dataclass(frozen=True)
class Segment:
    """A command between separators, as a half-open ``[start, end)`` span."""

    start: int
    end: int

    def text(self, command: str) -> str:
        return command[self.start : self.end]


def scan(command: str, start: int = 0) -> Iterator[ScanStep]:
    """Walk ``command`` from ``start``, assuming ``start`` is outside quotes."""

    state = QuoteState.UNQUOTED
    escaped = False
    for index in range(start, len(command)):
        char = command[index]
        if escaped:
            yield ScanStep(index, char, state, state, escaped=True)
            escaped = False
            continue
        if char == ESCAPE and state in ESCAPING_STATES:
            yield ScanStep(index, char, state, state)
            escaped = True
            continue
        next_state = TRANSITIONS.get((state, char), state)
        yield ScanStep(index, char, state, next_state)
        state = next_state


def separator_at(command: str, index: int) -> str | None:
    for separator in SEPARATORS:
        if command.startswith(separator, index):
            if separator == "&" and _is_redirect(command, index):
                return None
            return separator
    return None


def find_command_end(command: str, start: int = 0) -> int:
    """Return the index of the first bare separator at or after ``start``.

    Returns ``len(command)`` when the command runs to the end of the line.
    """

    for step in scan(command, start):
        if step.is_bare and separator_at(command, step.index) is not None:
            return step.index
    return len(command)


def iter_segments(command: str) -> Iterator[Segment]:
    """Yield every command segment of a chained command line, in order."""

    start = 0
    while True:
        end = find_command_end(command, start)
        yield Segment(start, end)
        separator = separator_at(command, end)
        if separator is None:
            return
        start = end + len(separator)


def find_closing_quote(command: str, open_index: int) -> int | None:
    """Return the index of the quote closing the one at ``open_index``."""

    if open_index >= len(command) or command[open_index] not in "'\"":
        return None
    for step in scan(command, open_index):
        if step.closes_quote:
            return step.index
    return None


def bare_indices(command: str, segment: Segment) -> frozenset[int]:
    """Indices inside ``segment`` where a flag or word may start."""

    indices: set[int] = set()
    for step in scan(command, segment.start):
        if step.index >= segment.end:
            break
        if step.is_bare:
            indices.add(step.index)
    return frozenset(indices)


def _is_redirect(command: str, index: int) -> bool:
    # `>&2`, `<&3` and `&>file`
    before = command[index - 1] if index else ""
    return before in REDIRECTS or command.startswith(">", index + 1)
