"""Signature injection into `git commit` and `gh` command lines."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from autosign.scanner import Segment, bare_indices, find_closing_quote, iter_segments
from autosign.signature import DEFAULT_HOST_NAME, escape_for_shell, has_signature

# Optional subshell/group opener and `VAR=value` assignments before the program.
_COMMAND_PREFIX = r"\s*[({]?\s*(?:[A-Za-z_][A-Za-z0-9_]*=\S*\s+)*"

COMMIT_COMMAND = re.compile(_COMMAND_PREFIX + r"git\s+commit\b", re.IGNORECASE)
GH_COMMAND = re.compile(_COMMAND_PREFIX + r"gh\s+(?:pr|issue)\s+(?:create|comment|review)\b", re.IGNORECASE)

# `-m` alone or closing a short-flag cluster such as `-am`.
MESSAGE_FLAG = re.compile(r"(?<!\S)(?:-[A-Za-z]*m(?=[\s\"'])|--message(?=[=\s]))")
BODY_FLAG = re.compile(r"(?<!\S)(?:--body(?=[\s=\"'])|-b(?=[\s\"']))")

QUOTES = "'\""
HEREDOC = "<<"


@dataclass(frozen=True)
class CommandFamily:
    """A kind of command the rewriter knows how to sign."""

    name: str
    pattern: re.Pattern[str]
    rewrite: Callable[[str, Segment, str], str]
    required_flag: re.Pattern[str] | None = None

    def matches(self, command: str, segment: Segment) -> bool:
        if self.pattern.match(segment.text(command)) is None:
            return False
        return self.required_flag is None or find_flag(command, segment, self.required_flag) is not None


def rewrite_command(command: str, signature: str, *, host_name: str = DEFAULT_HOST_NAME) -> str:
    """Return ``command`` with ``signature`` added to its first signable command.

    Lines that already carry a signature, or that contain no commit with a
    message flag and no `gh pr|issue create|comment|review`, come back
    unchanged. Families are tried in order and only one segment is touched.
    """

    if has_signature(command, host_name=host_name):
        return command

    segments = list(iter_segments(command))
    for family in FAMILIES:
        for segment in segments:
            if family.matches(command, segment):
                logger.debug("rewrite.match family={} start={} end={}", family.name, segment.start, segment.end)
                return family.rewrite(command, segment, signature)
    return command


def find_flag(
    command: str, segment: Segment, pattern: re.Pattern[str], *, last: bool = False
) -> re.Match[str] | None:
    """Find the first (or last) match of a flag pattern that starts outside quotes."""

    bare = bare_indices(command, segment)
    found: re.Match[str] | None = None
    for match in pattern.finditer(command, segment.start, segment.end):
        if match.start() not in bare:
            continue
        if not last:
            return match
        found = match
    return found


def append_to_segment(command: str, segment: Segment, addition: str) -> str:
    """Insert ``addition`` after the segment's last non-space character."""

    text = segment.text(command)
    kept = text.rstrip()
    trailing = text[len(kept) :]
    return command[: segment.start] + kept + addition + trailing + command[segment.end :]


def rewrite_commit(command: str, segment: Segment, signature: str) -> str:
    # git joins repeated -m values as separate paragraphs.
    return append_to_segment(command, segment, f' -m "{escape_for_shell(signature)}"')


def rewrite_gh(command: str, segment: Segment, signature: str) -> str:
    # gh keeps the last --body it sees, so that is the one to sign.
    flag = find_flag(command, segment, BODY_FLAG, last=True)
    if flag is not None:
        spliced = splice_body(command, segment, flag.end(), signature)
        if spliced is not None:
            return spliced
        logger.debug("rewrite.body_not_isolable flag={} start={}", flag.group(0), flag.start())
    return append_to_segment(command, segment, f' --body "{escape_for_shell(signature)}"')


def splice_body(command: str, segment: Segment, value_start: int, signature: str) -> str | None:
    """Append the signature inside a quoted flag value.

    ``value_start`` points just past the flag. Returns ``None`` when the value
    is not a single quoted word inside the segment, or is a here-document.
    """

    index = value_start
    if command.startswith("=", index):
        index += 1
    else:
        while index < segment.end and command[index].isspace():
            index += 1
    if index >= segment.end or command[index] not in QUOTES:
        return None

    close = find_closing_quote(command, index)
    if close is None or close >= segment.end:
        return None
    content = command[index + 1 : close]
    if HEREDOC in content:
        return None

    escaped = escape_for_shell(signature, command[index])
    kept = content.rstrip()
    replacement = f"{kept}\n\n{escaped}" if kept else escaped
    return command[: index + 1] + replacement + command[close:]


FAMILIES: tuple[CommandFamily, ...] = (
    CommandFamily("git-commit", COMMIT_COMMAND, rewrite_commit, required_flag=MESSAGE_FLAG),
    CommandFamily("gh", GH_COMMAND, rewrite_gh),
)
