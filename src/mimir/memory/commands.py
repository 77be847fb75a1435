"""Detection of explicit memory directives in user input.

Supported phrasings:
    - "Remember that I like chocolate"
    - "Please remember my favorite color is blue"
    - "Make a note that my birthday is on May 15th"

Rules are tried in order and the first match wins. Triggers are not
anchored: a phrase anywhere in a longer message still fires, and the
captured text is stored as-is with no check of what it says.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from .models import CommandKind, MemoryCommand

_NOTE_SUBJECT = re.compile(r"(.*?) is (.*)", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True)
class CommandRule:
    """A trigger pattern and the function that builds a command from its match."""

    name: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str]], MemoryCommand | None]

    def apply(self, text: str) -> MemoryCommand | None:
        match = self.pattern.search(text)
        if match is None:
            return None
        return self.build(match)


def _remember(group: int) -> Callable[[re.Match[str]], MemoryCommand | None]:
    def build(match: re.Match[str]) -> MemoryCommand | None:
        content = (match.group(group) or "").strip()
        if not content:
            return None
        return MemoryCommand(kind=CommandKind.REMEMBER, content=content)

    return build


def _note(match: re.Match[str]) -> MemoryCommand | None:
    body = (match.group(1) or "").strip()
    if not body:
        return None

    subject = _NOTE_SUBJECT.match(body)
    if subject:
        description = subject.group(1).strip()
        content = subject.group(2).strip()
        if description and content:
            return MemoryCommand(
                kind=CommandKind.NOTE, description=description, content=content
            )

    return MemoryCommand(kind=CommandKind.NOTE, content=body)


COMMAND_RULES: tuple[CommandRule, ...] = (
    CommandRule(
        name="remember_that",
        pattern=re.compile(r"remember that (.*)", re.IGNORECASE),
        build=_remember(1),
    ),
    CommandRule(
        name="please_remember",
        pattern=re.compile(
            r"(?:please\s+)?remember\s+(my|that my|that) ([^.]+)", re.IGNORECASE
        ),
        build=_remember(2),
    ),
    CommandRule(
        name="make_a_note",
        pattern=re.compile(r"make a note (?:that|about) (.*)", re.IGNORECASE),
        build=_note,
    ),
)


def detect_memory_command(
    text: str, rules: tuple[CommandRule, ...] = COMMAND_RULES
) -> MemoryCommand | None:
    """Find an explicit memory directive in user input.

    Args:
        text: Raw user input.
        rules: Ordered rules to try.

    Returns:
        The command built by the first matching rule, or None.
    """
    if not text:
        return None

    for rule in rules:
        command = rule.apply(text)
        if command is not None:
            return command
    return None
