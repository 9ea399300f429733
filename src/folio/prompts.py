"""Input providers for commands that may ask the user for missing values.

Commands never talk to the terminal directly.  They receive an
:class:`InputProvider`:

- :class:`InteractiveInput` prompts through ``click`` when a TTY is attached;
- :class:`DefaultInput` answers every question with its default at once, so
  piped or scripted runs never block.
"""

from __future__ import annotations

import sys
from typing import IO, Protocol, runtime_checkable

import click


@runtime_checkable
class InputProvider(Protocol):
    interactive: bool

    def ask(self, question: str, default: str = "") -> str:
        """Return the trimmed answer, or *default* when the answer is blank."""
        ...


class InteractiveInput:
    interactive = True

    def ask(self, question: str, default: str = "") -> str:
        answer = click.prompt(question, default=default, show_default=bool(default), type=str)
        return answer.strip() or default


class DefaultInput:
    interactive = False

    def ask(self, question: str, default: str = "") -> str:
        return default


def ask_required(provider: InputProvider, question: str, default: str = "") -> str:
    """Keep asking until a non-blank answer arrives (interactive only).

    Non-interactive providers get a single attempt, which may be blank.
    """
    value = provider.ask(question, default).strip()
    while not value and provider.interactive:
        value = provider.ask(question, default).strip()
    return value


def choose_input(stream: IO[str] | None = None) -> InputProvider:
    stream = stream or sys.stdin
    return InteractiveInput() if stream.isatty() else DefaultInput()


def read_piped_body(stream: IO[str] | None = None) -> str:
    """Return everything piped on *stream*, or ``""`` for a terminal."""
    stream = stream or sys.stdin
    if stream.isatty():
        return ""
    return stream.read()
