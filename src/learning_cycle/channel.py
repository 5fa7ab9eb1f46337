"""
channel.py — The human side of every step
==========================================
Steps never touch stdin/stdout directly.  They talk to a ``UserChannel``:

  say(text)   show an agent/system message
  ask()       block until the human answers one line (trimmed, case kept)

``ConsoleChannel`` is the rich-powered terminal implementation.  Tests use a
scripted channel; a network session would implement the same two methods.

Answers are compared against control keywords only after
``normalize_answer`` (trim + lower-case).
"""

from __future__ import annotations

from typing import Optional, Protocol

from rich.console import Console
from rich.text import Text

from learning_cycle.errors import InputClosed

YES       = "yes"
NO        = "no"
CONTINUE  = "continue"
STOP      = "stop"
NEW       = "new"
MANDATORY = "mandatory"

AGENT_PREFIX = "[AGENT] "


def normalize_answer(text: Optional[str]) -> str:
    return (text or "").strip().lower()


class UserChannel(Protocol):
    def say(self, text: str) -> None:
        ...

    def ask(self) -> str:
        ...


class ConsoleChannel:
    """Line-oriented terminal channel."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def say(self, text: str) -> None:
        self._console.print(Text.assemble((AGENT_PREFIX, "bold cyan"), text))

    def ask(self) -> str:
        try:
            answer = self._console.input("[bold green]>> [/bold green]")
        except EOFError as exc:
            raise InputClosed("console input closed") from exc
        return answer.strip()
