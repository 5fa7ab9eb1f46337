"""
conversation.py — Role-tagged transcripts and the collaborator seam
===================================================================
A ``Conversation`` is an append-only list of ``ChatMessage`` objects bound to
one ``Collaborator``.  ``invoke()`` sends the whole transcript and returns a
lazy, finite, one-shot iterator over the reply messages; every reply is
appended to the transcript as it is consumed.

The transcript list can be owned by someone else (a step's ``StepState``),
which is how conversational history survives re-dispatch of a step.

Collaborators
-------------
  Collaborator               protocol: ``name`` + ``reply(history)``
  AzureOpenAICollaborator    chat completions against one Azure OpenAI
                             deployment, with a fixed system instruction block
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator, Optional, Protocol, Sequence

from openai import AzureOpenAI, OpenAIError
from pydantic import BaseModel

from learning_cycle.errors import CollaboratorError

logger = logging.getLogger(__name__)


class Role(str, Enum):
    SYSTEM    = "system"
    ASSISTANT = "assistant"
    USER      = "user"


class ChatMessage(BaseModel):
    role:    Role
    content: str = ""
    author:  Optional[str] = None   # collaborator name for replies


class Collaborator(Protocol):
    name: str

    def reply(self, history: Sequence[ChatMessage]) -> Iterable[ChatMessage]:
        """Return the collaborator's reply message(s) to *history*."""
        ...


class Conversation:
    """Append-only transcript plus the collaborator that answers it."""

    def __init__(self, collaborator: Collaborator, history: Optional[list[ChatMessage]] = None) -> None:
        self._collaborator = collaborator
        self._messages: list[ChatMessage] = history if history is not None else []

    @property
    def collaborator(self) -> Collaborator:
        return self._collaborator

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def add_message(self, role: Role, text: str) -> ChatMessage:
        message = ChatMessage(role=role, content=text)
        self._messages.append(message)
        return message

    def invoke(self) -> Iterator[ChatMessage]:
        snapshot = list(self._messages)
        for message in self._collaborator.reply(snapshot):
            self._messages.append(message)
            yield message


# ─── Azure OpenAI backend ────────────────────────────────────────────────────

class AzureOpenAICollaborator:
    """One named role backed by an Azure OpenAI chat deployment."""

    def __init__(
        self,
        name: str,
        instructions: str,
        deployment: str,
        client: AzureOpenAI,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> None:
        self.name         = name
        self.instructions = instructions
        self.deployment   = deployment
        self._client      = client
        self._temperature = temperature
        self._max_tokens  = max_tokens

    def _to_openai(self, history: Sequence[ChatMessage]) -> list[dict[str, str]]:
        messages = [{"role": Role.SYSTEM.value, "content": self.instructions}]
        messages.extend({"role": m.role.value, "content": m.content} for m in history)
        return messages

    def reply(self, history: Sequence[ChatMessage]) -> Iterator[ChatMessage]:
        try:
            response = self._client.chat.completions.create(
                model=self.deployment,
                messages=self._to_openai(history),
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except OpenAIError as exc:
            raise CollaboratorError(f"{self.name}: {exc}") from exc

        logger.debug("%s replied with %d choice(s)", self.name, len(response.choices))
        for choice in response.choices:
            yield ChatMessage(
                role=Role.ASSISTANT,
                content=choice.message.content or "",
                author=self.name,
            )
