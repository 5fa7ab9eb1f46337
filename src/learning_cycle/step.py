"""
step.py — The unit of orchestrated work
========================================
Every stage of the learning cycle is a ``ProcessStep``:

  activate(state)          restore the step's StepState before any work
  execute(context, **p)    run to completion and emit exactly one event
                           through ``context.emit`` (or none, when an
                           external resource failed and the dispatch stalls)
  snapshot()               hand the state back to the engine

``StepState`` is one generic, resumable conversation state shared by all
steps (just the transcript).  The engine keeps one per step, keyed by step
name, and restores it on every dispatch; steps never subclass it.

A step instance is created once per process and may be dispatched many
times (the learning steps re-dispatch themselves).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, Field

from learning_cycle.channel import UserChannel
from learning_cycle.conversation import ChatMessage, Collaborator, Conversation
from learning_cycle.errors import CollaboratorError, StepProtocolError
from learning_cycle.events import ProcessEvent

logger = logging.getLogger(__name__)


class StepState(BaseModel):
    """Resumable per-step state: the conversation transcript."""
    transcript: list[ChatMessage] = Field(default_factory=list)


class StepContext:
    """Handed to ``execute``; collects the single event a run emits."""

    def __init__(self, step: "ProcessStep") -> None:
        self._step = step
        self._event: Optional[ProcessEvent] = None
        self._payload: Any = None

    @property
    def emitted(self) -> bool:
        return self._event is not None

    @property
    def event(self) -> Optional[ProcessEvent]:
        return self._event

    @property
    def payload(self) -> Any:
        return self._payload

    def emit(self, event: ProcessEvent, payload: Any = None) -> None:
        if event not in self._step.emits:
            raise StepProtocolError(f"{self._step.name} does not declare event {event.value}")
        if self._event is not None:
            raise StepProtocolError(
                f"{self._step.name} already emitted {self._event.value}; "
                f"cannot also emit {event.value}"
            )
        logger.debug("%s emitted %s", self._step.name, event.value)
        self._event = event
        self._payload = payload


class ProcessStep(ABC):
    """Base class for all steps.  Subclasses set ``name``, ``emits`` and ``parameter``."""

    name:      ClassVar[str] = ""
    emits:     ClassVar[frozenset[ProcessEvent]] = frozenset()
    parameter: ClassVar[Optional[str]] = None   # keyword the payload is passed as

    def __init__(self, channel: UserChannel) -> None:
        self.channel = channel
        self._state = StepState()

    # ── State ────────────────────────────────────────────────────────────────

    @property
    def state(self) -> StepState:
        return self._state

    def activate(self, state: Optional[StepState] = None) -> None:
        """Restore prior state; ``None`` gives a fresh one."""
        self._state = state.model_copy(deep=True) if state is not None else StepState()

    def snapshot(self) -> StepState:
        return self._state.model_copy(deep=True)

    def conversation(self, collaborator: Collaborator) -> Conversation:
        """A conversation that appends straight into this step's transcript."""
        return Conversation(collaborator, self._state.transcript)

    # ── Conversation helpers ─────────────────────────────────────────────────

    def collect(self, conversation: Conversation) -> list[ChatMessage]:
        """
        Invoke the collaborator and return its replies.

        A backend failure is logged and yields no replies; the caller's loop
        then re-prompts the user as it would for any unusable answer.
        """
        try:
            return list(conversation.invoke())
        except CollaboratorError as exc:
            logger.error("%s: collaborator call failed: %s", self.name, exc)
            return []

    def relay(self, conversation: Conversation) -> list[ChatMessage]:
        """Invoke the collaborator and show every reply to the user."""
        replies = self.collect(conversation)
        if not replies:
            self.channel.say("Sorry, I could not get a response. Please try again.")
        for message in replies:
            self.channel.say(message.content)
        return replies

    def next_answer(self) -> str:
        """Next non-blank answer from the learner, unnormalized."""
        while True:
            answer = self.channel.ask()
            if answer.strip():
                return answer

    # ── Work ─────────────────────────────────────────────────────────────────

    @abstractmethod
    def execute(self, context: StepContext, **payload: Any) -> None:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
