"""
mandatory_learning.py — Tutor loop over mandatory training content
==================================================================
Like ``LearningStep``, but the plan comes from the resource provider (or
from stored mandatory progress) and the learner picks which pending
resource to study.  The chosen resource is downloaded and its text handed to
the mandatory tutor, so the conversation is about the actual content.

Resource selection
------------------
  * no pending resource     → "All mandatory learning resources have been
                              completed."  MandatoryLearningCompleted(plan)
  * one pending resource    → selected automatically
  * several                 → numbered list, re-asked until the number is valid

An empty or unreachable resource listing, or a download or extraction
failure, is reported to the learner and the dispatch ends without an event.
"""

from __future__ import annotations

import logging
from typing import Any

from learning_cycle.channel import CONTINUE, STOP, UserChannel, normalize_answer
from learning_cycle.conversation import Collaborator, Role
from learning_cycle.errors import ResourceUnavailable
from learning_cycle.events import ProcessEvent
from learning_cycle.models import (
    LearningPlan,
    LearningType,
    MandatoryLearningResource,
    ProgressState,
    Resource,
)
from learning_cycle.progress_store import ProgressStore
from learning_cycle.resources import ResourceProvider, resource_text
from learning_cycle.step import ProcessStep, StepContext

logger = logging.getLogger(__name__)


class MandatoryLearningStep(ProcessStep):
    name  = "MandatoryLearning"
    emits = frozenset({
        ProcessEvent.MANDATORY_CONTINUE_LEARNING,
        ProcessEvent.MANDATORY_STOP_LEARNING,
        ProcessEvent.MANDATORY_LEARNING_COMPLETED,
    })

    def __init__(
        self,
        channel: UserChannel,
        collaborator: Collaborator,
        store: ProgressStore,
        provider: ResourceProvider,
    ) -> None:
        super().__init__(channel)
        self.collaborator = collaborator
        self.store        = store
        self.provider     = provider

    def execute(self, context: StepContext, **payload: Any) -> None:
        try:
            plan = self._load_plan()
            pending = plan.pending(in_exam_scope=True)
            if not pending:
                self.channel.say("All mandatory learning resources have been completed.")
                context.emit(ProcessEvent.MANDATORY_LEARNING_COMPLETED, plan)
                return
            resource = self._select(pending)
            content = self._fetch(resource)
        except ResourceUnavailable as exc:
            logger.error("Mandatory learning unavailable: %s", exc)
            self.channel.say(str(exc))
            return

        conversation = self.conversation(self.collaborator)
        conversation.add_message(
            Role.ASSISTANT,
            "The resource to use is:\n"
            f"Title: {resource.title}\n"
            f"Content: {content}",
        )

        while True:
            self.relay(conversation)
            answer = self.next_answer()
            choice = normalize_answer(answer)
            if choice in (CONTINUE, STOP):
                resource.complete()
                self.store.save(ProgressState(learning_type=LearningType.MANDATORY, learning_plan=plan))
                event = (
                    ProcessEvent.MANDATORY_CONTINUE_LEARNING if choice == CONTINUE
                    else ProcessEvent.MANDATORY_STOP_LEARNING
                )
                context.emit(event, plan)
                return
            conversation.add_message(Role.USER, answer)

    # ── Plan ─────────────────────────────────────────────────────────────────

    def _load_plan(self) -> LearningPlan:
        progress = self.store.load()
        if progress is not None and progress.learning_type == LearningType.MANDATORY:
            return progress.learning_plan

        listed = self.provider.list()
        if not listed:
            raise ResourceUnavailable("No mandatory learning resources available.")
        return LearningPlan(resources=[
            Resource(title=r.title, url=r.content_uri, type=r.type, description=r.content)
            for r in listed
        ])

    def _select(self, pending: list[Resource]) -> Resource:
        if len(pending) == 1:
            return pending[0]

        self.channel.say("Mandatory Learning Resources:")
        for i, resource in enumerate(pending, 1):
            self.channel.say(f"{i}. {resource.title}")
        while True:
            self.channel.say("Enter the number of the resource you want to view:")
            answer = self.channel.ask().strip()
            if answer.isdigit() and 1 <= int(answer) <= len(pending):
                return pending[int(answer) - 1]
            self.channel.say("Invalid selection. Please try again.")

    # ── Content ──────────────────────────────────────────────────────────────

    def _fetch(self, resource: Resource) -> str:
        self.channel.say(f"Downloading '{resource.title}'...")
        path = self.provider.download(MandatoryLearningResource(
            title       = resource.title,
            content_uri = resource.url,
            content     = resource.description,
            type        = resource.type,
        ))
        if path is None:
            raise ResourceUnavailable("Failed to download the resource.")
        self.channel.say(f"Resource downloaded successfully to: {path}")

        content = resource_text(resource.type, path, fallback=resource.description)
        if not content.strip():
            raise ResourceUnavailable("Failed to extract content from the resource. Please check the file.")
        return content
