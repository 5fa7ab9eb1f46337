"""
learning.py — Tutor loop over the learning plan
===============================================
One dispatch tutors one resource: the first incomplete one in plan order.
The learner talks to the tutor until answering "continue" or "stop"; either
marks the resource complete and saves progress.

Emits
-----
  ContinueLearning(plan)    re-dispatches this step for the next resource
  StopLearning(plan)        back to the greeting; progress stays stored
  LearningCompleted(plan)   nothing left, straight away and with no input
"""

from __future__ import annotations

import logging

from learning_cycle.channel import CONTINUE, STOP, UserChannel, normalize_answer
from learning_cycle.conversation import Collaborator, Role
from learning_cycle.events import ProcessEvent
from learning_cycle.models import LearningPlan, LearningType, ProgressState, Resource
from learning_cycle.progress_store import ProgressStore
from learning_cycle.step import ProcessStep, StepContext

logger = logging.getLogger(__name__)


class LearningStep(ProcessStep):
    name      = "Learning"
    emits     = frozenset({
        ProcessEvent.CONTINUE_LEARNING,
        ProcessEvent.STOP_LEARNING,
        ProcessEvent.LEARNING_COMPLETED,
    })
    parameter = "learning_plan"

    def __init__(self, channel: UserChannel, collaborator: Collaborator, store: ProgressStore) -> None:
        super().__init__(channel)
        self.collaborator = collaborator
        self.store        = store

    def execute(self, context: StepContext, *, learning_plan: LearningPlan) -> None:
        resource = learning_plan.next_incomplete()
        if resource is None:
            logger.info("Every resource is complete")
            context.emit(ProcessEvent.LEARNING_COMPLETED, learning_plan)
            return

        conversation = self.conversation(self.collaborator)
        conversation.add_message(
            Role.ASSISTANT,
            "The resource to use is:\n"
            f"Title: {resource.title}\n"
            f"URL: {resource.url}\n"
            f"Description: {resource.description}",
        )

        while True:
            self.relay(conversation)
            answer = self.next_answer()
            choice = normalize_answer(answer)
            if choice in (CONTINUE, STOP):
                self._complete(learning_plan, resource)
                event = ProcessEvent.CONTINUE_LEARNING if choice == CONTINUE else ProcessEvent.STOP_LEARNING
                context.emit(event, learning_plan)
                return
            conversation.add_message(Role.USER, answer)

    def _complete(self, plan: LearningPlan, resource: Resource) -> None:
        resource.complete()
        # A plan sent back here by a failed exam keeps its stored learning type.
        stored = self.store.load()
        learning_type = stored.learning_type if stored is not None else LearningType.NEW
        self.store.save(ProgressState(learning_type=learning_type, learning_plan=plan))
        logger.info("Completed %r", resource.title)
