"""Feedback on the assessment: one collaborator turn, no user input."""

from __future__ import annotations

import logging

from learning_cycle.channel import UserChannel
from learning_cycle.conversation import Collaborator, Role
from learning_cycle.events import ProcessEvent
from learning_cycle.models import AssessmentResults
from learning_cycle.step import ProcessStep, StepContext

logger = logging.getLogger(__name__)


class FeedbackStep(ProcessStep):
    name      = "Feedback"
    emits     = frozenset({ProcessEvent.FEEDBACK_COMPLETED})
    parameter = "assessment_results"

    def __init__(self, channel: UserChannel, collaborator: Collaborator) -> None:
        super().__init__(channel)
        self.collaborator = collaborator

    def execute(self, context: StepContext, *, assessment_results: AssessmentResults) -> None:
        conversation = self.conversation(self.collaborator)
        conversation.add_message(
            Role.ASSISTANT,
            "The assessment results are:\n"
            f"Subject: {assessment_results.subject}\n"
            f"Score: {assessment_results.score_line()}",
        )

        results = assessment_results.model_copy()
        for message in self.relay(conversation):
            # The last reply wins when the collaborator answers in several parts.
            results.feedback = message.content

        context.emit(ProcessEvent.FEEDBACK_COMPLETED, results)
