"""Feedback on a passed examination, per resource where scores were reported."""

from __future__ import annotations

from learning_cycle.channel import UserChannel
from learning_cycle.conversation import Collaborator, Role
from learning_cycle.events import ProcessEvent
from learning_cycle.models import ExaminationResult
from learning_cycle.step import ProcessStep, StepContext


class ExaminationFeedbackStep(ProcessStep):
    name      = "ExaminationFeedback"
    emits     = frozenset({ProcessEvent.EXAMINATION_FEEDBACK_COMPLETED})
    parameter = "examination_result"

    def __init__(self, channel: UserChannel, collaborator: Collaborator) -> None:
        super().__init__(channel)
        self.collaborator = collaborator

    def execute(self, context: StepContext, *, examination_result: ExaminationResult) -> None:
        conversation = self.conversation(self.collaborator)
        for resource in examination_result.resources:
            conversation.add_message(
                Role.ASSISTANT,
                "The assessment results are:\n"
                f"Id of resource: {resource.id}\n"
                f"Title of resource: {resource.title or ''}\n"
                f"Score: {resource.score or ''}",
            )
        if not examination_result.resources:
            conversation.add_message(
                Role.ASSISTANT,
                f"The examination results are: {examination_result.status.value}. "
                "Every resource in the learning plan was passed.",
            )

        result = examination_result.model_copy()
        for message in self.relay(conversation):
            result.feedback = message.content

        context.emit(ProcessEvent.EXAMINATION_FEEDBACK_COMPLETED, result)
