"""
assessment.py — Knowledge assessment
====================================
Runs the assessment collaborator's question/answer loop until a reply
carries ``[AssessmentResult]`` with a readable JSON object, then emits
``AssessmentCompleted(AssessmentResults)``.

A structured reply that cannot be decoded is logged, the learner is told
so and answers again, and the collaborator gets another chance.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from learning_cycle.channel import UserChannel
from learning_cycle.conversation import ChatMessage, Collaborator, Role
from learning_cycle.errors import PayloadError
from learning_cycle.events import ProcessEvent
from learning_cycle.models import AssessmentResults
from learning_cycle.payload import ASSESSMENT_RESULT_MARKER, has_marker, load_tagged
from learning_cycle.step import ProcessStep, StepContext

logger = logging.getLogger(__name__)


class AssessmentStep(ProcessStep):
    name  = "Assessment"
    emits = frozenset({ProcessEvent.ASSESSMENT_COMPLETED})

    def __init__(self, channel: UserChannel, collaborator: Collaborator) -> None:
        super().__init__(channel)
        self.collaborator = collaborator

    def execute(self, context: StepContext, **payload: Any) -> None:
        conversation = self.conversation(self.collaborator)
        self.relay(conversation)

        while True:
            conversation.add_message(Role.USER, self.next_answer())
            replies = self.collect(conversation)
            if not replies:
                self.channel.say("Sorry, I could not get a response. Please try again.")
                continue

            results = self._read_replies(replies)
            if results is not None:
                logger.info("Assessment completed for %r: %s", results.subject, results.score_line())
                context.emit(ProcessEvent.ASSESSMENT_COMPLETED, results)
                return

    def _read_replies(self, replies: list[ChatMessage]) -> Optional[AssessmentResults]:
        for message in replies:
            if not has_marker(message.content, ASSESSMENT_RESULT_MARKER):
                self.channel.say(message.content)
                continue
            try:
                return AssessmentResults.from_payload(
                    load_tagged(message.content, ASSESSMENT_RESULT_MARKER)
                )
            except PayloadError as exc:
                logger.warning("Could not read assessment results: %s", exc)
                self.channel.say("Sorry, I could not read the assessment results. Please answer again.")
        return None
