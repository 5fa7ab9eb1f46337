"""
examination.py — Examination over the plan's exam scope
=======================================================
The examination collaborator is given every resource still in exam scope,
questions the learner, and eventually answers ``[EXAMINATIONRESULTS]``.

Outcome policy
--------------
  Passed   every resource leaves exam scope, the progress record is
           deleted, ExaminationCompletedPassed(result).
  Failed   resources listed as failing are reopened (IsComplete → false)
           and stay in scope; every other resource leaves exam scope.
           Progress is saved, ExaminationCompletedFailed(plan).

A resource leaves exam scope only through this step, so each retake
examines strictly fewer resources until the learner passes.
"""

from __future__ import annotations

import logging

from learning_cycle.channel import UserChannel
from learning_cycle.conversation import Collaborator, Role
from learning_cycle.errors import PayloadError
from learning_cycle.events import ProcessEvent
from learning_cycle.models import (
    ExaminationResult,
    ExamStatus,
    LearningPlan,
    LearningType,
    ProgressState,
)
from learning_cycle.payload import EXAMINATION_RESULTS_MARKER, has_marker, parse_tagged
from learning_cycle.progress_store import ProgressStore
from learning_cycle.step import ProcessStep, StepContext

logger = logging.getLogger(__name__)

FAILED_MESSAGE = (
    "Unfortunately you have failed the exam, you will need to revisit the "
    "learning materials that you performed poorly on and try again."
)
PASSED_MESSAGE = "Congratulations! You have passed the exam and completed the learning plan."


def apply_result(plan: LearningPlan, result: ExaminationResult) -> None:
    """Update completion and exam scope of *plan* in place."""
    if result.passed:
        for resource in plan.resources:
            resource.retire_from_exam()
        return
    failing = result.failed_ids()
    for resource in plan.resources:
        if str(resource.id) in failing:
            resource.reopen()
        else:
            resource.retire_from_exam()


class ExaminationStep(ProcessStep):
    name      = "Examination"
    emits     = frozenset({
        ProcessEvent.EXAMINATION_COMPLETED_PASSED,
        ProcessEvent.EXAMINATION_COMPLETED_FAILED,
    })
    parameter = "learning_plan"

    def __init__(self, channel: UserChannel, collaborator: Collaborator, store: ProgressStore) -> None:
        super().__init__(channel)
        self.collaborator = collaborator
        self.store        = store

    def execute(self, context: StepContext, *, learning_plan: LearningPlan) -> None:
        scope = learning_plan.exam_scope()
        if not scope:
            logger.info("Nothing in exam scope; treating the plan as passed")
            self._passed(context, learning_plan, ExaminationResult(status=ExamStatus.PASSED))
            return

        conversation = self.conversation(self.collaborator)
        conversation.add_message(
            Role.ASSISTANT,
            "This is the list of resources in the learning plan to create the test with:\n"
            + "\n\n".join(r.describe() for r in scope),
        )
        self.relay(conversation)

        result = self._run_exam(conversation)
        if result.passed:
            self._passed(context, learning_plan, result)
        else:
            self._failed(context, learning_plan, result)

    def _run_exam(self, conversation) -> ExaminationResult:
        while True:
            conversation.add_message(Role.USER, self.next_answer())
            for message in self.collect(conversation):
                if not has_marker(message.content, EXAMINATION_RESULTS_MARKER):
                    self.channel.say(message.content)
                    continue
                try:
                    return parse_tagged(message.content, EXAMINATION_RESULTS_MARKER, ExaminationResult)
                except PayloadError as exc:
                    logger.warning("Could not read examination results: %s", exc)

    def _passed(self, context: StepContext, plan: LearningPlan, result: ExaminationResult) -> None:
        apply_result(plan, result)
        self.store.delete()
        self.channel.say(PASSED_MESSAGE)
        context.emit(ProcessEvent.EXAMINATION_COMPLETED_PASSED, result)

    def _failed(self, context: StepContext, plan: LearningPlan, result: ExaminationResult) -> None:
        apply_result(plan, result)
        stored = self.store.load()
        learning_type = stored.learning_type if stored is not None else LearningType.NEW
        self.store.save(ProgressState(learning_type=learning_type, learning_plan=plan))
        logger.info("Examination failed on %d resource(s)", len(result.resources))
        self.channel.say(FAILED_MESSAGE)
        context.emit(ProcessEvent.EXAMINATION_COMPLETED_FAILED, plan)
