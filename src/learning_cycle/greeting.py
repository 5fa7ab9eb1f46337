"""
greeting.py — Entry point of every cycle
========================================
Offers to resume stored progress; otherwise asks whether the learner wants
to start new learning or mandatory training.

Emits
-----
  GreetingCompletedContinueLearning(plan)   resume a stored "New" plan
  GreetingCompletedMandatoryTraining        resume stored mandatory progress,
                                            or a fresh mandatory choice
  GreetingCompletedNewLearning              fresh "new" choice

Declining to resume deletes the stored record.  Unrecognised answers are
re-prompted, never fatal.
"""

from __future__ import annotations

import logging
from typing import Any

from learning_cycle.channel import MANDATORY, NEW, NO, YES, UserChannel, normalize_answer
from learning_cycle.events import ProcessEvent
from learning_cycle.models import LearningType
from learning_cycle.progress_store import ProgressStore
from learning_cycle.step import ProcessStep, StepContext

logger = logging.getLogger(__name__)


class GreetingStep(ProcessStep):
    name  = "Greeting"
    emits = frozenset({
        ProcessEvent.GREETING_COMPLETED_CONTINUE_LEARNING,
        ProcessEvent.GREETING_COMPLETED_NEW_LEARNING,
        ProcessEvent.GREETING_COMPLETED_MANDATORY_TRAINING,
    })

    def __init__(self, channel: UserChannel, store: ProgressStore) -> None:
        super().__init__(channel)
        self.store = store

    def execute(self, context: StepContext, **payload: Any) -> None:
        progress = self.store.load()
        if progress is not None and self._resume(context, progress):
            return

        self.channel.say("Hi! What would you like to learn today?")
        self.channel.say("You can choose 'new' or 'mandatory'.")
        while True:
            answer = normalize_answer(self.channel.ask())
            if answer == NEW:
                context.emit(ProcessEvent.GREETING_COMPLETED_NEW_LEARNING)
                return
            if answer == MANDATORY:
                context.emit(ProcessEvent.GREETING_COMPLETED_MANDATORY_TRAINING)
                return
            self.channel.say("Please answer 'new' or 'mandatory'.")

    def _resume(self, context: StepContext, progress) -> bool:
        """Ask about stored progress; True when an event was emitted."""
        self.channel.say("Welcome back! You have learning in progress.")
        self.channel.say("Would you like to continue where you left off? (yes/no)")
        self.channel.say("Answering 'no' will delete your current progress.")
        while True:
            answer = normalize_answer(self.channel.ask())
            if answer == YES:
                if progress.learning_type == LearningType.MANDATORY:
                    context.emit(ProcessEvent.GREETING_COMPLETED_MANDATORY_TRAINING)
                else:
                    context.emit(
                        ProcessEvent.GREETING_COMPLETED_CONTINUE_LEARNING,
                        progress.learning_plan,
                    )
                logger.info("Resuming %s progress", progress.learning_type.value)
                return True
            if answer == NO:
                self.store.delete()
                self.channel.say("Alright, starting fresh.")
                return False
            self.channel.say("Please answer 'yes' or 'no'.")
