"""
workflow.py — The learning cycle's transition table
===================================================
Creates every step, registers it with a ``ProcessEngine`` and binds each
outcome event to the step that handles it.  The engine validates the table
before the first dispatch, so a missing binding fails at start-up rather
than mid-cycle.

  Event                               Target               Parameter
  ──────────────────────────────────  ───────────────────  ──────────────────
  Start                               Greeting             —
  GreetingCompletedContinueLearning   Learning             learning_plan
  GreetingCompletedNewLearning        Assessment           —
  GreetingCompletedMandatoryTraining  MandatoryLearning    —
  AssessmentCompleted                 Feedback             assessment_results
  FeedbackCompleted                   Planning             assessment_results
  PlanningCompleted                   Scheduling           planning_result
  PlanningFailed                      Greeting             —
  SchedulingCompleted                 Learning             learning_plan
  ContinueLearning                    Learning             learning_plan
  StopLearning                        Greeting             —
  LearningCompleted                   Examination          learning_plan
  ExaminationCompletedPassed          ExaminationFeedback  examination_result
  ExaminationCompletedFailed          Learning             learning_plan
  MandatoryContinueLearning           MandatoryLearning    —
  MandatoryStopLearning               Greeting             —
  MandatoryLearningCompleted          Examination          learning_plan
  ExaminationFeedbackCompleted        Greeting             —
"""

from __future__ import annotations

from pathlib import Path

from learning_cycle.agents import Collaborators
from learning_cycle.assessment import AssessmentStep
from learning_cycle.channel import UserChannel
from learning_cycle.engine import ProcessEngine
from learning_cycle.events import ProcessEvent as E
from learning_cycle.examination import ExaminationStep
from learning_cycle.examination_feedback import ExaminationFeedbackStep
from learning_cycle.feedback import FeedbackStep
from learning_cycle.greeting import GreetingStep
from learning_cycle.learning import LearningStep
from learning_cycle.mandatory_learning import MandatoryLearningStep
from learning_cycle.planning import PlanningStep
from learning_cycle.progress_store import ProgressStore
from learning_cycle.resources import ResourceProvider
from learning_cycle.scheduling import SchedulingStep


def build_learning_process(
    collaborators: Collaborators,
    channel: UserChannel,
    store: ProgressStore,
    provider: ResourceProvider,
    schedules_dir: str | Path = "Schedules",
    plan_attempts: int = 3,
) -> ProcessEngine:
    """Wire the full learning cycle; the returned engine is already validated."""
    engine = ProcessEngine("LearningCycle")
    c = collaborators

    greeting     = engine.register(GreetingStep(channel, store))
    assessment   = engine.register(AssessmentStep(channel, c.assessment))
    feedback     = engine.register(FeedbackStep(channel, c.feedback))
    planning     = engine.register(PlanningStep(
        channel, c.preference_planning, c.material_resource, store, plan_attempts,
    ))
    scheduling   = engine.register(SchedulingStep(channel, c.scheduling, schedules_dir))
    learning     = engine.register(LearningStep(channel, c.tutor, store))
    mandatory    = engine.register(MandatoryLearningStep(channel, c.mandatory_tutor, store, provider))
    examination  = engine.register(ExaminationStep(channel, c.examination, store))
    exam_summary = engine.register(ExaminationFeedbackStep(channel, c.feedback))

    engine.bind(E.START, greeting)

    engine.bind(E.GREETING_COMPLETED_CONTINUE_LEARNING, learning, "learning_plan")
    engine.bind(E.GREETING_COMPLETED_NEW_LEARNING, assessment)
    engine.bind(E.GREETING_COMPLETED_MANDATORY_TRAINING, mandatory)

    engine.bind(E.ASSESSMENT_COMPLETED, feedback, "assessment_results")
    engine.bind(E.FEEDBACK_COMPLETED, planning, "assessment_results")
    engine.bind(E.PLANNING_COMPLETED, scheduling, "planning_result")
    engine.bind(E.PLANNING_FAILED, greeting)
    engine.bind(E.SCHEDULING_COMPLETED, learning, "learning_plan")

    engine.bind(E.CONTINUE_LEARNING, learning, "learning_plan")
    engine.bind(E.STOP_LEARNING, greeting)
    engine.bind(E.LEARNING_COMPLETED, examination, "learning_plan")

    engine.bind(E.MANDATORY_CONTINUE_LEARNING, mandatory)
    engine.bind(E.MANDATORY_STOP_LEARNING, greeting)
    engine.bind(E.MANDATORY_LEARNING_COMPLETED, examination, "learning_plan")

    engine.bind(E.EXAMINATION_COMPLETED_PASSED, exam_summary, "examination_result")
    engine.bind(E.EXAMINATION_COMPLETED_FAILED, learning, "learning_plan")
    engine.bind(E.EXAMINATION_FEEDBACK_COMPLETED, greeting)

    engine.validate()
    return engine
