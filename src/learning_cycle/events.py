"""Workflow outcome events.  Each name maps to exactly one transition."""

from __future__ import annotations

from enum import Enum


class ProcessEvent(str, Enum):
    START = "Start"

    # Greeting
    GREETING_COMPLETED_CONTINUE_LEARNING  = "GreetingCompletedContinueLearning"
    GREETING_COMPLETED_NEW_LEARNING       = "GreetingCompletedNewLearning"
    GREETING_COMPLETED_MANDATORY_TRAINING = "GreetingCompletedMandatoryTraining"

    # Assessment → Feedback → Planning → Scheduling
    ASSESSMENT_COMPLETED = "AssessmentCompleted"
    FEEDBACK_COMPLETED   = "FeedbackCompleted"
    PLANNING_COMPLETED   = "PlanningCompleted"
    PLANNING_FAILED      = "PlanningFailed"
    SCHEDULING_COMPLETED = "SchedulingCompleted"

    # Learning
    CONTINUE_LEARNING  = "ContinueLearning"
    STOP_LEARNING      = "StopLearning"
    LEARNING_COMPLETED = "LearningCompleted"

    # Mandatory learning
    MANDATORY_CONTINUE_LEARNING  = "MandatoryContinueLearning"
    MANDATORY_STOP_LEARNING      = "MandatoryStopLearning"
    MANDATORY_LEARNING_COMPLETED = "MandatoryLearningCompleted"

    # Examination
    EXAMINATION_COMPLETED_PASSED   = "ExaminationCompletedPassed"
    EXAMINATION_COMPLETED_FAILED   = "ExaminationCompletedFailed"
    EXAMINATION_FEEDBACK_COMPLETED = "ExaminationFeedbackCompleted"
