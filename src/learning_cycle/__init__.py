"""
learning_cycle — Conversational Learning Workflow Engine
=========================================================
Package containing the process engine, the step implementations, the
collaborator plumbing and the persistence utilities for the learning cycle
(greet → assess → feedback → plan → schedule → learn → examine →
examination feedback).

Module map
----------
  models.py                 Pydantic domain models (plan, progress, results).
  config.py                 Settings loaded from .env; fail-fast validation.
  errors.py                 Exception types shared across the package.
  payload.py                Tagged JSON payload extraction from free text.
  conversation.py           Append-only transcripts + Azure OpenAI collaborator.
  progress_store.py         Single-record JSON progress persistence.
  events.py                 ProcessEvent enumeration (one name per outcome).
  channel.py                UserChannel protocol + rich console channel.
  step.py                   Step contract, StepState, collaborator helpers.
  engine.py                 Event-driven ProcessEngine (transition table).
  trace.py                  StepRun / RunTrace audit log for a process run.
  prompts.py                Collaborator instruction blocks (opaque content).
  agents.py                 Builds one collaborator per role.
  resources.py              Mandatory resource provider (Azure Blob) + PDF text.
  calendar_export.py        iCalendar block location, validation and export.

  greeting.py               GreetingStep            resume / new / mandatory.
  assessment.py             AssessmentStep          [AssessmentResult].
  feedback.py               FeedbackStep            assessment feedback text.
  planning.py               PlanningStep            preferences → plan.
  scheduling.py             SchedulingStep          .ics study schedule.
  learning.py               LearningStep            tutor loop over the plan.
  mandatory_learning.py     MandatoryLearningStep   tutor loop over blob content.
  examination.py            ExaminationStep         [EXAMINATIONRESULTS].
  examination_feedback.py   ExaminationFeedbackStep exam feedback text.

  workflow.py               Transition table wiring all steps together.
  cli.py                    Console entry point.

Process order
-------------
  Start → Greeting ─┬─ new ───────→ Assessment → Feedback → Planning
                    │                → Scheduling → Learning ⟲ → Examination
                    ├─ resume ────→ Learning / MandatoryLearning
                    └─ mandatory ─→ MandatoryLearning ⟲ → Examination
  Examination ─ passed → ExaminationFeedback → Greeting
              └ failed → Learning
"""
__version__ = "0.1.0"
