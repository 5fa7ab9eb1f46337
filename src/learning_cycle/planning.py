"""
planning.py — Learning preferences and plan generation
======================================================
Two phases, two collaborators:

  1. Preferences   conversational loop with the preference-planning
                   collaborator until a ``[LearningPreferences]`` reply
                   decodes into ``LearningPreferences``.
  2. Plan          a separate conversation with the material-resource
                   collaborator, seeded with subject, scores and
                   preferences, until a ``[LEARNINGPLAN]`` reply decodes into
                   a non-empty ``LearningPlan``.

The plan is persisted as ``ProgressState(New, plan)`` the moment it is
parsed.  Phase 2 is retried ``plan_attempts`` times; after that the step
emits ``PlanningFailed`` instead of passing an empty plan downstream.

Accepted plan payloads
----------------------
  {"LearningPlan": {"Resources": [...]}}     (progress-record shape)
  {"Resources": [...]}                       (bare plan)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from learning_cycle.channel import UserChannel
from learning_cycle.conversation import Collaborator, Conversation, Role
from learning_cycle.errors import PayloadError
from learning_cycle.events import ProcessEvent
from learning_cycle.models import (
    AssessmentResults,
    LearningPlan,
    LearningPreferences,
    LearningType,
    PlanningResult,
    ProgressState,
    Resource,
)
from learning_cycle.payload import (
    LEARNING_PLAN_MARKER,
    LEARNING_PREFERENCES_MARKER,
    has_marker,
    load_tagged,
    parse_tagged,
)
from learning_cycle.progress_store import ProgressStore
from learning_cycle.step import ProcessStep, StepContext

logger = logging.getLogger(__name__)

PLAN_NUDGE = (
    "The learning plan could not be read. Reply again with the complete plan "
    f"after the {LEARNING_PLAN_MARKER} marker, as a single JSON object."
)


def _get(data: dict[str, Any], key: str, default: Any = None) -> Any:
    """Case-insensitive dict lookup."""
    wanted = key.lower()
    return next((v for k, v in data.items() if str(k).lower() == wanted), default)


def read_learning_plan(text: str) -> LearningPlan:
    """Decode a ``[LEARNINGPLAN]`` reply; raises PayloadError when unusable."""
    data = load_tagged(text, LEARNING_PLAN_MARKER)
    body = _get(data, "LearningPlan", data)
    items = _get(body, "Resources") if isinstance(body, dict) else None
    if not isinstance(items, list) or not items:
        raise PayloadError("learning plan has no resources")
    try:
        resources = [Resource.model_validate(item) for item in items]
    except ValidationError as exc:
        raise PayloadError(f"learning plan resource is invalid: {exc.error_count()} error(s)") from exc
    return LearningPlan.for_new_cycle(resources)


class PlanningStep(ProcessStep):
    name      = "Planning"
    emits     = frozenset({ProcessEvent.PLANNING_COMPLETED, ProcessEvent.PLANNING_FAILED})
    parameter = "assessment_results"

    def __init__(
        self,
        channel: UserChannel,
        preference_planner: Collaborator,
        material_resource: Collaborator,
        store: ProgressStore,
        plan_attempts: int = 3,
    ) -> None:
        super().__init__(channel)
        self.preference_planner = preference_planner
        self.material_resource  = material_resource
        self.store              = store
        self.plan_attempts      = max(1, plan_attempts)

    def execute(self, context: StepContext, *, assessment_results: AssessmentResults) -> None:
        preferences = self._gather_preferences()
        plan = self._generate_plan(assessment_results, preferences)

        if plan is None:
            logger.error("No learning plan after %d attempt(s)", self.plan_attempts)
            self.channel.say("Sorry, I could not create a learning plan. Let's start again.")
            context.emit(ProcessEvent.PLANNING_FAILED)
            return

        self.store.save(ProgressState(learning_type=LearningType.NEW, learning_plan=plan))
        self.channel.say("Learning plan generated:\n" + plan.display())
        context.emit(
            ProcessEvent.PLANNING_COMPLETED,
            PlanningResult(learning_preferences=preferences, learning_plan=plan),
        )

    # ── Phase 1 ──────────────────────────────────────────────────────────────

    def _gather_preferences(self) -> LearningPreferences:
        conversation = self.conversation(self.preference_planner)
        self.relay(conversation)

        while True:
            conversation.add_message(Role.USER, self.next_answer())
            for message in self.collect(conversation):
                if not has_marker(message.content, LEARNING_PREFERENCES_MARKER):
                    self.channel.say(message.content)
                    continue
                try:
                    return parse_tagged(message.content, LEARNING_PREFERENCES_MARKER, LearningPreferences)
                except PayloadError as exc:
                    logger.warning("Could not read learning preferences: %s", exc)

    # ── Phase 2 ──────────────────────────────────────────────────────────────

    def _generate_plan(
        self, results: AssessmentResults, preferences: LearningPreferences
    ) -> Optional[LearningPlan]:
        conversation = Conversation(self.material_resource)
        conversation.add_message(
            Role.ASSISTANT,
            "Provide a learning plan based on the following user preferences and assessment results:\n"
            f"Assessment Subject: {results.subject}\n"
            f"Assessment Score: {results.score_line()}\n"
            f"Preferred Learning Style: {preferences.preferred_learning_style}\n"
            f"Preferred Study Time: {preferences.preferred_study_time}\n"
            f"Learning Goals: {preferences.learning_goals}\n"
            "The learning plan should include a list of resources tailored to these preferences and results.",
        )

        for attempt in range(1, self.plan_attempts + 1):
            for message in self.collect(conversation):
                if not has_marker(message.content, LEARNING_PLAN_MARKER):
                    self.channel.say(message.content)
                    continue
                try:
                    return read_learning_plan(message.content)
                except PayloadError as exc:
                    logger.warning("Learning plan attempt %d unusable: %s", attempt, exc)
            conversation.add_message(Role.USER, PLAN_NUDGE)
        return None
