"""
scheduling.py — Study schedule export
=====================================
Asks the scheduling collaborator for an iCalendar study schedule built from
the learner's preferences and plan, starting tomorrow.  The calendar block
is validated with ``icalendar`` and written to the schedules folder.

A reply without a parseable calendar is shown to the learner, whose answer
goes back to the collaborator; the loop ends once a file is written.  A
failure to write the file is reported and the cycle moves on to learning
anyway: the schedule is a convenience, the plan is what matters.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from learning_cycle.calendar_export import find_calendar_block, normalize_calendar, write_schedule
from learning_cycle.channel import UserChannel
from learning_cycle.conversation import Collaborator, Role
from learning_cycle.events import ProcessEvent
from learning_cycle.models import PlanningResult
from learning_cycle.step import ProcessStep, StepContext

logger = logging.getLogger(__name__)


def schedule_request(result: PlanningResult, today=None) -> str:
    today = today or datetime.now(timezone.utc).date()
    prefs = result.learning_preferences
    return "\n".join([
        "Here are the student's learning preferences:",
        f"- Learning Style: {prefs.preferred_learning_style}",
        f"- Preferred Study Time: {prefs.preferred_study_time}",
        f"- Learning Goals: {prefs.learning_goals}",
        "",
        "Here is the student's learning plan:",
        result.learning_plan.display(),
        "",
        "Please generate a detailed study schedule in valid iCalendar (.ics) format.",
        f"Today is {today:%Y-%m-%d}. Please ensure the schedule starts from "
        f"{today + timedelta(days=1):%Y-%m-%d} onwards.",
    ])


class SchedulingStep(ProcessStep):
    name      = "Scheduling"
    emits     = frozenset({ProcessEvent.SCHEDULING_COMPLETED})
    parameter = "planning_result"

    def __init__(self, channel: UserChannel, collaborator: Collaborator, schedules_dir: str | Path) -> None:
        super().__init__(channel)
        self.collaborator  = collaborator
        self.schedules_dir = Path(schedules_dir)

    def execute(self, context: StepContext, *, planning_result: PlanningResult) -> None:
        conversation = self.conversation(self.collaborator)
        conversation.add_message(Role.USER, schedule_request(planning_result))

        while True:
            reply = "\n".join(m.content for m in self.collect(conversation) if m.content.strip())
            block = find_calendar_block(reply)
            try:
                ics = normalize_calendar(block) if block else None
            except ValueError as exc:
                logger.warning("Schedule calendar could not be parsed: %s", exc)
                ics = None

            if ics is not None:
                break
            self.channel.say(reply or "Sorry, I could not produce a schedule. Please try again.")
            conversation.add_message(Role.USER, self.next_answer())

        try:
            path = write_schedule(ics, self.schedules_dir)
        except OSError as exc:
            logger.error("Writing the schedule failed: %s", exc)
            self.channel.say(f"Failed to save schedule: {exc}")
        else:
            self.channel.say("Study schedule successfully generated and saved.")
            self.channel.say(f"File location: {path.resolve()}")
            self.channel.say(
                "You can now import this .ics file into your calendar application "
                "(such as Outlook, Google Calendar, or Apple Calendar)."
            )

        context.emit(ProcessEvent.SCHEDULING_COMPLETED, planning_result.learning_plan)
