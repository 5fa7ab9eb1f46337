"""
Tests for the study schedule:
1. calendar_export — block location, icalendar validation, file naming
2. SchedulingStep  — prompt contents, re-prompt on missing/invalid calendar,
                     file written and plan passed on
"""
from datetime import date, datetime

import pytest

from factories import SAMPLE_ICS, ScriptedChannel, ScriptedCollaborator, make_planning_result

from learning_cycle.calendar_export import find_calendar_block, normalize_calendar, write_schedule
from learning_cycle.events import ProcessEvent
from learning_cycle.scheduling import SchedulingStep, schedule_request
from learning_cycle.step import StepContext


# ─── calendar_export ─────────────────────────────────────────────────────────

class TestFindCalendarBlock:
    def test_block_inside_prose(self):
        text = "Here is your schedule:\n" + SAMPLE_ICS + "\nEnjoy!"
        assert find_calendar_block(text) == SAMPLE_ICS

    def test_case_insensitive(self):
        text = "begin:vcalendar\nX\nend:vcalendar"
        assert find_calendar_block(text) == text

    def test_missing_delimiter(self):
        assert find_calendar_block("BEGIN:VCALENDAR only") is None
        assert find_calendar_block("") is None


class TestNormalizeCalendar:
    def test_round_trip_keeps_event(self):
        ics = normalize_calendar(SAMPLE_ICS)
        assert ics.startswith("BEGIN:VCALENDAR")
        assert "SUMMARY:Resource 1" in ics

    def test_indented_lines_accepted(self):
        indented = "\n".join("    " + line for line in SAMPLE_ICS.splitlines())
        assert "UID:study-1@learning-cycle" in normalize_calendar(indented)

    def test_calendar_without_events_rejected(self):
        with pytest.raises(ValueError):
            normalize_calendar("BEGIN:VCALENDAR\nVERSION:2.0\nPRODID:x\nEND:VCALENDAR")


class TestWriteSchedule:
    def test_timestamped_name(self, schedules_dir):
        path = write_schedule("BEGIN:VCALENDAR\r\nEND:VCALENDAR\r\n", schedules_dir, now=datetime(2025, 3, 4, 5, 6, 7))
        assert path.name == "schedule-20250304050607.ics"
        assert path.read_bytes().startswith(b"BEGIN:VCALENDAR")


# ─── SchedulingStep ──────────────────────────────────────────────────────────

def execute(step, **payload):
    step.activate()
    context = StepContext(step)
    step.execute(context, **payload)
    return context


class TestScheduleRequest:
    def test_contents(self):
        text = schedule_request(make_planning_result(), today=date(2025, 1, 31))
        assert "- Learning Style: visual" in text
        assert "Title: Resource 1" in text
        assert "Today is 2025-01-31. Please ensure the schedule starts from 2025-02-01 onwards." in text


class TestSchedulingStep:
    def test_writes_schedule_and_passes_plan(self, schedules_dir):
        result = make_planning_result()
        collab = ScriptedCollaborator(["Sure.\n" + SAMPLE_ICS])
        channel = ScriptedChannel()
        context = execute(SchedulingStep(channel, collab, schedules_dir), planning_result=result)

        assert context.event == ProcessEvent.SCHEDULING_COMPLETED
        assert context.payload is result.learning_plan
        files = list(schedules_dir.glob("schedule-*.ics"))
        assert len(files) == 1
        assert "Study schedule successfully generated and saved." in channel.said
        assert any(s.startswith("File location:") for s in channel.said)

    def test_missing_calendar_asks_user_then_retries(self, schedules_dir):
        collab = ScriptedCollaborator(["Which time zone are you in?", SAMPLE_ICS])
        channel = ScriptedChannel(["London"])
        context = execute(SchedulingStep(channel, collab, schedules_dir), planning_result=make_planning_result())

        assert context.event == ProcessEvent.SCHEDULING_COMPLETED
        assert channel.said[0] == "Which time zone are you in?"
        assert collab.calls[1][-1].content == "London"

    def test_invalid_calendar_reprompts(self, schedules_dir):
        broken = "BEGIN:VCALENDAR\nVERSION:2.0\nEND:VCALENDAR"
        collab = ScriptedCollaborator([broken, SAMPLE_ICS])
        channel = ScriptedChannel(["please include events"])
        context = execute(SchedulingStep(channel, collab, schedules_dir), planning_result=make_planning_result())
        assert context.event == ProcessEvent.SCHEDULING_COMPLETED
        assert len(collab.calls) == 2
