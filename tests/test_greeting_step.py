"""
Tests for GreetingStep: resuming stored progress, declining (which deletes
it) and the new / mandatory choice with re-prompts on unknown answers.
"""
from factories import ScriptedChannel, make_plan

from learning_cycle.events import ProcessEvent
from learning_cycle.greeting import GreetingStep
from learning_cycle.models import LearningType, ProgressState
from learning_cycle.step import StepContext


def run_greeting(store, answers):
    channel = ScriptedChannel(answers)
    step = GreetingStep(channel, store)
    step.activate()
    context = StepContext(step)
    step.execute(context)
    return context, channel


class TestFreshStart:
    def test_new(self, store):
        context, channel = run_greeting(store, ["new"])
        assert context.event == ProcessEvent.GREETING_COMPLETED_NEW_LEARNING
        assert context.payload is None
        assert "What would you like to learn today?" in channel.transcript()

    def test_mandatory_any_case(self, store):
        context, _ = run_greeting(store, ["  MANDATORY "])
        assert context.event == ProcessEvent.GREETING_COMPLETED_MANDATORY_TRAINING

    def test_unknown_answer_reprompts(self, store):
        context, channel = run_greeting(store, ["maybe", "", "new"])
        assert context.event == ProcessEvent.GREETING_COMPLETED_NEW_LEARNING
        assert channel.said.count("Please answer 'new' or 'mandatory'.") == 2


class TestResume:
    def test_resume_new_learning_passes_plan(self, store):
        plan = make_plan(count=2, completed=1)
        store.save(ProgressState(learning_type=LearningType.NEW, learning_plan=plan))
        context, channel = run_greeting(store, ["Yes"])
        assert context.event == ProcessEvent.GREETING_COMPLETED_CONTINUE_LEARNING
        assert [r.id for r in context.payload.resources] == [r.id for r in plan.resources]
        assert "Welcome back! You have learning in progress." in channel.said
        assert store.exists()

    def test_resume_mandatory(self, store):
        store.save(ProgressState(learning_type=LearningType.MANDATORY, learning_plan=make_plan()))
        context, _ = run_greeting(store, ["yes"])
        assert context.event == ProcessEvent.GREETING_COMPLETED_MANDATORY_TRAINING
        assert context.payload is None

    def test_decline_deletes_progress_and_asks_again(self, store):
        store.save(ProgressState(learning_plan=make_plan()))
        context, channel = run_greeting(store, ["no", "mandatory"])
        assert not store.exists()
        assert "Alright, starting fresh." in channel.said
        assert context.event == ProcessEvent.GREETING_COMPLETED_MANDATORY_TRAINING

    def test_invalid_resume_answer_reprompts(self, store):
        store.save(ProgressState(learning_plan=make_plan()))
        context, channel = run_greeting(store, ["later", "yes"])
        assert "Please answer 'yes' or 'no'." in channel.said
        assert context.event == ProcessEvent.GREETING_COMPLETED_CONTINUE_LEARNING

    def test_corrupt_progress_starts_fresh(self, store):
        store.path.write_text('{"LearningType": "New", "LearningPlan": {"Resour', encoding="utf-8")
        context, channel = run_greeting(store, ["new"])
        assert context.event == ProcessEvent.GREETING_COMPLETED_NEW_LEARNING
        assert "Welcome back! You have learning in progress." not in channel.said
