"""
Tests for tagged payload extraction:
1. extract_json            — lexical first-'{' to last-'}' behaviour
2. extract_tagged_object   — brace-depth scanner anchored at the marker
3. load_tagged / parse_tagged — decoding, trailing commas, PayloadError
"""
import pytest

from learning_cycle.errors import PayloadError
from learning_cycle.models import ExaminationResult, LearningPreferences
from learning_cycle.payload import (
    EXAMINATION_RESULTS_MARKER,
    LEARNING_PLAN_MARKER,
    LEARNING_PREFERENCES_MARKER,
    extract_json,
    extract_tagged_object,
    has_marker,
    load_tagged,
    parse_tagged,
)


# ─── extract_json ────────────────────────────────────────────────────────────

class TestExtractJson:
    def test_tagged_object(self):
        assert extract_json('[TAG]{"a":1}') == '{"a":1}'

    def test_no_braces(self):
        assert extract_json("no braces here") == ""

    def test_not_nesting_aware(self):
        assert extract_json("{a}{b}") == "{a}{b}"

    def test_closing_before_opening(self):
        assert extract_json("} then {") == ""

    def test_none(self):
        assert extract_json(None) == ""


# ─── extract_tagged_object ───────────────────────────────────────────────────

class TestExtractTaggedObject:
    def test_first_balanced_object_only(self):
        assert extract_tagged_object("{a}{b}") == "{a}"

    def test_starts_at_marker(self):
        text = 'Some {aside} first. [LEARNINGPLAN] {"Resources": []} trailing {x}'
        assert extract_tagged_object(text, LEARNING_PLAN_MARKER) == '{"Resources": []}'

    def test_braces_inside_strings_ignored(self):
        text = '[X] {"Title": "Sets {and} dicts", "n": {"k": "\\"}"}}'
        assert extract_tagged_object(text, "[X]") == text[4:]

    def test_unbalanced_returns_empty(self):
        assert extract_tagged_object('[X] {"a": {"b": 1}', "[X]") == ""

    def test_marker_after_body_falls_back_to_first_object(self):
        assert extract_tagged_object('{"a": 1} [X]', "[X]") == '{"a": 1}'


# ─── load_tagged / parse_tagged ──────────────────────────────────────────────

class TestLoadTagged:
    def test_has_marker(self):
        assert has_marker("Here you go [EXAMINATIONRESULTS] {}", EXAMINATION_RESULTS_MARKER)
        assert not has_marker("[examinationresults]", EXAMINATION_RESULTS_MARKER)
        assert not has_marker(None, EXAMINATION_RESULTS_MARKER)

    def test_trailing_comma_tolerated(self):
        data = load_tagged('[X] {"a": [1, 2,], "b": 3,}', "[X]")
        assert data == {"a": [1, 2], "b": 3}

    def test_missing_object_raises(self):
        with pytest.raises(PayloadError):
            load_tagged("[X] nothing to see", "[X]")

    def test_malformed_json_raises(self):
        with pytest.raises(PayloadError, match="malformed"):
            load_tagged("[X] {'single': 'quotes'}", "[X]")

    def test_parse_into_model(self):
        text = (
            "Thanks! [LearningPreferences]\n"
            '{"PreferredLearningStyle": "visual", "PreferredStudyTime": "evenings", '
            '"LearningGoals": "ship a CLI"}'
        )
        prefs = parse_tagged(text, LEARNING_PREFERENCES_MARKER, LearningPreferences)
        assert prefs.preferred_learning_style == "visual"
        assert prefs.learning_goals == "ship a CLI"

    def test_parse_validation_failure_is_payload_error(self):
        with pytest.raises(PayloadError, match="ExaminationResult"):
            parse_tagged('[EXAMINATIONRESULTS] {"Resources": []}', EXAMINATION_RESULTS_MARKER, ExaminationResult)
