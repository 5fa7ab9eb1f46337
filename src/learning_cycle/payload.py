"""
payload.py — Machine-readable payloads inside free-text collaborator replies
============================================================================
Collaborators answer in prose.  When a reply is the structured one, it
carries a square-bracketed marker (``[LEARNINGPLAN]``) followed by a single
JSON object.  Detecting the structured reply is a plain substring test for
the marker; no schema sniffing.

Two extraction algorithms live here:

  extract_json(text)
      Lexical: first ``{`` to last ``}`` inclusive.  Not nesting aware, so
      ``"{a}{b}"`` comes back whole.  Kept for callers that depend on the
      historical behaviour.

  extract_tagged_object(text, marker)
      Brace-depth scanner.  Starts at the marker, ignores braces inside JSON
      string literals and returns the first balanced object.  This is what
      the steps use.

``parse_tagged`` / ``load_tagged`` wrap the scanner with ``json.loads`` and
raise ``PayloadError`` for anything unusable; steps catch it, log and
re-prompt.
"""

from __future__ import annotations

import json
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from learning_cycle.errors import PayloadError

ASSESSMENT_RESULT_MARKER    = "[AssessmentResult]"
LEARNING_PREFERENCES_MARKER = "[LearningPreferences]"
LEARNING_PLAN_MARKER        = "[LEARNINGPLAN]"
EXAMINATION_RESULTS_MARKER  = "[EXAMINATIONRESULTS]"

_TRAILING_COMMA = re.compile(r",\s*([}\]])")

M = TypeVar("M", bound=BaseModel)


def has_marker(text: str | None, marker: str) -> bool:
    return bool(text) and marker in text


def extract_json(text: str | None) -> str:
    """Substring from the first '{' to the last '}', or '' if there is none."""
    if not text:
        return ""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return ""
    return text[start:end + 1]


def extract_tagged_object(text: str | None, marker: str = "") -> str:
    """Return the first balanced JSON object at or after *marker* ('' if none)."""
    if not text:
        return ""
    at = text.find(marker) if marker else -1
    begin = text.find("{", at + len(marker)) if at >= 0 else -1
    if begin == -1:
        # Marker after the body, or no marker at all.
        begin = text.find("{")
    if begin == -1:
        return ""

    depth = 0
    in_string = False
    escaped = False
    for i in range(begin, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[begin:i + 1]
    return ""


def load_tagged(text: str | None, marker: str) -> dict[str, Any]:
    """Extract and decode the tagged object as a plain dict."""
    raw = extract_tagged_object(text, marker)
    if not raw:
        raise PayloadError(f"no JSON object found after {marker}")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        # Models like to leave a trailing comma before '}' or ']'.
        try:
            data = json.loads(_TRAILING_COMMA.sub(r"\1", raw))
        except json.JSONDecodeError as exc:
            raise PayloadError(f"malformed JSON after {marker}: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise PayloadError(f"payload after {marker} is not a JSON object")
    return data


def parse_tagged(text: str | None, marker: str, model: type[M]) -> M:
    """Extract, decode and validate the tagged object into *model*."""
    data = load_tagged(text, marker)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise PayloadError(
            f"payload after {marker} does not match {model.__name__}: "
            f"{exc.error_count()} error(s)"
        ) from exc
