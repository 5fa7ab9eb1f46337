"""
Data models for the learning cycle.

All models serialise with PascalCase keys (``LearningPlan``, ``Resources``,
``IsComplete`` …) because that is the shape both the progress record and the
collaborator payloads use.  Inbound keys are matched case-insensitively, so a
collaborator answering ``{"status": "failed"}`` parses the same as
``{"Status": "Failed"}``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_pascal


# ─── Base model ──────────────────────────────────────────────────────────────

class _WireModel(BaseModel):
    """PascalCase on the wire, snake_case in Python, case-insensitive on input."""
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _match_keys_case_insensitively(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known: dict[str, str] = {}
        for name, info in cls.model_fields.items():
            known[name.lower()] = name
            known[(info.alias or name).lower()] = info.alias or name
        return {known.get(str(k).lower(), k): v for k, v in data.items()}

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with wire (PascalCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


# ─── Enumerations ────────────────────────────────────────────────────────────

class LearningType(str, Enum):
    """Which learning mode a stored progress record belongs to."""
    NEW       = "New"
    MANDATORY = "Mandatory"


class ExamStatus(str, Enum):
    PASSED = "Passed"
    FAILED = "Failed"


# ─── Learning plan ───────────────────────────────────────────────────────────

class Resource(_WireModel):
    """
    One learning resource inside a plan.

    ``is_complete`` only moves false → true while learning; the examination
    step is the single place that sends a resource back (``reopen``).
    ``is_exam_scope`` only moves true → false.
    """
    id:                uuid.UUID = Field(default_factory=uuid.uuid4)
    title:             str = ""
    url:               str = ""
    type:              str = ""
    description:       str = ""
    estimated_minutes: Optional[int] = None
    is_complete:       bool = False
    is_exam_scope:     bool = True

    @field_validator("id", mode="before")
    @classmethod
    def _fresh_id_when_unusable(cls, value: Any) -> Any:
        # Collaborators sometimes invent ids like "res-1"; give those a real one.
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value))
        except (TypeError, ValueError):
            return uuid.uuid4()

    @field_validator("title", "url", "type", "description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def complete(self) -> None:
        self.is_complete = True

    def reopen(self) -> None:
        """Send the resource back for relearning after a failed examination."""
        self.is_complete = False

    def retire_from_exam(self) -> None:
        self.is_exam_scope = False

    def describe(self) -> str:
        """Block used when handing the resource to a collaborator."""
        minutes = "" if self.estimated_minutes is None else self.estimated_minutes
        return (
            f"Id: {self.id}\n"
            f"Title: {self.title}\n"
            f"URL: {self.url}\n"
            f"Description: {self.description}\n"
            f"EstimatedMinutes: {minutes}"
        )

    def display(self) -> str:
        minutes = "" if self.estimated_minutes is None else self.estimated_minutes
        return (
            f"Title: {self.title}\n"
            f"  - Url: {self.url}\n"
            f"  - Type: {self.type}\n"
            f"  - Description: {self.description}\n"
            f"  - Estimated Minutes: {minutes}\n"
            f"  - Completed: {self.is_complete}"
        )


class LearningPlan(_WireModel):
    """Ordered resources; the single source of truth for completion state."""
    resources: list[Resource] = Field(default_factory=list)

    @model_validator(mode="after")
    def _ids_are_unique(self) -> "LearningPlan":
        seen: set[uuid.UUID] = set()
        for resource in self.resources:
            if resource.id in seen:
                raise ValueError(f"duplicate resource Id {resource.id} in learning plan")
            seen.add(resource.id)
        return self

    @classmethod
    def for_new_cycle(cls, resources: list[Resource]) -> "LearningPlan":
        """
        Build a freshly generated plan: duplicate Ids are replaced and every
        resource starts incomplete and in exam scope.
        """
        seen: set[uuid.UUID] = set()
        fresh = []
        for resource in resources:
            rid = resource.id if resource.id not in seen else uuid.uuid4()
            seen.add(rid)
            fresh.append(resource.model_copy(update={
                "id": rid, "is_complete": False, "is_exam_scope": True,
            }))
        return cls(resources=fresh)

    def next_incomplete(self) -> Optional[Resource]:
        return next((r for r in self.resources if not r.is_complete), None)

    def pending(self, in_exam_scope: bool = False) -> list[Resource]:
        """Incomplete resources, optionally only those still in exam scope."""
        return [
            r for r in self.resources
            if not r.is_complete and (r.is_exam_scope or not in_exam_scope)
        ]

    def exam_scope(self) -> list[Resource]:
        return [r for r in self.resources if r.is_exam_scope]

    def by_id(self, resource_id: str | uuid.UUID) -> Optional[Resource]:
        key = str(resource_id).strip().lower()
        return next((r for r in self.resources if str(r.id) == key), None)

    def display(self) -> str:
        if not self.resources:
            return "No resources available."
        return "\n".join(r.display() for r in self.resources)


class ProgressState(_WireModel):
    """The single durable record that lets a workflow resume after a restart."""
    learning_type: LearningType = LearningType.NEW
    learning_plan: LearningPlan = Field(default_factory=LearningPlan)


# ─── Assessment ──────────────────────────────────────────────────────────────

class AssessmentResults(_WireModel):
    student_id:    str = ""
    assessment_id: str = ""
    subject:       str = ""
    score:         dict[str, str] = Field(default_factory=dict)  # category → "n/m"
    date:          Optional[datetime] = None
    feedback:      str = ""

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "AssessmentResults":
        """
        Build results from a collaborator payload.  Missing or oddly typed
        fields are left at their defaults rather than rejected.
        """
        fields = {k.lower(): v for k, v in data.items()}
        results = cls(date=datetime.now(timezone.utc))
        for name in ("student_id", "assessment_id", "subject"):
            value = fields.get(to_pascal(name).lower())
            if isinstance(value, (str, int, float)):
                setattr(results, name, str(value))
        score = fields.get("score")
        if isinstance(score, dict):
            results.score = {str(k): str(v) for k, v in score.items()}
        return results

    def score_line(self) -> str:
        return ", ".join(f"{k}: {v}" for k, v in self.score.items())


# ─── Planning ────────────────────────────────────────────────────────────────

class LearningPreferences(_WireModel):
    model_config = ConfigDict(frozen=True)

    preferred_learning_style: str = ""
    preferred_study_time:     str = ""
    learning_goals:           str = ""


class PlanningResult(_WireModel):
    learning_preferences: LearningPreferences = Field(default_factory=LearningPreferences)
    learning_plan:        LearningPlan = Field(default_factory=LearningPlan)


# ─── Examination ─────────────────────────────────────────────────────────────

class ExaminationResource(_WireModel):
    """A resource the learner scored below the pass mark on."""
    id:    str = ""
    score: Optional[str] = None
    title: Optional[str] = None

    @field_validator("id", "score", "title", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return value if value is None or isinstance(value, str) else str(value)


class ExaminationResult(_WireModel):
    resources: list[ExaminationResource] = Field(default_factory=list)
    status:    ExamStatus
    feedback:  str = ""

    @field_validator("status", mode="before")
    @classmethod
    def _status_any_case(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @property
    def passed(self) -> bool:
        return self.status == ExamStatus.PASSED

    def failed_ids(self) -> set[str]:
        return {r.id.strip().lower() for r in self.resources}


# ─── Mandatory learning ──────────────────────────────────────────────────────

class MandatoryLearningResource(_WireModel):
    """An item listed by the mandatory resource provider."""
    title:       str = ""
    content_uri: str = ""
    content:     str = ""
    type:        str = ""
