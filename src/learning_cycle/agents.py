"""
agents.py — One collaborator per role
=====================================
Builds the eight ``AzureOpenAICollaborator`` instances the steps talk to.
All of them share a single ``AzureOpenAI`` client; each has its own
deployment (see ``DeploymentConfig``) and instruction block (prompts.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from openai import AzureOpenAI

from learning_cycle import prompts
from learning_cycle.config import Settings
from learning_cycle.conversation import AzureOpenAICollaborator, Collaborator


class AgentNames:
    PREFERENCE_PLANNING = "PreferencePlanningAgent"
    ASSESSMENT          = "AssessmentAgent"
    FEEDBACK            = "FeedbackAgent"
    MATERIAL_RESOURCE   = "MaterialResourceAgent"
    SCHEDULING          = "SchedulingProgressAgent"
    LEARNING            = "LearningAgent"
    MANDATORY_LEARNING  = "MandatoryLearningAgent"
    EXAMINATION         = "ExaminationAgent"


@dataclass(frozen=True)
class Collaborators:
    assessment:          Collaborator
    feedback:            Collaborator
    preference_planning: Collaborator
    material_resource:   Collaborator
    scheduling:          Collaborator
    tutor:               Collaborator
    mandatory_tutor:     Collaborator
    examination:         Collaborator


def build_collaborators(settings: Settings, client: Optional[AzureOpenAI] = None) -> Collaborators:
    """Create every role collaborator from *settings*."""
    client = client or AzureOpenAI(
        azure_endpoint=settings.openai.endpoint,
        api_key=settings.openai.api_key,
        api_version=settings.openai.api_version,
    )
    d = settings.deployments

    def agent(name: str, instructions: str, deployment: str, temperature: float = 0.7) -> AzureOpenAICollaborator:
        return AzureOpenAICollaborator(name, instructions, deployment, client, temperature=temperature)

    return Collaborators(
        assessment          = agent(AgentNames.ASSESSMENT, prompts.ASSESSMENT, d.assessment),
        feedback            = agent(AgentNames.FEEDBACK, prompts.FEEDBACK, d.feedback),
        preference_planning = agent(AgentNames.PREFERENCE_PLANNING, prompts.PREFERENCE_PLANNING, d.preference_planning),
        material_resource   = agent(AgentNames.MATERIAL_RESOURCE, prompts.MATERIAL_RESOURCE, d.material_resource, 0.4),
        scheduling          = agent(AgentNames.SCHEDULING, prompts.SCHEDULING, d.scheduling, 0.2),
        tutor               = agent(AgentNames.LEARNING, prompts.TUTOR, d.tutor),
        mandatory_tutor     = agent(AgentNames.MANDATORY_LEARNING, prompts.MANDATORY_TUTOR, d.mandatory_tutor),
        examination         = agent(AgentNames.EXAMINATION, prompts.EXAMINATION, d.examination, 0.2),
    )
