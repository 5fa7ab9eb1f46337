"""
config.py — Central settings for the learning cycle
====================================================
All configuration is loaded from environment variables / .env file.
Copy .env.example → .env and fill in your values.

Every collaborator role runs against its own Azure OpenAI deployment.  When
a role-specific variable (e.g. EXAMINATION_AGENT_DEPLOYMENT) is not set the
shared AZURE_OPENAI_DEPLOYMENT is used.

Missing required values are a configuration error: ``Settings.require()``
raises before the process engine is started.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from learning_cycle.errors import ConfigurationError

# Load .env into os.environ (no-op if already set, safe to call multiple times)
load_dotenv(override=False)


# ─── Helpers ────────────────────────────────────────────────────────────────

def _is_placeholder(value: str) -> bool:
    """Return True if the value looks like an unfilled template placeholder."""
    return not value or "<" in value or value.startswith("your-") or value == "PLACEHOLDER"


# ─── Azure OpenAI ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AzureOpenAIConfig:
    endpoint:    str
    api_key:     str
    api_version: str

    @property
    def is_configured(self) -> bool:
        """True when both endpoint and key are real (non-placeholder) values."""
        return not _is_placeholder(self.endpoint) and not _is_placeholder(self.api_key)


# ─── Per-role deployments ────────────────────────────────────────────────────

@dataclass(frozen=True)
class DeploymentConfig:
    assessment:          str
    feedback:            str
    preference_planning: str
    material_resource:   str
    scheduling:          str
    tutor:               str
    mandatory_tutor:     str
    examination:         str


# ─── Azure Blob Storage (mandatory learning resources) ──────────────────────

@dataclass(frozen=True)
class BlobStorageConfig:
    service_endpoint: str
    account_name:     str
    account_key:      str
    container_name:   str

    @property
    def is_configured(self) -> bool:
        return all(
            not _is_placeholder(v)
            for v in (self.service_endpoint, self.account_name, self.account_key, self.container_name)
        )


# ─── App-level settings ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class AppConfig:
    progress_path:  Path
    schedules_dir:  Path
    downloads_dir:  Path
    debug:          bool
    plan_attempts:  int


# ─── Master settings object ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Settings:
    openai:      AzureOpenAIConfig
    deployments: DeploymentConfig
    blob:        BlobStorageConfig
    app:         AppConfig

    def missing(self) -> list[str]:
        """Names of required environment variables that are unset or placeholders."""
        missing = []
        if _is_placeholder(self.openai.endpoint):
            missing.append("AZURE_OPENAI_ENDPOINT")
        if _is_placeholder(self.openai.api_key):
            missing.append("AZURE_OPENAI_API_KEY")
        if _is_placeholder(self.blob.service_endpoint):
            missing.append("AZURE_BLOB_SERVICE_ENDPOINT")
        if _is_placeholder(self.blob.account_name):
            missing.append("AZURE_BLOB_STORAGE_ACCOUNT_NAME")
        if _is_placeholder(self.blob.account_key):
            missing.append("AZURE_BLOB_ACCOUNT_KEY")
        if _is_placeholder(self.blob.container_name):
            missing.append("RESOURCE_CONTAINER_NAME")
        return missing

    def require(self) -> "Settings":
        """Return self, or raise ConfigurationError listing every missing value."""
        missing = self.missing()
        if missing:
            raise ConfigurationError(
                "Missing configuration: " + ", ".join(missing)
                + ". Set them in the environment or in a .env file."
            )
        return self

    def status_summary(self) -> dict[str, str]:
        """Return a dict of service → status badge for the startup banner."""
        def badge(ok: bool) -> str:
            return "🟢 Configured" if ok else "⚪ Not configured"

        return {
            "Azure OpenAI":       badge(self.openai.is_configured),
            "Azure Blob Storage": badge(self.blob.is_configured),
        }


def get_settings() -> Settings:
    """Load all configuration from environment variables."""
    _str  = lambda k, d="": os.getenv(k, d).strip()
    _int  = lambda k, d=0: int(os.getenv(k, str(d)) or d)
    _bool = lambda k, d=False: os.getenv(k, str(d)).lower() in ("1", "true", "yes")

    default_deployment = _str("AZURE_OPENAI_DEPLOYMENT", "gpt-4o")
    _deployment = lambda role: _str(f"{role}_AGENT_DEPLOYMENT") or default_deployment

    return Settings(
        openai=AzureOpenAIConfig(
            endpoint    = _str("AZURE_OPENAI_ENDPOINT").rstrip("/"),
            api_key     = _str("AZURE_OPENAI_API_KEY"),
            api_version = _str("AZURE_OPENAI_API_VERSION", "2024-12-01-preview"),
        ),
        deployments=DeploymentConfig(
            assessment          = _deployment("ASSESSMENT"),
            feedback            = _deployment("FEEDBACK"),
            preference_planning = _deployment("PREFERENCE_PLANNING"),
            material_resource   = _deployment("MATERIAL_RESOURCE"),
            scheduling          = _deployment("SCHEDULING"),
            tutor               = _deployment("TUTOR"),
            mandatory_tutor     = _deployment("MANDATORY_LEARNING"),
            examination         = _deployment("EXAMINATION"),
        ),
        blob=BlobStorageConfig(
            service_endpoint = _str("AZURE_BLOB_SERVICE_ENDPOINT").rstrip("/"),
            account_name     = _str("AZURE_BLOB_STORAGE_ACCOUNT_NAME"),
            account_key      = _str("AZURE_BLOB_ACCOUNT_KEY"),
            container_name   = _str("RESOURCE_CONTAINER_NAME"),
        ),
        app=AppConfig(
            progress_path = Path(_str("PROGRESS_FILE", "progress.json")),
            schedules_dir = Path(_str("SCHEDULES_DIR", "Schedules")),
            downloads_dir = Path(_str("DOWNLOADS_DIR", "~/Downloads")).expanduser(),
            debug         = _bool("DEBUG", False),
            plan_attempts = max(1, _int("PLAN_ATTEMPTS", 3)),
        ),
    )
