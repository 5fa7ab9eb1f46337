"""
Smoke tests for config / settings loading.
Run: python -m pytest tests/ -v
"""
from pathlib import Path

import pytest

from learning_cycle.config import _is_placeholder, get_settings
from learning_cycle.errors import ConfigurationError

_REQUIRED = {
    "AZURE_OPENAI_ENDPOINT":           "https://my-resource.openai.azure.com/",
    "AZURE_OPENAI_API_KEY":            "abc123defgh456ijkl789mnop",
    "AZURE_BLOB_SERVICE_ENDPOINT":     "https://acct.blob.core.windows.net",
    "AZURE_BLOB_STORAGE_ACCOUNT_NAME": "acct",
    "AZURE_BLOB_ACCOUNT_KEY":          "c2VjcmV0LWtleQ==",
    "RESOURCE_CONTAINER_NAME":         "training",
}

_OPTIONAL = [
    "AZURE_OPENAI_DEPLOYMENT", "AZURE_OPENAI_API_VERSION", "EXAMINATION_AGENT_DEPLOYMENT",
    "PROGRESS_FILE", "SCHEDULES_DIR", "DOWNLOADS_DIR", "PLAN_ATTEMPTS", "DEBUG",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in list(_REQUIRED) + _OPTIONAL:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def full_env(clean_env):
    for key, value in _REQUIRED.items():
        clean_env.setenv(key, value)
    return clean_env


class TestIsPlaceholder:
    def test_empty_string_is_placeholder(self):
        assert _is_placeholder("")

    def test_angle_bracket_is_placeholder(self):
        assert _is_placeholder("<your-key-here>")

    def test_your_prefix_is_placeholder(self):
        assert _is_placeholder("your-endpoint")

    def test_literal_PLACEHOLDER_is_placeholder(self):
        assert _is_placeholder("PLACEHOLDER")

    def test_real_value_not_placeholder(self):
        assert not _is_placeholder("https://my-resource.openai.azure.com")


class TestSettingsLoading:
    def test_defaults(self, clean_env):
        s = get_settings()
        assert s.openai.api_version == "2024-12-01-preview"
        assert s.deployments.assessment == "gpt-4o"
        assert s.app.progress_path == Path("progress.json")
        assert s.app.schedules_dir == Path("Schedules")
        assert s.app.plan_attempts == 3
        assert s.app.debug is False

    def test_downloads_dir_expands_home(self, clean_env):
        s = get_settings()
        assert "~" not in str(s.app.downloads_dir)

    def test_role_deployment_override(self, clean_env):
        clean_env.setenv("AZURE_OPENAI_DEPLOYMENT", "gpt-4o-mini")
        clean_env.setenv("EXAMINATION_AGENT_DEPLOYMENT", "gpt-4.1")
        s = get_settings()
        assert s.deployments.examination == "gpt-4.1"
        assert s.deployments.tutor == "gpt-4o-mini"

    def test_endpoint_trailing_slash_stripped(self, full_env):
        assert get_settings().openai.endpoint == "https://my-resource.openai.azure.com"

    def test_plan_attempts_at_least_one(self, clean_env):
        clean_env.setenv("PLAN_ATTEMPTS", "0")
        assert get_settings().app.plan_attempts == 1

    def test_debug_flag(self, clean_env):
        clean_env.setenv("DEBUG", "true")
        assert get_settings().app.debug is True


class TestRequire:
    def test_missing_lists_every_unset_key(self, clean_env):
        assert set(get_settings().missing()) == set(_REQUIRED)

    def test_require_raises_configuration_error(self, clean_env):
        with pytest.raises(ConfigurationError, match="AZURE_OPENAI_API_KEY"):
            get_settings().require()

    def test_configuration_error_is_environment_error(self, clean_env):
        with pytest.raises(EnvironmentError):
            get_settings().require()

    def test_require_passes_with_full_env(self, full_env):
        s = get_settings()
        assert s.require() is s
        assert s.openai.is_configured
        assert s.blob.is_configured

    def test_status_summary_reports_both_services(self, full_env):
        summary = get_settings().status_summary()
        assert set(summary) == {"Azure OpenAI", "Azure Blob Storage"}
        assert all("Configured" in v for v in summary.values())
