"""
Shared pytest fixtures for the learning-cycle test suite.
Nothing here talks to Azure: collaborators, the user and the resource
provider are all scripted fakes from tests/factories.py, which test modules
also import directly.
"""
import sys
import os

_tests_dir = os.path.dirname(__file__)
_src_dir   = os.path.join(_tests_dir, "..", "src")
for _p in (_tests_dir, _src_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)


import pytest

from factories import FakeResourceProvider, ScriptedChannel, make_plan

from learning_cycle.progress_store import ProgressStore


# ─── pytest fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def store(tmp_path):
    return ProgressStore(tmp_path / "progress.json")


@pytest.fixture
def plan():
    return make_plan(count=3)


@pytest.fixture
def channel():
    return ScriptedChannel()


@pytest.fixture
def provider(tmp_path):
    return FakeResourceProvider(tmp_path / "downloads")


@pytest.fixture
def schedules_dir(tmp_path):
    return tmp_path / "Schedules"
