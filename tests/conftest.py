"""Shared fixtures for artifactgen tests.

Provides a sample Swagger document, a copy of it on disk, deployment
settings and a recording fake engine that stands in for the template
renderer when only orchestration is under test.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from artifactgen.errors import EngineFailure
from artifactgen.job_config import JobConfig
from artifactgen.settings import DeploymentSettings


SPEC_DOC: dict[str, Any] = {
    "swagger": "2.0",
    "info": {
        "title": "Widget API",
        "x-groupId": "org.example.demo",
        "x-artifactName": "Widget",
        "version": "1.0.0",
    },
    "paths": {
        "/widgets": {
            "get": {"responses": {"200": {"description": "ok"}}},
        },
    },
}


@pytest.fixture
def spec_doc() -> dict[str, Any]:
    """A deep-enough copy of the sample spec that tests may mutate."""
    return {**SPEC_DOC, "info": dict(SPEC_DOC["info"])}


@pytest.fixture
def spec_text(spec_doc) -> str:
    return yaml.safe_dump(spec_doc, sort_keys=False)


@pytest.fixture
def spec_file(tmp_path, spec_text) -> Path:
    path = tmp_path / "api.yaml"
    path.write_text(spec_text)
    return path


@pytest.fixture
def settings() -> DeploymentSettings:
    return DeploymentSettings(
        artifact_repository_url="https://nexus.example.org",
        pip_repository_name="pypi-internal",
    )


# ---------------------------------------------------------------------------
# Fake engine
# ---------------------------------------------------------------------------

class FakeEngine:
    """Writes a fixed two-file tree and records every config it receives."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[JobConfig] = []

    def execute(self, config: JobConfig) -> Path:
        self.calls.append(config)
        if self.fail:
            raise EngineFailure("boom", ctx={"artifact_id": config.artifact_id})
        (config.output_dir / "src").mkdir(parents=True, exist_ok=True)
        (config.output_dir / "README.md").write_text(f"# {config.artifact_id}\n")
        (config.output_dir / "src" / "main.txt").write_text(config.artifact_version)
        return config.output_dir


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def failing_engine() -> FakeEngine:
    return FakeEngine(fail=True)
