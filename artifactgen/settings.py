"""Deployment settings shared by every generation job.

Read once from the environment at startup and passed explicitly to the
job configurator:

  ARTIFACT_REPOSITORY_URL       -> artifact_repository_url
  ARTIFACT_PIP_REPOSITORY_NAME  -> pip_repository_name
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

REPOSITORY_URL_ENV = "ARTIFACT_REPOSITORY_URL"
PIP_REPOSITORY_ENV = "ARTIFACT_PIP_REPOSITORY_NAME"


@dataclass(frozen=True)
class DeploymentSettings:
    artifact_repository_url: str | None = None
    pip_repository_name: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DeploymentSettings:
        env = os.environ if environ is None else environ
        return cls(
            artifact_repository_url=env.get(REPOSITORY_URL_ENV) or None,
            pip_repository_name=env.get(PIP_REPOSITORY_ENV) or None,
        )
