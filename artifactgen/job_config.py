"""Assemble the immutable job configuration handed to the engine.

Workspace layout for a spec stored at ``/tmp/123swagger.yaml``:

  /tmp/123swagger.yamld/gen/<workspace key>/   engine output
  /tmp/123swagger.yamld/<workspace key>.zip    packed archive

Workspace keys are lower-cased, so two different artifacts never share
an output directory; two requests for the same key on the same spec file
do.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .catalog import ArtifactKind, GenerationTemplate
from .errors import InvalidRequest
from .naming import ArtifactCoordinates, resolve_interface_coordinates
from .settings import DeploymentSettings

logger = logging.getLogger(__name__)

WORKSPACE_SUFFIX = "d"
OUTPUT_SUBDIR = "gen"
ARCHIVE_EXTENSION = ".zip"


@dataclass(frozen=True)
class JobConfig:
    input_spec: Path
    output_dir: Path
    archive_path: Path
    lang: str
    library: str
    group_id: str
    artifact_id: str
    artifact_version: str
    invoker_package: str
    api_package: str
    model_package: str
    api_coordinates: ArtifactCoordinates | None = None
    repository_url: str | None = None
    repository_python_name: str | None = None

    def as_context(self) -> dict[str, Any]:
        """Flatten into template variables for the rendering engine."""
        api = self.api_coordinates
        return {
            "input_spec": str(self.input_spec),
            "output_dir": str(self.output_dir),
            "lang": self.lang,
            "library": self.library,
            "group_id": self.group_id,
            "artifact_id": self.artifact_id,
            "artifact_version": self.artifact_version,
            "invoker_package": self.invoker_package,
            "api_package": self.api_package,
            "model_package": self.model_package,
            "group_id_api": api.group_id if api else None,
            "artifact_id_api": api.artifact_id if api else None,
            "artifact_version_api": api.version if api else None,
            "repository_url": self.repository_url,
            "repository_python_name": self.repository_python_name,
        }


def workspace_root(spec_path: Path) -> Path:
    return Path(f"{spec_path}{WORKSPACE_SUFFIX}")


def is_within(path: Path, root: Path) -> bool:
    """True when ``path`` resolves to ``root`` or somewhere beneath it."""
    return path.resolve().is_relative_to(root.resolve())


def output_dir_for(spec_path: Path, workspace_key: str) -> Path:
    return workspace_root(spec_path) / OUTPUT_SUBDIR / workspace_key.lower()


def archive_path_for(spec_path: Path, workspace_key: str) -> Path:
    return workspace_root(spec_path) / f"{workspace_key.lower()}{ARCHIVE_EXTENSION}"


def build_job_config(
    template: GenerationTemplate,
    coordinates: ArtifactCoordinates,
    spec_path: Path | str,
    settings: DeploymentSettings,
    spec: Mapping[str, Any] | None = None,
) -> JobConfig:
    """Build the engine configuration for one resolved artifact.

    ``spec`` is required for server implementations, which bind to the
    interface artifact described by the same document.
    """
    spec_path = Path(spec_path)
    api_package = coordinates.artifact_name
    model_package = coordinates.artifact_name.lower()
    api_coordinates = None

    if template.kind is ArtifactKind.SERVER_IMPLEMENTATION:
        if spec is None:
            raise InvalidRequest(
                "spec document is required for server implementations",
                ctx={"template": template.name},
            )
        api_coordinates = resolve_interface_coordinates(template.ecosystem, spec)
        api_package = api_coordinates.artifact_name
        model_package = api_coordinates.artifact_name
        if template.ecosystem.convention.lowercase_implementation_model_package:
            model_package = model_package.lower()

    config = JobConfig(
        input_spec=spec_path,
        output_dir=output_dir_for(spec_path, coordinates.workspace_key),
        archive_path=archive_path_for(spec_path, coordinates.workspace_key),
        lang=template.ecosystem.convention.lang,
        library=template.kind.library,
        group_id=coordinates.group_id,
        artifact_id=coordinates.artifact_id,
        artifact_version=coordinates.version,
        invoker_package=coordinates.group_id,
        api_package=api_package,
        model_package=model_package,
        api_coordinates=api_coordinates,
        repository_url=settings.artifact_repository_url or None,
        repository_python_name=settings.pip_repository_name or None,
    )
    logger.debug("Built job config for %s: %s", template.name, config)
    return config
