"""Run a generation request end to end.

  generate_from_template(request, settings)
    -> resolve_template / request.validate
    -> write SWAGGER2_SPEC to a temporary file (always removed)
    -> resolve_coordinates -> build_job_config
    -> run(): mkdir, engine.execute, embed spec (interface), pack

The workspace directory and archive are left on disk after return; the
caller owns the archive and whatever cleanup it needs.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Callable, Mapping

from .archive import pack_directory
from .catalog import (
    GROUP,
    IMPLEMENTATION_NAME,
    NAME,
    SPEC,
    VERSION,
    ArtifactKind,
    GenerationRequest,
    resolve_template,
)
from .engine import GenerationEngine, TemplateEngine
from .errors import CodegenError, EngineFailure, InvalidRequest, IOFailure
from .job_config import JobConfig, build_job_config, is_within, workspace_root
from .loader import load_spec
from .naming import resolve_coordinates
from .settings import DeploymentSettings

logger = logging.getLogger(__name__)

EMBEDDED_SPEC_NAME = "swagger.yml"
SPEC_FILE_SUFFIX = "swagger.yaml"

Packer = Callable[[Path, Path], Path]


@dataclass(frozen=True)
class GenerationResult:
    """Handle over a produced archive; the caller owns the file."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def open(self) -> IO[bytes]:
        return open(self.path, "rb")

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


def run(
    config: JobConfig,
    kind: ArtifactKind,
    engine: GenerationEngine | None = None,
    packer: Packer = pack_directory,
) -> GenerationResult:
    """Execute one job and pack its output."""
    engine = engine or TemplateEngine()

    root = workspace_root(config.input_spec)
    for path in (config.output_dir, config.archive_path):
        if not is_within(path, root):
            raise InvalidRequest("job path escapes the workspace", ctx={"path": str(path), "workspace": str(root)})

    try:
        config.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailure("unable to create output directory", ctx={"path": str(config.output_dir)}) from exc

    logger.info("Generating %s (%s/%s)", config.artifact_id, config.lang, config.library)
    try:
        engine.execute(config)
    except EngineFailure:
        raise
    except Exception as exc:
        raise EngineFailure(str(exc), ctx={"artifact_id": config.artifact_id}) from exc

    try:
        if kind is ArtifactKind.INTERFACE:
            shutil.copyfile(config.input_spec, config.output_dir / EMBEDDED_SPEC_NAME)
        archive = packer(config.output_dir, config.archive_path)
    except OSError as exc:
        raise IOFailure("unable to package output", ctx={"path": str(config.output_dir)}) from exc

    logger.info("Packed %s into %s", config.output_dir, archive)
    return GenerationResult(path=Path(archive))


def _write_spec(content: str, tmp_dir: Path | str | None) -> Path:
    """Write the spec to a file named after the current nanosecond clock."""
    try:
        fd, name = tempfile.mkstemp(prefix=str(time.time_ns()), suffix=SPEC_FILE_SUFFIX, dir=tmp_dir)
    except OSError as exc:
        raise IOFailure("unable to create spec file", ctx={"error": str(exc)}) from exc

    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
    except UnicodeError as exc:
        path.unlink(missing_ok=True)
        raise InvalidRequest(f"argument '{SPEC}' is not valid UTF-8", ctx={"key": SPEC}) from exc
    except OSError as exc:
        path.unlink(missing_ok=True)
        raise IOFailure("unable to write spec", ctx={"path": str(path), "error": str(exc)}) from exc
    return path


def generate(
    request: GenerationRequest | None,
    spec_path: Path,
    settings: DeploymentSettings,
    engine: GenerationEngine | None = None,
) -> GenerationResult:
    """Resolve, configure and run a request against a spec already on disk."""
    if request is None:
        raise InvalidRequest("request is null")
    template = resolve_template(request.template_name)
    request.validate(template)

    group_id = request.get(GROUP)
    artifact_name = request.get(NAME)
    version = request.get(VERSION)

    spec: Mapping[str, Any] | None = None
    needs_spec = template.kind is ArtifactKind.SERVER_IMPLEMENTATION
    if needs_spec or not (group_id and artifact_name and version):
        spec = load_spec(spec_path)

    coordinates = resolve_coordinates(
        template.ecosystem,
        template.kind,
        group_id=group_id,
        artifact_name=artifact_name,
        version=version,
        spec=spec,
        implementation_name=request.get(IMPLEMENTATION_NAME),
    )
    config = build_job_config(template, coordinates, spec_path, settings, spec=spec)
    return run(config, template.kind, engine=engine)


def generate_from_template(
    request: GenerationRequest | None,
    settings: DeploymentSettings,
    engine: GenerationEngine | None = None,
    tmp_dir: Path | str | None = None,
) -> GenerationResult:
    """Full pipeline for a request carrying the spec text as SWAGGER2_SPEC.

    The temporary spec file is removed on every exit path.
    """
    if request is None:
        raise InvalidRequest("request is null")
    template = resolve_template(request.template_name)
    request.validate(template)

    spec_text = request.get(SPEC)
    if not spec_text:
        raise InvalidRequest(f"argument '{SPEC}' is empty", ctx={"template": template.name, "key": SPEC})

    spec_path = _write_spec(spec_text, tmp_dir)
    try:
        return generate(request, spec_path, settings, engine=engine)
    except CodegenError as exc:
        logger.warning("Generation from %s failed: %s", template.name, exc)
        raise
    finally:
        spec_path.unlink(missing_ok=True)
