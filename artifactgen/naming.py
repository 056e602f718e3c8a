"""Derive artifact coordinates from request fields and the spec document.

Pattern: {lastGroupSegment}-{artifactName}-{suffix}
  - client/model/interface -> suffix is the library name
  - server implementation  -> suffix is the implementation name

Examples:
  org.example.demo + Widget, MODEL (java)          -> demo-Widget-model
  org.example.demo + Widget, INTERFACE (python)    -> demo-Widget-interface
  org.example.demo + Widget, SERVER "impl-a" (py)  -> demo-Widget-impla
  org.example.demo + Widget, SERVER "impl" (java)  -> Widget
      (workspace key stays demo-Widget-impl)

Java versions gain -SNAPSHOT; Python versions are used as given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .catalog import ArtifactKind, Ecosystem
from .errors import InvalidGroupId, InvalidRequest, MissingField
from .loader import ARTIFACT_NAME_FIELD, GROUP_ID_FIELD, VERSION_FIELD, extract_metadata, get_info_field

logger = logging.getLogger(__name__)

GROUP_SEPARATOR = "."

# Identity fields end up in workspace and package paths
_PATH_SEPARATORS = ("/", "\\")
_PARENT_REFERENCE = ".."


@dataclass(frozen=True)
class ArtifactCoordinates:
    group_id: str
    artifact_id: str
    version: str
    artifact_name: str
    workspace_key: str


def last_group_segment(group_id: str, require_qualified: bool = False) -> str:
    """Return the part of a group id after its final separator."""
    if GROUP_SEPARATOR not in group_id:
        if require_qualified:
            raise InvalidGroupId(
                "group id must contain at least two segments",
                ctx={"group_id": group_id},
            )
        return group_id
    return group_id.rsplit(GROUP_SEPARATOR, 1)[1]


def check_path_safe(field: str, value: str) -> str:
    """Reject values that could point outside the workspace when used in a path."""
    if _PARENT_REFERENCE in value or any(sep in value for sep in _PATH_SEPARATORS):
        raise InvalidRequest(
            f"{field} must not contain path separators or '..'",
            ctx={"field": field, "value": value},
        )
    return value


def build_workspace_key(segment: str, artifact_name: str, suffix: str) -> str:
    return f"{segment}-{artifact_name}-{suffix}"


def _field_value(
    supplied: str | None,
    spec: Mapping[str, Any] | None,
    field: str,
) -> str:
    """Prefer the supplied value; fall back to the spec info section."""
    if supplied:
        return supplied
    if spec is None:
        raise MissingField(f"missing {field}", ctx={"field": field})
    return get_info_field(spec, field)


def _suffix(ecosystem: Ecosystem, kind: ArtifactKind, implementation_name: str | None) -> str:
    if kind is not ArtifactKind.SERVER_IMPLEMENTATION:
        return kind.library
    if not implementation_name:
        raise InvalidRequest(
            "implementation name is required for server implementations",
            ctx={"ecosystem": ecosystem.name},
        )
    return ecosystem.convention.implementation_suffix(implementation_name)


def resolve_coordinates(
    ecosystem: Ecosystem,
    kind: ArtifactKind,
    group_id: str | None = None,
    artifact_name: str | None = None,
    version: str | None = None,
    spec: Mapping[str, Any] | None = None,
    implementation_name: str | None = None,
) -> ArtifactCoordinates:
    """Compute fully populated coordinates for one artifact.

    Any of ``group_id``, ``artifact_name`` or ``version`` left empty is read
    from ``spec``; ``spec`` may be None when all three are supplied.
    """
    convention = ecosystem.convention

    group_id = check_path_safe(GROUP_ID_FIELD, _field_value(group_id, spec, GROUP_ID_FIELD))
    artifact_name = check_path_safe(ARTIFACT_NAME_FIELD, _field_value(artifact_name, spec, ARTIFACT_NAME_FIELD))
    version = _field_value(version, spec, VERSION_FIELD)

    segment = last_group_segment(group_id, convention.requires_qualified_group)
    suffix = check_path_safe("implementation name", _suffix(ecosystem, kind, implementation_name))
    workspace_key = build_workspace_key(segment, artifact_name, suffix)

    if kind is ArtifactKind.SERVER_IMPLEMENTATION and convention.bare_implementation_artifact_id:
        artifact_id = artifact_name
    else:
        artifact_id = workspace_key

    coordinates = ArtifactCoordinates(
        group_id=group_id,
        artifact_id=artifact_id,
        version=convention.apply_prerelease(version),
        artifact_name=artifact_name,
        workspace_key=workspace_key,
    )
    logger.debug("Resolved %s %s coordinates: %s", ecosystem.name, kind.name, coordinates)
    return coordinates


def resolve_interface_coordinates(
    ecosystem: Ecosystem,
    spec: Mapping[str, Any],
) -> ArtifactCoordinates:
    """Coordinates of the interface artifact a server implementation binds to.

    Always read from the spec info section; the artifact name is lower-cased
    in the artifact id.
    """
    convention = ecosystem.convention
    metadata = extract_metadata(spec)
    group_id = check_path_safe(GROUP_ID_FIELD, metadata.group_id)
    artifact_name = check_path_safe(ARTIFACT_NAME_FIELD, metadata.artifact_name)

    segment = last_group_segment(group_id, convention.requires_qualified_group)
    artifact_id = build_workspace_key(segment, artifact_name.lower(), ArtifactKind.INTERFACE.library)
    return ArtifactCoordinates(
        group_id=group_id,
        artifact_id=artifact_id,
        version=convention.apply_prerelease(metadata.api_version),
        artifact_name=artifact_name,
        workspace_key=artifact_id,
    )
