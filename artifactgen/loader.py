"""Load an API spec document and read identity fields from its info section.

Swagger/OpenAPI documents carry the artifact identity as vendor
extensions next to the standard version:

  info:
    x-groupId: org.example.demo
    x-artifactName: Widget
    version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import InvalidRequest, IOFailure, MissingField

GROUP_ID_FIELD = "x-groupId"
ARTIFACT_NAME_FIELD = "x-artifactName"
VERSION_FIELD = "version"


class _SpecLoader(yaml.SafeLoader):
    """Safe loader that keeps numeric scalars as their source text.

    An unquoted ``version: 1.10`` stays ``"1.10"`` instead of the float 1.1.
    """


def _construct_source_text(loader: _SpecLoader, node: yaml.ScalarNode) -> str:
    return loader.construct_scalar(node)


_SpecLoader.add_constructor("tag:yaml.org,2002:int", _construct_source_text)
_SpecLoader.add_constructor("tag:yaml.org,2002:float", _construct_source_text)


@dataclass(frozen=True)
class SpecMetadata:
    group_id: str
    artifact_name: str
    api_version: str


def load_spec(path: Path | str) -> dict[str, Any]:
    """Parse a YAML or JSON spec document from disk."""
    spec_file = Path(path)
    try:
        with open(spec_file, encoding="utf-8") as f:
            data = yaml.load(f, Loader=_SpecLoader)
    except OSError as exc:
        raise IOFailure("unable to read spec", ctx={"path": str(spec_file), "error": str(exc)}) from exc
    except UnicodeError as exc:
        raise InvalidRequest("spec is not valid UTF-8", ctx={"path": str(spec_file)}) from exc
    except yaml.YAMLError as exc:
        raise InvalidRequest("spec is not valid YAML/JSON", ctx={"path": str(spec_file)}) from exc

    if not isinstance(data, Mapping):
        raise InvalidRequest("spec top level must be a mapping", ctx={"path": str(spec_file)})
    return dict(data)


def get_info(spec: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the info section, failing when it is absent."""
    info = spec.get("info")
    if not isinstance(info, Mapping):
        raise MissingField("missing info section from spec", ctx={"field": "info"})
    return info


def get_info_field(spec: Mapping[str, Any], field: str) -> str:
    """Return a non-empty string field of the info section."""
    value = get_info(spec).get(field)
    if value is None or value == "":
        raise MissingField(f"missing {field}", ctx={"field": field})
    if not isinstance(value, str):
        raise InvalidRequest(
            f"{field} must be a string",
            ctx={"field": field, "type": type(value).__name__},
        )
    return value


def extract_metadata(spec: Mapping[str, Any]) -> SpecMetadata:
    """Read all three identity fields, failing on the first absent one."""
    return SpecMetadata(
        group_id=get_info_field(spec, GROUP_ID_FIELD),
        artifact_name=get_info_field(spec, ARTIFACT_NAME_FIELD),
        api_version=get_info_field(spec, VERSION_FIELD),
    )
