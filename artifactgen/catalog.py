"""Catalog of supported generation templates.

One template per (ecosystem, artifact kind) pair:

  LIBRARY_JAVA_REST_CLIENT      LIBRARY_PYTHON_REST_CLIENT
  LIBRARY_JAVA_MODEL            LIBRARY_PYTHON_MODEL
  LIBRARY_JAVA_REST_INTERFACE   LIBRARY_PYTHON_REST_INTERFACE
  SERVER_JAVA_REST              SERVER_PYTHON_REST

Each ecosystem carries its naming convention as data, so adding one
means adding an ``Ecosystem`` member and its templates here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

from .errors import InvalidRequest, UnknownTemplate

# Argument keys
GROUP = "GROUP"
NAME = "NAME"
VERSION = "VERSION"
SPEC = "SWAGGER2_SPEC"
IMPLEMENTATION_NAME = "IMPLEMENTATION_NAME"

_LIBRARY_ARGUMENTS = (GROUP, NAME, VERSION, SPEC)
_SERVER_ARGUMENTS = (IMPLEMENTATION_NAME, GROUP, NAME, VERSION, SPEC)


@dataclass(frozen=True)
class NamingConvention:
    """How an ecosystem names and versions its published artifacts."""

    lang: str
    prerelease_marker: str | None = None
    requires_qualified_group: bool = False
    strip_implementation_hyphens: bool = False
    bare_implementation_artifact_id: bool = False
    lowercase_implementation_model_package: bool = False

    def apply_prerelease(self, version: str) -> str:
        """Append the pre-release marker unless the version already has it."""
        if not self.prerelease_marker:
            return version
        if version.strip().endswith(self.prerelease_marker):
            return version
        return version + self.prerelease_marker

    def implementation_suffix(self, implementation_name: str) -> str:
        if self.strip_implementation_hyphens:
            return implementation_name.replace("-", "")
        return implementation_name


class Ecosystem(Enum):
    JAVA = NamingConvention(
        lang="java",
        prerelease_marker="-SNAPSHOT",
        requires_qualified_group=True,
        bare_implementation_artifact_id=True,
    )
    PYTHON = NamingConvention(
        lang="python",
        strip_implementation_hyphens=True,
        lowercase_implementation_model_package=True,
    )

    @property
    def convention(self) -> NamingConvention:
        return self.value


class ArtifactKind(Enum):
    """Artifact flavours; the value is the engine library name."""

    CLIENT = "client"
    MODEL = "model"
    INTERFACE = "interface"
    SERVER_IMPLEMENTATION = "implem"

    @property
    def library(self) -> str:
        return self.value


@dataclass(frozen=True)
class GenerationTemplate:
    name: str
    ecosystem: Ecosystem
    kind: ArtifactKind
    arguments: tuple[str, ...]


def _library_template(ecosystem: Ecosystem, kind: ArtifactKind, suffix: str) -> GenerationTemplate:
    return GenerationTemplate(
        name=f"LIBRARY_{ecosystem.name}_{suffix}",
        ecosystem=ecosystem,
        kind=kind,
        arguments=_LIBRARY_ARGUMENTS,
    )


def _server_template(ecosystem: Ecosystem) -> GenerationTemplate:
    return GenerationTemplate(
        name=f"SERVER_{ecosystem.name}_REST",
        ecosystem=ecosystem,
        kind=ArtifactKind.SERVER_IMPLEMENTATION,
        arguments=_SERVER_ARGUMENTS,
    )


def _build_catalog() -> tuple[GenerationTemplate, ...]:
    templates: list[GenerationTemplate] = []
    for ecosystem in Ecosystem:
        templates.append(_library_template(ecosystem, ArtifactKind.CLIENT, "REST_CLIENT"))
        templates.append(_library_template(ecosystem, ArtifactKind.MODEL, "MODEL"))
        templates.append(_library_template(ecosystem, ArtifactKind.INTERFACE, "REST_INTERFACE"))
        templates.append(_server_template(ecosystem))
    return tuple(templates)


_CATALOG = _build_catalog()
_BY_NAME: dict[str, GenerationTemplate] = {t.name: t for t in _CATALOG}


def list_templates() -> list[GenerationTemplate]:
    """Return every supported template in catalog order."""
    return list(_CATALOG)


def resolve_template(name: str) -> GenerationTemplate:
    """Look up a template by its exact name."""
    try:
        return _BY_NAME[name]
    except KeyError:
        raise UnknownTemplate(f"unknown template: {name}", ctx={"template": name}) from None


@dataclass(frozen=True)
class GenerationRequest:
    """A template name plus its arguments, keyed case-sensitively."""

    template_name: str
    arguments: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_pairs(cls, template_name: str, pairs: Iterable[Mapping[str, Any]]) -> GenerationRequest:
        """Build a request from ``[{"key": ..., "value": ...}, ...]``."""
        arguments: dict[str, str] = {}
        for pair in pairs:
            key = pair.get("key")
            if not key:
                raise InvalidRequest("argument without key", ctx={"template": template_name})
            if key in arguments:
                raise InvalidRequest(
                    f"duplicate argument '{key}'",
                    ctx={"template": template_name, "key": key},
                )
            value = pair.get("value")
            arguments[key] = "" if value is None else str(value)
        return cls(template_name=template_name, arguments=arguments)

    def validate(self, template: GenerationTemplate) -> None:
        """Fail on the first required argument key the request does not carry."""
        for key in template.arguments:
            if key not in self.arguments:
                raise InvalidRequest(
                    f"unable to find argument '{key}'",
                    ctx={"template": template.name, "key": key},
                )

    def get(self, key: str) -> str | None:
        """Return an argument value, treating empty strings as absent."""
        value = self.arguments.get(key)
        return value or None
