"""Error types raised by the generation pipeline.

Every failure carries a ``ctx`` mapping naming the stage input that
caused it (template, field, path, engine), so callers can report which
part of the request was rejected.
"""

from __future__ import annotations

from typing import Any, Mapping


class CodegenError(Exception):
    """Base class for all pipeline failures."""

    def __init__(self, message: str = "", ctx: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.ctx = dict(ctx or {})

    def __str__(self) -> str:
        name = type(self).__name__
        parts = ", ".join(f"{k}={v!r}" for k, v in self.ctx.items())
        text = f"{name}: {self.message}" if self.message else name
        return f"{text} ({parts})" if parts else text


class InvalidRequest(CodegenError):
    """Request is absent, names an unknown template or lacks a required argument."""


class UnknownTemplate(InvalidRequest):
    """No catalog entry matches the requested template name."""


class MissingField(CodegenError):
    """Identity field absent from both the request and the spec document."""


class InvalidGroupId(CodegenError):
    """Group id does not follow the ecosystem's structural convention."""


class EngineFailure(CodegenError):
    """The generation engine reported a failure."""


class IOFailure(CodegenError):
    """Filesystem error while reading, writing, copying or packing."""
