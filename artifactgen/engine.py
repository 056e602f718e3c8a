"""Render project skeletons from Jinja2 templates.

Templates live in templates/<lang>/ and mirror the generated tree. Path
segments are rendered too, so ``{{ model_package }}/__init__.py.j2``
becomes ``widget/__init__.py``. The ``.j2`` extension is stripped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import jinja2

from .errors import EngineFailure
from .job_config import JobConfig, is_within

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".j2"


class GenerationEngine(Protocol):
    def execute(self, config: JobConfig) -> Path:
        """Populate ``config.output_dir`` and return it, or raise EngineFailure."""
        ...


class TemplateEngine:
    """Default engine: renders every template under templates/<lang>/."""

    def __init__(self, template_dir: Path | None = None) -> None:
        self.template_dir = template_dir or TEMPLATE_DIR
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.template_dir)),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=jinja2.StrictUndefined,
        )

    def _template_names(self, lang: str) -> list[str]:
        lang_dir = self.template_dir / lang
        if not lang_dir.is_dir():
            raise EngineFailure(f"no templates for language {lang}", ctx={"lang": lang})
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in lang_dir.rglob(f"*{TEMPLATE_SUFFIX}")
            if p.is_file()
        )

    def _render_path(self, name: str, lang: str, context: dict) -> Path:
        relative = name[len(lang) + 1:-len(TEMPLATE_SUFFIX)]
        rendered = self.env.from_string(relative).render(**context)
        return Path(*rendered.split("/"))

    def execute(self, config: JobConfig) -> Path:
        context = config.as_context()
        context["package_dir"] = config.invoker_package.replace(".", "/")
        output_dir = config.output_dir
        written = 0
        try:
            for name in self._template_names(config.lang):
                content = self.env.get_template(name).render(**context)
                # Templates that do not apply to this library render empty
                if not content.strip():
                    continue
                target = output_dir / self._render_path(name, config.lang, context)
                if not is_within(target, output_dir):
                    raise EngineFailure(
                        "rendered path escapes the output directory",
                        ctx={"template": name, "path": str(target)},
                    )
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
                written += 1
        except jinja2.TemplateError as exc:
            raise EngineFailure(str(exc), ctx={"lang": config.lang, "library": config.library}) from exc
        except OSError as exc:
            raise EngineFailure(str(exc), ctx={"output_dir": str(output_dir)}) from exc

        logger.info("Generated %s (%d files)", output_dir, written)
        return output_dir
