"""Entry point: python -m artifactgen

  python -m artifactgen templates
  python -m artifactgen generate LIBRARY_JAVA_MODEL spec/api.yaml --group org.example.demo

Deployment settings come from ARTIFACT_REPOSITORY_URL and
ARTIFACT_PIP_REPOSITORY_NAME.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .catalog import GROUP, IMPLEMENTATION_NAME, NAME, SPEC, VERSION, GenerationRequest, list_templates
from .errors import CodegenError
from .orchestrator import generate_from_template
from .settings import DeploymentSettings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="artifactgen", description="Generate artifacts from an API spec.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("templates", help="List supported templates and their arguments.")

    gen = sub.add_parser("generate", help="Generate an archive from a template.")
    gen.add_argument("template", help="Template name, e.g. LIBRARY_JAVA_MODEL.")
    gen.add_argument("spec", type=Path, help="Path to the Swagger/OpenAPI document.")
    gen.add_argument("--group", default="", help="Group id (default: info.x-groupId).")
    gen.add_argument("--name", default="", help="Artifact name (default: info.x-artifactName).")
    gen.add_argument("--version", default="", help="Version (default: info.version).")
    gen.add_argument("--implementation-name", default="", help="Implementation name for SERVER_* templates.")
    gen.add_argument("--tmp-dir", type=Path, default=None, help="Directory for the workspace.")
    return parser


def _request_from_args(args: argparse.Namespace) -> GenerationRequest:
    arguments = {
        GROUP: args.group,
        NAME: args.name,
        VERSION: args.version,
        SPEC: args.spec.read_text(encoding="utf-8"),
    }
    if args.template.startswith("SERVER_"):
        arguments[IMPLEMENTATION_NAME] = args.implementation_name
    return GenerationRequest(template_name=args.template, arguments=arguments)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "templates":
        for template in list_templates():
            print(f"{template.name}: {', '.join(template.arguments)}")
        return 0

    try:
        request = _request_from_args(args)
        result = generate_from_template(request, DeploymentSettings.from_env(), tmp_dir=args.tmp_dir)
    except (OSError, UnicodeError, CodegenError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"Generated {result.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
