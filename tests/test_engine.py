"""Tests for the Jinja2 template engine."""

import dataclasses

import pytest

from artifactgen.catalog import resolve_template
from artifactgen.engine import TemplateEngine
from artifactgen.errors import EngineFailure
from artifactgen.job_config import build_job_config
from artifactgen.naming import resolve_coordinates


def _config(template_name, spec_file, settings, spec=None, **fields):
    template = resolve_template(template_name)
    values = {"group_id": "org.example.demo", "artifact_name": "Widget", "version": "1.0.0"}
    values.update(fields)
    coords = resolve_coordinates(template.ecosystem, template.kind, spec=spec, **values)
    return build_job_config(template, coords, spec_file, settings, spec=spec)


def _files(root):
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


class TestJavaTemplates:

    def test_tree(self, spec_file, settings):
        config = _config("LIBRARY_JAVA_REST_CLIENT", spec_file, settings)
        out = TemplateEngine().execute(config)
        assert _files(out) == [
            "README.md",
            "pom.xml",
            "src/main/java/org/example/demo/package-info.java",
        ]

    def test_pom_coordinates(self, spec_file, settings):
        config = _config("LIBRARY_JAVA_MODEL", spec_file, settings)
        pom = (TemplateEngine().execute(config) / "pom.xml").read_text()
        assert "<artifactId>demo-Widget-model</artifactId>" in pom
        assert "<version>1.0.0-SNAPSHOT</version>" in pom
        assert "https://nexus.example.org" in pom
        assert "<dependencies>" not in pom

    def test_implementation_depends_on_interface(self, spec_file, settings, spec_doc):
        config = _config("SERVER_JAVA_REST", spec_file, settings, spec=spec_doc, implementation_name="impl")
        pom = (TemplateEngine().execute(config) / "pom.xml").read_text()
        assert "<artifactId>demo-widget-interface</artifactId>" in pom


class TestPythonTemplates:

    def test_tree(self, spec_file, settings):
        config = _config("LIBRARY_PYTHON_MODEL", spec_file, settings)
        out = TemplateEngine().execute(config)
        assert _files(out) == ["README.md", "requirements.txt", "setup.py", "widget/__init__.py"]

    def test_setup_coordinates(self, spec_file, settings):
        config = _config("LIBRARY_PYTHON_MODEL", spec_file, settings)
        setup = (TemplateEngine().execute(config) / "setup.py").read_text()
        assert 'NAME = "demo-Widget-model"' in setup
        assert 'VERSION = "1.0.0"' in setup

    def test_requirements_per_library(self, spec_file, settings):
        model = _config("LIBRARY_PYTHON_MODEL", spec_file, settings)
        interface = _config("LIBRARY_PYTHON_REST_INTERFACE", spec_file, settings)
        engine = TemplateEngine()
        assert "connexion" not in (engine.execute(model) / "requirements.txt").read_text()
        assert "connexion" in (engine.execute(interface) / "requirements.txt").read_text()

    def test_readme_index_url(self, spec_file, settings):
        config = _config("LIBRARY_PYTHON_REST_CLIENT", spec_file, settings)
        readme = (TemplateEngine().execute(config) / "README.md").read_text()
        assert "https://nexus.example.org/repository/pypi-internal/simple" in readme


class TestEngineFailures:

    def test_unknown_language(self, tmp_path, spec_file, settings):
        config = _config("LIBRARY_JAVA_MODEL", spec_file, settings)
        with pytest.raises(EngineFailure):
            TemplateEngine(template_dir=tmp_path / "empty").execute(config)

    def test_undefined_variable(self, tmp_path, spec_file, settings):
        (tmp_path / "tpl" / "java").mkdir(parents=True)
        (tmp_path / "tpl" / "java" / "bad.txt.j2").write_text("{{ no_such_variable }}")
        config = _config("LIBRARY_JAVA_MODEL", spec_file, settings)
        with pytest.raises(EngineFailure):
            TemplateEngine(template_dir=tmp_path / "tpl").execute(config)


class TestOutputContainment:
    """Test that rendered paths stay under the output directory."""

    def test_escaping_path_rejected(self, tmp_path, spec_file, settings):
        templates = tmp_path / "templates"
        (templates / "java" / "{{ api_package }}").mkdir(parents=True)
        (templates / "java" / "{{ api_package }}" / "f.txt.j2").write_text("x\n")
        config = _config("LIBRARY_JAVA_MODEL", spec_file, settings)
        config = dataclasses.replace(config, api_package="../../escape")
        with pytest.raises(EngineFailure):
            TemplateEngine(templates).execute(config)
        assert not (config.output_dir.parent.parent / "escape").exists()

    def test_python_implementation_package_lower_cased(self, spec_file, settings, spec_doc):
        config = _config("SERVER_PYTHON_REST", spec_file, settings, spec=spec_doc, implementation_name="impl")
        out = TemplateEngine().execute(config)
        assert "widget/__init__.py" in _files(out)
