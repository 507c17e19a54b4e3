"""Unit tests for utility functions (procgen.utils) and template rendering (procgen.templates).

Tests cover:
- sanitize_name / python_identifier
- dump_json
- validate_relative_path
- format_duration
- STAGE_COLORS and the Rich output helpers
- TemplateRenderer and its custom filters
"""

from __future__ import annotations

import json

import pytest
from jinja2 import UndefinedError

from procgen.engine.errors import InvalidPath
from procgen.templates import TemplateRenderer, camel_case, pascal_case, slugify, snake_case
from procgen.utils import (
    STAGE_COLORS,
    console,
    dump_json,
    format_duration,
    print_error,
    print_file_tree,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
    python_identifier,
    sanitize_name,
    validate_relative_path,
)


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


class TestSanitizeName:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("My Cool API", "my-cool-api"),
            ("  2FA (TOTP)  ", "2fa-totp"),
            ("already-fine", "already-fine"),
            ("snake_case_ok", "snake_case_ok"),
            ("!!!", "project"),
        ],
    )
    def test_sanitize(self, raw, expected):
        assert sanitize_name(raw) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw, expected",
        [("demo-app", "demo_app"), ("My Cool API", "my_cool_api"), ("2fa", "_2fa")],
    )
    def test_python_identifier(self, raw, expected):
        assert python_identifier(raw) == expected


# ---------------------------------------------------------------------------
# Generated content
# ---------------------------------------------------------------------------


class TestDumpJson:
    @pytest.mark.unit
    def test_pretty_with_trailing_newline(self):
        text = dump_json({"b": 1, "a": [1, 2]})
        assert text.endswith("}\n")
        assert text.index('"b"') < text.index('"a"')
        assert json.loads(text) == {"b": 1, "a": [1, 2]}

    @pytest.mark.unit
    def test_reparse_is_stable(self):
        text = dump_json({"name": "café", "nested": {"x": None}})
        assert dump_json(json.loads(text)) == text
        assert "café" in text


class TestValidateRelativePath:
    @pytest.mark.unit
    @pytest.mark.parametrize("path", ["README.md", "src/demo_app/main.py", ".github/workflows/ci.yml"])
    def test_valid(self, path):
        assert validate_relative_path(path) == path

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "path",
        ["", "/etc/passwd", "C:/x", "src\\main.py", "../outside", "src/./a", "src//a", "src/"],
    )
    def test_invalid(self, path):
        with pytest.raises(InvalidPath) as exc_info:
            validate_relative_path(path)
        assert exc_info.value.path == path


class TestFormatDuration:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "seconds, expected",
        [(-1, "0ms"), (0.0042, "4ms"), (0.5, "500ms"), (3.7, "3.7s"), (65.2, "1m 5s")],
    )
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected


# ---------------------------------------------------------------------------
# Rich output
# ---------------------------------------------------------------------------


class TestRichOutput:
    @pytest.mark.unit
    def test_stage_colors(self):
        assert set(STAGE_COLORS) == {"resolve", "generate", "enrich"}

    @pytest.mark.unit
    def test_helpers_print(self):
        with console.capture() as capture:
            print_stage_header("generate", "demo-app")
            print_summary_table({"Files": 3}, title="Report")
            print_file_tree(["src/index.ts", "package.json"], title="demo-app")
            print_success("done")
            print_warning("careful")
            print_error("broken")
        output = capture.get()
        assert "GENERATE" in output
        assert "Report" in output
        assert "src/" in output
        assert "index.ts" in output
        for word in ("done", "careful", "broken"):
            assert word in output


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TestTemplateRenderer:
    @pytest.mark.unit
    def test_render_string(self):
        rendered = TemplateRenderer().render_string("Hello {{ name }}\n", {"name": "demo"})
        assert rendered == "Hello demo\n"

    @pytest.mark.unit
    def test_filters_registered(self):
        renderer = TemplateRenderer()
        assert renderer.render_string("{{ x | pascal_case }}", {"x": "demo-app"}) == "DemoApp"
        assert renderer.render_string("{{ x | snake_case }}", {"x": "DemoApp"}) == "demo_app"

    @pytest.mark.unit
    def test_block_whitespace_trimmed(self):
        source = "{% if on %}\n  yes\n{% endif %}\n"
        assert TemplateRenderer().render_string(source, {"on": True}) == "  yes\n"

    @pytest.mark.unit
    def test_undefined_raises(self):
        with pytest.raises(UndefinedError):
            TemplateRenderer().render_string("{{ missing }}", {})

    @pytest.mark.unit
    def test_no_autoescape(self):
        assert TemplateRenderer().render_string("{{ v }}", {"v": "<a & b>"}) == "<a & b>"

    @pytest.mark.unit
    def test_filters(self):
        assert slugify(" Demo App! ") == "demo-app"
        assert pascal_case("demo_app") == "DemoApp"
        assert snake_case("DemoApp") == "demo_app"
        assert snake_case("demo-app") == "demo_app"
        assert camel_case("demo-app") == "demoApp"
        assert camel_case("") == ""
