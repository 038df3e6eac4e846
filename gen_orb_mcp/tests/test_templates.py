from dataclasses import dataclass

import pytest

from gen_orb_mcp.generator import (
    SerializationError,
    TemplateRegisterError,
    TemplateRenderer,
    TemplateRenderError,
    UnknownTemplateError,
)
from gen_orb_mcp.generator.templates import length, py_literal, toml_str


class TestHelpers:
    def test_length(self):
        assert length([1, 2, 3]) == 3
        assert length({"a": 1}) == 1
        assert length("abc") == 3
        assert length(None) == 0

    def test_py_literal(self):
        assert py_literal("it's") == '"it\'s"'
        assert py_literal(None) == "None"
        assert py_literal(True) == "True"

    def test_toml_str(self):
        assert toml_str('say "hi"') == '"say \\"hi\\""'


class TestTemplateRenderer:
    """Test cases for template compilation and rendering"""

    def test_builtin_templates(self):
        renderer = TemplateRenderer()
        assert sorted(renderer.template_names) == ["__init__.py", "__main__.py", "pyproject.toml"]

    def test_render_mapping(self):
        renderer = TemplateRenderer({"t": "{{ name }}: {{ length(items) }} {{ items | length }}"})
        assert renderer.render("t", {"name": "orb", "items": [1, 2]}) == "orb: 2 2"

    def test_render_dataclass(self):
        @dataclass
        class Context:
            name: str

        renderer = TemplateRenderer({"t": "{{ name | py_literal }}"})
        assert renderer.render("t", Context("orb")) == "'orb'"

    def test_register_helper(self):
        renderer = TemplateRenderer({"t": "{{ shout(name) }}"})
        renderer.register_helper("shout", lambda s: s.upper())
        assert renderer.render("t", {"name": "orb"}) == "ORB"

    def test_extra_helpers(self):
        renderer = TemplateRenderer({"t": "{{ name | twice }}"}, helpers={"twice": lambda s: s * 2})
        assert renderer.render("t", {"name": "ab"}) == "abab"

    def test_undefined_variable(self):
        renderer = TemplateRenderer({"t": "{{ missing }}"})
        with pytest.raises(TemplateRenderError):
            renderer.render("t", {})

    def test_unknown_template(self):
        with pytest.raises(UnknownTemplateError):
            TemplateRenderer({}).render("nope", {})

    def test_unserializable_context(self):
        renderer = TemplateRenderer({"t": "x"})
        with pytest.raises(SerializationError):
            renderer.render("t", {"value": object()})

    def test_non_mapping_context(self):
        with pytest.raises(SerializationError):
            TemplateRenderer({"t": "x"}).render("t", [1, 2])

    def test_syntax_error(self):
        with pytest.raises(TemplateRegisterError):
            TemplateRenderer({"t": "{% for %}"})

    def test_no_autoescape(self):
        renderer = TemplateRenderer({"t": "{{ code }}"})
        assert renderer.render("t", {"code": "a < b & 'c'"}) == "a < b & 'c'"


if __name__ == "__main__":
    pytest.main([__file__])
