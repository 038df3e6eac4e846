import json
from pathlib import Path

import pytest

from gen_orb_mcp.generator import GeneratorConfig, GeneratorContext, SerializationError
from gen_orb_mcp.parser import OrbDefinition, OrbParser
from gen_orb_mcp.parser.nodes import Command, Job, Parameter, ParameterType

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def packed_orb():
    return OrbParser.parse(TEST_DATA / "packed_orb.yml")


class TestGeneratorContext:
    """Test cases for template context building"""

    def test_names(self, packed_orb):
        context = GeneratorContext.from_orb(packed_orb, "my-toolkit", "1.0.0")
        assert context.package_name == "my_toolkit_mcp"
        assert context.class_name == "MyToolkitMcp"
        assert context.version == "1.0.0"
        assert context.has_resources

    def test_custom_suffixes(self, packed_orb):
        config = GeneratorConfig(uri_scheme="circleci", package_suffix="_server", class_suffix="Server")
        context = GeneratorContext.from_orb(packed_orb, "toolkit", "1.0.0", config)
        assert context.package_name == "toolkit_server"
        assert context.class_name == "ToolkitServer"
        assert context.commands[0].uri == "circleci://commands/greet"

    def test_resource_uris(self, packed_orb):
        context = GeneratorContext.from_orb(packed_orb, "toolkit", "1.0.0")
        uris = context.resource_uris
        assert uris == [
            "orb://commands/greet",
            "orb://commands/install",
            "orb://jobs/build",
            "orb://jobs/test",
            "orb://executors/default",
        ]
        assert len(set(uris)) == len(uris)

    def test_same_name_in_two_categories(self):
        orb = OrbDefinition(commands={"build": Command()}, jobs={"build": Job()})
        uris = GeneratorContext.from_orb(orb, "toolkit", "1.0.0").resource_uris
        assert uris == ["orb://commands/build", "orb://jobs/build"]

    def test_parameter_context(self, packed_orb):
        context = GeneratorContext.from_orb(packed_orb, "toolkit", "1.0.0")
        install = context.commands[1]
        cache, manager = install.parameters
        assert cache.name == "cache"
        assert cache.param_type == "boolean"
        assert cache.default == "true"
        assert not cache.required
        assert manager.enum_values == ["npm", "yarn"]
        assert manager.default == '"npm"'

        target = context.jobs[0].parameters[0]
        assert target.default is None
        assert target.required

    def test_command_snapshot(self, packed_orb):
        context = GeneratorContext.from_orb(packed_orb, "toolkit", "1.0.0")
        greet = context.commands[0]
        assert greet.json_content.startswith("{\n  ")
        snapshot = json.loads(greet.json_content)
        assert snapshot == {
            "name": "greet",
            "description": "Print a greeting",
            "parameters": [{"name": "to", "type": "string", "description": "Who to greet", "default": "world", "required": False}],
            "steps_count": 1,
        }

    def test_job_snapshot(self, packed_orb):
        context = GeneratorContext.from_orb(packed_orb, "toolkit", "1.0.0")
        build, test = context.jobs
        assert build.executor == "default"
        assert json.loads(build.json_content)["executor"] == "default"
        snapshot = json.loads(test.json_content)
        assert snapshot["docker_images"] == ["cimg/node:20.0", "cimg/postgres:15.0"]
        assert snapshot["resource_class"] == "large"
        assert snapshot["steps_count"] == 3

    def test_executor_snapshot(self, packed_orb):
        context = GeneratorContext.from_orb(packed_orb, "toolkit", "1.0.0")
        default = context.executors[0]
        snapshot = json.loads(default.json_content)
        assert snapshot["working_directory"] == "~/project"
        assert snapshot["docker_images"] == ["cimg/node:20.0"]
        assert default.config.resource_class == "medium"

    def test_empty_orb(self):
        context = GeneratorContext.from_orb(OrbDefinition(), "empty", "0.1.0")
        assert not context.has_resources
        assert context.resource_uris == []

    def test_unserializable_default(self):
        orb = OrbDefinition(commands={"c": Command(parameters={"p": Parameter(type=ParameterType.STRING, default=object())})})
        with pytest.raises(SerializationError):
            GeneratorContext.from_orb(orb, "toolkit", "1.0.0")


class TestGeneratorConfig:
    def test_from_dict_ignores_unknown_keys(self):
        config = GeneratorConfig.from_dict({"uri_scheme": "circleci", "unknown": 1, "formatter": {"enabled": True}})
        assert config.uri_scheme == "circleci"
        assert config.formatter.enabled
        assert config.formatter.command == ["ruff", "format"]
        assert not hasattr(config, "unknown")

    def test_to_dict_round_trip(self):
        config = GeneratorConfig(package_suffix="_server")
        assert GeneratorConfig.from_dict(config.to_dict()) == config


class TestScenario:
    def test_my_toolkit(self):
        """Single command orb with a defaulted parameter"""
        content = "version: \"2.1\"\ncommands:\n  greet:\n    parameters:\n      name: {type: string, default: \"World\"}\n    steps: [\"run: echo hi\"]\n"
        orb = OrbParser.parse_packed_content(content, "orb.yml")
        context = GeneratorContext.from_orb(orb, "my-toolkit", "1.5.0")
        assert context.package_name == "my_toolkit_mcp"
        assert context.class_name == "MyToolkitMcp"
        assert [c.name for c in context.commands] == ["greet"]
        greet = context.commands[0]
        assert greet.uri == "orb://commands/greet"
        param = greet.parameters[0]
        assert param.name == "name"
        assert not param.required
        assert param.default == '"World"'


if __name__ == "__main__":
    pytest.main([__file__])
