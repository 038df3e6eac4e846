import logging
from pathlib import Path

import pytest
import yaml

from gen_orb_mcp.parser import (
    ROOT_DOCUMENT,
    CommandInvocation,
    ExecutorName,
    Layout,
    MissingFileError,
    OrbParser,
    ParameterType,
    RunStep,
    SimpleStep,
    YamlParseError,
    detect_layout,
)

TEST_DATA = Path(__file__).parent / "test_data"
PACKED = TEST_DATA / "packed_orb.yml"
UNPACKED = TEST_DATA / "toolkit"


class TestLayoutDetection:
    def test_directory_is_unpacked(self, tmp_path):
        assert detect_layout(tmp_path) is Layout.UNPACKED

    def test_root_document_is_unpacked(self):
        assert detect_layout(UNPACKED / ROOT_DOCUMENT) is Layout.UNPACKED

    def test_other_file_is_packed(self):
        assert detect_layout(PACKED) is Layout.PACKED

    def test_detection_uses_shape_only(self, tmp_path):
        """Non existing paths are classified by name"""
        assert detect_layout(tmp_path / "missing.yml") is Layout.PACKED
        assert detect_layout(tmp_path / "missing" / ROOT_DOCUMENT) is Layout.UNPACKED


class TestPackedParsing:
    """Test cases for single file orbs"""

    def test_parse_packed(self):
        orb = OrbParser.parse(PACKED)
        assert orb.version == "2.1"
        assert orb.description == "Tools for building and testing projects"
        assert orb.display.home_url == "https://example.com/toolkit"
        assert orb.orbs == {"node": "circleci/node@5.1.0"}
        assert list(orb.commands) == ["greet", "install"]
        assert list(orb.jobs) == ["build", "test"]
        assert list(orb.executors) == ["default"]

    def test_steps(self):
        orb = OrbParser.parse_packed(PACKED)
        steps = orb.commands["install"].steps
        assert steps[0] == SimpleStep("checkout")
        assert steps[3].run.environment == {"CI": "true", "RETRIES": "3"}
        assert isinstance(steps[4], CommandInvocation)
        assert steps[4].name == "node/install-packages"

    def test_parameters(self):
        orb = OrbParser.parse_packed(PACKED)
        params = orb.commands["install"].parameters
        assert params["cache"].type is ParameterType.BOOLEAN
        assert params["cache"].default is True
        assert params["manager"].enum == ["npm", "yarn"]
        assert orb.jobs["build"].parameters["target"].required

    def test_quoted_default_stays_string(self):
        orb = OrbParser.parse_packed(PACKED)
        assert orb.executors["default"].parameters["tag"].default == "20.0"

    def test_job_config(self):
        orb = OrbParser.parse_packed(PACKED)
        build = orb.jobs["build"]
        assert build.executor == ExecutorName("default")
        test = orb.jobs["test"]
        assert test.executor_name is None
        assert test.config.docker_images == ["cimg/node:20.0", "cimg/postgres:15.0"]
        assert test.config.resource_class == "large"
        assert test.parallelism == 4

    def test_dates_stay_strings(self):
        orb = OrbParser.parse_packed_content("version: 2.1\ndescription: 2024-01-01\n", "inline.yml")
        assert orb.description == "2024-01-01"

    def test_empty_definition(self):
        orb = OrbParser.parse(TEST_DATA / "empty_orb.yml")
        assert orb.version == "2.1"
        assert orb.entity_count == 0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "blank.yml"
        path.write_text("")
        assert OrbParser.parse(path).entity_count == 0

    def test_yaml_syntax_error(self):
        with pytest.raises(YamlParseError) as e:
            OrbParser.parse(TEST_DATA / "invalid_syntax.yml")
        assert e.value.path == TEST_DATA / "invalid_syntax.yml"

    def test_shape_error_is_yaml_parse_error(self):
        with pytest.raises(YamlParseError, match="jobs.build"):
            OrbParser.parse_packed_content("jobs:\n  build:\n    steps: 3\n", "bad.yml")

    def test_top_level_sequence(self):
        with pytest.raises(YamlParseError):
            OrbParser.parse_packed_content("- a\n- b\n", "bad.yml")


class TestUnpackedParsing:
    """Test cases for directory orbs"""

    def test_parse_directory(self):
        orb = OrbParser.parse(UNPACKED)
        assert orb.description == "My toolkit orb"
        assert list(orb.commands) == ["greet"]
        assert list(orb.jobs) == ["build"]
        assert list(orb.executors) == ["default"]

    def test_parse_root_document_path(self):
        assert OrbParser.parse(UNPACKED / ROOT_DOCUMENT) == OrbParser.parse(UNPACKED)

    def test_directory_replaces_inline(self):
        """commands/ wins over the inline map of @orb.yml"""
        orb = OrbParser.parse_unpacked(UNPACKED)
        assert "inline-only" not in orb.commands

    def test_file_stem_is_entity_name(self):
        orb = OrbParser.parse_unpacked(UNPACKED)
        assert orb.commands["greet"].steps == [RunStep('echo "Hello << parameters.to >>"')]
        build = orb.jobs["build"]
        assert build.steps[1].arguments == {"to": "builder"}

    def test_empty_directory_replaces_inline(self, tmp_path):
        (tmp_path / ROOT_DOCUMENT).write_text("version: 2.1\ncommands:\n  hello:\n    steps: [checkout]\n")
        (tmp_path / "commands").mkdir()
        assert OrbParser.parse_unpacked(tmp_path).commands == {}

    def test_inline_kept_without_directory(self, tmp_path):
        (tmp_path / ROOT_DOCUMENT).write_text("version: 2.1\ncommands:\n  hello:\n    steps: [checkout]\n")
        assert list(OrbParser.parse_unpacked(tmp_path).commands) == ["hello"]

    def test_non_yaml_files_are_skipped(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="gen_orb_mcp.parser.parser"):
            orb = OrbParser.parse_unpacked(UNPACKED)
        assert "README" not in orb.commands
        assert "README.md" in caplog.text

    def test_yaml_suffix_and_order(self, tmp_path):
        (tmp_path / ROOT_DOCUMENT).write_text("version: 2.1\n")
        jobs = tmp_path / "jobs"
        jobs.mkdir()
        (jobs / "zeta.yaml").write_text("steps: [checkout]\n")
        (jobs / "alpha.yml").write_text("steps: [checkout]\n")
        (jobs / "nested").mkdir()
        assert list(OrbParser.parse_unpacked(tmp_path).jobs) == ["alpha", "zeta"]

    def test_missing_root_document(self, tmp_path):
        with pytest.raises(MissingFileError) as e:
            OrbParser.parse_unpacked(tmp_path)
        assert e.value.path == tmp_path / ROOT_DOCUMENT

    def test_error_in_entity_file_names_the_file(self, tmp_path):
        (tmp_path / ROOT_DOCUMENT).write_text("version: 2.1\n")
        (tmp_path / "executors").mkdir()
        bad = tmp_path / "executors" / "broken.yml"
        bad.write_text("docker: not-a-list\n")
        with pytest.raises(YamlParseError) as e:
            OrbParser.parse_unpacked(tmp_path)
        assert e.value.path == bad


class TestRoundTrip:
    """Serializing a parsed orb and parsing it again gives the same definition"""

    @pytest.mark.parametrize("path", [PACKED, UNPACKED, TEST_DATA / "empty_orb.yml"])
    def test_round_trip(self, path):
        orb = OrbParser.parse(path)
        text = yaml.safe_dump(orb.to_dict(), sort_keys=False)
        assert OrbParser.parse_packed_content(text, "roundtrip.yml") == orb


if __name__ == "__main__":
    pytest.main([__file__])
