from pathlib import Path

import pytest

from gen_orb_mcp.cli_utils import (
    DEFAULT_VERSION,
    ForceRequiredError,
    VersionRequiredError,
    derive_orb_name,
    resolve_version,
)


class TestResolveVersion:
    """Test cases for the output version policy"""

    def test_fresh_output_default(self, tmp_path):
        assert resolve_version(tmp_path / "dist", None, False) == DEFAULT_VERSION == "0.1.0"

    def test_fresh_output_explicit(self, tmp_path):
        assert resolve_version(tmp_path, "2.0.0", False) == "2.0.0"

    def test_existing_requires_version(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("")
        with pytest.raises(VersionRequiredError) as e:
            resolve_version(tmp_path, None, True)
        assert "already exists" in str(e.value)
        assert "--version" in str(e.value)

    def test_existing_requires_force(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("")
        with pytest.raises(ForceRequiredError, match="--force"):
            resolve_version(tmp_path, "2.0.0", False)

    def test_existing_with_version_and_force(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("")
        assert resolve_version(tmp_path, "2.0.0", True) == "2.0.0"


class TestDeriveOrbName:
    def test_root_document(self, tmp_path):
        assert derive_orb_name(tmp_path / "toolkit" / "@orb.yml") == "toolkit"

    def test_directory(self, tmp_path):
        orb_dir = tmp_path / "my-orb"
        orb_dir.mkdir()
        assert derive_orb_name(orb_dir) == "my-orb"

    def test_packed_file(self):
        assert derive_orb_name(Path("orbs/node-tools.yml")) == "node-tools"


if __name__ == "__main__":
    pytest.main([__file__])
