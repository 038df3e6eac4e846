"""
CLI utilities: orb name derivation and output version policy.
"""

from pathlib import Path

from .parser import ROOT_DOCUMENT

DEFAULT_VERSION = "0.1.0"

# Manifest whose presence marks an existing generated project
MANIFEST = "pyproject.toml"


class VersionResolutionError(Exception):
    """Raised when no version can be chosen for the generated project."""

    pass


class VersionRequiredError(VersionResolutionError):
    def __init__(self, output: Path):
        self.output = output
        super().__init__(
            f"A generated project already exists in '{output}'. "
            "Pass --version to regenerate it with an explicit version."
        )


class ForceRequiredError(VersionResolutionError):
    def __init__(self, output: Path, version: str):
        self.output = output
        self.version = version
        super().__init__(
            f"A generated project already exists in '{output}'. "
            f"Pass --force to overwrite it with version {version}."
        )


def resolve_version(output: Path, version: str | None, force: bool) -> str:
    """
    Choose the version of the generated project.

    A fresh output directory takes the given version or DEFAULT_VERSION.
    Overwriting an existing project requires both an explicit version and
    ``force``.

    Args:
        output: Output directory of the generated project
        version: Version given on the command line, if any
        force: Whether overwriting an existing project is allowed

    Returns:
        The version to generate

    Raises:
        VersionRequiredError: If a project exists and no version was given
        ForceRequiredError: If a project exists and force was not given
    """
    if not (Path(output) / MANIFEST).exists():
        return version or DEFAULT_VERSION
    if version is None:
        raise VersionRequiredError(output)
    if not force:
        raise ForceRequiredError(output, version)
    return version


def derive_orb_name(orb_path: Path) -> str:
    """
    Orb name from its path: the directory name for ``@orb.yml`` or an orb
    directory, the file stem otherwise.

    Examples:
        "orbs/toolkit/@orb.yml" -> "toolkit"
        "orbs/toolkit.yml" -> "toolkit"
    """
    orb_path = Path(orb_path)
    if orb_path.name == ROOT_DOCUMENT:
        name = orb_path.resolve().parent.name
    elif orb_path.is_dir():
        name = orb_path.resolve().name
    else:
        name = orb_path.stem
    return name or "orb"
