"""
Output assembler: renders the templates into an installable server project.

Layout of a generated project::

    <output>/
    ├── pyproject.toml
    └── src/<package>/
        ├── __init__.py    # resource catalogue and create_server()
        └── __main__.py    # stdio entry point
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..parser.nodes import OrbDefinition
from .config import GeneratorConfig
from .context import GeneratorContext
from .errors import DirectoryCreateError, FileReadBackError, FileWriteError, InvalidOrbNameError
from .formatter import ExternalFormatter
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)


def validate_orb_name(name: str) -> None:
    """
    Check that an orb name can seed a Python package and class name.

    Raises:
        InvalidOrbNameError: If the name is empty, contains characters other
            than ASCII letters, digits, '-' and '_', or does not start with a letter
    """
    if not name:
        raise InvalidOrbNameError(name, "name cannot be empty")
    for c in name:
        if not ((c.isascii() and c.isalnum()) or c in "-_"):
            raise InvalidOrbNameError(name, f"invalid character '{c}'")
    if not name[0].isalpha():
        raise InvalidOrbNameError(name, "name must start with a letter")


@dataclass
class GeneratedServer:
    """Rendered files of a server project, keyed by path relative to the output dir."""

    files: dict[Path, str]
    package_name: str
    orb_name: str
    formatter: ExternalFormatter = field(default_factory=ExternalFormatter, repr=False, compare=False)

    def write_to(self, output_dir: Path | str) -> list[Path]:
        """
        Write every file under ``output_dir``, creating directories as needed.

        Files written before a failure are left in place.

        Returns:
            The written paths

        Raises:
            DirectoryCreateError: If a parent directory cannot be created
            FileWriteError: If a file cannot be written
        """
        output_dir = Path(output_dir)
        written = []
        for relative, content in self.files.items():
            path = output_dir / relative
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DirectoryCreateError(path.parent, str(e)) from e
            try:
                path.write_text(content, encoding="utf-8")
            except OSError as e:
                raise FileWriteError(path, str(e)) from e
            logger.debug("Wrote %s", path)
            written.append(path)
        return written

    def format(self, output_dir: Path | str) -> list[Path]:
        """
        Write the files, run the formatter on the Python ones and read the
        formatted text back into ``files``.

        Returns:
            The paths the formatter changed or accepted
        """
        output_dir = Path(output_dir)
        self.write_to(output_dir)
        formatted = self.formatter.format_files([output_dir / relative for relative in self.files])
        for path in formatted:
            try:
                self.files[path.relative_to(output_dir)] = path.read_text(encoding="utf-8")
            except OSError as e:
                raise FileReadBackError(path, str(e)) from e
        return formatted


class CodeGenerator:
    """Generates an MCP server project from a parsed orb definition."""

    def __init__(self, config: GeneratorConfig | None = None):
        self.config = config or GeneratorConfig()
        self.renderer = TemplateRenderer()

    def generate(self, orb: OrbDefinition, orb_name: str, version: str) -> GeneratedServer:
        """
        Render the server project for ``orb``.

        Args:
            orb: The parsed orb definition
            orb_name: Orb name, seeds the package and class names
            version: Version of the generated package

        Returns:
            GeneratedServer with the rendered files

        Raises:
            InvalidOrbNameError: If ``orb_name`` is not usable
            GeneratorError: If building the context or rendering fails
        """
        validate_orb_name(orb_name)
        context = GeneratorContext.from_orb(orb, orb_name, version, self.config)
        package_dir = Path("src") / context.package_name

        files = {
            package_dir / "__main__.py": self.renderer.render("__main__.py", context),
            package_dir / "__init__.py": self.renderer.render("__init__.py", context),
            Path("pyproject.toml"): self.renderer.render("pyproject.toml", context),
        }
        logger.info(
            "Generated %s: %d commands, %d jobs, %d executors",
            context.package_name,
            len(context.commands),
            len(context.jobs),
            len(context.executors),
        )
        return GeneratedServer(
            files=files,
            package_name=context.package_name,
            orb_name=orb_name,
            formatter=ExternalFormatter(self.config.formatter),
        )

    def generate_formatted(
        self, orb: OrbDefinition, orb_name: str, version: str, output_dir: Path | str
    ) -> GeneratedServer:
        """Generate, write to ``output_dir`` and format in one go."""
        server = self.generate(orb, orb_name, version)
        server.format(output_dir)
        return server
