"""
Configuration for the MCP server generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FormatterConfig:
    """Configuration for the post-generation formatter."""

    # Whether to run the formatter after writing files
    enabled: bool = False

    # Command to run, the file path is appended as last argument
    command: list[str] = field(default_factory=lambda: ["ruff", "format"])

    @staticmethod
    def from_dict(d: dict) -> FormatterConfig:
        config = FormatterConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        return {"enabled": self.enabled, "command": list(self.command)}


@dataclass
class GeneratorConfig:
    """Configuration options for server generation."""

    # Scheme of the resource URIs, e.g. orb://commands/greet
    uri_scheme: str = "orb"

    # Appended to the snake_case orb name to form the package name
    package_suffix: str = "_mcp"

    # Appended to the PascalCase orb name to form the catalogue class name
    class_suffix: str = "Mcp"

    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary. Unknown keys are ignored."""
        config = GeneratorConfig()
        for k, v in d.items():
            if k == "formatter":
                config.formatter = FormatterConfig.from_dict(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        return {
            "uri_scheme": self.uri_scheme,
            "package_suffix": self.package_suffix,
            "class_suffix": self.class_suffix,
            "formatter": self.formatter.to_dict(),
        }
