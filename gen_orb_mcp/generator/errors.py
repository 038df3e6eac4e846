"""
Errors raised while generating an MCP server.
"""

from __future__ import annotations

from pathlib import Path


class GeneratorError(Exception):
    """Base class for code generation failures."""

    pass


class TemplateRegisterError(GeneratorError):
    """Raised when a built-in template fails to compile.

    Templates ship with the package, so this is always a bug.
    """

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"failed to register template '{name}': {reason}")


class TemplateRenderError(GeneratorError):
    """Raised when rendering a template fails, e.g. on an undefined variable."""

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"failed to render template '{name}': {reason}")


class UnknownTemplateError(TemplateRenderError):
    def __init__(self, name: str):
        super().__init__(name, "no such template")


class SerializationError(GeneratorError):
    """Raised when template context data cannot be serialized to JSON."""

    def __init__(self, reason: str):
        super().__init__(f"failed to serialize context: {reason}")


class FileWriteError(GeneratorError):
    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"failed to write file '{path}': {reason}")


class DirectoryCreateError(GeneratorError):
    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"failed to create directory '{path}': {reason}")


class InvalidOrbNameError(GeneratorError):
    """Raised when an orb name cannot seed valid package and class names."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"invalid orb name '{name}': {reason}")


class FileReadBackError(GeneratorError):
    """Raised when a formatted file cannot be read back."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"failed to read formatted file '{path}': {reason}")
