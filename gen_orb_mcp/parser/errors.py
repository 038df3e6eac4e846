"""
Errors raised while parsing orb definitions.

Every error carries the path of the offending file or directory so callers
can report it without further context.
"""

from __future__ import annotations

from pathlib import Path


class ParseError(Exception):
    """Base class for orb parsing failures."""

    def __init__(self, message: str, path: Path | str | None = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class FileReadError(ParseError):
    """Raised when a file exists but cannot be read."""

    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"failed to read file '{path}': {reason}", path)


class MissingFileError(ParseError):
    """Raised when the root document of an unpacked orb is missing.

    Kept separate from FileReadError so tooling can hint that the path may
    not point at an unpacked orb.
    """

    def __init__(self, path: Path | str):
        super().__init__(f"missing required file: {path}", path)


class YamlParseError(ParseError):
    """Raised for YAML syntax errors and documents that do not match the orb schema."""

    def __init__(self, path: Path | str, reason: str):
        self.reason = reason
        super().__init__(f"failed to parse YAML in '{path}': {reason}", path)


class InvalidStructureError(ParseError):
    """Raised when the orb layout itself is unusable (e.g. an undecodable file name)."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(f"invalid orb structure: {message}", path)


class DirectoryReadError(ParseError):
    """Raised when an entity directory cannot be listed."""

    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"failed to read directory '{path}': {reason}", path)
