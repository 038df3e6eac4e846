"""
Orb parser: reads packed or unpacked orb layouts from disk.

A packed orb is a single YAML document. An unpacked orb is a directory
laid out like ``circleci orb pack`` expects::

    orb_dir/
    ├── @orb.yml        # root metadata
    ├── commands/*.yml
    ├── jobs/*.yml
    └── executors/*.yml
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .errors import DirectoryReadError, FileReadError, InvalidStructureError, MissingFileError, YamlParseError
from .nodes import OrbDefinition
from .shapes import ENTITY_BUILDERS, ShapeMismatch, build_definition

logger = logging.getLogger(__name__)

ROOT_DOCUMENT = "@orb.yml"
ENTITY_DIRECTORIES = ("commands", "jobs", "executors")
YAML_SUFFIXES = {".yml", ".yaml"}


class OrbLoader(yaml.SafeLoader):
    """Safe YAML loader that keeps unquoted dates and timestamps as strings."""

    pass


OrbLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class Layout(str, Enum):
    PACKED = "packed"
    UNPACKED = "unpacked"


def detect_layout(path: Path) -> Layout:
    """Classify a path by its shape only (directory flag and file name)."""
    if path.is_dir() or path.name == ROOT_DOCUMENT:
        return Layout.UNPACKED
    return Layout.PACKED


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, str(e)) from e


def _load_yaml(content: str, path: Path) -> Any:
    try:
        return yaml.load(content, Loader=OrbLoader)
    except yaml.YAMLError as e:
        raise YamlParseError(path, str(e)) from e


class OrbParser:
    """Parses CircleCI orb definitions in packed or unpacked form."""

    @classmethod
    def parse(cls, path: Path | str) -> OrbDefinition:
        """
        Auto-detect the layout and parse an orb definition.

        A directory or a path to ``@orb.yml`` is parsed as an unpacked orb,
        anything else as a packed single-file orb.

        Args:
            path: Orb directory, ``@orb.yml`` path or packed orb file

        Returns:
            The parsed OrbDefinition
        """
        path = Path(path)
        if detect_layout(path) is Layout.UNPACKED:
            return cls.parse_unpacked(path if path.is_dir() else path.parent)
        return cls.parse_packed(path)

    @classmethod
    def parse_unpacked(cls, orb_dir: Path | str) -> OrbDefinition:
        """
        Parse an unpacked orb directory.

        Entity directories that exist replace the matching inline map of
        ``@orb.yml``, even when they are empty.
        """
        orb_dir = Path(orb_dir)
        root_path = orb_dir / ROOT_DOCUMENT

        try:
            content = root_path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise MissingFileError(root_path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(root_path, str(e)) from e

        orb = cls.parse_packed_content(content, root_path)

        replacements: dict[str, dict[str, Any]] = {}
        for category in ENTITY_DIRECTORIES:
            category_dir = orb_dir / category
            if category_dir.is_dir():
                replacements[category] = cls._parse_directory(category_dir, category)

        if not replacements:
            return orb
        return OrbDefinition(
            version=orb.version,
            description=orb.description,
            display=orb.display,
            orbs=orb.orbs,
            commands=replacements.get("commands", orb.commands),
            jobs=replacements.get("jobs", orb.jobs),
            executors=replacements.get("executors", orb.executors),
        )

    @classmethod
    def parse_packed(cls, path: Path | str) -> OrbDefinition:
        """Parse a packed orb from a single YAML file."""
        path = Path(path)
        return cls.parse_packed_content(_read_text(path), path)

    @classmethod
    def parse_packed_content(cls, content: str, source_path: Path | str) -> OrbDefinition:
        """Parse a packed orb from YAML text. ``source_path`` is used in errors."""
        source_path = Path(source_path)
        data = _load_yaml(content, source_path)
        try:
            return build_definition(data)
        except ShapeMismatch as e:
            raise YamlParseError(source_path, str(e)) from e

    @staticmethod
    def _parse_directory(directory: Path, category: str) -> dict[str, Any]:
        """Parse every YAML file of an entity directory, keyed by file stem."""
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise DirectoryReadError(directory, str(e)) from e

        builder = ENTITY_BUILDERS[category]
        items: dict[str, Any] = {}
        for path in entries:
            if path.is_dir() or path.suffix not in YAML_SUFFIXES:
                logger.debug("Skipping %s", path)
                continue

            name = path.stem
            try:
                name.encode("utf-8")
            except UnicodeEncodeError as e:
                raise InvalidStructureError(f"invalid filename: {path}", path) from e

            data = _load_yaml(_read_text(path), path)
            try:
                items[name] = builder(data, name)
            except ShapeMismatch as e:
                raise YamlParseError(path, str(e)) from e

        logger.debug("Parsed %d %s from %s", len(items), category, directory)
        return items
