"""
Orb parser module.

Parses packed (single file) and unpacked (directory) CircleCI orb
definitions into typed, immutable nodes.
"""

from __future__ import annotations

from .errors import (
    DirectoryReadError,
    FileReadError,
    InvalidStructureError,
    MissingFileError,
    ParseError,
    YamlParseError,
)
from .nodes import (
    Command,
    CommandInvocation,
    DockerImageFull,
    Executor,
    ExecutorConfig,
    ExecutorName,
    ExecutorWithParams,
    Job,
    OrbDefinition,
    Parameter,
    ParameterType,
    RunConfig,
    RunStep,
    SimpleStep,
    Step,
)
from .parser import ROOT_DOCUMENT, Layout, OrbParser, detect_layout

__all__ = [
    "OrbParser",
    "Layout",
    "detect_layout",
    "ROOT_DOCUMENT",
    "OrbDefinition",
    "Command",
    "Job",
    "Executor",
    "ExecutorConfig",
    "ExecutorName",
    "ExecutorWithParams",
    "DockerImageFull",
    "Parameter",
    "ParameterType",
    "Step",
    "SimpleStep",
    "RunStep",
    "RunConfig",
    "CommandInvocation",
    "ParseError",
    "FileReadError",
    "MissingFileError",
    "YamlParseError",
    "InvalidStructureError",
    "DirectoryReadError",
]
