"""
MCP server generator module.

Turns a parsed orb definition into a Python MCP server project exposing the
orb's commands, jobs and executors as resources.
"""

from __future__ import annotations

from .config import FormatterConfig, GeneratorConfig
from .context import CommandContext, ExecutorContext, GeneratorContext, JobContext, ParameterContext
from .errors import (
    DirectoryCreateError,
    FileReadBackError,
    FileWriteError,
    GeneratorError,
    InvalidOrbNameError,
    SerializationError,
    TemplateRegisterError,
    TemplateRenderError,
    UnknownTemplateError,
)
from .formatter import ExternalFormatter
from .generator import CodeGenerator, GeneratedServer, validate_orb_name
from .templates import TemplateRenderer

__all__ = [
    "CodeGenerator",
    "GeneratedServer",
    "validate_orb_name",
    "GeneratorConfig",
    "FormatterConfig",
    "GeneratorContext",
    "CommandContext",
    "JobContext",
    "ExecutorContext",
    "ParameterContext",
    "TemplateRenderer",
    "ExternalFormatter",
    "GeneratorError",
    "TemplateRegisterError",
    "TemplateRenderError",
    "UnknownTemplateError",
    "SerializationError",
    "FileWriteError",
    "FileReadBackError",
    "DirectoryCreateError",
    "InvalidOrbNameError",
]
