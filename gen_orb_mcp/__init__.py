"""CircleCI orb to MCP server generator

Parses CircleCI orb definitions (packed or unpacked) and generates a Python
MCP server project that exposes the orb's commands, jobs and executors as
resources for AI coding assistants.
"""

__version__ = "0.1.0"

from .generator import CodeGenerator, GeneratedServer, GeneratorConfig
from .parser import OrbDefinition, OrbParser

__all__ = [
    "OrbParser",
    "OrbDefinition",
    "CodeGenerator",
    "GeneratedServer",
    "GeneratorConfig",
]
