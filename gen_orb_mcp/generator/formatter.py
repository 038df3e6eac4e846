"""
External formatter for generated Python files.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .config import FormatterConfig

logger = logging.getLogger(__name__)


class ExternalFormatter:
    """Runs a formatter command (``ruff format`` by default) on files in place."""

    def __init__(self, config: FormatterConfig | None = None):
        self.config = config or FormatterConfig()
        self._available: bool | None = None

    def format_file(self, path: Path) -> bool:
        """
        Format one file in place.

        Failures never raise, they are logged as warnings. A missing tool
        is reported once.

        Args:
            path: File to format

        Returns:
            True if the file was formatted
        """
        if self._available is False or not self.config.command:
            return False

        cmd = [*self.config.command, str(path)]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            self._available = False
            logger.warning("Formatter %s not found, skipping formatting", self.config.command[0])
            return False
        except OSError as e:
            logger.warning("Failed to run formatter on %s: %s", path, e)
            return False

        self._available = True
        if result.returncode != 0:
            logger.warning("Formatter failed on %s: %s", path, result.stderr.strip())
            return False
        return True

    def format_files(self, paths: list[Path]) -> list[Path]:
        """Format the Python files among ``paths`` and return the ones formatted."""
        formatted = []
        for path in paths:
            if path.suffix == ".py" and self.format_file(path):
                formatted.append(path)
        return formatted
