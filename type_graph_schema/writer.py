"""
Atomic writing of generated schema files.

The schema is written to a temporary file next to the target and then
renamed over it, so an interrupted run never leaves a half-written schema.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from .errors import SchemaGenerationError

logger = logging.getLogger(__name__)


class SchemaWriter:
    """Writes schema text to disk, optionally checking it parses as JSON first."""

    def __init__(self, overwrite: bool = True):
        """
        Args:
            overwrite: Whether an existing target file may be replaced
        """
        self.overwrite = overwrite

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """
        Write ``content`` to ``path`` atomically.

        Args:
            path: Target file path
            content: JSON text to write
            validate: Whether to check that ``content`` is valid JSON

        Raises:
            FileExistsError: If the target exists and overwriting is disabled
            SchemaGenerationError: If validation fails
            OSError: If file operations fail
        """
        if not self.overwrite and path.exists():
            raise FileExistsError(f"Output file already exists: {path}")

        if validate:
            try:
                json.loads(content)
            except json.JSONDecodeError as e:
                raise SchemaGenerationError(f"Generated schema is not valid JSON: {e}") from e

        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures the rename stays on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
        temp_path = Path(temp_path_str)
        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
                if not content.endswith("\n"):
                    f.write("\n")
            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

        logger.info("Wrote schema to %s", path)
