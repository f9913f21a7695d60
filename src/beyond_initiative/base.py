"""
Result model and exceptions for the conversion pipeline.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field


class ConversionError(Exception):
    """Raised when a character cannot be converted.

    Provides a user-facing message explaining what went wrong
    and, where possible, how to fix it.
    """


class SchemaValidationError(ConversionError):
    """Raised when fetched character data does not match the expected shape.

    Usually means D&D Beyond changed its service contract, or the
    character data was only partially loaded.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class MissingContextError(ConversionError):
    """Raised when the results view is opened without a character id."""


class FetchError(ConversionError):
    """Raised when character data cannot be downloaded or read."""


class ConversionResult(BaseModel):
    """Both sides of a conversion, ready to be displayed or copied."""

    source: dict[str, Any] = Field(description="The validated D&D Beyond data")
    target: dict[str, Any] = Field(description="The Improved Initiative stat block")
    character_id: int | None = Field(
        default=None,
        description="Original character ID on D&D Beyond, when known",
    )

    def source_json(self) -> str:
        """Validated source record as pretty-printed JSON."""
        return json.dumps(self.source, indent=2)

    def target_json(self) -> str:
        """Converted stat block as pretty-printed JSON."""
        return json.dumps(self.target, indent=2)

    def format(self) -> str:
        """Format both records as a readable text block.

        Returns:
            Multi-line string with one fenced JSON block per record,
            so each can be copied on its own.
        """
        lines: list[str] = []

        header = "Improved Initiative Conversion"
        if self.character_id is not None:
            header += f" - character {self.character_id}"
        lines.append(header)
        lines.append("")

        lines.append("Improved Initiative:")
        lines.append("```json")
        lines.append(self.target_json())
        lines.append("```")
        lines.append("")

        lines.append("Beyond Data (heavy):")
        lines.append("```json")
        lines.append(self.source_json())
        lines.append("```")

        return "\n".join(lines)
