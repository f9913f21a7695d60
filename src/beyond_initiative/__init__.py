"""
Beyond to Improved Initiative - converts D&D Beyond characters into Improved Initiative stat blocks.
"""

from .base import ConversionError, ConversionResult, FetchError, MissingContextError, SchemaValidationError
from .converter import convert, convert_character_data
from .models import StatBlock
from .sources.dndbeyond import BeyondCharacter, parse_character

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("beyond-initiative")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "convert",
    "convert_character_data",
    "parse_character",
    "BeyondCharacter",
    "StatBlock",
    "ConversionResult",
    "ConversionError",
    "FetchError",
    "MissingContextError",
    "SchemaValidationError",
]
