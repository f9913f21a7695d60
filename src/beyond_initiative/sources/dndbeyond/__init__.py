"""
D&D Beyond character source: schema tables, record models and fetching.
"""

from .fetcher import extract_character_id, fetch_character, read_character_file
from .models import BeyondCharacter, parse_character

__all__ = [
    "extract_character_id",
    "fetch_character",
    "read_character_file",
    "BeyondCharacter",
    "parse_character",
]
