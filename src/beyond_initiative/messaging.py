"""
Browser-extension message contract.

The content script on a D&D Beyond character page sends a single
``addCharacter`` message; the background worker answers by opening the
results view with the character id in its query string. This module holds
both halves of that contract so the tool server can accept the same
inputs the extension produces.
"""

from __future__ import annotations

import logging
from typing import Literal
from urllib.parse import parse_qs, urlencode, urlsplit

from pydantic import BaseModel, Field, ValidationError

from .base import MissingContextError

logger = logging.getLogger("beyond-initiative.messaging")

ADD_CHARACTER = "addCharacter"

MISSING_ID_MESSAGE = (
    'You need to open this page by clicking "Add to Improved Initiative" '
    'in the "Manage" drawer of a character in Beyond'
)


class AddCharacterData(BaseModel):
    character_id: str | int = Field(alias="characterId")


class AddCharacterMessage(BaseModel):
    """Message sent by the content script when the button is clicked."""
    message: Literal["addCharacter"] = ADD_CHARACTER
    data: AddCharacterData


def character_id_from_page_url(page_url: str) -> str:
    """The content script takes the last path segment of the sheet URL."""
    return page_url.rstrip("/").split("/")[-1]


def results_url(character_id: str | int, base_url: str = "index.html") -> str:
    """URL of the results view for a character."""
    return f"{base_url}?{urlencode({'id': character_id})}"


def handle_extension_message(payload: dict, base_url: str = "index.html") -> str:
    """Turn an ``addCharacter`` message into the results view URL to open.

    Args:
        payload: The raw message, ``{"message": "addCharacter", "data": {"characterId": ...}}``.
        base_url: Location of the results view.

    Returns:
        The URL the host should open in a new tab.

    Raises:
        MissingContextError: If the payload is not a valid ``addCharacter`` message.
    """
    try:
        message = AddCharacterMessage.model_validate(payload)
    except ValidationError:
        raise MissingContextError(MISSING_ID_MESSAGE) from None

    url = results_url(message.data.character_id, base_url)
    logger.debug(f"Opening results view: {url}")
    return url


def resolve_character_id(url_or_query: str) -> str:
    """Read the character id back out of a results view URL or query string.

    Raises:
        MissingContextError: If there is no ``id`` parameter.
    """
    query = urlsplit(url_or_query).query if "?" in url_or_query else url_or_query.lstrip("?")
    values = parse_qs(query).get("id")
    if not values or not values[0].strip():
        raise MissingContextError(MISSING_ID_MESSAGE)
    return values[0].strip()
