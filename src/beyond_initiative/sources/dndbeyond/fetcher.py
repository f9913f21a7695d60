"""
Fetch and read D&D Beyond character data.

This module handles both online fetching (via the character-service API,
authenticated with the user's session token) and local file reading of
D&D Beyond character JSON exports. Neither validates the full schema;
that is left to ``parse_character``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx

from ...base import FetchError
from .schema import DDB_API_BASE_URL, DDB_API_PARAMS, DDB_CHARACTER_URL_PATTERN

logger = logging.getLogger("beyond-initiative.dndbeyond")

DEFAULT_TIMEOUT = 10.0


def extract_character_id(url_or_id: str) -> int:
    """
    Extract character ID from a D&D Beyond URL or bare numeric ID.

    Accepts:
    - Full URL: https://www.dndbeyond.com/characters/12345678
    - Builder URL: https://www.dndbeyond.com/characters/12345678/builder
    - Bare ID: "12345678"

    Args:
        url_or_id: D&D Beyond character URL or numeric ID string

    Returns:
        Character ID as integer

    Raises:
        FetchError: If the input doesn't match expected format
    """
    match = DDB_CHARACTER_URL_PATTERN.search(url_or_id)
    if match:
        return int(match.group(1))

    try:
        return int(url_or_id.strip())
    except ValueError:
        raise FetchError(
            f"Invalid D&D Beyond character URL or ID: '{url_or_id}'. "
            "Expected format: https://www.dndbeyond.com/characters/12345678 or just the numeric ID."
        ) from None


def _unwrap(data: object) -> object:
    """Strip the ``{"data": {...}}`` envelope the API wraps characters in."""
    if isinstance(data, dict) and "data" in data:
        return data["data"]
    return data


async def fetch_character(
    url_or_id: str,
    auth_token: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> dict:
    """
    Fetch character JSON from the D&D Beyond character service.

    Args:
        url_or_id: D&D Beyond character URL or numeric ID
        auth_token: Value of the ``cobalt-token`` session cookie. Without it
            only public characters can be fetched.
        timeout: Request timeout in seconds

    Returns:
        Raw character data as dictionary, envelope removed

    Raises:
        FetchError: If fetch fails, character not found, or character is private
    """
    character_id = extract_character_id(url_or_id)
    api_url = f"{DDB_API_BASE_URL}/{character_id}"
    headers = {"Authorization": f"Bearer {auth_token}"} if auth_token else {}

    logger.debug(f"🌐 Fetching character {character_id}")
    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                api_url, params=DDB_API_PARAMS, headers=headers, timeout=timeout
            )

            if response.status_code == 404:
                raise FetchError(
                    f"Character not found. Check the ID or URL: {character_id}"
                )
            elif response.status_code in (401, 403):
                raise FetchError(
                    "Character is private. Log in to D&D Beyond and retry, "
                    "set it to Public, or use file import."
                )

            response.raise_for_status()

            data = response.json()

    except httpx.TimeoutException:
        raise FetchError(
            "D&D Beyond is not responding. Try again later or use file import."
        ) from None
    except httpx.HTTPStatusError as e:
        raise FetchError(
            f"D&D Beyond returned HTTP {e.response.status_code}: {e.response.reason_phrase}"
        ) from None
    except httpx.RequestError as e:
        raise FetchError(
            f"Failed to connect to D&D Beyond: {e}"
        ) from None
    except json.JSONDecodeError:
        raise FetchError("Invalid response from D&D Beyond: body is not JSON") from None

    data = _unwrap(data)
    if not isinstance(data, dict):
        raise FetchError("Invalid response from D&D Beyond: expected JSON object")

    return data


def read_character_file(file_path: str) -> dict:
    """
    Read a local D&D Beyond character JSON file.

    Args:
        file_path: Path to the JSON file

    Returns:
        Raw character data as dictionary, envelope removed

    Raises:
        FetchError: If file not found, invalid JSON, or not a JSON object
    """
    path = Path(file_path)

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FetchError(
            f"Character file not found: {file_path}"
        ) from None
    except json.JSONDecodeError as e:
        raise FetchError(
            f"Invalid JSON in character file: {e}"
        ) from None
    except OSError as e:
        raise FetchError(
            f"Failed to read character file: {e}"
        ) from None

    data = _unwrap(data)
    if not isinstance(data, dict):
        raise FetchError(
            f"Invalid character file format: expected JSON object, got {type(data).__name__}"
        )

    return data
