"""
Beyond to Improved Initiative MCP Server
Fetches D&D Beyond characters and converts them into Improved Initiative stat blocks.
"""

import logging
import os
from typing import Annotated

from dotenv import load_dotenv
from fastmcp import FastMCP
from pydantic import Field

from .base import ConversionError, FetchError
from .converter import convert_character_data
from .messaging import handle_extension_message, character_id_from_page_url, resolve_character_id
from .sources.dndbeyond.fetcher import extract_character_id, fetch_character, read_character_file
from .sources.dndbeyond.schema import DDB_AUTH_COOKIE_DOMAIN, DDB_AUTH_COOKIE_NAME

logger = logging.getLogger("beyond-initiative")

logging.basicConfig(
    level=logging.DEBUG,
    )

if not load_dotenv():
    logger.warning("❌ .env file invalid or not found! Falling back to the process environment.")

default_auth_token = os.getenv("BEYOND_COBALT_TOKEN") or None
results_base_url = os.getenv("BEYOND_RESULTS_URL", "index.html")
http_timeout = float(os.getenv("BEYOND_HTTP_TIMEOUT", "10"))
logger.debug(f"🔑 Session token configured: {default_auth_token is not None}")

mcp = FastMCP(
    name="beyond-initiative"
)

AUTH_TOKEN_HELP = (
    f"Value of the `{DDB_AUTH_COOKIE_NAME}` cookie on {DDB_AUTH_COOKIE_DOMAIN}. "
    "Needed for private characters; defaults to BEYOND_COBALT_TOKEN."
)


# ----------------------------------------------------------------------
# Tools
# ----------------------------------------------------------------------

async def _convert_remote(character: str, auth_token: str | None) -> str:
    character_id = extract_character_id(character)
    data = await fetch_character(
        str(character_id),
        auth_token=auth_token or default_auth_token,
        timeout=http_timeout,
    )
    return convert_character_data(data, character_id=character_id).format()


def _file_character_id(data: dict) -> int | None:
    """The export's own ``id``, or None when it is absent or not numeric."""
    raw_id = data.get("id")
    if raw_id is None or isinstance(raw_id, bool):
        return None
    try:
        return extract_character_id(str(raw_id))
    except FetchError:
        logger.warning(f"Ignoring non-numeric character id in export: {raw_id!r}")
        return None


@mcp.tool
async def convert_beyond_character(
    character: Annotated[str, Field(description="D&D Beyond character URL or numeric ID")],
    auth_token: Annotated[str | None, Field(description=AUTH_TOKEN_HELP)] = None,
) -> str:
    """Fetch a D&D Beyond character and convert it into an Improved Initiative stat block.

    Returns both the validated D&D Beyond data and the Improved Initiative JSON,
    each in its own block so either can be copied.
    """
    try:
        return await _convert_remote(character, auth_token)
    except ConversionError as e:
        return f"Error: {e}"


@mcp.tool
def convert_beyond_file(
    file_path: Annotated[str, Field(description="Path to a D&D Beyond character JSON export")],
) -> str:
    """Convert a locally saved D&D Beyond character JSON into an Improved Initiative stat block."""
    try:
        data = read_character_file(file_path)
        return convert_character_data(data, character_id=_file_character_id(data)).format()
    except ConversionError as e:
        return f"Error: {e}"


@mcp.tool
def add_character(
    page_url: Annotated[str, Field(description="URL of the D&D Beyond character sheet")],
) -> str:
    """Get the results view link for a character, as the "Add to Improved Initiative" button does."""
    payload = {
        "message": "addCharacter",
        "data": {"characterId": character_id_from_page_url(page_url)},
    }
    try:
        return handle_extension_message(payload, results_base_url)
    except ConversionError as e:
        return f"Error: {e}"


@mcp.tool
async def open_results_view(
    url: Annotated[str, Field(description="Results view URL or query string, e.g. `index.html?id=12345678`")],
    auth_token: Annotated[str | None, Field(description=AUTH_TOKEN_HELP)] = None,
) -> str:
    """Show the conversion for the character named in a results view URL."""
    try:
        character_id = resolve_character_id(url)
        return await _convert_remote(character_id, auth_token)
    except ConversionError as e:
        return f"Error: {e}"


logger.debug("✅ All tools successfully registered. Beyond to Improved Initiative server running! 🎲")

def main() -> None:
    """Main entry point for the conversion MCP server."""
    mcp.run()

if __name__ == "__main__":
    main()
