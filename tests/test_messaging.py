"""Tests for the browser-extension message contract."""

import pytest

from beyond_initiative.base import MissingContextError
from beyond_initiative.messaging import (
    character_id_from_page_url,
    handle_extension_message,
    resolve_character_id,
    results_url,
)


class TestHandleExtensionMessage:
    """Test turning addCharacter messages into results URLs."""

    def test_add_character(self):
        payload = {"message": "addCharacter", "data": {"characterId": "12345678"}}

        assert handle_extension_message(payload) == "index.html?id=12345678"

    def test_numeric_character_id(self):
        payload = {"message": "addCharacter", "data": {"characterId": 42}}

        assert handle_extension_message(payload, "chrome-extension://abc/index.html") == (
            "chrome-extension://abc/index.html?id=42"
        )

    def test_unknown_message(self):
        payload = {"message": "removeCharacter", "data": {"characterId": "1"}}

        with pytest.raises(MissingContextError):
            handle_extension_message(payload)

    def test_missing_character_id(self):
        with pytest.raises(MissingContextError):
            handle_extension_message({"message": "addCharacter", "data": {}})


class TestResolveCharacterId:
    """Test reading the character id back from the results view."""

    @pytest.mark.parametrize(
        "url",
        [
            "index.html?id=12345678",
            "chrome-extension://abc/index.html?id=12345678&tab=2",
            "?id=12345678",
            "id=12345678",
        ],
    )
    def test_resolve(self, url):
        assert resolve_character_id(url) == "12345678"

    @pytest.mark.parametrize("url", ["index.html", "index.html?id=", "?tab=2", ""])
    def test_missing_id(self, url):
        with pytest.raises(MissingContextError) as exc_info:
            resolve_character_id(url)

        assert "Add to Improved Initiative" in str(exc_info.value)

    def test_round_trip(self):
        assert resolve_character_id(results_url("777")) == "777"


class TestCharacterIdFromPageUrl:
    """Test the content script's id extraction."""

    def test_sheet_url(self):
        assert character_id_from_page_url("https://www.dndbeyond.com/characters/12345678") == "12345678"

    def test_trailing_slash(self):
        assert character_id_from_page_url("https://www.dndbeyond.com/characters/12345678/") == "12345678"
