"""
Pytest configuration and fixtures for beyond-initiative tests.
"""

import json
import sys
from pathlib import Path

import pytest

# Add src directory to Python path to allow importing beyond_initiative
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from ddb_builders import raw_character  # noqa: E402

FIXTURES = Path(__file__).parent / "fixtures"


# Configure anyio to only use asyncio (not trio)
@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def ddb_sample():
    """Load the sample DDB character JSON (with its data envelope)."""
    with open(FIXTURES / "ddb_character_sample.json") as f:
        return json.load(f)


@pytest.fixture
def make_character():
    """Factory fixture returning a validated BeyondCharacter."""
    from beyond_initiative.sources.dndbeyond.models import parse_character

    def _make(**kwargs):
        return parse_character(raw_character(**kwargs))

    return _make
