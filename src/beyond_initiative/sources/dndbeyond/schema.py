"""
D&D Beyond JSON schema constants and lookup tables.

These map DDB's modifier kinds and field names to Improved Initiative
equivalents. Based on the v5 character-service endpoint.
"""

import re

# ---------------------------------------------------------------------------
# API endpoint
# ---------------------------------------------------------------------------

DDB_API_BASE_URL = "https://character-service.dndbeyond.com/character/v5/character"

# Query parameters sent with every character request
DDB_API_PARAMS: dict[str, str] = {"includeCustomItems": "true"}

# Session cookie holding the bearer token, scoped to the DDB domain
DDB_AUTH_COOKIE_NAME = "cobalt-token"
DDB_AUTH_COOKIE_DOMAIN = ".dndbeyond.com"

# ---------------------------------------------------------------------------
# URL parsing
# ---------------------------------------------------------------------------

# Matches: https://www.dndbeyond.com/characters/12345678[/anything]
DDB_CHARACTER_URL_PATTERN = re.compile(
    r"(?:https?://)?(?:www\.)?dndbeyond\.com/characters/(\d+)"
)

# ---------------------------------------------------------------------------
# Ability scores
# ---------------------------------------------------------------------------

# Canonical order of DDB's positional "stats" array
STAT_KEYS: tuple[str, ...] = ("Str", "Dex", "Con", "Int", "Wis", "Cha")

# ---------------------------------------------------------------------------
# Skills → governing ability
# ---------------------------------------------------------------------------

SKILL_ABILITIES: dict[str, str] = {
    "Acrobatics": "Dex",
    "Animal Handling": "Wis",
    "Arcana": "Int",
    "Athletics": "Str",
    "Deception": "Cha",
    "History": "Int",
    "Insight": "Wis",
    "Intimidation": "Cha",
    "Investigation": "Int",
    "Medicine": "Wis",
    "Nature": "Int",
    "Perception": "Wis",
    "Performance": "Cha",
    "Persuasion": "Cha",
    "Religion": "Int",
    "Sleight of Hand": "Dex",
    "Stealth": "Dex",
    "Survival": "Wis",
}

# Passive senses always emitted: (label, skill, fallback ability)
PASSIVE_SENSES: tuple[tuple[str, str, str], ...] = (
    ("perception", "Perception", "Wis"),
    ("investigation", "Investigation", "Int"),
    ("insight", "Insight", "Wis"),
)

# ---------------------------------------------------------------------------
# Modifier kinds used in DDB's modifiers sections
# ---------------------------------------------------------------------------

MODIFIER_TYPE_BONUS = "bonus"
MODIFIER_TYPE_PROFICIENCY = "proficiency"
MODIFIER_TYPE_EXPERTISE = "expertise"
MODIFIER_TYPE_SET = "set"
MODIFIER_TYPE_SET_BASE = "set-base"
MODIFIER_TYPE_LANGUAGE = "language"

# Processing priority: bonuses stack first, overrides land last.
# Kinds not listed here sort after every listed kind.
MODIFIER_PRIORITY: dict[str, int] = {
    MODIFIER_TYPE_BONUS: 0,
    MODIFIER_TYPE_PROFICIENCY: 1,
    MODIFIER_TYPE_EXPERTISE: 2,
    MODIFIER_TYPE_SET: 3,
}

# Proficiency multiplier per kind
PROFICIENCY_MULTIPLIER: dict[str, int] = {
    MODIFIER_TYPE_PROFICIENCY: 1,
    MODIFIER_TYPE_EXPERTISE: 2,
}

# Order in which modifier sections are merged before sorting
MODIFIER_SECTIONS: tuple[str, ...] = ("race", "background", "class", "item")

# Race modifier kinds → stat block defense list.
# "condition-immunity" is unconfirmed against live DDB data.
DEFENSE_MODIFIER_FIELDS: dict[str, str] = {
    "vulnerability": "damage_vulnerabilities",
    "resistance": "damage_resistances",
    "immunity": "damage_immunities",
    "condition-immunity": "condition_immunities",
}

# ---------------------------------------------------------------------------
# Modifier subTypes with special handling
# ---------------------------------------------------------------------------

SUBTYPE_UNARMORED_MOVEMENT = "unarmored-movement"
SUBTYPE_UNARMORED_ARMOR_CLASS = "unarmored-armor-class"
SUBTYPE_INITIATIVE = "initiative"
SUBTYPE_HIT_POINTS_PER_LEVEL = "hit-points-per-level"
SAVING_THROWS_SUFFIX = "saving-throws"

# bonusTypes tag meaning "add proficiency bonus"
BONUS_TYPE_PROFICIENCY = 1

# ---------------------------------------------------------------------------
# Armor
# ---------------------------------------------------------------------------

# armorTypeId values
ARMOR_TYPE_MEDIUM = 2
ARMOR_TYPE_HEAVY = 3

MEDIUM_ARMOR_DEX_CAP = 2
UNARMORED_AC = 10

# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------

# Output order, walk first; not the key order DDB sends
SPEED_KEYS: tuple[str, ...] = ("walk", "fly", "swim", "climb", "burrow")

FEET_TO_METERS = 0.3048
FEET_PER_SQUARE = 5
