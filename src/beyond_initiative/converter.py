"""
Conversion of a validated D&D Beyond character into an Improved Initiative
stat block.

``convert`` is a pure function: it copies the ability scores it needs,
runs a handful of derivation passes over that private state and returns a
new ``StatBlock``. It never performs I/O and does not raise for any
character accepted by ``parse_character``.

Known limitation: the proficiency bonus is derived from the level of the
first listed class rather than the total character level. For some
multiclass orderings this differs from the 5e rules; the behaviour is kept
so that output matches what D&D Beyond players already paste into
Improved Initiative.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from .base import ConversionResult
from .models import Abilities, NamedModifier, StatBlock, ValueWithNotes
from .sources.dndbeyond.models import BeyondCharacter, BeyondItem, BeyondModifier, parse_character
from .sources.dndbeyond.schema import (
    ARMOR_TYPE_HEAVY,
    ARMOR_TYPE_MEDIUM,
    BONUS_TYPE_PROFICIENCY,
    DEFENSE_MODIFIER_FIELDS,
    FEET_PER_SQUARE,
    FEET_TO_METERS,
    MEDIUM_ARMOR_DEX_CAP,
    MODIFIER_PRIORITY,
    MODIFIER_SECTIONS,
    MODIFIER_TYPE_BONUS,
    MODIFIER_TYPE_LANGUAGE,
    MODIFIER_TYPE_SET,
    MODIFIER_TYPE_SET_BASE,
    PASSIVE_SENSES,
    PROFICIENCY_MULTIPLIER,
    SAVING_THROWS_SUFFIX,
    SKILL_ABILITIES,
    SPEED_KEYS,
    STAT_KEYS,
    SUBTYPE_HIT_POINTS_PER_LEVEL,
    SUBTYPE_INITIATIVE,
    SUBTYPE_UNARMORED_ARMOR_CLASS,
    SUBTYPE_UNARMORED_MOVEMENT,
    UNARMORED_AC,
)

logger = logging.getLogger("beyond-initiative.converter")


def stat_mod(score: int) -> int:
    """Ability modifier for a score: ``floor(score / 2 - 5)``."""
    return math.floor(score / 2 - 5)


def proficiency_bonus(level: int) -> int:
    """Proficiency bonus for a class level: ``ceil(1 + level / 4)``."""
    return math.ceil(1 + level / 4)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def ability_key(name: str) -> str | None:
    """Return the ability a modifier targets, judged by its display name.

    DDB names ability-related targets "Strength Score", "Dexterity Saving
    Throws" and so on, so the first three characters identify the ability.
    """
    prefix = name[:3]
    return prefix if prefix in STAT_KEYS else None


def sort_modifiers(character: BeyondCharacter) -> list[BeyondModifier]:
    """Merge all modifier sections and order them by processing priority.

    Sections are concatenated in ``MODIFIER_SECTIONS`` order, then
    stable-sorted so bonuses apply before proficiencies, expertise and
    finally value overrides.
    """
    merged = [m for name in MODIFIER_SECTIONS for m in character.modifiers.section(name)]
    return sorted(merged, key=lambda m: MODIFIER_PRIORITY.get(m.kind, len(MODIFIER_PRIORITY)))


@dataclass
class ModifierTotals:
    """Working state accumulated while applying modifiers."""

    stats: dict[str, int]
    armor_class: int = UNARMORED_AC
    initiative: int = 0
    speed_bonus: int = 0
    saves: dict[str, int] = field(default_factory=dict)
    skills: dict[str, int] = field(default_factory=dict)
    senses: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)

    def mod(self, key: str) -> int:
        return stat_mod(self.stats[key])


def _upsert_max(entries: dict[str, int], name: str, modifier: int) -> None:
    # Same name twice keeps the better bonus; they never stack.
    entries[name] = max(entries.get(name, modifier), modifier)


def _is_gated_out(character: BeyondCharacter, modifier: BeyondModifier) -> bool:
    """Proficiencies from a multiclass only count if DDB marks them as such."""
    if modifier.available_to_multiclass:
        return False
    granting = character.class_granting(modifier.component_id)
    return granting is None or not granting.is_starting_class


def apply_modifiers(character: BeyondCharacter, prof_bonus: int) -> ModifierTotals:
    """Run every modifier through the rules, in priority order.

    Args:
        character: Validated DDB character.
        prof_bonus: Proficiency bonus used for saves, skills and initiative.

    Returns:
        ModifierTotals holding a private copy of the (possibly modified)
        ability scores and everything derived from the modifiers.
    """
    totals = ModifierTotals(stats=dict(character.stats))

    for m in sort_modifiers(character):
        key = ability_key(m.friendly_subtype_name)

        if m.kind == MODIFIER_TYPE_BONUS:
            if key:
                totals.stats[key] += m.value or 0
            elif m.sub_type == SUBTYPE_UNARMORED_MOVEMENT:
                totals.speed_bonus = m.value or 0
            elif BONUS_TYPE_PROFICIENCY in m.bonus_types and m.sub_type == SUBTYPE_INITIATIVE:
                totals.initiative = prof_bonus

        elif m.kind in PROFICIENCY_MULTIPLIER:
            if _is_gated_out(character, m):
                logger.debug(f"Skipping multiclass {m.kind} '{m.friendly_subtype_name}'")
                continue

            bonus = prof_bonus * PROFICIENCY_MULTIPLIER[m.kind]
            if m.sub_type.endswith(SAVING_THROWS_SUFFIX) and key:
                _upsert_max(totals.saves, key, totals.mod(key) + bonus)
            elif m.friendly_subtype_name in SKILL_ABILITIES:
                skill_key = SKILL_ABILITIES[m.friendly_subtype_name]
                _upsert_max(totals.skills, m.friendly_subtype_name, totals.mod(skill_key) + bonus)

        elif m.kind == MODIFIER_TYPE_LANGUAGE:
            if not key:
                totals.languages.append(m.friendly_subtype_name)

        elif m.kind == MODIFIER_TYPE_SET:
            if key:
                totals.stats[key] = m.value or totals.stats[key]
            elif m.sub_type == SUBTYPE_UNARMORED_ARMOR_CLASS:
                totals.armor_class = UNARMORED_AC + totals.mod("Dex") + totals.mod("Wis")

        elif m.kind == MODIFIER_TYPE_SET_BASE:
            if not key:
                totals.senses.append(f"{m.friendly_subtype_name} {m.value or 0}")

    return totals


def compute_armor_class(inventory: list[BeyondItem], dex_mod: int, base: int) -> ValueWithNotes:
    """Armor class from equipped armor, or ``base`` if that is better.

    The Dexterity bonus is capped by the category of the highest-AC piece:
    light armor (or none) is uncapped, medium caps at +2, heavy allows none.
    """
    armors = sorted(
        (i for i in inventory if i.equipped and i.definition.armor_class),
        key=lambda i: i.definition.armor_class,
        reverse=True,
    )

    armor_type = (armors[0].definition.armor_type_id or 0) if armors else 0
    if armor_type < ARMOR_TYPE_MEDIUM:
        dex_bonus = dex_mod
    elif armor_type < ARMOR_TYPE_HEAVY:
        dex_bonus = min(dex_mod, MEDIUM_ARMOR_DEX_CAP)
    else:
        dex_bonus = 0
    logger.debug(f"AC dex bonus: {dex_bonus}")

    armor_total = sum(i.definition.armor_class for i in armors) or UNARMORED_AC
    notes = "(" + " + ".join(i.definition.name for i in armors) + ")" if armors else ""

    return ValueWithNotes(value=max(base, armor_total + dex_bonus), notes=notes)


def compute_hit_points(character: BeyondCharacter, con_mod: int) -> ValueWithNotes:
    """Hit points using fixed hit die averages, class by class.

    Each class's first level counts the full hit die, later levels count
    half the die plus one. Races granting extra hit points per level add
    the total character level.
    """
    total = 0
    for c in character.classes:
        hit_die = c.definition.hit_dice
        total += hit_die + con_mod
        total += (c.level - 1) * (1 + hit_die // 2 + con_mod)

    if any(m.sub_type == SUBTYPE_HIT_POINTS_PER_LEVEL for m in character.modifiers.race):
        total += character.total_level

    notes = "(" + " / ".join(f"{c.level}d{c.definition.hit_dice}+{con_mod}" for c in character.classes) + ")"
    return ValueWithNotes(value=total, notes=notes)


def format_speed(name: str, feet: int) -> str:
    """Render a speed in feet, meters and combat squares.

    >>> format_speed("walk", 30)
    'walk 30ft. (9m) (6c.)'
    """
    meters = _round_half_up(feet * FEET_TO_METERS)
    squares = _round_half_up(feet / FEET_PER_SQUARE)
    return f"{name} {feet}ft. ({meters}m) ({squares}c.)"


def format_speeds(character: BeyondCharacter, speed_bonus: int) -> list[str]:
    speeds = character.race.weight_speeds.normal
    return [
        format_speed(name, getattr(speeds, name) + speed_bonus)
        for name in SPEED_KEYS
        if getattr(speeds, name) > 0
    ]


def passive_senses(totals: ModifierTotals) -> list[str]:
    """Passive perception, investigation and insight, always present."""
    senses = []
    for label, skill, fallback in PASSIVE_SENSES:
        bonus = totals.skills.get(skill)
        if bonus is None:
            bonus = totals.mod(fallback)
        senses.append(f"Passive {label}: {10 + bonus}")
    return senses


def class_summary(character: BeyondCharacter) -> str:
    """e.g. ``"Rogue (Thief) / Fighter"``."""
    parts = []
    for c in character.classes:
        if c.subclass_definition:
            parts.append(f"{c.definition.name} ({c.subclass_definition.name})")
        else:
            parts.append(c.definition.name)
    return " / ".join(parts)


def _defense_lists(character: BeyondCharacter) -> dict[str, list[str]]:
    lists: dict[str, list[str]] = {name: [] for name in DEFENSE_MODIFIER_FIELDS.values()}
    for m in character.modifiers.race:
        target = DEFENSE_MODIFIER_FIELDS.get(m.kind)
        if target:
            lists[target].append(m.friendly_subtype_name)
    return lists


def _sorted_modifiers(entries: dict[str, int]) -> list[NamedModifier]:
    return [NamedModifier(name=name, modifier=entries[name]) for name in sorted(entries)]


def convert(character: BeyondCharacter) -> StatBlock:
    """Convert a validated DDB character into an Improved Initiative stat block.

    Args:
        character: Output of ``parse_character``.

    Returns:
        The stat block. Calling this twice with the same character gives
        equal results; the character itself is never modified.
    """
    prof_bonus = proficiency_bonus(character.classes[0].level)
    logger.debug(f"Proficiency bonus: {prof_bonus}")

    totals = apply_modifiers(character, prof_bonus)

    armor_class = compute_armor_class(
        character.inventory, totals.mod("Dex"), totals.armor_class
    )
    hit_points = compute_hit_points(character, totals.mod("Con"))

    return StatBlock(
        type=class_summary(character),
        hp=hit_points,
        ac=armor_class,
        initiative_modifier=totals.initiative,
        initiative_advantage=False,
        speed=format_speeds(character, totals.speed_bonus),
        abilities=Abilities.model_validate(totals.stats),
        **_defense_lists(character),
        saves=_sorted_modifiers(totals.saves),
        skills=_sorted_modifiers(totals.skills),
        senses=passive_senses(totals) + sorted(totals.senses),
        languages=totals.languages,
        challenge=str(character.total_level),
    )


def convert_character_data(data: dict, character_id: int | None = None) -> ConversionResult:
    """Validate raw DDB JSON and convert it, keeping both sides.

    Args:
        data: Raw character JSON, with or without the ``data`` envelope.
        character_id: DDB character ID, if known.

    Returns:
        ConversionResult with the validated source and the stat block.

    Raises:
        SchemaValidationError: If ``data`` does not match the character schema.
            The converter is not run in that case.
    """
    character = parse_character(data)
    stat_block = convert(character)
    logger.info(f"✅ Converted {stat_block.type} (character {character_id})")
    return ConversionResult(
        source=character.model_dump(by_alias=True),
        target=stat_block.to_json_dict(),
        character_id=character_id,
    )
