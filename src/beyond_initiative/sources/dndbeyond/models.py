"""
Pydantic models for the D&D Beyond character record.

Only the fields the converter reads are declared; everything else in the
(very large) DDB payload is ignored. ``parse_character`` is the single gate
in front of the converter: anything it accepts can be converted.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ...base import SchemaValidationError
from .schema import STAT_KEYS

logger = logging.getLogger("beyond-initiative.dndbeyond")


class BeyondModel(BaseModel):
    """Base for DDB models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True)


class BeyondModifier(BeyondModel):
    """A single entry of one of the ``modifiers`` sections."""

    kind: str = Field(alias="type", description="Modifier kind, e.g. 'bonus' or 'set'")
    sub_type: str = Field(alias="subType", description="Machine name of the target")
    friendly_subtype_name: str = Field(
        alias="friendlySubtypeName",
        description="Display name of the target, e.g. 'Strength Score'",
    )
    value: int | None = None
    bonus_types: list[int] = Field(alias="bonusTypes")
    available_to_multiclass: bool = Field(alias="availableToMulticlass")
    component_id: int = Field(alias="componentId", description="ID of the granting feature")


class BeyondModifiers(BeyondModel):
    """Modifiers partitioned by origin."""

    race: list[BeyondModifier]
    background: list[BeyondModifier]
    class_: list[BeyondModifier] = Field(alias="class")
    item: list[BeyondModifier]

    def section(self, name: str) -> list[BeyondModifier]:
        """Return a section by its DDB name."""
        return self.class_ if name == "class" else getattr(self, name)


class BeyondFeatureDefinition(BeyondModel):
    id: int


class BeyondClassFeature(BeyondModel):
    definition: BeyondFeatureDefinition


class BeyondClassDefinition(BeyondModel):
    name: str
    hit_dice: int = Field(alias="hitDice", gt=0)


class BeyondSubclassDefinition(BeyondModel):
    """Subclasses have no hit die of their own; DDB sends 0."""
    name: str
    hit_dice: int = Field(default=0, alias="hitDice")


class BeyondClass(BeyondModel):
    """One class entry; multiclass characters have several."""

    level: int = Field(ge=1)
    definition: BeyondClassDefinition
    subclass_definition: BeyondSubclassDefinition | None = Field(default=None, alias="subclassDefinition")
    class_features: list[BeyondClassFeature] = Field(alias="classFeatures")
    is_starting_class: bool = Field(alias="isStartingClass")

    def grants_feature(self, feature_id: int) -> bool:
        """Check whether one of this class's features has the given ID."""
        return any(f.definition.id == feature_id for f in self.class_features)


class BeyondSpeeds(BeyondModel):
    walk: int = Field(ge=0)
    fly: int = Field(ge=0)
    swim: int = Field(ge=0)
    climb: int = Field(ge=0)
    burrow: int = Field(ge=0)


class BeyondWeightSpeeds(BeyondModel):
    normal: BeyondSpeeds


class BeyondRace(BeyondModel):
    weight_speeds: BeyondWeightSpeeds = Field(alias="weightSpeeds")


class BeyondItemDefinition(BeyondModel):
    name: str
    armor_class: int | None = Field(default=None, alias="armorClass")
    armor_type_id: int | None = Field(default=None, alias="armorTypeId")


class BeyondItem(BeyondModel):
    equipped: bool | None = None
    definition: BeyondItemDefinition


class BeyondStat(BeyondModel):
    value: int = Field(gt=0)


class BeyondCharacter(BeyondModel):
    """The validated subset of a D&D Beyond character."""

    base_hit_points: int = Field(alias="baseHitPoints")
    classes: list[BeyondClass] = Field(min_length=1)
    race: BeyondRace
    stats: dict[str, int] = Field(description="Ability scores keyed Str..Cha, in canonical order")
    modifiers: BeyondModifiers
    inventory: list[BeyondItem]

    @field_validator("stats", mode="before")
    @classmethod
    def _key_stats(cls, value: Any) -> Any:
        """Turn DDB's positional stats array into a mapping keyed by ability."""
        if isinstance(value, dict):
            if tuple(value) != STAT_KEYS:
                raise ValueError(f"stats must have keys {', '.join(STAT_KEYS)} in order")
            return value
        if not isinstance(value, list):
            raise ValueError("stats must be a list")
        if len(value) != len(STAT_KEYS):
            raise ValueError(f"expected {len(STAT_KEYS)} stats, got {len(value)}")
        return {key: BeyondStat.model_validate(entry).value for key, entry in zip(STAT_KEYS, value)}

    @property
    def total_level(self) -> int:
        return sum(c.level for c in self.classes)

    def class_granting(self, feature_id: int) -> BeyondClass | None:
        """Find the class whose features include ``feature_id``."""
        return next((c for c in self.classes if c.grants_feature(feature_id)), None)


def parse_character(data: dict) -> BeyondCharacter:
    """Validate raw DDB JSON against the character schema.

    Args:
        data: Character JSON, with or without the ``{"data": ...}`` envelope.

    Returns:
        The validated character.

    Raises:
        SchemaValidationError: If the data does not match the expected shape.
    """
    if isinstance(data, dict) and "data" in data and "stats" not in data:
        data = data["data"]

    try:
        return BeyondCharacter.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Character data rejected by schema ({e.error_count()} errors)")
        raise SchemaValidationError(
            "Failed to convert Beyond data, you should try again after refreshing your character page.",
            errors=e.errors(include_url=False),
        ) from None
