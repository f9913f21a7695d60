"""
Data models for the Improved Initiative stat block.
"""

from pydantic import BaseModel, ConfigDict, Field


class InitiativeModel(BaseModel):
    """Base for Improved Initiative models: PascalCase keys on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump with the key names Improved Initiative expects."""
        return self.model_dump(by_alias=True)


class ValueWithNotes(InitiativeModel):
    """A number plus a human-readable breakdown, as used for HP and AC."""
    value: int = Field(alias="Value")
    notes: str = Field(default="", alias="Notes")


class NamedModifier(InitiativeModel):
    """A named bonus, e.g. a saving throw or skill."""
    name: str = Field(alias="Name")
    modifier: int = Field(alias="Modifier")


class Abilities(InitiativeModel):
    """The six ability scores."""
    str_: int = Field(alias="Str")
    dex: int = Field(alias="Dex")
    con: int = Field(alias="Con")
    int_: int = Field(alias="Int")
    wis: int = Field(alias="Wis")
    cha: int = Field(alias="Cha")


class StatBlock(InitiativeModel):
    """Improved Initiative creature stat block.

    Content fields (Source, Traits, Actions, ...) are left out on purpose;
    Improved Initiative fills them with defaults on import.
    """
    type: str = Field(alias="Type", description="Class/subclass summary")
    hp: ValueWithNotes = Field(alias="HP")
    ac: ValueWithNotes = Field(alias="AC")
    initiative_modifier: int = Field(default=0, alias="InitiativeModifier")
    initiative_advantage: bool = Field(default=False, alias="InitiativeAdvantage")
    speed: list[str] = Field(default_factory=list, alias="Speed")
    abilities: Abilities = Field(alias="Abilities")
    damage_vulnerabilities: list[str] = Field(default_factory=list, alias="DamageVulnerabilities")
    damage_resistances: list[str] = Field(default_factory=list, alias="DamageResistances")
    damage_immunities: list[str] = Field(default_factory=list, alias="DamageImmunities")
    condition_immunities: list[str] = Field(default_factory=list, alias="ConditionImmunities")
    saves: list[NamedModifier] = Field(default_factory=list, alias="Saves")
    skills: list[NamedModifier] = Field(default_factory=list, alias="Skills")
    senses: list[str] = Field(default_factory=list, alias="Senses")
    languages: list[str] = Field(default_factory=list, alias="Languages")
    challenge: str = Field(alias="Challenge", description="Total character level")

    def save(self, name: str) -> int | None:
        """Modifier of the named saving throw, if listed."""
        return next((s.modifier for s in self.saves if s.name == name), None)

    def skill(self, name: str) -> int | None:
        """Modifier of the named skill, if listed."""
        return next((s.modifier for s in self.skills if s.name == name), None)
