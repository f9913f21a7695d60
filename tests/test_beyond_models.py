"""Tests for D&D Beyond character schema validation."""

import pytest

from beyond_initiative.base import SchemaValidationError
from beyond_initiative.sources.dndbeyond.models import BeyondCharacter, parse_character

from ddb_builders import character_class, modifier, raw_character


class TestParseCharacter:
    """Test parsing of valid character data."""

    def test_parse_sample(self, ddb_sample):
        """Parse the sample character, unwrapping the data envelope."""
        character = parse_character(ddb_sample)

        assert isinstance(character, BeyondCharacter)
        assert character.base_hit_points == 43
        assert len(character.classes) == 2
        assert character.classes[0].definition.name == "Monk"
        assert character.classes[0].subclass_definition.name == "Way of Shadow"
        assert character.classes[1].subclass_definition is None
        assert character.race.weight_speeds.normal.walk == 25
        assert len(character.modifiers.race) == 7
        assert len(character.inventory) == 3

    def test_parse_without_envelope(self, ddb_sample):
        character = parse_character(ddb_sample["data"])

        assert character.total_level == 7

    def test_stats_keyed_by_ability(self):
        character = parse_character(raw_character(stats=(8, 10, 12, 14, 16, 18)))

        assert character.stats == {"Str": 8, "Dex": 10, "Con": 12, "Int": 14, "Wis": 16, "Cha": 18}
        assert list(character.stats) == ["Str", "Dex", "Con", "Int", "Wis", "Cha"]

    def test_extra_fields_ignored(self):
        data = raw_character()
        data["name"] = "Extra"
        data["decorations"] = {"avatarUrl": None}

        character = parse_character(data)

        assert not hasattr(character, "decorations")

    def test_nullable_fields(self):
        data = raw_character(
            inventory=[{"equipped": None, "definition": {"name": "Rope", "armorClass": None, "armorTypeId": None}}],
            race=[modifier("language", "common", "Common", None)],
        )

        character = parse_character(data)

        assert character.inventory[0].equipped is None
        assert character.modifiers.race[0].value is None

    def test_dump_round_trips_through_schema(self, ddb_sample):
        """The validated source shown to users can be validated again."""
        dumped = parse_character(ddb_sample).model_dump(by_alias=True)

        assert "class" in dumped["modifiers"]
        assert dumped["stats"]["Con"] == 14
        assert parse_character(dumped).model_dump(by_alias=True) == dumped

    def test_feature_lookup(self, ddb_sample):
        character = parse_character(ddb_sample)

        assert character.class_granting(101).definition.name == "Monk"
        assert character.class_granting(202).definition.name == "Rogue"
        assert character.class_granting(999) is None

    def test_subclass_without_hit_die(self):
        """DDB sends hitDice 0 on subclass definitions."""
        data = raw_character(
            classes=[character_class("Monk", 3, 8, subclass="Way of Shadow")],
        )
        assert data["classes"][0]["subclassDefinition"]["hitDice"] == 0

        character = parse_character(data)

        assert character.classes[0].subclass_definition.name == "Way of Shadow"
        assert character.classes[0].subclass_definition.hit_dice == 0
        assert character.classes[0].definition.hit_dice == 8

    def test_subclass_hit_die_optional(self):
        data = raw_character()
        data["classes"][0]["subclassDefinition"] = {"name": "Champion"}

        character = parse_character(data)

        assert character.classes[0].subclass_definition.hit_dice == 0

    def test_class_hit_die_must_be_positive(self):
        with pytest.raises(SchemaValidationError):
            parse_character(raw_character(classes=[character_class("Fighter", 1, 0)]))


class TestSchemaRejection:
    """Test that malformed data is rejected before conversion."""

    def test_missing_classes(self):
        data = raw_character()
        del data["classes"]

        with pytest.raises(SchemaValidationError) as exc_info:
            parse_character(data)

        assert "refreshing your character page" in str(exc_info.value)
        assert exc_info.value.errors

    def test_empty_classes(self):
        with pytest.raises(SchemaValidationError):
            parse_character(raw_character(classes=[]))

    def test_wrong_stat_count(self):
        data = raw_character()
        data["stats"] = data["stats"][:5]

        with pytest.raises(SchemaValidationError):
            parse_character(data)

    def test_stat_without_value(self):
        data = raw_character()
        data["stats"][2] = {"id": 3, "value": None}

        with pytest.raises(SchemaValidationError):
            parse_character(data)

    def test_zero_level_class(self):
        with pytest.raises(SchemaValidationError):
            parse_character(raw_character(classes=[character_class("Fighter", 0, 10)]))

    def test_missing_modifier_section(self):
        data = raw_character()
        del data["modifiers"]["item"]

        with pytest.raises(SchemaValidationError):
            parse_character(data)

    def test_modifier_missing_fields(self):
        data = raw_character()
        data["modifiers"]["race"] = [{"type": "bonus", "subType": "strength-score"}]

        with pytest.raises(SchemaValidationError) as exc_info:
            parse_character(data)

        locations = [e["loc"] for e in exc_info.value.errors]
        assert any("friendlySubtypeName" in loc for loc in locations)

    def test_missing_speeds(self):
        data = raw_character()
        del data["race"]["weightSpeeds"]["normal"]["burrow"]

        with pytest.raises(SchemaValidationError):
            parse_character(data)

    def test_not_an_object(self):
        with pytest.raises(SchemaValidationError):
            parse_character([])
