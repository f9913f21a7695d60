"""Builders for raw D&D Beyond character JSON used across tests."""


def modifier(
    kind: str,
    sub_type: str,
    friendly: str,
    value: int | None = None,
    *,
    multiclass: bool = True,
    component_id: int = 0,
    bonus_types: list[int] | None = None,
) -> dict:
    """Build a raw DDB modifier entry."""
    return {
        "type": kind,
        "subType": sub_type,
        "friendlySubtypeName": friendly,
        "value": value,
        "bonusTypes": bonus_types or [],
        "availableToMulticlass": multiclass,
        "componentId": component_id,
    }


def character_class(
    name: str,
    level: int,
    hit_dice: int,
    *,
    starting: bool = True,
    subclass: str | None = None,
    feature_ids: tuple[int, ...] = (),
) -> dict:
    """Build a raw DDB class entry."""
    return {
        "level": level,
        "isStartingClass": starting,
        "definition": {"name": name, "hitDice": hit_dice},
        "subclassDefinition": {"name": subclass, "hitDice": 0} if subclass else None,
        "classFeatures": [{"definition": {"id": i}} for i in feature_ids],
    }


def armor(name: str, armor_class: int | None, armor_type: int | None = None, equipped: bool | None = True) -> dict:
    """Build a raw DDB inventory entry."""
    return {
        "equipped": equipped,
        "definition": {"name": name, "armorClass": armor_class, "armorTypeId": armor_type},
    }


def raw_character(
    stats: tuple[int, int, int, int, int, int] = (10, 10, 10, 10, 10, 10),
    classes: list[dict] | None = None,
    race: list[dict] | None = None,
    background: list[dict] | None = None,
    class_modifiers: list[dict] | None = None,
    item: list[dict] | None = None,
    inventory: list[dict] | None = None,
    walk: int = 30,
    **speeds: int,
) -> dict:
    """Build a minimal raw DDB character that passes the schema."""
    normal = {"walk": walk, "fly": 0, "swim": 0, "climb": 0, "burrow": 0}
    normal.update(speeds)
    return {
        "baseHitPoints": 0,
        "classes": classes if classes is not None else [character_class("Fighter", 1, 10)],
        "race": {"weightSpeeds": {"normal": normal}},
        "stats": [{"value": v} for v in stats],
        "modifiers": {
            "race": race or [],
            "background": background or [],
            "class": class_modifiers or [],
            "item": item or [],
        },
        "inventory": inventory or [],
    }


