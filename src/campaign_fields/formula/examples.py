"""Draw Steel computed field examples.

Pre-built formulas for Draw Steel campaigns, grouped by category. The
catalog documents the formula language for users and doubles as the
conformance suite for the evaluator: each example's formula evaluated
against its sample fields yields its expected result.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from campaign_fields.formula.types import FieldValue, OutputType


class ExampleCategory(str, Enum):
    HEALTH = "Health & Vitality"
    ABILITY_SCORES = "Ability Scores"
    DISPLAY = "Display & Identification"
    COMBAT = "Combat"
    NEGOTIATION = "Negotiation"


@dataclass(frozen=True)
class ComputedFieldExample:
    name: str
    category: ExampleCategory
    formula: str
    output_type: OutputType
    description: str
    sample_fields: Mapping[str, FieldValue]
    expected_result: FieldValue


def _example(
    name: str,
    category: ExampleCategory,
    formula: str,
    output_type: OutputType,
    description: str,
    sample_fields: dict[str, FieldValue],
    expected_result: FieldValue,
) -> ComputedFieldExample:
    return ComputedFieldExample(
        name=name,
        category=category,
        formula=formula,
        output_type=output_type,
        description=description,
        sample_fields=MappingProxyType(dict(sample_fields)),
        expected_result=expected_result,
    )


DRAW_STEEL_EXAMPLES: tuple[ComputedFieldExample, ...] = (
    # Health & Vitality
    _example(
        "Remaining HP",
        ExampleCategory.HEALTH,
        "{maxHP} - {currentDamage}",
        OutputType.NUMBER,
        "Calculates remaining hit points by subtracting damage from max HP",
        {"maxHP": 60, "currentDamage": 15},
        45,
    ),
    _example(
        "HP Percentage",
        ExampleCategory.HEALTH,
        "({currentHP} / {maxHP}) * 100",
        OutputType.NUMBER,
        "Shows current HP as a percentage of maximum HP",
        {"currentHP": 30, "maxHP": 60},
        50,
    ),
    _example(
        "Is Bloodied",
        ExampleCategory.HEALTH,
        "{currentHP} <= ({maxHP} / 2)",
        OutputType.BOOLEAN,
        "Checks if character is bloodied (at or below half HP), an important status in Draw Steel",
        {"currentHP": 25, "maxHP": 60},
        True,
    ),
    _example(
        "Is Winded",
        ExampleCategory.HEALTH,
        "{currentHP} <= 0",
        OutputType.BOOLEAN,
        "Checks if character is winded (at or below 0 HP), a key state in Draw Steel",
        {"currentHP": 0},
        True,
    ),
    # Ability Scores
    _example(
        "Total Attributes",
        ExampleCategory.ABILITY_SCORES,
        "{might} + {agility} + {reason} + {intuition} + {presence}",
        OutputType.NUMBER,
        "Sums all five Draw Steel ability scores",
        {"might": 3, "agility": 2, "reason": 1, "intuition": 2, "presence": 2},
        10,
    ),
    _example(
        "Primary Attack Bonus",
        ExampleCategory.ABILITY_SCORES,
        "{might} + {level}",
        OutputType.NUMBER,
        "Calculates melee attack bonus from Might and level",
        {"might": 3, "level": 5},
        8,
    ),
    _example(
        "Ranged Attack Bonus",
        ExampleCategory.ABILITY_SCORES,
        "{agility} + {level}",
        OutputType.NUMBER,
        "Calculates ranged attack bonus from Agility and level",
        {"agility": 2, "level": 5},
        7,
    ),
    # Display & Identification
    _example(
        "Character Title",
        ExampleCategory.DISPLAY,
        "{name} the {class}",
        OutputType.TEXT,
        'Formats character name with class (e.g., "Aragorn the Ranger")',
        {"name": "Aragorn", "class": "Ranger"},
        "Aragorn the Ranger",
    ),
    _example(
        "Full Character Description",
        ExampleCategory.DISPLAY,
        "Level {level} {ancestry} {class}",
        OutputType.TEXT,
        "Creates full character description with level, ancestry, and class",
        {"level": 5, "ancestry": "Human", "class": "Conduit"},
        "Level 5 Human Conduit",
    ),
    _example(
        "NPC Identifier",
        ExampleCategory.DISPLAY,
        "{name} | {threatLevel} {role}",
        OutputType.TEXT,
        "Creates NPC identifier with threat level and role (| keeps it clear of operators)",
        {"name": "Orc Captain", "threatLevel": "Boss", "role": "Leader"},
        "Orc Captain | Boss Leader",
    ),
    # Combat
    _example(
        "Recovery Value",
        ExampleCategory.COMBAT,
        "{maxHP} / 3",
        OutputType.NUMBER,
        "Calculates recovery value (one-third of max HP) for healing",
        {"maxHP": 60},
        20,
    ),
    _example(
        "Is Veteran Tier",
        ExampleCategory.COMBAT,
        "{level} >= 5",
        OutputType.BOOLEAN,
        "Checks if character is Veteran tier (level 5+) in Draw Steel",
        {"level": 5},
        True,
    ),
    # Negotiation
    _example(
        "Negotiation Difficulty",
        ExampleCategory.NEGOTIATION,
        "DC {negotiationDC}",
        OutputType.TEXT,
        "Formats negotiation difficulty class for display",
        {"negotiationDC": 15},
        "DC 15",
    ),
)

EXAMPLE_CATEGORIES: tuple[ExampleCategory, ...] = tuple(ExampleCategory)


def get_examples_by_category(
    category: ExampleCategory | str,
) -> tuple[ComputedFieldExample, ...]:
    """Examples of one category, in catalog order."""
    category = ExampleCategory(category)
    return tuple(example for example in DRAW_STEEL_EXAMPLES if example.category is category)
