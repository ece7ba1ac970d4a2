"""
Human-effects rows: definitions, validation and storage.

Usage::

    from dts.human_effects import DefinitionRegistry, EffectTable, HumanEffectsRepository

    defs = DefinitionRegistry(session).definitions_for_table(EffectTable.DEATHS)
    repo = HumanEffectsRepository(session)
    repo.create(EffectTable.DEATHS, record_id, defs, rows)
"""

from dts.human_effects.config import CustomDimension, DsgConfigRepository, EnumEntry
from dts.human_effects.definitions import (
    EnumOption,
    FieldDefinition,
    FieldFormat,
    FieldRole,
    custom_definitions,
    shared_definitions,
    shared_definitions_all,
    table_definitions,
)
from dts.human_effects.ordering import compare_rows, same_dimensions, sort_rows
from dts.human_effects.presence import CategoryPresenceRepository, TotalGroupFlag
from dts.human_effects.registry import DefinitionRegistry
from dts.human_effects.repository import EffectRows, HumanEffectsRepository
from dts.human_effects.splitting import DefinitionSplit, SplitRow, split_definitions
from dts.human_effects.tables import EffectTable, effect_table_from_string
from dts.human_effects.validation import UNSET, validate_row

__all__ = [
    "UNSET",
    "CategoryPresenceRepository",
    "CustomDimension",
    "DefinitionRegistry",
    "DefinitionSplit",
    "DsgConfigRepository",
    "EffectRows",
    "EffectTable",
    "EnumEntry",
    "EnumOption",
    "FieldDefinition",
    "FieldFormat",
    "FieldRole",
    "HumanEffectsRepository",
    "SplitRow",
    "TotalGroupFlag",
    "compare_rows",
    "custom_definitions",
    "effect_table_from_string",
    "same_dimensions",
    "shared_definitions",
    "shared_definitions_all",
    "sort_rows",
    "split_definitions",
    "table_definitions",
    "validate_row",
]
