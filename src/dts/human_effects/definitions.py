"""
Field definitions for human-effects tables.

A :class:`FieldDefinition` describes one logical column of an effect row.
The columns of a table are composed from three groups:

- **shared**: fixed catalog of dimensions common to every effect table,
  stored as real columns on ``human_dsg`` (sex, age, disability, poverty
  lines). Tenants may hide some of them.
- **custom**: tenant-configured enum dimensions, stored as keys of the
  ``human_dsg.custom`` JSON map.
- **table-specific**: fixed per-table dimensions and metrics stored on the
  effect table itself.

The catalogs below are immutable module data. Functions return fresh lists
so callers may reorder or filter them freely.

Examples:
    >>> [d.db_name for d in table_definitions(EffectTable.MISSING)]
    ['as_of', 'missing']
    >>> shared_definitions({"disability"})[2].db_name
    'global_poverty_line'
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from dts.human_effects.tables import EffectTable, effect_table_from_string

if TYPE_CHECKING:
    from dts.human_effects.config import CustomDimension


class FieldFormat(str, Enum):
    ENUM = "enum"
    NUMBER = "number"
    DATE = "date"


class FieldRole(str, Enum):
    DIMENSION = "dimension"
    METRIC = "metric"


@dataclass(frozen=True, slots=True)
class EnumOption:
    """One allowed value of an enum field. Only ``key`` is persisted."""

    key: str
    label: str


@dataclass(frozen=True)
class FieldDefinition:
    """One logical column of an effect row.

    Attributes:
        ui_name: Display name.
        js_name: Programmatic name used in API payloads and presence maps.
        db_name: Storage column (or custom JSON key).
        format: ``enum``, ``number`` or ``date``.
        role: ``dimension`` (distinguishes rows) or ``metric`` (measured).
        shared: Stored as a column of the ``human_dsg`` aggregate row.
        custom: Stored as a key of the aggregate row's ``custom`` JSON map.
        enum_values: Allowed values, only for ``format=enum``.
        ui_col_width: Display hint (``thin``, ``medium``, ``wide``).
    """

    ui_name: str
    js_name: str
    db_name: str
    format: FieldFormat
    role: FieldRole
    shared: bool = False
    custom: bool = False
    enum_values: tuple[EnumOption, ...] = ()
    ui_col_width: str | None = None

    def __post_init__(self) -> None:
        if self.shared and self.custom:
            raise ValueError(f"field {self.db_name!r} cannot be both shared and custom")
        if self.enum_values and self.format != FieldFormat.ENUM:
            raise ValueError(f"field {self.db_name!r} has enum values but format {self.format.value!r}")

    @property
    def is_dimension(self) -> bool:
        return self.role == FieldRole.DIMENSION

    @property
    def is_metric(self) -> bool:
        return self.role == FieldRole.METRIC

    @property
    def enum_keys(self) -> frozenset[str]:
        return frozenset(o.key for o in self.enum_values)

    @classmethod
    def enum(
        cls,
        ui_name: str,
        db_name: str,
        options: Iterable[tuple[str, str]],
        *,
        js_name: str | None = None,
        role: FieldRole = FieldRole.DIMENSION,
        shared: bool = False,
        custom: bool = False,
        ui_col_width: str | None = None,
    ) -> FieldDefinition:
        return cls(
            ui_name=ui_name,
            js_name=js_name or db_name,
            db_name=db_name,
            format=FieldFormat.ENUM,
            role=role,
            shared=shared,
            custom=custom,
            enum_values=tuple(EnumOption(k, label) for k, label in options),
            ui_col_width=ui_col_width,
        )

    @classmethod
    def number(cls, ui_name: str, db_name: str, *, js_name: str | None = None,
               role: FieldRole = FieldRole.METRIC, ui_col_width: str | None = "thin") -> FieldDefinition:
        return cls(ui_name, js_name or db_name, db_name, FieldFormat.NUMBER, role,
                   ui_col_width=ui_col_width)

    @classmethod
    def date(cls, ui_name: str, db_name: str, *, js_name: str | None = None,
             role: FieldRole = FieldRole.DIMENSION, ui_col_width: str | None = "thin") -> FieldDefinition:
        return cls(ui_name, js_name or db_name, db_name, FieldFormat.DATE, role,
                   ui_col_width=ui_col_width)


# =============================================================================
# Shared catalog
# =============================================================================

_BELOW_ABOVE = (("below", "Below"), ("above", "Above"))

_SHARED_ALL: tuple[FieldDefinition, ...] = (
    FieldDefinition.enum(
        "Sex", "sex",
        (("m", "M-Male"), ("f", "F-Female"), ("o", "O-Other Non-binary")),
        shared=True, ui_col_width="medium",
    ),
    FieldDefinition.enum(
        "Age", "age",
        (("0-14", "Children, (0-14)"), ("15-64", "Adult, (15-64)"), ("65+", "Elder (65-)")),
        shared=True, ui_col_width="medium",
    ),
    FieldDefinition.enum(
        "Disability", "disability",
        (
            ("none", "No disabilities"),
            ("physical_dwarfism", "Physical, dwarfism"),
            ("physical_problems_in_body_functioning", "Physical, Problems in body functioning"),
            ("physical_problems_in_body_structures", "Physical, Problems in body structures"),
            ("physical_other_physical_disability", "Physical, Other physical disability"),
            ("sensorial_visual_impairments_blindness", "Sensorial, visual impairments, blindness"),
            ("sensorial_visual_impairments_partial_sight_loss",
             "Sensorial, visual impairments, partial sight loss"),
            ("sensorial_visual_impairments_colour_blindness",
             "Sensorial, visual impairments, colour blindness"),
            ("sensorial_hearing_impairments_deafness_hard_of_hearing",
             "Sensorial, Hearing impairments, Deafness, hard of hearing"),
            ("sensorial_hearing_impairments_deafness_other_hearing_disability",
             "Sensorial, Hearing impairments, Deafness, other hearing disability"),
            ("sensorial_other_sensory_impairments", "Sensorial, other sensory impairments"),
            ("psychosocial", "Psychosocial"),
            ("intellectual_cognitive", "Intellectual/ Cognitive"),
            ("multiple_deaf_blindness", "Multiple, Deaf blindness"),
            ("multiple_other_multiple", "Multiple, other multiple"),
            ("others", "Others"),
        ),
        shared=True, ui_col_width="wide",
    ),
    FieldDefinition.enum(
        "Global poverty line", "global_poverty_line", _BELOW_ABOVE,
        js_name="globalPovertyLine", shared=True, ui_col_width="thin",
    ),
    FieldDefinition.enum(
        "National poverty line", "national_poverty_line", _BELOW_ABOVE,
        js_name="nationalPovertyLine", shared=True, ui_col_width="thin",
    ),
)


def shared_definitions_all() -> list[FieldDefinition]:
    """Every shared dimension, hidden or not."""
    return list(_SHARED_ALL)


def shared_definitions(hidden: Iterable[str] = ()) -> list[FieldDefinition]:
    """Shared dimensions minus the ``hidden`` db names, in catalog order."""
    hidden = set(hidden)
    return [d for d in _SHARED_ALL if d.db_name not in hidden]


def shared_db_names() -> frozenset[str]:
    return frozenset(d.db_name for d in _SHARED_ALL)


# =============================================================================
# Custom (tenant-configured) dimensions
# =============================================================================


def custom_definitions(config: Iterable[CustomDimension]) -> list[FieldDefinition]:
    """Turn configured custom dimensions into enum dimension definitions."""
    return [
        FieldDefinition.enum(
            dim.ui_name,
            dim.db_name,
            ((o.key, o.label) for o in dim.enum),
            custom=True,
            ui_col_width=dim.ui_col_width,
        )
        for dim in config
    ]


# =============================================================================
# Table-specific catalogs
# =============================================================================

_AS_OF = FieldDefinition.date("As of", "as_of", js_name="asOf")

_ASSISTED = FieldDefinition.enum(
    "Assisted", "assisted",
    (("assisted", "Assisted"), ("not_assisted", "Not Assisted")),
    ui_col_width="medium",
)

_TABLE_SPECIFIC: dict[EffectTable, tuple[FieldDefinition, ...]] = {
    EffectTable.DEATHS: (
        FieldDefinition.number("Deaths", "deaths"),
    ),
    EffectTable.INJURED: (
        FieldDefinition.number("Injured", "injured"),
    ),
    EffectTable.MISSING: (
        _AS_OF,
        FieldDefinition.number("Missing", "missing"),
    ),
    EffectTable.AFFECTED: (
        FieldDefinition.number("Directly Affected (Old DesInventar)", "direct"),
        FieldDefinition.number("Indirectly Affected (Old DesInventar)", "indirect"),
    ),
    EffectTable.DISPLACED: (
        _ASSISTED,
        FieldDefinition.enum(
            "Timing", "timing",
            (("pre-emptive", "Pre-emptive"), ("reactive", "Reactive")),
            ui_col_width="medium",
        ),
        _AS_OF,
        FieldDefinition.number("Short Term", "short"),
        FieldDefinition.number("Medium Short Term", "medium_short", js_name="mediumShort"),
        FieldDefinition.number("Medium Long Term", "medium_long", js_name="mediumLong"),
        FieldDefinition.number("Long Term", "long"),
        FieldDefinition.number("Permanent", "permanent"),
    ),
    EffectTable.DISPLACEMENT_STOCKS: (
        _ASSISTED,
        _AS_OF,
        FieldDefinition.number("Displacement stocks", "displacement_stocks", js_name="displacementStocks"),
    ),
}


def table_definitions(table: EffectTable | str) -> list[FieldDefinition]:
    """Table-specific dimensions and metrics for ``table``.

    Raises:
        UnknownEffectTableError: if ``table`` is not an effect kind.
    """
    return list(_TABLE_SPECIFIC[effect_table_from_string(table)])


__all__ = [
    "FieldFormat",
    "FieldRole",
    "EnumOption",
    "FieldDefinition",
    "shared_definitions_all",
    "shared_definitions",
    "shared_db_names",
    "custom_definitions",
    "table_definitions",
]
