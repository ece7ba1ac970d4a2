"""
Tenant disaggregation configuration.

The single-row ``human_dsg_config`` table holds two JSON documents:

- ``hidden``: ``{"cols": [db_name, ...]}``, shared columns the tenant does
  not collect.
- ``custom``: ``{"config": [{"uiName", "dbName", "uiColWidth", "enum"}]}``,
  tenant-defined enum dimensions stored in ``human_dsg.custom``.

Both documents are validated with pydantic on write. On read, a malformed
document is logged and treated as empty so that one bad edit cannot lock
users out of the data-entry screens.

Examples:
    >>> repo = DsgConfigRepository(session)
    >>> repo.set_hidden(["disability"])
    >>> repo.set_custom([{"uiName": "Ethnicity", "dbName": "ethnicity",
    ...                   "enum": [{"key": "a", "label": "A"}]}])
    >>> [d.db_name for d in repo.get_custom()]
    ['ethnicity']

Tags:
    dts, configuration, human-effects, pydantic

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from sqlalchemy import select, update

from dts.core.errors import InvalidConfigError
from dts.core.logging import get_logger
from dts.core.orm.tables import HumanDsgConfigTable
from dts.core.repository import SessionRepository
from dts.human_effects.definitions import shared_db_names

logger = get_logger(__name__)

_CONFIG_TABLE = HumanDsgConfigTable.__table__


class EnumEntry(BaseModel):
    """One selectable value of a custom dimension."""

    model_config = ConfigDict(extra="forbid")

    key: str = Field(..., min_length=1)
    label: str = Field(default="")


class CustomDimension(BaseModel):
    """A tenant-defined enum dimension."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    ui_name: str = Field(..., alias="uiName", min_length=1)
    db_name: str = Field(..., alias="dbName", pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    ui_col_width: str | None = Field(default=None, alias="uiColWidth")
    enum: list[EnumEntry] = Field(..., min_length=1)

    @field_validator("enum")
    @classmethod
    def validate_unique_keys(cls, v: list[EnumEntry]) -> list[EnumEntry]:
        keys = [e.key for e in v]
        if len(keys) != len(set(keys)):
            duplicates = {k for k in keys if keys.count(k) > 1}
            raise ValueError(f"Duplicate enum keys: {sorted(duplicates)}")
        return v

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CustomConfig(BaseModel):
    """The whole ``custom`` document."""

    model_config = ConfigDict(extra="forbid")

    config: list[CustomDimension] = Field(default_factory=list)

    @field_validator("config")
    @classmethod
    def validate_db_names(cls, v: list[CustomDimension]) -> list[CustomDimension]:
        names = [d.db_name for d in v]
        if len(names) != len(set(names)):
            duplicates = {n for n in names if names.count(n) > 1}
            raise ValueError(f"Duplicate custom dimension names: {sorted(duplicates)}")
        clashing = set(names) & shared_db_names()
        if clashing:
            raise ValueError(f"Custom dimension names clash with shared columns: {sorted(clashing)}")
        return v


class HiddenConfig(BaseModel):
    """The whole ``hidden`` document."""

    model_config = ConfigDict(extra="forbid")

    cols: list[str] = Field(default_factory=list)


class DsgConfigRepository(SessionRepository):
    """Read and write the tenant disaggregation configuration."""

    def _row_id(self) -> int | None:
        return self.scalar(select(_CONFIG_TABLE.c.id).order_by(_CONFIG_TABLE.c.id).limit(1))

    def _read(self, column: str) -> Any:
        return self.scalar(
            select(_CONFIG_TABLE.c[column]).order_by(_CONFIG_TABLE.c.id).limit(1)
        )

    def _write(self, column: str, value: dict[str, Any]) -> None:
        row_id = self._row_id()
        if row_id is None:
            self.insert(_CONFIG_TABLE, {column: value})
        else:
            self.execute(
                update(_CONFIG_TABLE).where(_CONFIG_TABLE.c.id == row_id).values({column: value})
            )

    # -- hidden shared columns -----------------------------------------------

    def get_hidden(self) -> set[str]:
        raw = self._read("hidden")
        if raw is None:
            return set()
        try:
            return set(HiddenConfig.model_validate(raw).cols)
        except ValidationError as e:
            logger.warning("dsg_config_malformed", column="hidden", error=str(e))
            return set()

    def set_hidden(self, cols: Iterable[str]) -> None:
        cols = list(dict.fromkeys(cols))
        unknown = [c for c in cols if c not in shared_db_names()]
        if unknown:
            raise InvalidConfigError(
                "hidden", unknown, f"Unknown shared columns: {', '.join(unknown)}"
            )
        self._write("hidden", HiddenConfig(cols=cols).model_dump())
        logger.info("dsg_config_hidden_set", cols=cols)

    # -- custom dimensions ---------------------------------------------------

    def get_custom(self) -> list[CustomDimension]:
        raw = self._read("custom")
        if raw is None:
            return []
        try:
            return CustomConfig.model_validate(raw).config
        except ValidationError as e:
            logger.warning("dsg_config_malformed", column="custom", error=str(e))
            return []

    def set_custom(self, dims: Iterable[CustomDimension | dict[str, Any]]) -> list[CustomDimension]:
        payload = [d.to_json() if isinstance(d, CustomDimension) else d for d in dims]
        try:
            config = CustomConfig.model_validate({"config": payload})
        except ValidationError as e:
            raise InvalidConfigError("custom", payload, f"Invalid custom dimensions: {e}") from e
        self._write("custom", {"config": [d.to_json() for d in config.config]})
        logger.info("dsg_config_custom_set", dims=[d.db_name for d in config.config])
        return config.config


__all__ = [
    "EnumEntry",
    "CustomDimension",
    "CustomConfig",
    "HiddenConfig",
    "DsgConfigRepository",
]
