from typing import Any

import toml
from pydantic import BaseModel, ValidationError, field_validator

from vpa_recommendation.exceptions import ConfigError, ConfigNotFound
from vpa_recommendation.table.sort import SortOrder

DEFAULT_SORT_COLUMNS = ["namespace", "name"]

_config: dict[str, Any] = {}


class Options(BaseModel):
    show_namespace: bool = False
    show_kind: bool = False
    wide: bool = False
    no_headers: bool = False
    no_colors: bool = False
    show_stats: bool = False
    sort_columns: list[str] = DEFAULT_SORT_COLUMNS
    sort_order: SortOrder = SortOrder.ASC

    @field_validator("sort_columns", mode="before")
    @classmethod
    def split_sort_columns(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [c.strip() for c in v.split(",") if c.strip()]
        return v

    @field_validator("sort_order", mode="before")
    @classmethod
    def parse_sort_order(cls, v: Any) -> Any:
        if isinstance(v, str):
            return SortOrder.parse(v)
        return v


def get_config() -> dict[str, Any]:
    return _config


def init(config: dict[str, Any]) -> dict[str, Any]:
    global _config  # noqa: PLW0603
    _config = config
    return _config


def init_from_toml(configfile: str) -> dict[str, Any]:
    try:
        return init(toml.load(configfile))
    except FileNotFoundError:
        raise ConfigNotFound(f"config file {configfile} not found") from None
    except toml.TomlDecodeError as e:
        raise ConfigError(f"unable to parse config file {configfile}: {e!s}") from None


def read_options(overrides: dict[str, Any] | None = None) -> Options:
    """
    Options from the [options] table of the config file, with `overrides`
    taking precedence.
    """
    values = dict(get_config().get("options", {}))
    values.update(overrides or {})
    try:
        return Options(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid options: {e!s}") from None
