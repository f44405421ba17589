from typing import Any


class QuantityParseError(ValueError):
    def __init__(self, msg: Any) -> None:
        super().__init__("unable to parse quantity: " + str(msg))


class SortOrderError(ValueError):
    pass


class RecordError(Exception):
    def __init__(self, msg: Any) -> None:
        super().__init__("invalid recommendation record: " + str(msg))


class ConfigNotFound(Exception):
    pass


class ConfigError(Exception):
    pass
