"""Exceptions raised while scanning byte ranges of delimited files."""

from typing import Any


class ScanError(Exception):
    """Base class for errors raised by range scanning."""


class ScanStateError(ScanError, RuntimeError):
    """A producer operation was called out of lifecycle order."""


class FieldCastError(ScanError, ValueError):
    """A raw text field could not be converted to its declared type."""

    def __init__(self, field_index: int, field_type: Any, value: str):
        self.field_index = field_index
        self.field_type = field_type
        self.value = value
        type_name = "an undeclared type" if field_type is None else getattr(field_type, "name", field_type)
        super().__init__(f"cannot cast field {field_index} value {value!r} to {type_name}")
