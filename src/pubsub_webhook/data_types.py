"""Mapping between payload data types and MIME content types."""

from __future__ import annotations

from enum import Enum

from .constants import BINARY_CONTENT_TYPE, JSON_CONTENT_TYPE, PLAIN_TEXT_CONTENT_TYPE
from .errors import UnsupportedMediaTypeError


class DataType(str, Enum):
    """Kind of payload carried in a user event or response."""

    BINARY = "binary"
    TEXT = "text"
    JSON = "json"


_CONTENT_TYPES: dict[str, DataType] = {
    BINARY_CONTENT_TYPE: DataType.BINARY,
    JSON_CONTENT_TYPE: DataType.JSON,
    PLAIN_TEXT_CONTENT_TYPE: DataType.TEXT,
}


def content_type_of(data_type: DataType | str | None) -> str:
    """Get the content type advertised for a data type.

    Anything that is not text or json falls back to binary, which is what
    the service assumes for unknown payloads.
    """
    if data_type == DataType.TEXT:
        return PLAIN_TEXT_CONTENT_TYPE
    if data_type == DataType.JSON:
        return JSON_CONTENT_TYPE
    return BINARY_CONTENT_TYPE


def data_type_of(content_type: str) -> DataType:
    """Get the data type for a content type.

    Args:
        content_type: Media type without parameters, matched case-insensitively

    Returns:
        The matching DataType

    Raises:
        UnsupportedMediaTypeError: If the content type is not one of the
            three known types
    """
    try:
        return _CONTENT_TYPES[content_type.lower()]
    except (KeyError, AttributeError):
        raise UnsupportedMediaTypeError(content_type) from None


def try_data_type_of(content_type: str | None) -> tuple[DataType, bool]:
    """Non-raising variant of data_type_of.

    Returns:
        Tuple of (data_type, ok). On failure the data type is BINARY.
    """
    try:
        return data_type_of(content_type), True  # type: ignore[arg-type]
    except UnsupportedMediaTypeError:
        return DataType.BINARY, False
