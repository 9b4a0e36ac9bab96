"""Shared parsing helpers for environment and CLI value normalization."""

from __future__ import annotations


_TRUE_BOOLEAN_LITERAL = "true"


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_optional_float(value: object, field_name: str) -> float | None:
    """Parse an optional floating point value, returning `None` when blank.

    Raises:
        ValueError: If the value is present but not a valid number.
    """

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    try:
        return float(normalized)
    except ValueError as exc:
        raise ValueError(
            f"`{field_name}` must be a number, got `{normalized}`."
        ) from exc


def parse_optional_positive_float(value: object, field_name: str) -> float | None:
    """Parse an optional strictly positive float value."""

    parsed = parse_optional_float(value, field_name)
    if parsed is not None and parsed <= 0:
        raise ValueError(f"`{field_name}` must be a positive number.")
    return parsed


def parse_literal_true(value: object) -> bool | None:
    """Parse a boolean that is `True` only for the literal string `true`.

    Blank or missing values return `None`; every other token returns `False`.
    """

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    return normalized == _TRUE_BOOLEAN_LITERAL
