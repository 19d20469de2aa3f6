"""Composite identifiers for relationship records.

Memberships and vault grants have no identifier of their own in the
organization backend. Their identity is the pair of keys they relate,
joined with a slash (e.g. "<GROUP ID>/<USER ID>").

This is part of the Shared Kernel - every backend must produce and parse
these identifiers identically.
"""

from __future__ import annotations

SEPARATOR = "/"
DEFAULT_SHAPE = "<A>/<B>"


class InvalidIDError(ValueError):
    """Raised when a composite identifier is malformed or inconsistent.

    Covers both identifiers that cannot be split into two keys and
    identifiers whose keys disagree with the separately supplied fields.
    """

    pass


def pack_id(first: str, second: str) -> str:
    """Join two keys into a composite identifier.

    Example:
        >>> pack_id("vault-1", "group-1")
        'vault-1/group-1'
    """
    return f"{first}{SEPARATOR}{second}"


def unpack_id(value: str, shape: str = DEFAULT_SHAPE) -> tuple[str, str]:
    """Split a composite identifier on its first separator.

    Only the first separator splits, so "a/b/c" unpacks to ("a", "b/c");
    callers that also hold the separate key fields should use verify_id
    to catch that kind of inconsistency.

    Args:
        value: The composite identifier
        shape: Human readable shape used in the error message

    Returns:
        The two keys, in packing order

    Raises:
        InvalidIDError: If the value holds no separator
    """
    parts = value.split(SEPARATOR, 1)
    if len(parts) != 2:
        raise InvalidIDError(f"invalid ID format: {value} (expected {shape})")

    return parts[0], parts[1]


def verify_id(
    value: str,
    first: str,
    second: str,
    first_label: str,
    second_label: str,
    shape: str = DEFAULT_SHAPE,
) -> None:
    """Check that a composite identifier matches the given key fields.

    Args:
        value: The composite identifier supplied alongside the keys
        first: Expected first key
        second: Expected second key
        first_label: Name of the first key for error messages (e.g. "group")
        second_label: Name of the second key for error messages (e.g. "user")
        shape: Human readable shape used when the value cannot be unpacked

    Raises:
        InvalidIDError: If the value is malformed or either key differs
    """
    got_first, got_second = unpack_id(value, shape)

    if got_first != first:
        raise InvalidIDError(f"resource id is wrong based on {first_label} ID")

    if got_second != second:
        raise InvalidIDError(f"resource id is wrong based on {second_label} ID")
