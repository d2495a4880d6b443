"""
Input validation and normalization functions.

This module ensures that caller input conforms to expected formats before it
is turned into a PokeAPI URL or cache key. Validation happens before any
network access, so an invalid argument never costs a request.
"""

from typing import Any, Optional, Sequence, Tuple

from config.settings import LIST_LIMIT_MAX, LIST_LIMIT_MIN
from utils.constants import (
    ERROR_BATCH_SIZE,
    ERROR_ID_EMPTY,
    ERROR_ID_INVALID,
    ERROR_ID_REQUIRED,
    ERROR_LIMIT_RANGE,
    ERROR_OFFSET_NEGATIVE,
    ERROR_QUERY_EMPTY,
    ERROR_QUERY_INVALID,
    ERROR_QUERY_REQUIRED,
    ERROR_URLS_NOT_SEQUENCE,
    IDENTIFIER_PATTERN,
)


def normalize_identifier(value: Any) -> str:
    """
    Normalize a Pokemon name or ID for URL construction and cache keys.

    "PIKACHU", " pikachu " and "pikachu" all normalize to "pikachu".
    Numeric IDs are accepted as ints or strings.

    Args:
        value: Raw name or ID.

    Returns:
        Lowercased, trimmed string.
    """
    return str(value).strip().lower()


def _validate_identifier(
    value: Any, required_msg: str, empty_msg: str, invalid_msg: str
) -> Tuple[bool, Optional[str], Optional[str]]:
    if value is None:
        return False, required_msg, None

    normalized = normalize_identifier(value)
    if not normalized:
        return False, empty_msg, None

    if not IDENTIFIER_PATTERN.match(normalized):
        return False, invalid_msg, None

    return True, None, normalized


def validate_pokemon_query(query: Any) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Validate and normalize a Pokemon search query.

    Args:
        query: Pokemon name or national dex number.

    Returns:
        Tuple containing (is_valid, error_message, normalized_query).
        Example success: (True, None, 'pikachu').
    """
    return _validate_identifier(
        query, ERROR_QUERY_REQUIRED, ERROR_QUERY_EMPTY, ERROR_QUERY_INVALID
    )


def validate_species_id(
    species_id: Any,
) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Validate and normalize a Pokemon species ID or name.

    Same rules as ``validate_pokemon_query`` with ID wording in the messages.

    Args:
        species_id: Species name or ID.

    Returns:
        Tuple containing (is_valid, error_message, normalized_id).
    """
    return _validate_identifier(
        species_id, ERROR_ID_REQUIRED, ERROR_ID_EMPTY, ERROR_ID_INVALID
    )


def validate_list_params(limit: int, offset: int) -> Tuple[bool, Optional[str]]:
    """
    Validate pagination parameters for the Pokemon list endpoint.

    Args:
        limit: Page size, inclusive range [LIST_LIMIT_MIN, LIST_LIMIT_MAX].
        offset: Zero-based start index.

    Returns:
        Tuple containing (is_valid, error_message).
    """
    if limit < LIST_LIMIT_MIN or limit > LIST_LIMIT_MAX:
        return False, ERROR_LIMIT_RANGE.format(min=LIST_LIMIT_MIN, max=LIST_LIMIT_MAX)

    if offset < 0:
        return False, ERROR_OFFSET_NEGATIVE

    return True, None


def validate_batch_request(
    urls: Sequence[str], batch_size: int
) -> Tuple[bool, Optional[str]]:
    """
    Validate the arguments of a batch fetch.

    Strings are sequences too, but a single URL is not a batch, so only
    lists and tuples are accepted.

    Args:
        urls: Ordered URLs to fetch.
        batch_size: Number of concurrent requests per window.

    Returns:
        Tuple containing (is_valid, error_message).
    """
    if not isinstance(urls, (list, tuple)):
        return False, ERROR_URLS_NOT_SEQUENCE

    if batch_size < 1:
        return False, ERROR_BATCH_SIZE

    return True, None
