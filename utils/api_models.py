"""
Type definitions for API responses and client diagnostics to ensure strict
typing and reduce runtime errors.
"""

from typing import Any, Dict, List, Optional, TypedDict


class PokemonListEntry(TypedDict):
    """A named resource reference inside a Pokemon list page."""

    name: str
    url: str


class PokemonListPage(TypedDict, total=False):
    """
    Represents one page of ``GET /pokemon?limit=&offset=``.

    Only ``results`` is validated; the pagination links are passed through
    untouched because callers own pagination.
    """

    count: int
    next: Optional[str]
    previous: Optional[str]
    results: List[PokemonListEntry]


class PokemonWithSpecies(TypedDict):
    """
    Combined result of a Pokemon lookup and its species lookup.

    Attributes:
        pokemon: Raw ``/pokemon/{name}`` payload (id, name, sprites, ...).
        species: Raw ``/pokemon-species/{name}`` payload (id, name, ...).
    """

    pokemon: Dict[str, Any]
    species: Dict[str, Any]


class LoadingStateSnapshot(TypedDict):
    """
    Represents the in-flight flag of every tracked operation.

    Snapshots are copies; mutating one never affects the registry.
    """

    search_pokemon: bool
    get_pokemon_list: bool
    get_pokemon_species: bool


class CacheStats(TypedDict):
    """
    Represents cache statistics.

    Attributes:
        total_entries: Number of stored entries, fresh or stale.
        valid_entries: Entries still inside the cache duration.
        expired_entries: Entries past the cache duration that have not yet
            been evicted by a lookup.
        cache_duration: Freshness window in seconds.
        hits: Number of lookups answered from the cache.
        misses: Number of lookups that fell through to the API.
    """

    total_entries: int
    valid_entries: int
    expired_entries: int
    cache_duration: float
    hits: int
    misses: int
