"""
API Client module for fetching Pokemon data from PokeAPI.

This module is the data-access layer between a user interface and PokeAPI.
It implements time-bounded response caching, observable loading state,
structured error classification and bounded-concurrency batch fetching on
top of a pooled aiohttp session.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

import aiohttp

from config.settings import (
    API_REQUEST_TIMEOUT,
    CONNECTION_KEEPALIVE_TIMEOUT,
    CONNECTION_POOL_LIMIT,
    CONNECTION_POOL_LIMIT_PER_HOST,
    DEFAULT_BATCH_SIZE,
    DEFAULT_LIST_LIMIT,
    DEFAULT_LIST_OFFSET,
    POKEAPI_URL,
    USER_AGENT,
)
from utils.api_models import (
    CacheStats,
    LoadingStateSnapshot,
    PokemonListPage,
    PokemonWithSpecies,
)
from utils.cache import ResultCache, make_cache_key
from utils.constants import (
    API_STARTUP_VALIDATION_TIMEOUT,
    CONNECTIVITY_PROBE_PATH,
    ERROR_BATCH_ITEM,
    ERROR_INVALID_DATA,
    ERROR_INVALID_JSON,
    ERROR_INVALID_LIST,
    ERROR_INVALID_LIST_ENTRIES,
    ERROR_INVALID_POKEMON,
    ERROR_INVALID_SPECIES,
    ERROR_NETWORK,
    ERROR_NOT_JSON,
    ERROR_POKEMON_NOT_FOUND,
    ERROR_SPECIES_NOT_FOUND,
    ERROR_UNEXPECTED,
    HTTP_NOT_FOUND,
    JSON_CONTENT_TYPE_MARKER,
    LIST_ENTRY_REQUIRED_FIELDS,
    OP_GET_POKEMON_LIST,
    OP_GET_POKEMON_SPECIES,
    OP_SEARCH_POKEMON,
    POKEMON_REQUIRED_FIELDS,
    SPECIES_REQUIRED_FIELDS,
)
from utils.errors import (
    NetworkError,
    PokeAPIError,
    PokemonAPIError,
    classify_http_status,
)
from utils.loading_state import LoadingStateRegistry, Subscriber
from utils.validators import (
    validate_batch_request,
    validate_list_params,
    validate_pokemon_query,
    validate_species_id,
)

logger = logging.getLogger("pokedex.api")


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def _has_fields(data: Any, fields: Sequence[str]) -> bool:
    """Check that a decoded payload is an object carrying every field."""
    return isinstance(data, dict) and all(data.get(field) is not None for field in fields)


class PokeAPIClient:
    """
    Client for reading Pokemon, species and list data from PokeAPI.

    Key Features:
    - **Connection Pooling**: Uses `aiohttp.TCPConnector` to reuse connections.
    - **Response Caching**: Validated payloads are kept for the cache duration
      and evicted lazily on lookup.
    - **Loading State**: Every tracked call publishes begin/end snapshots to
      subscribers, including on failure.
    - **Error Classification**: Failures surface as `PokemonAPIError` or
      `NetworkError` with status and endpoint attached.
    - **Batch Fetching**: URL lists are fetched in sequential windows of
      concurrent requests, dropping individual failures.
    """

    def __init__(
        self,
        base_url: str = POKEAPI_URL,
        cache: Optional[ResultCache] = None,
        loading_state: Optional[LoadingStateRegistry] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.cache = cache if cache is not None else ResultCache()
        self.loading_state = (
            loading_state if loading_state is not None else LoadingStateRegistry()
        )

        # An injected session belongs to the caller and is not closed here
        self.session = session
        self._owns_session = session is None

        # Session creation lock to prevent race conditions during lazy loading
        self._session_lock = asyncio.Lock()

    async def get_session(self) -> aiohttp.ClientSession:
        """
        Get or create aiohttp session with connection pooling configuration.

        Returns:
            Active aiohttp ClientSession.
        """
        async with self._session_lock:
            if self.session is None or self.session.closed:
                timeout = aiohttp.ClientTimeout(total=API_REQUEST_TIMEOUT)

                connector = aiohttp.TCPConnector(
                    limit=CONNECTION_POOL_LIMIT,
                    limit_per_host=CONNECTION_POOL_LIMIT_PER_HOST,
                    ttl_dns_cache=300,
                    keepalive_timeout=CONNECTION_KEEPALIVE_TIMEOUT,
                    enable_cleanup_closed=True,
                )

                self.session = aiohttp.ClientSession(
                    timeout=timeout,
                    connector=connector,
                    headers={"User-Agent": USER_AGENT},
                )
                self._owns_session = True

                logger.info(
                    "Created aiohttp session with connection pooling",
                    extra={
                        "total_limit": CONNECTION_POOL_LIMIT,
                        "per_host_limit": CONNECTION_POOL_LIMIT_PER_HOST,
                        "request_timeout": API_REQUEST_TIMEOUT,
                    },
                )

        return self.session

    async def close(self) -> None:
        """Close the aiohttp session if this client created it."""
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
            stats = self.cache.stats()
            logger.info(
                f"API client session closed (Cache stats - Hits: {stats['hits']}, Misses: {stats['misses']})"
            )

    async def validate_api_connectivity(
        self, timeout: float = API_STARTUP_VALIDATION_TIMEOUT
    ) -> bool:
        """
        Validate connectivity to PokeAPI.

        Never raises; failures are logged and reported as False.

        Args:
            timeout: Seconds to wait for the probe before giving up.

        Returns:
            True if the probe endpoint answered with HTTP 200.
        """
        test_url = f"{self.base_url}{CONNECTIVITY_PROBE_PATH}"

        try:
            session = await self.get_session()
            async with asyncio.timeout(timeout):
                async with session.get(test_url) as resp:
                    if resp.status == 200:
                        logger.info("✅ PokeAPI is reachable")
                        return True
                    logger.warning(f"⚠️ PokeAPI returned status {resp.status}")
        except asyncio.TimeoutError:
            logger.error(
                "❌ PokeAPI connection timed out",
                extra={"timeout_seconds": timeout},
            )
        except Exception as e:
            logger.error(f"❌ PokeAPI validation failed: {e}")

        return False

    async def _fetch_with_error_handling(self, url: str, operation: str) -> Any:
        """
        Perform one GET and classify every failure.

        The operation is marked as loading before the request is issued and
        unmarked on every exit path. Only transport-level checks happen here;
        callers validate the payload's shape.

        Args:
            url: Fully built request URL.
            operation: Loading-state operation name.

        Returns:
            Decoded JSON object or array.

        Raises:
            PokemonAPIError: Non-2xx status, non-JSON response, undecodable
                body, non-object payload, or any unexpected failure.
            NetworkError: The request could not be completed.
        """
        with self.loading_state.track(operation):
            try:
                session = await self.get_session()
                logger.debug(f"Fetching {url}")

                async with session.get(url) as resp:
                    if not _is_success(resp.status):
                        raise classify_http_status(resp.status, resp.reason, url)

                    content_type = resp.headers.get("Content-Type", "")
                    if JSON_CONTENT_TYPE_MARKER not in content_type:
                        raise PokemonAPIError(ERROR_NOT_JSON, resp.status, url)

                    try:
                        data = await resp.json(content_type=None)
                    except ValueError as e:
                        raise PokemonAPIError(ERROR_INVALID_JSON, None, url) from e

                    if data is None or not isinstance(data, (dict, list)):
                        raise PokemonAPIError(ERROR_INVALID_DATA, resp.status, url)

                    return data

            except PokeAPIError:
                raise
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.warning(
                    "Transport failure", extra={"url": url, "error": str(e)}
                )
                raise NetworkError(ERROR_NETWORK, url) from e
            except Exception as e:
                raise PokemonAPIError(ERROR_UNEXPECTED.format(error=e), None, url) from e

    async def search_pokemon(self, query: Any) -> Dict[str, Any]:
        """
        Fetch a Pokemon by name or national dex number.

        The query is trimmed and lowercased before it is used, so "PIKACHU"
        and " pikachu " share a cache entry and a request URL.

        Args:
            query: Pokemon name or ID.

        Returns:
            Raw Pokemon payload (guaranteed to carry id, name and sprites).

        Raises:
            PokemonAPIError: Invalid query, missing Pokemon, or bad payload.
            NetworkError: The request could not be completed.
        """
        is_valid, error_msg, normalized = validate_pokemon_query(query)
        if not is_valid:
            raise PokemonAPIError(error_msg)

        url = f"{self.base_url}/pokemon/{normalized}"
        cache_key = make_cache_key(url)

        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            data = await self._fetch_with_error_handling(url, OP_SEARCH_POKEMON)

            if not _has_fields(data, POKEMON_REQUIRED_FIELDS):
                raise PokemonAPIError(ERROR_INVALID_POKEMON, None, url)
        except PokemonAPIError as e:
            if e.status == HTTP_NOT_FOUND:
                raise PokemonAPIError(
                    ERROR_POKEMON_NOT_FOUND.format(query=query), HTTP_NOT_FOUND, url
                ) from e
            raise

        self.cache.set(cache_key, data)
        logger.info(f"Found Pokemon {normalized}", extra={"pokemon_id": data["id"]})
        return data

    async def get_pokemon_list(
        self, limit: int = DEFAULT_LIST_LIMIT, offset: int = DEFAULT_LIST_OFFSET
    ) -> PokemonListPage:
        """
        Fetch one page of the Pokemon index.

        Args:
            limit: Page size between 1 and 1000.
            offset: Zero-based start index.

        Returns:
            Page payload whose ``results`` entries all carry name and url.

        Raises:
            PokemonAPIError: Invalid pagination or malformed page.
            NetworkError: The request could not be completed.
        """
        is_valid, error_msg = validate_list_params(limit, offset)
        if not is_valid:
            raise PokemonAPIError(error_msg)

        url = f"{self.base_url}/pokemon"
        cache_key = make_cache_key(url, {"limit": limit, "offset": offset})

        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        full_url = f"{url}?limit={limit}&offset={offset}"
        data = await self._fetch_with_error_handling(full_url, OP_GET_POKEMON_LIST)

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise PokemonAPIError(ERROR_INVALID_LIST, None, full_url)

        # All-or-nothing: one bad entry rejects the page
        if any(not _has_fields(entry, LIST_ENTRY_REQUIRED_FIELDS) for entry in results):
            raise PokemonAPIError(ERROR_INVALID_LIST_ENTRIES, None, full_url)

        self.cache.set(cache_key, data)
        logger.info(
            f"Fetched Pokemon list page with {len(results)} entries",
            extra={"limit": limit, "offset": offset},
        )
        return data

    async def get_pokemon_species(self, species_id: Any) -> Dict[str, Any]:
        """
        Fetch Pokemon species information by ID or name.

        Args:
            species_id: Species ID or name.

        Returns:
            Raw species payload (guaranteed to carry id and name).

        Raises:
            PokemonAPIError: Invalid ID, missing species, or bad payload.
            NetworkError: The request could not be completed.
        """
        is_valid, error_msg, normalized = validate_species_id(species_id)
        if not is_valid:
            raise PokemonAPIError(error_msg)

        url = f"{self.base_url}/pokemon-species/{normalized}"
        cache_key = make_cache_key(url)

        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            data = await self._fetch_with_error_handling(url, OP_GET_POKEMON_SPECIES)

            if not _has_fields(data, SPECIES_REQUIRED_FIELDS):
                raise PokemonAPIError(ERROR_INVALID_SPECIES, None, url)
        except PokemonAPIError as e:
            if e.status == HTTP_NOT_FOUND:
                raise PokemonAPIError(
                    ERROR_SPECIES_NOT_FOUND.format(id=species_id), HTTP_NOT_FOUND, url
                ) from e
            raise

        self.cache.set(cache_key, data)
        logger.info(f"Found species {normalized}")
        return data

    async def get_pokemon_with_species(self, query: Any) -> PokemonWithSpecies:
        """
        Fetch a Pokemon and its species concurrently.

        If either lookup fails, its error propagates and the other lookup is
        left to finish in the background.

        Args:
            query: Pokemon name or ID.

        Returns:
            Dictionary with ``pokemon`` and ``species`` payloads.
        """
        pokemon, species = await asyncio.gather(
            self.search_pokemon(query),
            self.get_pokemon_species(query),
        )
        return {"pokemon": pokemon, "species": species}

    async def batch_fetch_pokemon(
        self, urls: Sequence[str], batch_size: int = DEFAULT_BATCH_SIZE
    ) -> List[Any]:
        """
        Fetch many resource URLs in sequential windows of concurrent requests.

        Window N+1 starts only after every request in window N has settled.
        Failed items are logged and dropped, so the result may be shorter
        than ``urls``; surviving items keep their input order.

        Args:
            urls: Resource URLs, typically the ``url`` fields of a list page.
            batch_size: Number of concurrent requests per window.

        Returns:
            Decoded payloads of the successful fetches.

        Raises:
            PokemonAPIError: If ``urls`` is not a list/tuple or ``batch_size``
                is below 1.
        """
        is_valid, error_msg = validate_batch_request(urls, batch_size)
        if not is_valid:
            raise PokemonAPIError(error_msg)

        if not urls:
            return []

        logger.info(
            f"Batch fetching {len(urls)} URLs",
            extra={"batch_size": batch_size},
        )

        results = []
        for i in range(0, len(urls), batch_size):
            batch = urls[i : i + batch_size]
            batch_results = await asyncio.gather(
                *(self._fetch_batch_item(url) for url in batch)
            )
            results.extend(result for result in batch_results if result is not None)

        if len(results) < len(urls):
            logger.warning(
                f"Batch fetch returned {len(results)} of {len(urls)} items"
            )

        return results

    async def _fetch_batch_item(self, url: str) -> Optional[Any]:
        """Fetch one batch URL without loading-state tracking; None on failure."""
        try:
            cache_key = make_cache_key(url)
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

            session = await self.get_session()
            async with session.get(url) as resp:
                if not _is_success(resp.status):
                    raise PokemonAPIError(
                        ERROR_BATCH_ITEM.format(url=url), resp.status, url
                    )
                data = await resp.json(content_type=None)

            if data is None:
                raise PokemonAPIError(ERROR_INVALID_DATA, resp.status, url)

            # Shares keys with search_pokemon, so only full Pokemon records are cached
            if _has_fields(data, POKEMON_REQUIRED_FIELDS):
                self.cache.set(cache_key, data)
            else:
                logger.debug(
                    "Batch item not cached: incomplete Pokemon data",
                    extra={"url": url},
                )
            return data
        except Exception as e:
            logger.error(
                f"Failed to fetch Pokemon from {url}: {e}",
                extra={"url": url, "status": getattr(e, "status", None)},
            )
            return None

    def subscribe_to_loading_state(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a loading-state listener.

        Args:
            callback: Receives a full snapshot on every transition.

        Returns:
            Unsubscribe function.
        """
        return self.loading_state.subscribe(callback)

    def get_loading_states(self) -> LoadingStateSnapshot:
        """Return a copy of the current loading flags."""
        return self.loading_state.get_snapshot()

    def clear_cache(self) -> None:
        """Clear all cached responses."""
        self.cache.clear()

    def get_cache_stats(self) -> CacheStats:
        """
        Get cache statistics.

        Returns:
            CacheStats object with entry counts and hit/miss counters.
        """
        return self.cache.stats()


_client_instance: Optional[PokeAPIClient] = None


def get_api_client() -> PokeAPIClient:
    """
    Get the shared client instance (Singleton pattern).

    Tests and embedders that need isolated state should construct
    ``PokeAPIClient`` directly instead.

    Returns:
        The process-wide PokeAPIClient.
    """
    global _client_instance

    if _client_instance is None:
        _client_instance = PokeAPIClient()

    return _client_instance


async def close_api_client() -> None:
    """
    Close the shared client instance and cleanup resources.
    """
    global _client_instance
    if _client_instance is not None:
        await _client_instance.close()
        _client_instance = None
