"""
This module contains static constant definitions used throughout the client,
including:
- Operation names reported through the loading-state registry
- HTTP response expectations (content type, success range)
- Regular expressions for input validation
- User-facing messages (validation, HTTP classification, transport errors)
"""

import re

# Operation names (keys of the loading-state snapshot)
OP_SEARCH_POKEMON = "search_pokemon"
OP_GET_POKEMON_LIST = "get_pokemon_list"
OP_GET_POKEMON_SPECIES = "get_pokemon_species"
TRACKED_OPERATIONS = (OP_SEARCH_POKEMON, OP_GET_POKEMON_LIST, OP_GET_POKEMON_SPECIES)

# HTTP Expectations
JSON_CONTENT_TYPE_MARKER = "application/json"
HTTP_NOT_FOUND = 404
HTTP_TOO_MANY_REQUESTS = 429
HTTP_SERVER_ERROR_MIN = 500
CONNECTIVITY_PROBE_PATH = "/pokemon/1"
API_STARTUP_VALIDATION_TIMEOUT = 10  # Seconds

# Input Validation
IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z0-9\-]+$")

# Validation Messages
ERROR_QUERY_REQUIRED = "Query parameter is required"
ERROR_QUERY_EMPTY = "Query parameter cannot be empty"
ERROR_QUERY_INVALID = "Query must contain only alphanumeric characters and hyphens"
ERROR_ID_REQUIRED = "ID parameter is required"
ERROR_ID_EMPTY = "ID parameter cannot be empty"
ERROR_ID_INVALID = "ID must contain only alphanumeric characters and hyphens"
ERROR_LIMIT_RANGE = "Limit must be between {min} and {max}"
ERROR_OFFSET_NEGATIVE = "Offset must be 0 or greater"
ERROR_URLS_NOT_SEQUENCE = "URLs parameter must be an array"
ERROR_BATCH_SIZE = "Batch size must be at least 1"

# HTTP Classification Messages
ERROR_RESOURCE_NOT_FOUND = "Resource not found!"
ERROR_SERVER = "Server error: {reason}"
ERROR_TOO_MANY_REQUESTS = "Too many requests. Please try again later."
ERROR_HTTP = "HTTP Error: {status} {reason}"
ERROR_NOT_JSON = "Invalid response format. Expected JSON"
ERROR_INVALID_JSON = "Invalid JSON response"
ERROR_INVALID_DATA = "Invalid response data"
ERROR_UNEXPECTED = "Unexpected error: {error}"
ERROR_NETWORK = "Network error: Please check your internet connection"

# Payload Shape Messages
ERROR_INVALID_POKEMON = "Invalid Pokemon data structure received"
ERROR_INVALID_LIST = "Invalid Pokemon list data structure received"
ERROR_INVALID_LIST_ENTRIES = "Some Pokemon entries have invalid data structure"
ERROR_INVALID_SPECIES = "Invalid Pokemon species data structure received"
ERROR_POKEMON_NOT_FOUND = 'Pokemon "{query}" not found'
ERROR_SPECIES_NOT_FOUND = 'Pokemon species with ID "{id}" not found'
ERROR_BATCH_ITEM = "Failed to fetch Pokemon from {url}"

# Required payload fields
POKEMON_REQUIRED_FIELDS = ("id", "name", "sprites")
SPECIES_REQUIRED_FIELDS = ("id", "name")
LIST_ENTRY_REQUIRED_FIELDS = ("name", "url")
