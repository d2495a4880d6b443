import pytest

from utils.constants import (
    ERROR_BATCH_SIZE,
    ERROR_ID_EMPTY,
    ERROR_ID_REQUIRED,
    ERROR_OFFSET_NEGATIVE,
    ERROR_QUERY_EMPTY,
    ERROR_QUERY_INVALID,
    ERROR_QUERY_REQUIRED,
    ERROR_URLS_NOT_SEQUENCE,
)
from utils.errors import NetworkError, PokeAPIError, PokemonAPIError, classify_http_status
from utils.validators import (
    validate_batch_request,
    validate_list_params,
    validate_pokemon_query,
    validate_species_id,
)


class TestIdentifierValidation:
    @pytest.mark.parametrize("raw", ["PIKACHU", " pikachu ", "pikachu"])
    def test_query_is_normalized(self, raw):
        assert validate_pokemon_query(raw) == (True, None, "pikachu")

    def test_numeric_id_is_accepted(self):
        assert validate_pokemon_query(25) == (True, None, "25")

    def test_hyphenated_names_are_valid(self):
        assert validate_pokemon_query("Mr-Mime") == (True, None, "mr-mime")

    @pytest.mark.parametrize(
        "raw, message",
        [
            (None, ERROR_QUERY_REQUIRED),
            ("", ERROR_QUERY_EMPTY),
            ("   ", ERROR_QUERY_EMPTY),
            ("pika chu", ERROR_QUERY_INVALID),
            ("pikachu!", ERROR_QUERY_INVALID),
            ("farfetch'd", ERROR_QUERY_INVALID),
        ],
    )
    def test_invalid_queries(self, raw, message):
        assert validate_pokemon_query(raw) == (False, message, None)

    def test_species_uses_id_wording(self):
        assert validate_species_id(None) == (False, ERROR_ID_REQUIRED, None)
        assert validate_species_id(" ") == (False, ERROR_ID_EMPTY, None)


class TestListAndBatchValidation:
    @pytest.mark.parametrize("limit", [1, 151, 1000])
    def test_limit_in_range(self, limit):
        assert validate_list_params(limit, 0) == (True, None)

    @pytest.mark.parametrize("limit", [0, -5, 1001])
    def test_limit_out_of_range(self, limit):
        is_valid, message = validate_list_params(limit, 0)
        assert is_valid is False
        assert message == "Limit must be between 1 and 1000"

    def test_negative_offset(self):
        assert validate_list_params(20, -1) == (False, ERROR_OFFSET_NEGATIVE)

    @pytest.mark.parametrize("urls", ["https://a.test/1", None, {"a": 1}, 42])
    def test_batch_requires_list(self, urls):
        assert validate_batch_request(urls, 5) == (False, ERROR_URLS_NOT_SEQUENCE)

    def test_batch_size_must_be_positive(self):
        assert validate_batch_request([], 0) == (False, ERROR_BATCH_SIZE)


class TestErrorClassification:
    @pytest.mark.parametrize(
        "status, reason, message",
        [
            (404, "Not Found", "Resource not found!"),
            (500, "Internal Server Error", "Server error: Internal Server Error"),
            (503, "Service Unavailable", "Server error: Service Unavailable"),
            (429, "Too Many Requests", "Too many requests. Please try again later."),
            (418, "I'm a teapot", "HTTP Error: 418 I'm a teapot"),
            (301, None, "HTTP Error: 301 "),
        ],
    )
    def test_classify_http_status(self, status, reason, message):
        error = classify_http_status(status, reason, "https://a.test/x")
        assert isinstance(error, PokemonAPIError)
        assert error.message == message
        assert error.status == status
        assert error.endpoint == "https://a.test/x"

    def test_network_error_has_no_status(self):
        error = NetworkError("offline", "https://a.test/x")
        assert isinstance(error, PokeAPIError)
        assert str(error) == "offline"
        assert error.status is None
        assert error.endpoint == "https://a.test/x"
