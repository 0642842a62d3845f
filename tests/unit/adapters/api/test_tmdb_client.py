"""
Tests for TMDBClient - TMDB API client implementation.

Uses respx to mock httpx calls and verifies:
- Details are mapped to MovieMetadata (poster path, vote average)
- The bearer credential is forwarded
- 429 / 404 / other statuses / network errors map to distinct failure kinds
- The client never retries by itself
"""

import httpx
import pytest
import respx

from src.adapters.api.tmdb_client import TMDBClient
from src.core.ports.api_clients import (
    ClientError,
    IMetadataClient,
    MovieMetadata,
    NotFoundError,
    RateLimitError,
    TransportError,
)
from tests.fixtures.tmdb_responses import (
    TMDB_MOVIE_DETAILS_RESPONSE,
    TMDB_MOVIE_WITHOUT_POSTER_RESPONSE,
    TMDB_NOT_FOUND_RESPONSE,
    TMDB_RATE_LIMIT_RESPONSE,
)

MOVIE_URL = "https://api.themoviedb.org/3/movie/653"


@pytest.fixture
def tmdb_client() -> TMDBClient:
    """TMDBClient instance with a test token."""
    return TMDBClient(token="test_token")


class TestTMDBClientInterface:
    """Test TMDBClient implements IMetadataClient correctly."""

    def test_implements_interface(self, tmdb_client: TMDBClient):
        assert isinstance(tmdb_client, IMetadataClient)

    def test_source_property_returns_tmdb(self, tmdb_client: TMDBClient):
        assert tmdb_client.source == "tmdb"


class TestGetMovieMetadata:
    """Tests for TMDBClient.get_movie_metadata()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_returns_poster_and_vote_average(self, tmdb_client: TMDBClient):
        """A 200 response is mapped to MovieMetadata."""
        respx.get(MOVIE_URL).mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_DETAILS_RESPONSE)
        )

        metadata = await tmdb_client.get_movie_metadata("653")

        assert metadata == MovieMetadata(tmdb_id="653", poster_path="/abc.jpg", vote_average=7.7)
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_bearer_token(self, tmdb_client: TMDBClient):
        """The credential is forwarded as a Bearer header."""
        route = respx.get(MOVIE_URL).mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_DETAILS_RESPONSE)
        )

        await tmdb_client.get_movie_metadata("653")

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer test_token"
        assert request.headers["Accept"] == "application/json"
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_poster_and_zero_votes(self, tmdb_client: TMDBClient):
        """poster_path null and vote_average 0 map to None and 0.0."""
        respx.get("https://api.themoviedb.org/3/movie/999001").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_WITHOUT_POSTER_RESPONSE)
        )

        metadata = await tmdb_client.get_movie_metadata("999001")

        assert metadata.poster_path is None
        assert metadata.vote_average == 0.0
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_absent_vote_average_defaults_to_zero(self, tmdb_client: TMDBClient):
        respx.get(MOVIE_URL).mock(
            return_value=httpx.Response(200, json={"id": 653, "poster_path": "/abc.jpg"})
        )

        metadata = await tmdb_client.get_movie_metadata("653")

        assert metadata.vote_average == 0.0
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_429_raises_rate_limit_error_without_retry(self, tmdb_client: TMDBClient):
        """429 is classified as RateLimitError and is not retried by the client."""
        route = respx.get(MOVIE_URL).mock(
            return_value=httpx.Response(
                429, headers={"Retry-After": "2"}, json=TMDB_RATE_LIMIT_RESPONSE
            )
        )

        with pytest.raises(RateLimitError) as exc_info:
            await tmdb_client.get_movie_metadata("653")

        assert exc_info.value.retry_after == 2
        assert route.call_count == 1
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_429_without_retry_after(self, tmdb_client: TMDBClient):
        respx.get(MOVIE_URL).mock(return_value=httpx.Response(429))

        with pytest.raises(RateLimitError) as exc_info:
            await tmdb_client.get_movie_metadata("653")

        assert exc_info.value.retry_after is None
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_raises_not_found(self, tmdb_client: TMDBClient):
        respx.get(MOVIE_URL).mock(
            return_value=httpx.Response(404, json=TMDB_NOT_FOUND_RESPONSE)
        )

        with pytest.raises(NotFoundError) as exc_info:
            await tmdb_client.get_movie_metadata("653")

        assert exc_info.value.status_code == 404
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    @pytest.mark.parametrize("status_code", [400, 401, 500, 503])
    async def test_other_errors_raise_client_error(self, tmdb_client: TMDBClient, status_code):
        """Any other non-2xx status is a non-retryable ClientError."""
        route = respx.get(MOVIE_URL).mock(return_value=httpx.Response(status_code))

        with pytest.raises(ClientError) as exc_info:
            await tmdb_client.get_movie_metadata("653")

        assert exc_info.value.status_code == status_code
        assert not isinstance(exc_info.value, NotFoundError)
        assert route.call_count == 1
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_json_raises_client_error(self, tmdb_client: TMDBClient):
        respx.get(MOVIE_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(ClientError):
            await tmdb_client.get_movie_metadata("653")
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_object_json_raises_client_error(self, tmdb_client: TMDBClient):
        respx.get(MOVIE_URL).mock(return_value=httpx.Response(200, json=[1, 2, 3]))

        with pytest.raises(ClientError):
            await tmdb_client.get_movie_metadata("653")
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_connect_error_raises_transport_error(self, tmdb_client: TMDBClient):
        respx.get(MOVIE_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(TransportError):
            await tmdb_client.get_movie_metadata("653")
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_raises_transport_error(self, tmdb_client: TMDBClient):
        respx.get(MOVIE_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(TransportError):
            await tmdb_client.get_movie_metadata("653")
        await tmdb_client.close()

    @pytest.mark.asyncio
    async def test_empty_id_is_rejected(self, tmdb_client: TMDBClient):
        with pytest.raises(ValueError):
            await tmdb_client.get_movie_metadata("")


class TestClientLifecycle:
    """Tests for lazy client creation and close()."""

    @pytest.mark.asyncio
    async def test_close_without_requests_is_noop(self, tmdb_client: TMDBClient):
        await tmdb_client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_recreated_after_close(self, tmdb_client: TMDBClient):
        route = respx.get(MOVIE_URL).mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_DETAILS_RESPONSE)
        )

        await tmdb_client.get_movie_metadata("653")
        await tmdb_client.close()
        await tmdb_client.get_movie_metadata("653")
        await tmdb_client.close()

        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_custom_base_url(self):
        client = TMDBClient(token="t", base_url="https://tmdb.test/3")
        respx.get("https://tmdb.test/3/movie/1").mock(
            return_value=httpx.Response(200, json={"poster_path": "/p.jpg", "vote_average": 5})
        )

        metadata = await client.get_movie_metadata("1")

        assert metadata.poster_path == "/p.jpg"
        assert metadata.vote_average == 5.0
        await client.close()
