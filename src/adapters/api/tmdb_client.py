"""
Client TMDB pour la recuperation du poster et de la note d'un film.

Implemente l'interface IMetadataClient pour TMDB (The Movie Database).
Le client ne relance jamais une requete : il classe chaque reponse en
succes, RateLimitError (429), ClientError (autre statut non-2xx) ou
TransportError (reseau/timeout). Le retry est gere par le service.

Usage:
    client = TMDBClient(token="your_read_access_token")
    metadata = await client.get_movie_metadata("19995")
    await client.close()
"""

from typing import Optional

import httpx
from loguru import logger

from src.core.ports.api_clients import (
    ClientError,
    IMetadataClient,
    MovieMetadata,
    NotFoundError,
    RateLimitError,
    TransportError,
)


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Convertit le header Retry-After en secondes (None si absent ou date HTTP)."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class TMDBClient(IMetadataClient):
    """
    Client API TMDB pour les metadonnees de films.

    Authentification par Read Access Token (v4) passe en header Bearer.

    Attributes:
        TMDB_BASE_URL: URL de base de l'API TMDB v3

    Example:
        client = TMDBClient(token="xxx")
        try:
            metadata = await client.get_movie_metadata("27205")
        except RateLimitError as e:
            print(f"Quota depasse, reessayer dans {e.retry_after}s")
        await client.close()
    """

    TMDB_BASE_URL = "https://api.themoviedb.org/3"

    def __init__(
        self,
        token: Optional[str],
        base_url: str = TMDB_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialise le client TMDB.

        Args:
            token: Read Access Token TMDB (transmis tel quel en Bearer)
            base_url: URL de base de l'API
            timeout: Timeout par requete en secondes
        """
        self._token = token
        self._base_url = base_url
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={
                    "Accept": "application/json",
                    "Authorization": f"Bearer {self._token}",
                },
                timeout=self._timeout,
            )
        return self._client

    @property
    def source(self) -> str:
        """Retourne l'identifiant de la source API."""
        return "tmdb"

    async def get_movie_metadata(self, tmdb_id: str) -> MovieMetadata:
        """
        Recupere le poster et la note d'un film (GET /movie/{id}).

        Args:
            tmdb_id: ID TMDB du film

        Returns:
            MovieMetadata avec poster_path (optionnel) et vote_average

        Raises:
            ValueError: Si tmdb_id est vide
            RateLimitError: Sur 429
            NotFoundError: Sur 404
            ClientError: Sur tout autre statut non-2xx ou corps invalide
            TransportError: Sur erreur reseau ou timeout
        """
        if not tmdb_id:
            raise ValueError("tmdb_id ne peut pas etre vide")

        client = self._get_client()
        try:
            response = await client.get(f"/movie/{tmdb_id}")
        except httpx.TransportError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if response.status_code == 429:
            raise RateLimitError(_parse_retry_after(response.headers.get("Retry-After")))
        if response.status_code == 404:
            raise NotFoundError(tmdb_id)
        if response.is_error:
            raise ClientError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ClientError(response.status_code, "Reponse JSON invalide") from e
        if not isinstance(data, dict):
            raise ClientError(response.status_code, "Reponse JSON inattendue")

        try:
            vote_average = float(data.get("vote_average") or 0.0)
        except (TypeError, ValueError) as e:
            raise ClientError(response.status_code, "vote_average non numerique") from e

        logger.debug("Metadonnees TMDB recues", tmdb_id=tmdb_id)

        return MovieMetadata(
            tmdb_id=tmdb_id,
            poster_path=data.get("poster_path") or None,
            vote_average=vote_average,
        )

    async def close(self) -> None:
        """
        Ferme le client HTTP.

        Doit etre appele a la fin de l'utilisation pour liberer
        les ressources reseau.
        """
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
