"""
Interfaces ports pour les clients API.

Definit le contrat du client de metadonnees utilise par l'enrichissement
du catalogue, ainsi que les types d'echec qu'il expose. Le client se contente
de classer les reponses : la politique de retry appartient au service.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MovieMetadata:
    """
    Metadonnees d'un film retournees par l'API.

    Attributs :
        tmdb_id : ID TMDB demande
        poster_path : Fragment de chemin du poster (ex: "/abc.jpg"), None si absent
        vote_average : Note moyenne (0.0 si absente)
    """

    tmdb_id: str
    poster_path: Optional[str] = None
    vote_average: float = 0.0


class MetadataClientError(Exception):
    """Erreur de base pour un appel au client de metadonnees."""


class RateLimitError(MetadataClientError):
    """
    Exception levee quand l'API retourne 429 Too Many Requests.

    Attributes:
        retry_after: Nombre de secondes a attendre (depuis le header Retry-After),
                     ou None si non specifie.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


class ClientError(MetadataClientError):
    """
    Requete rejetee par l'API (statut non-2xx autre que 429, ou reponse invalide).

    Attributes:
        status_code: Code HTTP retourne par l'API
    """

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"HTTP {status_code}")


class NotFoundError(ClientError):
    """ID inconnu de l'API (404)."""

    def __init__(self, tmdb_id: str) -> None:
        self.tmdb_id = tmdb_id
        super().__init__(404, f"Film {tmdb_id} introuvable")


class TransportError(MetadataClientError):
    """Echec reseau ou timeout avant d'obtenir une reponse."""


class IMetadataClient(ABC):
    """
    Interface d'un fournisseur de metadonnees de films.

    Les implementations levent RateLimitError, ClientError ou TransportError
    et ne relancent jamais elles-memes une requete.
    """

    @abstractmethod
    async def get_movie_metadata(self, tmdb_id: str) -> MovieMetadata:
        """
        Recupere le poster et la note d'un film.

        Args :
            tmdb_id : ID du film chez le fournisseur (non vide)

        Retourne :
            MovieMetadata du film

        Raises :
            RateLimitError, ClientError, TransportError
        """
        ...

    @property
    @abstractmethod
    def source(self) -> str:
        """Retourne l'identifiant de la source API (ex: 'tmdb')."""
        ...

    async def close(self) -> None:
        """Libere les ressources reseau (rien par defaut)."""
