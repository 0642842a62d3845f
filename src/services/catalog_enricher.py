"""
Service d'enrichissement du catalogue (posters et notes TMDB).

CatalogEnricherService parcourt les films eligibles (ID TMDB connu, pas de
poster) et complete leur poster et leur note depuis le client de metadonnees.

Responsabilites:
- Selectionner les films eligibles dans l'ordre du catalogue
- Cadencer les appels API (IntervalPacer, 30 ms entre requetes)
- Relancer le meme film sur rate limiting (MetadataRetrier, cooldown 2 s)
- Compter les succes/echecs et journaliser la progression tous les 200 films

L'enrichissement est additif : un poster existant n'est jamais remplace et
une note connue (> 0) n'est jamais modifiee.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from src.core.entities.catalog import Catalog, CatalogRecord
from src.core.ports.api_clients import (
    IMetadataClient,
    MetadataClientError,
    MovieMetadata,
    RateLimitError,
)
from src.services.pacing import IntervalPacer
from src.services.retry import MetadataRetrier, RetryExhaustedError

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/"
DEFAULT_POSTER_SIZE = "w342"


class EnrichmentResult(Enum):
    """Resultat de l'enrichissement d'un film."""

    SUCCESS = "success"
    NO_POSTER = "no_poster"
    FAILED = "failed"
    EXHAUSTED = "exhausted"


@dataclass
class ProgressInfo:
    """Information de progression pour le callback."""

    current: int
    total: int
    movie_title: str
    movie_year: Optional[int]
    result: EnrichmentResult
    enriched: int = 0
    failed: int = 0
    error: Optional[str] = None


@dataclass
class EnrichmentStats:
    """
    Statistiques d'enrichissement.

    Attributes:
        total: Nombre de films eligibles
        processed: Nombre de films traites (curseur)
        enriched: Films ayant recu un poster
        failed: Films en echec (erreur API, rate limit persistant inclus)
        without_poster: Films trouves mais sans poster chez TMDB
        ratings_updated: Notes renseignees (la note etait inconnue)
        rate_limited: Reponses 429 recues (chacune suivie d'un cooldown)
        exhausted: Films abandonnes apres epuisement des relances sur 429
    """

    total: int = 0
    processed: int = 0
    enriched: int = 0
    failed: int = 0
    without_poster: int = 0
    ratings_updated: int = 0
    rate_limited: int = 0
    exhausted: int = 0


def build_poster_url(image_base_url: str, poster_size: str, poster_path: str) -> str:
    """Compose l'URL du poster : base + taille + fragment (ex: ".../t/p/" + "w342" + "/abc.jpg")."""
    return f"{image_base_url}{poster_size}{poster_path}"


class CatalogEnricherService:
    """
    Service d'enrichissement des posters et notes du catalogue.

    Traitement strictement sequentiel pour respecter le plafond de requetes
    de TMDB. Le catalogue est modifie en place.

    Example:
        service = CatalogEnricherService(
            client=tmdb_client,
            pacer=IntervalPacer(0.03),
            retrier=MetadataRetrier(RetryPolicy()),
        )
        stats = await service.enrich(catalog)
        print(f"Enrichis: {stats.enriched}, Echecs: {stats.failed}")
    """

    def __init__(
        self,
        client: IMetadataClient,
        pacer: IntervalPacer,
        retrier: MetadataRetrier,
        image_base_url: str = DEFAULT_IMAGE_BASE_URL,
        poster_size: str = DEFAULT_POSTER_SIZE,
        progress_every: int = 200,
    ) -> None:
        """
        Initialise le service d'enrichissement.

        Args:
            client: Client de metadonnees (TMDB)
            pacer: Ticker imposant l'intervalle entre requetes
            retrier: Politique de relance (rate limiting, reseau)
            image_base_url: Base des URLs d'images
            poster_size: Palier de largeur du poster (ex: "w342")
            progress_every: Frequence du resume de progression (en films traites)
        """
        self._client = client
        self._pacer = pacer
        self._retrier = retrier
        self._image_base_url = image_base_url
        self._poster_size = poster_size
        self._progress_every = progress_every

    def select_eligible(self, catalog: Catalog, limit: Optional[int] = None) -> list[CatalogRecord]:
        """
        Selectionne les films a enrichir, dans l'ordre du catalogue.

        Args:
            catalog: Catalogue charge
            limit: Nombre maximum de films (None = tous)
        """
        eligible = catalog.eligible_records()
        if limit is not None:
            eligible = eligible[:limit]
        return eligible

    async def _fetch(self, tmdb_id: str) -> MovieMetadata:
        """Un appel API, apres attente du ticker (chaque relance repasse par ici)."""
        await self._pacer.wait()
        return await self._client.get_movie_metadata(tmdb_id)

    def apply_metadata(
        self, record: CatalogRecord, metadata: MovieMetadata, stats: EnrichmentStats
    ) -> EnrichmentResult:
        """
        Applique les metadonnees recues a un film.

        Le poster n'est pose que s'il est fourni. La note n'est posee que si
        elle est positive et que la note actuelle est inconnue (exactement 0).
        """
        if metadata.vote_average > 0 and record.vote_average == 0:
            record.vote_average = metadata.vote_average
            stats.ratings_updated += 1

        if metadata.poster_path:
            record.poster_url = build_poster_url(
                self._image_base_url, self._poster_size, metadata.poster_path
            )
            stats.enriched += 1
            return EnrichmentResult.SUCCESS

        stats.without_poster += 1
        return EnrichmentResult.NO_POSTER

    async def _enrich_record(
        self, record: CatalogRecord, position: int, stats: EnrichmentStats
    ) -> tuple[EnrichmentResult, Optional[str]]:
        """
        Enrichit un seul film.

        Les 429 sont relances sur le meme film par le retrier : le curseur
        de l'appelant n'avance qu'une fois le resultat final connu.
        """

        def on_retry(error: MetadataClientError, delay: float) -> None:
            if isinstance(error, RateLimitError):
                stats.rate_limited += 1
                logger.warning(
                    f"Rate limit TMDB au film {position}, pause de {delay:.1f}s",
                    tmdb_id=record.tmdb_id,
                )
            else:
                logger.warning(
                    f"Erreur reseau au film {position}, nouvel essai dans {delay:.1f}s",
                    tmdb_id=record.tmdb_id,
                    error=str(error),
                )

        try:
            metadata = await self._retrier.call(self._fetch, record.tmdb_id, on_retry=on_retry)
        except RetryExhaustedError as e:
            stats.rate_limited += 1
            stats.failed += 1
            stats.exhausted += 1
            logger.error(
                "Rate limit persistant, film abandonne",
                tmdb_id=record.tmdb_id,
                title=record.title,
                attempts=e.attempts,
            )
            return EnrichmentResult.EXHAUSTED, str(e)
        except MetadataClientError as e:
            stats.failed += 1
            logger.debug(
                "Echec enrichissement",
                tmdb_id=record.tmdb_id,
                title=record.title,
                error_type=type(e).__name__,
                error=str(e),
            )
            return EnrichmentResult.FAILED, str(e)

        return self.apply_metadata(record, metadata, stats), None

    async def enrich(
        self,
        catalog: Catalog,
        limit: Optional[int] = None,
        on_progress: Optional[Callable[[ProgressInfo], None]] = None,
        on_checkpoint: Optional[Callable[[Catalog], None]] = None,
        checkpoint_every: int = 0,
    ) -> EnrichmentStats:
        """
        Enrichit les films eligibles du catalogue.

        Args:
            catalog: Catalogue a enrichir (modifie en place)
            limit: Nombre maximum de films a traiter (None = tous)
            on_progress: Callback appele apres chaque film
            on_checkpoint: Callback de sauvegarde intermediaire du catalogue
            checkpoint_every: Frequence des sauvegardes intermediaires (0 = aucune)

        Returns:
            Statistiques d'enrichissement
        """
        eligible = self.select_eligible(catalog, limit)
        stats = EnrichmentStats(total=len(eligible))
        # Premiere requete immediate, meme si le ticker a deja servi
        self._pacer.reset()

        logger.info(
            f"Films a enrichir: {stats.total}",
            catalog_size=len(catalog.records),
            eligible=stats.total,
        )

        index = 0
        while index < len(eligible):
            record = eligible[index]
            result, error = await self._enrich_record(record, index, stats)

            index += 1
            stats.processed = index

            if on_progress is not None:
                on_progress(
                    ProgressInfo(
                        current=index,
                        total=stats.total,
                        movie_title=record.title,
                        movie_year=record.year,
                        result=result,
                        enriched=stats.enriched,
                        failed=stats.failed,
                        error=error,
                    )
                )

            if self._progress_every and index % self._progress_every == 0:
                logger.info(
                    f"Progression: {index}/{stats.total} "
                    f"({stats.enriched} posters, {stats.failed} echecs)",
                    processed=index,
                    enriched=stats.enriched,
                    failed=stats.failed,
                )

            if on_checkpoint is not None and checkpoint_every and index % checkpoint_every == 0:
                on_checkpoint(catalog)

        logger.info(
            "Enrichissement termine",
            enriched=stats.enriched,
            failed=stats.failed,
            rate_limited=stats.rate_limited,
        )
        return stats
