"""
Pipeline d'enrichissement du catalogue : chargement -> enrichissement -> ecriture.

Le catalogue est une valeur unique transmise explicitement d'une etape a
l'autre. Il est ecrit une seule fois a la fin ; l'ecriture finale est
relancee depuis l'etat en memoire si elle echoue (persist_attempts).
Des sauvegardes intermediaires peuvent etre activees (checkpoint_every).
"""

import asyncio
from typing import Awaitable, Callable, Optional

from loguru import logger
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from src.core.entities.catalog import Catalog
from src.core.ports.repositories import ICatalogRepository, PersistError
from src.services.catalog_enricher import CatalogEnricherService, ProgressInfo
from src.services.reporting import PipelineReport, compute_coverage


class CatalogEnrichmentPipeline:
    """
    Orchestre une execution complete de l'enrichissement.

    Example:
        pipeline = CatalogEnrichmentPipeline(repository=repo, enricher=service)
        report = await pipeline.run()
        print(report.stats.enriched, report.coverage.with_poster)
    """

    def __init__(
        self,
        repository: ICatalogRepository,
        enricher: CatalogEnricherService,
        persist_attempts: int = 3,
        persist_wait_seconds: float = 1.0,
        checkpoint_every: int = 0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            repository: Stockage du catalogue (lecture et ecriture)
            enricher: Service d'enrichissement
            persist_attempts: Tentatives d'ecriture finale avant abandon
            persist_wait_seconds: Pause entre deux tentatives d'ecriture
            checkpoint_every: Sauvegarde intermediaire tous les N films (0 = aucune)
            sleep: Fonction de pause async entre deux tentatives (injectable pour les tests)
        """
        self._repository = repository
        self._enricher = enricher
        self._persist_attempts = persist_attempts
        self._persist_wait_seconds = persist_wait_seconds
        self._checkpoint_every = checkpoint_every
        self._sleep = sleep
        self._checkpoints = 0

    def load(self) -> Catalog:
        """Charge le catalogue (LoadError propagee)."""
        catalog = self._repository.load()
        logger.info("Catalogue charge", movies=len(catalog.records))
        return catalog

    async def persist(self, catalog: Catalog) -> None:
        """
        Ecrit le catalogue, en relancant l'ecriture complete en cas d'echec.

        Raises:
            PersistError: Si toutes les tentatives ont echoue
        """

        def log_failure(retry_state) -> None:
            logger.warning(
                f"Echec d'ecriture du catalogue (tentative {retry_state.attempt_number}), "
                "nouvel essai",
                error=str(retry_state.outcome.exception()),
            )

        retrying = AsyncRetrying(
            sleep=self._sleep,
            retry=retry_if_exception_type(PersistError),
            stop=stop_after_attempt(self._persist_attempts),
            wait=wait_fixed(self._persist_wait_seconds),
            before_sleep=log_failure,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                self._repository.save(catalog)
        logger.info("Catalogue ecrit", movies=len(catalog.records))

    def _checkpoint(self, catalog: Catalog) -> None:
        """Sauvegarde intermediaire ; un echec n'interrompt pas l'enrichissement."""
        try:
            self._repository.save(catalog)
        except PersistError as e:
            logger.error("Sauvegarde intermediaire impossible", error=str(e))
            return
        self._checkpoints += 1
        logger.info("Sauvegarde intermediaire", checkpoint=self._checkpoints)

    async def run(
        self,
        limit: Optional[int] = None,
        dry_run: bool = False,
        on_progress: Optional[Callable[[ProgressInfo], None]] = None,
        catalog: Optional[Catalog] = None,
    ) -> PipelineReport:
        """
        Execute le pipeline.

        Args:
            limit: Nombre maximum de films a enrichir (None = tous)
            dry_run: Si True, n'ecrit rien (ni checkpoint, ni ecriture finale)
            on_progress: Callback de progression par film
            catalog: Catalogue deja charge (sinon charge depuis le repository)

        Returns:
            PipelineReport avec les compteurs et la couverture finale

        Raises:
            LoadError: Si le catalogue ne peut pas etre charge
            PersistError: Si l'ecriture finale echoue
        """
        if catalog is None:
            catalog = self.load()
        self._checkpoints = 0

        stats = await self._enricher.enrich(
            catalog,
            limit=limit,
            on_progress=on_progress,
            on_checkpoint=None if dry_run else self._checkpoint,
            checkpoint_every=self._checkpoint_every,
        )

        if not dry_run:
            await self.persist(catalog)

        return PipelineReport(
            stats=stats,
            coverage=compute_coverage(catalog),
            persisted=not dry_run,
            checkpoints=self._checkpoints,
        )
