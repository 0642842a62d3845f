"""
Container d'injection de dependances via dependency-injector.

Assemble le repository du catalogue, le client TMDB et les services
d'enrichissement a partir des Settings.
"""

from dependency_injector import containers, providers

from .adapters.api.tmdb_client import TMDBClient
from .config import Settings
from .infrastructure.persistence.repositories import JsonCatalogRepository
from .services.catalog_enricher import CatalogEnricherService
from .services.pacing import IntervalPacer
from .services.pipeline import CatalogEnrichmentPipeline
from .services.retry import MetadataRetrier, RetryPolicy


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.config.override(Settings(catalog_path=path))  # optionnel
        pipeline = container.enrichment_pipeline()
        report = await pipeline.run()
        await container.tmdb_client().close()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Repository - Factory, le chemin peut etre surcharge a l'appel
    catalog_repository = providers.Factory(
        JsonCatalogRepository,
        path=config.provided.catalog_path,
        indent=config.provided.catalog_indent,
    )

    # Client API - Singleton (un seul pool de connexions)
    tmdb_client = providers.Singleton(
        TMDBClient,
        token=config.provided.tmdb_token,
        base_url=config.provided.tmdb_base_url,
        timeout=config.provided.tmdb_timeout_seconds,
    )

    # Cadence et relances - Factory, etat propre a chaque execution
    pacer = providers.Factory(
        IntervalPacer,
        interval_seconds=config.provided.request_interval_seconds,
    )

    retry_policy = providers.Factory(
        RetryPolicy,
        cooldown_seconds=config.provided.rate_limit_cooldown_seconds,
        max_rate_limit_retries=config.provided.max_rate_limit_retries,
        backoff_multiplier=config.provided.backoff_multiplier,
        max_cooldown_seconds=config.provided.max_cooldown_seconds,
        transport_retries=config.provided.transport_retries,
    )

    retrier = providers.Factory(MetadataRetrier, policy=retry_policy)

    catalog_enricher = providers.Factory(
        CatalogEnricherService,
        client=tmdb_client,
        pacer=pacer,
        retrier=retrier,
        image_base_url=config.provided.image_base_url,
        poster_size=config.provided.poster_size,
        progress_every=config.provided.progress_every,
    )

    # Utiliser: container.enrichment_pipeline(checkpoint_every=N) pour surcharger
    enrichment_pipeline = providers.Factory(
        CatalogEnrichmentPipeline,
        repository=catalog_repository,
        enricher=catalog_enricher,
        persist_attempts=config.provided.persist_attempts,
        checkpoint_every=config.provided.checkpoint_every,
    )
