"""
Resume d'un enrichissement et couverture du catalogue.
"""

from dataclasses import dataclass

from src.core.entities.catalog import Catalog
from src.services.catalog_enricher import EnrichmentStats


@dataclass(frozen=True)
class CatalogCoverage:
    """Couverture posters/notes d'un catalogue."""

    total: int
    with_poster: int
    with_rating: int
    eligible: int

    @property
    def poster_ratio(self) -> float:
        return self.with_poster / self.total if self.total else 0.0

    @property
    def rating_ratio(self) -> float:
        return self.with_rating / self.total if self.total else 0.0


def compute_coverage(catalog: Catalog) -> CatalogCoverage:
    """Calcule la couverture posters/notes du catalogue."""
    return CatalogCoverage(
        total=len(catalog.records),
        with_poster=catalog.poster_count,
        with_rating=catalog.rated_count,
        eligible=len(catalog.eligible_records()),
    )


@dataclass(frozen=True)
class PipelineReport:
    """
    Resultat d'une execution du pipeline.

    Attributes:
        stats: Compteurs de l'enrichissement
        coverage: Couverture du catalogue apres enrichissement
        persisted: Vrai si le catalogue a ete reecrit (faux en dry-run)
        checkpoints: Nombre de sauvegardes intermediaires reussies
    """

    stats: EnrichmentStats
    coverage: CatalogCoverage
    persisted: bool
    checkpoints: int = 0


def summary_lines(report: PipelineReport) -> list[str]:
    """Lignes de resume lisibles (console et log)."""
    stats = report.stats
    coverage = report.coverage
    lines = [
        f"Enrichis: {stats.enriched} posters",
        f"Echecs: {stats.failed}",
    ]
    if stats.without_poster:
        lines.append(f"Sans poster chez TMDB: {stats.without_poster}")
    if stats.ratings_updated:
        lines.append(f"Notes renseignees: {stats.ratings_updated}")
    if stats.rate_limited:
        lines.append(f"Rate limit (429): {stats.rate_limited}")
    if stats.exhausted:
        lines.append(f"Abandonnes (rate limit persistant): {stats.exhausted}")
    lines.append(f"Avec poster: {coverage.with_poster}/{coverage.total} ({coverage.poster_ratio:.1%})")
    lines.append(f"Avec note: {coverage.with_rating}/{coverage.total} ({coverage.rating_ratio:.1%})")
    if not report.persisted:
        lines.append("Catalogue non modifie (dry-run)")
    return lines
