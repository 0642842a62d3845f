"""Sous-package CLI commands - re-exporte les commandes publiques."""

from src.adapters.cli.commands.catalog_commands import (
    catalog_stats,
)
from src.adapters.cli.commands.enrichment_commands import (
    enrich_posters,
)

__all__ = [
    # catalogue
    "catalog_stats",
    # enrichment
    "enrich_posters",
]
