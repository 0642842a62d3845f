"""
Module de persistance du catalogue.

Le catalogue est stocke dans un document JSON unique :

- repositories/catalog_repository.py : lecture complete et ecriture atomique

Usage:
    from src.infrastructure.persistence import JsonCatalogRepository

    repo = JsonCatalogRepository(Path("catalog.json"))
    catalog = repo.load()
    repo.save(catalog)
"""

from src.infrastructure.persistence.repositories import JsonCatalogRepository

__all__ = [
    "JsonCatalogRepository",
]
