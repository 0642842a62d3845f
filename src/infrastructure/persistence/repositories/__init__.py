"""Implementations des repositories (catalogue JSON)."""

from src.infrastructure.persistence.repositories.catalog_repository import JsonCatalogRepository

__all__ = [
    "JsonCatalogRepository",
]
