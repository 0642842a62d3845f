"""
Business entities representing core domain concepts.

Entities are mutable objects with identity that persist over time.

Exports:
- Catalog: The full movie catalog (metadata block + records)
- CatalogRecord: A single film of the catalog
"""

from src.core.entities.catalog import Catalog, CatalogRecord

__all__ = [
    "Catalog",
    "CatalogRecord",
]
