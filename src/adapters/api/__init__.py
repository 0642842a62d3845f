"""
Clients API externes pour l'enrichissement du catalogue.

- TMDBClient: The Movie Database (poster et note d'un film)

Les clients implementent IMetadataClient defini dans core/ports/api_clients.py.
"""

from src.adapters.api.tmdb_client import TMDBClient

__all__ = [
    "TMDBClient",
]
