"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Port repository : Contrat de persistance du catalogue
- ICatalogRepository : Chargement complet et écriture atomique
- LoadError, PersistError : Échecs fatals de persistance

Port client API : Contrat pour le fournisseur de métadonnées
- IMetadataClient : Poster et note d'un film
- MovieMetadata : Résultat d'un appel
- RateLimitError, ClientError, NotFoundError, TransportError : Échecs par film
"""

from src.core.ports.repositories import (
    CatalogError,
    ICatalogRepository,
    LoadError,
    PersistError,
)
from src.core.ports.api_clients import (
    ClientError,
    IMetadataClient,
    MetadataClientError,
    MovieMetadata,
    NotFoundError,
    RateLimitError,
    TransportError,
)

__all__ = [
    # Repositories
    "ICatalogRepository",
    "CatalogError",
    "LoadError",
    "PersistError",
    # Clients API
    "IMetadataClient",
    "MovieMetadata",
    "MetadataClientError",
    "RateLimitError",
    "ClientError",
    "NotFoundError",
    "TransportError",
]
