"""
Interfaces ports pour les repositories.

Definit le contrat de persistance du catalogue : chargement complet
et ecriture atomique en une seule fois.
"""

from abc import ABC, abstractmethod

from src.core.entities.catalog import Catalog


class CatalogError(Exception):
    """Erreur de base pour la persistance du catalogue."""


class LoadError(CatalogError):
    """Catalogue illisible ou mal forme."""


class PersistError(CatalogError):
    """Ecriture du catalogue impossible."""


class ICatalogRepository(ABC):
    """
    Interface de stockage du catalogue.

    Le catalogue est lu et ecrit en entier : aucune lecture partielle,
    aucune ecriture incrementale.
    """

    @abstractmethod
    def load(self) -> Catalog:
        """
        Charge le catalogue complet.

        Raises:
            LoadError: Si le stockage est illisible ou le contenu mal forme
        """
        ...

    @abstractmethod
    def save(self, catalog: Catalog) -> None:
        """
        Ecrit le catalogue de maniere atomique.

        Raises:
            PersistError: Si la cible ne peut pas etre ecrite
        """
        ...
