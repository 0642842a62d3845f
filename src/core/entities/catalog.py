"""
Entites du catalogue de films.

Le catalogue est un document JSON compose d'un bloc de metadonnees opaque
et d'un tableau de films. Seuls le poster et la note sont ecrits par
l'enrichissement, tous les autres champs sont conserves tels quels.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class CatalogRecord:
    """
    Film du catalogue.

    Attributes:
        id: Identifiant interne stable
        title: Titre du film
        year: Annee de sortie
        poster_url: URL complete du poster (None si absent)
        tmdb_id: ID TMDB, entree de l'enrichissement (jamais ecrit)
        imdb_id: ID IMDb (lecture seule)
        internet_archive_id: ID Internet Archive (lecture seule)
        youtube_id: ID YouTube (lecture seule)
        vote_average: Note TMDB, 0 signifie inconnue
        document: Document JSON source du film, reecrit tel quel a la sauvegarde
    """

    id: str
    title: str
    year: Optional[int] = None
    poster_url: Optional[str] = None
    tmdb_id: Optional[str] = None
    imdb_id: Optional[str] = None
    internet_archive_id: Optional[str] = None
    youtube_id: Optional[str] = None
    vote_average: float = 0.0
    document: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def has_poster(self) -> bool:
        """Vrai si le film a deja un poster."""
        return bool(self.poster_url)

    @property
    def has_rating(self) -> bool:
        """Vrai si le film a une note connue."""
        return self.vote_average > 0

    @property
    def is_eligible(self) -> bool:
        """
        Vrai si le film doit etre enrichi.

        Un film est eligible s'il a un ID TMDB et pas encore de poster.
        Un poster existant n'est jamais remplace.
        """
        return bool(self.tmdb_id) and not self.has_poster


@dataclass
class Catalog:
    """
    Catalogue complet charge en memoire.

    Attributes:
        meta: Bloc de metadonnees opaque, conserve a l'identique
        records: Films dans l'ordre du document
        extra: Autres cles de premier niveau du document (conservees)
    """

    meta: Optional[dict[str, Any]] = None
    records: list[CatalogRecord] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def eligible_records(self) -> list[CatalogRecord]:
        """Liste les films eligibles a l'enrichissement, dans l'ordre du catalogue."""
        return [record for record in self.records if record.is_eligible]

    @property
    def poster_count(self) -> int:
        """Nombre de films avec un poster."""
        return sum(1 for record in self.records if record.has_poster)

    @property
    def rated_count(self) -> int:
        """Nombre de films avec une note connue."""
        return sum(1 for record in self.records if record.has_rating)
