"""
Implementation JSON du repository catalogue.

Le catalogue est un document {"meta": {...}, "movies": [...]}. Chaque film
garde son document source : seuls posterUrl et voteAverage sont reecrits,
tous les autres champs (et le bloc meta) sont restitues tels quels.
"""

import json
import os
import uuid
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from src.core.entities.catalog import Catalog, CatalogRecord
from src.core.ports.repositories import ICatalogRepository, LoadError, PersistError

META_KEY = "meta"
MOVIES_KEY = "movies"
REQUIRED_FIELDS = ("id", "title")

# Champs du document ecrits par l'enrichissement
POSTER_FIELD = "posterUrl"
RATING_FIELD = "voteAverage"


def _optional_str(value: Any) -> Optional[str]:
    """Les IDs numeriques sont normalises en chaine, vide -> None."""
    if value is None or value == "":
        return None
    return str(value)


def _loaded_rating(document: dict[str, Any]) -> float:
    """Note lue dans le document (absente ou null -> 0)."""
    return document.get(RATING_FIELD) or 0


def _to_entity(document: Any, position: int) -> CatalogRecord:
    """
    Convertit un document film en entite CatalogRecord.

    Seule la presence des champs requis est verifiee.

    Raises:
        LoadError: Si le document n'est pas un objet ou s'il manque un champ requis
    """
    if not isinstance(document, dict):
        raise LoadError(f"Film #{position} : objet JSON attendu")
    missing = [name for name in REQUIRED_FIELDS if name not in document]
    if missing:
        raise LoadError(f"Film #{position} : champ(s) manquant(s) {', '.join(missing)}")

    return CatalogRecord(
        id=document["id"],
        title=document["title"],
        year=document.get("year"),
        poster_url=document.get(POSTER_FIELD),
        tmdb_id=_optional_str(document.get("tmdbId")),
        imdb_id=document.get("imdbId"),
        internet_archive_id=document.get("internetArchiveId"),
        youtube_id=document.get("youtubeId"),
        vote_average=_loaded_rating(document),
        document=document,
    )


def _to_document(record: CatalogRecord) -> dict[str, Any]:
    """
    Convertit une entite en document film.

    Part du document source pour conserver l'ordre et la valeur des champs
    non geres. posterUrl et voteAverage ne sont reecrits que si leur valeur
    differe de celle lue au chargement : un null ou un 0.0 d'origine reste
    tel quel, et un champ absent n'est ajoute que s'il a recu une valeur.
    """
    source = record.document
    document = dict(source)
    if record.poster_url != source.get(POSTER_FIELD):
        document[POSTER_FIELD] = record.poster_url
    if record.vote_average != _loaded_rating(source):
        document[RATING_FIELD] = record.vote_average
    return document


class JsonCatalogRepository(ICatalogRepository):
    """
    Repository du catalogue stocke dans un fichier JSON.

    L'ecriture passe par un fichier temporaire dans le meme repertoire,
    renomme sur la cible avec os.replace (atomique sur le meme filesystem).
    """

    def __init__(self, path: Path, indent: Optional[int] = None) -> None:
        """
        Initialise le repository.

        Args:
            path: Chemin du fichier catalogue
            indent: Indentation JSON a l'ecriture (None = compact)
        """
        self._path = Path(path)
        self._indent = indent
        self._key_order: list[str] = [META_KEY, MOVIES_KEY]

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Catalog:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Lecture impossible de {self._path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise LoadError(f"JSON invalide dans {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise LoadError(f"{self._path} : objet JSON attendu a la racine")
        movies = data.get(MOVIES_KEY)
        if not isinstance(movies, list):
            raise LoadError(f"{self._path} : tableau '{MOVIES_KEY}' absent")

        records = [_to_entity(document, i) for i, document in enumerate(movies)]
        extra = {k: v for k, v in data.items() if k not in (META_KEY, MOVIES_KEY)}
        self._key_order = list(data.keys())

        logger.debug("Catalogue charge", path=str(self._path), movies=len(records))
        return Catalog(meta=data.get(META_KEY), records=records, extra=extra)

    def _serialize(self, catalog: Catalog) -> str:
        values: dict[str, Any] = dict(catalog.extra)
        values[MOVIES_KEY] = [_to_document(record) for record in catalog.records]
        if catalog.meta is not None:
            values[META_KEY] = catalog.meta

        # Ordre des cles du document charge, puis les eventuelles nouvelles cles
        data = {key: values.pop(key) for key in self._key_order if key in values}
        data.update(values)

        if self._indent is None:
            return json.dumps(data, ensure_ascii=False, separators=(",", ":"))
        return json.dumps(data, ensure_ascii=False, indent=self._indent)

    def save(self, catalog: Catalog) -> None:
        try:
            content = self._serialize(catalog)
        except (TypeError, ValueError) as e:
            raise PersistError(f"Serialisation du catalogue impossible: {e}") from e

        # Nom temporaire unique dans le repertoire cible pour que os.replace soit atomique
        temp = self._path.with_name(f".tmp_{uuid.uuid4().hex}_{self._path.name}")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp, self._path)
        except OSError as e:
            if temp.exists():
                temp.unlink()
            raise PersistError(f"Ecriture impossible de {self._path}: {e}") from e

        logger.debug("Catalogue ecrit", path=str(self._path), movies=len(catalog.records))
