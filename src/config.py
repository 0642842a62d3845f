"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe CINECAT_,
et peut optionnellement être fournie via un fichier .env.

Le jeton TMDB est lu depuis TMDB_TOKEN (ou CINECAT_TMDB_TOKEN). Il est optionnel au
chargement : son absence n'est fatale qu'au lancement de l'enrichissement.
"""

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class PreconditionError(Exception):
    """Précondition de lancement non satisfaite (ex: jeton TMDB absent)."""


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe CINECAT_.
    Exemple : CINECAT_REQUEST_INTERVAL_MS=50

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="CINECAT_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Catalogue
    catalog_path: Path = Field(default=Path("src/assets/data/catalog.json"))
    catalog_indent: Optional[int] = Field(default=None, ge=0)

    # API TMDB
    tmdb_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TMDB_TOKEN", "CINECAT_TMDB_TOKEN"),
    )
    tmdb_base_url: str = Field(default="https://api.themoviedb.org/3")
    tmdb_timeout_seconds: float = Field(default=30.0, gt=0)
    image_base_url: str = Field(default="https://image.tmdb.org/t/p/")
    poster_size: str = Field(default="w342")

    # Cadence et retry (~33 req/s, sous la limite TMDB de 40 req/s)
    request_interval_ms: int = Field(default=30, ge=0)
    rate_limit_cooldown_ms: int = Field(default=2000, ge=0)
    max_rate_limit_retries: int = Field(default=30, ge=0)  # 0 = illimite
    backoff_multiplier: float = Field(default=1.0, ge=1.0)
    max_cooldown_ms: int = Field(default=60000, ge=0)
    transport_retries: int = Field(default=0, ge=0)

    # Traitement
    progress_every: int = Field(default=200, ge=1)
    checkpoint_every: int = Field(default=0, ge=0)  # 0 = pas de sauvegarde intermediaire
    persist_attempts: int = Field(default=3, ge=1)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/cinecat.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("catalog_path", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("tmdb_token", mode="before")
    @classmethod
    def blank_token_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """Un jeton vide équivaut à un jeton absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si l'API TMDB est configurée."""
        return self.tmdb_token is not None

    @property
    def request_interval_seconds(self) -> float:
        return self.request_interval_ms / 1000

    @property
    def rate_limit_cooldown_seconds(self) -> float:
        return self.rate_limit_cooldown_ms / 1000

    @property
    def max_cooldown_seconds(self) -> float:
        return self.max_cooldown_ms / 1000

    def require_tmdb_token(self) -> str:
        """
        Retourne le jeton TMDB ou lève PreconditionError s'il est absent.

        Raises:
            PreconditionError: Si TMDB_TOKEN n'est pas défini
        """
        if self.tmdb_token is None:
            raise PreconditionError("La variable d'environnement TMDB_TOKEN est requise")
        return self.tmdb_token
