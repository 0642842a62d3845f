"""
Configuration du logging de l'application via loguru.

Fournit un logging structuré avec :
- Sortie console : RichHandler branché sur la console partagée de la CLI,
  pour que les logs et la barre de progression ne se chevauchent pas
- Sortie fichier : sérialisée en JSON, avec rotation, pour l'analyse historique
"""

from pathlib import Path
from typing import Optional

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler


def level_for_verbosity(verbose: int, quiet: bool, default: str = "INFO") -> str:
    """Niveau console selon les options -v/-q (-q: ERROR, -v: DEBUG, -vv: TRACE)."""
    if quiet:
        return "ERROR"
    if verbose >= 2:
        return "TRACE"
    if verbose == 1:
        return "DEBUG"
    return default


def configure_logging(
    log_file: Path,
    log_level: str = "INFO",
    verbose: int = 0,
    quiet: bool = False,
    rotation_size: str = "10 MB",
    retention_count: int = 5,
    console: Optional[Console] = None,
) -> str:
    """Configure le logging de l'application.

    Args :
        log_file : Chemin vers le fichier de log
        log_level : Niveau console par défaut (Settings.log_level)
        verbose : Nombre d'options -v
        quiet : Option -q (erreurs uniquement)
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs à conserver
        console : Console Rich de la CLI (une console stderr sinon)

    Retourne :
        Le niveau console effectif
    """
    console_level = level_for_verbosity(verbose, quiet, log_level)
    logger.remove()

    logger.add(
        RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        ),
        level=console_level,
        format="{message}",
    )

    # Fichier JSON : les échecs par film sont journalisés en DEBUG, -vv ajoute TRACE
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="TRACE" if console_level == "TRACE" else "DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug("Logging configuré", log_file=str(log_file), console_level=console_level)
    return console_level
