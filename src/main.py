"""
Point d'entrée CLI de CineCat.

Configure le logging et fournit les commandes CLI d'enrichissement du catalogue.
"""

from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import catalog_stats, enrich_posters
from .adapters.cli.helpers import console
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="cinecat",
    help="Enrichissement du catalogue de films (posters et notes TMDB)",
)
container = Container()


def _configure_from_settings(settings: Settings, verbose: int = 0, quiet: bool = False) -> None:
    configure_logging(
        log_file=settings.log_file,
        log_level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
        console=console,
    )


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """CineCat - Enrichissement du catalogue de films."""
    if verbose or quiet:
        settings = get_config()
        _configure_from_settings(settings, verbose, quiet)


app.command(name="enrich-posters")(enrich_posters)
app.command(name="stats")(catalog_stats)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration CineCat")
    typer.echo(f"Catalogue : {config.catalog_path}")
    typer.echo(f"API TMDB : {'activée' if config.tmdb_enabled else 'désactivée (TMDB_TOKEN absent)'}")
    typer.echo(f"Intervalle entre requêtes : {config.request_interval_ms} ms")
    typer.echo(f"Pause sur rate limit : {config.rate_limit_cooldown_ms} ms")
    retries = config.max_rate_limit_retries or "illimité"
    typer.echo(f"Relances max sur rate limit : {retries}")
    checkpoint = config.checkpoint_every or "désactivée"
    typer.echo(f"Sauvegarde intermédiaire : {checkpoint}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"CineCat v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    settings = container.config()
    _configure_from_settings(settings)

    logger.info("Démarrage de CineCat", version=__version__)

    app()


if __name__ == "__main__":
    main()
