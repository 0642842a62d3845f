"""
Commande CLI d'enrichissement des posters et notes TMDB du catalogue.
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from src.adapters.cli.helpers import console, override_settings, suppress_loguru, with_container
from src.config import PreconditionError
from src.core.ports.repositories import LoadError, PersistError


def enrich_posters(
    catalog: Annotated[
        Optional[Path],
        typer.Option(
            "--catalog", "-c",
            help="Fichier catalogue JSON (defaut: CINECAT_CATALOG_PATH)",
        ),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option(
            "--limit", "-l",
            min=1,
            help="Nombre maximum de films a enrichir",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Interroger TMDB sans reecrire le catalogue",
        ),
    ] = False,
    checkpoint_every: Annotated[
        Optional[int],
        typer.Option(
            "--checkpoint-every",
            min=0,
            help="Sauvegarde intermediaire tous les N films (0 = aucune)",
        ),
    ] = None,
    max_rate_limit_retries: Annotated[
        Optional[int],
        typer.Option(
            "--max-rate-limit-retries",
            min=0,
            help="Relances max sur 429 par film (0 = illimite)",
        ),
    ] = None,
) -> None:
    """Enrichit les posters et notes TMDB des films qui ont un tmdbId mais pas de poster."""
    asyncio.run(
        _enrich_posters_async(catalog, limit, dry_run, checkpoint_every, max_rate_limit_retries)
    )


@with_container()
async def _enrich_posters_async(
    container,
    catalog_path: Optional[Path],
    limit: Optional[int],
    dry_run: bool,
    checkpoint_every: Optional[int],
    max_rate_limit_retries: Optional[int],
) -> None:
    """Implementation async de la commande enrich-posters."""
    from src.services.catalog_enricher import EnrichmentResult, ProgressInfo
    from src.services.reporting import compute_coverage, summary_lines

    settings = override_settings(
        container,
        catalog_path=catalog_path,
        checkpoint_every=checkpoint_every,
        max_rate_limit_retries=max_rate_limit_retries,
    )

    # Precondition verifiee avant toute lecture du catalogue
    try:
        settings.require_tmdb_token()
    except PreconditionError as e:
        logger.error(str(e))
        console.print(f"[red]Erreur:[/red] {e}")
        raise typer.Exit(code=1)

    pipeline = container.enrichment_pipeline()

    try:
        catalog = pipeline.load()
    except LoadError as e:
        logger.error("Chargement du catalogue impossible", error=str(e))
        console.print(f"[red]Erreur:[/red] {e}")
        raise typer.Exit(code=1)

    coverage = compute_coverage(catalog)
    to_enrich = coverage.eligible if limit is None else min(limit, coverage.eligible)
    console.print(f"Films au catalogue: {coverage.total}")

    if not to_enrich:
        console.print("[yellow]Aucun film a enrichir.[/yellow]")
        console.print("[dim]Tous les films avec un tmdbId ont deja un poster.[/dim]")
        return

    console.print(
        f"[bold cyan]Enrichissement des posters TMDB[/bold cyan]: {to_enrich} film(s)\n"
    )

    try:
        with suppress_loguru():
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                TimeRemainingColumn(),
                console=console,
                transient=False,
            ) as progress:
                task = progress.add_task("[cyan]Enrichissement...", total=to_enrich)

                def on_progress(info: ProgressInfo) -> None:
                    """Callback de progression."""
                    progress.update(task, completed=info.current)
                    year_str = f" ({info.movie_year})" if info.movie_year else ""
                    title = f"{info.movie_title}{year_str}"

                    if info.result == EnrichmentResult.FAILED:
                        progress.console.print(f"  [red]✗[/red] {title} - {info.error}")
                    elif info.result == EnrichmentResult.EXHAUSTED:
                        progress.console.print(f"  [red]✗[/red] {title} - rate limit persistant")

                    if info.current % settings.progress_every == 0:
                        progress.console.print(
                            f"  Progression: {info.current}/{info.total} "
                            f"({info.enriched} posters, {info.failed} echecs)"
                        )

                report = await pipeline.run(
                    limit=limit,
                    dry_run=dry_run,
                    on_progress=on_progress,
                    catalog=catalog,
                )
    except PersistError as e:
        logger.error("Ecriture du catalogue impossible", error=str(e))
        console.print(f"[red]Erreur:[/red] {e}")
        console.print("[red]Les enrichissements de cette execution sont perdus.[/red]")
        raise typer.Exit(code=1)

    # Afficher le resume
    console.print("\n[bold]Resume:[/bold]")
    for line in summary_lines(report):
        logger.info(line)
        console.print(f"  {line}")
