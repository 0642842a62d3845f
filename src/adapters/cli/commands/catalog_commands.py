"""
Commande CLI d'inspection du catalogue (sans acces reseau).
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from src.adapters.cli.helpers import console, override_settings
from src.container import Container
from src.core.ports.repositories import LoadError
from src.services.reporting import compute_coverage


def catalog_stats(
    catalog: Annotated[
        Optional[Path],
        typer.Option(
            "--catalog", "-c",
            help="Fichier catalogue JSON (defaut: CINECAT_CATALOG_PATH)",
        ),
    ] = None,
) -> None:
    """Affiche la couverture posters/notes du catalogue."""
    container = Container()
    settings = override_settings(container, catalog_path=catalog)

    try:
        loaded = container.catalog_repository().load()
    except LoadError as e:
        console.print(f"[red]Erreur:[/red] {e}")
        raise typer.Exit(code=1)

    coverage = compute_coverage(loaded)

    table = Table(title=f"Catalogue {settings.catalog_path}")
    table.add_column("Indicateur", style="cyan")
    table.add_column("Films", justify="right")
    table.add_column("%", justify="right")
    table.add_row("Total", str(coverage.total), "")
    table.add_row("Avec poster", str(coverage.with_poster), f"{coverage.poster_ratio:.1%}")
    table.add_row("Avec note", str(coverage.with_rating), f"{coverage.rating_ratio:.1%}")
    table.add_row("A enrichir", str(coverage.eligible), "")
    console.print(table)
