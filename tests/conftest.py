"""
Fixtures pytest partagees pour les tests CineCat.

Ce module contient les fixtures communes utilisees dans les tests:
- Document catalogue (scenario de 3 films) et fichier catalogue temporaire
- Settings de test avec chemins temporaires
- Horloge simulee pour tester la cadence sans attendre
"""

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from src.config import Settings
from tests.fixtures.catalog_documents import SCENARIO_CATALOG
from tests.fixtures.fakes import FakeClock


@pytest.fixture
def fake_clock() -> FakeClock:
    """Horloge simulee partagee par le ticker et le retrier."""
    return FakeClock()


@pytest.fixture
def scenario_document() -> dict[str, Any]:
    """Copie du catalogue de 3 films (eligible, deja enrichi, sans tmdbId)."""
    return copy.deepcopy(SCENARIO_CATALOG)


@pytest.fixture
def catalog_file(tmp_path: Path, scenario_document: dict[str, Any]) -> Path:
    """Fichier catalogue JSON temporaire contenant le scenario de 3 films."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(scenario_document), encoding="utf-8")
    return path


@pytest.fixture
def test_settings(tmp_path: Path, catalog_file: Path) -> Settings:
    """
    Settings de test avec chemins temporaires et cadence nulle.

    Utilise tmp_path de pytest pour isoler le catalogue et les logs.
    """
    return Settings(
        catalog_path=catalog_file,
        tmdb_token="test_token",
        request_interval_ms=0,
        rate_limit_cooldown_ms=0,
        log_file=tmp_path / "test.log",
    )
