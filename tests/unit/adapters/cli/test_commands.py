"""
Tests pour les commandes CLI (enrich-posters, stats, info, version).

Utilise typer.testing.CliRunner ; les appels TMDB sont simules avec respx
et la configuration passe par les variables d'environnement.
"""

import json

import httpx
import pytest
import respx
from typer.testing import CliRunner

from src.main import app
from tests.fixtures.tmdb_responses import TMDB_MOVIE_DETAILS_RESPONSE

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, tmp_path, catalog_file):
    """Environnement isole : catalogue temporaire, jeton de test, cadence nulle."""
    monkeypatch.setenv("CINECAT_CATALOG_PATH", str(catalog_file))
    monkeypatch.setenv("CINECAT_LOG_FILE", str(tmp_path / "test.log"))
    monkeypatch.setenv("CINECAT_REQUEST_INTERVAL_MS", "0")
    monkeypatch.setenv("CINECAT_RATE_LIMIT_COOLDOWN_MS", "0")
    monkeypatch.setenv("TMDB_TOKEN", "test_token")
    monkeypatch.delenv("CINECAT_TMDB_TOKEN", raising=False)


class TestEnrichPostersCommand:
    """Tests pour la commande enrich-posters."""

    @respx.mock
    def test_enriches_catalog(self, catalog_file):
        route = respx.get("https://api.themoviedb.org/3/movie/653").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_DETAILS_RESPONSE)
        )

        result = runner.invoke(app, ["enrich-posters"])

        assert result.exit_code == 0, result.output
        assert route.call_count == 1
        assert "Enrichis: 1 posters" in result.output
        assert "Echecs: 0" in result.output
        movies = json.loads(catalog_file.read_text(encoding="utf-8"))["movies"]
        assert movies[0]["posterUrl"] == "https://image.tmdb.org/t/p/w342/abc.jpg"

    @respx.mock
    def test_rate_limited_then_success(self, catalog_file):
        respx.get("https://api.themoviedb.org/3/movie/653").mock(
            side_effect=[
                httpx.Response(429),
                httpx.Response(200, json=TMDB_MOVIE_DETAILS_RESPONSE),
            ]
        )

        result = runner.invoke(app, ["enrich-posters"])

        assert result.exit_code == 0, result.output
        assert "Echecs: 0" in result.output
        assert "Rate limit (429): 1" in result.output

    def test_missing_token_exits_before_reading(self, monkeypatch, catalog_file):
        """Sans TMDB_TOKEN, la commande echoue sans toucher au catalogue."""
        monkeypatch.delenv("TMDB_TOKEN", raising=False)
        before = catalog_file.read_bytes()

        result = runner.invoke(app, ["enrich-posters"])

        assert result.exit_code == 1
        assert "TMDB_TOKEN" in result.output
        assert catalog_file.read_bytes() == before

    def test_missing_catalog_exits_with_error(self, tmp_path):
        result = runner.invoke(app, ["enrich-posters", "--catalog", str(tmp_path / "absent.json")])

        assert result.exit_code == 1
        assert "Erreur" in result.output

    @respx.mock
    def test_dry_run_does_not_write(self, catalog_file):
        respx.get("https://api.themoviedb.org/3/movie/653").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_DETAILS_RESPONSE)
        )
        before = catalog_file.read_bytes()

        result = runner.invoke(app, ["enrich-posters", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "dry-run" in result.output
        assert catalog_file.read_bytes() == before

    @respx.mock
    def test_nothing_to_enrich(self, tmp_path):
        path = tmp_path / "done.json"
        path.write_text(
            json.dumps({"movies": [{"id": "a", "title": "A", "tmdbId": "1", "posterUrl": "https://x/a.jpg"}]}),
            encoding="utf-8",
        )
        before = path.read_bytes()
        route = respx.get(url__startswith="https://api.themoviedb.org/3/movie/")

        result = runner.invoke(app, ["enrich-posters", "--catalog", str(path)])

        assert result.exit_code == 0, result.output
        assert "Aucun film a enrichir" in result.output
        assert not route.called
        assert path.read_bytes() == before


class TestStatsCommand:
    """Tests pour la commande stats."""

    def test_displays_coverage(self):
        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0, result.output
        assert "Avec poster" in result.output
        assert "A enrichir" in result.output

    def test_invalid_catalog(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[]", encoding="utf-8")

        result = runner.invoke(app, ["stats", "--catalog", str(path)])

        assert result.exit_code == 1


class TestInfoAndVersion:
    """Tests pour les commandes info et version."""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "CineCat v" in result.output

    def test_info(self):
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "Catalogue" in result.output
