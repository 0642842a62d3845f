"""
CineCat - Enrichissement du catalogue de films.

Ce package complete un catalogue JSON local avec les posters et les notes
de TMDB, en respectant le plafond de requetes de l'API.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports)
- services/ : Couche application (enrichissement, cadence, retry, pipeline)
- adapters/ : Clients API et CLI
- infrastructure/ : Persistance du catalogue
"""

__version__ = "0.1.0"
