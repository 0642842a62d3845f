"""
Utilitaires partages pour les commandes CLI de CineCat.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container initialise
- override_settings : surcharge des Settings par les options de la commande
"""

from contextlib import contextmanager
from functools import wraps

from loguru import logger as loguru_logger
from rich.console import Console

from src.config import Settings
from src.container import Container

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("src")
    try:
        yield
    finally:
        loguru_logger.enable("src")


def with_container():
    """
    Decorateur qui injecte un container initialise en premier argument.

    Le client TMDB du container est ferme a la sortie de la commande.

    Usage:
        @with_container()
        async def my_command(container, ...):
            config = container.config()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            try:
                return await func(container, *args, **kwargs)
            finally:
                await container.tmdb_client().close()
        return wrapper
    return decorator


def override_settings(container: Container, **overrides) -> Settings:
    """
    Remplace les Settings du container par une copie modifiee.

    Les valeurs None sont ignorees (option non fournie sur la ligne de commande).

    Returns:
        Les Settings effectifs
    """
    settings = container.config()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        settings = settings.model_copy(update=updates)
        container.config.override(settings)
    return settings
