"""
Cadencement des appels API.

IntervalPacer garantit un intervalle minimum entre deux requetes
consecutives. Il decide uniquement *quand* appeler : l'interpretation
du resultat (retry, echec) est geree ailleurs.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional


class IntervalPacer:
    """
    Ticker a intervalle fixe.

    Une pause deja plus longue que l'intervalle (cooldown apres un 429)
    remplace l'attente : wait() ne dort que le temps restant.

    Attributes:
        interval_seconds: Intervalle minimum entre deux requetes

    Example:
        pacer = IntervalPacer(interval_seconds=0.03)
        for tmdb_id in ids:
            await pacer.wait()
            await client.get_movie_metadata(tmdb_id)
    """

    def __init__(
        self,
        interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialise le ticker.

        Args:
            interval_seconds: Intervalle minimum entre deux requetes (0 = aucun)
            clock: Horloge monotone (injectable pour les tests)
            sleep: Fonction de pause async (injectable pour les tests)
        """
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._last_tick: Optional[float] = None

    async def wait(self) -> None:
        """Attend le temps restant avant la prochaine requete, puis la note."""
        if self._last_tick is not None and self.interval_seconds > 0:
            remaining = self.interval_seconds - (self._clock() - self._last_tick)
            if remaining > 0:
                await self._sleep(remaining)
        self._last_tick = self._clock()

    def reset(self) -> None:
        """Oublie la derniere requete (la prochaine part immediatement)."""
        self._last_tick = None
