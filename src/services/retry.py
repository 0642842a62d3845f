"""
Politique de retry des appels au client de metadonnees.

Le client se contente de classer les reponses ; ce module decide quoi
relancer et combien de temps attendre :
- RateLimitError (429) : relance apres un cooldown (fixe par defaut,
  exponentiel plafonne si backoff_multiplier > 1), borne par
  max_rate_limit_retries (0 = illimite)
- TransportError : relance bornee par transport_retries (0 = aucune)
- Toute autre erreur : propagee immediatement

Usage:
    retrier = MetadataRetrier(RetryPolicy(cooldown_seconds=2.0))
    metadata = await retrier.call(client.get_movie_metadata, "19995")
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from tenacity import AsyncRetrying, RetryCallState, stop_never

from src.core.ports.api_clients import MetadataClientError, RateLimitError, TransportError

T = TypeVar("T")


class RetryExhaustedError(MetadataClientError):
    """
    Exception levee quand le quota de relances sur 429 est epuise.

    Attributes:
        attempts: Nombre de reponses 429 recues pour cet appel
        last_error: Derniere RateLimitError recue
    """

    def __init__(self, attempts: int, last_error: RateLimitError) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Rate limit persistant apres {attempts} tentative(s)")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Parametres de relance.

    Attributes:
        cooldown_seconds: Pause apres un 429 avant de relancer le meme appel
        max_rate_limit_retries: Relances max sur 429 par appel (0 = illimite)
        backoff_multiplier: Facteur applique au cooldown a chaque 429 (1.0 = fixe)
        max_cooldown_seconds: Plafond du cooldown en mode exponentiel
        transport_retries: Relances max sur erreur reseau (0 = aucune)
        transport_wait_seconds: Pause avant de relancer apres une erreur reseau
    """

    cooldown_seconds: float = 2.0
    max_rate_limit_retries: int = 30
    backoff_multiplier: float = 1.0
    max_cooldown_seconds: float = 60.0
    transport_retries: int = 0
    transport_wait_seconds: float = 1.0

    def cooldown_for(self, rate_limit_count: int) -> float:
        """Duree du cooldown apres le n-ieme 429 (n >= 1)."""
        if self.backoff_multiplier <= 1.0:
            return self.cooldown_seconds
        delay = self.cooldown_seconds * self.backoff_multiplier ** (rate_limit_count - 1)
        return min(delay, self.max_cooldown_seconds)

    def allows_rate_limit_retry(self, rate_limit_count: int) -> bool:
        """Vrai si un n-ieme 429 peut encore etre relance."""
        return self.max_rate_limit_retries == 0 or rate_limit_count <= self.max_rate_limit_retries


class MetadataRetrier:
    """
    Execute un appel au client en appliquant une RetryPolicy (via tenacity).

    Chaque appel a ses propres compteurs : les relances d'un film
    n'entament pas le quota du suivant.
    """

    def __init__(
        self,
        policy: RetryPolicy,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            policy: Politique de relance
            sleep: Fonction de pause async (injectable pour les tests)
        """
        self.policy = policy
        self._sleep = sleep

    async def call(
        self,
        fn: Callable[..., Awaitable[T]],
        *args: Any,
        on_retry: Optional[Callable[[MetadataClientError, float], None]] = None,
        **kwargs: Any,
    ) -> T:
        """
        Appelle fn et la relance selon la politique.

        Args:
            fn: Coroutine a appeler
            on_retry: Callback (erreur, pause en secondes) avant chaque relance

        Returns:
            Le resultat de fn

        Raises:
            RetryExhaustedError: Si le quota de relances sur 429 est epuise
            MetadataClientError: Erreur non relancable ou relances reseau epuisees
        """
        policy = self.policy
        counts = {"rate_limited": 0, "transport": 0}

        def should_retry(retry_state: RetryCallState) -> bool:
            if not retry_state.outcome.failed:
                return False
            error = retry_state.outcome.exception()
            if isinstance(error, RateLimitError):
                counts["rate_limited"] += 1
                return policy.allows_rate_limit_retry(counts["rate_limited"])
            if isinstance(error, TransportError):
                counts["transport"] += 1
                return counts["transport"] <= policy.transport_retries
            return False

        def wait(retry_state: RetryCallState) -> float:
            if isinstance(retry_state.outcome.exception(), RateLimitError):
                return policy.cooldown_for(counts["rate_limited"])
            return policy.transport_wait_seconds

        def before_sleep(retry_state: RetryCallState) -> None:
            if on_retry is not None:
                on_retry(retry_state.outcome.exception(), retry_state.next_action.sleep)

        retrying = AsyncRetrying(
            sleep=self._sleep,
            retry=should_retry,
            wait=wait,
            stop=stop_never,
            before_sleep=before_sleep,
            reraise=True,
        )
        try:
            return await retrying(fn, *args, **kwargs)
        except RateLimitError as e:
            raise RetryExhaustedError(counts["rate_limited"], e) from e
