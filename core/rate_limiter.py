"""
RateLimiter - Protection contre les bans Twitch

Limite les PRIVMSG par channel (fenêtre glissante de 30 secondes):
- Non-vérifié: ~20 messages / 30 secondes, 18 par défaut pour garder une marge
"""
import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict

LOGGER = logging.getLogger(__name__)

WINDOW_SECONDS = 30.0


class RateLimiter:
    """Rate limiter par channel avec fenêtre glissante."""

    def __init__(self, per30: int = 18):
        self.per30 = per30
        self._history: Dict[str, Deque[float]] = defaultdict(deque)

        LOGGER.info(f"RateLimiter init: {per30} messages per 30s")

    def can_send(self, channel: str) -> bool:
        """Vérifie (et consomme) le quota pour ce channel."""
        hist = self._history[channel]
        now = time.monotonic()

        while hist and (now - hist[0]) > WINDOW_SECONDS:
            hist.popleft()

        if len(hist) >= self.per30:
            LOGGER.warning(
                f"Rate limit atteint pour #{channel}: "
                f"{len(hist)}/{self.per30}"
            )
            return False

        hist.append(now)

        return True
