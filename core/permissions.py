"""
Permissions chat.

Un seul niveau "élevé" pour les commandes sensibles: modérateur, VIP ou
broadcaster. Les commandes passent par `requires_elevated_privilege`,
jamais par leur propre check.
"""
import functools
import logging
from typing import Awaitable, Callable, Optional

from core.message_types import FAILURE_REPLY, ChatEvent

LOGGER = logging.getLogger(__name__)


def has_elevated_privilege(event: ChatEvent) -> bool:
    """True si mod, VIP ou broadcaster"""
    return event.is_moderator or event.is_vip or event.is_broadcaster


def requires_elevated_privilege(
    execute: Callable[..., Awaitable[Optional[str]]]
) -> Callable[..., Awaitable[Optional[str]]]:
    """
    Décorateur pour `Command.execute`: répond FAILURE_REPLY aux viewers
    sans exécuter la commande.
    """
    @functools.wraps(execute)
    async def wrapper(self, event: ChatEvent) -> Optional[str]:
        if not has_elevated_privilege(event):
            LOGGER.info(f"🚫 !{self.name} refusé pour {event.sender} (viewer)")
            return FAILURE_REPLY
        return await execute(self, event)

    return wrapper
