"""
Registre central des commandes.

Mappe les clés de commande (nom principal + alias, sans le !) vers les
handlers. Construit une seule fois au démarrage, en lecture seule ensuite.

Architecture:
    irc_client.py → command_registry.py → commands/{simple,spotify_commands}.py
"""
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from core.message_types import ChatEvent

if TYPE_CHECKING:
    from backends.spotify_client import SpotifyClient
    from core.config import BotConfig

LOGGER = logging.getLogger(__name__)

COMMAND_PREFIX = "!"


class Command(ABC):
    """
    Contrat d'une commande chat.

    `execute` retourne le texte à envoyer dans le chat, ou None pour ne
    rien répondre. Ne doit jamais lever sur une entrée malformée.
    """
    name: str = ""
    aliases: Tuple[str, ...] = ()

    @abstractmethod
    async def execute(self, event: ChatEvent) -> Optional[str]:
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} !{self.name}>"


def extract_command_key(text: str) -> Optional[str]:
    """
    Extrait la clé de commande d'un message chat.

    "!skip now" → "skip", "!" → "", "hello" → None
    """
    if not text.startswith(COMMAND_PREFIX):
        return None
    parts = text[len(COMMAND_PREFIX):].split(maxsplit=1)
    return parts[0] if parts else ""


class CommandRegistry:
    """
    Registre des commandes (namespace plat, sensible à la casse).

    Usage:
        registry = CommandRegistry()
        registry.register(SkipCommand(spotify))

        reply = await registry.invoke("next", event)
    """

    def __init__(self):
        self._commands: Dict[str, Command] = {}

    def register(self, command: Command) -> None:
        """Enregistre une commande sous son nom et ses alias (le dernier gagne)"""
        for key in (command.name, *command.aliases):
            previous = self._commands.get(key)
            if previous is not None and previous is not command:
                LOGGER.debug(f"♻️ !{key}: {previous!r} remplacé par {command!r}")
            self._commands[key] = command

        LOGGER.debug(f"📝 Registered command: !{command.name} (aliases: {command.aliases})")

    def resolve(self, key: str) -> Optional[Command]:
        """Récupère une commande par clé exacte (sans le !)"""
        return self._commands.get(key)

    def has(self, key: str) -> bool:
        return key in self._commands

    def list_commands(self) -> list[Command]:
        """Liste les commandes (dédupliquées, alias exclus)"""
        seen = set()
        commands = []
        for cmd in self._commands.values():
            if id(cmd) not in seen:
                seen.add(id(cmd))
                commands.append(cmd)
        return sorted(commands, key=lambda c: c.name)

    async def invoke(self, key: str, event: ChatEvent) -> Optional[str]:
        """
        Exécute la commande `key` pour `event`.

        Returns:
            Réponse du handler telle quelle, None si la clé est inconnue
        """
        command = self.resolve(key)
        if command is None:
            LOGGER.debug(f"No handler for command: !{key}")
            return None

        LOGGER.info(f"⚡ !{key} par {event.sender} → {command!r}")
        return await command.execute(event)

    def __len__(self) -> int:
        return len(self._commands)


def build_registry(config: "BotConfig", spotify: "SpotifyClient") -> CommandRegistry:
    """
    Construit le registre au démarrage.

    Ordre: commandes Spotify d'abord, puis les commandes simples de la
    config (une commande simple peut donc écraser un alias Spotify).
    """
    from commands.simple import SimpleCommand
    from commands.spotify_commands import (
        NowPlayingCommand,
        PlayCommand,
        PrevCommand,
        SkipCommand,
    )

    registry = CommandRegistry()

    for command_cls in (NowPlayingCommand, PlayCommand, SkipCommand, PrevCommand):
        registry.register(command_cls(spotify))

    for name, response in config.simple_commands.items():
        registry.register(SimpleCommand(name, response))

    LOGGER.info(
        f"✅ Command registry initialized: {len(registry.list_commands())} commands, "
        f"{len(registry)} keys"
    )
    return registry
