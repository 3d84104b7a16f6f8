"""Commandes à réponse fixe, définies dans config.yaml (commands.simple)."""
from typing import Optional

from core.command_registry import Command
from core.message_types import ChatEvent


class SimpleCommand(Command):
    """!<name> → réponse fixe, quel que soit l'auteur"""

    def __init__(self, name: str, response: str):
        self.name = name
        self.response = response

    async def execute(self, event: ChatEvent) -> Optional[str]:
        return self.response
