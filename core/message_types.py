"""
📦 Message Types - DTOs pour le système de messaging

Contrat de données entre le transport IRC et la logique des commandes.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ChatEvent:
    """Message chat entrant (PRIVMSG IRC parsé), immuable"""
    sender: str                         # Login de l'utilisateur (sans host)
    text: str                           # Contenu du message (peut être "")
    channel_hint: str                   # Channel annoncé par la frame (sans #)
    is_moderator: bool = False          # Est modérateur (forcé si broadcaster)
    is_broadcaster: bool = False        # Est le broadcaster
    is_vip: bool = False                # Est VIP
    reward_id: Optional[str] = None     # custom-reward-id (points de chaîne)


# Réponse chat unique pour un refus de permission ou un échec Spotify
FAILURE_REPLY = "😭😂✌️"
