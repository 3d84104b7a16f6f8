"""
Exceptions du bot.

Seule AuthenticationFailed traverse la boucle de session: tout le reste est
absorbé (log, silence ou réponse chat).
"""


class BotError(Exception):
    """Erreur de base du bot"""


class ConfigError(BotError):
    """Configuration absente ou invalide"""


class TransportError(BotError):
    """Connexion WebSocket impossible à établir"""


class AuthenticationFailed(BotError):
    """Twitch a refusé le PASS/NICK (Login authentication failed)"""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class SpotifyApiError(BotError):
    """Réponse non-2xx de l'API Spotify"""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"Spotify API error: {status}: {message}")
