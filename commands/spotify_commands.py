"""
Commandes Spotify.

- !spotify (!song, !music, !np, !nowplaying): piste en cours, pour tous
- !play <lien>: ajoute une piste à la file (mod/VIP/broadcaster)
- !skip (!next): piste suivante (mod/VIP/broadcaster)
- !prev (!previous, !back): piste précédente (mod/VIP/broadcaster)

Les erreurs Spotify ne remontent jamais: elles deviennent une réponse chat.
"""
import logging
from typing import Optional

from backends.spotify_client import SpotifyClient
from core.command_registry import Command
from core.message_types import FAILURE_REPLY, ChatEvent
from core.permissions import requires_elevated_privilege

LOGGER = logging.getLogger(__name__)

NOW_PLAYING_ERROR = "error connecting to spotify"


class SpotifyCommand(Command):
    """Base des commandes qui délèguent au SpotifyClient"""

    def __init__(self, spotify: SpotifyClient):
        self.spotify = spotify


class NowPlayingCommand(SpotifyCommand):
    name = "spotify"
    aliases = ("song", "music", "np", "nowplaying")

    async def execute(self, event: ChatEvent) -> Optional[str]:
        try:
            return await self.spotify.get_currently_playing()
        except Exception as e:
            LOGGER.error(f"❌ Spotify error: {e}")
            return NOW_PLAYING_ERROR


class PlayCommand(SpotifyCommand):
    name = "play"

    @requires_elevated_privilege
    async def execute(self, event: ChatEvent) -> Optional[str]:
        parts = event.text.split()
        if len(parts) < 2:
            return FAILURE_REPLY
        return await self.spotify.add_track_from_url(parts[1])


class SkipCommand(SpotifyCommand):
    name = "skip"
    aliases = ("next",)

    @requires_elevated_privilege
    async def execute(self, event: ChatEvent) -> Optional[str]:
        try:
            track_info = await self.spotify.skip_track()
        except Exception as e:
            LOGGER.error(f"❌ Skip error: {e}")
            return FAILURE_REPLY
        return f"skipped to {track_info}"


class PrevCommand(SpotifyCommand):
    name = "prev"
    aliases = ("previous", "back")

    @requires_elevated_privilege
    async def execute(self, event: ChatEvent) -> Optional[str]:
        try:
            track_info = await self.spotify.previous_track()
        except Exception as e:
            LOGGER.error(f"❌ Previous error: {e}")
            return FAILURE_REPLY
        return f"went back to {track_info}"
