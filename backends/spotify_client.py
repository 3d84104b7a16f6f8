#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Spotify Provider

Client minimal pour la Spotify Web API (lecture en cours, skip, précédent,
ajout à la file). Un access token est redemandé à chaque opération à partir
du refresh token de la config.
"""

import asyncio
import logging
import re
from typing import Any, Dict, Optional

import httpx

from core.config import SpotifyConfig
from core.exceptions import SpotifyApiError
from core.message_types import FAILURE_REPLY

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE = "https://api.spotify.com/v1"

NO_TRACK_INFO = "unable to get track information"

# Délai laissé au player avant de relire la piste après next/previous
PLAYER_SETTLE_DELAY = 0.5

# open.spotify.com/track/<id> ou open.spotify.com/intl-fr/track/<id>
TRACK_URL_RE = re.compile(r"open\.spotify\.com/(?:intl-[a-zA-Z-]+/)?track/([A-Za-z0-9]+)")


def extract_track_id(text: str) -> Optional[str]:
    """Extrait l'ID de piste d'un lien Spotify, None si absent"""
    match = TRACK_URL_RE.search(text)
    return match.group(1) if match else None


def format_track(track: Dict[str, Any]) -> str:
    """'<titre> by <artiste, artiste>' en minuscules"""
    artists = ", ".join(artist.get("name", "") for artist in track.get("artists", []))
    return f"{track['name'].lower()} by {artists.lower()}"


class SpotifyClient:
    """Collaborateur Spotify consommé par les commandes."""

    def __init__(self, config: SpotifyConfig, http_client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            config: Credentials Spotify (client id/secret + refresh token)
            http_client: Client HTTP partagé (créé si absent)
        """
        self.config = config
        self.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout)
        )

    async def close(self) -> None:
        await self.http_client.aclose()

    @staticmethod
    def _check(response: httpx.Response) -> httpx.Response:
        if not response.is_success:
            raise SpotifyApiError(response.status_code, response.text[:200])
        return response

    async def _get_access_token(self) -> str:
        response = self._check(await self.http_client.post(
            TOKEN_URL,
            auth=(self.config.client_id, self.config.client_secret),
            data={
                "grant_type": "refresh_token",
                "refresh_token": self.config.refresh_token,
            },
        ))
        return response.json()["access_token"]

    async def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {await self._get_access_token()}"}

    async def get_currently_playing(self) -> str:
        """
        Piste en cours.

        Returns:
            '<titre> by <artistes>', FAILURE_REPLY si rien ne joue,
            NO_TRACK_INFO si Spotify ne renvoie pas d'item
        """
        response = self._check(await self.http_client.get(
            f"{API_BASE}/me/player/currently-playing",
            headers=await self._headers(),
        ))

        if response.status_code == 204:
            return FAILURE_REPLY

        data = response.json()
        if not data.get("is_playing"):
            return FAILURE_REPLY

        item = data.get("item")
        if not item:
            return NO_TRACK_INFO
        return format_track(item)

    async def _player_step(self, endpoint: str, fallback: str) -> str:
        self._check(await self.http_client.post(
            f"{API_BASE}/me/player/{endpoint}",
            headers=await self._headers(),
            json={},
        ))

        await asyncio.sleep(PLAYER_SETTLE_DELAY)

        try:
            return await self.get_currently_playing()
        except Exception as e:
            logger.warning(f"Spotify lookup after {endpoint} failed: {e}")
            return fallback

    async def skip_track(self) -> str:
        """Passe à la piste suivante et retourne la nouvelle piste"""
        return await self._player_step("next", "next track")

    async def previous_track(self) -> str:
        """Revient à la piste précédente et retourne la nouvelle piste"""
        return await self._player_step("previous", "previous track")

    async def add_to_queue(self, uri: str) -> str:
        """
        Ajoute `spotify:track:<id>` à la file.

        Returns:
            '<titre> by <artistes>' de la piste ajoutée
        """
        headers = await self._headers()
        track_id = uri.replace("spotify:track:", "")

        track_response = self._check(await self.http_client.get(
            f"{API_BASE}/tracks/{track_id}",
            headers=headers,
        ))
        track_info = format_track(track_response.json())

        self._check(await self.http_client.post(
            f"{API_BASE}/me/player/queue",
            headers=headers,
            params={"uri": uri},
        ))
        return track_info

    async def add_track_from_url(self, text: str) -> str:
        """Ajoute la piste du lien contenu dans `text`. Ne lève jamais."""
        track_id = extract_track_id(text)
        if track_id is None:
            logger.info(f"No Spotify track URL in: {text!r}")
            return FAILURE_REPLY

        try:
            track_info = await self.add_to_queue(f"spotify:track:{track_id}")
        except Exception as e:
            logger.error(f"Failed to add track {track_id}: {e}")
            return FAILURE_REPLY

        logger.info(f"🎵 Queued {track_info}")
        return f"{track_info} has been added to the queue :3"
