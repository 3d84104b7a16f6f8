#!/usr/bin/env python3
"""
IRC Client - Session Twitch IRC over WebSocket
- Handshake PASS/NICK/CAP REQ puis JOIN (sans attendre de confirmation)
- PING → PONG
- PRIVMSG → ChatEvent → reward Spotify ou commande du registre
- Une seule boucle de réception, lignes traitées dans l'ordre d'arrivée
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

import aiohttp

from backends.spotify_client import SpotifyClient, extract_track_id
from core.chat_logger import ChatLogger
from core.command_registry import CommandRegistry, extract_command_key
from core.config import BotConfig
from core.exceptions import AuthenticationFailed, TransportError
from core.message_parser import parse_privmsg
from core.message_types import FAILURE_REPLY, ChatEvent
from core.rate_limiter import RateLimiter

LOGGER = logging.getLogger(__name__)

TWITCH_IRC_WS_URL = "wss://irc-ws.chat.twitch.tv:443"
CAPS = "CAP REQ :twitch.tv/membership twitch.tv/tags twitch.tv/commands"
AUTH_FAILED_MARKER = "Login authentication failed"
PING_TOKEN = "PING"
PONG_TOKEN = "PONG"


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    AUTHENTICATING = "authenticating"
    JOINED = "joined"
    RUNNING = "running"
    CLOSED = "closed"


class IRCClient:
    """
    Client IRC Twitch (un channel, une connexion)

    Usage:
        client = IRCClient(config, registry, spotify)
        await client.connect()
        await client.run()   # rend la main à la fermeture du transport
    """

    def __init__(
        self,
        config: BotConfig,
        registry: CommandRegistry,
        spotify: SpotifyClient,
        chat_logger: Optional[ChatLogger] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """
        Args:
            config: Config du bot (credentials Twitch, reward_id, timeouts)
            registry: Registre des commandes, figé
            spotify: Collaborateur Spotify pour les rewards
            chat_logger: Log des messages reçus (chat.log)
            rate_limiter: Quota d'envoi PRIVMSG
        """
        self.config = config
        self.channel = config.twitch.channel
        self.registry = registry
        self.spotify = spotify
        self.chat_logger = chat_logger or ChatLogger()
        self.rate_limiter = rate_limiter or RateLimiter(per30=config.rate_limit_per30)

        self.state = SessionState.DISCONNECTED
        self._session: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None

        LOGGER.info(f"IRCClient init pour {config.twitch.username} sur #{self.channel}")

    # ---------- Connexion ----------
    async def _open_websocket(self) -> aiohttp.ClientWebSocketResponse:
        self._session = aiohttp.ClientSession()
        try:
            return await self._session.ws_connect(TWITCH_IRC_WS_URL)
        except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as e:
            await self._session.close()
            self._session = None
            raise TransportError(f"Cannot connect to {TWITCH_IRC_WS_URL}: {e}") from e

    async def connect(self) -> None:
        """Ouvre le WebSocket, s'authentifie et rejoint le channel"""
        if self.state is not SessionState.DISCONNECTED:
            LOGGER.warning(f"IRC Client déjà démarré (state={self.state.value})")
            return

        LOGGER.info("🚀 Connexion Twitch IRC...")
        self._ws = await self._open_websocket()
        LOGGER.info(f"🔌 IRC connected to {TWITCH_IRC_WS_URL}")

        self.state = SessionState.AUTHENTICATING
        try:
            await self.send_raw(f"PASS {self.config.twitch.oauth_token}", secret=True)
            await self.send_raw(f"NICK {self.config.twitch.username}")
            await self.send_raw(CAPS)

            await self.send_raw(f"JOIN #{self.channel}")
        except (aiohttp.ClientError, ConnectionError) as e:
            await self.close()
            raise TransportError(f"IRC handshake failed: {e}") from e
        self.state = SessionState.JOINED
        LOGGER.info(f"✅ Connected to channel: #{self.channel}")

    async def close(self) -> None:
        """Ferme le WebSocket et la session HTTP (idempotent)"""
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        self._ws = None

        if self._session is not None:
            await self._session.close()
            self._session = None

        if self.state is not SessionState.CLOSED:
            self.state = SessionState.CLOSED
            LOGGER.info("🛑 IRC session fermée")

    # ---------- Envoi ----------
    async def send_raw(self, data: str, secret: bool = False) -> None:
        if self._ws is None:
            LOGGER.error(f"❌ IRC pas connecté - frame ignorée: {data.split(' ', 1)[0]}")
            return
        await self._ws.send_str(data)
        LOGGER.debug(f"Sent: {'PASS ***' if secret else data}")

    async def send_message(self, text: str) -> None:
        """Envoie un PRIVMSG sur le channel (soumis au rate limit)"""
        text = text.replace("\r", " ").replace("\n", " ")
        if not self.rate_limiter.can_send(self.channel):
            LOGGER.warning(f"⏳ Réponse abandonnée (rate limit): {text[:50]}")
            return
        await self.send_raw(f"PRIVMSG #{self.channel} :{text}")
        LOGGER.info(f"📤 #{self.channel}: {text}")

    # ---------- Boucle de réception ----------
    async def run(self) -> None:
        """
        Boucle de réception jusqu'à la fermeture du transport.

        Raises:
            AuthenticationFailed: Twitch a refusé les credentials
            TransportError: run() appelé sans connect()
        """
        if self._ws is None:
            raise TransportError("IRC client is not connected")

        self.state = SessionState.RUNNING
        try:
            while True:
                msg = await self._ws.receive()
                if msg.type == aiohttp.WSMsgType.TEXT:
                    await self.handle_frame(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    LOGGER.error(f"❌ WebSocket error: {self._ws.exception()}")
                    break
                elif msg.type in (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING,
                                  aiohttp.WSMsgType.CLOSED):
                    LOGGER.warning(f"⚠️ WebSocket connection closed ({msg.type.name})")
                    break
        except (aiohttp.ClientError, ConnectionError) as e:
            LOGGER.error(f"❌ WebSocket error: {e}")
        finally:
            await self.close()

    async def handle_frame(self, data: str) -> None:
        """Une frame WebSocket peut contenir plusieurs lignes IRC (CRLF)"""
        for line in data.split("\n"):
            line = line.rstrip("\r")
            if line:
                await self.handle_line(line)

    async def handle_line(self, line: str) -> None:
        """Traite une ligne IRC reçue"""
        LOGGER.debug(f"Received: {line}")

        if AUTH_FAILED_MARKER in line:
            LOGGER.error("🔑 Twitch: Login authentication failed")
            self.state = SessionState.CLOSED
            raise AuthenticationFailed()

        if line.startswith(PING_TOKEN):
            await self.send_raw(line.replace(PING_TOKEN, PONG_TOKEN))
            return

        event = parse_privmsg(line, self.channel)
        if event is None:
            return

        self.chat_logger.log(event)

        if event.reward_id is not None and event.reward_id == self.config.spotify.reward_id:
            await self._handle_reward(event)
        elif event.text.startswith("!"):
            await self._handle_command(event)

    async def _bounded(self, coro, label: str) -> Optional[str]:
        try:
            return await asyncio.wait_for(coro, timeout=self.config.command_timeout)
        except asyncio.TimeoutError:
            LOGGER.warning(f"⏱️ {label} abandonné après {self.config.command_timeout}s")
        except Exception as e:
            LOGGER.error(f"❌ Erreur {label}: {e}", exc_info=True)
        return None

    async def _handle_command(self, event: ChatEvent) -> None:
        key = extract_command_key(event.text)
        if not key:
            return

        response = await self._bounded(self.registry.invoke(key, event), f"!{key}")
        if response is not None:
            await self.send_message(response)

    async def _handle_reward(self, event: ChatEvent) -> None:
        LOGGER.info(f"🎁 Reward Spotify par {event.sender}: {event.text}")

        if extract_track_id(event.text) is None:
            await self.send_message(FAILURE_REPLY)
            return

        response = await self._bounded(
            self.spotify.add_track_from_url(event.text), "reward Spotify"
        )
        if response is not None:
            await self.send_message(response)
