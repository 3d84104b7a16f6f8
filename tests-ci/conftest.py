"""
Pytest configuration for CI tests
Provides common fixtures and test config
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import aiohttp
import pytest

from backends.spotify_client import SpotifyClient
from core.config import parse_config
from core.message_types import ChatEvent


RAW_CONFIG = {
    'twitch': {
        'username': 'test_bot',
        'channel': 'bar',
        'oauth_token': 'oauth:test_token_mock',
    },
    'spotify': {
        'client_id': 'test_client_id',
        'client_secret': 'test_client_secret',
        'refresh_token': 'test_refresh_token',
        'reward_id': 'reward-123',
        'timeout': 5.0,
    },
    'commands': {
        'simple': {
            'discord': 'https://discord.gg/test',
            'hi': 'hello chat',
        }
    },
    'timeouts': {'command': 2.0},
}


class FakeWebSocket:
    """Stand-in for aiohttp.ClientWebSocketResponse"""

    def __init__(self, frames=(), send_error=None):
        self.frames = list(frames)
        self.sent = []
        self.closed = False
        self.send_error = send_error

    async def send_str(self, data):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(data)

    async def close(self):
        self.closed = True

    def exception(self):
        return None

    async def receive(self):
        # Comme aiohttp: CLOSED une fois le flux épuisé
        if not self.frames:
            return SimpleNamespace(type=aiohttp.WSMsgType.CLOSED, data=None)
        return self.frames.pop(0)


def text_frame(data: str):
    return SimpleNamespace(type=aiohttp.WSMsgType.TEXT, data=data)


def privmsg(text: str, sender: str = "viewer", badges: str = "", reward_id: str = "") -> str:
    tags = f"@badges={badges};display-name={sender}"
    if reward_id:
        tags += f";custom-reward-id={reward_id}"
    return f"{tags} :{sender}!{sender}@{sender}.tmi.twitch.tv PRIVMSG #bar :{text}"


@pytest.fixture
def raw_config():
    """Raw YAML-like config dict (no real API keys)"""
    return {section: dict(values) for section, values in RAW_CONFIG.items()}


@pytest.fixture
def bot_config(raw_config):
    return parse_config(raw_config)


@pytest.fixture
def spotify_mock():
    """SpotifyClient stub recording every call"""
    spotify = AsyncMock(spec=SpotifyClient)
    spotify.get_currently_playing.return_value = "song by artist"
    spotify.skip_track.return_value = "next song by artist"
    spotify.previous_track.return_value = "old song by artist"
    spotify.add_track_from_url.return_value = "song by artist has been added to the queue :3"
    return spotify


@pytest.fixture
def make_event():
    def _make(text="!test", sender="viewer", moderator=False, vip=False,
              broadcaster=False, reward_id=None):
        return ChatEvent(
            sender=sender,
            text=text,
            channel_hint="bar",
            is_moderator=moderator or broadcaster,
            is_broadcaster=broadcaster,
            is_vip=vip,
            reward_id=reward_id,
        )
    return _make
