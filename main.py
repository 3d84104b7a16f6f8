#!/usr/bin/env python3
"""
TuneBot - Twitch chat bot with Spotify commands

Connexion IRC Twitch (WebSocket), commandes chat (!spotify, !play, !skip,
!prev + commandes simples de la config) et reward "song request".

Exit codes:
    0 - transport fermé normalement
    1 - config invalide, authentification refusée ou connexion impossible
"""

import argparse
import asyncio
import logging
import pathlib
import sys

from backends.spotify_client import SpotifyClient
from core.chat_logger import ChatLogger
from core.command_registry import build_registry
from core.config import DEFAULT_CONFIG_PATH, BotConfig, load_config
from core.exceptions import AuthenticationFailed, ConfigError, TransportError
from core.rate_limiter import RateLimiter
from twitchapi.transports.irc_client import IRCClient

# Logger will be configured in setup_logging()
LOGGER = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(description="TuneBot - Twitch chat bot with Spotify commands")
    parser.add_argument(
        '--config',
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f'Path to config file (default: {DEFAULT_CONFIG_PATH})'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Override logging.level from the config file'
    )
    return parser.parse_args(argv)


def setup_logging(level: str = "INFO", log_dir: str = "logs"):
    """
    Setup logging structure

    Structure:
        logs/
        ├── instance.log     (main bot logs, startup, errors)
        └── chat.log         (all chat messages received)
    """
    logs_base = pathlib.Path(log_dir)
    logs_base.mkdir(parents=True, exist_ok=True)

    log_paths = {
        'instance': logs_base / "instance.log",
        'chat': logs_base / "chat.log",
    }

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s %(message)s",
        handlers=[
            logging.FileHandler(log_paths['instance'], encoding="utf-8"),
            logging.StreamHandler()
        ],
        force=True  # Override any existing config
    )
    # httpx log chaque requête en INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return log_paths


async def run_bot(config: BotConfig, log_paths: dict) -> None:
    """Construit le registre et fait tourner la session IRC jusqu'à sa fermeture"""
    spotify = SpotifyClient(config.spotify)
    chat_logger = ChatLogger(log_paths.get('chat'))
    registry = build_registry(config, spotify)
    client = IRCClient(
        config,
        registry,
        spotify,
        chat_logger=chat_logger,
        rate_limiter=RateLimiter(per30=config.rate_limit_per30),
    )

    try:
        await client.connect()
        await client.run()
    finally:
        await client.close()
        await spotify.close()
        chat_logger.close()


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logging.basicConfig(level=logging.ERROR)
        LOGGER.error(f"❌ {e}")
        return 1

    log_paths = setup_logging(args.log_level or config.log_level, config.log_dir)
    LOGGER.info("Starting Twitch bot")

    try:
        asyncio.run(run_bot(config, log_paths))
    except AuthenticationFailed as e:
        LOGGER.error(f"❌ Bot error: {e} - vérifier twitch.oauth_token")
        return 1
    except TransportError as e:
        LOGGER.error(f"❌ Bot error: {e}")
        return 1
    except KeyboardInterrupt:
        LOGGER.info("⌨️ Interrupted by user")

    LOGGER.info("👋 Bot stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
