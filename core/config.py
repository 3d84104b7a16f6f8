"""
Configuration du bot (config/config.yaml).

Chargée une fois au démarrage puis figée (dataclasses frozen).
Voir config/config.example.yaml pour le format.
"""
import logging
import pathlib
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

import yaml

from core.exceptions import ConfigError

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"


@dataclass(frozen=True)
class TwitchConfig:
    username: str
    channel: str                    # Sans #
    oauth_token: str                # Toujours préfixé "oauth:"


@dataclass(frozen=True)
class SpotifyConfig:
    client_id: str
    client_secret: str
    refresh_token: str
    reward_id: str
    timeout: float = 10.0           # Timeout httpx par requête (secondes)


@dataclass(frozen=True)
class BotConfig:
    twitch: TwitchConfig
    spotify: SpotifyConfig
    simple_commands: Dict[str, str] = field(default_factory=dict)
    command_timeout: float = 15.0   # Borne totale d'une commande (secondes)
    rate_limit_per30: int = 18      # PRIVMSG max / 30s (non-vérifié)
    log_level: str = "INFO"
    log_dir: str = "logs"


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return section


def _required(section: Mapping[str, Any], section_name: str, key: str) -> str:
    value = section.get(key)
    if value is None or str(value).strip() == "":
        raise ConfigError(f"Missing required config key: {section_name}.{key}")
    return str(value).strip()


def _number(section: Mapping[str, Any], key: str, default: float, cast=float):
    value = section.get(key, default)
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{key}': {value!r}") from e


def parse_config(raw: Mapping[str, Any]) -> BotConfig:
    """Valide le dict YAML et construit la BotConfig"""
    if not isinstance(raw, Mapping):
        raise ConfigError("Config root must be a mapping")

    twitch = _section(raw, "twitch")
    oauth_token = _required(twitch, "twitch", "oauth_token")
    if not oauth_token.startswith("oauth:"):
        oauth_token = f"oauth:{oauth_token}"

    spotify = _section(raw, "spotify")
    commands = _section(raw, "commands")
    timeouts = _section(raw, "timeouts")
    rate_limit = _section(raw, "rate_limit")
    logging_section = _section(raw, "logging")

    simple = commands.get("simple") or {}
    if not isinstance(simple, Mapping):
        raise ConfigError("commands.simple must be a mapping of name -> response")
    simple_commands = {}
    for name, response in simple.items():
        if not isinstance(response, str):
            raise ConfigError(f"commands.simple.{name} must be a string")
        simple_commands[str(name)] = response

    return BotConfig(
        twitch=TwitchConfig(
            username=_required(twitch, "twitch", "username"),
            channel=_required(twitch, "twitch", "channel").lstrip("#"),
            oauth_token=oauth_token,
        ),
        spotify=SpotifyConfig(
            client_id=_required(spotify, "spotify", "client_id"),
            client_secret=_required(spotify, "spotify", "client_secret"),
            refresh_token=_required(spotify, "spotify", "refresh_token"),
            reward_id=_required(spotify, "spotify", "reward_id"),
            timeout=_number(spotify, "timeout", 10.0),
        ),
        simple_commands=simple_commands,
        command_timeout=_number(timeouts, "command", 15.0),
        rate_limit_per30=_number(rate_limit, "per30", 18, cast=int),
        log_level=str(logging_section.get("level", "INFO")).upper(),
        log_dir=str(logging_section.get("dir", "logs")),
    )


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> BotConfig:
    """Charge config.yaml"""
    config_file = pathlib.Path(config_path)
    if not config_file.exists():
        raise ConfigError(f"Config file {config_path} not found")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    config = parse_config(raw)
    LOGGER.info(
        f"📄 Config chargée: #{config.twitch.channel} as {config.twitch.username}, "
        f"{len(config.simple_commands)} simple commands"
    )
    return config
