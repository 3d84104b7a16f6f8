"""
Frame Parser - IRC Twitch → ChatEvent

Convertit une ligne IRC brute (avec ou sans préfixe de tags `@k=v;k=v `)
en ChatEvent. Toute ligne qui n'est pas un PRIVMSG bien formé donne None.

Exemple:
    @badges=moderator/1;display-name=Foo :foo!foo@foo.tmi.twitch.tv PRIVMSG #bar :!skip
    → ChatEvent(sender="foo", channel_hint="bar", text="!skip", is_moderator=True)
"""
from typing import Dict, Optional

from core.message_types import ChatEvent

PRIVMSG_MARKER = "PRIVMSG"
REWARD_TAG = "custom-reward-id"
MIN_PRIVMSG_TOKENS = 4  # source, verbe, cible, début du payload


def parse_tags(raw_tags: str) -> Dict[str, str]:
    """
    Découpe `k1=v1;k2=v2` en dict. Les paires sans `=` sont ignorées,
    la valeur peut être vide.
    """
    tags: Dict[str, str] = {}
    for pair in raw_tags.split(";"):
        key, sep, value = pair.partition("=")
        if sep:
            tags[key] = value
    return tags


def parse_privmsg(raw_line: str, configured_channel: str) -> Optional[ChatEvent]:
    """
    Parse une ligne IRC en ChatEvent.

    Args:
        raw_line: Ligne IRC brute (sans CRLF)
        configured_channel: Channel du bot (comparé au sender pour le broadcaster)

    Returns:
        ChatEvent si la ligne est un PRIVMSG valide, None sinon
    """
    if PRIVMSG_MARKER not in raw_line:
        return None

    is_moderator = False
    is_vip = False
    reward_id: Optional[str] = None

    message = raw_line
    if raw_line.startswith("@"):
        space_pos = raw_line.find(" ")
        if space_pos == -1:
            return None

        for key, value in parse_tags(raw_line[1:space_pos]).items():
            if key == "badges":
                # Scan brut de la valeur, pas de parsing badge/version
                is_moderator = "moderator/" in value
                is_vip = "vip/" in value
            elif key == REWARD_TAG and value:
                reward_id = value

        message = raw_line[space_pos + 1:]

    parts = message.split()
    if len(parts) < MIN_PRIVMSG_TOKENS:
        return None

    source = parts[0]
    if source.startswith(":"):
        source = source[1:]
    sender = source.split("!", 1)[0]
    if not sender:
        return None

    channel_hint = parts[2]
    if channel_hint.startswith("#"):
        channel_hint = channel_hint[1:]

    colon_pos = message.find(" :")
    if colon_pos == -1:
        return None
    text = message[colon_pos + 2:]

    is_broadcaster = sender.lower() == configured_channel.lower()
    if is_broadcaster:
        is_moderator = True

    return ChatEvent(
        sender=sender,
        text=text,
        channel_hint=channel_hint,
        is_moderator=is_moderator,
        is_broadcaster=is_broadcaster,
        is_vip=is_vip,
        reward_id=reward_id,
    )
