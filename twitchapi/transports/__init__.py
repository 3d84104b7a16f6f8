"""
Transports Twitch
"""

from twitchapi.transports.irc_client import IRCClient, SessionState

__all__ = ["IRCClient", "SessionState"]
