"""
Core - Parsing IRC, permissions, registre de commandes, utilitaires transverses
"""

from core.command_registry import Command, CommandRegistry
from core.message_parser import parse_privmsg
from core.message_types import ChatEvent
from core.permissions import has_elevated_privilege
from core.rate_limiter import RateLimiter

__all__ = [
    "ChatEvent",
    "Command",
    "CommandRegistry",
    "RateLimiter",
    "has_elevated_privilege",
    "parse_privmsg",
]
