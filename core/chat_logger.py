#!/usr/bin/env python3
"""
Chat Logger
Logs all chat messages to dedicated chat.log file
"""

import logging
import pathlib
from typing import Optional

from core.message_types import ChatEvent

LOGGER = logging.getLogger(__name__)


class ChatLogger:
    """
    Écrit chaque ChatEvent reçu dans chat.log
    Séparé de instance.log pour faciliter l'analyse du chat
    """

    def __init__(self, chat_log_file: Optional[pathlib.Path] = None):
        """
        Args:
            chat_log_file: Chemin de chat.log (None = log principal uniquement)
        """
        self.message_count = 0

        if chat_log_file:
            self.chat_file_logger = logging.getLogger("chat_messages")
            self.chat_file_logger.setLevel(logging.INFO)
            self.chat_file_logger.propagate = False  # Don't send to root logger

            # Logger global: un seul FileHandler même si plusieurs ChatLogger
            if not self.chat_file_logger.handlers:
                handler = logging.FileHandler(chat_log_file, encoding="utf-8")
                handler.setFormatter(logging.Formatter("%(asctime)s %(message)s"))
                self.chat_file_logger.addHandler(handler)

            LOGGER.info(f"📝 Chat logging to: {chat_log_file}")
        else:
            self.chat_file_logger = None
            LOGGER.info("📝 Chat logging to main log (no dedicated file)")

    def log(self, event: ChatEvent) -> None:
        """Log un message chat avec ses badges"""
        self.message_count += 1

        badges_str = ""
        if event.is_broadcaster:
            badges_str += "👑"
        if event.is_moderator:
            badges_str += "🛡️"
        if event.is_vip:
            badges_str += "💎"
        if event.reward_id:
            badges_str += "🎁"

        line = f"[#{event.channel_hint}] {badges_str}{event.sender}: {event.text}"
        if self.chat_file_logger:
            self.chat_file_logger.info(line)
        else:
            LOGGER.debug(line)

    def close(self) -> None:
        """Ferme le FileHandler de chat.log"""
        if self.chat_file_logger:
            for handler in list(self.chat_file_logger.handlers):
                handler.close()
                self.chat_file_logger.removeHandler(handler)

    def get_message_count(self) -> int:
        """Retourne le nombre de messages reçus"""
        return self.message_count
