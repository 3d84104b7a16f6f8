"""
Tests pour le module core/ (rate_limiter, chat_logger)
"""
import logging
from unittest.mock import patch

import pytest

from core.chat_logger import ChatLogger
from core.rate_limiter import RateLimiter


@pytest.mark.unit
class TestRateLimiter:
    """Tests du rate limiter d'envoi"""

    def test_rate_limiter_allows_first_call(self):
        limiter = RateLimiter(per30=18)
        assert limiter.can_send("channel1") is True

    def test_rate_limiter_blocks_rapid_calls(self):
        limiter = RateLimiter(per30=2)

        assert limiter.can_send("channel1") is True
        assert limiter.can_send("channel1") is True
        assert limiter.can_send("channel1") is False

    def test_rate_limiter_per_channel(self):
        limiter = RateLimiter(per30=1)

        assert limiter.can_send("channel1") is True
        assert limiter.can_send("channel2") is True
        assert limiter.can_send("channel1") is False

    def test_rate_limiter_window_slides(self):
        limiter = RateLimiter(per30=1)

        with patch("core.rate_limiter.time.monotonic", return_value=100.0):
            assert limiter.can_send("channel1") is True
            assert limiter.can_send("channel1") is False
        with patch("core.rate_limiter.time.monotonic", return_value=131.0):
            assert limiter.can_send("channel1") is True

    def test_each_send_consumes_one_slot(self):
        limiter = RateLimiter(per30=18)

        with patch("core.rate_limiter.time.monotonic", return_value=100.0):
            sent = [limiter.can_send("channel1") for _ in range(20)]

        assert sent.count(True) == 18
        assert sent[18:] == [False, False]
        assert len(limiter._history["channel1"]) == 18


@pytest.mark.unit
class TestChatLogger:
    """Tests du log chat dédié"""

    def test_writes_chat_log(self, tmp_path, make_event):
        chat_log = tmp_path / "chat.log"
        chat_logger = ChatLogger(chat_log)
        try:
            chat_logger.log(make_event("hello chat", sender="foo", moderator=True))
            chat_logger.log(make_event("!np", sender="bar", broadcaster=True))
        finally:
            chat_logger.close()

        content = chat_log.read_text(encoding="utf-8")
        assert "[#bar] 🛡️foo: hello chat" in content
        assert "👑🛡️bar: !np" in content
        assert chat_logger.get_message_count() == 2

    def test_without_file(self, make_event, caplog):
        chat_logger = ChatLogger()
        with caplog.at_level(logging.DEBUG, logger="core.chat_logger"):
            chat_logger.log(make_event("hi", sender="foo"))
        assert "foo: hi" in caplog.text

    def test_single_file_handler_for_several_instances(self, tmp_path, make_event):
        chat_log = tmp_path / "chat.log"
        first = ChatLogger(chat_log)
        second = ChatLogger(chat_log)
        try:
            assert len(logging.getLogger("chat_messages").handlers) == 1
            second.log(make_event("only once", sender="foo"))
        finally:
            second.close()
            first.close()

        content = chat_log.read_text(encoding="utf-8")
        assert content.count("foo: only once") == 1
        assert logging.getLogger("chat_messages").handlers == []
