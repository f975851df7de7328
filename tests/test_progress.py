"""Tests for chuk_mcp_terrain.core.progress."""

import logging

from chuk_mcp_terrain.core.progress import report


class TestReport:
    def test_no_callback(self):
        assert report(None, "hello") is False

    def test_callback_receives_message(self):
        messages = []
        assert report(messages.append, "hello") is True
        assert messages == ["hello"]

    def test_failing_callback_is_swallowed(self, caplog):
        def boom(message):
            raise RuntimeError("terminal closed")

        with caplog.at_level(logging.WARNING):
            assert report(boom, "hello") is False
        assert "terminal closed" in caplog.text

    def test_message_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="chuk_mcp_terrain.core.progress"):
            report(None, "indexing")
        assert "indexing" in caplog.text
