"""
Tests for the round-robin key pool.
"""

import logging

import pytest

from backend.llm_router import KeyPool, mask_key, parse_keys
from backend.llm_router import key_pool as key_pool_module


class TestParseKeys:

    def test_splits_and_trims(self):
        assert parse_keys(" A , B,C ") == ["A", "B", "C"]

    def test_drops_empty_entries(self):
        assert parse_keys("A,,B, ,") == ["A", "B"]

    def test_empty_and_none(self):
        assert parse_keys("") == []
        assert parse_keys(None) == []
        assert parse_keys(" , ,") == []

    def test_duplicates_are_kept(self):
        assert parse_keys("A,A,B") == ["A", "A", "B"]


class TestMaskKey:

    def test_long_key_shows_prefix_and_suffix(self):
        key = "AIzaSyD" + "x" * 29 + "WXYZ"
        assert len(key) == 40
        assert mask_key(key) == "AIzaSyDx...WXYZ"

    def test_short_key_fully_masked(self):
        assert mask_key("shortkey") == "***"
        assert mask_key("123456789012") == "***"

    def test_up_to_sixteen_chars_fully_masked(self):
        assert mask_key("1234567890abc") == "***"
        assert mask_key("1234567890abcdef") == "***"

    def test_seventeen_chars_is_masked_partially(self):
        assert mask_key("1234567890abcdefg") == "12345678...defg"


class TestKeyPool:

    def test_size(self):
        assert KeyPool("A, B,,C ").size == 3
        assert len(KeyPool("A")) == 1

    def test_issues_keys_in_order_and_wraps(self):
        pool = KeyPool("A,B,C")
        issued = [pool.next_key() for _ in range(7)]
        assert issued == ["A", "B", "C", "A", "B", "C", "A"]

    def test_single_key_always_returned(self):
        pool = KeyPool("only-key")
        assert [pool.next_key() for _ in range(3)] == ["only-key"] * 3

    def test_empty_pool_returns_none(self, caplog):
        pool = KeyPool("")
        with caplog.at_level(logging.ERROR, logger="eduvision.keys"):
            assert pool.next_key() is None
            assert pool.next_key() is None
        assert pool.size == 0
        assert "No Gemini API keys" in caplog.text

    def test_configure_resets_cursor(self):
        pool = KeyPool("A,B,C")
        pool.next_key()
        pool.next_key()
        pool.configure("X,Y")
        assert pool.next_key() == "X"
        assert pool.size == 2

    def test_issuance_is_logged_masked(self, caplog):
        key = "AIzaSyD" + "x" * 29 + "WXYZ"
        pool = KeyPool(key)
        with caplog.at_level(logging.INFO, logger="eduvision.keys"):
            pool.next_key()
        assert "Issued key #1/1: AIzaSyDx...WXYZ" in caplog.text
        assert key not in caplog.text

    def test_masked_keys(self):
        pool = KeyPool("short, AIzaSyD0123456789abcdef")
        assert pool.masked_keys() == ["***", "AIzaSyD0...cdef"]

    def test_from_env_reads_lazily(self, monkeypatch):
        pool = KeyPool.from_env()
        monkeypatch.setattr(key_pool_module, "get_api_key_config", lambda: "K1,K2")
        assert pool.size == 2
        assert pool.next_key() == "K1"

    @pytest.mark.parametrize("raw,expected", [("A", 1), ("A,B", 2), ("A,B,C,D,E,F", 6)])
    def test_cursor_cycles_through_pool(self, raw, expected):
        pool = KeyPool(raw)
        first_round = [pool.next_key() for _ in range(expected)]
        second_round = [pool.next_key() for _ in range(expected)]
        assert first_round == second_round == parse_keys(raw)
