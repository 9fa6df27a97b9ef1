"""
Unit-тесты для generate_token: детерминизм, чувствительность к секунде, формат base36.
"""
import re
import unittest
from unittest.mock import patch

from app.loader.token import current_timestamp, generate_token


class TestGenerateToken(unittest.TestCase):
    def test_known_value(self):
        # "a:0:" -> 97, 3065, 95063, 2947011 -> base36 "1r5xf"
        self.assertEqual(generate_token("a", 0, ""), "1r5xf")

    def test_deterministic(self):
        t = 1_700_000_000
        self.assertEqual(generate_token("c1", t, "s"), generate_token("c1", t, "s"))

    def test_changes_with_time_bucket(self):
        t = 1_700_000_000
        tokens = {generate_token("c1", t + i, "s") for i in range(50)}
        self.assertGreaterEqual(len(tokens), 49)

    def test_changes_with_script_and_secret(self):
        t = 1_700_000_000
        self.assertNotEqual(generate_token("c1", t, "s"), generate_token("c2", t, "s"))
        self.assertNotEqual(generate_token("c1", t, "s"), generate_token("c1", t, "other"))

    def test_long_input_stays_in_int32_range(self):
        token = generate_token("x" * 500, 1_700_000_000, "secret" * 20)
        self.assertRegex(token, re.compile(r"^[0-9a-z]+$"))
        self.assertLessEqual(int(token, 36), 2**31)

    def test_non_ascii_input(self):
        token = generate_token("скрипт-😀", 1, "")
        self.assertRegex(token, re.compile(r"^[0-9a-z]+$"))

    @patch("app.loader.token.get_token_secret", return_value="")
    def test_missing_secret_falls_back_to_empty(self, _):
        self.assertEqual(generate_token("c1", 42), generate_token("c1", 42, ""))

    @patch("app.loader.token.get_token_secret", return_value="configured")
    def test_secret_from_settings(self, _):
        self.assertEqual(generate_token("c1", 42), generate_token("c1", 42, "configured"))

    @patch("app.loader.token.time.time", return_value=1_700_000_123.9)
    def test_current_timestamp_is_whole_seconds(self, _):
        self.assertEqual(current_timestamp(), 1_700_000_123)
