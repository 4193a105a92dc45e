"""Tests for configuration loading and validation."""

from __future__ import annotations

import tempfile
from pathlib import Path
import unittest
from unittest import mock

from vending_bus.config import Config, DEFAULT_CONFIG, load_config
from vending_bus.exceptions import ConfigValidationError


class ConfigTests(unittest.TestCase):
    """Validate config merge and fallback behavior."""

    def _load(self, text: str | None) -> dict:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            if text is not None:
                config_path.write_text(text, encoding="utf-8")
            return load_config(config_path=config_path)

    def test_missing_config_uses_defaults(self) -> None:
        config = self._load(None)
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertEqual(config["fleet"]["machine_ids"], ["001", "002", "003"])
        self.assertTrue(config["bus"]["strict_subscriptions"])

    def test_partial_config_merges_with_defaults(self) -> None:
        config = self._load('[fleet]\nmachine_ids = ["A1", " B2 "]\n')
        self.assertEqual(config["fleet"]["machine_ids"], ["A1", "B2"])
        self.assertEqual(config["logging"]["level"], "INFO")
        self.assertTrue(config["bus"]["strict_subscriptions"])

    def test_bus_policy_override(self) -> None:
        config = self._load("[bus]\nstrict_subscriptions = false\n")
        self.assertFalse(config["bus"]["strict_subscriptions"])

    def test_log_level_is_normalized(self) -> None:
        config = self._load('[logging]\nlevel = "debug"\n')
        self.assertEqual(config["logging"]["level"], "DEBUG")

    def test_duplicate_machine_ids_fall_back_to_defaults(self) -> None:
        with self.assertLogs("vending_bus.config", level="WARNING"):
            config = self._load('[fleet]\nmachine_ids = ["001", "001"]\n')
        self.assertEqual(config, DEFAULT_CONFIG)

    def test_empty_fleet_falls_back_to_defaults(self) -> None:
        with self.assertLogs("vending_bus.config", level="WARNING"):
            config = self._load("[fleet]\nmachine_ids = []\n")
        self.assertEqual(config["fleet"]["machine_ids"], ["001", "002", "003"])

    def test_invalid_log_level_falls_back_to_defaults(self) -> None:
        with self.assertLogs("vending_bus.config", level="WARNING"):
            config = self._load('[logging]\nlevel = "LOUD"\n')
        self.assertEqual(config["logging"]["level"], "INFO")

    def test_unparseable_toml_uses_defaults(self) -> None:
        with self.assertLogs("vending_bus.config", level="WARNING") as logs:
            config = self._load("[fleet\nmachine_ids = ")
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertTrue(any("Failed to parse config" in line for line in logs.output))

    def test_unexpected_validation_failure_raises_domain_error(self) -> None:
        with mock.patch.object(
            Config, "model_validate", side_effect=RuntimeError("model exploded")
        ):
            with self.assertRaises(ConfigValidationError) as ctx:
                self._load(None)
        self.assertIn("model exploded", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    def test_default_config_is_not_mutated_by_loading(self) -> None:
        self._load('[fleet]\nmachine_ids = ["Z9"]\n')
        self.assertEqual(DEFAULT_CONFIG["fleet"]["machine_ids"], ["001", "002", "003"])


if __name__ == "__main__":
    unittest.main()
