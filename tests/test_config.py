import json
import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import orjson

from casino.config import AppConfig, load_config, save_config
from casino.core import logger as log_module
from casino.core.logger import JsonFormatter, PlainFormatter, get_logger, init_logging


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self.tmp.name) / "config.json"

    def tearDown(self):
        self.tmp.cleanup()

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults_without_file(self):
        config = load_config(self.config_path)
        self.assertEqual(config.table.starting_balance, 1000.0)
        self.assertEqual(config.table.history_size, 100)
        self.assertEqual(config.table.chip_values, [1.0, 5.0, 10.0, 25.0, 50.0, 100.0])
        self.assertTrue(config.table.clear_rig_after_settle)
        self.assertIsNone(config.rng.seed)
        self.assertEqual(config.logging.level, "INFO")

    @patch.dict(os.environ, {}, clear=True)
    def test_file_values(self):
        self.config_path.write_text(json.dumps({
            "table": {"starting_balance": 250, "chip_values": [5, 25]},
            "rng": {"seed": 11},
        }))
        config = load_config(self.config_path)
        self.assertEqual(config.table.starting_balance, 250.0)
        self.assertEqual(config.table.chip_values, [5.0, 25.0])
        self.assertEqual(config.rng.seed, 11)

    @patch.dict(os.environ, {
        "ROULETTE_STARTING_BALANCE": "75.5",
        "ROULETTE_HISTORY_SIZE": "12",
        "ROULETTE_CLEAR_RIG_AFTER_SETTLE": "false",
        "ROULETTE_TIMEZONE": "UTC",
        "ROULETTE_RNG_SEED": "99",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMATTER": "json",
    }, clear=True)
    def test_env_overrides_file(self):
        self.config_path.write_text(json.dumps({"table": {"starting_balance": 250}}))
        config = load_config(self.config_path)
        self.assertEqual(config.table.starting_balance, 75.5)
        self.assertEqual(config.table.history_size, 12)
        self.assertFalse(config.table.clear_rig_after_settle)
        self.assertEqual(config.table.timezone, "UTC")
        self.assertEqual(config.rng.seed, 99)
        self.assertEqual(config.logging.level, "DEBUG")
        self.assertEqual(config.logging.formatter, "json")

    @patch.dict(os.environ, {}, clear=True)
    def test_save_round_trip(self):
        config = AppConfig()
        config.table.starting_balance = 42.0
        save_config(config, self.config_path)

        saved = json.loads(self.config_path.read_text())
        self.assertEqual(saved["paths"], {"log_file": "data/roulette.log"})
        self.assertEqual(load_config(self.config_path).table.starting_balance, 42.0)

    def test_config_file_from_env(self):
        self.config_path.write_text(json.dumps({"table": {"history_size": 7}}))
        with patch.dict(os.environ, {"ROULETTE_CONFIG_FILE": str(self.config_path)}, clear=True):
            config = load_config()
        self.assertEqual(config.table.history_size, 7)
        self.assertEqual(config.paths.get_config_path(), self.config_path)

    @patch.dict(os.environ, {}, clear=True)
    def test_save_writes_back_to_loaded_file(self):
        config = load_config(self.config_path)
        config.table.history_size = 9
        save_config(config)
        self.assertEqual(json.loads(self.config_path.read_text())["table"]["history_size"], 9)

    @patch.dict(os.environ, {"LOG_FILE": "/var/log/roulette/table.log"}, clear=True)
    def test_log_file_from_env(self):
        config = load_config(self.config_path)
        self.assertEqual(config.paths.get_log_path(), Path("/var/log/roulette/table.log"))


class TestLogging(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def _record(self, **extra):
        record = logging.LogRecord("roulette.ledger", logging.INFO, __file__, 1, "Bet placed: %s", ("10",), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_json_formatter(self):
        data = orjson.loads(JsonFormatter().format(self._record(session_id="abc")))
        self.assertEqual(data["level"], "INFO")
        self.assertEqual(data["name"], "roulette.ledger")
        self.assertEqual(data["message"], "Bet placed: 10")
        self.assertEqual(data["session_id"], "abc")
        self.assertNotIn("args", data)

    def test_plain_formatter(self):
        line = PlainFormatter().format(self._record())
        self.assertIn("| INFO     | roulette.ledger | Bet placed: 10", line)

    def test_child_loggers_share_handlers(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "logs" / "roulette.log"
            root = init_logging(level="DEBUG", log_to_file=True, log_file_path=log_path)
            try:
                get_logger("wheel").info("Spin: 17 Black")
                for handler in root.handlers:
                    handler.flush()
                self.assertIn("roulette.wheel | Spin: 17 Black", log_path.read_text())
            finally:
                init_logging(level="INFO", log_to_file=False)

    def _fresh_logger_from_env(self, env):
        """Build the package logger the way first use does, from env-driven settings."""
        with patch.dict(os.environ, env, clear=True):
            config = load_config(Path(self.tmp.name) / "missing.json")
        with patch.object(log_module, "settings", config), patch.object(log_module, "_app_logger", None):
            return get_logger("wheel")

    def test_first_logger_follows_log_level(self):
        try:
            child = self._fresh_logger_from_env({"LOG_LEVEL": "DEBUG"})
            self.assertEqual(child.getEffectiveLevel(), logging.DEBUG)
            self.assertTrue(child.isEnabledFor(logging.DEBUG))
        finally:
            init_logging(level="INFO", log_to_file=False)

    def test_first_logger_writes_to_configured_file(self):
        log_path = Path(self.tmp.name) / "logs" / "table.log"
        try:
            child = self._fresh_logger_from_env({"LOG_TO_FILE": "true", "LOG_FILE": str(log_path)})
            child.warning("Rig set: number=17")
            for handler in child.parent.handlers:
                handler.flush()
            self.assertIn("roulette.wheel | Rig set: number=17", log_path.read_text())
        finally:
            init_logging(level="INFO", log_to_file=False)

    def test_json_formatter_setting(self):
        try:
            child = self._fresh_logger_from_env({"LOG_FORMATTER": "json"})
            self.assertIsInstance(child.parent.handlers[0].formatter, JsonFormatter)
        finally:
            init_logging(level="INFO", log_to_file=False, formatter="color")


if __name__ == '__main__':
    unittest.main()
