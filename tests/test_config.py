import json
import os
import sys
import tempfile
import unittest
from unittest import mock

# Ensure local imports work when running this file directly.
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(THIS_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import config as cfg


class ConfigFileTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = os.path.join(self._tmp.name, "config.json")

        # Keep the developer's real credentials out of these tests.
        patcher = mock.patch.dict(os.environ, {}, clear=False)
        patcher.start()
        self.addCleanup(patcher.stop)
        for name in cfg.ENV_OVERRIDES.values():
            os.environ.pop(name, None)

    def write(self, data) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def read(self) -> dict:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)


class TestLoadConfig(ConfigFileTestCase):
    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            cfg.load_config(self.path)

    def test_defaults_fill_missing_fields(self):
        self.write({"spotify_client_id": "id", "spotify_client_secret": "secret", "search_limit": 25})
        config = cfg.load_config(self.path)

        self.assertEqual(config["spotify_client_id"], "id")
        self.assertEqual(config["search_limit"], 25)
        self.assertEqual(config["request_timeout"], cfg.DEFAULT_CONFIG["request_timeout"])
        self.assertEqual(config["spotify_token_url"], "https://accounts.spotify.com/api/token")

    def test_non_object_file_is_rejected(self):
        self.write(["nope"])
        with self.assertRaises(ValueError):
            cfg.load_config(self.path)

    def test_environment_overrides_credentials(self):
        self.write({"spotify_client_id": "file-id", "spotify_client_secret": "file-secret"})
        os.environ["SPOTIFY_CLIENT_ID"] = "env-id"
        os.environ["SPOTIFY_CLIENT_SECRET"] = "  "

        config = cfg.load_config(self.path)

        self.assertEqual(config["spotify_client_id"], "env-id")
        self.assertEqual(config["spotify_client_secret"], "file-secret")

    def test_get_config_value_falls_back_to_default(self):
        self.assertEqual(cfg.get_config_value("search_limit", 7, path=self.path), 7)
        self.write({"search_limit": 3})
        self.assertEqual(cfg.get_config_value("search_limit", 7, path=self.path), 3)


class TestValidateConfig(unittest.TestCase):
    def valid(self) -> dict:
        config = dict(cfg.DEFAULT_CONFIG)
        config.update(spotify_client_id="id", spotify_client_secret="secret")
        return config

    def test_defaults_with_credentials_are_valid(self):
        is_valid, errors = cfg.validate_config(self.valid())
        self.assertTrue(is_valid, errors)

    def test_default_config_needs_credentials(self):
        is_valid, errors = cfg.validate_config(dict(cfg.DEFAULT_CONFIG))
        self.assertFalse(is_valid)
        self.assertIn("Field 'spotify_client_id' must not be empty", errors)
        self.assertIn("Field 'spotify_client_secret' must not be empty", errors)

    def test_type_range_and_choice_errors(self):
        config = self.valid()
        config.update(search_limit=80, request_timeout="fast", log_level="LOUD", token_expiry_margin=True)

        is_valid, errors = cfg.validate_config(config)

        self.assertFalse(is_valid)
        self.assertIn("Field 'search_limit' must be <= 50, got 80", errors)
        self.assertIn("Field 'request_timeout' must be int/float, got str", errors)
        self.assertTrue(any("log_level" in e for e in errors))
        self.assertIn("Field 'token_expiry_margin' must not be a boolean", errors)

    def test_missing_required_field(self):
        config = self.valid()
        del config["spotify_client_secret"]
        is_valid, errors = cfg.validate_config(config)
        self.assertFalse(is_valid)
        self.assertIn("Missing required field: spotify_client_secret", errors)


class TestUpdateConfig(ConfigFileTestCase):
    def test_update_persists_valid_value(self):
        self.write({})
        ok, message = cfg.update_config("search_limit", 20, path=self.path)
        self.assertTrue(ok, message)
        self.assertEqual(self.read()["search_limit"], 20)

    def test_update_rejects_invalid_value(self):
        self.write({})
        ok, message = cfg.update_config("search_limit", 0, path=self.path)
        self.assertFalse(ok)
        self.assertIn("search_limit", message)
        self.assertNotIn("search_limit", self.read())

    def test_update_rejects_unknown_key(self):
        self.write({})
        ok, message = cfg.update_config("audio_format", "mp3", path=self.path)
        self.assertFalse(ok)
        self.assertIn("Unknown config key", message)

    def test_update_does_not_persist_environment_secrets(self):
        self.write({"spotify_client_secret": ""})
        os.environ["SPOTIFY_CLIENT_SECRET"] = "from-env"

        ok, _ = cfg.update_config("log_level", "DEBUG", path=self.path)

        self.assertTrue(ok)
        saved = self.read()
        self.assertEqual(saved["log_level"], "DEBUG")
        self.assertEqual(saved["spotify_client_secret"], "")

    def test_reset_to_defaults(self):
        self.write({"spotify_client_id": "id", "search_limit": 3})
        ok, _ = cfg.reset_to_defaults(path=self.path)
        self.assertTrue(ok)
        self.assertEqual(self.read(), cfg.DEFAULT_CONFIG)


if __name__ == "__main__":
    unittest.main(verbosity=2)
