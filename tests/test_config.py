import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pyvalq.core.config import Config


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        env = {key: value for key, value in os.environ.items() if not key.startswith("PYVALQ_")}
        patcher = patch.dict(os.environ, env, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _write(self, name, content):
        path = Path(self.tmpdir.name) / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_defaults(self):
        config = Config(load_defaults=False)
        self.assertTrue(config.get("use_default_lines"))
        self.assertIsNone(config.get("language_file"))
        self.assertIsNone(config.get("presence.database"))
        self.assertEqual(config.get("disable_rules"), [])
        self.assertEqual(config.get("missing.key", "fallback"), "fallback")

    def test_defaults_are_not_shared(self):
        first = Config(load_defaults=False)
        first.get("disable_rules").append("email")
        self.assertEqual(Config(load_defaults=False).get("disable_rules"), [])

    def test_file_config_is_merged(self):
        path = self._write("pyvalq.toml", 'disable_rules = ["regex"]\n\n[presence]\ndatabase = "app.db"\n\n[messages]\nrequired = "Needed."\n')
        config = Config(config_path=path)
        self.assertEqual(config.get("disable_rules"), ["regex"])
        self.assertEqual(config.get("presence.database"), "app.db")
        self.assertEqual(config.get("messages.required"), "Needed.")
        self.assertTrue(config.get("use_default_lines"))

    def test_relative_language_file_is_resolved(self):
        path = self._write("pyvalq.toml", 'language_file = "lang/en.toml"\n')
        config = Config(config_path=path)
        self.assertEqual(config.get("language_file"), str(Path(self.tmpdir.name) / "lang/en.toml"))

    def test_invalid_file_is_logged_and_ignored(self):
        path = self._write("broken.toml", "this is = = not toml")
        with self.assertLogs("pyvalq.core.config", level="WARNING"):
            config = Config(config_path=path)
        self.assertTrue(config.get("use_default_lines"))

    def test_project_file_is_found_in_working_directory(self):
        self._write("pyvalq.toml", "verbose = true\n")
        with patch("pyvalq.core.config.Path.cwd", return_value=Path(self.tmpdir.name)), \
                patch("pyvalq.core.config.USER_CONFIG_PATH", Path(self.tmpdir.name) / "absent.toml"):
            config = Config()
        self.assertTrue(config.get("verbose"))

    def test_environment_overrides(self):
        path = self._write("pyvalq.toml", "use_default_lines = true\n")
        os.environ["PYVALQ_USE_DEFAULT_LINES"] = "false"
        os.environ["PYVALQ_DISABLE_RULES"] = "email, active_url"
        os.environ["PYVALQ_PRESENCE_DATABASE"] = "env.db"
        config = Config(config_path=path)
        self.assertFalse(config.get("use_default_lines"))
        self.assertEqual(config.get("disable_rules"), ["email", "active_url"])
        self.assertEqual(config.get("presence.database"), "env.db")

    def test_set(self):
        config = Config(load_defaults=False)
        config.set("presence.database", ":memory:")
        self.assertEqual(config.get("presence.database"), ":memory:")

    def test_is_rule_enabled(self):
        config = Config(load_defaults=False)
        config.set("disable_rules", ["alpha_num", "ActiveUrl"])
        self.assertFalse(config.is_rule_enabled("AlphaNum"))
        self.assertFalse(config.is_rule_enabled("active_url"))
        self.assertTrue(config.is_rule_enabled("Alpha"))

    def test_str(self):
        self.assertTrue(str(Config(load_defaults=False)).startswith("Config("))


if __name__ == '__main__':
    unittest.main()
