"""Tests for configuration loading."""

import json
import os
import stat
import tempfile
import unittest

from pynotes.config import (
    NotesConfig,
    get_config_path,
    get_session_path,
    read_json,
    write_json,
)
from pynotes.exceptions import PyNotesConfigError


class ConfigTest(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.env = {"PYNOTES_CONFIG_DIR": self.tmp.name}
        self.path = get_config_path(self.env)

    def test_paths_follow_config_dir(self):
        self.assertEqual(self.path, os.path.join(self.tmp.name, "config.json"))
        self.assertEqual(
            get_session_path(self.env), os.path.join(self.tmp.name, "session.json")
        )

    def test_defaults_without_file(self):
        config = NotesConfig.load(env=self.env)
        self.assertEqual(config, NotesConfig())
        self.assertEqual(config.collection, "notes")
        self.assertEqual(config.database, "(default)")

    def test_file_then_env_override(self):
        write_json(self.path, {"api_key": "file-key", "project_id": "p1", "extra": 1})
        env = dict(self.env, PYNOTES_PROJECT_ID="p2", PYNOTES_POLL_INTERVAL="0.5")
        config = NotesConfig.load(env=env)
        self.assertEqual(config.api_key, "file-key")
        self.assertEqual(config.project_id, "p2")
        self.assertEqual(config.poll_interval, 0.5)

    def test_bad_poll_interval(self):
        for value in ("soon", "0", "-1"):
            with self.subTest(value=value):
                with self.assertRaises(PyNotesConfigError):
                    NotesConfig.from_mapping({"poll_interval": value})

    def test_invalid_json(self):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertRaises(PyNotesConfigError):
            NotesConfig.load(env=self.env)

    def test_non_object_rejected(self):
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([1, 2], f)
        with self.assertRaises(PyNotesConfigError):
            read_json(self.path)

    def test_require_remote_lists_missing(self):
        with self.assertRaises(PyNotesConfigError) as ctx:
            NotesConfig(api_key="k").require_remote()
        self.assertIn("PYNOTES_PROJECT_ID", str(ctx.exception))
        self.assertNotIn("PYNOTES_API_KEY", str(ctx.exception))
        NotesConfig(api_key="k", project_id="p").require_remote()

    @unittest.skipIf(os.name == "nt", "POSIX permissions")
    def test_write_json_is_private(self):
        write_json(self.path, {"refresh_token": "t"})
        mode = stat.S_IMODE(os.stat(self.path).st_mode)
        self.assertEqual(mode, 0o600)
        self.assertEqual(read_json(self.path), {"refresh_token": "t"})


if __name__ == "__main__":
    unittest.main()
