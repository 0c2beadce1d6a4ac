"""Config loader tests."""

import json
import tempfile
import unittest
from pathlib import Path

from slidemark.config import load_config


class TestConfig(unittest.TestCase):
    def _setup_project_root(self) -> Path:
        temp_dir = Path(tempfile.mkdtemp())
        (temp_dir / "themes").mkdir(parents=True)
        (temp_dir / "inputs").mkdir(parents=True)
        (temp_dir / "runs").mkdir(parents=True)
        return temp_dir

    def test_load_config_success(self) -> None:
        root = self._setup_project_root()
        config = load_config(root)
        self.assertEqual(Path(config.project_root), root)
        self.assertEqual(Path(config.themes_dir), root / "themes")
        self.assertIsNone(config.default_theme)
        self.assertTrue(config.options.printable)

    def test_load_config_reads_settings(self) -> None:
        root = self._setup_project_root()
        (root / "slidemark.json").write_text(
            json.dumps({"default_theme": "night", "options": {"printable": False}}),
            encoding="utf-8",
        )
        config = load_config(root)
        self.assertEqual(config.default_theme, "night")
        self.assertFalse(config.options.printable)

    def test_load_config_missing_themes(self) -> None:
        root = self._setup_project_root()
        (root / "themes").rmdir()
        with self.assertRaises(FileNotFoundError):
            load_config(root)

    def test_repository_config(self) -> None:
        config = load_config()
        self.assertEqual(config.default_theme, "default")
        self.assertTrue(config.options.loose_yaml)


if __name__ == "__main__":
    unittest.main()
