"""Theme registry tests."""

import tempfile
import threading
import unittest
from pathlib import Path

from slidemark.errors import ThemeNotFound, ThemeParseError
from slidemark.theme.registry import ThemeRegistry, build_theme

BASE_CSS = """/* @theme base */
section { background: white; }
h1 { color: black; }
"""

CHILD_CSS = """/* @theme child */
@import "base";
h1 { color: green; }
"""


class TestBuildTheme(unittest.TestCase):
    def test_name_and_meta(self) -> None:
        theme = build_theme("/*\n * @theme sample\n * @author someone\n */\nsection { color: red; }")
        self.assertEqual(theme.name, "sample")
        self.assertEqual(theme.meta["author"], "someone")
        self.assertIsNone(theme.import_name)

    def test_missing_name(self) -> None:
        with self.assertRaises(ThemeParseError):
            build_theme("section { color: red; }")

    def test_import_name(self) -> None:
        self.assertEqual(build_theme(CHILD_CSS).import_name, "base")
        self.assertEqual(
            build_theme('/* @theme x */\n@import-theme url("base");').import_name, "base"
        )

    def test_declared_size(self) -> None:
        theme = build_theme("/* @theme wide */\n:root { width: 1920px; height: 1080px; }")
        self.assertEqual((theme.width, theme.height), ("1920px", "1080px"))


class TestThemeRegistry(unittest.TestCase):
    def test_register_and_get(self) -> None:
        registry = ThemeRegistry()
        theme = registry.register(BASE_CSS)
        self.assertIs(registry.get("base"), theme)
        self.assertIsNone(registry.get("missing"))
        self.assertIn("base", registry)
        self.assertEqual(len(registry), 1)

    def test_failed_registration_does_not_register(self) -> None:
        registry = ThemeRegistry()
        with self.assertRaises(ThemeParseError):
            registry.register("h1 { color: red; }")
        self.assertEqual(registry.names(), [])

    def test_reregister_replaces_entry(self) -> None:
        registry = ThemeRegistry()
        old = registry.register(BASE_CSS)
        new = registry.register(BASE_CSS.replace("black", "navy"))
        self.assertIs(registry.get("base"), new)
        self.assertIn("black", old.css)

    def test_forward_reference_chain(self) -> None:
        registry = ThemeRegistry()
        registry.register(CHILD_CSS)
        registry.register(BASE_CSS)
        chain = registry.resolve_chain("child")
        self.assertEqual([theme.name for theme in chain], ["base", "child"])

    def test_chain_stops_on_cycle(self) -> None:
        registry = ThemeRegistry()
        registry.register('/* @theme a */\n@import "b";')
        registry.register('/* @theme b */\n@import "a";')
        self.assertEqual([theme.name for theme in registry.resolve_chain("a")], ["b", "a"])

    def test_chain_with_missing_parent(self) -> None:
        registry = ThemeRegistry()
        registry.register(CHILD_CSS)
        self.assertEqual([theme.name for theme in registry.resolve_chain("child")], ["child"])
        with self.assertRaises(ThemeNotFound):
            registry.resolve_chain("base")

    def test_default(self) -> None:
        registry = ThemeRegistry()
        registry.register(BASE_CSS)
        with self.assertRaises(ThemeNotFound):
            registry.set_default("missing")
        registry.set_default("base")
        self.assertEqual(registry.default.name, "base")
        self.assertTrue(registry.remove("base"))
        self.assertIsNone(registry.default)

    def test_register_directory(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            Path(temp_dir, "base.css").write_text(BASE_CSS, encoding="utf-8")
            Path(temp_dir, "child.css").write_text(CHILD_CSS, encoding="utf-8")
            Path(temp_dir, "notes.txt").write_text("ignored", encoding="utf-8")
            registry = ThemeRegistry()
            themes = registry.register_directory(Path(temp_dir))
        self.assertEqual([theme.name for theme in themes], ["base", "child"])

    def test_concurrent_registration(self) -> None:
        registry = ThemeRegistry()
        registry.register(BASE_CSS)

        def register(index: int) -> None:
            registry.register(f"/* @theme t{index} */\n@import \"base\";")

        threads = [threading.Thread(target=register, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len(registry), 9)
        self.assertEqual(len(registry.resolve_chain("t3")), 2)


if __name__ == "__main__":
    unittest.main()
