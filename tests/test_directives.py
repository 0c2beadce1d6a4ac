"""Directive parsing tests."""

import unittest

from slidemark.errors import MalformedDirectiveBlock, ReservedDirectiveConflict
from slidemark.models.directive import DirectiveScope
from slidemark.normalize.directives import (
    DirectiveParser,
    DirectiveRegistry,
    is_disabled,
)
from slidemark.normalize.yaml_block import loosen, parse_yaml_block


class TestYamlBlock(unittest.TestCase):
    def test_scalars_are_strings(self) -> None:
        loaded = parse_yaml_block("paginate: true\nsize: 16:9")
        self.assertEqual(loaded, {"paginate": "true", "size": "16:9"})

    def test_plain_text_is_not_a_mapping(self) -> None:
        self.assertIsNone(parse_yaml_block("Remember to smile"))

    def test_syntax_error_raises(self) -> None:
        with self.assertRaises(MalformedDirectiveBlock):
            parse_yaml_block("color: [red")

    def test_loosen_quotes_hash_values(self) -> None:
        self.assertEqual(loosen("backgroundColor: #fff"), 'backgroundColor: "#fff"')
        self.assertEqual(loosen("class: 'lead'"), "class: 'lead'")

    def test_loose_mode_keeps_hash_values(self) -> None:
        self.assertEqual(parse_yaml_block("color: #123", loose=True), {"color": "#123"})
        self.assertEqual(parse_yaml_block("color: #123"), {"color": ""})


class TestDirectiveParser(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = DirectiveRegistry()
        self.parser = DirectiveParser(self.registry)

    def test_leading_global(self) -> None:
        parsed = self.parser.parse("theme: gaia", leading=True)
        self.assertTrue(parsed.is_directive_block)
        self.assertEqual(len(parsed.directives), 1)
        directive = parsed.directives[0]
        self.assertEqual(directive.key, "theme")
        self.assertEqual(directive.value, "gaia")
        self.assertEqual(directive.scope, DirectiveScope.GLOBAL)

    def test_late_global_is_ignored(self) -> None:
        parsed = self.parser.parse("theme: gaia", leading=False)
        self.assertTrue(parsed.is_directive_block)
        self.assertEqual(parsed.directives, [])
        self.assertEqual(self.parser.events[0].event_type, "GLOBAL_DIRECTIVE_IGNORED")

    def test_local_in_leading_block(self) -> None:
        parsed = self.parser.parse("paginate: true", leading=True)
        self.assertEqual(parsed.directives[0].scope, DirectiveScope.LOCAL)

    def test_spot_marker(self) -> None:
        parsed = self.parser.parse("_color: red")
        directive = parsed.directives[0]
        self.assertEqual(directive.key, "color")
        self.assertEqual(directive.scope, DirectiveScope.SPOT)

    def test_global_keys_never_take_spot_scope(self) -> None:
        parsed = self.parser.parse("_theme: gaia")
        self.assertFalse(parsed.is_directive_block)
        self.assertEqual(parsed.directives, [])

    def test_custom_marker(self) -> None:
        parser = DirectiveParser(self.registry, override_marker="$")
        parsed = parser.parse("$class: lead")
        self.assertEqual(parsed.directives[0].key, "class")
        self.assertEqual(parsed.directives[0].scope, DirectiveScope.SPOT)

    def test_unknown_key_makes_plain_comment(self) -> None:
        parsed = self.parser.parse("color: red\nnote: hello")
        self.assertFalse(parsed.is_directive_block)

    def test_list_values_are_joined(self) -> None:
        parsed = self.parser.parse("class: [lead, invert]")
        self.assertEqual(parsed.directives[0].value, "lead invert")

    def test_nested_values_are_dropped(self) -> None:
        parsed = self.parser.parse("header:\n  text: hi")
        self.assertTrue(parsed.is_directive_block)
        self.assertEqual(parsed.directives, [])

    def test_malformed_block_yields_nothing(self) -> None:
        parsed = self.parser.parse("color: red\n  paginate: true")
        self.assertEqual(parsed.directives, [])
        self.assertFalse(parsed.is_directive_block)
        self.assertEqual(self.parser.events[0].event_type, "DIRECTIVE_BLOCK_DROPPED")


class TestDirectiveRegistry(unittest.TestCase):
    def test_builtin_keys_are_reserved_in_every_scope(self) -> None:
        registry = DirectiveRegistry()
        with self.assertRaises(ReservedDirectiveConflict):
            registry.register_global("size", lambda value: {})
        with self.assertRaises(ReservedDirectiveConflict):
            registry.register_local("theme", lambda value: {})

    def test_invalid_registration(self) -> None:
        registry = DirectiveRegistry()
        with self.assertRaises(ValueError):
            registry.register_local("1st", lambda value: {})
        with self.assertRaises(ValueError):
            registry.register_local("accent", "not callable")

    def test_handler_output_cannot_overwrite_builtins(self) -> None:
        registry = DirectiveRegistry()
        registry.register_local("accent", lambda value: {"color": value, "accent": value})
        parser = DirectiveParser(registry)
        parsed = parser.parse("_accent: teal")
        self.assertEqual([(d.key, d.value) for d in parsed.directives], [("accent", "teal")])
        self.assertEqual(parsed.directives[0].scope, DirectiveScope.SPOT)

    def test_global_handler(self) -> None:
        registry = DirectiveRegistry()
        registry.register_global("lang", lambda value: {"lang": value.lower()})
        parsed = DirectiveParser(registry).parse("lang: EN", leading=True)
        self.assertEqual(parsed.directives[0].value, "en")
        self.assertEqual(parsed.directives[0].scope, DirectiveScope.GLOBAL)

    def test_failing_handler_is_recorded(self) -> None:
        def explode(value):
            raise RuntimeError("boom")

        registry = DirectiveRegistry()
        registry.register_local("accent", explode)
        parser = DirectiveParser(registry)
        parsed = parser.parse("accent: teal")
        self.assertEqual(parsed.directives, [])
        self.assertEqual(parser.events[0].event_type, "DIRECTIVE_HANDLER_FAILED")

    def test_unregister(self) -> None:
        registry = DirectiveRegistry()
        registry.register_local("accent", lambda value: {"accent": value})
        registry.unregister("accent")
        self.assertFalse(registry.is_local("accent"))


class TestToggle(unittest.TestCase):
    def test_is_disabled(self) -> None:
        self.assertTrue(is_disabled("false"))
        self.assertTrue(is_disabled(" Off "))
        self.assertFalse(is_disabled("true"))
        self.assertFalse(is_disabled(None))


if __name__ == "__main__":
    unittest.main()
