"""Model contract tests."""

import unittest

from pydantic import ValidationError

from slidemark.models import Directive, DirectiveScope, Element, RenderOptions, Slide
from slidemark.models.options import normalize_heading_divider


class TestRenderOptions(unittest.TestCase):
    def test_defaults(self) -> None:
        options = RenderOptions()
        self.assertTrue(options.background_syntax)
        self.assertTrue(options.printable)
        self.assertFalse(options.heading_divider)
        self.assertEqual(options.override_marker, "_")
        self.assertEqual(options.containers[0].selector(), "div.slidemark")

    def test_heading_divider_forms(self) -> None:
        self.assertEqual(RenderOptions(heading_divider="2").heading_divider, 2)
        self.assertEqual(RenderOptions(heading_divider=[3, 1]).heading_divider, (1, 3))
        self.assertEqual(normalize_heading_divider("1 2"), (1, 2))
        self.assertFalse(normalize_heading_divider("false"))

    def test_heading_divider_validation(self) -> None:
        with self.assertRaises(ValidationError):
            RenderOptions(heading_divider=7)
        with self.assertRaises(ValidationError):
            RenderOptions(heading_divider=True)

    def test_override_marker_validation(self) -> None:
        self.assertEqual(RenderOptions(override_marker="$").override_marker, "$")
        with self.assertRaises(ValidationError):
            RenderOptions(override_marker="x")
        with self.assertRaises(ValidationError):
            RenderOptions(override_marker="")

    def test_options_are_frozen(self) -> None:
        options = RenderOptions()
        with self.assertRaises(ValidationError):
            options.printable = False

    def test_unknown_option_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            RenderOptions(inlineSvg=True)

    def test_containers(self) -> None:
        options = RenderOptions(
            containers={"tag": "main", "class": "deck wide"},
            slide_containers=[{"tag": "div", "class": "page"}],
        )
        self.assertEqual(options.containers[0].selector(), "main.deck.wide")
        self.assertEqual(
            [element.tag for element in options.all_containers()], ["main", "div"]
        )
        self.assertEqual(RenderOptions(containers=False).containers, ())


class TestElement(unittest.TestCase):
    def test_html_attrs(self) -> None:
        element = Element(tag="div", class_name="a b", attrs={"role": "list"})
        self.assertEqual(element.html_attrs(), {"role": "list", "class": "a b"})
        self.assertEqual(element.to_dict()["class"], "a b")


class TestSlideModels(unittest.TestCase):
    def test_slide_index_starts_at_one(self) -> None:
        with self.assertRaises(ValidationError):
            Slide(index=0)

    def test_directive_json(self) -> None:
        directive = Directive(key="color", value="red", scope=DirectiveScope.SPOT)
        self.assertEqual(
            directive.to_json(), '{"key": "color", "scope": "spot", "value": "red"}'
        )


if __name__ == "__main__":
    unittest.main()
