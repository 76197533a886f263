"""
Unit tests for params/markers.py module.

Tests annotation extraction, description assembly and typed metadata parsing.
"""

import unittest
from ..params.errors import AnnotationError
from ..params.markers import extract_comment_tags, get_description, parse_metadata


class TestExtractCommentTags(unittest.TestCase):
    """Tests for extract_comment_tags function."""

    def test_bare_flag_records_empty_value(self):
        """A bare +key should map to a single empty value."""
        tags = extract_comment_tags("+", ["+required"])
        self.assertEqual(tags, {"required": [""]})

    def test_repeated_values_keep_order(self):
        """Repeated +key=value lines should accumulate in order."""
        tags = extract_comment_tags("+", ["+enum=dev", "+enum=prod", "+enum=staging"])
        self.assertEqual(tags, {"enum": ["dev", "prod", "staging"]})

    def test_value_may_contain_equals(self):
        """Only the first '=' separates key and value."""
        tags = extract_comment_tags("+", ["+example=a=b"])
        self.assertEqual(tags, {"example": ["a=b"]})

    def test_plain_lines_ignored(self):
        """Lines without the marker should not produce tags."""
        tags = extract_comment_tags("+", ["Some description.", "", "  +noregex  "])
        self.assertEqual(tags, {"noregex": [""]})


class TestGetDescription(unittest.TestCase):
    """Tests for get_description function."""

    def test_stops_at_first_annotation(self):
        """Lines after the first annotation should not be part of the description."""
        lines = ["Env is the environment.", "It is required.", "+required", "Trailing text."]
        self.assertEqual(get_description("+", lines), "Env is the environment. It is required.")

    def test_no_annotations(self):
        """Without annotations all lines are joined."""
        self.assertEqual(get_description("+", ["a", "b"]), "a b")

    def test_no_lines(self):
        """No documentation yields an empty description."""
        self.assertEqual(get_description("+", []), "")


class TestParseMetadata(unittest.TestCase):
    """Tests for parse_metadata function."""

    def test_all_tags(self):
        """Every recognized tag should populate its typed field."""
        md = parse_metadata("+", [
            "Description.",
            "+required", "+noregex", "+notnegatable",
            "+enum=a", "+enum=b", "+example=x",
        ])

        self.assertTrue(md.required)
        self.assertTrue(md.no_regex)
        self.assertTrue(md.not_negatable)
        self.assertEqual(md.enum, ["a", "b"])
        self.assertEqual(md.examples, ["x"])

    def test_no_tags(self):
        """Absent tags should leave defaults."""
        md = parse_metadata("+", ["Just text."])

        self.assertFalse(md.required)
        self.assertFalse(md.no_regex)
        self.assertFalse(md.not_negatable)
        self.assertEqual(md.enum, [])
        self.assertEqual(md.examples, [])

    def test_flag_with_value_raises(self):
        """A bare flag given a value is an annotation error."""
        with self.assertRaises(AnnotationError) as ctx:
            parse_metadata("+", ["+required=true"])

        self.assertIn("required", str(ctx.exception))
        self.assertIn("WITHOUT values", str(ctx.exception))

    def test_flag_given_twice_raises(self):
        """A bare flag given more than once is an annotation error."""
        with self.assertRaises(AnnotationError):
            parse_metadata("+", ["+noregex", "+noregex"])

    def test_unknown_keys_ignored(self):
        """Annotations meant for other tools should not affect the result."""
        md = parse_metadata("+", ["Text.", "+optional", "+k8s:validation:min=1", "+enum=a"])

        self.assertFalse(md.required)
        self.assertEqual(md.enum, ["a"])

    def test_strict_unknown_key_raises_with_valid_keys(self):
        """In strict mode a misspelled key should be rejected and the valid keys listed."""
        with self.assertRaises(AnnotationError) as ctx:
            parse_metadata("+", ["+requird"], strict=True)

        self.assertIn("requird", str(ctx.exception))
        self.assertIn("required", str(ctx.exception))

    def test_custom_marker(self):
        """Another marker should be honored for tags and description."""
        lines = ["Text.", "@required", "+enum=ignored"]
        md = parse_metadata("@", lines)

        self.assertTrue(md.required)
        self.assertEqual(md.enum, [])
        self.assertEqual(get_description("@", lines), "Text.")


if __name__ == "__main__":
    unittest.main()
