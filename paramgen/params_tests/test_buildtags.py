"""
Unit tests for params/buildtags.py module.
"""

import unittest
from ..params.buildtags import eval_build_constraint, matches_build_tags, parse_build_constraints
from ..params.errors import LoadError


GENERATED_SOURCE = """\
# Code generated by paramgen. DO NOT EDIT.
# +build !templatecodegen

X = 1
"""


class TestParseBuildConstraints(unittest.TestCase):
    """Tests for parse_build_constraints function."""

    def test_leading_block(self):
        """+build lines in the leading comment block are returned in order."""
        source = "#!/usr/bin/env python\n\n# +build linux\n#+build a,b\n\nimport os\n"
        self.assertEqual(parse_build_constraints(source), ["linux", "a,b"])

    def test_lines_after_code_ignored(self):
        """+build lines after the first statement are not constraints."""
        source = "import os\n# +build never\n"
        self.assertEqual(parse_build_constraints(source), [])

    def test_no_constraints(self):
        self.assertEqual(parse_build_constraints("# just a comment\nX = 1\n"), [])


class TestEvalBuildConstraint(unittest.TestCase):
    """Tests for eval_build_constraint function."""

    def test_negation(self):
        self.assertFalse(eval_build_constraint("!templatecodegen", {"templatecodegen"}))
        self.assertTrue(eval_build_constraint("!templatecodegen", set()))

    def test_space_is_or(self):
        self.assertTrue(eval_build_constraint("a b", {"b"}))
        self.assertFalse(eval_build_constraint("a b", {"c"}))

    def test_comma_is_and(self):
        self.assertTrue(eval_build_constraint("a,b", {"a", "b"}))
        self.assertFalse(eval_build_constraint("a,b", {"a"}))
        self.assertTrue(eval_build_constraint("a,!b", {"a"}))

    def test_empty_constraint_raises(self):
        with self.assertRaises(LoadError):
            eval_build_constraint("", {"a"})

    def test_lone_negation_raises(self):
        with self.assertRaises(LoadError):
            eval_build_constraint("!", {"a"})

    def test_empty_term_raises(self):
        with self.assertRaises(LoadError):
            eval_build_constraint("a,,b", {"a", "b"})


class TestMatchesBuildTags(unittest.TestCase):
    """Tests for matches_build_tags function."""

    def test_generated_module_excluded_while_generating(self):
        """Generated modules must not be loaded under the generation tag."""
        self.assertFalse(matches_build_tags(GENERATED_SOURCE, ["templatecodegen"]))

    def test_generated_module_included_otherwise(self):
        self.assertTrue(matches_build_tags(GENERATED_SOURCE, []))

    def test_unconstrained_source_always_matches(self):
        self.assertTrue(matches_build_tags("X = 1\n", ["templatecodegen"]))

    def test_lines_are_anded(self):
        source = "# +build a\n# +build b\n"
        self.assertFalse(matches_build_tags(source, ["a"]))
        self.assertTrue(matches_build_tags(source, ["a", "b"]))


if __name__ == "__main__":
    unittest.main()
