"""
Unit tests for params/decode.py module.
"""

import unittest
from dataclasses import dataclass, field
from typing import List, Optional

from ..params.decode import decode_map_structure
from ..params.errors import DecodeError
from ..params.schema import ParameterDesc, ParameterType


@dataclass
class Selector:
    key: str = ""
    values: List[str] = field(default_factory=list)


@dataclass
class Params:
    env: str = "dev"
    ports: List[int] = field(default_factory=list)
    threshold: Optional[float] = None
    verbose: bool = False
    selector: Optional[Selector] = None


@dataclass
class NoDefaults:
    name: str
    count: int
    inner: Selector


SELECTOR_DESCS = [
    ParameterDesc(name="key", type=ParameterType.STRING, struct_field_name="key"),
    ParameterDesc(name="values", type=ParameterType.ARRAY, array_elem_type=ParameterType.STRING,
                  struct_field_name="values"),
]

PARAMS_DESCS = [
    ParameterDesc(name="env", type=ParameterType.STRING, struct_field_name="env"),
    ParameterDesc(name="exposedPorts", type=ParameterType.ARRAY, array_elem_type=ParameterType.INTEGER,
                  struct_field_name="ports"),
    ParameterDesc(name="threshold", type=ParameterType.NUMBER, struct_field_name="threshold", is_pointer=True),
    ParameterDesc(name="verbose", type=ParameterType.BOOLEAN, struct_field_name="verbose"),
    ParameterDesc(name="selector", type=ParameterType.OBJECT, sub_parameters=SELECTOR_DESCS,
                  struct_field_name="selector", is_pointer=True),
]

NO_DEFAULTS_DESCS = [
    ParameterDesc(name="name", type=ParameterType.STRING, struct_field_name="name"),
    ParameterDesc(name="count", type=ParameterType.INTEGER, struct_field_name="count"),
    ParameterDesc(name="inner", type=ParameterType.OBJECT, sub_parameters=SELECTOR_DESCS,
                  struct_field_name="inner"),
]


def decode(m):
    return decode_map_structure(m, Params, PARAMS_DESCS)


class TestDecodeMapStructure(unittest.TestCase):
    """Tests for decode_map_structure function."""

    def test_empty_mapping_uses_defaults(self):
        self.assertEqual(decode({}), Params())

    def test_full_mapping(self):
        p = decode({
            "env": "prod",
            "exposedPorts": [80, 443],
            "threshold": 1,
            "verbose": True,
            "selector": {"key": "app", "values": ["web"]},
        })

        self.assertEqual(p.env, "prod")
        self.assertEqual(p.ports, [80, 443])
        self.assertEqual(p.threshold, 1.0)
        self.assertIsInstance(p.threshold, float)
        self.assertTrue(p.verbose)
        self.assertEqual(p.selector, Selector(key="app", values=["web"]))

    def test_external_names_only(self):
        """Attribute names are not accepted in place of external names."""
        with self.assertRaises(DecodeError) as ctx:
            decode({"ports": [80]})

        self.assertIn("Unknown parameter 'ports'", str(ctx.exception))

    def test_unknown_key_suggestion(self):
        with self.assertRaises(DecodeError) as ctx:
            decode({"treshold": 0.5})

        message = str(ctx.exception)
        self.assertIn("Unknown parameter 'treshold'. Did you mean", message)
        self.assertIn("'threshold'", message)

    def test_none_for_optional(self):
        self.assertIsNone(decode({"threshold": None}).threshold)

    def test_none_for_non_optional(self):
        with self.assertRaises(DecodeError) as ctx:
            decode({"env": None})

        self.assertIn("'env' must be a string", str(ctx.exception))

    def test_bool_is_not_integer(self):
        with self.assertRaises(DecodeError) as ctx:
            decode({"exposedPorts": [80, True]})

        self.assertIn("'exposedPorts[1]' must be an integer", str(ctx.exception))

    def test_array_must_be_list(self):
        with self.assertRaises(DecodeError) as ctx:
            decode({"exposedPorts": 80})

        self.assertIn("'exposedPorts' must be an array of integer", str(ctx.exception))

    def test_nested_paths(self):
        """Nested problems are reported with dotted paths."""
        with self.assertRaises(DecodeError) as ctx:
            decode({"selector": {"key": 1, "vals": []}})

        message = str(ctx.exception)
        self.assertIn("'selector.key' must be a string", message)
        self.assertIn("Unknown parameter 'selector.vals'", message)

    def test_nested_must_be_mapping(self):
        with self.assertRaises(DecodeError) as ctx:
            decode({"selector": "app"})

        self.assertIn("'selector' must be an object", str(ctx.exception))

    def test_all_errors_collected(self):
        with self.assertRaises(DecodeError) as ctx:
            decode({"env": 1, "verbose": "yes", "bogus": 0})

        self.assertEqual(len(ctx.exception.errors), 3)
        self.assertTrue(str(ctx.exception).startswith("3 error(s) decoding:"))

    def test_not_a_mapping(self):
        with self.assertRaises(DecodeError) as ctx:
            decode(["env"])

        self.assertIn("must be an object", str(ctx.exception))

    def test_missing_without_default_is_zero_value(self):
        """Fields without defaults take the zero value of their type."""
        p = decode_map_structure({}, NoDefaults, NO_DEFAULTS_DESCS)

        self.assertEqual(p, NoDefaults(name="", count=0, inner=Selector()))


if __name__ == "__main__":
    unittest.main()
