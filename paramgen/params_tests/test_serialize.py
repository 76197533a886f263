"""
Unit tests for params/serialize.py module.

Tests canonical descriptor JSON and schema-checked parsing.
"""

import json
import unittest
from ..params.errors import DescriptorParseError
from ..params.schema import ParameterDesc, ParameterType
from ..params.serialize import (
    DESCRIPTOR_JSON_SCHEMA, must_parse_parameter_desc, parse_parameter_desc, serialize_parameter_desc,
)


def sample_desc() -> ParameterDesc:
    return ParameterDesc(
        name="selector",
        type=ParameterType.OBJECT,
        description="Which objects to select.",
        sub_parameters=[
            ParameterDesc(
                name="names",
                type=ParameterType.ARRAY,
                array_elem_type=ParameterType.STRING,
                examples=["web"],
                struct_field_name="Names",
            ),
        ],
        struct_field_name="Selector",
        is_pointer=True,
    )


class TestSerializeParameterDesc(unittest.TestCase):
    """Tests for serialize_parameter_desc function."""

    def test_key_order_and_indent(self):
        """Keys come out in a fixed order, indented with one tab."""
        text = serialize_parameter_desc(ParameterDesc(name="env", type=ParameterType.STRING))

        self.assertTrue(text.endswith("}\n"))
        lines = text.splitlines()
        self.assertEqual(lines[1], '\t"name": "env",')
        self.assertEqual(lines[2], '\t"type": "string",')
        self.assertEqual(lines[-2], '\t"xxxIsPointer": false')
        self.assertEqual(
            list(json.loads(text)),
            ["name", "type", "description", "examples", "enum", "subParameters", "arrayElemType",
             "required", "noRegex", "notNegatable", "xxxStructFieldName", "xxxIsPointer"],
        )

    def test_absent_elem_type_is_empty_string(self):
        data = json.loads(serialize_parameter_desc(ParameterDesc(name="a", type=ParameterType.INTEGER)))
        self.assertEqual(data["arrayElemType"], "")
        self.assertEqual(data["subParameters"], [])

    def test_deterministic(self):
        """Equal descriptors serialize to identical text."""
        self.assertEqual(serialize_parameter_desc(sample_desc()), serialize_parameter_desc(sample_desc()))

    def test_sub_parameters_nested(self):
        data = json.loads(serialize_parameter_desc(sample_desc()))

        sub = data["subParameters"][0]
        self.assertEqual(sub["name"], "names")
        self.assertEqual(sub["arrayElemType"], "string")
        self.assertEqual(sub["xxxStructFieldName"], "Names")


class TestParseParameterDesc(unittest.TestCase):
    """Tests for parse_parameter_desc and must_parse_parameter_desc."""

    def test_parse_serialized(self):
        """A serialized descriptor parses back to an equal descriptor."""
        desc = sample_desc()
        self.assertEqual(parse_parameter_desc(serialize_parameter_desc(desc)), desc)

    def test_invalid_json(self):
        with self.assertRaises(DescriptorParseError):
            parse_parameter_desc("{not json")

    def test_missing_key(self):
        data = json.loads(serialize_parameter_desc(sample_desc()))
        del data["required"]

        with self.assertRaises(DescriptorParseError):
            parse_parameter_desc(json.dumps(data))

    def test_unknown_key(self):
        data = json.loads(serialize_parameter_desc(sample_desc()))
        data["extra"] = 1

        with self.assertRaises(DescriptorParseError):
            parse_parameter_desc(json.dumps(data))

    def test_bad_type(self):
        data = json.loads(serialize_parameter_desc(sample_desc()))
        data["type"] = "map"

        with self.assertRaises(DescriptorParseError):
            parse_parameter_desc(json.dumps(data))

    def test_bad_nested_descriptor(self):
        """Sub-parameters are validated against the same schema."""
        data = json.loads(serialize_parameter_desc(sample_desc()))
        data["subParameters"][0]["arrayElemType"] = "object"

        with self.assertRaises(DescriptorParseError):
            parse_parameter_desc(json.dumps(data))

    def test_must_parse_raises_runtime_error(self):
        with self.assertRaises(RuntimeError) as ctx:
            must_parse_parameter_desc("[]")

        self.assertIn("corrupt", str(ctx.exception))


class TestDescriptorSchema(unittest.TestCase):

    def test_all_keys_required(self):
        self.assertEqual(
            sorted(DESCRIPTOR_JSON_SCHEMA["required"]),
            sorted(DESCRIPTOR_JSON_SCHEMA["properties"]),
        )
        self.assertFalse(DESCRIPTOR_JSON_SCHEMA["additionalProperties"])

    def test_array_elem_types_are_scalars(self):
        self.assertEqual(
            DESCRIPTOR_JSON_SCHEMA["properties"]["arrayElemType"]["enum"],
            ["", "boolean", "integer", "number", "string"],
        )
        self.assertTrue(ParameterType.STRING.is_scalar)
        self.assertFalse(ParameterType.ARRAY.is_scalar)
        self.assertFalse(ParameterType.OBJECT.is_scalar)


if __name__ == "__main__":
    unittest.main()
