"""
Descriptor Serialization.

Each ParameterDesc is embedded in the generated module as a JSON blob and
parsed back at import time, so the runtime descriptor never has to be
re-derived from the Params source. The blob must be byte-identical for
identical descriptors: keys come out in the fixed order of
ParameterDesc.to_dict(), indentation is one tab, non-ASCII is escaped.
"""

import json
from functools import lru_cache
from typing import Any, Dict

import fastjsonschema

from .errors import DescriptorParseError
from .schema import ParameterDesc, ParameterType


def _descriptor_json_schema() -> Dict[str, Any]:
    string_list = {"type": "array", "items": {"type": "string"}}
    flag = {"type": "boolean"}

    properties = {
        "name": {"type": "string", "minLength": 1},
        "type": {"enum": [t.value for t in ParameterType]},
        "description": {"type": "string"},
        "examples": string_list,
        "enum": string_list,
        "subParameters": {"type": "array", "items": {"$ref": "#"}},
        "arrayElemType": {"enum": [""] + sorted(t.value for t in ParameterType if t.is_scalar)},
        "required": flag,
        "noRegex": flag,
        "notNegatable": flag,
        "xxxStructFieldName": {"type": "string"},
        "xxxIsPointer": flag,
    }

    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "title": "Check parameter descriptor",
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


DESCRIPTOR_JSON_SCHEMA = _descriptor_json_schema()


@lru_cache(maxsize=1)
def _get_validator():
    return fastjsonschema.compile(DESCRIPTOR_JSON_SCHEMA)


def serialize_parameter_desc(desc: ParameterDesc) -> str:
    """Render desc (including sub-parameters) as canonical, indented JSON."""
    return json.dumps(desc.to_dict(), indent="\t") + "\n"


def parse_parameter_desc(text: str) -> ParameterDesc:
    """
    Parse a blob produced by serialize_parameter_desc().

    Raises:
        DescriptorParseError: If text is not JSON or does not match the
            descriptor schema.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DescriptorParseError(f"invalid descriptor JSON: {exc}") from exc

    try:
        _get_validator()(data)
    except fastjsonschema.JsonSchemaValueException as exc:
        raise DescriptorParseError(f"invalid descriptor: {exc}") from exc

    return ParameterDesc.from_dict(data)


def must_parse_parameter_desc(text: str) -> ParameterDesc:
    """
    Parse a descriptor blob embedded in a generated module.

    The blob is generator-controlled, so a failure here is a bug in the
    generator, not a user error; it surfaces when the module is imported.
    """
    try:
        return parse_parameter_desc(text)
    except DescriptorParseError as exc:
        raise RuntimeError(f"generated parameter descriptor is corrupt: {exc}") from exc
