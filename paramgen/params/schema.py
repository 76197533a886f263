"""
Parameter Descriptor Definitions.

This module defines the core types shared by the generator and the code it
emits:
- ParameterType: The type of a single check parameter
- ParameterDesc: Describes one configuration parameter of a check

A ParameterDesc is produced by the extractor from a `Params` dataclass,
serialized to JSON and embedded in the generated module, which parses it
back at import time. The JSON shape produced by to_dict() is therefore part
of the generated output and must stay stable.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List


class ParameterType(Enum):
    """
    Types a check parameter can have.

    - STRING, INTEGER, NUMBER, BOOLEAN: Builtin scalars
    - ARRAY: A list of builtin scalars (see ParameterDesc.array_elem_type)
    - OBJECT: A nested record (see ParameterDesc.sub_parameters)
    """
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"

    @property
    def is_scalar(self) -> bool:
        return self in SCALAR_TYPES


SCALAR_TYPES = frozenset({
    ParameterType.STRING,
    ParameterType.INTEGER,
    ParameterType.NUMBER,
    ParameterType.BOOLEAN,
})


# A check function built by an instantiate function. The check framework that
# calls it passes a lint context and an object, and gets diagnostics back.
CheckFunc = Callable[[Any, Any], List[Any]]


@dataclass
class ParameterDesc:  # pylint: disable=too-many-instance-attributes
    """
    Description of a single check parameter.

    Attributes:
        name: External identifier used in check configuration
        type: Parameter type
        description: Human-readable description
        examples: Example values, in declaration order
        enum: Allowed values. Only relevant if type is STRING
        sub_parameters: Child parameters. Only relevant if type is OBJECT
        array_elem_type: Element type. Only relevant if type is ARRAY
        required: Whether the parameter must be set
        no_regex: Set if the parameter does not support regexes
        not_negatable: Set if the parameter does not support negation via a leading !
        struct_field_name: Attribute name of the originating dataclass field
        is_pointer: Whether the originating field was declared Optional
    """
    name: str
    type: ParameterType
    description: str = ""
    examples: List[str] = field(default_factory=list)
    enum: List[str] = field(default_factory=list)
    sub_parameters: List["ParameterDesc"] = field(default_factory=list)
    array_elem_type: ParameterType = None
    required: bool = False
    no_regex: bool = False
    not_negatable: bool = False
    struct_field_name: str = ""
    is_pointer: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Return the canonical JSON-compatible form. Key order is fixed."""
        return {
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "examples": list(self.examples),
            "enum": list(self.enum),
            "subParameters": [sub.to_dict() for sub in self.sub_parameters],
            "arrayElemType": self.array_elem_type.value if self.array_elem_type is not None else "",
            "required": self.required,
            "noRegex": self.no_regex,
            "notNegatable": self.not_negatable,
            "xxxStructFieldName": self.struct_field_name,
            "xxxIsPointer": self.is_pointer,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ParameterDesc":
        """Inverse of to_dict(). The input is expected to be schema-valid."""
        elem_type = d.get("arrayElemType", "")

        return ParameterDesc(
            name=d["name"],
            type=ParameterType(d["type"]),
            description=d.get("description", ""),
            examples=list(d.get("examples", [])),
            enum=list(d.get("enum", [])),
            sub_parameters=[ParameterDesc.from_dict(sub) for sub in d.get("subParameters", [])],
            array_elem_type=ParameterType(elem_type) if elem_type else None,
            required=d.get("required", False),
            no_regex=d.get("noRegex", False),
            not_negatable=d.get("notNegatable", False),
            struct_field_name=d.get("xxxStructFieldName", ""),
            is_pointer=d.get("xxxIsPointer", False),
        )
