"""
Parameter Descriptor Extraction.

Turns the fields of a `Params` dataclass (as resolved by universe.py) into
ParameterDesc entries, recursing into nested dataclasses. Declaration order
is preserved: it is the order of PARAM_DESCS and of the checks in the
generated validate().
"""

from typing import Dict, List, Tuple

from .errors import ExtractionError
from .markers import METADATA_MARKER, get_description, parse_metadata
from .schema import ParameterDesc, ParameterType
from .universe import Kind, Member, Type

_BUILTIN_PARAMETER_TYPES = {
    "str": ParameterType.STRING,
    "int": ParameterType.INTEGER,
    "float": ParameterType.NUMBER,
    "bool": ParameterType.BOOLEAN,
}


def lower_case_first_letter(s: str) -> str:
    return s[:1].lower() + s[1:]


def get_name(member: Member) -> str:
    """External name: the `json` metadata entry if set, else the field name."""
    name = member.tags.get("json", "").split(",", 1)[0]
    if name:
        return name
    return lower_case_first_letter(member.name)


def get_check_type_from_builtin(typ: Type) -> ParameterType:
    if typ.kind == Kind.BUILTIN and typ.name in _BUILTIN_PARAMETER_TYPES:
        return _BUILTIN_PARAMETER_TYPES[typ.name]
    raise ExtractionError(f"currently unsupported type {typ}")


def _check_semantics(desc: ParameterDesc) -> None:
    if desc.type == ParameterType.OBJECT and (desc.required or desc.enum):
        raise ExtractionError(
            f"parameter validation not yet supported for object type \"{desc.name}\"; "
            "required and enum cannot be set on it"
        )
    if desc.required and desc.type != ParameterType.STRING:
        raise ExtractionError(
            "required parameter validation is currently only supported for strings, "
            f"but {desc.name} is {desc.type.value}"
        )
    if desc.enum and desc.type != ParameterType.STRING:
        raise ExtractionError(
            f"enum is only supported for strings, but {desc.name} is {desc.type.value}"
        )


def _describe_member(member: Member, marker: str, strict: bool,
                     visiting: Tuple[str, ...]) -> ParameterDesc:
    relevant = member.type
    is_pointer = False
    if relevant.kind == Kind.POINTER:
        is_pointer = True
        relevant = relevant.elem

    sub_parameters: List[ParameterDesc] = []
    array_elem_type = None

    if relevant.kind == Kind.BUILTIN:
        param_type = get_check_type_from_builtin(relevant)
    elif relevant.kind == Kind.SLICE:
        param_type = ParameterType.ARRAY
        # Only arrays of builtins. No arrays of objects or arrays of arrays.
        try:
            array_elem_type = get_check_type_from_builtin(relevant.elem)
        except ExtractionError as exc:
            raise ExtractionError(f"handling array elem type {relevant.elem}: {exc}") from exc
    elif relevant.kind == Kind.STRUCT:
        param_type = ParameterType.OBJECT
        sub_parameters = construct_parameter_descs(relevant, marker, strict, visiting)
    else:
        raise ExtractionError(f"currently unsupported type {member.type}")

    metadata = parse_metadata(marker, member.comment_lines, strict)

    desc = ParameterDesc(
        name=get_name(member),
        type=param_type,
        description=get_description(marker, member.comment_lines),
        examples=metadata.examples,
        enum=metadata.enum,
        sub_parameters=sub_parameters,
        array_elem_type=array_elem_type,
        required=metadata.required,
        no_regex=metadata.no_regex,
        not_negatable=metadata.not_negatable,
        struct_field_name=member.name,
        is_pointer=is_pointer,
    )
    _check_semantics(desc)
    return desc


def construct_parameter_descs(typ: Type, marker: str = METADATA_MARKER, strict: bool = False,
                              visiting: Tuple[str, ...] = ()) -> List[ParameterDesc]:
    """
    Describe every field of a dataclass type, in declaration order.

    Args:
        typ: A Kind.STRUCT type
        marker: Metadata annotation marker
        strict: Reject unknown annotation keys instead of ignoring them
        visiting: Records currently being described (recursion guard)

    Raises:
        ExtractionError: On embedded members, unsupported types, malformed
            annotations, contradicting annotations, or duplicate names.
    """
    if typ.name in visiting:
        raise ExtractionError(f"recursive type {typ} is not supported")
    visiting = visiting + (typ.name,)

    descs: List[ParameterDesc] = []
    field_for_name: Dict[str, str] = {}
    for member in typ.members:
        if member.embedded:
            raise ExtractionError(f"cannot handle embedded member {member.name} in {typ}")

        try:
            desc = _describe_member(member, marker, strict, visiting)
        except ExtractionError as exc:
            raise type(exc)(f"handling field {member.name}: {exc}") from exc

        if desc.name in field_for_name:
            raise ExtractionError(
                f"duplicate parameter name \"{desc.name}\" in {typ} "
                f"(fields {field_for_name[desc.name]} and {member.name})"
            )
        field_for_name[desc.name] = member.name

        descs.append(desc)

    return descs
