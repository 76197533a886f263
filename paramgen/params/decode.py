"""
Schema-driven Decoding of Check Parameters.

Generated parse_and_validate() functions call decode_map_structure() to turn
the untyped mapping found in a check configuration into a Params instance.
The parameter descriptors drive the decoding:

- keys are external parameter names; unknown keys are rejected
- values must match the declared type (bool is not an integer, integers are
  accepted for numbers, None only for Optional fields)
- missing keys take the dataclass default, else the zero value of the type

Every problem is collected before a single DecodeError is raised.
"""

import dataclasses
import types
import typing
from typing import Any, Dict, List, Mapping, Optional

from .errors import DecodeError, type_error, unknown_param_error
from .schema import ParameterDesc, ParameterType
from .suggest import suggest_similar

_ZERO_VALUES = {
    ParameterType.STRING: "",
    ParameterType.INTEGER: 0,
    ParameterType.NUMBER: 0.0,
    ParameterType.BOOLEAN: False,
}

_UNION_ORIGINS = (typing.Union, getattr(types, "UnionType", typing.Union))


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _with_article(param_type: ParameterType) -> str:
    article = "an" if param_type.value[0] in "aeiou" else "a"
    return f"{article} {param_type.value}"


def _nested_record_class(cls: type, field_name: str) -> type:
    hint = typing.get_type_hints(cls)[field_name]
    if typing.get_origin(hint) in _UNION_ORIGINS:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        hint = args[0]

    if not dataclasses.is_dataclass(hint):
        raise TypeError(f"{cls.__name__}.{field_name} is declared as an object parameter "
                        f"but its type {hint!r} is not a dataclass")
    return hint


def _decode_scalar(value: Any, param_type: ParameterType, path: str, errors: List[str]) -> Any:
    if param_type == ParameterType.STRING:
        if isinstance(value, str):
            return value
    elif param_type == ParameterType.INTEGER:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif param_type == ParameterType.NUMBER:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif param_type == ParameterType.BOOLEAN:
        if isinstance(value, bool):
            return value

    errors.append(type_error(path, _with_article(param_type), value))
    return None


def _decode_value(value: Any, desc: ParameterDesc, cls: type, path: str, errors: List[str]) -> Any:
    if value is None:
        if desc.is_pointer:
            return None
        errors.append(type_error(path, _with_article(desc.type), value))
        return None

    if desc.type == ParameterType.ARRAY:
        if not isinstance(value, (list, tuple)):
            errors.append(type_error(path, f"an array of {desc.array_elem_type.value}", value))
            return None
        return [_decode_scalar(elem, desc.array_elem_type, f"{path}[{i}]", errors)
                for i, elem in enumerate(value)]

    if desc.type == ParameterType.OBJECT:
        nested = _nested_record_class(cls, desc.struct_field_name)
        return _decode_record(value, nested, desc.sub_parameters, path, errors)

    return _decode_scalar(value, desc.type, path, errors)


def _zero_value(desc: ParameterDesc, cls: type, path: str, errors: List[str]) -> Any:
    if desc.is_pointer:
        return None
    if desc.type == ParameterType.ARRAY:
        return []
    if desc.type == ParameterType.OBJECT:
        nested = _nested_record_class(cls, desc.struct_field_name)
        return _decode_record({}, nested, desc.sub_parameters, path, errors)
    return _ZERO_VALUES[desc.type]


def _has_default(f: dataclasses.Field) -> bool:
    return f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING


def _decode_record(m: Any, cls: type, descs: List[ParameterDesc], path: str,
                   errors: List[str]) -> Optional[Any]:
    if not isinstance(m, Mapping):
        errors.append(type_error(path or cls.__name__, "an object", m))
        return None

    num_errors = len(errors)
    by_name = {desc.name: desc for desc in descs}

    for key in m:
        if key not in by_name:
            errors.append(unknown_param_error(_join(path, str(key)), suggest_similar(str(key), by_name)))

    fields = {f.name: f for f in dataclasses.fields(cls) if f.init}
    kwargs: Dict[str, Any] = {}
    for desc in descs:
        name = desc.struct_field_name
        if desc.name in m:
            kwargs[name] = _decode_value(m[desc.name], desc, cls, _join(path, desc.name), errors)
        elif name in fields and not _has_default(fields[name]):
            kwargs[name] = _zero_value(desc, cls, _join(path, desc.name), errors)

    if len(errors) > num_errors:
        return None

    try:
        return cls(**kwargs)
    except TypeError as exc:
        errors.append(f"cannot construct {cls.__name__}: {exc}")
        return None


def decode_map_structure(m: Mapping[str, Any], cls: type, descs: List[ParameterDesc]) -> Any:
    """
    Decode m into an instance of the dataclass cls described by descs.

    Raises:
        DecodeError: With every unknown key and type mismatch found.
    """
    errors: List[str] = []
    result = _decode_record(m, cls, descs, "", errors)
    if errors:
        raise DecodeError(errors)
    return result
