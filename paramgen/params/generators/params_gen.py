"""
Params Module Generator.

Renders the `gen_params.py` module of a parameter package from its
descriptors. Rendering happens in two phases:

1. prepare_template_elems(): pure data preparation. Each descriptor is
   serialized and everything the template needs (constant names, literals,
   messages) is computed here.
2. TemplateRenderer.render(): textual substitution through a jinja2 template.

The output depends only on the descriptors and the module name, so
regenerating from unchanged sources yields byte-identical files.
"""

import keyword
import re
from dataclasses import dataclass
from typing import List

from jinja2 import Environment, StrictUndefined

from ..errors import RenderError
from ..schema import ParameterDesc, ParameterType
from ..serialize import serialize_parameter_desc

GENERATED_HEADER = "# Code generated by paramgen. DO NOT EDIT."

FILE_TEMPLATE = '''\
{{ header }}
# +build !{{ build_tag }}

from typing import Any, Callable, List, Mapping

from paramgen.params.decode import decode_map_structure
from paramgen.params.errors import ParamsValidationError
from paramgen.params.schema import CheckFunc, ParameterDesc
from paramgen.params.serialize import must_parse_parameter_desc

from .{{ params_module }} import Params
{% for elem in elems %}

{{ elem.const_name }} = must_parse_parameter_desc({{ elem.param_json | pyliteral }})
{% endfor %}

PARAM_DESCS: List[ParameterDesc] = [
{% for elem in elems %}
    {{ elem.const_name }},
{% endfor %}
]


def validate(p: Params) -> None:
    """Raise ParamsValidationError if p violates its parameter constraints."""
    validation_errors: List[str] = []
{% for elem in elems %}
{% set desc = elem.desc %}
{% if desc.type.value == "object" %}
    raise ParamsValidationError({{ elem.object_message | pyrepr }})
{% else %}
{% if desc.required %}
{% if desc.type.value != "string" %}
    raise ParamsValidationError({{ elem.required_type_message | pyrepr }})
{% else %}
    if {{ elem.empty_check }}:
        validation_errors.append({{ elem.required_message | pyrepr }})
{% endif %}
{% endif %}
{% if desc.enum %}
    if {{ elem.enum_check }}:
        validation_errors.append({{ elem.invalid_value_format | pyrepr }}.format(p.{{ desc.struct_field_name }}))
{% endif %}
{% endif %}
{% endfor %}
    if validation_errors:
        raise ParamsValidationError("invalid parameters: " + ", ".join(validation_errors))


def parse_and_validate(m: Mapping[str, Any]) -> Params:
    """
    Instantiate a Params object out of the passed mapping, validate it, and
    return it.
    """
    p = decode_map_structure(m, Params, PARAM_DESCS)
    validate(p)
    return p


def wrap_instantiate_func(f: Callable[[Params], CheckFunc]) -> Callable[[Any], CheckFunc]:
    """Wrap a typed instantiate function into one that accepts untyped params."""
    def instantiate(params: Any) -> CheckFunc:
        if not isinstance(params, Params):
            raise TypeError(f"expected Params, got {type(params).__name__}")
        return f(params)

    return instantiate
'''

_CAMEL_BOUNDARY_RE = re.compile(r'(?<=[a-z0-9])(?=[A-Z])')
_NON_IDENT_RE = re.compile(r'[^0-9A-Za-z_]')


@dataclass
class TemplateElem:  # pylint: disable=too-many-instance-attributes
    desc: ParameterDesc
    param_json: str
    const_name: str
    object_message: str = ""
    required_type_message: str = ""
    required_message: str = ""
    empty_check: str = ""
    enum_check: str = ""
    invalid_value_format: str = ""


def param_desc_const_name(name: str) -> str:
    """minReplicas -> MIN_REPLICAS_PARAM_DESC"""
    ident = _NON_IDENT_RE.sub("_", _CAMEL_BOUNDARY_RE.sub("_", name)).upper()
    if ident[:1].isdigit():
        ident = f"_{ident}"
    return f"{ident}_PARAM_DESC"


def _format_literal(s: str) -> str:
    return s.replace("{", "{{").replace("}", "}}")


def _prepare_elem(desc: ParameterDesc) -> TemplateElem:
    attr = f"p.{desc.struct_field_name}"
    elem = TemplateElem(
        desc=desc,
        param_json=serialize_parameter_desc(desc),
        const_name=param_desc_const_name(desc.name),
    )

    if desc.type == ParameterType.OBJECT:
        elem.object_message = f'parameter validation not yet supported for object type "{desc.name}"'
        return elem

    if desc.required:
        elem.required_type_message = (
            "required parameter validation is currently only supported for strings, "
            f"but {desc.name} is not"
        )
        elem.required_message = f"required param {desc.name} not found"
        elem.empty_check = f"{attr} is None or {attr} == \"\"" if desc.is_pointer else f"{attr} == \"\""

    if desc.enum:
        allowed = repr(tuple(desc.enum))
        elem.enum_check = f"{attr} not in {allowed}"
        # An empty required value is reported once, by the required check.
        if desc.required:
            elem.enum_check = f"{attr} != \"\" and {elem.enum_check}"
        if desc.is_pointer:
            elem.enum_check = f"{attr} is not None and {elem.enum_check}"
        elem.invalid_value_format = (
            f"param {_format_literal(desc.name)} has invalid value {{!r}}, "
            f"must be one of {_format_literal(repr(list(desc.enum)))}"
        )

    return elem


def prepare_template_elems(descs: List[ParameterDesc]) -> List[TemplateElem]:
    """
    Compute everything the template needs from descs.

    Raises:
        RenderError: If two descriptors map to the same module constant.
    """
    elems = [_prepare_elem(desc) for desc in descs]

    owners = {}
    for elem in elems:
        if elem.const_name in owners:
            raise RenderError(
                f"parameters \"{owners[elem.const_name]}\" and \"{elem.desc.name}\" "
                f"both render as {elem.const_name}"
            )
        owners[elem.const_name] = elem.desc.name

    return elems


def pyliteral(text: str) -> str:
    """Render text as a readable Python string literal."""
    if "'''" not in text and not text.endswith("\\"):
        return f"r'''{text}'''"
    return repr(text)


class TemplateRenderer:
    """Renders generated params modules. Construct once and reuse."""

    def __init__(self, build_tag: str = "templatecodegen", template: str = FILE_TEMPLATE):
        self.build_tag = build_tag
        self.env = Environment(
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self.env.filters["pyliteral"] = pyliteral
        self.env.filters["pyrepr"] = repr
        self.template = self.env.from_string(template)

    def render(self, elems: List[TemplateElem], params_module: str) -> str:
        if not params_module.isidentifier() or keyword.iskeyword(params_module):
            raise RenderError(f"cannot import Params from module {params_module!r}")

        return self.template.render(
            header=GENERATED_HEADER,
            build_tag=self.build_tag,
            params_module=params_module,
            elems=elems,
        )

    def render_descs(self, descs: List[ParameterDesc], params_module: str) -> str:
        return self.render(prepare_template_elems(descs), params_module)
