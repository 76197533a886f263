"""
Check Parameter Schema Package.

Pipeline, leaves first:
1. universe: statically load a parameter package and resolve its Params type
2. extract: describe each field as a ParameterDesc (annotations via markers)
3. serialize: canonical JSON blob per descriptor
4. generators.params_gen: render the generated params module

decode and the runtime errors are used by the generated modules themselves.
"""

from .schema import ParameterDesc, ParameterType, CheckFunc
from .errors import (
    LoadError,
    ExtractionError,
    AnnotationError,
    RenderError,
    DescriptorParseError,
    DecodeError,
    ParamsValidationError,
)

__all__ = [
    'ParameterDesc', 'ParameterType', 'CheckFunc',
    'LoadError', 'ExtractionError', 'AnnotationError', 'RenderError',
    'DescriptorParseError', 'DecodeError', 'ParamsValidationError',
]
