"""
Code Generators for Parameter Descriptors.

- params_gen: Generate the gen_params.py module of a parameter package
"""

from .params_gen import TemplateRenderer, prepare_template_elems

__all__ = [
    'TemplateRenderer',
    'prepare_template_elems',
]
