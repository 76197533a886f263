"""
paramgen: generates the params module of check templates from annotated
Params dataclasses.
"""
