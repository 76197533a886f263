"""
Build Constraints for Parameter Sources.

A source file may restrict when it is loaded with `+build` lines in its
leading comment block:

    # Code generated by paramgen. DO NOT EDIT.
    # +build !templatecodegen

The loader runs with the "templatecodegen" tag set, so generated modules are
never parsed as input. Within a line, space-separated options are OR-ed and
comma-separated terms are AND-ed; `!` negates a term. Separate lines are
AND-ed.
"""

import re
from typing import Iterable, List

from .errors import LoadError

_BUILD_LINE_RE = re.compile(r'^#\s*\+build(?:\s+(.*))?$')
_TAG_RE = re.compile(r'^[A-Za-z0-9_.]+$')


def parse_build_constraints(source: str) -> List[str]:
    """
    Return the constraint expressions of every `+build` line.

    Only the leading block of comments and blank lines is scanned.
    """
    constraints = []
    for line in source.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if not stripped.startswith("#"):
            break

        match = _BUILD_LINE_RE.match(stripped)
        if match:
            constraints.append((match.group(1) or "").strip())

    return constraints


def _eval_term(term: str, tags: frozenset) -> bool:
    negated = term.startswith("!")
    name = term[1:] if negated else term
    if not _TAG_RE.match(name):
        raise LoadError(f"invalid build tag {term!r}")

    return (name in tags) != negated


def eval_build_constraint(expr: str, tags: Iterable[str]) -> bool:
    """Evaluate a single `+build` expression against the active tags."""
    active = frozenset(tags)
    options = expr.split()
    if not options:
        raise LoadError("empty +build constraint")

    return any(all(_eval_term(term, active) for term in option.split(","))
               for option in options)


def matches_build_tags(source: str, tags: Iterable[str]) -> bool:
    """Return whether a file with this source is loaded under tags."""
    tags = frozenset(tags)
    return all(eval_build_constraint(expr, tags) for expr in parse_build_constraints(source))
