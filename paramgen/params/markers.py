"""
Metadata Annotations in Field Documentation.

A field's documentation is the block of `#` comment lines directly above it.
Lines that start with the metadata marker (default "+") are annotations:

    # Env is the deployment environment.
    # +required
    # +enum=dev
    # +enum=prod
    env: str = ""

Everything before the first annotation line is the description. Annotations
are either bare flags (`+required`) or repeatable values (`+enum=dev`).
"""

from dataclasses import dataclass, field
from typing import Dict, List

from ..common import isspace
from .errors import AnnotationError
from .suggest import invalid_key_error

METADATA_MARKER = "+"

FLAG_TAGS = ("required", "noregex", "notnegatable")
VALUE_TAGS = ("enum", "example")


@dataclass
class MetadataTags:
    """Typed result of parsing a field's annotations."""
    enum: List[str] = field(default_factory=list)
    examples: List[str] = field(default_factory=list)
    required: bool = False
    no_regex: bool = False
    not_negatable: bool = False


def extract_comment_tags(marker: str, lines: List[str]) -> Dict[str, List[str]]:
    """
    Collect `marker + key[=value]` lines into key -> values.

    Values keep their declaration order. A bare key records an empty value.
    """
    tags: Dict[str, List[str]] = {}
    for line in lines:
        line = line.strip()
        if isspace(line) or not line.startswith(marker):
            continue

        key, sep, value = line[len(marker):].partition("=")
        tags.setdefault(key, []).append(value if sep else "")

    return tags


def get_description(marker: str, lines: List[str]) -> str:
    """Join the documentation lines that precede the first annotation."""
    end = len(lines)
    for i, line in enumerate(lines):
        if line.startswith(marker):
            end = i
            break

    return " ".join(lines[:end])


def _flag_from_tag(tag: str, tags: Dict[str, List[str]]) -> bool:
    values = tags.get(tag)
    if values is None:
        return False

    if values != [""]:
        raise AnnotationError(
            f"invalid value for tag {tag}: {values}; tag is only supported WITHOUT values"
        )

    return True


def parse_metadata(marker: str, lines: List[str], strict: bool = False) -> MetadataTags:
    """
    Parse every annotation in lines into a MetadataTags.

    Unknown keys (e.g. "+optional" or "+k8s:..." left for other tools) are
    ignored unless strict is set.

    Raises:
        AnnotationError: On a flag given a value or given more than once, and
            in strict mode on unknown keys.
    """
    tags = extract_comment_tags(marker, lines)

    if strict:
        known = FLAG_TAGS + VALUE_TAGS
        for key in tags:
            if key not in known:
                raise AnnotationError(invalid_key_error("annotation", key, known))

    return MetadataTags(
        enum=tags.get("enum", []),
        examples=tags.get("example", []),
        required=_flag_from_tag("required", tags),
        no_regex=_flag_from_tag("noregex", tags),
        not_negatable=_flag_from_tag("notnegatable", tags),
    )
