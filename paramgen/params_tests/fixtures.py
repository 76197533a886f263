"""
Helpers for building throwaway check template trees in tests.

A template tree looks like:

    <root>/<name>/__init__.py
    <root>/<name>/params/__init__.py
    <root>/<name>/params/params.py     <- declares Params
"""

import importlib
import os
import sys
import tempfile
import textwrap
import uuid
from typing import Dict, List

from ..params.extract import construct_parameter_descs
from ..params.schema import ParameterDesc
from ..params.universe import load_params_type


def write_files(dirpath: str, files: Dict[str, str]) -> None:
    for relpath, content in files.items():
        filepath = os.path.join(dirpath, relpath)
        os.makedirs(os.path.dirname(filepath), exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(textwrap.dedent(content))


def write_template(root: str, name: str, params_source: str, extra: Dict[str, str] = None) -> str:
    """Create <root>/<name> with a params package; returns the template dir."""
    files = {
        "__init__.py": "",
        os.path.join("params", "__init__.py"): "",
        os.path.join("params", "params.py"): params_source,
    }
    files.update(extra or {})

    dirpath = os.path.join(root, name)
    write_files(dirpath, files)
    return dirpath


def unique_name(prefix: str = "tmpl") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:10]}"


def describe_source(params_source: str, extra: Dict[str, str] = None,
                    strict: bool = False) -> List[ParameterDesc]:
    """Write params_source to a temporary package and extract its descriptors."""
    with tempfile.TemporaryDirectory() as root:
        dirpath = write_template(root, "tmpl", params_source, extra)
        _, params_type = load_params_type(os.path.join(dirpath, "params"))
        return construct_parameter_descs(params_type, strict=strict)


class ImportedTemplates:
    """Imports generated modules from a temporary root and forgets them afterwards."""

    def __init__(self, root: str):
        self.root = root
        self.names: List[str] = []
        sys.path.insert(0, root)

    def load(self, name: str, module: str = "gen_params"):
        self.names.append(name)
        importlib.invalidate_caches()
        return importlib.import_module(f"{name}.params.{module}")

    def close(self) -> None:
        sys.path.remove(self.root)
        for name in self.names:
            for mod in [m for m in sys.modules if m == name or m.startswith(f"{name}.")]:
                del sys.modules[mod]


PARAMS_ENV_SOURCE = '''\
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Params:
    # Env is the deployment environment to check.
    # +required
    # +enum=dev
    # +enum=staging
    # +enum=prod
    env: str = ""

    # Ports that must be exposed.
    # +example=8080
    ports: List[int] = field(default_factory=list, metadata={"json": "exposedPorts"})

    # Threshold above which to report.
    threshold: Optional[float] = None
'''
