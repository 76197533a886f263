"""
Static Type Universe for Parameter Packages.

Parses the Python sources of a parameter package with `ast` (nothing is
imported or executed) and resolves the declared shape of every dataclass
field:

- builtin: str, int, float, bool (and other builtins, which the extractor
  rejects)
- pointer: Optional[X], Union[X, None], X | None
- slice: List[X], list[X], Sequence[X], MutableSequence[X]
- map: Dict[K, V], dict[K, V], Mapping[K, V]
- struct: a @dataclass declared in the same package
- unsupported: anything else

Field documentation is the block of `#` comment lines directly above the
field. A record's base classes are reported as embedded members.
"""

import ast
import os
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Tuple

from ..common import ParamgenException, file_read
from .buildtags import matches_build_tags
from .errors import LoadError

PARAMS_TYPE_NAME = "Params"

DEFAULT_BUILD_TAGS = ("templatecodegen",)

BUILTIN_NAMES = frozenset({"str", "int", "float", "bool", "bytes", "bytearray", "complex", "object"})

_POINTER_NAMES = frozenset({"Optional"})
_UNION_NAMES = frozenset({"Union"})
_SLICE_NAMES = frozenset({"List", "list", "Sequence", "MutableSequence"})
_MAP_NAMES = frozenset({"Dict", "dict", "Mapping", "MutableMapping"})
_TRANSPARENT_NAMES = frozenset({"Annotated", "Final"})
_NOT_A_FIELD_NAMES = frozenset({"ClassVar", "InitVar"})


class Kind(Enum):
    BUILTIN = auto()
    POINTER = auto()
    SLICE = auto()
    MAP = auto()
    STRUCT = auto()
    UNSUPPORTED = auto()


@dataclass
class Member:
    name: str                          # attribute name as declared
    type: "Type"
    comment_lines: List[str] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)  # string entries of field(metadata=...)
    embedded: bool = False             # base class, not a field


class Type:
    """A resolved type shape. Struct members are resolved on first access."""

    def __init__(self, kind: Kind, name: str, elem: "Type" = None,
                 package: "Package" = None, module: str = None, node: ast.ClassDef = None):
        self.kind    = kind
        self.name    = name
        self.elem    = elem
        self.package = package
        self.module  = module
        self._node   = node
        self._members: Optional[List[Member]] = None

    @property
    def members(self) -> List[Member]:
        if self.kind != Kind.STRUCT:
            return []
        if self._members is None:
            self._members = self.package.members_of(self.module, self._node)
        return self._members

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Type({self.kind.name}, {self.name!r})"


def _base_name(node: ast.AST) -> Optional[str]:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _is_dataclass(node: ast.ClassDef) -> bool:
    for deco in node.decorator_list:
        target = deco.func if isinstance(deco, ast.Call) else deco
        if _base_name(target) == "dataclass":
            return True
    return False


def _comment_lines_above(lines: List[str], lineno: int) -> List[str]:
    """Collect the contiguous comment block ending right above lineno (1-based)."""
    collected = []
    i = lineno - 2
    while i >= 0:
        stripped = lines[i].strip()
        if not stripped.startswith("#"):
            break
        text = stripped[1:]
        if text.startswith(" "):
            text = text[1:]
        collected.append(text.rstrip())
        i -= 1

    collected.reverse()
    return collected


def _field_metadata_tags(value: Optional[ast.AST]) -> Dict[str, str]:
    """Read string entries of a literal `field(metadata={...})` call."""
    if not isinstance(value, ast.Call) or _base_name(value.func) != "field":
        return {}

    for keyword in value.keywords:
        if keyword.arg != "metadata" or not isinstance(keyword.value, ast.Dict):
            continue
        tags = {}
        for key, val in zip(keyword.value.keys, keyword.value.values):
            if isinstance(key, ast.Constant) and isinstance(key.value, str) \
               and isinstance(val, ast.Constant) and isinstance(val.value, str):
                tags[key.value] = val.value
        return tags

    return {}


def _union_members(node: ast.AST) -> List[ast.AST]:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _union_members(node.left) + _union_members(node.right)
    return [node]


def _is_none(node: ast.AST) -> bool:
    return isinstance(node, ast.Constant) and node.value is None


class Package:
    """All declarations of one parameter package (a directory of modules)."""

    def __init__(self, name: str, path: str):
        self.name  = name
        self.path  = path
        self.modules: Dict[str, List[str]] = {}  # module -> source lines
        self._classes: Dict[str, Tuple[str, ast.ClassDef]] = {}
        self._aliases: Dict[str, Tuple[str, ast.AST]] = {}
        self._structs: Dict[str, Type] = {}

    def add_module(self, module: str, source: str, tree: ast.Module) -> None:
        self.modules[module] = source.splitlines()

        for node in tree.body:
            if isinstance(node, ast.ClassDef):
                if node.name in self._classes:
                    other = self._classes[node.name][0]
                    raise LoadError(f"type {node.name} declared in both {other}.py and {module}.py")
                self._classes[node.name] = (module, node)
            elif isinstance(node, ast.Assign) and len(node.targets) == 1 \
                 and isinstance(node.targets[0], ast.Name):
                self._aliases[node.targets[0].id] = (module, node.value)
            elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name) \
                 and _base_name(node.annotation) == "TypeAlias" and node.value is not None:
                self._aliases[node.target.id] = (module, node.value)

    def type(self, name: str) -> Optional[Type]:
        """Look up a declared class or alias by name."""
        if name in self._classes:
            return self._class_type(name)
        if name in self._aliases:
            module, value = self._aliases[name]
            return self.resolve(value, module)
        return None

    def declaring_module(self, name: str) -> Optional[str]:
        """Return the module that binds name, whether as a class or an alias."""
        if name in self._classes:
            return self._classes[name][0]
        if name in self._aliases:
            return self._aliases[name][0]
        return None

    def _class_type(self, name: str) -> Type:
        module, node = self._classes[name]
        if not _is_dataclass(node):
            return Type(Kind.UNSUPPORTED, name, package=self, module=module)
        if name not in self._structs:
            self._structs[name] = Type(Kind.STRUCT, name, package=self, module=module, node=node)
        return self._structs[name]

    def resolve(self, node: ast.AST, module: str, seen: frozenset = frozenset()) -> Type:
        """Resolve an annotation expression to a Type."""
        text = ast.unparse(node)

        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            try:
                parsed = ast.parse(node.value, mode="eval").body
            except SyntaxError:
                return Type(Kind.UNSUPPORTED, node.value)
            return self.resolve(parsed, module, seen)

        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return self._resolve_union(_union_members(node), text, module, seen)

        if isinstance(node, ast.Subscript):
            return self._resolve_subscript(node, text, module, seen)

        if isinstance(node, ast.Name):
            if node.id in self._classes:
                return self._class_type(node.id)
            if node.id in self._aliases and node.id not in seen:
                alias_module, value = self._aliases[node.id]
                return self.resolve(value, alias_module, seen | {node.id})
            if node.id in BUILTIN_NAMES:
                return Type(Kind.BUILTIN, node.id)

        return Type(Kind.UNSUPPORTED, text)

    def _resolve_subscript(self, node: ast.Subscript, text: str, module: str, seen: frozenset) -> Type:
        base = _base_name(node.value)
        args = list(node.slice.elts) if isinstance(node.slice, ast.Tuple) else [node.slice]

        if base in _TRANSPARENT_NAMES:
            return self.resolve(args[0], module, seen)
        if base in _POINTER_NAMES and len(args) == 1:
            return self._resolve_union([args[0], ast.Constant(value=None)], text, module, seen)
        if base in _UNION_NAMES:
            return self._resolve_union(args, text, module, seen)
        if base in _SLICE_NAMES and len(args) == 1:
            return Type(Kind.SLICE, text, elem=self.resolve(args[0], module, seen))
        if base in _MAP_NAMES:
            return Type(Kind.MAP, text)

        return Type(Kind.UNSUPPORTED, text)

    def _resolve_union(self, members: List[ast.AST], text: str, module: str, seen: frozenset) -> Type:
        others = [m for m in members if not _is_none(m)]
        if len(others) != 1:
            return Type(Kind.UNSUPPORTED, text)

        elem = self.resolve(others[0], module, seen)
        if len(others) == len(members):
            return elem
        # Optional[Optional[X]] is Optional[X]
        if elem.kind == Kind.POINTER:
            return elem
        return Type(Kind.POINTER, text, elem=elem)

    def members_of(self, module: str, node: ast.ClassDef) -> List[Member]:
        lines = self.modules[module]
        members = []

        for base in node.bases:
            if _base_name(base) == "object":
                continue
            members.append(Member(
                name=ast.unparse(base),
                type=self.resolve(base, module),
                embedded=True,
            ))

        for stmt in node.body:
            if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
                continue
            annotation = stmt.annotation
            if isinstance(annotation, ast.Subscript):
                annotation = annotation.value
            if _base_name(annotation) in _NOT_A_FIELD_NAMES:
                continue

            members.append(Member(
                name=stmt.target.id,
                type=self.resolve(stmt.annotation, module),
                comment_lines=_comment_lines_above(lines, stmt.lineno),
                tags=_field_metadata_tags(stmt.value),
            ))

        return members


class TypeUniverse:
    def __init__(self, packages: Dict[str, Package]):
        self._packages = packages

    def package(self, name: str) -> Package:
        return self._packages[name]


class Builder:
    """Collects and parses the sources of parameter packages."""

    def __init__(self, build_tags: Iterable[str] = DEFAULT_BUILD_TAGS):
        self.build_tags = frozenset(build_tags)
        self._packages: Dict[str, Package] = {}

    def add_dir(self, dirpath: str) -> None:
        if not os.path.isdir(dirpath):
            raise LoadError(f"{dirpath} is not a directory")

        root_name = os.path.basename(os.path.normpath(dirpath))
        for current, dirnames, filenames in os.walk(dirpath):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith((".", "__")))

            rel = os.path.relpath(current, dirpath)
            pkg_name = root_name if rel == os.curdir else ".".join([root_name] + rel.split(os.sep))

            for filename in sorted(filenames):
                if filename.endswith(".py"):
                    self._add_file(pkg_name, current, filename)

    def _add_file(self, pkg_name: str, dirpath: str, filename: str) -> None:
        filepath = os.path.join(dirpath, filename)
        try:
            source = file_read(filepath)
        except ParamgenException as exc:
            raise LoadError(str(exc)) from exc

        if not matches_build_tags(source, self.build_tags):
            return

        try:
            tree = ast.parse(source, filename=filepath)
        except SyntaxError as exc:
            raise LoadError(f"failed to parse {filepath}: {exc}") from exc

        if pkg_name not in self._packages:
            self._packages[pkg_name] = Package(pkg_name, dirpath)
        self._packages[pkg_name].add_module(filename[:-len(".py")], source, tree)

    def find_packages(self) -> List[str]:
        return sorted(self._packages)

    def find_types(self) -> TypeUniverse:
        return TypeUniverse(dict(self._packages))


def load_params_type(dirpath: str, build_tags: Iterable[str] = DEFAULT_BUILD_TAGS) -> Tuple[Package, Type]:
    """
    Load the parameter package in dirpath and resolve its Params type.

    Raises:
        LoadError: If there is not exactly one package, or Params is missing
            or is not a dataclass.
    """
    builder = Builder(build_tags)
    builder.add_dir(dirpath)

    pkg_names = builder.find_packages()
    if len(pkg_names) != 1:
        raise LoadError(f"found unexpected number of packages in {pkg_names}: {len(pkg_names)}")

    pkg = builder.find_types().package(pkg_names[0])
    params_type = pkg.type(PARAMS_TYPE_NAME)
    if params_type is None:
        raise LoadError(f"no type named {PARAMS_TYPE_NAME} in package {pkg.name}")
    if params_type.kind != Kind.STRUCT:
        raise LoadError(f"unexpected param type: {params_type!r}; {PARAMS_TYPE_NAME} must be a dataclass")

    return pkg, params_type
