"""
Generate params modules for every check template under a directory.

For each template directory `<root>/<name>/`, the parameter package
`<name>/<params_dir>/` is loaded, its Params dataclass is described, and
`<name>/<params_dir>/<output_filename>` is (re)written. Directories are
processed one at a time, in sorted order; the first failure aborts the run.
"""

import os
import typing

from .printer import cons
from .common  import ParamgenException, file_read, file_write, format_list_to_string
from .state   import GenConfig
from .params.extract              import construct_parameter_descs
from .params.universe             import load_params_type, PARAMS_TYPE_NAME
from .params.generators.params_gen import TemplateRenderer


def render_template_dir(dirpath: str, config: GenConfig, renderer: TemplateRenderer) -> str:
    """Load, describe and render the params package of one template directory."""
    params_dirpath = os.path.join(dirpath, config.params_dir)

    pkg, params_type = load_params_type(params_dirpath, [config.build_tag])
    descs = construct_parameter_descs(params_type, config.marker, config.strict_annotations)

    return renderer.render_descs(descs, pkg.declaring_module(PARAMS_TYPE_NAME))


def _check_or_write(filepath: str, content: str, check_mode: bool) -> bool:
    """Check if the file is up to date or write new content. Returns True on success."""
    if check_mode:
        if not os.path.isfile(filepath):
            cons.print(f"[red]ERROR:[/red] {filepath} does not exist")
            return False
        if file_read(filepath) != content:
            cons.print(f"[red]ERROR:[/red] {filepath} is out of date")
            return False
        cons.print(f"[green]OK[/green] {filepath} is up to date")
        return True

    if file_write(filepath, content, if_different=True):
        cons.print(f"[green]Generated[/green] {filepath}")
    else:
        cons.print(f"[dim]Unchanged[/dim] {filepath}")
    return True


def process_template(dirpath: str, config: GenConfig, renderer: TemplateRenderer,
                     check_mode: bool = False) -> bool:
    """
    Generate (or, in check mode, verify) the params module of one template.

    Nothing is written unless loading, extraction and rendering all succeed.
    Returns False only in check mode, for a missing or stale file.
    """
    content  = render_template_dir(dirpath, config, renderer)
    filepath = os.path.join(dirpath, config.params_dir, config.output_filename)

    return _check_or_write(filepath, content, check_mode)


def find_template_dirs(root: str, config: GenConfig) -> typing.List[str]:
    """Immediate subdirectories of root that hold check templates, sorted."""
    names = []
    for entry in sorted(os.listdir(root)):
        if not os.path.isdir(os.path.join(root, entry)):
            continue
        if entry in config.skip_dirs or entry.startswith((".", "__")):
            continue
        names.append(entry)

    return names


def generate(root: str, config: GenConfig, renderer: TemplateRenderer,
             check_mode: bool = False) -> bool:
    """
    Process every template directory under root.

    Returns False if check mode found stale files.

    Raises:
        ParamgenException: Naming the first directory that failed.
    """
    try:
        names = find_template_dirs(root, config)
    except OSError as exc:
        raise ParamgenException(f'Failed to list "{root}": {exc}') from exc

    cons.print(f"Using [bold magenta]{config}[/bold magenta]")
    cons.print(f"Skipping {format_list_to_string(sorted(config.skip_dirs), 'magenta', 'no directories')}.")

    up_to_date = True
    for name in names:
        cons.print(f"Processing [bold magenta]{name}[/bold magenta]")
        with cons.indented():
            try:
                if not process_template(os.path.join(root, name), config, renderer, check_mode):
                    up_to_date = False
            except ParamgenException as exc:
                raise ParamgenException(f"processing dir {name}: {exc}") from exc

    if check_mode and not up_to_date:
        cons.print("[yellow]Run paramgen to update the generated files[/yellow]")

    return up_to_date
