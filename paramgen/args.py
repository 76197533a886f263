import os, argparse

from .common import PARAMGEN_CONFIG_FILENAME


def parse(argv=None) -> dict:
    parser = argparse.ArgumentParser(
        prog="paramgen",
        description=f"""\
Generate the params module of every check template in a directory. Each \
immediate subdirectory must hold a parameter package declaring a Params \
dataclass. Settings are read from {PARAMGEN_CONFIG_FILENAME} in that \
directory, if present.""",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("-C", "--directory", metavar="DIR",    type=str, default=os.curdir, help="Directory holding the check templates.")
    parser.add_argument(      "--check",     action="store_true",        default=False,     help="Verify generated files are up to date instead of writing them.")

    return vars(parser.parse_args(argv))
