#!/usr/bin/env python3

import sys

from paramgen         import args
from paramgen.common  import ParamgenException
from paramgen.printer import cons
from paramgen.state   import load_config
from paramgen.generate import generate
from paramgen.params.generators.params_gen import TemplateRenderer


def __run(argv=None) -> bool:
    arg      = args.parse(argv)
    config   = load_config(arg["directory"])
    renderer = TemplateRenderer(build_tag=config.build_tag)

    return generate(arg["directory"], config, renderer, check_mode=arg["check"])


def main(argv=None) -> int:
    try:
        return 0 if __run(argv) else 1
    except ParamgenException as exc:
        cons.reset()
        cons.error(str(exc))
        return 1
    except KeyboardInterrupt:
        return 1
    except Exception as exc:  # pylint: disable=broad-except
        cons.reset()
        cons.print_exception()
        cons.error(f"An unexpected exception occurred: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
