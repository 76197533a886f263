import typing, contextlib

import rich, rich.console


class ParamgenPrinter:
    def __init__(self, stderr: bool = False):
        self.stack = []
        self.raw   = rich.console.Console(stderr=stderr)

    def reset(self):
        self.stack = []

    def indent(self, msg: str = None):
        msg = msg if msg is not None else "  "

        self.stack.append(msg)

    def unindent(self, times: int = None):
        if times is None:
            times = 1

        for _ in range(times):
            self.stack.pop()

    @contextlib.contextmanager
    def indented(self, msg: str = None):
        self.indent(msg)
        try:
            yield self
        finally:
            self.unindent()

    def print(self, msg: typing.Any = None, *args, no_indent: bool = False, **kwargs):
        if msg is None:
            msg = ""

        if no_indent:
            self.raw.print(str(msg), *args, soft_wrap=True, **kwargs)
            return

        prefix = ''.join(self.stack)
        print_s = '\n'.join(f"{prefix}{s}" for s in str(msg).split('\n'))

        self.raw.print(print_s, *args, soft_wrap=True, **kwargs)

    def error(self, msg: str):
        self.print(f"[bold red]Error[/bold red]: {msg}", no_indent=True, highlight=False)

    def print_exception(self):
        self.raw.print_exception()


cons = ParamgenPrinter()
