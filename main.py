from enum import Enum

from rich.pretty import pprint

from nuargs import *


class Opt(Enum):
    NONE = 0
    FILES = Option("f", "files", kind=OptionKind.MULTIPLE_VALUES, descr="Files to process.")
    COUNT = Option("n", "count", kind=OptionKind.SINGLE_VALUE, default=1, descr="How many times.")
    DEBUG = Option("d", "debug", kind=OptionKind.FLAG, descr="Print debugging output.")


class Cmd(Enum):
    NONE = 0
    RUN = Command("run", Opt.FILES, descr="Process the given files.")


class Tool(Program, options=Opt, commands=Cmd, default=Cmd.RUN, unix=True, colorful=True):
    files: list[str] = Target(Opt.FILES, "files")
    count: int | None = Target(Opt.COUNT)
    debug: bool = Target(Opt.DEBUG)


if __name__ == '__main__':
    pprint(invoke(Tool))
