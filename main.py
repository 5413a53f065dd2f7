import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.pretty import pprint

from commandeer import *

__prog__ = "debug-console"

console = Console()


class Shell:
    @command(alias="sa", descr="An action handler")
    def single_action():
        console.print("single action")

    @command(alias="do", descr="Does things, with or without arguments")
    def do_things():
        console.print("nothing to do")

    @do_things.overload
    def do_things(text: str, count: int):
        console.print(text * count)

    @do_things.overload
    def do_things(first: str, second: str):
        console.print(first, second)

    @command(descr="Adds numbers")
    def total(*values: float):
        console.print(sum(values))


if __name__ == '__main__':
    if "--verbose" in sys.argv[1:]:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler()])

    dispatcher = create(Shell, shell=True, fancy=True)
    pprint(dispatcher.registry)

    for line in sys.stdin:
        if not dispatcher.invoke(line.rstrip("\r\n")):
            console.print("[yellow]not handled[/yellow]")
