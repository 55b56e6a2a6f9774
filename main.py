import sys

from rich.pretty import pprint

from directives import *

__prog__ = "directives"


if __name__ == '__main__':
    if len(sys.argv) != 2:
        sys.exit("usage: main.py SCRIPT")
    with open(sys.argv[1], encoding="utf-8") as file:
        pprint(parse(file, shell=True, fancy=True, colorful=sys.stderr.isatty()))
