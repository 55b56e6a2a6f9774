"""
Directives script accumulator.

A Script collects the commands produced by the parser:
- instruction-kind commands are appended to an ordered sequence;
- preamble-kind commands overwrite the single slot of their kind (last write wins).

The preamble table is stored as kind → command, but it is published list-shaped:
script.preambles[kind] is a list of length 0 or 1, and lookups accept either the
keyword string or the command class.

After parsing, the parser seals the script; a sealed script refuses new commands.
"""
from collections.abc import Mapping

from .commands import Command, CommandType
from .utils import *


def _kind(kind, /):
    """
    Normalize a kind given as keyword string, command class or command instance.
    """
    if isinstance(kind, Command):
        return kind.keyword
    if isinstance(kind, CommandType) and kind.__keyword__ is not Unset:
        return kind.__keyword__
    if isinstance(kind, str):
        return kind
    raise TypeError("preamble kind must be a keyword or a command type")


class Preambles(Mapping):
    """
    Read-only, list-shaped view over a script's preamble table.

    - preambles[kind] → [command] or [] (never raises for an absent kind)
    - iteration yields the keywords currently holding a command
    """

    def __init__(self, table, /):
        self._table = table

    def __getitem__(self, kind, /):
        try:
            return [self._table[_kind(kind)]]
        except KeyError:
            return []

    def __contains__(self, kind, /):
        try:
            return _kind(kind) in self._table
        except TypeError:
            return False

    def __iter__(self):
        return iter(self._table)

    def __len__(self):
        return len(self._table)

    def __rich_repr__(self):
        yield from self._table.items()

    def __repr__(self):
        return f"preambles({self._table!r})"


class Script:
    """
    Accumulated parse result: ordered instructions plus the preamble table.

    instructions and preambles are exposed read-only; the only mutation path is
    add(), which is closed once the script is sealed.
    """

    __introspectable__ = (
        "instructions",
        "preambles",
        "sealed",
    )

    def __init__(self):
        self._instructions = []
        self._table = {}
        self._sealed = False

    @property
    def instructions(self):
        """
        Instruction-kind commands in script order (tuple snapshot).
        """
        return tuple(self._instructions)

    @property
    def preambles(self):
        return Preambles(self._table)

    @property
    def sealed(self):
        return self._sealed

    def preamble(self, kind, /):
        """
        Return the current command of a preamble kind, or None.
        """
        return self._table.get(_kind(kind))

    def add(self, command, /, preamble=Unset):
        """
        File a command as instruction or preamble.

        parameters
        - command: Command
        - preamble: bool | Unset, defaults to the command's registry flag

        raises
        - RuntimeError when the script is sealed.
        """
        if not isinstance(command, Command):
            raise TypeError("add() argument must be a command")
        if not isinstance(preamble := coalesce(preamble, command.preamble), bool):
            raise TypeError("add() 'preamble' must be a boolean")
        if self._sealed:
            raise RuntimeError("script is sealed and cannot be modified")

        if preamble:
            self._table[command.keyword] = command
        else:
            self._instructions.append(command)
        return command

    def seal(self):
        """
        Freeze the script; further add() calls fail.
        """
        self._sealed = True
        return self

    def __len__(self):
        return len(self._instructions) + len(self._table)

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "script(instructions=%r, preambles=%r)" % (self._instructions, self._table)


__all__ = (
    "Script",
    "Preambles",
)
