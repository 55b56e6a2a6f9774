"""
Directives command layer: typed command variants, the registry and the factory.

What this module provides
- Command: immutable base of every parsed directive. Each concrete subclass is one
  variant of a closed, keyword-tagged union and declares:
  • keyword=   the directive keyword it answers to (class keyword argument)
  • preamble=  whether the script keeps only its last occurrence (class keyword argument)
  • __schema__ the parameter Schema its arguments bind to
  Read accessors are generated for every schema parameter unless the class
  defines its own (see Copy.paths).

- Registry: immutable keyword → command class mapping with lookup and construction.
- registry: the built-in command set.

Built-in commands
    keyword   kind         default    named
    WORKDIR   preamble     path       -
    OUTPUT    preamble     path       -
    AS        preamble     userid     groupid
    COPY      instruction  paths      -
    CAPTURE   instruction  cmd        shell
    RUN       instruction  cmd        shell

Quick example
    >>> command = registry.create("WORKDIR", {"path": "foo/bar"})
    >>> command.path
    'foo/bar'
    >>> command
    workdir(path='foo/bar')
"""
import difflib
import functools
import operator
import re
from collections.abc import Mapping
from types import MappingProxyType

from .faults import FaultCode, UnknownKeywordError, getdoc
from .parameters import Default, Named, Schema
from .utils import *


def _accessor(name, /):
    """
    Build a read-only property returning the bound value of parameter 'name'.
    """
    @rename(name)
    def getter(self):
        return self._params.get(name)

    return property(getter)


class CommandType(type):
    """
    Metaclass for command variants.

    Responsibilities
    - Validate and record the class keywords 'keyword' and 'preamble'.
    - Validate that concrete variants declare a Schema in __schema__.
    - Generate one read-only accessor per schema parameter (unless overridden).
    - Keep instances slot-based so nothing can be attached after construction.
    """

    def __new__(cls, name, bases, namespace, *, keyword=Unset, preamble=False, **options):
        if not isinstance(keyword, str | Unset):
            raise TypeError(f"command {name!r} 'keyword' must be a string")
        elif isinstance(keyword, str) and not re.fullmatch(r"[A-Z][A-Z0-9_]*", keyword):
            raise ValueError(f"command {name!r} 'keyword' must be an uppercase word")
        if not isinstance(preamble, bool):
            raise TypeError(f"command {name!r} 'preamble' must be a boolean")

        namespace.setdefault("__slots__", ())

        if keyword is not Unset:
            if not isinstance(schema := namespace.get("__schema__"), Schema):
                raise TypeError(f"command {name!r} must declare a '__schema__'")
            for parameter in schema.parameters:
                if parameter not in namespace:
                    namespace[parameter] = _accessor(parameter)

        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
                "__keyword__": keyword,
                "__preamble__": preamble,
            },
            **options
        )
        return self

    def __repr__(cls):
        if cls.__keyword__ is Unset:
            return super().__repr__()
        return f"<command {cls.__keyword__} ({'preamble' if cls.__preamble__ else 'instruction'})>"


class Command(metaclass=CommandType):
    """
    Immutable, typed value for one parsed directive.

    Instances hold the bound parameters produced by the binder and expose them
    through generated read accessors. Two commands are equal when they are the
    same variant and carry the same bound parameters.
    """
    __slots__ = ("_params",)

    def __new__(cls, params, /):
        if cls.__keyword__ is Unset:
            raise TypeError(f"type {cls.__name__!r} is abstract; subclass it with a 'keyword'")
        if not isinstance(params, Mapping):
            raise TypeError(f"{cls.__typename__} parameters must be a mapping")

        schema = cls.__schema__
        for name, value in params.items():
            if name not in schema.parameters:
                raise ValueError(f"{cls.__typename__} does not declare a parameter named {name!r}")
            if not isinstance(value, str | None):
                raise TypeError(f"{cls.__typename__} parameter {name!r} must be a string")
        if schema.default.required and schema.default.name not in params:
            raise ValueError(f"{cls.__typename__} requires a value for {schema.default.name!r}")

        # Same shape as bind(): schema order, declared fallbacks filled in.
        normalized = {}
        for name, parameter in schema.parameters.items():
            if name in params:
                normalized[name] = params[name]
            elif parameter.default is not Unset:
                normalized[name] = parameter.default

        self = super().__new__(cls)
        object.__setattr__(self, "_params", MappingProxyType(normalized))
        return self

    @property
    def keyword(self):
        """
        Directive keyword of this variant (its kind).
        """
        return type(self).__keyword__

    @property
    def preamble(self):
        """
        True when a script keeps only the last command of this kind.
        """
        return type(self).__preamble__

    @property
    def params(self):
        """
        Read-only view over the bound parameters.
        """
        return self._params

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__typename__} command is immutable")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__typename__} command is immutable")

    def __eq__(self, other):
        if not isinstance(other, Command):
            return NotImplemented
        return type(self) is type(other) and dict(self._params) == dict(other._params)

    def __hash__(self):
        return hash((type(self), frozenset(self._params.items())))

    def __reduce__(self):
        return type(self), (dict(self._params),)

    def __rich_repr__(self):
        yield from self._params.items()

    def __repr__(self):
        return f"{type(self).__typename__}({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


class Workdir(Command, keyword="WORKDIR", preamble=True):
    """
    Working directory for the script; a later WORKDIR replaces an earlier one.
    """
    __schema__ = Schema(Default("path", descr="working directory"))


class Output(Command, keyword="OUTPUT", preamble=True):
    """
    Destination of the collected artifacts.
    """
    __schema__ = Schema(Default("path", descr="output file path"))


class As(Command, keyword="AS", preamble=True):
    """
    Identity commands run as. groupid is None when not supplied.
    """
    __schema__ = Schema(
        Default("userid", descr="user id or name"),
        Named("groupid", default=None, descr="group id or name"),
    )


class Copy(Command, keyword="COPY"):
    __schema__ = Schema(Default("paths", descr="whitespace-separated paths to copy"))

    @property
    def paths(self):
        """
        Paths to copy, split on whitespace.
        """
        return tuple(self._params["paths"].split())


class Capture(Command, keyword="CAPTURE"):
    __schema__ = Schema(
        Default("cmd", descr="command whose output is captured"),
        Named("shell", default=None, descr="shell used to run the command"),
    )


class Run(Command, keyword="RUN"):
    __schema__ = Schema(
        Default("cmd", descr="command to run"),
        Named("shell", default=None, descr="shell used to run the command"),
    )


class Registry(Mapping):
    """
    Immutable mapping keyword → command class.

    Registration happens once, at construction; lookups never mutate it.

    Behavior
    - lookup(keyword) returns the command class or raises UnknownKeywordError with
      close-match suggestions.
    - create(keyword, params) constructs the command from bound parameters.
    """

    def __init__(self, *commands):
        mapping = {}
        for command in commands:
            if not isinstance(command, CommandType) or command.__keyword__ is Unset:
                raise TypeError("registry arguments must be concrete command types")
            if command.__keyword__ in mapping:
                raise ValueError(f"registry keyword {command.__keyword__!r} is already in use")
            mapping[command.__keyword__] = command
        self._commands = MappingProxyType(mapping)

    def __getitem__(self, keyword, /):
        return self._commands[keyword]

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)

    def lookup(self, keyword, /):
        """
        Return the command class registered for keyword (case-sensitive).

        raises
        - UnknownKeywordError when no command answers to keyword.
        """
        try:
            return self._commands[keyword]
        except KeyError:
            pass

        if not keyword:
            raise UnknownKeywordError(
                "missing directive keyword",
                title="missing keyword",
                code=FaultCode.UNKNOWN_KEYWORD,
                hint="start the line with one of: %s" % ", ".join(self._commands),
                keyword=keyword,
                suggestions=[],
                docs=getdoc(FaultCode.UNKNOWN_KEYWORD),
            )

        suggestions = difflib.get_close_matches(keyword, self._commands.keys(), 5)
        if not suggestions and keyword.upper() in self._commands:
            suggestions = [keyword.upper()]
        try:
            hint = "did you mean %r? keywords are case-sensitive" % suggestions[0]
        except IndexError:
            hint = "use one of: %s" % ", ".join(self._commands)
        raise UnknownKeywordError(
            "unknown directive %r" % keyword,
            title="unknown directive",
            code=FaultCode.UNKNOWN_KEYWORD,
            hint=hint,
            keyword=keyword,
            suggestions=suggestions,
            docs=getdoc(FaultCode.UNKNOWN_KEYWORD),
        )

    def schema(self, keyword, /):
        return self.lookup(keyword).__schema__

    def preamble(self, keyword, /):
        return self.lookup(keyword).__preamble__

    def create(self, keyword, params, /):
        return self.lookup(keyword)(params)

    def __rich_repr__(self):
        yield from self._commands.items()

    def __repr__(self):
        return f"registry({", ".join(self._commands)})"


registry = Registry(Workdir, Output, As, Copy, Capture, Run)
"""
Built-in registry used by the parser when none is given.
"""


__all__ = (
    # Classes
    "Command",
    "Workdir",
    "Output",
    "As",
    "Copy",
    "Capture",
    "Run",
    "Registry",

    # Constants
    "registry",
)
