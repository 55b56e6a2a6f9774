r"""
Directives parameter specifications and the parameter binder.

Overview
- Specs
  • Default: the single positional (unnamed) parameter every schema declares.
  • Named: an optional parameter bound through an explicit name:value token.
  • Schema: one Default plus zero or more Named parameters, with unique names.

- Binder
  • bind(schema, tokens): map already-expanded tokens onto a schema and return a
    read-only mapping name → value.

Binding rules
- "name:value" binds to the parameter called name when name is declared by the
  schema (named parameters and the default parameter's own name). The value is
  everything after the first colon and may be empty.
- Any other token binds positionally to the default parameter. This includes
  tokens whose prefix is not a declared name (C:\tmp, http://host, a:b), which
  keeps colon-bearing values literal.
- The default parameter receives exactly one value across the whole line:
  • two or more → ArityError
  • zero → ArityError when the default is mandatory (no fallback declared)
- A named parameter given twice → ArityError (DUPLICATED_PARAMETER code).
- Parameters that were not supplied but declare a fallback are filled with it;
  the others are omitted from the result.

Introspection & representation
- ParameterType metaclass provides stable __repr__/__rich_repr__ and exposes the
  fields declared in __introspectable__ via read-only properties.

Quick example
    >>> schema = Schema(Default("userid"), Named("groupid", default=None))
    >>> dict(bind(schema, ["1000", "groupid:100"]))
    {'userid': '1000', 'groupid': '100'}
"""
import functools
import operator
import re
from types import MappingProxyType

from rich.text import Text

from .faults import ArityError, FaultCode, getdoc
from .utils import *


class ParameterType(type):
    """
    Metaclass that turns parameter specs into introspectable values.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens).
    - Expose every name in __introspectable__ as a read-only property backed
      by the private field "_{name}".
    - Provide compact __repr__/__rich_repr__ implementations for diagnostics.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the fields shared by every parameter spec.

    - name: required identifier ([A-Za-z_][A-Za-z0-9_]*), surrounding whitespace trimmed.
    - descr: Unset or a non-empty string/Text; Unset becomes None.

    Mutates metadata in place.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid identifier")
    metadata["name"] = name

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Default(metaclass=ParameterType):
    """
    Positional (unnamed) parameter specification.

    Every schema declares exactly one. It is mandatory unless a fallback 'default'
    is given, in which case a missing value binds to that fallback instead of
    failing with an arity error.
    """

    __introspectable__ = (
        "name",
        "default",
        "descr",
    )

    def __init__(self, name, /, default=Unset, descr=Unset):
        metadata = {
            "name": name,
            "default": default,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)

        if not isinstance(metadata["default"], str | Unset):
            raise TypeError(f"{type(self).__typename__} 'default' must be a string")

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def required(self):
        """
        True when the line must supply a value for this parameter.
        """
        return self._default is Unset

    def __eq__(self, other):
        if not isinstance(other, Default):
            return NotImplemented
        return (self._name, self._default) == (other._name, other._default)

    def __hash__(self):
        return hash((Default, self._name, self._default))


class Named(metaclass=ParameterType):
    """
    Named parameter specification (bound through a name:value token).

    Named parameters are optional. When omitted, 'default' is used if provided
    (None is a valid fallback); otherwise the parameter is absent from the result.
    """

    __introspectable__ = (
        "name",
        "default",
        "descr",
    )

    def __init__(self, name, /, default=Unset, descr=Unset):
        metadata = {
            "name": name,
            "default": default,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)

        if not isinstance(metadata["default"], str | None | Unset):
            raise TypeError(f"{type(self).__typename__} 'default' must be a string or None")

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __eq__(self, other):
        if not isinstance(other, Named):
            return NotImplemented
        return (self._name, self._default) == (other._name, other._default)

    def __hash__(self):
        return hash((Named, self._name, self._default))


class Schema(metaclass=ParameterType):
    """
    Static description of the parameters a directive accepts.

    Invariants
    - exactly one Default parameter (first positional argument)
    - zero or more Named parameters
    - no two parameters share a name
    """

    __introspectable__ = (
        "default",
        "named",
    )

    def __init__(self, default, /, *named):
        if not isinstance(default, Default):
            raise TypeError(f"{type(self).__typename__} first argument must be a default parameter")

        parameters = {default.name: default}
        for parameter in named:
            if not isinstance(parameter, Named):
                raise TypeError(f"{type(self).__typename__} extra arguments must be named parameters")
            if parameter.name in parameters:
                raise ValueError(f"{type(self).__typename__} parameter names cannot contain duplicates")
            parameters[parameter.name] = parameter

        self._default = default
        self._named = tuple(named)
        self._parameters = MappingProxyType(parameters)

    @property
    def parameters(self):
        """
        Read-only mapping name → parameter, default parameter first.
        """
        return self._parameters

    def usage(self, keyword, /):
        """
        Render a one-line usage string, e.g. "AS <userid> [groupid:<groupid>]".
        """
        parts = [keyword]
        if self._default.required:
            parts.append("<%s>" % self._default.name)
        else:
            parts.append("[<%s>]" % self._default.name)
        parts.extend("[%s:<%s>]" % (parameter.name, parameter.name) for parameter in self._named)
        return " ".join(parts)

    def __eq__(self, other):
        if not isinstance(other, Schema):
            return NotImplemented
        return (self._default, self._named) == (other._default, other._named)

    def __hash__(self):
        return hash((Schema, self._default, self._named))


def bind(schema, tokens, /, keyword=Unset):
    """
    Bind expanded tokens to a schema.

    parameters
    - schema: Schema
    - tokens: Iterable[str], already unquoted and expanded
    - keyword: str | Unset, only used to render usage hints

    returns
    - MappingProxyType[str, str | None] in schema order

    raises
    - ArityError when the default parameter gets zero (and is mandatory) or
      several values, or when a named parameter is given twice.
    """
    if not isinstance(schema, Schema):
        raise TypeError("bind() first argument must be a schema")

    usage = schema.usage(coalesce(keyword, "DIRECTIVE"))
    default = schema.default
    bound = {}

    for position, token in enumerate(tokens, 1):
        if not isinstance(token, str):
            raise TypeError("bind() tokens must be strings")

        name, colon, value = token.partition(":")
        if colon and name in schema.parameters:
            parameter = schema.parameters[name]
        else:
            parameter, value = default, token

        if parameter.name in bound:
            if parameter is default:
                raise ArityError(
                    "too many values for %r from %s argument" % (default.name, ordinal(position)),
                    title="too many values",
                    code=FaultCode.ARITY,
                    hint="pass a single value, quote it if it contains spaces: %s" % usage,
                    parameter=default.name,
                    position=position,
                    docs=getdoc(FaultCode.ARITY),
                )
            raise ArityError(
                "parameter %r from %s argument was already provided" % (parameter.name, ordinal(position)),
                title="duplicated parameter",
                code=FaultCode.DUPLICATED_PARAMETER,
                hint="keep a single %s:<value>" % parameter.name,
                parameter=parameter.name,
                position=position,
                docs=getdoc(FaultCode.DUPLICATED_PARAMETER),
            )
        bound[parameter.name] = value

    if default.name not in bound and default.required:
        raise ArityError(
            "missing value for %r" % default.name,
            title="missing value",
            code=FaultCode.ARITY,
            hint="pass one value, either positionally or as %s:<value>: %s" % (default.name, usage),
            parameter=default.name,
            position=0,
            docs=getdoc(FaultCode.ARITY),
        )

    for name, parameter in schema.parameters.items():
        if name not in bound and parameter.default is not Unset:
            bound[name] = parameter.default

    return MappingProxyType({name: bound[name] for name in schema.parameters if name in bound})


__all__ = (
    # Classes (specifications)
    "Default",
    "Named",
    "Schema",

    # Functions
    "bind",
)

# Not part of the public API.
del ParameterType
