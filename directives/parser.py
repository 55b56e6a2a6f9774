"""
Directives parser front-end: feed lines through lexer → expander → binder →
factory → script, and surface faults.

What this module provides
- Parser: holds the registry, the (optional) injected environment and the runtime
  flags that decide how faults surface.
- parse(source, ...): parse a whole script into a sealed Script.
- parse_line(line, ...): parse a single directive into a Command.

Pipeline (per line)
    raw line
      → tokenize()           keyword + raw tokens (quotes removed)
      → expand()             ${NAME} resolved per token against the snapshot
      → registry.lookup()    command class (UnknownKeywordError otherwise)
      → bind()               bound parameters (ArityError otherwise)
      → command class(...)   immutable command
      → script.add()         instruction list or preamble slot

Script reading
- source may be a string (split into lines) or any iterable of lines (a list, an
  open file, a generator).
- every line is stripped; blank lines and lines starting with '#' are skipped.
- line numbers are 1-based and count skipped lines, so faults point at the file.
- parsing stops at the first fault: a script with one bad directive is not
  partially valid.

Runtime flags (same meaning as in the rest of the package)
- shell:    print faults with rich on stderr and exit(1) instead of raising.
- fancy:    render faults inside a rich Panel.
- colorful: colorize fault output.

Environment
- when environ is Unset, os.environ is snapshotted once per parse() call, so the
  whole script sees a consistent view even if the process environment changes.
"""
import os
from collections.abc import Iterable, Mapping

from .commands import Registry, registry
from .expander import expand
from .faults import ScriptException, trigger
from .lexer import tokenize
from .parameters import bind
from .scripts import Script
from .utils import *


class Parser:
    """
    Reusable, stateless parser configuration.

    A Parser keeps no per-script state: every parse() call builds and returns its
    own Script, so one Parser may serve several scripts (one at a time per thread).
    """

    __introspectable__ = (
        "registry",
        "environ",
        "shell",
        "fancy",
        "colorful",
    )

    def __init__(self, registry=registry, /, environ=Unset, *, shell=False, fancy=False, colorful=False):
        if not isinstance(registry, Registry):
            raise TypeError("parser 'registry' must be a registry")
        if not isinstance(environ, Mapping | Unset):
            raise TypeError("parser 'environ' must be a mapping")
        for name, flag in (("shell", shell), ("fancy", fancy), ("colorful", colorful)):
            if not isinstance(flag, bool):
                raise TypeError(f"parser {name!r} must be a boolean")

        self._registry = registry
        self._environ = environ
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful

    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    @property
    def registry(self):
        return self._registry

    @property
    def environ(self):
        """
        The injected environment, or None when os.environ is used.
        """
        return coalesce(self._environ)

    def snapshot(self):
        """
        Return a frozen copy of the environment parsing will resolve against.
        """
        return dict(coalesce(self._environ, os.environ))

    def trigger(self, fault, /, **options):
        """
        Merge runtime flags and line context into a fault and surface it.

        When an 'index' is given, the message is completed with the ordinal line
        ("... at third line") so the text alone identifies the offending directive.
        """
        if not isinstance(fault, ScriptException):
            raise TypeError("trigger() argument must be a script exception")
        if (index := options.get("index")) is not None and fault.message is not Unset:
            fault = type(fault)("%s at %s line" % (fault.message, ordinal(index)), **fault.options)
        trigger(
            fault,
            **options,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
        )

    def _build(self, line, environ):
        """
        Run one stripped line through the pipeline and return the command.

        Faults propagate untouched; callers add the line context.
        """
        keyword, tokens = tokenize(line)
        tokens = [expand(token, environ) for token in tokens]
        command = self._registry.lookup(keyword)
        return command(bind(command.__schema__, tokens, keyword))

    def parse_line(self, line, /, script=Unset, *, index=Unset, environ=Unset):
        """
        Parse a single directive and, when a script is given, file it there.

        parameters
        - line: str, one directive (surrounding whitespace is ignored)
        - script: Script | Unset, accumulator receiving the command
        - index: int | Unset, 1-based line number used in fault messages
        - environ: Mapping | Unset, overrides the parser environment for this call

        returns
        - Command

        raises
        - ScriptException subclasses (or SystemExit in shell mode) on the first fault.
        """
        if not isinstance(line, str):
            raise TypeError("parse_line() argument must be a string")
        if not isinstance(script, Script | Unset):
            raise TypeError("parse_line() 'script' must be a script")

        if environ is Unset:
            environ = self.snapshot()
        elif not isinstance(environ, Mapping):
            raise TypeError("parse_line() 'environ' must be a mapping")

        line = line.strip()

        try:
            command = self._build(line, environ)
        except ScriptException as fault:
            context = {
                "line": line,
                "keyword": fault.options.get("keyword", (line.split(None, 1) or [""])[0]),
            }
            if index is not Unset:
                context["index"] = index
            return self.trigger(fault, **context)

        if script is not Unset:
            script.add(command, self._registry.preamble(command.keyword))
        return command

    def parse(self, source, /):
        """
        Parse a whole script and return it sealed.

        parameters
        - source: str | Iterable[str]

        returns
        - Script with instructions in source order and the last command of every
          preamble kind.
        """
        if isinstance(source, str):
            lines = source.splitlines()
        elif isinstance(source, Iterable):
            lines = source
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        script = Script()
        environ = self.snapshot()

        for index, line in enumerate(lines, 1):
            if not isinstance(line, str):
                raise TypeError("parse() argument must be a string or an iterable of strings")
            if not (line := line.strip()) or line.startswith("#"):
                continue
            self.parse_line(line, script, index=index, environ=environ)

        return script.seal()

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "parser(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def parse(source, /, environ=Unset, *, registry=registry, shell=False, fancy=False, colorful=False):
    """
    Parse a whole script with a one-off Parser.

    Example
        >>> script = parse("WORKDIR foo/bar\\nWORKDIR 'bazz/buzz'")
        >>> script.preambles["WORKDIR"]
        [workdir(path='bazz/buzz')]
    """
    return Parser(registry, environ, shell=shell, fancy=fancy, colorful=colorful).parse(source)


def parse_line(line, /, environ=Unset, *, registry=registry):
    """
    Parse a single directive with a one-off Parser and return the command.
    """
    return Parser(registry, environ).parse_line(line)


__all__ = (
    "Parser",
    "parse",
    "parse_line",
)
