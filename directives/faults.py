"""
Directives faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing parse
  failures. Codes are grouped by the stage that detects them (lexing, routing,
  binding) so logs and searches stay predictable.
- ScriptException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Line-first messages: every message names the ordinal line ("at third line")
  and quotes the offending directive.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The lexer, the binder and the registry raise faults directly (they are pure and
  know nothing about runtime flags).
- The parser front-end catches them, merges the line context (line, index, keyword)
  through copy.replace() and hands them to trigger().
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via rich.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by stage)
    - lexing (2110x)
      • UNTERMINATED_QUOTE
    - routing (2120x)
      • UNKNOWN_KEYWORD
    - binding (2130x)
      • ARITY, DUPLICATED_PARAMETER

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- lexing errors ---
    UNTERMINATED_QUOTE          = 21101

    # --- routing errors ---
    UNKNOWN_KEYWORD             = 21201

    # --- binding errors ---
    ARITY                       = 21301
    DUPLICATED_PARAMETER        = 21302

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ScriptException(Exception):
    """
    base of every parse failure.

    options (read-only mapping)
    - code: FaultCode
    - title: short lowercase title
    - hint: one actionable sentence
    - line: the offending directive text (when known)
    - keyword: the directive keyword (when known)
    - index: 1-based line number inside the script (when known)
    - shell/fancy/colorful: runtime flags merged by the parser
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "source-index": "dim #6B6F7A",
            "source-line": "#E6E6F0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", "directives"), styler("prog-name"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
            " | ",
            text(self.options.get("title", "parse error").title(), styler("error-title")),
            " ]"
        )
        parts = [text(self.message, styler("error-message"))]

        if (line := self.options.get("line")) is not None:
            index = self.options.get("index")
            parts.append(Text.assemble(
                text("%4s │ " % (index if index is not None else ""), styler("source-index")),
                text(line or " ", styler("source-line")),
            ))

        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnterminatedQuoteError(ScriptException): ...
class UnknownKeywordError(ScriptException): ...
class ArityError(ScriptException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ScriptException).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ScriptException",
    "UnterminatedQuoteError",
    "UnknownKeywordError",
    "ArityError",
    "FaultCode",
    "trigger",
    "getdoc",
)
