r"""
Directives lexer: split one directive line into a keyword and raw argument tokens.

Grammar (deliberately small, not a shell)
- The first whitespace-delimited run is the keyword (kept verbatim, case-sensitive).
- The rest splits on unquoted whitespace.
- Quotes group text and are removed:
  • '...'  literal, backslash has no meaning inside
  • "..."  \" and \\ are escapes, any other backslash is literal
  Quotes may start mid-token, so path:'foo bar' becomes the single token "path:foo bar".
- Outside quotes a backslash escapes the next character (a\ b → "a b").
  A trailing lone backslash is kept literally.
- Empty quotes ('' or "") produce an empty token.

Errors
- UnterminatedQuoteError when a quote is opened and never closed.

Quick example
    >>> tokenize("WORKDIR path:'foo bar'")
    ('WORKDIR', ('path:foo bar',))
"""
from .faults import FaultCode, UnterminatedQuoteError, getdoc

QUOTES = ("'", '"')


def tokenize(line, /):
    """
    Split a directive line into (keyword, tokens).

    parameters
    - line: str
      one directive; surrounding whitespace is ignored.

    returns
    - tuple[str, tuple[str, ...]]: the keyword and the raw (unexpanded) tokens.
      an empty line yields ("", ()).

    raises
    - TypeError when line is not a string.
    - UnterminatedQuoteError when a quote is not balanced.
    """
    if not isinstance(line, str):
        raise TypeError("tokenize() argument must be a string")

    line = line.strip()
    tokens = []
    buffer = []
    pending = False  # True once a token started, even if it is still empty ('' case)
    quote = None
    start = 0
    length = len(line)
    index = 0

    while index < length:
        char = line[index]
        next = index + 1

        if quote == "'":
            if char == "'":
                quote = None
            else:
                buffer.append(char)
        elif quote == '"':
            if char == "\\" and next < length and line[next] in ('"', "\\"):
                buffer.append(line[next])
                index += 2
                continue
            if char == '"':
                quote = None
            else:
                buffer.append(char)
        elif char in QUOTES:
            quote, start, pending = char, index, True
        elif char == "\\" and next < length:
            buffer.append(line[next])
            pending = True
            index += 2
            continue
        elif char.isspace():
            if pending:
                tokens.append("".join(buffer))
                buffer.clear()
                pending = False
        else:
            buffer.append(char)
            pending = True
        index += 1

    if quote is not None:
        raise UnterminatedQuoteError(
            "unterminated %s quote opened at column %d" % ("single" if quote == "'" else "double", start + 1),
            title="unterminated quote",
            code=FaultCode.UNTERMINATED_QUOTE,
            hint="close the %s quote or escape it with a backslash" % quote,
            line=line,
            column=start + 1,
            docs=getdoc(FaultCode.UNTERMINATED_QUOTE),
        )

    if pending:
        tokens.append("".join(buffer))

    if not tokens:
        return "", ()

    keyword, *arguments = tokens
    return keyword, tuple(arguments)


__all__ = (
    "tokenize",
)
