"""
Directives expander: ${NAME} substitution inside argument tokens.

Rules
- Every ${NAME} occurrence is replaced by environ[NAME].
- Unset names expand to "" (never an error).
- Single pass: text produced by an expansion is never expanded again.
- NAME follows identifier rules ([A-Za-z_][A-Za-z0-9_]*); anything else,
  as well as a "${" without its closing brace, is left literally.
- Quoted and unquoted tokens expand the same way (the lexer has already
  removed the quotes by the time a token reaches this module).

The environment is injected as a plain mapping so callers decide what it is
(os.environ snapshot, a test dict, ...). Nothing here reads process state.
"""
import re
from collections.abc import Mapping

PATTERN = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)\}")


def expand(token, environ, /):
    """
    Return token with every ${NAME} reference resolved against environ.

    Examples
    - expand("${HOME}/src", {"HOME": "/root"}) -> "/root/src"
    - expand("${MISSING}x", {})                -> "x"
    - expand("${A}", {"A": "${B}", "B": "b"})  -> "${B}"
    """
    if not isinstance(token, str):
        raise TypeError("expand() first argument must be a string")
    if not isinstance(environ, Mapping):
        raise TypeError("expand() second argument must be a mapping")
    if "${" not in token:
        return token
    return PATTERN.sub(lambda match: str(environ.get(match["name"], "")), token)


__all__ = (
    "expand",
)
