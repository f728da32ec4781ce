"""
Path Notation Parser (text -> Path).

Lets focal points be written as short strings, in code, config files
or on the command line.

Notation:
    nest.two            -> ("nest", "two")
    items[0].name       -> ("items", 0, "name")
    matrix[1][-1]       -> ("matrix", 1, -1)
    ["odd.key"].x       -> ("odd.key", "x")
    a['b c']            -> ("a", "b c")
    $.one               -> ("one",)
    "" / "." / "$"      -> ()  (the root)

Syntax Notes:
    - Integers are only recognised inside brackets; a bare segment such
      as `items.0` is the string key "0"
    - Quoted keys may use single or double quotes; backslash escapes
      the next character
"""
from __future__ import annotations

import re
from typing import List, Tuple

from focal.paths import Key, Path, as_path


class PathParseError(Exception):
    """Raised when path notation is invalid."""
    pass


_ROOT_MARKERS = ("", ".", "$")

_TOKEN_RE = re.compile(
    r"""
    \s*
    (
        \.                          # separator
      | \[ | \]                     # brackets
      | \$                          # root marker
      | '(?:[^'\\]|\\.)*'           # single-quoted key
      | "(?:[^"\\]|\\.)*"           # double-quoted key
      | [^.\[\]'"$\s]+              # bare key
    )
    """,
    re.VERBOSE,
)

_INDEX_RE = re.compile(r"^-?\d+$")
_BARE_KEY_RE = re.compile(r"^[^.\[\]'\"$\s]+$")
_ESCAPE_RE = re.compile(r"\\(.)")


def _tokenize(text: str) -> List[str]:
    """Tokenize path notation."""
    tokens = []
    pos = 0
    while pos < len(text):
        if text[pos:].strip() == "":
            break
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise PathParseError(f"Unexpected character {text[pos:].lstrip()[0]!r} in path: {text}")
        tokens.append(match.group(1))
        pos = match.end()
    return tokens


def _is_quoted(token: str) -> bool:
    return len(token) >= 2 and token[0] in "'\"" and token[-1] == token[0]


def _unquote(token: str) -> str:
    return _ESCAPE_RE.sub(r"\1", token[1:-1])


def _parse_name(tokens: List[str], pos: int) -> Tuple[Key, int]:
    """Parse a key after '.' or at the start of the path."""
    if pos >= len(tokens):
        raise PathParseError("Path ends with '.'")

    token = tokens[pos]
    if _is_quoted(token):
        return _unquote(token), pos + 1
    if token in (".", "[", "]", "$"):
        raise PathParseError(f"Expected a key, got {token!r}")
    return token, pos + 1


def _parse_bracket(tokens: List[str], pos: int) -> Tuple[Key, int]:
    """Parse the inside of [...] (the '[' is already consumed)."""
    if pos >= len(tokens):
        raise PathParseError("Missing closing bracket")

    token = tokens[pos]
    if _INDEX_RE.match(token):
        key = int(token)
    elif _is_quoted(token):
        key = _unquote(token)
    else:
        raise PathParseError(f"Bracketed key must be an integer or quoted string, got {token!r}")

    pos += 1
    if pos >= len(tokens) or tokens[pos] != "]":
        raise PathParseError("Missing closing bracket")
    return key, pos + 1


def parse_path(text: str) -> Path:
    """
    Convert path notation into a Path.

    Args:
        text: Path notation, e.g. "nest.two" or "items[0].name"

    Returns:
        Path

    Raises:
        PathParseError: If the notation is invalid
    """
    if not isinstance(text, str):
        raise PathParseError(f"Path notation must be a string, got {type(text).__name__}")

    stripped = text.strip()
    if stripped in _ROOT_MARKERS:
        return Path()

    try:
        tokens = _tokenize(stripped)
        keys: List[Key] = []
        pos = 0
        if tokens[0] == "$":
            pos = 1
        first = pos == 0

        while pos < len(tokens):
            token = tokens[pos]
            if token == "[":
                key, pos = _parse_bracket(tokens, pos + 1)
            elif token == ".":
                key, pos = _parse_name(tokens, pos + 1)
            elif first:
                key, pos = _parse_name(tokens, pos)
            else:
                raise PathParseError(f"Expected '.' or '[' before {token!r}")
            keys.append(key)
            first = False
    except PathParseError as e:
        raise PathParseError(f"Failed to parse path '{text}': {e}") from e

    return Path(keys)


def _quote(key: str) -> str:
    escaped = key.replace("\\", "\\\\").replace('"', '\\"')
    return f'["{escaped}"]'


def format_path(path) -> str:
    """
    Render a Path in the notation parse_path reads.

    The root renders as "$". Only str and int keys can be rendered.
    """
    keys = as_path(path).keys
    if not keys:
        return "$"

    parts = []
    for key in keys:
        if isinstance(key, int) and not isinstance(key, bool):
            parts.append(f"[{key}]")
        elif isinstance(key, str) and _BARE_KEY_RE.match(key):
            parts.append(key if not parts else f".{key}")
        elif isinstance(key, str):
            parts.append(_quote(key))
        else:
            raise PathParseError(f"Cannot render key of type {type(key).__name__}: {key!r}")
    return "".join(parts)


__all__ = [
    "PathParseError",
    "format_path",
    "parse_path",
]
