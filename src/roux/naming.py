"""Naming rules for pantries and ingredients, and ingredient path parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote

__all__ = [
    "ParsedIngredientPath",
    "is_valid_ingredient_name",
    "is_valid_pantry_name",
    "parse_ingredient_path",
]

INGREDIENT_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+\Z")

_MAX_PANTRY_NAME_LENGTH = 214
_SCOPED_NAME_PATTERN = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)\Z")
_SPECIAL_CHARACTERS = re.compile(r"[~'!()*]")
# Characters left unescaped by JavaScript's encodeURIComponent.
_URL_SAFE = "-_.!~*'()"

_BLACKLISTED_NAMES = frozenset({"node_modules", "favicon.ico"})

_NODE_CORE_MODULES = frozenset(
    {
        "assert",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "sys",
        "timers",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "worker_threads",
        "zlib",
    }
)


def _is_url_safe(value: str) -> bool:
    return quote(value, safe=_URL_SAFE) == value


def is_valid_pantry_name(name: object) -> bool:
    """Return whether ``name`` is usable as the name of a new npm package.

    Scoped names (``@scope/name``) are accepted. Anything that is not a
    string is invalid.
    """
    if not isinstance(name, str) or not name:
        return False
    if name.startswith(".") or name.startswith("_"):
        return False
    if name.strip() != name:
        return False

    lowered = name.lower()
    if lowered in _BLACKLISTED_NAMES or lowered in _NODE_CORE_MODULES:
        return False
    if len(name) > _MAX_PANTRY_NAME_LENGTH:
        return False
    if lowered != name:
        return False
    if _SPECIAL_CHARACTERS.search(name.split("/")[-1]):
        return False

    if _is_url_safe(name):
        return True
    match = _SCOPED_NAME_PATTERN.match(name)
    if match is None or match.group(1) is None:
        return False
    return _is_url_safe(match.group(1)) and _is_url_safe(match.group(2))


def is_valid_ingredient_name(name: object) -> bool:
    """Return whether ``name`` is a valid ingredient name.

    An ingredient name is one or more ``/``-separated tokens made of ASCII
    letters, digits, ``_`` and ``-``. The empty string is not a name.
    """
    if not isinstance(name, str):
        return False
    return all(INGREDIENT_TOKEN_PATTERN.match(token) for token in name.split("/"))


@dataclass(frozen=True)
class ParsedIngredientPath:
    """The pantry and ingredient parts of an ingredient path."""

    pantry: str
    ingredient: str


def parse_ingredient_path(ingredient_path: str) -> ParsedIngredientPath | None:
    """Split ``ingredient_path`` into its pantry and ingredient names.

    ``pantry/path/to/ingredient`` and ``@scope/pantry/path/to/ingredient``
    are both understood. Returns None if either part is not a valid name.

    Raises:
        TypeError: If ``ingredient_path`` is not a string.
    """
    if not isinstance(ingredient_path, str):
        raise TypeError("`ingredient_path` must be a string")

    tokens = ingredient_path.split("/")
    if is_valid_pantry_name(tokens[0]):
        pantry = tokens[0]
        ingredient = "/".join(tokens[1:])
    else:
        pantry = "/".join(tokens[:2])
        ingredient = "/".join(tokens[2:])

    if not is_valid_pantry_name(pantry) or not is_valid_ingredient_name(ingredient):
        return None
    return ParsedIngredientPath(pantry=pantry, ingredient=ingredient)
