"""Composite key construction and key matching."""

from collections.abc import Iterable, Sequence

from stalecache.exceptions import InvalidKeyError
from stalecache.types import Key, KeyPart

SEPARATOR = ":"

_ESCAPE_MAP = {"\\": "\\\\", SEPARATOR: "\\" + SEPARATOR}
_UNESCAPE_MAP = {escaped: char for char, escaped in _ESCAPE_MAP.items()}


def _encode_part(part: KeyPart) -> str:
    # bool first: it is a subclass of int
    if isinstance(part, bool):
        return "true" if part else "false"
    if isinstance(part, int):
        return str(part)
    if isinstance(part, float):
        return repr(part)
    if isinstance(part, str):
        result = part
        for char, escaped in _ESCAPE_MAP.items():
            result = result.replace(char, escaped)
        return result
    raise InvalidKeyError(
        f"Key parts must be str, int, float or bool, got {type(part).__name__}"
    )


def create_key(parts: Sequence[KeyPart]) -> Key:
    """
    Join an ordered sequence of scalar parts into one key.

    Example:
        create_key(["user", 42, "posts"])  # "user:42:posts"
        create_key(["a:b"])                # "a\\:b"
    """
    if isinstance(parts, (str, bytes)):
        raise InvalidKeyError("create_key expects a sequence of parts, not a string")
    return SEPARATOR.join(_encode_part(part) for part in parts)


def split_key(key: Key) -> tuple[str, ...]:
    """Split a key built by create_key back into its (string) parts."""
    parts: list[str] = []
    current = ""
    i = 0

    while i < len(key):
        if key[i] == "\\":
            escaped = key[i : i + 2]
            if escaped in _UNESCAPE_MAP:
                current += _UNESCAPE_MAP[escaped]
                i += 2
                continue
            current += key[i]
            i += 1
        elif key[i] == SEPARATOR:
            parts.append(current)
            current = ""
            i += 1
        else:
            current += key[i]
            i += 1

    parts.append(current)
    return tuple(parts)


def matches(pattern: Key, key: Key, *, exact: bool = True) -> bool:
    """Exact comparison, or a plain string-prefix match when not exact."""
    if exact:
        return key == pattern
    return key.startswith(pattern)


def find_matching(
    pattern: Key, keys: Iterable[Key], *, exact: bool = True
) -> list[Key]:
    """Return every key in ``keys`` that matches ``pattern``."""
    return [key for key in keys if matches(pattern, key, exact=exact)]
