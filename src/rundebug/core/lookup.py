"""Parsing of the combined settings string.

The settings string is a comma-separated list of ``key=value`` tokens, for
example ``RUNDEBUG="http2client=0,panicnil=1"``.  Parsing is permissive: empty
tokens are skipped, tokens without ``=`` carry an empty value and the first
occurrence of a key wins.  Nothing here raises or logs.

Usage::

    from rundebug.core.lookup import lookup

    value, found = lookup("foo=bar,after=x", "foo")  # ("bar", True)
"""

from __future__ import annotations

__all__ = ["lookup", "parse"]

_SEP = ","
_ASSIGN = "="


def lookup(settings: str, name: str) -> tuple[str, bool]:
    """Return the value for *name* in *settings* and whether it was present.

    Only exact key matches count, so ``foo`` never matches ``foodecoy=x``.
    """

    if not settings or not name:
        return "", False
    for token in settings.split(_SEP):
        if not token:
            continue
        key, _, value = token.partition(_ASSIGN)
        if key == name:
            return value, True
    return "", False


def parse(settings: str) -> dict[str, str]:
    """Return every key in *settings* mapped to its first-occurrence value."""

    parsed: dict[str, str] = {}
    if not settings:
        return parsed
    for token in settings.split(_SEP):
        if not token:
            continue
        key, _, value = token.partition(_ASSIGN)
        if key and key not in parsed:
            parsed[key] = value
    return parsed
