"""Bisect support: force individual flag checks from a pattern.

An external search tool runs the program repeatedly, each time with a different
pattern under the ``bisect`` key of the settings string, and watches which runs
reproduce a failure.  The pattern names one setting and selects call sites::

    RUNDEBUG="buggy=1,bisect=buggy:3..4"      # force checks 3 and 4 to true
    RUNDEBUG="bisect=buggy:!y-@cache.py"      # force every check false except cache.py ones
    RUNDEBUG="bisect=buggy:vx01"              # hash-suffix selection, print markers

Grammar of the pattern (no commas, since it lives inside the settings string)::

    PATTERN := TARGET ":" ["v"] ["!"] TERMS
    TERMS   := [SIGN] TERM {SIGN TERM}
    SIGN    := "+" | "-"
    TERM    := "y" | "n" | N | N ".." M | "@" TEXT | "x" BITS

``v`` asks instrumented code to print a match marker for every forced check and
``!`` flips the forced polarity to false.  Terms are scanned left to right and
the last one matching a site decides: ``+`` forces, ``-`` leaves the site alone.
Ordinals are 1-indexed and match integer sites (or all-digit string sites).
``x`` terms compare the low bits of :func:`site_hash`, most significant first.

Evaluation is pure.  A pattern that does not parse never forces anything.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from .config import INTERNAL_PREFIX
from .counters import UINT64_MASK
from .lookup import lookup

__all__ = [
    "BisectPattern",
    "Decision",
    "Site",
    "Term",
    "marker",
    "parse_pattern",
    "pattern_from_settings",
    "report_line",
    "should_force",
    "site_hash",
]

Site = Union[int, str]
TermKind = Literal["all", "none", "ordinal", "substring", "hash"]

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MAX_HASH_BITS = 64
# Ordinals beyond 19 digits cannot be a real occurrence count.
_MAX_ORDINAL_DIGITS = 19


class Decision(Enum):
    FORCE_TRUE = "force-true"
    FORCE_FALSE = "force-false"
    NO_OPINION = "no-opinion"

    @property
    def forced(self) -> bool:
        return self is not Decision.NO_OPINION

    def apply(self, organic: bool) -> bool:
        """Return the effective outcome of a check whose real result is *organic*."""

        if self is Decision.FORCE_TRUE:
            return True
        if self is Decision.FORCE_FALSE:
            return False
        return organic


def _bare(name: str) -> str:
    return name[len(INTERNAL_PREFIX) :] if name.startswith(INTERNAL_PREFIX) else name


def _is_ordinal_text(text: str) -> bool:
    return 0 < len(text) <= _MAX_ORDINAL_DIGITS and text.isascii() and text.isdigit()


def _ordinal(site: Site) -> int | None:
    if isinstance(site, bool):
        return None
    if isinstance(site, int):
        return site
    if isinstance(site, str) and _is_ordinal_text(site):
        return int(site)
    return None


def site_hash(setting_name: str, site: Site) -> int:
    """64-bit FNV-1a hash of ``"<setting> <site>"``; stable across runs."""

    value = _FNV_OFFSET
    for byte in f"{_bare(setting_name)} {site}".encode("utf-8"):
        value ^= byte
        value = (value * _FNV_PRIME) & UINT64_MASK
    return value


def marker(hashed: int) -> str:
    return f"[bisect-match 0x{hashed & UINT64_MASK:016x}]"


def report_line(setting_name: str, site: Site) -> str:
    """Line written to stderr when a verbose pattern forces a check."""

    name = _bare(setting_name)
    return f"{marker(site_hash(name, site))} {name} {site}"


@dataclass(frozen=True)
class Term:
    include: bool
    kind: TermKind
    low: int = 0
    high: int = 0
    text: str = ""
    bits: int = 0
    width: int = 0

    def matches(self, setting_name: str, site: Site) -> bool:
        if self.kind == "all":
            return True
        if self.kind == "none":
            return False
        if self.kind == "ordinal":
            ordinal = _ordinal(site)
            return ordinal is not None and self.low <= ordinal <= self.high
        if self.kind == "substring":
            return self.text in str(site)
        mask = (1 << self.width) - 1
        return site_hash(setting_name, site) & mask == self.bits


@dataclass(frozen=True)
class BisectPattern:
    target: str
    terms: tuple[Term, ...]
    force: bool = True
    verbose: bool = False

    def decide(self, setting_name: str, site: Site) -> Decision:
        name = _bare(setting_name)
        if name != self.target:
            return Decision.NO_OPINION
        selected = False
        for term in self.terms:
            if term.matches(name, site):
                selected = term.include
        if not selected:
            return Decision.NO_OPINION
        return Decision.FORCE_TRUE if self.force else Decision.FORCE_FALSE


def _parse_term(body: str, include: bool) -> Term | None:
    if body == "y":
        return Term(include=include, kind="all")
    if body == "n":
        return Term(include=include, kind="none")
    if body.startswith("@"):
        text = body[1:]
        return Term(include=include, kind="substring", text=text) if text else None
    if body.startswith("x"):
        bits = body[1:]
        if not bits or len(bits) > _MAX_HASH_BITS or set(bits) - {"0", "1"}:
            return None
        return Term(include=include, kind="hash", bits=int(bits, 2), width=len(bits))
    low_text, sep, high_text = body.partition("..")
    if not sep:
        high_text = low_text
    if not (_is_ordinal_text(low_text) and _is_ordinal_text(high_text)):
        return None
    low, high = int(low_text), int(high_text)
    if low < 1 or high < low:
        return None
    return Term(include=include, kind="ordinal", low=low, high=high)


def _parse_terms(text: str) -> tuple[Term, ...] | None:
    terms: list[Term] = []
    index = 0
    while index < len(text):
        include = True
        if text[index] in "+-":
            include = text[index] == "+"
            index += 1
        end = index
        while end < len(text) and text[end] not in "+-":
            end += 1
        term = _parse_term(text[index:end], include)
        if term is None:
            return None
        terms.append(term)
        index = end
    return tuple(terms) or None


@functools.lru_cache(maxsize=128)
def parse_pattern(text: str) -> BisectPattern | None:
    """Parse *text* into a :class:`BisectPattern`, or ``None`` when malformed."""

    target, sep, rest = text.partition(":")
    target = _bare(target)
    if not sep or not target or "=" in target:
        return None
    verbose = rest.startswith("v")
    if verbose:
        rest = rest[1:]
    force = not rest.startswith("!")
    if not force:
        rest = rest[1:]
    terms = _parse_terms(rest)
    if terms is None:
        return None
    return BisectPattern(target=target, terms=terms, force=force, verbose=verbose)


def pattern_from_settings(settings: str, key: str = "bisect") -> BisectPattern | None:
    text, found = lookup(settings, key)
    if not found or not text:
        return None
    return parse_pattern(text)


def should_force(pattern: BisectPattern | str | None, setting_name: str, site: Site) -> Decision:
    """Decide whether the check of *setting_name* at *site* is forced."""

    if isinstance(pattern, str):
        pattern = parse_pattern(pattern)
    if pattern is None:
        return Decision.NO_OPINION
    return pattern.decide(setting_name, site)
