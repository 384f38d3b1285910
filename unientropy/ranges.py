"""
unientropy.ranges

Flattened code point range table:
- characters_to_ranges(text): literal characters -> minimal inclusive ranges
- build_ranges(catalog): one sorted, disjoint list of Range for all classes,
  overlaps resolved with each class's `dominates` declaration
- RangeTable.search(code_point): binary search for the owning range, or the
  open gap around an unknown code point
"""

import bisect
import logging
import re
from functools import lru_cache
from typing import Iterable, List, NamedTuple, Optional, Sequence, Set, Tuple

from .classes import (
    BEHAVIOR_WEIGHTS,
    CATALOG,
    IGNORED,
    LAST_UNICODE,
    UNKNOWN,
    CharacterClass,
)

logger = logging.getLogger(__name__)

_SURROGATES = re.compile("[\ud800-\udfff]")


class CatalogError(ValueError):
    """The static class catalog is malformed; raised while building the table."""


class Range(NamedTuple):
    start: int
    end: int
    name: str
    weight: float


class SearchResult(NamedTuple):
    code_point: int
    known: bool
    range: Optional[Range] = None
    open: Optional[Tuple[int, int]] = None
    next: Optional[Range] = None


def join_surrogates(text: str) -> str:
    """
    Pair high/low surrogate halves into single code points and drop unpaired
    low surrogates. Unpaired high surrogates are kept as-is.
    """
    if not _SURROGATES.search(text):
        return text
    out = []
    i, n = 0, len(text)
    while i < n:
        cp = ord(text[i])
        if 0xD800 <= cp <= 0xDBFF and i + 1 < n and 0xDC00 <= ord(text[i + 1]) <= 0xDFFF:
            out.append(chr(0x10000 + ((cp - 0xD800) << 10) + (ord(text[i + 1]) - 0xDC00)))
            i += 2
            continue
        if 0xDC00 <= cp <= 0xDFFF:
            i += 1
            continue
        out.append(text[i])
        i += 1
    return "".join(out)


def code_points(text: str) -> List[int]:
    return [ord(c) for c in join_surrogates(text)]


def characters_to_ranges(text: str) -> Tuple[int, ...]:
    """
    Collapse the distinct code points of `text` into a flat tuple of
    inclusive (start, end) pairs, e.g. "cab" -> (0x61, 0x63).
    """
    flat: List[int] = []
    for cp in sorted(set(code_points(text))):
        if flat and flat[-1] + 1 == cp:
            flat[-1] = cp
        else:
            flat.extend((cp, cp))
    return tuple(flat)


def _pairs(flat: Sequence[int]) -> List[Tuple[int, int]]:
    return [(flat[i], flat[i + 1]) for i in range(0, len(flat), 2)]


def _class_ranges(eclass: CharacterClass) -> Tuple[int, ...]:
    if bool(eclass.ranges) == bool(eclass.characters):
        raise CatalogError(
            f"Class {eclass.name!r} must define exactly one of ranges or characters")
    flat = eclass.ranges or characters_to_ranges(eclass.characters)
    if len(flat) % 2:
        raise CatalogError(f"Range list for {eclass.name!r} must have even length")
    for start, end in _pairs(flat):
        if start > end:
            raise CatalogError(
                f"Range list for {eclass.name!r} not in sequence: {start:#x} > {end:#x}")
        if start < 0 or end > LAST_UNICODE:
            raise CatalogError(f"Range list for {eclass.name!r} outside unicode")
    return flat


def dominance_pairs(catalog: Iterable[CharacterClass]) -> Set[Tuple[str, str]]:
    """Validated (dominant, dominated) class name pairs."""
    catalog = list(catalog)
    names = [c.name for c in catalog]
    if len(set(names)) != len(names):
        raise CatalogError("Duplicate class names in catalog")
    pairs = set()
    for eclass in catalog:
        if eclass.weight <= 0:
            raise CatalogError(f"Class {eclass.name!r} needs a positive weight")
        if eclass.dominates is None:
            continue
        if eclass.dominates not in names:
            raise CatalogError(
                f"Class {eclass.name!r} dominates unknown class {eclass.dominates!r}")
        if (eclass.dominates, eclass.name) in pairs:
            raise CatalogError(
                f"Classes {eclass.name!r} and {eclass.dominates!r} dominate each other")
        pairs.add((eclass.name, eclass.dominates))
    return pairs


def _resolve_overlaps(ranges: List[Range], dominance: Set[Tuple[str, str]]) -> int:
    """
    Remove overlaps in place from a list sorted by (start, end). Returns the
    number of adjustments made.
    """
    adjustments = 0
    i = 0
    while i + 1 < len(ranges):
        a, b = ranges[i], ranges[i + 1]
        if a.end < b.start:
            i += 1
            continue

        if (a.name, b.name) in dominance:
            # a keeps the overlap; b always starts at or after a
            pieces = [b._replace(start=a.end + 1)] if b.end > a.end else []
            del ranges[i + 1]
        elif (b.name, a.name) in dominance:
            # b keeps the overlap; a may survive before and after it
            pieces = []
            if a.start < b.start:
                pieces.append(a._replace(end=b.start - 1))
            if a.end > b.end:
                pieces.append(a._replace(start=b.end + 1))
            del ranges[i]
        else:
            raise CatalogError(
                f"Range overlap between {a.name!r} and {b.name!r} "
                f"without establishing dominance")

        for piece in pieces:
            bisect.insort(ranges, piece)
        adjustments += 1
        # the pair before may now overlap
        i = max(i - 1, 0)
    return adjustments


def build_ranges(catalog: Iterable[CharacterClass] = CATALOG) -> List[Range]:
    """
    Flatten the catalog into one list of Range sorted by start, with no two
    ranges overlapping. Raises CatalogError on a malformed catalog.
    """
    catalog = list(catalog)
    dominance = dominance_pairs(catalog)
    ranges = []
    for eclass in catalog:
        for start, end in _pairs(_class_ranges(eclass)):
            ranges.append(Range(start, end, eclass.name, eclass.weight))
    ranges.sort()
    adjustments = _resolve_overlaps(ranges, dominance)
    logger.debug("Built %d ranges from %d classes (%d overlap adjustments)",
                 len(ranges), len(catalog), adjustments)
    return ranges


class RangeTable:
    """Sorted, disjoint range table with O(log R) lookups."""

    def __init__(self, ranges: Sequence[Range], dominance: Iterable[Tuple[str, str]] = ()):
        self.ranges: Tuple[Range, ...] = tuple(ranges)
        self.starts: List[int] = [r.start for r in self.ranges]
        self.dominance: Tuple[Tuple[str, str], ...] = tuple(sorted(dominance))

    @classmethod
    def from_catalog(cls, catalog: Iterable[CharacterClass] = CATALOG) -> "RangeTable":
        catalog = list(catalog)
        return cls(build_ranges(catalog), dominance_pairs(catalog))

    def __len__(self) -> int:
        return len(self.ranges)

    def search(self, code_point: int) -> SearchResult:
        """
        Find the range containing `code_point`. When none does, the result
        carries the open interval around it and the next known range.
        """
        if not self.ranges:
            return SearchResult(code_point, False, open=(0, LAST_UNICODE))
        # index of the last range starting at or before code_point
        idx = bisect.bisect_right(self.starts, code_point) - 1
        if idx < 0:
            first = self.ranges[0]
            return SearchResult(code_point, False, open=(0, first.start - 1), next=first)
        found = self.ranges[idx]
        if code_point <= found.end:
            return SearchResult(code_point, True, range=found)
        if idx + 1 < len(self.ranges):
            nxt = self.ranges[idx + 1]
            return SearchResult(code_point, False, open=(found.end + 1, nxt.start - 1), next=nxt)
        return SearchResult(code_point, False, open=(found.end + 1, LAST_UNICODE))

    def classify(self, code_point: int) -> Tuple[str, float]:
        result = self.search(code_point)
        if result.known:
            return result.range.name, result.range.weight
        return UNKNOWN, BEHAVIOR_WEIGHTS[UNKNOWN]


@lru_cache(maxsize=None)
def default_table() -> RangeTable:
    """The table for the built-in catalog, built once per process."""
    return RangeTable.from_catalog(CATALOG)


_IGNORED_STARTS = IGNORED[0::2]
_IGNORED_ENDS = IGNORED[1::2]


def is_ignored(code_point: int) -> bool:
    idx = bisect.bisect_right(_IGNORED_STARTS, code_point) - 1
    return idx >= 0 and code_point <= _IGNORED_ENDS[idx]
