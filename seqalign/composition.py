"""Sequence composition: GC content, frequency tables and per-base counts."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional, Union

BytesLike = Union[bytes, bytearray, memoryview, str]

# Valid IUPAC nucleotide codes, both cases, together with gap characters.
DNA_IUPAC_WITH_GAPS = b"ACGTURYSWKMBDHVNacgturyswkmbdhvn-."

_A, _C, _G, _T, _N, _GAP, _OTHER, _INVALID = range(8)


def _build_inner_index() -> tuple[int, ...]:
    table = [_INVALID] * 256
    for byte in DNA_IUPAC_WITH_GAPS:
        table[byte] = _OTHER
    for bases, slot in (
        (b"aA", _A),
        (b"cC", _C),
        (b"gG", _G),
        (b"tTuU", _T),
        (b"nN", _N),
        (b"-", _GAP),
    ):
        for byte in bases:
            table[byte] = slot
    return tuple(table)


_INNER_INDEX = _build_inner_index()


def _as_bytes(sequence: BytesLike) -> bytes:
    if isinstance(sequence, str):
        return sequence.encode("ascii")
    return bytes(sequence)


def _as_byte(base: Union[int, str, bytes]) -> int:
    if isinstance(base, int):
        if not 0 <= base <= 255:
            raise ValueError(f"base {base} is not a byte")
        return base
    raw = _as_bytes(base)
    if len(raw) != 1:
        raise ValueError(f"expected a single base, got {base!r}")
    return raw[0]


def gc_content(sequence: BytesLike) -> int:
    """Return the number of G and C bases, ignoring case."""
    return sum(1 for byte in _as_bytes(sequence) if byte in b"GCgc")


def _median_from_table(table: list[int], num_items: int, minimum: int) -> Optional[float]:
    if num_items == 0:
        return None

    threshold = -(-num_items // 2)
    total = 0
    for index in range(minimum, 256):
        total += table[index]
        if total >= threshold:
            break
    else:
        raise ValueError("frequency table holds values outside its range")

    if total > num_items // 2:
        return float(index)

    next_index = next((i for i in range(index + 1, 256) if table[i]), None)
    if next_index is None:
        raise ValueError("frequency table holds values outside its range")
    return (index + next_index) / 2.0


class FrequencyTable:
    """Byte data whose values of interest lie in ``minimum..=maximum``."""

    def __init__(self, data: BytesLike, minimum: int = 0, maximum: int = 255) -> None:
        if not 0 <= minimum <= maximum <= 255:
            raise ValueError(f"invalid range {minimum}..={maximum}")
        self.data = _as_bytes(data)
        self.minimum = minimum
        self.maximum = maximum

    def frequency_table(self) -> tuple[list[int], int]:
        """Return the 256-entry count table and the number of in-range items."""
        table = [0] * 256
        valid = 0
        for byte in self.data:
            table[byte] += 1
            if self.minimum <= byte <= self.maximum:
                valid += 1
        return table, valid

    def frequency_table_unchecked(self) -> tuple[list[int], int]:
        """Return the count table, treating every item as in range."""
        table = [0] * 256
        for byte in self.data:
            table[byte] += 1
        return table, len(self.data)

    def median(self) -> Optional[float]:
        """Median of the in-range values, or None if there are none."""
        if not self.data:
            return None
        table, num_items = self.frequency_table()
        return _median_from_table(table, num_items, self.minimum)

    def median_unchecked(self) -> Optional[float]:
        """Median of all values, assuming they lie in range."""
        if not self.data:
            return None
        if len(self.data) == 1:
            return float(self.data[0])
        table, num_items = self.frequency_table_unchecked()
        return _median_from_table(table, num_items, self.minimum)

    def _extremes(self, table: list[int]) -> tuple[Optional[int], Optional[int]]:
        span = range(self.minimum, self.maximum + 1)
        low = next((i for i in span if table[i]), None)
        high = next((i for i in reversed(span) if table[i]), None)
        return low, high

    def min_med_max(self) -> Optional[tuple[int, float, int]]:
        """Minimum, median and maximum of the in-range values."""
        if not self.data:
            return None
        table, num_items = self.frequency_table()
        low, high = self._extremes(table)
        median = _median_from_table(table, num_items, self.minimum)
        if low is None or high is None or median is None:
            return None
        return low, median, high

    def min_med_max_unchecked(self) -> Optional[tuple[int, float, int]]:
        """Minimum, median and maximum, assuming all values lie in range."""
        if not self.data:
            return None
        if len(self.data) == 1:
            value = self.data[0]
            return value, float(value), value
        table, num_items = self.frequency_table_unchecked()
        low, high = self._extremes(table)
        median = _median_from_table(table, num_items, self.minimum)
        if low is None or high is None or median is None:
            return None
        return low, median, high


@dataclass
class NucleotideCounts:
    """Counts of A, C, G, T/U, N, gaps, other IUPAC codes and invalid bytes."""

    counts: list[int] = field(default_factory=lambda: [0] * 8)

    def __post_init__(self) -> None:
        if len(self.counts) != 8:
            raise ValueError("NucleotideCounts needs exactly 8 counts")
        self.counts = list(self.counts)

    @classmethod
    def from_base(cls, base: Union[int, str, bytes]) -> NucleotideCounts:
        """Counts holding a single base."""
        result = cls()
        result.add_base(base)
        return result

    def add_base(self, base: Union[int, str, bytes]) -> None:
        """Count one more base in place."""
        self.counts[_INNER_INDEX[_as_byte(base)]] += 1

    def __add__(self, other: Union[NucleotideCounts, int, str, bytes]) -> NucleotideCounts:
        if isinstance(other, NucleotideCounts):
            return NucleotideCounts([x + y for x, y in zip(self.counts, other.counts)])
        result = NucleotideCounts(list(self.counts))
        result.add_base(other)
        return result

    def __iadd__(self, other: Union[NucleotideCounts, int, str, bytes]) -> NucleotideCounts:
        if isinstance(other, NucleotideCounts):
            self.counts = [x + y for x, y in zip(self.counts, other.counts)]
        else:
            self.add_base(other)
        return self

    @property
    def a(self) -> int:
        return self.counts[_A]

    @property
    def c(self) -> int:
        return self.counts[_C]

    @property
    def g(self) -> int:
        return self.counts[_G]

    @property
    def t(self) -> int:
        """Count of T and U."""
        return self.counts[_T]

    @property
    def n(self) -> int:
        return self.counts[_N]

    @property
    def gap(self) -> int:
        return self.counts[_GAP]

    @property
    def other(self) -> int:
        """Count of other valid IUPAC codes."""
        return self.counts[_OTHER]

    @property
    def invalid(self) -> int:
        return self.counts[_INVALID]

    @property
    def total_at(self) -> int:
        return self.a + self.t

    @property
    def total_gc(self) -> int:
        return self.g + self.c

    @property
    def total_acgt(self) -> int:
        return sum(self.counts[:4])

    @property
    def total_acgtn(self) -> int:
        return sum(self.counts[:5])

    @property
    def total_acgtn_gap(self) -> int:
        return sum(self.counts[:6])

    @property
    def total_valid(self) -> int:
        return sum(self.counts[:7])

    @property
    def total_any(self) -> int:
        return sum(self.counts)

    def plurality_acgtn(self) -> int:
        """Most frequent of A, C, G, T, N as a byte; ties favour that order."""
        best = max(range(5), key=lambda i: (self.counts[i], -i))
        return b"ACGTN"[best]


def to_base_counts(sequence: BytesLike) -> NucleotideCounts:
    """Count the bases of a sequence."""
    counts = NucleotideCounts()
    for byte in _as_bytes(sequence):
        counts.add_base(byte)
    return counts


def per_site_counts(sequences: Iterable[BytesLike]) -> Optional[list[NucleotideCounts]]:
    """Per-column counts over aligned sequences; None if there are none.

    The number of sites is set by the first sequence.
    """
    iterator = iter(sequences)
    first = next(iterator, None)
    if first is None:
        return None
    counts = [NucleotideCounts.from_base(byte) for byte in _as_bytes(first)]
    for sequence in iterator:
        for site, byte in zip(counts, _as_bytes(sequence)):
            site.add_base(byte)
    return counts


def plurality_consensus(counts: Iterable[NucleotideCounts]) -> bytes:
    """Consensus built from the plurality base of each site."""
    return bytes(site.plurality_acgtn() for site in counts)