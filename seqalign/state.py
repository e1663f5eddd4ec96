"""Alignment state tracking, CIGAR strings and gapped pairwise output."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Union

Sequence = Union[str, bytes, bytearray]

_CIGLET = re.compile(r"(\d+)(\D)")


@dataclass
class Ciglet:
    """One CIGAR element: a run length and an operation character."""

    inc: int
    op: str


class AlignmentStates:
    """Run-length encoded alignment operations, built one step at a time."""

    def __init__(self) -> None:
        self._ciglets: list[Ciglet] = []

    def __iter__(self) -> Iterator[Ciglet]:
        return iter(self._ciglets)

    def __len__(self) -> int:
        return len(self._ciglets)

    def add_state(self, op: str) -> None:
        """Append one operation, extending the last run if it matches."""
        if self._ciglets and self._ciglets[-1].op == op:
            self._ciglets[-1].inc += 1
        else:
            self._ciglets.append(Ciglet(1, op))

    def soft_clip(self, inc: int) -> None:
        """Append ``inc`` soft-clipped bases; nothing happens for zero."""
        if inc <= 0:
            return
        if self._ciglets and self._ciglets[-1].op == "S":
            self._ciglets[-1].inc += inc
        else:
            self._ciglets.append(Ciglet(inc, "S"))

    def to_cigar(self) -> str:
        """The CIGAR string of the recorded runs."""
        return "".join(f"{c.inc}{c.op}" for c in self._ciglets)

    def reverse(self) -> AlignmentStates:
        """Reverse the run order in place and return self."""
        self._ciglets.reverse()
        return self

    def invert(self) -> AlignmentStates:
        """Swap insertions and deletions in place and return self."""
        swap = {"I": "D", "D": "I"}
        for ciglet in self._ciglets:
            ciglet.op = swap.get(ciglet.op, ciglet.op)
        return self


def parse_cigar(cigar: Union[str, bytes]) -> list[Ciglet]:
    """Split a CIGAR string into its elements."""
    text = cigar.decode("ascii") if isinstance(cigar, (bytes, bytearray)) else cigar
    ciglets = []
    position = 0
    for match in _CIGLET.finditer(text):
        if match.start() != position:
            break
        ciglets.append(Ciglet(int(match.group(1)), match.group(2)))
        position = match.end()
    if position != len(text):
        raise ValueError(f"malformed CIGAR string {text!r}")
    return ciglets


def _take(source: bytes, start: int, count: int, what: str) -> bytes:
    if start + count > len(source):
        raise IndexError(f"CIGAR runs past the end of the {what}")
    return source[start : start + count]


def pairwise_align_with_cigar(
    reference: Sequence,
    query: Sequence,
    cigar: Union[str, bytes, Iterable[Ciglet]],
    ref_position: int,
) -> tuple[Sequence, Sequence]:
    """Gapped reference and query laid out by a CIGAR from a 1-based position.

    The results are ``str`` when the reference is a ``str``, else ``bytes``.
    """
    if ref_position < 1:
        raise ValueError("the reference position is 1-based and must be at least 1")
    as_text = isinstance(reference, str)
    ref = reference.encode("ascii") if isinstance(reference, str) else bytes(reference)
    qry = query.encode("ascii") if isinstance(query, str) else bytes(query)
    ciglets = parse_cigar(cigar) if isinstance(cigar, (str, bytes, bytearray)) else list(cigar)

    ref_index = ref_position - 1
    query_index = 0
    ref_aln = bytearray()
    query_aln = bytearray()

    for ciglet in ciglets:
        inc, op = ciglet.inc, ciglet.op
        if op in ("M", "=", "X"):
            ref_aln += _take(ref, ref_index, inc, "reference")
            query_aln += _take(qry, query_index, inc, "query")
            ref_index += inc
            query_index += inc
        elif op == "D":
            ref_aln += _take(ref, ref_index, inc, "reference")
            query_aln += b"-" * inc
            ref_index += inc
        elif op == "I":
            ref_aln += b"-" * inc
            query_aln += _take(qry, query_index, inc, "query")
            query_index += inc
        elif op == "S":
            query_index += inc
        elif op == "N":
            ref_aln += _take(ref, ref_index, inc, "reference")
            query_aln += b"N" * inc
            ref_index += inc
        elif op in ("H", "P"):
            continue
        else:
            raise ValueError(f"CIGAR op {op!r} not supported")

    if as_text:
        return ref_aln.decode("ascii"), query_aln.decode("ascii")
    return bytes(ref_aln), bytes(query_aln)