"""Striped (Farrar) Smith-Waterman scoring over fixed-width lane vectors."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from .scalar import validate_profile_args
from .scoring import ByteIndexMap, WeightMatrix

SequenceLike = Union[str, bytes, bytearray, memoryview]

_SUPPORTED_LANES = (1, 2, 4, 8, 16, 32, 64)

Vector = tuple[int, ...]


class IntType(Enum):
    """Integer width and signedness of the lanes used for scoring."""

    I8 = ("i8", 8, True)
    I16 = ("i16", 16, True)
    I32 = ("i32", 32, True)
    I64 = ("i64", 64, True)
    U8 = ("u8", 8, False)
    U16 = ("u16", 16, False)
    U32 = ("u32", 32, False)
    U64 = ("u64", 64, False)

    def __init__(self, label: str, bits: int, signed: bool) -> None:
        self.label = label
        self.bits = bits
        self.signed = signed

    @property
    def min(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


def _as_bytes(sequence: SequenceLike) -> bytes:
    if isinstance(sequence, str):
        return sequence.encode("ascii")
    return bytes(sequence)


class StripedProfile:
    """Query scores laid out in a striped pattern of lane vectors.

    Signed integer types need a signed weight matrix; unsigned types need a
    biased one (see :meth:`WeightMatrix.into_biased_matrix`).
    """

    def __init__(
        self,
        query: SequenceLike,
        matrix: WeightMatrix,
        gap_open: int,
        gap_extend: int,
        int_type: IntType = IntType.I8,
        lanes: int = 32,
    ) -> None:
        validate_profile_args(query, gap_open, gap_extend)
        if lanes not in _SUPPORTED_LANES:
            raise ValueError(f"unsupported lane count {lanes}; use one of {_SUPPORTED_LANES}")
        if int_type.signed != matrix.signed:
            kind = "signed" if int_type.signed else "biased"
            raise ValueError(f"{int_type.label} profiles need a {kind} weight matrix")

        seq = _as_bytes(query)
        number_vectors = -(-len(seq) // lanes)
        mapping = matrix.mapping
        bias = matrix.bias
        query_idx = [mapping.to_index(b) for b in seq]

        profile: list[Vector] = []
        for ref_row in matrix.weights:
            for v in range(number_vectors):
                positions = range(v, lanes * number_vectors, number_vectors)
                profile.append(
                    tuple(
                        ref_row[query_idx[q]] if q < len(query_idx) else bias
                        for q in positions
                    )
                )

        self.profile: tuple[Vector, ...] = tuple(profile)
        self.gap_open = -gap_open
        self.gap_extend = -gap_extend
        self.bias = bias
        self.mapping: ByteIndexMap = mapping
        self.int_type = int_type
        self.lanes = lanes
        self._alphabet_size = len(matrix.weights)

    def number_vectors(self) -> int:
        """Number of lane vectors per alphabet symbol."""
        return len(self.profile) // self._alphabet_size

    def smith_waterman_score(self, reference: SequenceLike) -> Optional[int]:
        """Optimal local alignment score, or None if the lanes overflowed."""
        return sw_simd_score(reference, self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StripedProfile):
            return NotImplemented
        return (
            self.profile == other.profile
            and self.gap_open == other.gap_open
            and self.gap_extend == other.gap_extend
            and self.bias == other.bias
            and self.mapping == other.mapping
            and self.int_type == other.int_type
            and self.lanes == other.lanes
        )

    def __hash__(self) -> int:
        return hash(
            (self.profile, self.gap_open, self.gap_extend, self.bias, self.mapping,
             self.int_type, self.lanes)
        )

    def __repr__(self) -> str:
        return (
            f"StripedProfile({self.int_type.label}, lanes={self.lanes}, "
            f"vectors={self.number_vectors()}, gap_open={-self.gap_open}, "
            f"gap_extend={-self.gap_extend})"
        )


def sw_simd_score(reference: SequenceLike, profile: StripedProfile) -> Optional[int]:
    """Striped Smith-Waterman optimal score; None if the integer type saturated.

    Gaps cost ``gap_open + (k - 1) * gap_extend`` for length ``k``.
    """
    ref = _as_bytes(reference)
    int_type = profile.int_type
    lo, hi = int_type.min, int_type.max
    num_vecs = profile.number_vectors()
    lanes = profile.lanes
    gap_open, gap_extend, bias = profile.gap_open, profile.gap_extend, profile.bias
    signed = int_type.signed

    def sat_add(a: Vector, b: Vector) -> Vector:
        return tuple(min(hi, max(lo, x + y)) for x, y in zip(a, b))

    def sat_sub_scalar(a: Vector, s: int) -> Vector:
        return tuple(min(hi, max(lo, x - s)) for x in a)

    def vmax(a: Vector, b: Vector) -> Vector:
        return tuple(max(x, y) for x, y in zip(a, b))

    def shift_right(a: Vector) -> Vector:
        return (lo,) + a[:-1]

    minimums: Vector = (lo,) * lanes
    load: list[Vector] = [minimums] * num_vecs
    store: list[Vector] = [minimums] * num_vecs
    e_scores: list[Vector] = [minimums] * num_vecs
    max_scores = minimums

    for ref_byte in ref:
        ref_index = profile.mapping.to_index(ref_byte)
        f = minimums
        h = shift_right(store[num_vecs - 1])
        load, store = store, load
        scores = profile.profile[ref_index * num_vecs : (ref_index + 1) * num_vecs]

        for j, score_vec in enumerate(scores):
            e = e_scores[j]
            h = sat_add(h, score_vec)
            if not signed:
                h = sat_sub_scalar(h, bias)

            max_scores = vmax(max_scores, h)

            h = vmax(vmax(h, e), f)
            store[j] = h

            h = sat_sub_scalar(h, gap_open)
            e = vmax(sat_sub_scalar(e, gap_extend), h)
            f = vmax(sat_sub_scalar(f, gap_extend), h)

            e_scores[j] = e
            h = load[j]

        j = 0
        h = store[0]
        f = shift_right(f)
        while any(x > y for x, y in zip(f, sat_sub_scalar(h, gap_open))):
            h = vmax(h, f)
            store[j] = h
            f = sat_sub_scalar(f, gap_extend)
            j += 1
            if j >= num_vecs:
                j = 0
                f = shift_right(f)
            h = store[j]

    best = max(max_scores)
    if signed:
        return best - lo if best < hi else None
    return best if best + bias + 1 <= hi else None