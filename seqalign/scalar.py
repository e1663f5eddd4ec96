"""Scalar Smith-Waterman local alignment with affine gap penalties."""

from __future__ import annotations

from typing import Union

from .scoring import (
    BadGapWeightsError,
    EmptyQueryError,
    GapExtendOutOfRangeError,
    GapOpenOutOfRangeError,
    WeightMatrix,
)
from .state import AlignmentStates

SequenceLike = Union[str, bytes, bytearray, memoryview]

_UP = 1
_UP_EXTENDING = 2
_LEFT = 4
_LEFT_EXTENDING = 8
_STOP = 16


def _as_bytes(sequence: SequenceLike) -> bytes:
    if isinstance(sequence, str):
        return sequence.encode("ascii")
    return bytes(sequence)


def validate_profile_args(query: SequenceLike, gap_open: int, gap_extend: int) -> None:
    """Check the arguments shared by all query profiles.

    Raises :class:`EmptyQueryError`, :class:`GapOpenOutOfRangeError`,
    :class:`GapExtendOutOfRangeError` or :class:`BadGapWeightsError`.
    """
    if len(query) == 0:
        raise EmptyQueryError()
    if not -127 <= gap_open <= 0:
        raise GapOpenOutOfRangeError(gap_open)
    if not -127 <= gap_extend <= 0:
        raise GapExtendOutOfRangeError(gap_extend)
    if gap_extend < gap_open:
        raise BadGapWeightsError(gap_open, gap_extend)


class ScalarProfile:
    """A query, signed weight matrix and gap penalties for scalar alignment."""

    def __init__(
        self, query: SequenceLike, matrix: WeightMatrix, gap_open: int, gap_extend: int
    ) -> None:
        validate_profile_args(query, gap_open, gap_extend)
        if not matrix.signed:
            raise ValueError("scalar alignment needs a signed (unbiased) weight matrix")
        self.query = _as_bytes(query)
        self.matrix = matrix
        self.gap_open = gap_open
        self.gap_extend = gap_extend

    def _query_indices(self) -> list[int]:
        return [self.matrix.mapping.to_index(b) for b in self.query]

    def smith_waterman_score(self, reference: SequenceLike) -> int:
        """Optimal local alignment score against ``reference``."""
        return sw_scalar_score(reference, self)

    def smith_waterman_alignment(self, reference: SequenceLike) -> tuple[int, str, int]:
        """1-based reference start, CIGAR and optimal score against ``reference``."""
        return sw_scalar_alignment(reference, self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScalarProfile):
            return NotImplemented
        return (
            self.query == other.query
            and self.matrix == other.matrix
            and self.gap_open == other.gap_open
            and self.gap_extend == other.gap_extend
        )

    def __hash__(self) -> int:
        return hash((self.query, self.matrix, self.gap_open, self.gap_extend))

    def __repr__(self) -> str:
        return (
            f"ScalarProfile(query={self.query!r}, gap_open={self.gap_open}, "
            f"gap_extend={self.gap_extend})"
        )


def sw_scalar_score(reference: SequenceLike, profile: ScalarProfile) -> int:
    """Smith-Waterman optimal local alignment score, using O(m) space.

    Gaps cost ``gap_open + (k - 1) * gap_extend`` for length ``k``.
    """
    ref = _as_bytes(reference)
    mapping = profile.matrix.mapping
    weights = profile.matrix.weights
    gap_open, gap_extend = profile.gap_open, profile.gap_extend
    query_idx = profile._query_indices()

    matching = [0] * len(query_idx)
    endgap_ups = [gap_open + c * gap_extend for c in range(len(query_idx))]
    best_score = 0

    for r, ref_base in enumerate(ref):
        row = weights[mapping.to_index(ref_base)]
        endgap_left = gap_open + r * gap_extend
        diag = 0
        for c, q in enumerate(query_idx):
            endgap_up = endgap_ups[c]
            score = max(diag + row[q], endgap_up, endgap_left, 0)

            diag = matching[c]
            matching[c] = score
            best_score = max(best_score, score)

            score += gap_open
            endgap_left = max(endgap_left + gap_extend, score)
            endgap_ups[c] = max(endgap_up + gap_extend, score)

    return best_score


def sw_scalar_alignment(reference: SequenceLike, profile: ScalarProfile) -> tuple[int, str, int]:
    """Smith-Waterman alignment: 1-based reference start, CIGAR and score.

    Uses O(mn) space for the traceback.
    """
    ref = _as_bytes(reference)
    mapping = profile.matrix.mapping
    weights = profile.matrix.weights
    gap_open, gap_extend = profile.gap_open, profile.gap_extend
    query_idx = profile._query_indices()
    qlen = len(query_idx)
    cols = qlen + 1

    matching = [0] * cols
    endgap_ups = [0] + [gap_open + (c - 1) * gap_extend for c in range(1, cols)]
    backtrack = bytearray((len(ref) + 1) * cols)
    backtrack[0] = _STOP

    best_row, best_col, best_score = 0, 0, 0

    for r, ref_base in enumerate(ref, start=1):
        row = weights[mapping.to_index(ref_base)]
        endgap_left = gap_open + (r - 1) * gap_extend
        diag = 0
        for c, q in enumerate(query_idx, start=1):
            cell = r * cols + c
            flags = 0
            endgap_up = endgap_ups[c]
            score = max(diag + row[q], endgap_up, endgap_left)

            if endgap_up == score:
                flags |= _UP
            if endgap_left == score:
                flags |= _LEFT
            if score < 1:
                score = 0
                flags = _STOP

            diag = matching[c]
            matching[c] = score
            if score >= best_score:
                best_row, best_col, best_score = r, c, score

            score += gap_open
            endgap_up += gap_extend
            endgap_left += gap_extend

            if score != gap_open:
                if endgap_up > score:
                    flags |= _UP_EXTENDING
                if endgap_left > score:
                    flags |= _LEFT_EXTENDING

            backtrack[cell] = flags
            endgap_left = max(endgap_left, score)
            endgap_ups[c] = max(endgap_up, score)

    states = AlignmentStates()
    r, c = best_row, best_col
    states.soft_clip(qlen - c)

    op = ""
    while r > 0 and c > 0:
        flags = backtrack[r * cols + c]
        if flags & _STOP:
            break
        if op == "D" and flags & _UP_EXTENDING:
            r -= 1
        elif op == "I" and flags & _LEFT_EXTENDING:
            c -= 1
        elif flags & _UP:
            op = "D"
            r -= 1
        elif flags & _LEFT:
            op = "I"
            c -= 1
        else:
            op = "M"
            r -= 1
            c -= 1
        states.add_state(op)

    states.soft_clip(c)
    cigar = states.reverse().to_cigar()
    return r + 1, cigar, best_score