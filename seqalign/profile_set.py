"""Lazily built sets of striped profiles that widen the integer type on overflow."""

from __future__ import annotations

import threading
from contextlib import AbstractContextManager, nullcontext
from typing import Optional, Union

from .scalar import validate_profile_args
from .scoring import WeightMatrix
from .striped import IntType, StripedProfile

SequenceLike = Union[str, bytes, bytearray, memoryview]

_WIDTHS = (IntType.I8, IntType.I16, IntType.I32, IntType.I64)
_SUPPORTED_LANES = (1, 2, 4, 8, 16, 32, 64)


def _as_bytes(sequence: SequenceLike) -> bytes:
    if isinstance(sequence, str):
        return sequence.encode("ascii")
    return bytes(sequence)


class _ProfileSet:
    """Shared machinery of the lazily evaluated profile sets."""

    query: bytes
    matrix: WeightMatrix
    gap_open: int
    gap_extend: int
    lanes: int

    def _setup(
        self,
        query: SequenceLike,
        matrix: WeightMatrix,
        gap_open: int,
        gap_extend: int,
        lanes: int,
        lock: AbstractContextManager,
    ) -> None:
        validate_profile_args(query, gap_open, gap_extend)
        if not matrix.signed:
            raise ValueError("profile sets need a signed (unbiased) weight matrix")
        if lanes not in _SUPPORTED_LANES:
            raise ValueError(f"unsupported lane count {lanes}; use one of {_SUPPORTED_LANES}")
        self.query = _as_bytes(query)
        self.matrix = matrix
        self.gap_open = gap_open
        self.gap_extend = gap_extend
        self.lanes = lanes
        self._profiles: dict[IntType, StripedProfile] = {}
        self._lock = lock

    def _get(self, int_type: IntType) -> StripedProfile:
        profile = self._profiles.get(int_type)
        if profile is None:
            with self._lock:
                profile = self._profiles.get(int_type)
                if profile is None:
                    profile = StripedProfile(
                        self.query,
                        self.matrix,
                        self.gap_open,
                        self.gap_extend,
                        int_type,
                        self.lanes,
                    )
                    self._profiles[int_type] = profile
        return profile

    def _score_from(self, reference: SequenceLike, start: IntType) -> Optional[int]:
        ref = _as_bytes(reference)
        for int_type in _WIDTHS[_WIDTHS.index(start):]:
            score = self._get(int_type).smith_waterman_score(ref)
            if score is not None:
                return score
        return None

    def _key(self) -> tuple:
        return (self.query, self.matrix, self.gap_open, self.gap_extend)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(query={self.query!r}, gap_open={self.gap_open}, "
            f"gap_extend={self.gap_extend}, lanes={self.lanes})"
        )


class LocalProfiles(_ProfileSet):
    """Lazily built striped profiles for use within a single thread."""

    def __init__(
        self,
        query: SequenceLike,
        matrix: WeightMatrix,
        gap_open: int,
        gap_extend: int,
        lanes: int = 32,
    ) -> None:
        self._setup(query, matrix, gap_open, gap_extend, lanes, nullcontext())

    @classmethod
    def new_with_i8(
        cls,
        query: SequenceLike,
        matrix: WeightMatrix,
        gap_open: int,
        gap_extend: int,
        lanes: int = 32,
    ) -> "LocalProfiles":
        """Create the set and eagerly build the ``i8`` profile."""
        profiles = cls(query, matrix, gap_open, gap_extend, lanes)
        profiles.get_i8()
        return profiles

    @classmethod
    def new_with_i16(
        cls,
        query: SequenceLike,
        matrix: WeightMatrix,
        gap_open: int,
        gap_extend: int,
        lanes: int = 32,
    ) -> "LocalProfiles":
        """Create the set and eagerly build the ``i16`` profile."""
        profiles = cls(query, matrix, gap_open, gap_extend, lanes)
        profiles.get_i16()
        return profiles

    def get_i8(self) -> StripedProfile:
        """The ``i8`` profile, built on first use."""
        return self._get(IntType.I8)

    def get_i16(self) -> StripedProfile:
        """The ``i16`` profile, built on first use."""
        return self._get(IntType.I16)

    def get_i32(self) -> StripedProfile:
        """The ``i32`` profile, built on first use."""
        return self._get(IntType.I32)

    def get_i64(self) -> StripedProfile:
        """The ``i64`` profile, built on first use."""
        return self._get(IntType.I64)

    def smith_waterman_score_from_i8(self, reference: SequenceLike) -> Optional[int]:
        """Score starting at ``i8``, widening up to ``i64`` while it overflows."""
        return self._score_from(reference, IntType.I8)

    def smith_waterman_score_from_i16(self, reference: SequenceLike) -> Optional[int]:
        """Score starting at ``i16``, widening up to ``i64`` while it overflows."""
        return self._score_from(reference, IntType.I16)

    def smith_waterman_score_from_i32(self, reference: SequenceLike) -> Optional[int]:
        """Score starting at ``i32``, widening to ``i64`` if it overflows."""
        return self._score_from(reference, IntType.I32)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class SharedProfiles(_ProfileSet):
    """Lazily built striped profiles that may be shared between threads."""

    def __init__(
        self,
        query: SequenceLike,
        matrix: WeightMatrix,
        gap_open: int,
        gap_extend: int,
        lanes: int = 32,
    ) -> None:
        self._setup(query, matrix, gap_open, gap_extend, lanes, threading.Lock())

    @classmethod
    def new_with_i8(
        cls,
        query: SequenceLike,
        matrix: WeightMatrix,
        gap_open: int,
        gap_extend: int,
        lanes: int = 32,
    ) -> "SharedProfiles":
        """Create the set and eagerly build the ``i8`` profile."""
        profiles = cls(query, matrix, gap_open, gap_extend, lanes)
        profiles.get_i8()
        return profiles

    @classmethod
    def new_with_i16(
        cls,
        query: SequenceLike,
        matrix: WeightMatrix,
        gap_open: int,
        gap_extend: int,
        lanes: int = 32,
    ) -> "SharedProfiles":
        """Create the set and eagerly build the ``i16`` profile."""
        profiles = cls(query, matrix, gap_open, gap_extend, lanes)
        profiles.get_i16()
        return profiles

    def get_i8(self) -> StripedProfile:
        """The ``i8`` profile, built on first use."""
        return self._get(IntType.I8)

    def get_i16(self) -> StripedProfile:
        """The ``i16`` profile, built on first use."""
        return self._get(IntType.I16)

    def get_i32(self) -> StripedProfile:
        """The ``i32`` profile, built on first use."""
        return self._get(IntType.I32)

    def get_i64(self) -> StripedProfile:
        """The ``i64`` profile, built on first use."""
        return self._get(IntType.I64)

    def smith_waterman_score_from_i8(self, reference: SequenceLike) -> Optional[int]:
        """Score starting at ``i8``, widening up to ``i64`` while it overflows."""
        return self._score_from(reference, IntType.I8)

    def smith_waterman_score_from_i16(self, reference: SequenceLike) -> Optional[int]:
        """Score starting at ``i16``, widening up to ``i64`` while it overflows."""
        return self._score_from(reference, IntType.I16)

    def smith_waterman_score_from_i32(self, reference: SequenceLike) -> Optional[int]:
        """Score starting at ``i32``, widening to ``i64`` if it overflows."""
        return self._score_from(reference, IntType.I32)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())