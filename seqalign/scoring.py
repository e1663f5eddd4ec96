"""Alphabets and weight matrices used to score local alignments."""

from __future__ import annotations

from typing import Optional, Union

ByteLike = Union[int, str, bytes]

_I8_MIN, _I8_MAX = -128, 127
_U8_MAX = 255


class QueryProfileError(ValueError):
    """Raised when the arguments for a query profile are invalid."""


class EmptyQueryError(QueryProfileError):
    """The query sequence is empty."""

    def __init__(self) -> None:
        super().__init__("the query must not be empty")


class GapOpenOutOfRangeError(QueryProfileError):
    """The gap open penalty is outside -127..=0."""

    def __init__(self, gap_open: int) -> None:
        self.gap_open = gap_open
        super().__init__(f"gap open penalty {gap_open} must be between -127 and 0, inclusive")


class GapExtendOutOfRangeError(QueryProfileError):
    """The gap extend penalty is outside -127..=0."""

    def __init__(self, gap_extend: int) -> None:
        self.gap_extend = gap_extend
        super().__init__(f"gap extend penalty {gap_extend} must be between -127 and 0, inclusive")


class BadGapWeightsError(QueryProfileError):
    """The gap extend penalty is harsher than the gap open penalty."""

    def __init__(self, gap_open: int, gap_extend: int) -> None:
        self.gap_open = gap_open
        self.gap_extend = gap_extend
        super().__init__(
            f"gap extend penalty {gap_extend} must not be less than gap open penalty {gap_open}"
        )


def _as_byte(value: ByteLike) -> int:
    if isinstance(value, int):
        if not 0 <= value <= 255:
            raise ValueError(f"{value} is not a byte")
        return value
    raw = value.encode("ascii") if isinstance(value, str) else bytes(value)
    if len(raw) != 1:
        raise ValueError(f"expected a single byte, got {value!r}")
    return raw[0]


def _as_bytes(value: Union[str, bytes, bytearray, memoryview]) -> bytes:
    if isinstance(value, str):
        return value.encode("ascii")
    return bytes(value)


class ByteIndexMap:
    """Maps each byte to an index in an alphabet; unknown bytes map to a catch-all."""

    def __init__(self, alphabet: Union[str, bytes], catch_all: ByteLike) -> None:
        letters = _as_bytes(alphabet)
        if not letters:
            raise ValueError("the alphabet must not be empty")
        if len(set(letters)) != len(letters):
            raise ValueError(f"the alphabet {letters!r} repeats a symbol")
        catch_byte = _as_byte(catch_all)
        if catch_byte not in letters:
            raise ValueError(f"catch-all {chr(catch_byte)!r} is not in the alphabet")

        table = [letters.index(catch_byte)] * 256
        for index, byte in enumerate(letters):
            table[byte] = index
        self.alphabet = letters
        self.catch_all = catch_byte
        self._table = tuple(table)

    def _with_aliases(self, aliases: dict[int, int]) -> ByteIndexMap:
        """Copy of this map in which each key byte maps like its value byte."""
        table = list(self._table)
        for alias, target in aliases.items():
            table[alias] = self._table[target]
        result = object.__new__(ByteIndexMap)
        result.alphabet = self.alphabet
        result.catch_all = self.catch_all
        result._table = tuple(table)
        return result

    def to_index(self, byte: ByteLike) -> int:
        """Index of the byte in the alphabet, or of the catch-all."""
        return self._table[_as_byte(byte)]

    def __len__(self) -> int:
        return len(self.alphabet)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ByteIndexMap):
            return NotImplemented
        return self.alphabet == other.alphabet and self._table == other._table

    def __hash__(self) -> int:
        return hash((self.alphabet, self._table))

    def __repr__(self) -> str:
        return f"ByteIndexMap({self.alphabet!r}, catch_all={chr(self.catch_all)!r})"


def _dna_profile_map() -> ByteIndexMap:
    base = ByteIndexMap(b"ACGTN", b"N")
    aliases = {ord(lower): ord(upper) for lower, upper in zip("acgtn", "ACGTN")}
    aliases[ord("U")] = ord("T")
    aliases[ord("u")] = ord("T")
    return base._with_aliases(aliases)


DNA_PROFILE_MAP = _dna_profile_map()
"""Case-insensitive DNA alphabet ``ACGTN`` where U counts as T and N catches all."""


class WeightMatrix:
    """Square matrix of match and mismatch weights over an alphabet.

    A fresh matrix holds signed weights. :meth:`into_biased_matrix` shifts the
    weights by ``bias`` so that none is negative, for unsigned scoring.
    """

    def __init__(
        self,
        mapping: ByteIndexMap,
        match_score: int,
        mismatch_score: int,
        ignore: Optional[ByteLike] = None,
    ) -> None:
        for name, value in (("match", match_score), ("mismatch", mismatch_score)):
            if not _I8_MIN <= value <= _I8_MAX:
                raise ValueError(f"{name} score {value} does not fit a signed byte")

        ignore_index: Optional[int] = None
        if ignore is not None:
            ignore_byte = _as_byte(ignore)
            if ignore_byte not in mapping.alphabet:
                raise ValueError(f"ignored symbol {chr(ignore_byte)!r} is not in the alphabet")
            ignore_index = mapping.alphabet.index(ignore_byte)

        size = len(mapping)

        def weight(r: int, q: int) -> int:
            if ignore_index in (r, q):
                return 0
            return match_score if r == q else mismatch_score

        self.mapping = mapping
        self.weights = tuple(tuple(weight(r, q) for q in range(size)) for r in range(size))
        self.bias = 0
        self.signed = True

    @classmethod
    def new_dna_matrix(
        cls, match_score: int, mismatch_score: int, ignore: Optional[ByteLike] = None
    ) -> WeightMatrix:
        """Signed matrix over :data:`DNA_PROFILE_MAP`."""
        return cls(DNA_PROFILE_MAP, match_score, mismatch_score, ignore)

    @classmethod
    def new_biased_dna_matrix(
        cls, match_score: int, mismatch_score: int, ignore: Optional[ByteLike] = None
    ) -> WeightMatrix:
        """Biased (unsigned) matrix over :data:`DNA_PROFILE_MAP`."""
        return cls.new_dna_matrix(match_score, mismatch_score, ignore).into_biased_matrix()

    def into_biased_matrix(self) -> WeightMatrix:
        """Unsigned copy whose weights are shifted up by the bias."""
        if not self.signed:
            raise ValueError("the matrix is already biased")
        lowest = min(min(row) for row in self.weights)
        bias = max(0, -lowest)
        shifted = tuple(tuple(w + bias for w in row) for row in self.weights)
        if any(w > _U8_MAX for row in shifted for w in row):
            raise ValueError("biased weights do not fit an unsigned byte")
        result = object.__new__(WeightMatrix)
        result.mapping = self.mapping
        result.weights = shifted
        result.bias = bias
        result.signed = False
        return result

    def get_weight(self, reference_base: ByteLike, query_base: ByteLike) -> int:
        """Weight for aligning a reference base against a query base."""
        return self.weights[self.mapping.to_index(reference_base)][
            self.mapping.to_index(query_base)
        ]

    def __len__(self) -> int:
        return len(self.weights)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightMatrix):
            return NotImplemented
        return (
            self.mapping == other.mapping
            and self.weights == other.weights
            and self.bias == other.bias
            and self.signed == other.signed
        )

    def __hash__(self) -> int:
        return hash((self.mapping, self.weights, self.bias, self.signed))

    def __repr__(self) -> str:
        kind = "signed" if self.signed else f"biased by {self.bias}"
        return f"WeightMatrix({self.mapping!r}, {kind}, weights={self.weights!r})"