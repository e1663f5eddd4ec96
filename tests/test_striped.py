import random

import pytest

from seqalign.scalar import ScalarProfile
from seqalign.scoring import (
    DNA_PROFILE_MAP,
    BadGapWeightsError,
    ByteIndexMap,
    EmptyQueryError,
    GapExtendOutOfRangeError,
    GapOpenOutOfRangeError,
    WeightMatrix,
)
from seqalign.striped import IntType, StripedProfile, sw_simd_score

GAP_OPEN = -10
GAP_EXTEND = -1
WEIGHTS = WeightMatrix.new_dna_matrix(2, -5, "N")
BIASED_WEIGHTS = WEIGHTS.into_biased_matrix()


def test_dna_example_signed_i8():
    weights = WeightMatrix.new_dna_matrix(4, -2, "N")
    profile = StripedProfile(b"CTCAGATTG", weights, -3, -1, IntType.I8, 32)
    assert profile.smith_waterman_score(b"GGCCACAGGATTGAG") == 27


def test_custom_alphabet_example():
    mapping = ByteIndexMap(b"ABCD", b"A")
    weights = WeightMatrix(mapping, 1, -1, None)
    profile = StripedProfile(b"AABDDAB", weights, -4, -2, IntType.I8, 32)
    assert profile.smith_waterman_score(b"BDAACAABDDDB") == 5


def test_biased_u8_example():
    weights = WeightMatrix.new_biased_dna_matrix(4, -2, "N")
    profile = StripedProfile(b"CGTTCGCCATAAAGGGGG", weights, -3, -1, IntType.U8, 32)
    score = sw_simd_score(b"ATGCATCGATCGATCGATCGATCGATCGATGC", profile)
    assert score == 26


def test_t_u_check_unsigned_and_signed():
    profile = StripedProfile(b"ACGTUNacgtun", BIASED_WEIGHTS, GAP_OPEN, GAP_EXTEND, IntType.U16, 16)
    assert sw_simd_score(b"ACGTTNACGTTN", profile) == 20

    profile = StripedProfile(b"ACGTUNacgtun", WEIGHTS, GAP_OPEN, GAP_EXTEND, IntType.I16, 16)
    assert sw_simd_score(b"ACGTTNACGTTN", profile) == 20


def test_poly_a():
    v = b"A" * 100
    profile = StripedProfile(v, BIASED_WEIGHTS, GAP_OPEN, GAP_EXTEND, IntType.U16, 16)
    assert profile.smith_waterman_score(v) == 200


def test_regression_short():
    matrix = WeightMatrix(DNA_PROFILE_MAP, 10, -10, "N").into_biased_matrix()
    profile = StripedProfile(b"AGA", matrix, -5, -5, IntType.U16, 4)
    assert profile.smith_waterman_score(b"AA") == 15


def test_overflow_returns_none():
    matrix = WeightMatrix(DNA_PROFILE_MAP, 127, 0, "N").into_biased_matrix()
    profile = StripedProfile(b"AAAA", matrix, GAP_OPEN, GAP_EXTEND, IntType.U8, 8)
    assert profile.smith_waterman_score(b"AAAA") is None


def test_signed_overflow_returns_none_then_wider_fits():
    v = b"A" * 200
    small = StripedProfile(v, WEIGHTS, GAP_OPEN, GAP_EXTEND, IntType.I8, 16)
    assert small.smith_waterman_score(v) is None
    wide = StripedProfile(v, WEIGHTS, GAP_OPEN, GAP_EXTEND, IntType.I32, 16)
    assert wide.smith_waterman_score(v) == 400


@pytest.mark.parametrize("seed", range(8))
@pytest.mark.parametrize("int_type,lanes", [(IntType.I16, 4), (IntType.U16, 8), (IntType.I32, 2)])
def test_matches_scalar(seed, int_type, lanes):
    rng = random.Random(seed)
    query = bytes(rng.choice(b"ACGTN") for _ in range(rng.randint(1, 40)))
    reference = bytes(rng.choice(b"ACGT") for _ in range(rng.randint(0, 50)))
    matrix = WEIGHTS if int_type.signed else BIASED_WEIGHTS
    striped = StripedProfile(query, matrix, -3, -1, int_type, lanes)
    scalar = ScalarProfile(query, WEIGHTS, -3, -1)
    assert striped.smith_waterman_score(reference) == scalar.smith_waterman_score(reference)


def test_empty_reference_scores_zero():
    profile = StripedProfile(b"ACGT", WEIGHTS, GAP_OPEN, GAP_EXTEND, IntType.I16, 4)
    assert profile.smith_waterman_score(b"") == 0


@pytest.mark.parametrize("length,lanes,expected", [(18, 32, 1), (33, 16, 3), (16, 16, 1), (5, 1, 5)])
def test_number_vectors(length, lanes, expected):
    profile = StripedProfile(b"A" * length, WEIGHTS, GAP_OPEN, GAP_EXTEND, IntType.I8, lanes)
    assert profile.number_vectors() == expected
    assert len(profile.profile) == expected * 5


def test_striped_layout():
    weights = WeightMatrix.new_dna_matrix(4, -2, "N")
    profile = StripedProfile(b"ACG", weights, -3, -1, IntType.I8, 2)
    # two vectors: lanes of vector 0 hold query positions 0 and 2, vector 1 holds 1 and padding
    assert profile.profile[0] == (4, -2)
    assert profile.profile[1] == (-2, 0)
    assert profile.gap_open == 3
    assert profile.gap_extend == 1


def test_biased_padding_uses_bias():
    profile = StripedProfile(b"ACG", BIASED_WEIGHTS, -3, -1, IntType.U8, 2)
    assert profile.bias == 5
    assert profile.profile[1][1] == 5


def test_equality_and_hash():
    a = StripedProfile(b"ACGT", WEIGHTS, -3, -1, IntType.I16, 8)
    b = StripedProfile(b"ACGT", WEIGHTS, -3, -1, IntType.I16, 8)
    c = StripedProfile(b"ACGT", WEIGHTS, -3, -1, IntType.I32, 8)
    assert a == b
    assert hash(a) == hash(b)
    assert a != c


@pytest.mark.parametrize("length,expected", [(127, 254), (128, None)])
def test_signed_i8_range_boundary(length, expected):
    v = b"A" * length
    profile = StripedProfile(v, WEIGHTS, GAP_OPEN, GAP_EXTEND, IntType.I8, 16)
    assert profile.smith_waterman_score(v) == expected


def test_empty_query_rejected():
    with pytest.raises(EmptyQueryError):
        StripedProfile(b"", WEIGHTS, -3, -1)


def test_gap_open_out_of_range():
    with pytest.raises(GapOpenOutOfRangeError):
        StripedProfile(b"ACGT", WEIGHTS, 1, -1)


def test_gap_extend_out_of_range():
    with pytest.raises(GapExtendOutOfRangeError):
        StripedProfile(b"ACGT", WEIGHTS, -3, -128)


def test_bad_gap_weights():
    with pytest.raises(BadGapWeightsError):
        StripedProfile(b"ACGT", WEIGHTS, -1, -3)


def test_signedness_mismatch_rejected():
    with pytest.raises(ValueError, match="biased"):
        StripedProfile(b"ACGT", WEIGHTS, -3, -1, IntType.U8, 8)
    with pytest.raises(ValueError, match="signed"):
        StripedProfile(b"ACGT", BIASED_WEIGHTS, -3, -1, IntType.I8, 8)


def test_unsupported_lanes_rejected():
    with pytest.raises(ValueError, match="lane"):
        StripedProfile(b"ACGT", WEIGHTS, -3, -1, IntType.I8, 3)