import random

import pytest

from seqalign.scalar import (
    ScalarProfile,
    sw_scalar_alignment,
    sw_scalar_score,
    validate_profile_args,
)
from seqalign.scoring import (
    BadGapWeightsError,
    EmptyQueryError,
    GapExtendOutOfRangeError,
    GapOpenOutOfRangeError,
    QueryProfileError,
    WeightMatrix,
)
from seqalign.state import pairwise_align_with_cigar

WEIGHTS = WeightMatrix.new_dna_matrix(2, -5, "N")
GAP_OPEN = -10
GAP_EXTEND = -1

DOC_REFERENCE = b"GGCCACAGGATTGAG"
DOC_QUERY = b"CTCAGATTG"
DOC_WEIGHTS = WeightMatrix.new_dna_matrix(4, -2, "N")


def doc_profile():
    return ScalarProfile(DOC_QUERY, DOC_WEIGHTS, -3, -1)


def test_doc_score():
    assert sw_scalar_score(DOC_REFERENCE, doc_profile()) == 27
    assert doc_profile().smith_waterman_score(DOC_REFERENCE) == 27


def test_doc_alignment():
    assert sw_scalar_alignment(DOC_REFERENCE, doc_profile()) == (4, "5M1D4M", 27)
    assert doc_profile().smith_waterman_alignment(DOC_REFERENCE) == (4, "5M1D4M", 27)


def test_doc_alignment_layout():
    start, cigar, _ = sw_scalar_alignment(DOC_REFERENCE, doc_profile())
    ref_aln, query_aln = pairwise_align_with_cigar(DOC_REFERENCE, DOC_QUERY, cigar, start)
    assert ref_aln == b"CACAGGATTG"
    assert query_aln == b"CTCAG-ATTG"


def test_poly_a():
    v = b"A" * 100
    profile = ScalarProfile(v, WEIGHTS, GAP_OPEN, GAP_EXTEND)
    assert sw_scalar_score(v, profile) == 200
    assert sw_scalar_alignment(v, profile) == (1, "100M", 200)


def test_t_u_check():
    profile = ScalarProfile(b"ACGTUNacgtun", WEIGHTS, GAP_OPEN, GAP_EXTEND)
    assert sw_scalar_score(b"ACGTTNACGTTN", profile) == 20


def test_str_inputs():
    profile = ScalarProfile("CTCAGATTG", DOC_WEIGHTS, -3, -1)
    assert profile.smith_waterman_score("GGCCACAGGATTGAG") == 27


def test_exact_match_inside_reference():
    profile = ScalarProfile(b"ACGT", WEIGHTS, GAP_OPEN, GAP_EXTEND)
    assert sw_scalar_alignment(b"TTACGTTT", profile) == (3, "4M", 8)


def test_five_prime_soft_clip():
    profile = ScalarProfile(b"GGACGT", WEIGHTS, GAP_OPEN, GAP_EXTEND)
    assert sw_scalar_alignment(b"ACGTTT", profile) == (1, "2S4M", 8)


def test_three_prime_soft_clip():
    profile = ScalarProfile(b"ACGTGG", WEIGHTS, GAP_OPEN, GAP_EXTEND)
    assert sw_scalar_alignment(b"ACGT", profile) == (1, "4M2S", 8)


def test_empty_reference():
    profile = ScalarProfile(b"ACGT", WEIGHTS, GAP_OPEN, GAP_EXTEND)
    assert sw_scalar_score(b"", profile) == 0
    assert sw_scalar_alignment(b"", profile) == (1, "4S", 0)


def test_score_matches_alignment_on_random_sequences():
    rng = random.Random(42)
    for _ in range(20):
        query = bytes(rng.choice(b"ACGTN") for _ in range(rng.randint(1, 30)))
        reference = bytes(rng.choice(b"ACGT") for _ in range(rng.randint(0, 40)))
        profile = ScalarProfile(query, DOC_WEIGHTS, -3, -1)
        _, _, score = sw_scalar_alignment(reference, profile)
        assert score == sw_scalar_score(reference, profile)
        assert score >= 0


def test_cigar_consumes_whole_query():
    rng = random.Random(7)
    for _ in range(20):
        query = bytes(rng.choice(b"ACGT") for _ in range(rng.randint(1, 25)))
        reference = bytes(rng.choice(b"ACGT") for _ in range(rng.randint(1, 35)))
        profile = ScalarProfile(query, DOC_WEIGHTS, -3, -1)
        start, cigar, _ = sw_scalar_alignment(reference, profile)
        ref_aln, query_aln = pairwise_align_with_cigar(reference, query, cigar, start)
        assert len(ref_aln) == len(query_aln)
        consumed = sum(
            int(n) for n, op in __import_free_split(cigar) if op in "MIS"
        )
        assert consumed == len(query)


def __import_free_split(cigar):
    number = ""
    for ch in cigar:
        if ch.isdigit():
            number += ch
        else:
            yield number, ch
            number = ""


def test_validate_accepts_good_args():
    assert validate_profile_args(b"A", -127, 0) is None
    assert ScalarProfile(b"A", WEIGHTS, 0, 0).gap_open == 0


@pytest.mark.parametrize(
    ("query", "gap_open", "gap_extend", "error"),
    [
        (b"", -3, -1, EmptyQueryError),
        (b"ACGT", -128, -1, GapOpenOutOfRangeError),
        (b"ACGT", 1, -1, GapOpenOutOfRangeError),
        (b"ACGT", -3, -128, GapExtendOutOfRangeError),
        (b"ACGT", -3, 2, GapExtendOutOfRangeError),
        (b"ACGT", -3, -4, BadGapWeightsError),
    ],
)
def test_invalid_profile_args(query, gap_open, gap_extend, error):
    with pytest.raises(error):
        ScalarProfile(query, WEIGHTS, gap_open, gap_extend)
    with pytest.raises(QueryProfileError):
        validate_profile_args(query, gap_open, gap_extend)


def test_biased_matrix_rejected():
    with pytest.raises(ValueError):
        ScalarProfile(b"ACGT", WEIGHTS.into_biased_matrix(), GAP_OPEN, GAP_EXTEND)


def test_profile_equality():
    assert ScalarProfile("ACGT", WEIGHTS, -3, -1) == ScalarProfile(b"ACGT", WEIGHTS, -3, -1)
    assert hash(ScalarProfile("ACGT", WEIGHTS, -3, -1)) == hash(
        ScalarProfile(b"ACGT", WEIGHTS, -3, -1)
    )
    assert not ScalarProfile(b"ACGT", WEIGHTS, -3, -1) == ScalarProfile(b"ACGT", WEIGHTS, -4, -1)