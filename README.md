# seqalign

A pure-Python library for working with biological sequences. It has no
dependencies outside the standard library.

- **Composition** (`seqalign.composition`): GC content, per-base nucleotide
  counts, per-site counts across a multiple sequence alignment, plurality
  consensus, and median/min/max over byte frequency tables.
- **Scoring** (`seqalign.scoring`): alphabets (`ByteIndexMap`), weight
  matrices (`WeightMatrix`), and the errors raised for invalid profile
  arguments.
- **Scalar alignment** (`seqalign.scalar`): Smith-Waterman with affine gap
  penalties. It returns either the optimal score or a full alignment (1-based
  reference start, CIGAR string, score).
- **Striped alignment** (`seqalign.striped`): a Farrar-style striped
  Smith-Waterman score. It models a fixed-width integer type and reports
  overflow.
- **Profile sets** (`seqalign.profile_set`): lazily built striped profiles.
  When a score overflows, the set moves to a wider integer type and scores
  again.
- **CIGAR helpers** (`seqalign.state`): build CIGAR strings from alignment
  states, parse them, and expand two sequences into gapped, aligned form.

Sequences can be given as `bytes`, `bytearray` or ASCII `str`. A single base
can be given as an `int` byte value, a one-character `str`, or a one-byte
`bytes`.

## Installation

```
pip install .
```

To install the test dependencies as well, use `pip install .[test]`.

## Composition

```python
from seqalign.composition import gc_content, to_base_counts, per_site_counts, plurality_consensus

gc_content(b"ACGTGGC")                    # 5 (case-insensitive)

counts = to_base_counts(b"AACGGGTNNN")
counts.g, counts.n, counts.total_acgtn    # (3, 3, 10)
counts.plurality_acgtn()                  # ord("G")

sites = per_site_counts([b"ACGT", b"ACGA", b"TCGA"])
plurality_consensus(sites)                # b"ACGA"
```

`NucleotideCounts` keeps eight counts:

- A, C, G, T (U counts as T), N
- gaps (`-`)
- other valid IUPAC codes
- invalid bytes

The counts are exposed as the properties `a`, `c`, `g`, `t`, `n`, `gap`,
`other` and `invalid`. The totals are `total_at`, `total_gc`, `total_acgt`,
`total_acgtn`, `total_acgtn_gap`, `total_valid` and `total_any`.

Two count objects can be added together with `+`. A base can also be added
with `+`, which returns a new object, or with `add_base`, which changes the
object in place.

`plurality_acgtn` breaks ties in the order A > C > G > T > N. It returns
`ord("A")` when no A, C, G, T or N was counted.

`per_site_counts` returns `None` for an empty input. The first sequence fixes
the number of sites.

`FrequencyTable` gives the median, or the min/median/max, of byte values that
lie within an inclusive range. A range of quality scores is one use:

```python
from seqalign.composition import FrequencyTable

FrequencyTable(bytes([222, 240, 230, 233]), 222, 240).median()       # 231.5
FrequencyTable(bytes([24, 129]), 0, 255).min_med_max()               # (24, 76.5, 129)
```

The `*_unchecked` variants assume that every value already lies in range.

## Alignment

Follow these steps:

1. Choose an alphabet (`ByteIndexMap`).
2. Choose scores (`WeightMatrix`).
3. Build a query profile.
4. Score the profile against any number of references.

```python
from seqalign.scoring import WeightMatrix
from seqalign.scalar import ScalarProfile

weights = WeightMatrix.new_dna_matrix(4, -2, "N")
profile = ScalarProfile(b"CTCAGATTG", weights, -3, -1)

profile.smith_waterman_score(b"GGCCACAGGATTGAG")        # 27
profile.smith_waterman_alignment(b"GGCCACAGGATTGAG")    # (4, "5M1D4M", 27)
```

A gap of length `k` costs `gap_open + (k - 1) * gap_extend`.

`new_dna_matrix` uses `DNA_PROFILE_MAP`. That alphabet is `ACGTN`; it ignores
case, treats U as T, and maps any unknown byte to N. Any pairing with the
`ignore` symbol scores 0.

### Striped scoring

```python
from seqalign.striped import StripedProfile, IntType

profile = StripedProfile(b"CTCAGATTG", weights, -3, -1, IntType.I8, 32)
profile.smith_waterman_score(b"GGCCACAGGATTGAG")        # 27
```

The profile must match the kind of weight matrix:

- Signed types (`I8`, `I16`, `I32`, `I64`) need a signed weight matrix.
- Unsigned types (`U8`, `U16`, `U32`, `U64`) need a biased matrix, from
  `WeightMatrix.into_biased_matrix()` or `WeightMatrix.new_biased_dna_matrix()`.

The lane count must be one of 1, 2, 4, 8, 16, 32 or 64. `smith_waterman_score`
returns `None` when the score would overflow the chosen type.

### Profile sets

`LocalProfiles` and `SharedProfiles` build the `i8`, `i16`, `i32` and `i64`
profiles when they are first needed. `smith_waterman_score_from_i8`,
`smith_waterman_score_from_i16` and `smith_waterman_score_from_i32` start at
the named width and move to wider types while the score overflows.

`SharedProfiles` guards profile construction with a lock, so it can be shared
between threads. Both classes need a signed weight matrix.

```python
from seqalign.profile_set import LocalProfiles

profiles = LocalProfiles.new_with_i8(b"CGTTCGCCATAAAGGGGG", weights, -3, -1, 32)
profiles.smith_waterman_score_from_i8(b"ATGCATCGATCGATCGATCGATCGATCGATGC")   # 26
```

### Custom alphabets

```python
from seqalign.scoring import ByteIndexMap, WeightMatrix
from seqalign.striped import StripedProfile, IntType

mapping = ByteIndexMap(b"ABCD", "A")          # unknown bytes map to "A"
weights = WeightMatrix(mapping, 1, -1, None)
StripedProfile(b"AABDDAB", weights, -4, -2, IntType.I8, 32).smith_waterman_score(b"BDAACAABDDDB")  # 5
```

### Errors

Invalid profile arguments raise a subclass of `QueryProfileError`, which is
itself a `ValueError`:

- `EmptyQueryError` when the query is empty.
- `GapOpenOutOfRangeError` when the gap open penalty is outside -127..0.
- `GapExtendOutOfRangeError` when the gap extend penalty is outside -127..0.
- `BadGapWeightsError` when the gap extend penalty is less than the gap open
  penalty.

## CIGAR helpers

```python
from seqalign.state import pairwise_align_with_cigar, parse_cigar

pairwise_align_with_cigar("PLEASANTLY", "MEANLY", "4M", 2)   # ("LEAS", "MEAN")
parse_cigar("5M1D4M")                                        # [Ciglet(5, "M"), Ciglet(1, "D"), Ciglet(4, "M")]
```

`pairwise_align_with_cigar` handles these operations:

- `M`, `=` and `X` copy from both sequences.
- `D` puts gaps in the query; `I` puts gaps in the reference.
- `S` skips query bases.
- `N` puts `N` in the query.
- `H` and `P` are ignored.

Any other operation raises `ValueError`. So does a malformed CIGAR string.
The function returns `str` when the reference is a `str`, and `bytes`
otherwise.

`AlignmentStates` builds a CIGAR string one operation at a time. Its methods
are `add_state`, `soft_clip`, `reverse`, `invert` and `to_cigar`.

## What this package does not do

This is a library only:

- It has no command-line tool.
- It does not read or write FASTA or FASTQ files. Pass it sequences you have
  already loaded.
- Full alignments (start position and CIGAR) come from the scalar algorithm
  only. The striped algorithm and the profile sets give scores only.