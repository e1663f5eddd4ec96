"""Sequence composition statistics, Smith-Waterman local alignment and CIGAR helpers."""

__version__ = "0.1.0"