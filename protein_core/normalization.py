"""Residue-level normalization applied to every cached protein sequence.

Peptide-to-protein matching downstream compares normalized strings byte for
byte, so the rule order here is fixed:

1. Optional removal of every character outside ``A-Z`` / ``a-z``.
2. Exactly one of: lowercase fold (then ``l`` -> ``i`` when I/L unification is
   on), uppercase fold (then ``L`` -> ``I``), I/L unification alone (both
   cases, case preserving), or nothing.
"""

from __future__ import annotations

import re

from .schemas import CacheOptions

_NON_LETTER = re.compile(r"[^A-Za-z]")


def normalize_sequence(
    sequence: str,
    *,
    strip_symbols: bool = True,
    fold_lowercase: bool = False,
    fold_uppercase: bool = False,
    unify_il: bool = False,
) -> str:
    if strip_symbols:
        sequence = _NON_LETTER.sub("", sequence)

    if fold_lowercase:
        sequence = sequence.lower()
        if unify_il:
            sequence = sequence.replace("l", "i")
    elif fold_uppercase:
        sequence = sequence.upper()
        if unify_il:
            sequence = sequence.replace("L", "I")
    elif unify_il:
        sequence = sequence.replace("L", "I").replace("l", "i")

    return sequence


class SequenceNormalizer:
    """Applies :func:`normalize_sequence` with options bound once per run."""

    strip_symbols: bool
    fold_lowercase: bool
    fold_uppercase: bool
    unify_il: bool

    def __init__(
        self,
        strip_symbols: bool = True,
        fold_lowercase: bool = False,
        fold_uppercase: bool = False,
        unify_il: bool = False,
    ) -> None:
        self.strip_symbols = strip_symbols
        self.fold_lowercase = fold_lowercase
        self.fold_uppercase = fold_uppercase
        self.unify_il = unify_il

    @classmethod
    def from_options(cls, options: CacheOptions) -> "SequenceNormalizer":
        return cls(
            strip_symbols=options.strip_symbols,
            fold_lowercase=options.fold_lowercase,
            fold_uppercase=options.fold_uppercase,
            unify_il=options.unify_il,
        )

    def __call__(self, sequence: str) -> str:
        return normalize_sequence(
            sequence,
            strip_symbols=self.strip_symbols,
            fold_lowercase=self.fold_lowercase,
            fold_uppercase=self.fold_uppercase,
            unify_il=self.unify_il,
        )
