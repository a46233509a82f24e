import re

import pytest

from protein_core.normalization import SequenceNormalizer, normalize_sequence
from protein_core.schemas import CacheOptions

SAMPLES = [
    "ACDEFGL",
    "LLIIKK",
    "mkLlA*-12 xY",
    "peptide.L.l",
    "",
    "***",
]

OPTION_GRID = [
    {"strip_symbols": strip, "fold_lowercase": lower, "fold_uppercase": upper, "unify_il": il}
    for strip in (True, False)
    for lower in (True, False)
    for upper in (True, False)
    for il in (True, False)
]


def test_strip_symbols_removes_non_letters() -> None:
    assert normalize_sequence("AC-D*E 1f\tG", strip_symbols=True) == "ACDEfG"


def test_no_strip_keeps_symbols() -> None:
    assert normalize_sequence("AC-D*", strip_symbols=False) == "AC-D*"


def test_lowercase_with_il() -> None:
    assert normalize_sequence("LlIiK", fold_lowercase=True, unify_il=True) == "iiiik"


def test_uppercase_with_il() -> None:
    assert normalize_sequence("LlIiK", fold_uppercase=True, unify_il=True) == "IIIIK"


def test_lowercase_takes_precedence_over_uppercase() -> None:
    assert normalize_sequence("AbC", fold_lowercase=True, fold_uppercase=True) == "abc"


def test_il_only_preserves_case() -> None:
    assert normalize_sequence("LlAa", unify_il=True) == "IiAa"


def test_no_transform_leaves_case() -> None:
    assert normalize_sequence("LlAa", strip_symbols=False) == "LlAa"


@pytest.mark.parametrize("options", OPTION_GRID)
def test_normalization_is_idempotent(options: dict[str, bool]) -> None:
    for sample in SAMPLES:
        once = normalize_sequence(sample, **options)
        assert normalize_sequence(once, **options) == once


@pytest.mark.parametrize("options", [o for o in OPTION_GRID if o["unify_il"]])
def test_unify_il_leaves_no_l(options: dict[str, bool]) -> None:
    for sample in SAMPLES:
        assert "L" not in normalize_sequence(sample, **options)
        assert "l" not in normalize_sequence(sample, **options)


@pytest.mark.parametrize("options", [o for o in OPTION_GRID if o["strip_symbols"]])
def test_strip_symbols_leaves_only_letters(options: dict[str, bool]) -> None:
    for sample in SAMPLES:
        assert re.fullmatch(r"[A-Za-z]*", normalize_sequence(sample, **options))


def test_normalizer_from_options() -> None:
    normalizer = SequenceNormalizer.from_options(
        CacheOptions(strip_symbols=True, fold_uppercase=True, unify_il=True)
    )

    assert normalizer("mkl-v*") == "MKIV"
