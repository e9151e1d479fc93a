from itertools import product

from pydantic import ValidationError
import pytest

from passforge.entities import GenerationOptions, InvalidOptions
from passforge.generator import (
    DIGITS,
    LOWERCASE,
    SYMBOLS,
    UPPERCASE,
    build_pool,
    enabled_classes,
    generate,
)


AMBIGUOUS = set("0O1lI")

FLAG_COMBINATIONS = [flags for flags in product([True, False], repeat=4) if any(flags)]


def make_options(flags, length=16, exclude_ambiguous=False) -> GenerationOptions:
    upper, lower, digits, symbols = flags
    return GenerationOptions(
        length=length,
        include_uppercase=upper,
        include_lowercase=lower,
        include_digits=digits,
        include_symbols=symbols,
        exclude_ambiguous=exclude_ambiguous,
    )


def test_default_options_generate_all_classes():
    password = generate(GenerationOptions())

    assert len(password) == 16
    assert any(ch in UPPERCASE.alphabet for ch in password)
    assert any(ch in LOWERCASE.alphabet for ch in password)
    assert any(ch in DIGITS.alphabet for ch in password)
    assert any(ch in SYMBOLS.alphabet for ch in password)


@pytest.mark.parametrize("exclude_ambiguous", [False, True])
@pytest.mark.parametrize("flags", FLAG_COMBINATIONS)
def test_generate_respects_length_pool_and_coverage(flags, exclude_ambiguous):
    options = make_options(flags, length=8, exclude_ambiguous=exclude_ambiguous)
    pool = set(build_pool(options))

    for _ in range(25):
        password = generate(options)
        assert len(password) == 8
        assert set(password) <= pool
        for cls in enabled_classes(options):
            alphabet = cls.alphabet_for(exclude_ambiguous)
            assert any(ch in alphabet for ch in password), cls.name


def test_minimum_length_still_covers_every_class():
    options = make_options((True, True, True, True), length=4)
    for _ in range(200):
        password = generate(options)
        assert len(set(password)) == 4
        assert len(password) == 4


def test_exclude_ambiguous_never_emits_confusable_characters():
    options = make_options(
        (True, True, True, True), length=128, exclude_ambiguous=True
    )
    for _ in range(20):
        assert not AMBIGUOUS & set(generate(options))


def test_repeated_calls_differ():
    options = GenerationOptions(length=16)
    passwords = {generate(options) for _ in range(20)}
    assert len(passwords) == 20


def test_no_class_enabled_is_rejected(scripted_source):
    source = scripted_source()
    with pytest.raises(InvalidOptions):
        generate(make_options((False, False, False, False)), random_source=source)
    assert source.bounds == []


def test_length_shorter_than_class_count_fails_validation():
    with pytest.raises(ValidationError, match="too short"):
        make_options((True, True, True, False), length=2)
    with pytest.raises(ValidationError):
        GenerationOptions(length=3)


def test_length_equal_to_class_count_is_valid():
    assert GenerationOptions(length=4).length == 4
    single = make_options((True, False, False, False), length=1)
    assert len(generate(single)) == 1


def test_unvalidated_short_options_are_rejected_before_drawing(scripted_source):
    source = scripted_source()
    options = GenerationOptions.model_construct(
        length=2,
        include_uppercase=True,
        include_lowercase=True,
        include_digits=True,
        include_symbols=False,
        exclude_ambiguous=False,
    )
    with pytest.raises(InvalidOptions):
        generate(options, random_source=source)
    assert source.bounds == []


@pytest.mark.parametrize("length", [0, -1, 129])
def test_length_out_of_range_fails_validation(length):
    with pytest.raises(ValidationError):
        GenerationOptions(length=length)


def test_pool_is_ordered_and_distinct():
    full = build_pool(GenerationOptions())
    assert full == (
        UPPERCASE.alphabet + LOWERCASE.alphabet + DIGITS.alphabet + SYMBOLS.alphabet
    )
    assert len(full) == 88
    assert len(set(full)) == len(full)

    trimmed = build_pool(GenerationOptions(exclude_ambiguous=True))
    assert len(trimmed) == 83
    assert not AMBIGUOUS & set(trimmed)


def test_pool_size_is_the_sampling_bound(scripted_source):
    source = scripted_source()
    generate(make_options((False, False, True, False), length=5), random_source=source)

    # five draws from the 10-digit pool, then the shuffle
    assert source.bounds[:5] == [10] * 5
    assert source.bounds[5:] == [5, 4, 3, 2]


def test_missing_classes_land_on_distinct_positions(scripted_source):
    # Every draw picks the first pool character, so only uppercase is present
    source = scripted_source()
    password = generate(make_options((True, True, True, True), length=4), source)

    assert sorted(password) == sorted("Aa0!")


def test_coverage_keeps_the_only_holder_of_a_present_class(scripted_source):
    # Draws: "A", "a", "a", "a"; uppercase has a single holder at position 0
    source = scripted_source([0, 26, 26, 26])
    password = generate(make_options((True, True, True, True), length=4), source)

    assert sorted(password) == sorted("Aa0!")
