import string

from loguru import logger

from passforge.entities import CharacterClass, GenerationOptions, InvalidOptions
from passforge.random_source import RandomSource, SystemRandomSource, choice, shuffle


UPPERCASE = CharacterClass(
    name="uppercase",
    alphabet=string.ascii_uppercase,
    unambiguous_alphabet="ABCDEFGHJKLMNPQRSTUVWXYZ",
)
LOWERCASE = CharacterClass(
    name="lowercase",
    alphabet=string.ascii_lowercase,
    unambiguous_alphabet="abcdefghijkmnopqrstuvwxyz",
)
DIGITS = CharacterClass(
    name="digits",
    alphabet=string.digits,
    unambiguous_alphabet="23456789",
)
SYMBOLS = CharacterClass(
    name="symbols",
    alphabet="!@#$%^&*()_+-=[]{}|;:,.<>?",
    unambiguous_alphabet="!@#$%^&*()_+-=[]{}|;:,.<>?",
)


def enabled_classes(options: GenerationOptions) -> list[CharacterClass]:
    flags = (
        (options.include_uppercase, UPPERCASE),
        (options.include_lowercase, LOWERCASE),
        (options.include_digits, DIGITS),
        (options.include_symbols, SYMBOLS),
    )
    return [cls for enabled, cls in flags if enabled]


def build_pool(options: GenerationOptions) -> str:
    """Concatenate the alphabets of every enabled class, in a fixed order."""
    return "".join(
        cls.alphabet_for(options.exclude_ambiguous) for cls in enabled_classes(options)
    )


def validate_options(options: GenerationOptions) -> list[CharacterClass]:
    classes = enabled_classes(options)
    if not classes:
        raise InvalidOptions("At least one character type must be selected")
    if options.length < len(classes):
        raise InvalidOptions(
            f"Length {options.length} is too short to include all "
            f"{len(classes)} selected character types"
        )
    return classes


def _pick_distinct(source: RandomSource, candidates: list[int], count: int) -> list[int]:
    # Partial Fisher-Yates: `count` candidates, no repeats
    picked = list(candidates)
    for i in range(count):
        j = i + source.next_in_bound(len(picked) - i)
        picked[i], picked[j] = picked[j], picked[i]
    return picked[:count]


def _cover_missing_classes(
    source: RandomSource, chars: list[str], alphabets: list[str]
) -> None:
    present = [a for a in alphabets if any(ch in a for ch in chars)]
    missing = [a for a in alphabets if a not in present]
    if not missing:
        return

    # Keep one holder of every present class so an overwrite cannot evict it
    reserved: set[int] = set()
    for alphabet in present:
        holders = [i for i, ch in enumerate(chars) if ch in alphabet]
        reserved.add(holders[source.next_in_bound(len(holders))])

    free = [i for i in range(len(chars)) if i not in reserved]
    for position, alphabet in zip(_pick_distinct(source, free, len(missing)), missing):
        chars[position] = choice(source, alphabet)


def generate(
    options: GenerationOptions, random_source: RandomSource | None = None
) -> str:
    """Generate a credential containing at least one character of every enabled class.

    Characters are drawn uniformly from the pool. Each enabled class missing
    from the draw takes over its own distinct position, drawn from that
    class's alphabet, then the whole sequence is shuffled.
    """
    classes = validate_options(options)
    source = random_source or SystemRandomSource()
    pool = build_pool(options)

    logger.debug(
        f"Generating credential: length={options.length}, pool_size={len(pool)}, "
        f"classes={[cls.name for cls in classes]}"
    )

    chars = [choice(source, pool) for _ in range(options.length)]
    _cover_missing_classes(
        source, chars, [cls.alphabet_for(options.exclude_ambiguous) for cls in classes]
    )
    shuffle(source, chars)
    return "".join(chars)
