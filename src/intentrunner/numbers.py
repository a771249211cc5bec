"""Turn spoken counts ("three", "twenty one", "5") into integers."""

import re

_UNITS = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
    "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18,
    "nineteen": 19,
}

_TENS = {
    "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
    "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
}

# Recognizers often hear these instead of the number
_ALIASES = {"a": 1, "an": 1, "to": 2, "too": 2, "for": 4, "won": 1}


def name_to_number(text) -> int | None:
    """Resolve a count to an int, or None if it isn't one.

    Accepts ints, digit strings, and English words up to ninety-nine,
    with or without a hyphen ("twenty-one", "twenty one").
    """
    if isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text
    if not isinstance(text, str):
        return None

    words = text.strip().lower()
    if not words:
        return None
    if words.isdigit():
        return int(words)
    if words in _ALIASES:
        return _ALIASES[words]

    parts = [p for p in re.split(r"[\s-]+", words) if p and p != "and"]
    if len(parts) == 1:
        word = parts[0]
        if word in _UNITS:
            return _UNITS[word]
        return _TENS.get(word)
    if len(parts) == 2 and parts[0] in _TENS and parts[1] in _UNITS:
        unit = _UNITS[parts[1]]
        if 0 < unit < 10:
            return _TENS[parts[0]] + unit
    return None
