"""
Character classes used at full-width/half-width boundaries.

Full-width and symbol are independent properties: ``、`` is both, and the
boundary rules only fire for characters that are full-width *and not* symbols.
"""

import re

# Inclusive code-point ranges treated as full-width.
FULL_WIDTH_RANGES: tuple[tuple[int, int], ...] = (
    (0x3000, 0x303F),  # CJK Symbols and Punctuation
    (0x3040, 0x309F),  # Hiragana
    (0x30A0, 0x30FF),  # Katakana
    (0x4E00, 0x9FFF),  # CJK Unified Ideographs
    (0xFF00, 0xFFEF),  # Halfwidth and Fullwidth Forms
)

SYMBOL_GROUPS: tuple[str, ...] = (
    r"[.,;:!?()\[\]{}<>'\"`\-=+*/\\|~@#$%^&_]",  # ASCII punctuation
    r"[¥$€£]",  # currency
    r"[（）「」『』【】〈〉《》〔〕［］｛｝〝〟≪≫]",  # brackets and quotes
    r"[、。！？：；・…‥〜～※]",  # Japanese punctuation
    r"[→←↑↓⇒⇐⇔]",  # arrows
    r"[●○◎◆◇■□▲△▼▽★☆]",  # geometric marks
    r"[×÷±]",  # math operators
    r"[°′″®™©§¶〒♪♫]",  # misc
)

SYMBOL_RE = re.compile("|".join(SYMBOL_GROUPS))


def is_full_width(char: str | None) -> bool:
    """
    True when the first character of `char` falls in a full-width range.

    >>> is_full_width("あ"), is_full_width("a"), is_full_width("")
    (True, False, False)
    """
    if not char:
        return False
    code = ord(char[0])
    return any(low <= code <= high for low, high in FULL_WIDTH_RANGES)


def is_symbol(char: str | None) -> bool:
    """
    True when the first character of `char` is punctuation or a symbol.

    >>> is_symbol("、"), is_symbol("（"), is_symbol("は")
    (True, True, False)
    """
    if not char:
        return False
    return SYMBOL_RE.match(char[0]) is not None


def is_spacing_target(char: str | None) -> bool:
    """Full-width and not a symbol: the only neighbour the spacing rules react to."""
    return is_full_width(char) and not is_symbol(char)
