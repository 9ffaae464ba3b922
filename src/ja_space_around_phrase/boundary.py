"""
Boundary decisions for half-width sequences inside a text node.

For each sequence the neighbour just outside its raw span is inspected on
both sides. Only full-width, non-symbol neighbours matter:

- a phrase (internal space, URL, email) must be separated by a space;
- a single word must not be.

A sequence that directly follows a symbol is skipped on both sides.
"""

import logging
from typing import Literal, Optional

from ja_space_around_phrase.characters import is_spacing_target, is_symbol
from ja_space_around_phrase.schemas import Fix, Violation
from ja_space_around_phrase.sequences import Sequence, find_half_width_sequences

Position = Literal["before", "after"]

PREVIEW_LENGTH = 10

SPACE_REQUIRED_MESSAGE = (
    "全角文字とスペースを含む半角文字列の間にはスペースを入れる必要があります: "
)
SPACE_FORBIDDEN_MESSAGE = (
    "全角文字とスペースを含まない半角文字列の間にはスペースを入れないでください: "
)


def space_required(context: str, index: int) -> Violation:
    return Violation(
        message=f'{SPACE_REQUIRED_MESSAGE}"{context}"',
        index=index,
        fix=Fix(range=(index, index), text=" "),
    )


def space_forbidden(context: str, index: int, space: tuple[int, int]) -> Violation:
    return Violation(
        message=f'{SPACE_FORBIDDEN_MESSAGE}"{context}"',
        index=index,
        fix=Fix(range=space, text=""),
    )


def check_boundary(text: str, seq: Sequence, position: Position) -> Optional[Violation]:
    """
    Check one side of `seq` against the character next to its raw span.

    >>> text = "これはhello worldです"
    >>> seq = find_half_width_sequences(text)[0]
    >>> check_boundary(text, seq, "before").index
    3
    >>> check_boundary(text, seq, "after").message.endswith('"...ello worldで"')
    True
    """
    if position == "before":
        check_index = seq.raw_start - 1
        if check_index < 0:
            return None
        char_before = text[check_index]
        if not is_spacing_target(char_before):
            return None

        if seq.is_phrase and not seq.has_leading_space:
            preview = seq.text[:PREVIEW_LENGTH]
            return space_required(f"{char_before}{preview}...", seq.start)
        if not seq.is_phrase and seq.has_leading_space:
            return space_forbidden(
                f"{char_before} {seq.text}",
                seq.raw_start,
                (seq.raw_start, seq.start),
            )
        return None

    check_index = seq.raw_end
    if check_index >= len(text):
        return None
    char_after = text[check_index]
    if not is_spacing_target(char_after):
        return None

    if seq.is_phrase and not seq.has_trailing_space:
        preview = seq.text[-PREVIEW_LENGTH:]
        return space_required(f"...{preview}{char_after}", seq.end)
    if not seq.is_phrase and seq.has_trailing_space:
        return space_forbidden(
            f"{seq.text} {char_after}",
            seq.end,
            (seq.end, seq.raw_end),
        )
    return None


def check_text(text: str) -> list[Violation]:
    """
    Run both boundary checks for every half-width sequence in `text`.

    Offsets in the returned violations are relative to `text` and come out in
    increasing order.

    >>> [v.index for v in check_text("これはhello worldです")]
    [3, 14]
    >>> check_text("（hello world）と書く")
    []
    """
    violations: list[Violation] = []
    for seq in find_half_width_sequences(text):
        if seq.raw_start > 0 and is_symbol(text[seq.raw_start - 1]):
            logging.debug(f"Skipping {seq.text!r}: preceded by a symbol")
            continue
        for position in ("before", "after"):
            violation = check_boundary(text, seq, position)
            if violation is not None:
                violations.append(violation)
    return violations
