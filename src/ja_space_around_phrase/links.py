"""
Outer-boundary checks for Link nodes.

Explicit markdown links (``[label](target)``) are exempt: the brackets already
separate them from the surrounding text. Auto-links (bare URLs and email
addresses picked up by the parser) need a space on both sides when the
neighbour is a full-width, non-symbol character.

Some markdown parsers extend an auto-link over the Japanese text that follows
it (``https://example.comを参照`` becomes one link). `extract_url_or_email`
recovers the real URL/email so the boundary can still be located.
"""

import re
from dataclasses import dataclass
from typing import Literal

from ja_space_around_phrase.characters import is_spacing_target
from ja_space_around_phrase.schemas import Anchor, Fix, Violation

LinkType = Literal["url", "email", "unknown"]

URL_EXTRACT_RE = re.compile(r"^([a-zA-Z][a-zA-Z+]*://[a-zA-Z0-9\-._~:/?#\[\]@!'()*+,;=%]+)")
EMAIL_EXTRACT_RE = re.compile(r"^([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")

LABELS: dict[str, str] = {"url": "URL", "email": "メールアドレス", "unknown": "URL"}


@dataclass(frozen=True)
class LinkExtraction:
    content: str
    trailing: str
    type: LinkType

    @property
    def label(self) -> str:
        return LABELS[self.type]


def is_auto_link(source: str) -> bool:
    """
    >>> is_auto_link("https://example.com"), is_auto_link("[リンク](https://example.com)")
    (True, False)
    """
    return not source.startswith("[")


def extract_url_or_email(text: str) -> LinkExtraction:
    """
    Split `text` into the leading URL or email address and whatever follows it.

    >>> extract_url_or_email("https://example.comを参照")
    LinkExtraction(content='https://example.com', trailing='を参照', type='url')
    >>> extract_url_or_email("foo@example.comです").type
    'email'
    >>> extract_url_or_email("example").trailing
    ''
    """
    if match := URL_EXTRACT_RE.match(text):
        content = match.group(1)
        return LinkExtraction(content=content, trailing=text[len(content) :], type="url")

    if match := EMAIL_EXTRACT_RE.match(text):
        content = match.group(1)
        return LinkExtraction(
            content=content, trailing=text[len(content) :], type="email"
        )

    return LinkExtraction(content=text, trailing="", type="unknown")


def leading_space_required(label: str, index: int) -> Violation:
    return Violation(
        message=f"全角文字と{label}の間にはスペースを入れる必要があります",
        index=index,
        anchor=Anchor.PARENT,
        fix=Fix(range=(index, index), text=" "),
    )


def trailing_space_required(label: str, index: int, anchor: Anchor) -> Violation:
    return Violation(
        message=f"{label}と全角文字の間にはスペースを入れる必要があります",
        index=index,
        anchor=anchor,
        fix=Fix(range=(index, index), text=" "),
    )


def check_link(
    source: str, link_start: int, link_end: int, parent_text: str
) -> list[Violation]:
    """
    Check both outer boundaries of a link.

    `link_start`/`link_end` are offsets of the link inside `parent_text`.
    Violations on the leading side, and on the trailing side when the parser
    stopped at the right place, are anchored to the parent. A violation
    caused by characters absorbed into the link is anchored to the link
    itself, at the end of the real URL/email.

    >>> [(v.index, v.anchor.value) for v in check_link("https://example.com", 3, 22, "詳細はhttps://example.comを参照")]
    [(3, 'parent'), (22, 'parent')]
    >>> [(v.index, v.anchor.value) for v in check_link("https://example.comを参照", 4, 26, "詳細は https://example.comを参照")]
    [(19, 'node')]
    """
    if not is_auto_link(source):
        return []

    violations: list[Violation] = []
    extraction = extract_url_or_email(source)

    if 0 < link_start <= len(parent_text):
        if is_spacing_target(parent_text[link_start - 1]):
            violations.append(leading_space_required(extraction.label, link_start))

    if extraction.trailing:
        if is_spacing_target(extraction.trailing[0]):
            violations.append(
                trailing_space_required(
                    extraction.label, len(extraction.content), Anchor.NODE
                )
            )
    elif 0 <= link_end < len(parent_text):
        if is_spacing_target(parent_text[link_end]):
            violations.append(
                trailing_space_required(extraction.label, link_end, Anchor.PARENT)
            )

    return violations
