import re
from dataclasses import dataclass

# A half-width run anchored on alphanumerics at both ends, which may contain
# spaces and URL/path characters in between, or a single alphanumeric.
# Surrounding whitespace is absorbed into the match so the caller can tell
# whether the run is separated from its neighbours.
SEQUENCE_RE = re.compile(
    r"\s*[a-zA-Z0-9][a-zA-Z0-9\s.:/?#&=_%+@-]*[a-zA-Z0-9]\s*|\s*[a-zA-Z0-9]\s*"
)

# Any scheme made of letters and "+" (http, https, ftp, file, git+https, ...)
URL_RE = re.compile(r"^[a-zA-Z][a-zA-Z+]*://")
EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
WHITESPACE_RE = re.compile(r"\s")


def is_url(s: str) -> bool:
    return URL_RE.match(s) is not None


def is_email(s: str) -> bool:
    return EMAIL_RE.match(s) is not None


@dataclass(frozen=True)
class Sequence:
    """
    A half-width run inside a text node.

    `start`/`end` delimit the trimmed `text`; `raw_start`/`raw_end` include
    the whitespace absorbed on either side.
    """

    text: str
    start: int
    end: int
    raw_start: int
    raw_end: int
    is_phrase: bool
    has_leading_space: bool
    has_trailing_space: bool


def find_half_width_sequences(text: str) -> list[Sequence]:
    """
    Scan `text` left to right and return every half-width sequence.

    A sequence is a phrase when it contains whitespace or is a URL or email
    address; otherwise it is a single word.

    >>> [(s.text, s.is_phrase) for s in find_half_width_sequences("これは hello world です")]
    [('hello world', True)]
    >>> s = find_half_width_sequences("これは testです")[0]
    >>> (s.raw_start, s.start, s.end, s.raw_end, s.has_leading_space)
    (3, 4, 8, 8, True)
    """
    sequences: list[Sequence] = []
    for match in SEQUENCE_RE.finditer(text):
        raw = match.group(0)
        trimmed = raw.strip()
        if not trimmed:
            continue

        leading = len(raw) - len(raw.lstrip())
        trailing = len(raw) - len(raw.rstrip())

        sequences.append(
            Sequence(
                text=trimmed,
                start=match.start() + leading,
                end=match.end() - trailing,
                raw_start=match.start(),
                raw_end=match.end(),
                is_phrase=bool(WHITESPACE_RE.search(trimmed))
                or is_url(trimmed)
                or is_email(trimmed),
                has_leading_space=leading > 0,
                has_trailing_space=trailing > 0,
            )
        )
    return sequences
