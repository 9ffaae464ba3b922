"""
Markdown → TxtNode tree, built on markdown-it-py.

markdown-it only records line maps on block tokens, so absolute offsets are
recovered by locating each inline token's content on its source lines and
then walking the inline children left to right. Escapes and entities are
kept as separate ``text_special`` tokens (``text_join`` is disabled) so every
child token can be found verbatim in the raw source.
"""

import logging
import re
from bisect import bisect_right
from functools import lru_cache
from typing import Optional

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from ja_space_around_phrase.schemas import NodeType, TxtNode

BLOCK_TYPES: dict[str, NodeType] = {
    "paragraph": NodeType.Paragraph,
    "heading": NodeType.Header,
    "blockquote": NodeType.BlockQuote,
    "bullet_list": NodeType.List,
    "ordered_list": NodeType.List,
    "list_item": NodeType.ListItem,
    "table": NodeType.Table,
    "tr": NodeType.TableRow,
    "th": NodeType.TableCell,
    "td": NodeType.TableCell,
}

LEAF_BLOCK_TYPES: dict[str, NodeType] = {
    "fence": NodeType.CodeBlock,
    "code_block": NodeType.CodeBlock,
    "html_block": NodeType.Html,
    "hr": NodeType.HorizontalRule,
}

INLINE_CONTAINER_TYPES: dict[str, NodeType] = {
    "em": NodeType.Emphasis,
    "strong": NodeType.Strong,
    "s": NodeType.Delete,
}

# Tokens whose raw source is merged into a single Str node.
TEXT_TOKEN_TYPES = {"text", "text_special", "softbreak"}

_NEWLINE_RE = re.compile(r"\r\n?")
_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\n.*?\n(?:---|\.\.\.)[ \t]*(?:\n|\Z)", re.S)

# ASCII email literal, not preceded by another address character, so an
# address written directly after Japanese text is still found.
EMAIL_LITERAL_RE = re.compile(
    r"(?<![A-Za-z0-9._%+\-/@])"
    r"[A-Za-z0-9._%+\-]+@[A-Za-z0-9\-]+(?:\.[A-Za-z0-9\-]+)*\.[A-Za-z]{2,}"
    r"(?![A-Za-z0-9\-])"
)


def _split_email_literals(token: Token) -> list[Token]:
    text = token.content
    out: list[Token] = []
    last = 0
    for m in EMAIL_LITERAL_RE.finditer(text):
        if m.start() > last:
            out.append(Token("text", "", 0, content=text[last : m.start()], level=token.level))
        email = m.group(0)
        out.append(
            Token(
                "link_open",
                "a",
                1,
                attrs={"href": f"mailto:{email}"},
                markup="linkify",
                info="auto",
                level=token.level,
            )
        )
        out.append(Token("text", "", 0, content=email, level=token.level + 1))
        out.append(Token("link_close", "a", -1, markup="linkify", info="auto", level=token.level))
        last = m.end()
    if not out:
        return [token]
    if last < len(text):
        out.append(Token("text", "", 0, content=text[last:], level=token.level))
    return out


def linkify_emails(state: StateCore) -> None:
    """Core rule: turn email literals outside links into auto-links."""
    for block in state.tokens:
        if block.type != "inline" or not block.children:
            continue
        children: list[Token] = []
        link_level = 0
        for token in block.children:
            if token.type == "link_open":
                link_level += 1
            elif token.type == "link_close":
                link_level -= 1
            if token.type == "text" and link_level == 0 and "@" in token.content:
                children.extend(_split_email_literals(token))
            else:
                children.append(token)
        block.children = children


@lru_cache(maxsize=1)
def get_markdown_parser() -> MarkdownIt:
    """
    CommonMark with tables, strikethrough and GFM-like auto-links.

    Only ``scheme://`` URLs are linkified by linkify-it; bare domains such as
    ``README.md`` stay text. Email literals are handled by `linkify_emails`,
    which also matches addresses that touch Japanese text.
    """
    md = MarkdownIt("commonmark", {"linkify": True})
    md.enable(["linkify", "table", "strikethrough"])
    md.disable("text_join")
    md.linkify.set({"fuzzy_link": False, "fuzzy_email": False})
    md.core.ruler.after("linkify", "linkify_email", linkify_emails)
    return md


def normalize_newlines(text: str) -> str:
    """
    >>> normalize_newlines("a\\r\\nb\\rc")
    'a\\nb\\nc'
    """
    return _NEWLINE_RE.sub("\n", text)


def blank_front_matter(text: str) -> str:
    """
    Replace a leading YAML front matter block with spaces, keeping offsets and
    line numbers of the rest of the document intact.

    >>> blank_front_matter("---\\ntitle: x\\n---\\n本文")
    '   \\n        \\n   \\n本文'
    """
    m = _FRONT_MATTER_RE.match(text)
    if not m:
        return text
    blanked = re.sub(r"[^\n]", " ", m.group(0))
    return blanked + text[m.end() :]


def line_starts(text: str) -> list[int]:
    starts = [0]
    starts.extend(m.end() for m in re.finditer("\n", text))
    return starts


def _skip_balanced(src: str, pos: int, opening: str, closing: str) -> int:
    """Index just past the bracket closing the one at `src[pos]`, or len(src)."""
    depth = 0
    i = pos
    while i < len(src):
        ch = src[i]
        if ch == "\\":
            i += 2
            continue
        if ch == opening:
            depth += 1
        elif ch == closing:
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return len(src)


def link_source_end(src: str, pos: int) -> int:
    """
    End of an inline or reference link whose label opens at `src[pos]`.

    >>> link_source_end("[a](b)です", 0)
    6
    >>> link_source_end("[a][ref]", 0)
    8
    """
    end = _skip_balanced(src, pos, "[", "]")
    if end < len(src) and src[end] == "(":
        return _skip_balanced(src, end, "(", ")")
    if end < len(src) and src[end] == "[":
        return _skip_balanced(src, end, "[", "]")
    return end


class _InlineLocator:
    """Maps offsets in an inline token's content to absolute document offsets."""

    def __init__(self, content_starts: list[int], absolute_starts: list[int]):
        self.content_starts = content_starts
        self.absolute_starts = absolute_starts

    def __call__(self, offset: int) -> int:
        i = bisect_right(self.content_starts, offset) - 1
        return self.absolute_starts[i] + (offset - self.content_starts[i])


class MarkdownTreeBuilder:
    def __init__(self, text: str):
        self.text = text
        self.lines = text.split("\n")
        self.starts = line_starts(text)
        # Content is always located at or after the end of the previous match.
        self.floor = 0

    def line_end(self, lineno: int) -> int:
        return self.starts[lineno] + len(self.lines[lineno])

    def map_range(self, token: Token) -> Optional[tuple[int, int]]:
        if not token.map:
            return None
        first, last = token.map
        last = max(first, min(last, len(self.lines)) - 1)
        return self.starts[first], self.line_end(last)

    def locate(self, part: str, lineno: Optional[int]) -> int:
        if lineno is None or lineno >= len(self.lines):
            lo, hi = self.floor, len(self.text)
        else:
            lo, hi = max(self.floor, self.starts[lineno]), self.line_end(lineno)
        pos = self.text.find(part, lo, hi) if part else lo
        if pos < 0:
            logging.debug(f"Could not locate {part!r} on line {lineno}")
            pos = lo
        self.floor = pos + len(part)
        return pos

    def build(self, tokens: list[Token]) -> TxtNode:
        root = TxtNode(NodeType.Document, (0, len(self.text)))
        stack = [root]
        for token in tokens:
            parent = stack[-1]
            if token.nesting == 1:
                node_type = BLOCK_TYPES.get(token.type.removesuffix("_open"))
                if node_type is None:
                    # thead, tbody: transparent
                    stack.append(parent)
                    continue
                span = self.map_range(token) or (self.floor, self.floor)
                stack.append(parent.append(TxtNode(node_type, span)))
            elif token.nesting == -1:
                node = stack.pop()
                if not node.children:
                    continue
                if node.type not in (NodeType.Paragraph, NodeType.Header, NodeType.TableCell):
                    start = min(node.range[0], node.children[0].range[0])
                    end = max(node.range[1], node.children[-1].range[1])
                    node.range = (start, end)
            elif token.type == "inline":
                self.inline(token, parent)
            elif token.type in LEAF_BLOCK_TYPES:
                span = self.map_range(token) or (self.floor, self.floor)
                parent.append(TxtNode(LEAF_BLOCK_TYPES[token.type], span))
                self.floor = max(self.floor, span[1])
        return root

    def inline(self, token: Token, container: TxtNode) -> None:
        content = token.content
        first_line = token.map[0] if token.map else None

        content_starts: list[int] = []
        absolute_starts: list[int] = []
        offset = 0
        for i, part in enumerate(content.split("\n")):
            lineno = None if first_line is None else first_line + i
            content_starts.append(offset)
            absolute_starts.append(self.locate(part, lineno))
            offset += len(part) + 1
        absolute = _InlineLocator(content_starts, absolute_starts)

        # The container spans exactly its inline content.
        container.range = (absolute(0), absolute(len(content)))

        parents = [container]
        link_ends: list[int] = []
        cursor = 0
        pending: Optional[list[int]] = None
        children = token.children or []

        def flush() -> None:
            nonlocal pending
            if pending is not None:
                span = (absolute(pending[0]), absolute(pending[1]))
                parents[-1].append(TxtNode(NodeType.Str, span))
                pending = None

        def find(needle: str, kind: str) -> int:
            pos = content.find(needle, cursor) if needle else -1
            if pos < 0:
                logging.debug(f"Could not locate {kind} token {needle!r} in {content!r}")
            return pos

        for i, child in enumerate(children):
            kind = child.type
            if kind in TEXT_TOKEN_TYPES:
                needle = {
                    "text": child.content,
                    "text_special": child.markup,
                    "softbreak": "\n",
                }[kind]
                pos = find(needle, kind)
                if pos < 0:
                    continue
                pending = [pos if pending is None else pending[0], pos + len(needle)]
                cursor = pos + len(needle)
                continue

            flush()
            if kind == "link_open":
                start, end = self.link_span(child, children, i, content, cursor)
                node = parents[-1].append(
                    TxtNode(NodeType.Link, (absolute(start), absolute(end)))
                )
                parents.append(node)
                link_ends.append(end)
                # Explicit and angle-bracket links open with one delimiter char.
                cursor = start if child.markup == "linkify" else min(start + 1, end)
            elif kind == "link_close":
                if len(parents) > 1:
                    parents.pop()
                if link_ends:
                    cursor = link_ends.pop()
            elif kind == "image":
                start = find("![", kind)
                start = cursor if start < 0 else start
                end = link_source_end(content, start + 1)
                parents[-1].append(
                    TxtNode(NodeType.Image, (absolute(start), absolute(end)))
                )
                cursor = end
            elif kind == "code_inline":
                start = find(child.markup, kind)
                start = cursor if start < 0 else start
                closing = re.compile(rf"(?<!`){re.escape(child.markup)}(?!`)")
                m = closing.search(content, start + len(child.markup))
                end = m.end() if m else len(content)
                parents[-1].append(TxtNode(NodeType.Code, (absolute(start), absolute(end))))
                cursor = end
            elif kind.endswith("_open") and kind[: -len("_open")] in INLINE_CONTAINER_TYPES:
                start = find(child.markup, kind)
                start = cursor if start < 0 else start
                node_type = INLINE_CONTAINER_TYPES[kind[: -len("_open")]]
                node = parents[-1].append(
                    TxtNode(node_type, (absolute(start), absolute(start)))
                )
                parents.append(node)
                cursor = start + len(child.markup)
            elif kind.endswith("_close") and kind[: -len("_close")] in INLINE_CONTAINER_TYPES:
                pos = find(child.markup, kind)
                end = cursor if pos < 0 else pos + len(child.markup)
                if len(parents) > 1:
                    node = parents.pop()
                    node.range = (node.range[0], absolute(end))
                cursor = end
            elif kind == "hardbreak":
                pos = find("\n", kind)
                if pos >= 0:
                    parents[-1].append(
                        TxtNode(NodeType.Break, (absolute(pos), absolute(pos + 1)))
                    )
                    cursor = pos + 1
            elif kind == "html_inline":
                pos = find(child.content, kind)
                if pos >= 0:
                    end = pos + len(child.content)
                    parents[-1].append(TxtNode(NodeType.Html, (absolute(pos), absolute(end))))
                    cursor = end
            else:
                logging.debug(f"Ignoring inline token {kind}")
        flush()

    def link_span(
        self,
        token: Token,
        children: list[Token],
        index: int,
        content: str,
        cursor: int,
    ) -> tuple[int, int]:
        """[start, end) of a link's raw source within `content`."""
        if token.markup == "linkify":
            label = children[index + 1] if index + 1 < len(children) else None
            text = label.content if label is not None and label.type == "text" else ""
            start = content.find(text, cursor) if text else -1
            if start < 0:
                logging.debug(f"Could not locate auto-link text {text!r}")
                return cursor, cursor
            return start, start + len(text)

        if token.markup == "autolink":
            start = content.find("<", cursor)
            if start < 0:
                return cursor, cursor
            close = content.find(">", start)
            return start, (close + 1 if close >= 0 else len(content))

        start = content.find("[", cursor)
        if start < 0:
            logging.debug("Could not locate link label")
            return cursor, cursor
        return start, link_source_end(content, start)


def parse_markdown(text: str) -> TxtNode:
    """
    Parse `text` into a TxtNode tree with absolute source ranges.

    The caller must lint the same string that was parsed; use
    `prepare_source` first to normalize newlines and blank front matter.

    >>> root = parse_markdown("これは[リンク](https://example.com)です")
    >>> [n.type.value for n in root.walk()]
    ['Document', 'Paragraph', 'Str', 'Link', 'Str', 'Str']
    """
    tokens = get_markdown_parser().parse(text)
    return MarkdownTreeBuilder(text).build(tokens)


def prepare_source(text: str) -> str:
    return blank_front_matter(normalize_newlines(text))
