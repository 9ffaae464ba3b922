"""
The ja-space-around-phrase rule: per-node handlers and the traversal that
drives them.

Handlers are looked up by node type in a plain dict; the traversal visits the
tree in document order and calls whichever handler is registered.
"""

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from ja_space_around_phrase.boundary import check_text
from ja_space_around_phrase.io.markdown import line_starts, parse_markdown, prepare_source
from ja_space_around_phrase.links import check_link
from ja_space_around_phrase.schemas import (
    Anchor,
    FixModel,
    LintConfig,
    LintMessage,
    NodeType,
    TxtNode,
    Violation,
)

Handler = Callable[[TxtNode], None]


class SourceLocator:
    """
    Translate absolute offsets into 1-based line and column numbers.

    >>> SourceLocator("ab\\ncd").position(3)
    (2, 1)
    """

    def __init__(self, text: str):
        self.starts = line_starts(text)

    def position(self, index: int) -> tuple[int, int]:
        line = bisect_right(self.starts, index) - 1
        return line + 1, index - self.starts[line] + 1


@dataclass
class RuleContext:
    text: str
    locator: SourceLocator
    messages: list[LintMessage] = field(default_factory=list)

    def get_source(self, node: TxtNode) -> str:
        start, end = node.range
        return self.text[start:end]

    def report(self, node: TxtNode, violation: Violation) -> None:
        target = node
        if violation.anchor is Anchor.PARENT and node.parent is not None:
            target = node.parent
        offset = target.range[0]
        index = offset + violation.index
        line, column = self.locator.position(index)

        fix = None
        if violation.fix is not None:
            start, end = violation.fix.range
            fix = FixModel(range=(offset + start, offset + end), text=violation.fix.text)

        logging.debug(f"{line}:{column} {violation.message}")
        self.messages.append(
            LintMessage(
                message=violation.message,
                index=index,
                line=line,
                column=column,
                fix=fix,
            )
        )


def is_child_node(node: TxtNode, types: Iterable[NodeType]) -> bool:
    """True when any ancestor of `node` has one of `types`."""
    types = set(types)
    parent = node.parent
    while parent is not None:
        if parent.type in types:
            return True
        parent = parent.parent
    return False


def reporter(context: RuleContext, config: Optional[LintConfig] = None) -> dict[NodeType, Handler]:
    """Build the node-type → handler table for one document."""
    config = config or LintConfig()
    skip_nodes = set(config.skip_nodes)

    def on_link(node: TxtNode) -> None:
        parent = node.parent
        if parent is None:
            return
        source = context.get_source(node)
        parent_text = context.get_source(parent)
        link_start = node.range[0] - parent.range[0]
        link_end = node.range[1] - parent.range[0]
        for violation in check_link(source, link_start, link_end, parent_text):
            context.report(node, violation)

    def on_str(node: TxtNode) -> None:
        if is_child_node(node, skip_nodes):
            return
        for violation in check_text(context.get_source(node)):
            context.report(node, violation)

    handlers: dict[NodeType, Handler] = {NodeType.Str: on_str}
    if config.check_links:
        handlers[NodeType.Link] = on_link
    return handlers


def traverse(root: TxtNode, handlers: dict[NodeType, Handler]) -> None:
    for node in root.walk():
        handler = handlers.get(node.type)
        if handler is not None:
            handler(node)


def lint_markdown(text: str, config: Optional[LintConfig] = None) -> list[LintMessage]:
    """
    Lint a markdown document and return its messages ordered by offset.

    Offsets refer to the document after newline normalization.

    >>> [(m.line, m.column) for m in lint_markdown("# 見出し\\n\\nこれは testです\\n")]
    [(3, 4)]
    """
    source = prepare_source(text)
    context = RuleContext(source, SourceLocator(source))
    traverse(parse_markdown(source), reporter(context, config))
    return sorted(context.messages, key=lambda m: m.index)


def lint_text(text: str) -> list[LintMessage]:
    """
    Lint `text` as a single plain-text node, without markdown parsing.

    >>> [m.index for m in lint_text("これはhello worldです")]
    [3, 14]
    """
    context = RuleContext(text, SourceLocator(text))
    traverse(TxtNode(NodeType.Str, (0, len(text))), reporter(context))
    return context.messages
