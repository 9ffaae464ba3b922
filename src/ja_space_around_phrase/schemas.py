from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional

import orjson
from pydantic import BaseModel, field_validator

RULE_ID = "ja-space-around-phrase"


class NodeType(str, Enum):
    """Node kinds produced by the markdown host."""

    Document = "Document"
    Paragraph = "Paragraph"
    Header = "Header"
    BlockQuote = "BlockQuote"
    List = "List"
    ListItem = "ListItem"
    Table = "Table"
    TableRow = "TableRow"
    TableCell = "TableCell"
    CodeBlock = "CodeBlock"
    Html = "Html"
    HorizontalRule = "HorizontalRule"
    Str = "Str"
    Link = "Link"
    Image = "Image"
    Code = "Code"
    Emphasis = "Emphasis"
    Strong = "Strong"
    Delete = "Delete"
    Break = "Break"


@dataclass(eq=False)
class TxtNode:
    """
    A parsed node. `range` is a half-open [start, end) offset pair into the
    whole document, not into the parent.
    """

    type: NodeType
    range: tuple[int, int]
    parent: Optional["TxtNode"] = field(default=None, repr=False)
    children: list["TxtNode"] = field(default_factory=list, repr=False)

    def append(self, child: "TxtNode") -> "TxtNode":
        child.parent = self
        self.children.append(child)
        return child

    def walk(self):
        """Depth-first, document-order iteration over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()


class Anchor(str, Enum):
    """Which node a violation's index is relative to."""

    NODE = "node"
    PARENT = "parent"


@dataclass(frozen=True)
class Fix:
    """Replace `range` (relative to the anchor node) with `text`. Never applied here."""

    range: tuple[int, int]
    text: str


@dataclass(frozen=True)
class Violation:
    message: str
    index: int
    anchor: Anchor = Anchor.NODE
    fix: Optional[Fix] = None


DEFAULT_SKIP_NODES = [
    NodeType.Link,
    NodeType.Image,
    NodeType.BlockQuote,
    NodeType.Code,
    NodeType.CodeBlock,
    NodeType.Header,
]


class LintConfig(BaseModel):
    skip_nodes: list[NodeType] = list(DEFAULT_SKIP_NODES)
    check_links: bool = True
    extensions: list[str] = [".md", ".markdown"]

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        out = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                raise ValueError("Empty file extension")
            out.append(ext if ext.startswith(".") else f".{ext}")
        return out


class FixModel(BaseModel):
    range: tuple[int, int]
    text: str


class LintMessage(BaseModel):
    """One reported violation, positioned in the linted document."""

    rule_id: str = RULE_ID
    message: str
    index: int
    line: int
    column: int
    severity: Literal["error", "warning"] = "error"
    fix: Optional[FixModel] = None


class LintResult(BaseModel):
    file_path: str
    messages: list[LintMessage] = []

    def to_json(self) -> str:
        """
        Serialize the result to a newline-terminated JSON string.
        """
        buf = orjson.dumps(
            self.model_dump(),
            option=orjson.OPT_APPEND_NEWLINE,
        )
        return buf.decode("utf-8")
