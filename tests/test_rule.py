import pytest

from ja_space_around_phrase.boundary import SPACE_FORBIDDEN_MESSAGE, SPACE_REQUIRED_MESSAGE
from ja_space_around_phrase.rule import is_child_node, lint_text, reporter, traverse
from ja_space_around_phrase.schemas import LintConfig, NodeType, TxtNode

URL_BEFORE = "全角文字とURLの間にはスペースを入れる必要があります"
URL_AFTER = "URLと全角文字の間にはスペースを入れる必要があります"
EMAIL_BEFORE = "全角文字とメールアドレスの間にはスペースを入れる必要があります"
EMAIL_AFTER = "メールアドレスと全角文字の間にはスペースを入れる必要があります"


@pytest.mark.parametrize(
    "text",
    [
        # No space needed for single half-width words
        "これはtestです",
        "日本語textを含む",
        # Phrases with surrounding spaces
        "これは hello world です",
        "日本語 test case を含む",
        # URLs and emails with spaces
        "詳細は https://example.com を参照",
        "連絡は foo@example.com まで",
        # Only full-width or only half-width
        "これは日本語です",
        "This is English text",
        # Symbols
        "（test）は正しい",
        "（ test ）は正しい",
        "。testは正しい",
        "。 test は正しい",
        "！testは正しい",
        "（hello world）と書く",
        "「hello world」と書く",
        "、hello worldと書く",
        "？hello worldと書く",
        "例: testを実行",
        "注意: warningが出る",
        # Markdown links need no spaces
        "これは[リンク](https://example.com)です",
        "これは[hello world](https://example.com)です",
        # Skipped nodes
        "# これはhello worldです",
        "> これは testです",
        "`これは testです`を見る",
        "```\nこれは testです\n```",
        "これは![これは testです](a.png)です",
    ],
)
def test_valid(lint, text):
    assert lint(text) == []


@pytest.mark.parametrize(
    "text,expected",
    [
        (
            "これはhello worldです",
            [
                (SPACE_REQUIRED_MESSAGE + '"はhello worl..."', 1, 4),
                (SPACE_REQUIRED_MESSAGE + '"...ello worldで"', 1, 15),
            ],
        ),
        (
            "これは hello worldです",
            [(SPACE_REQUIRED_MESSAGE + '"...ello worldで"', 1, 16)],
        ),
        (
            "これは testです",
            [(SPACE_FORBIDDEN_MESSAGE + '"は test"', 1, 4)],
        ),
        (
            "これはtest です",
            [(SPACE_FORBIDDEN_MESSAGE + '"test で"', 1, 8)],
        ),
        (
            "詳細はhttps://example.com を参照",
            [(URL_BEFORE, 1, 4)],
        ),
        (
            "段落です。\n\n- 項目\n- これは testです",
            [(SPACE_FORBIDDEN_MESSAGE + '"は test"', 4, 6)],
        ),
    ],
)
def test_invalid(lint, text, expected):
    assert [(m.message, m.line, m.column) for m in lint(text)] == expected


def test_url_followed_by_full_width(lint):
    # Whether or not the parser absorbs "を参照" into the link, the
    # problem is reported right after the URL.
    (m,) = lint("詳細は https://example.comを参照")
    assert m.message == URL_AFTER
    assert m.column == len("詳細は https://example.com") + 1


@pytest.mark.parametrize("word", ["README.md", "config.py", "main.rs", "example.com", "Node.js"])
def test_dotted_word_is_not_a_link(lint, word):
    # A file name or bare domain is a single word, not an auto-link.
    text = f"これは {word} です"
    messages = lint(text)
    assert [m.index for m in messages] == [3, 4 + len(word)]
    assert all(m.message.startswith(SPACE_FORBIDDEN_MESSAGE) for m in messages)


def test_email_touching_full_width(lint):
    messages = lint("メアドはfoo@example.comです")
    assert [(m.message, m.column) for m in messages] == [
        (EMAIL_BEFORE, 5),
        (EMAIL_AFTER, 20),
    ]


def test_email_with_leading_space(lint):
    (m,) = lint("連絡は foo@example.comまで")
    assert m.message == EMAIL_AFTER
    assert m.column == len("連絡は foo@example.com") + 1


def test_messages_are_sorted_by_offset(lint):
    messages = lint("これは testです。詳細はhttps://example.com を参照")
    assert [m.index for m in messages] == [3, 14]
    assert messages[1].message == URL_BEFORE


def test_fix_ranges_are_absolute(lint):
    (m,) = lint("# 見出し\n\nこれは testです")
    assert m.index == 10
    assert m.fix.range == (10, 11)
    assert m.fix.text == ""


def test_header_checked_when_not_skipped():
    from ja_space_around_phrase.rule import lint_markdown

    config = LintConfig(skip_nodes=[NodeType.Link, NodeType.BlockQuote])
    (m,) = lint_markdown("# これは testです", config)
    assert m.line == 1
    assert m.column == 6


def test_links_can_be_disabled():
    from ja_space_around_phrase.rule import lint_markdown

    config = LintConfig(check_links=False)
    assert lint_markdown("詳細はhttps://example.com を参照", config) == []


def test_crlf_input(lint):
    (m,) = lint("一行目\r\nこれは testです\r\n")
    assert (m.line, m.column) == (2, 4)


def test_front_matter_is_not_linted(lint):
    (m,) = lint("---\ntitle: hello worldの記事\n---\nこれは testです\n")
    assert (m.line, m.column) == (4, 4)


def test_lint_text_without_markdown():
    messages = lint_text("# これは testです")
    assert [(m.line, m.column) for m in messages] == [(1, 6)]


def test_link_without_parent_is_ignored():
    from ja_space_around_phrase.rule import RuleContext, SourceLocator

    text = "https://example.com"
    context = RuleContext(text, SourceLocator(text))
    traverse(TxtNode(NodeType.Link, (0, len(text))), reporter(context))
    assert context.messages == []


def test_is_child_node():
    root = TxtNode(NodeType.Document, (0, 10))
    quote = root.append(TxtNode(NodeType.BlockQuote, (0, 10)))
    para = quote.append(TxtNode(NodeType.Paragraph, (2, 10)))
    s = para.append(TxtNode(NodeType.Str, (2, 10)))
    assert is_child_node(s, [NodeType.BlockQuote])
    assert not is_child_node(s, [NodeType.Link, NodeType.Header])
    assert not is_child_node(root, [NodeType.Document])


def test_handlers_dispatch_by_type():
    from ja_space_around_phrase.rule import RuleContext, SourceLocator

    context = RuleContext("", SourceLocator(""))
    handlers = reporter(context, LintConfig())
    assert set(handlers) == {NodeType.Str, NodeType.Link}
    handlers = reporter(context, LintConfig(check_links=False))
    assert set(handlers) == {NodeType.Str}
