import random

import pytest

from ja_space_around_phrase.rule import lint_markdown
from ja_space_around_phrase.schemas import LintConfig


@pytest.fixture
def config():
    return LintConfig()


@pytest.fixture
def lint(config):
    """Lint markdown text and return the messages."""

    def _lint(text: str):
        return lint_markdown(text, config)

    return _lint


@pytest.fixture
def rng():
    return random.Random(20240601)


@pytest.fixture
def sample_markdown(tmp_path):
    """A markdown file with one violation of each kind in the body text."""
    md = """---
title: サンプル
---

# hello worldの見出し

これはhello worldです。

これは testです。

> これは testです。

```
これは testです
```

詳細はhttps://example.com を参照してください。
"""
    p = tmp_path / "sample.md"
    p.write_text(md, encoding="utf-8")
    return p
