import orjson
import pytest
from typer.testing import CliRunner

from ja_space_around_phrase.cli import app

runner = CliRunner()


def lint_json(tmp_path, *args):
    out = tmp_path / "report.json"
    result = runner.invoke(app, ["lint", *args, "--format", "json", "--output", str(out)])
    return result, orjson.loads(out.read_bytes())


def test_lint_reports_problems(sample_markdown):
    result = runner.invoke(app, ["lint", str(sample_markdown)])
    assert result.exit_code == 1
    assert "sample.md" in result.stdout
    assert "✖ 4 problems" in result.stdout


def test_lint_json_positions(sample_markdown, tmp_path):
    result, report = lint_json(tmp_path, str(sample_markdown))
    assert result.exit_code == 1
    (file_result,) = report
    assert file_result["file_path"] == str(sample_markdown)
    positions = [(m["line"], m["column"]) for m in file_result["messages"]]
    assert positions == [(7, 4), (7, 15), (9, 4), (17, 4)]
    assert all(m["rule_id"] == "ja-space-around-phrase" for m in file_result["messages"])


def test_lint_clean_file(tmp_path):
    p = tmp_path / "clean.md"
    p.write_text("# 見出し\n\nこれは hello world です。\n", encoding="utf-8")
    result = runner.invoke(app, ["lint", str(p)])
    assert result.exit_code == 0
    assert result.stdout == ""


def test_lint_directory(tmp_path):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.md").write_text("これは testです。\n", encoding="utf-8")
    (docs / "b.md").write_text("問題ありません。\n", encoding="utf-8")
    (docs / "notes.txt").write_text("これは testです。\n", encoding="utf-8")
    result, report = lint_json(tmp_path, str(docs))
    assert result.exit_code == 1
    assert [r["file_path"].rsplit("/", 1)[-1] for r in report] == ["a.md", "b.md"]
    assert [len(r["messages"]) for r in report] == [1, 0]


def test_lint_with_config(sample_markdown, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text(
        "skip_nodes: [Link, Image, BlockQuote, Code, CodeBlock]\n", encoding="utf-8"
    )
    result, report = lint_json(tmp_path, str(sample_markdown), "--config", str(config))
    assert result.exit_code == 1
    positions = [(m["line"], m["column"]) for m in report[0]["messages"]]
    assert (5, 14) in positions
    assert len(positions) == 5


@pytest.mark.parametrize(
    "content",
    ["skip_nodes: [Nope]\n", "- just\n- a list\n", "extensions: ['']\n"],
)
def test_lint_bad_config(sample_markdown, tmp_path, content):
    config = tmp_path / "config.yaml"
    config.write_text(content, encoding="utf-8")
    result = runner.invoke(app, ["lint", str(sample_markdown), "-c", str(config)])
    assert result.exit_code == 2


def test_lint_csv(sample_markdown, tmp_path):
    out = tmp_path / "report.csv"
    result = runner.invoke(
        app, ["lint", str(sample_markdown), "-f", "csv", "-o", str(out)]
    )
    assert result.exit_code == 1
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "file_path,line,column,index,severity,rule_id,message"
    assert len(lines) == 5


def test_text_command():
    result = runner.invoke(app, ["text", "これは testです"])
    assert result.exit_code == 1
    assert '"は test"' in result.stdout
    assert "<text>" in result.stdout


def test_text_command_stdin():
    result = runner.invoke(app, ["text", "-"], input="これは hello world です\n")
    assert result.exit_code == 0
    assert result.stdout == ""
