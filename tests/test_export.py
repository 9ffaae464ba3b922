import csv
import io

import orjson

from ja_space_around_phrase.io.export import (
    CSV_FIELDS,
    OutputFormat,
    export_results,
    format_stylish,
)
from ja_space_around_phrase.schemas import FixModel, LintMessage, LintResult


def make_results():
    return [
        LintResult(
            file_path="a.md",
            messages=[
                LintMessage(
                    message="全角文字と半角文字列",
                    index=3,
                    line=1,
                    column=4,
                    fix=FixModel(range=(3, 3), text=" "),
                ),
                LintMessage(message="second", index=20, line=2, column=5),
            ],
        ),
        LintResult(file_path="b.md"),
    ]


def test_stylish_groups_by_file():
    report = export_results(make_results(), OutputFormat.stylish)
    lines = report.splitlines()
    assert lines[0] == "a.md"
    assert lines[1].startswith("  1:4  error  全角文字と半角文字列")
    assert "b.md" not in report
    assert lines[-1] == "✖ 2 problems"


def test_stylish_empty():
    assert format_stylish([]) == ""
    assert format_stylish([LintResult(file_path="a.md")]) == ""


def test_json():
    report = export_results(make_results(), "json")
    assert report.endswith("\n")
    data = orjson.loads(report)
    assert [r["file_path"] for r in data] == ["a.md", "b.md"]
    first = data[0]["messages"][0]
    assert first["fix"] == {"range": [3, 3], "text": " "}
    assert first["severity"] == "error"
    assert data[1]["messages"] == []


def test_csv():
    report = export_results(make_results(), OutputFormat.csv)
    rows = list(csv.DictReader(io.StringIO(report)))
    assert list(rows[0].keys()) == CSV_FIELDS
    assert [(r["file_path"], r["line"], r["column"]) for r in rows] == [
        ("a.md", "1", "4"),
        ("a.md", "2", "5"),
    ]
    assert rows[0]["rule_id"] == "ja-space-around-phrase"


def test_result_to_json():
    result = make_results()[0]
    line = result.to_json()
    assert line.endswith("\n")
    assert "\n" not in line[:-1]
    assert orjson.loads(line)["messages"][1]["message"] == "second"
