"""
Render lint results as stylish text, JSON or CSV.
"""

import csv
import io
from collections.abc import Iterable
from enum import Enum

import orjson

from ja_space_around_phrase.schemas import LintResult

CSV_FIELDS = ["file_path", "line", "column", "index", "severity", "rule_id", "message"]


class OutputFormat(str, Enum):
    stylish = "stylish"
    json = "json"
    csv = "csv"


def format_stylish(results: Iterable[LintResult]) -> str:
    """
    Human-readable report grouped by file, with a summary line.

    >>> from ja_space_around_phrase.schemas import LintMessage
    >>> r = LintResult(file_path="a.md", messages=[LintMessage(message="m", index=3, line=1, column=4)])
    >>> print(format_stylish([r]))
    a.md
      1:4  error  m  ja-space-around-phrase
    <BLANKLINE>
    ✖ 1 problem
    """
    lines: list[str] = []
    total = 0
    for result in results:
        if not result.messages:
            continue
        lines.append(result.file_path)
        for m in result.messages:
            lines.append(f"  {m.line}:{m.column}  {m.severity}  {m.message}  {m.rule_id}")
        lines.append("")
        total += len(result.messages)
    if total:
        lines.append(f"✖ {total} problem{'s' if total != 1 else ''}")
    return "\n".join(lines)


def format_json(results: Iterable[LintResult]) -> str:
    buf = orjson.dumps(
        [result.model_dump() for result in results],
        option=orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE,
    )
    return buf.decode("utf-8")


def format_csv(results: Iterable[LintResult]) -> str:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    for result in results:
        for m in result.messages:
            row = {"file_path": result.file_path}
            row.update(m.model_dump(include=set(CSV_FIELDS[1:])))
            writer.writerow(row)
    return out.getvalue()


FORMATTERS = {
    OutputFormat.stylish: format_stylish,
    OutputFormat.json: format_json,
    OutputFormat.csv: format_csv,
}


def export_results(results: list[LintResult], fmt: OutputFormat) -> str:
    return FORMATTERS[OutputFormat(fmt)](results)
