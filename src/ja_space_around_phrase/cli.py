"""
ja-space-around-phrase: check spacing between Japanese and half-width text.

Usage:
  ja-space-around-phrase lint [OPTIONS] PATHS...
  ja-space-around-phrase text [OPTIONS] TEXT

Examples:
  ja-space-around-phrase lint README.md docs/
  ja-space-around-phrase lint docs/ --format json -o report.json -v
  ja-space-around-phrase text "これは hello worldです"
  echo "これは testです" | ja-space-around-phrase text -
"""

import logging
import sys
from pathlib import Path

import typer
from tqdm import tqdm

from ja_space_around_phrase.io.export import OutputFormat, export_results
from ja_space_around_phrase.io.loader import (
    ConfigError,
    find_config,
    iter_source_files,
    load_config,
    read_source,
)
from ja_space_around_phrase.rule import lint_markdown, lint_text
from ja_space_around_phrase.schemas import LintResult

app = typer.Typer(help=__doc__, no_args_is_help=True)


def setup_logging(verbose: int):
    """Set up logging based on verbosity level."""
    if verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:  # verbose >= 2
        level = logging.DEBUG

    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


def write_report(report: str, output: Path | None) -> None:
    if output is None:
        if report:
            typer.echo(report.rstrip("\n"))
        return
    output.write_text(report, encoding="utf-8")
    logging.info(f"Wrote report to {output}")


@app.command("lint", help="Lint markdown files or directories.")
def lint(
    paths: list[Path] = typer.Argument(..., help="Markdown files or directories"),
    config: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML config file (default: .ja-space-around-phrase.yaml if present)",
    ),
    fmt: OutputFormat = typer.Option(
        OutputFormat.stylish, "--format", "-f", help="Report format"
    ),
    output: Path = typer.Option(
        None, "--output", "-o", help="Write the report to a file instead of stdout"
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    ),
) -> None:
    """Lint markdown sources; exit with 1 when any problem is found."""
    setup_logging(verbose)

    try:
        lint_config = load_config(config or find_config())
    except ConfigError as e:
        raise typer.BadParameter(str(e), param_hint="--config") from e

    files = list(iter_source_files(paths, lint_config.extensions))
    logging.info(f"Linting {len(files)} file(s)")

    results: list[LintResult] = []
    for path in tqdm(files, desc="Linting", unit="file", disable=len(files) < 2):
        text = read_source(path)
        if text is None:
            continue
        messages = lint_markdown(text, lint_config)
        logging.debug(f"{path}: {len(messages)} message(s)")
        results.append(LintResult(file_path=str(path), messages=messages))

    write_report(export_results(results, fmt), output)

    if any(result.messages for result in results):
        raise typer.Exit(code=1)


@app.command("text", help="Lint a plain string (no markdown parsing).")
def text(
    source: str = typer.Argument(..., help="Text to check, or '-' to read stdin"),
    fmt: OutputFormat = typer.Option(
        OutputFormat.stylish, "--format", "-f", help="Report format"
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    ),
) -> None:
    """Check a single string and print its messages."""
    setup_logging(verbose)
    if source == "-":
        source = sys.stdin.read()

    result = LintResult(file_path="<text>", messages=lint_text(source))
    write_report(export_results([result], fmt), None)

    if result.messages:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
