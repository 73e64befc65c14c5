import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from ..core.config import Settings
from ..core.errors import ConfigurationError, EncodingError
from ..core.logging import log, setup_logging
from ..core.models import Document, TokenKind
from ..segmentation.engine import segment
from ..segmentation.lexicon import iter_words
from ..segmentation.options import SegmenterOptions
from ..segmentation.verify import render_markdown, verify_document, write_report

app = typer.Typer(add_completion=False, help="prosaic segmentation CLI")

FORMATS = ("text", "json", "plain")


@app.callback()
def _init(
    log_format: Optional[str] = typer.Option(
        None, "--log-format", help="Log format: json|plain|auto"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Minimum log level"
    ),
) -> None:
    try:
        settings = Settings.load_config()
    except ConfigurationError as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(2) from e
    setup_logging(log_format or settings.LOG_FORMAT, log_level or settings.LOG_LEVEL)


@app.command()
def version() -> None:
    from .. import __version__

    typer.echo(__version__)


def _read_input(file: str) -> bytes:
    """Read raw bytes from a path, or stdin when ``file`` is "-"."""
    if file == "-":
        return typer.get_binary_stream("stdin").read()
    path = Path(file)
    if not path.exists():
        typer.echo(f"❌ Input file not found: {file}", err=True)
        raise typer.Exit(1)
    try:
        return path.read_bytes()
    except OSError as e:
        typer.echo(f"❌ Cannot read input file {file}: {e}", err=True)
        raise typer.Exit(1) from e


def _build_options(
    config_file: Optional[str],
    lexicon: Optional[str],
    abbreviations: Optional[List[str]],
    lookahead: Optional[int],
    workers: Optional[int],
    split_on_indent: Optional[bool],
) -> Tuple[Settings, SegmenterOptions]:
    settings = Settings.load_config(config_file)
    if lexicon:
        settings = settings.model_copy(update={"PROSAIC_LEXICON": lexicon})

    overrides: Dict[str, Any] = {}
    if abbreviations:
        overrides["abbreviations"] = list(iter_words(abbreviations))
    if lookahead is not None:
        overrides["quote_lookahead"] = lookahead
    if workers is not None:
        overrides["workers"] = workers
    if split_on_indent is not None:
        overrides["split_on_indent"] = split_on_indent
    return settings, settings.to_options(**overrides)


def _segment_file(file: str, options: SegmenterOptions) -> Document:
    data = _read_input(file)
    try:
        return segment(data, options)
    except EncodingError as e:
        typer.echo(f"❌ {file}: {e}", err=True)
        raise typer.Exit(1) from e


def _options_or_exit(**kwargs: Any) -> Tuple[Settings, SegmenterOptions]:
    try:
        return _build_options(**kwargs)
    except ConfigurationError as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(2) from e


@app.command("segment")
def segment_cmd(
    file: str = typer.Argument(..., help="UTF-8 text file, or - for stdin"),
    format_output: str = typer.Option(
        "text", "--format", help="Output format (text, json, plain)"
    ),
    abbreviations: Optional[List[str]] = typer.Option(
        None, "--abbrev", help="Extra abbreviation (repeatable, comma separated)"
    ),
    lookahead: Optional[int] = typer.Option(
        None, "--lookahead", help="Quote lookahead for soft boundaries"
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", help="Parallel paragraph workers"
    ),
    lexicon: Optional[str] = typer.Option(
        None, "--lexicon", help="Lexicon: english, minimal or a JSON file"
    ),
    split_on_indent: Optional[bool] = typer.Option(
        None, "--split-on-indent/--no-split-on-indent", help="Indented lines start paragraphs"
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", help="Config file (.prosaic.yaml auto-discovered)"
    ),
) -> None:
    """
    Segment a document into paragraphs, sentences and tokens.

    text: one sentence per line, a blank line between paragraphs.
    json: the full structure with token kinds and offsets.
    plain: the normalized plain text rebuilt from the structure.
    """
    if format_output not in FORMATS:
        typer.echo(f"❌ Unknown format: {format_output}", err=True)
        raise typer.Exit(2)

    _, options = _options_or_exit(
        config_file=config_file,
        lexicon=lexicon,
        abbreviations=abbreviations,
        lookahead=lookahead,
        workers=workers,
        split_on_indent=split_on_indent,
    )
    document = _segment_file(file, options)
    log.info(
        "cli.segment",
        file=file,
        paragraphs=len(document),
        sentences=document.sentence_count,
    )

    if format_output == "json":
        typer.echo(json.dumps(document.to_dict(), indent=2, ensure_ascii=False))
    elif format_output == "plain":
        typer.echo(document.to_plain_text())
    else:
        blocks = [
            "\n".join(sentence.normalized_text() for sentence in paragraph.sentences)
            for paragraph in document
        ]
        typer.echo("\n\n".join(blocks))


@app.command()
def verify(
    file: str = typer.Argument(..., help="UTF-8 text file, or - for stdin"),
    save: bool = typer.Option(
        False, "--save", help="Write report.json/report.md to the verify directory"
    ),
    out_dir: Optional[str] = typer.Option(
        None, "--out", help="Verify directory (implies --save)"
    ),
    format_output: str = typer.Option("text", "--format", help="Output format (text, json)"),
    lexicon: Optional[str] = typer.Option(None, "--lexicon", help="Lexicon name or path"),
    config_file: Optional[str] = typer.Option(None, "--config", help="Config file"),
) -> None:
    """Verify coverage and span ordering of a segmented document; exit 1 on FAIL."""
    settings, options = _options_or_exit(
        config_file=config_file,
        lexicon=lexicon,
        abbreviations=None,
        lookahead=None,
        workers=None,
        split_on_indent=None,
    )
    document = _segment_file(file, options)
    report = verify_document(document)

    if save or out_dir:
        target = Path(out_dir or settings.PROSAIC_VERIFY_DIR)
        verify_dir = write_report(report, target)
        typer.echo(f"📄 Report written to: {verify_dir}", err=True)

    if format_output == "json":
        typer.echo(json.dumps(report, indent=2))
    else:
        typer.echo(render_markdown(report))

    if report["status"] != "PASS":
        raise typer.Exit(1)


@app.command()
def stats(
    file: str = typer.Argument(..., help="UTF-8 text file, or - for stdin"),
    lexicon: Optional[str] = typer.Option(None, "--lexicon", help="Lexicon name or path"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    config_file: Optional[str] = typer.Option(None, "--config", help="Config file"),
) -> None:
    """Print paragraph, sentence and token-kind counts as a table."""
    _, options = _options_or_exit(
        config_file=config_file,
        lexicon=lexicon,
        abbreviations=None,
        lookahead=None,
        workers=None,
        split_on_indent=None,
    )
    document = _segment_file(file, options)

    counts = {kind: 0 for kind in TokenKind}
    for token in document.tokens():
        counts[token.kind] += 1

    table = Table(title=f"Segmentation: {file}")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Paragraphs", str(len(document)))
    table.add_row("Sentences", str(document.sentence_count))
    table.add_row(
        "Quoted sentences",
        str(sum(1 for s in document.sentences() if s.is_quoted)),
    )
    table.add_row("Tokens", str(document.token_count))
    for kind, count in counts.items():
        table.add_row(f"  {kind.value}", str(count))

    console = Console(color_system=None if no_color else "auto")
    console.print(table)


if __name__ == "__main__":
    app()
