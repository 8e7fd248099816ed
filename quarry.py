"""Quarry CLI: run text-mining analyses and inspect their tables.

Six commands: validate, run, tfidf, pairs, correlate, export.
Uses typer for argument parsing and rich for formatted terminal output.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from core.cooccur import CoOccurrence, partners
from core.errors import QuarryError
from core.pipeline import load_config, run_analysis
from core.store import DEFAULT_DB_PATH, TABLES, QuarryStore
from core.tfidf import TfIdf, top_terms
from core.validator import validate_config

app = typer.Typer(help="Quarry: tf-idf and word co-occurrence for document corpora.")
console = Console()

DB_OPTION = typer.Option(DEFAULT_DB_PATH, "--db", help="Path to the SQLite results file")
TOP_OPTION = typer.Option(
    None, "--top", min=1, help="Number of rows (defaults to the config's top_n)"
)


def _get_store(db: str) -> QuarryStore:
    return QuarryStore(db)


def _fail(message: str) -> None:
    console.print(Panel(f"[bold red]✗ {message}[/bold red]", border_style="red"))
    raise typer.Exit(code=1)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# ── validate ────────────────────────────────────────────────────────


@app.command()
def validate(config_path: str = typer.Argument(..., help="Path to analysis config JSON")):
    """Check an analysis config for syntactic and semantic errors."""
    passed, errors = validate_config(config_path)

    if passed:
        console.print(
            Panel("[bold green]✓ Validation passed[/bold green]", border_style="green")
        )
    else:
        console.print(
            Panel("[bold red]✗ Validation failed[/bold red]", border_style="red")
        )
        for err in errors:
            console.print(f"  [red]✗[/red] {err}")
        raise typer.Exit(code=1)


# ── run ─────────────────────────────────────────────────────────────


@app.command()
def run(
    config_path: str = typer.Argument(..., help="Path to analysis config JSON"),
    db: str = DB_OPTION,
):
    """Tokenize the corpus and compute every table."""
    passed, errors = validate_config(config_path)
    if not passed:
        for err in errors:
            console.print(f"  [red]✗[/red] {err}")
        _fail("Config is invalid; nothing was run")

    store = _get_store(db)
    try:
        with console.status("[bold blue]Analyzing corpus..."):
            summary = run_analysis(load_config(config_path), store)
    except QuarryError as e:
        _fail(f"{type(e).__name__}: {e}")
    finally:
        store.close()

    table = Table(title="Analysis Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Documents", str(summary["documents"]))
    table.add_row("Skipped", str(summary["skipped"]))
    table.add_row("Unique Terms", str(summary["terms"]))
    table.add_row("Term Counts", str(summary["term_counts"]))
    table.add_row("Co-occurring Pairs", str(summary["pairs"]))
    table.add_row("Correlated Pairs", str(summary["correlations"]))
    console.print(table)

    if summary["skipped"]:
        console.print(
            f"[yellow]{summary['skipped']} malformed document(s) skipped[/yellow]"
        )


# ── tfidf ───────────────────────────────────────────────────────────


def _load_stats(store: QuarryStore) -> dict:
    stats = store.get_corpus_stats()
    if stats is None:
        store.close()
        _fail("No results stored; run an analysis first")
    return stats


@app.command()
def tfidf(
    db: str = DB_OPTION,
    top: int | None = TOP_OPTION,
    document: str | None = typer.Option(None, "--document", help="Restrict to one document id"),
    per_document: bool = typer.Option(
        False, "--per-document", help="Show the top terms of every document"
    ),
):
    """Show the highest tf-idf terms."""
    store = _get_store(db)
    stats = _load_stats(store)
    limit = top or stats["tfidf_top_n"]
    if per_document:
        records = [TfIdf(**r) for r in store.rows("tfidf")]
        if document is not None:
            records = [r for r in records if r.document_id == document]
        rows = [r.to_dict() for r in top_terms(records, n=limit, per_document=True)]
    else:
        rows = store.top_tfidf(limit=limit, document_id=document)
    store.close()

    console.print(
        f"\n[bold]Corpus:[/bold] {stats['name']} | Field: {stats['tfidf_field']} | "
        f"Documents: {stats['total_documents']}"
    )
    console.print()

    table = Table()
    table.add_column("#", style="dim", width=3)
    table.add_column("Document", style="cyan", min_width=20)
    table.add_column("Term", min_width=12)
    table.add_column("n", justify="right")
    table.add_column("tf", justify="right")
    table.add_column("idf", justify="right")
    table.add_column("tf-idf", justify="right", style="green")

    for i, r in enumerate(rows, 1):
        table.add_row(
            str(i),
            r["document_id"],
            r["term"],
            str(r["raw_count"]),
            f"{r['term_frequency']:.4f}",
            f"{r['inverse_document_frequency']:.4f}",
            f"{r['tfidf_score']:.4f}",
        )

    console.print(table)


# ── pairs ───────────────────────────────────────────────────────────


@app.command()
def pairs(
    db: str = DB_OPTION,
    top: int | None = TOP_OPTION,
    term: str | None = typer.Option(None, "--term", help="Show the partners of this term"),
):
    """Show the most frequently co-occurring term pairs."""
    store = _get_store(db)
    stats = _load_stats(store)
    limit = top or stats["pair_top_n"]

    if term is not None:
        stored = [CoOccurrence(**r) for r in store.rows("cooccurrence")]
        store.close()
        table = Table(title=f"Partners of '{term}' ({stats['pair_field']})")
        table.add_column("#", style="dim", width=3)
        table.add_column("Term", style="cyan")
        table.add_column("Documents", justify="right", style="green")
        for i, (other, n) in enumerate(partners(stored, term, k=limit), 1):
            table.add_row(str(i), other, str(n))
        console.print(table)
        return

    rows = store.top_pairs(limit=limit)
    store.close()

    table = Table(title=f"Co-occurrence ({stats['pair_field']})")
    table.add_column("#", style="dim", width=3)
    table.add_column("Term A", style="cyan")
    table.add_column("Term B", style="cyan")
    table.add_column("Documents", justify="right", style="green")

    for i, r in enumerate(rows, 1):
        table.add_row(str(i), r["term_a"], r["term_b"], str(r["pair_count"]))

    console.print(table)


# ── correlate ───────────────────────────────────────────────────────


@app.command()
def correlate(
    db: str = DB_OPTION,
    top: int | None = TOP_OPTION,
    term: str | None = typer.Option(None, "--term", help="Only pairs containing this term"),
):
    """Show the most strongly correlated term pairs (phi coefficient)."""
    store = _get_store(db)
    stats = _load_stats(store)
    rows = store.top_correlations(limit=top or stats["pair_top_n"], term=term)
    store.close()

    table = Table(title=f"Correlation ({stats['pair_field']})")
    table.add_column("#", style="dim", width=3)
    table.add_column("Term A", style="cyan")
    table.add_column("Term B", style="cyan")
    table.add_column("phi", justify="right")

    for i, r in enumerate(rows, 1):
        color = "green" if r["correlation"] > 0 else "red"
        table.add_row(
            str(i), r["term_a"], r["term_b"], f"[{color}]{r['correlation']:.4f}[/{color}]"
        )

    console.print(table)


# ── export ──────────────────────────────────────────────────────────


@app.command()
def export(
    table_name: str = typer.Argument(..., help=f"One of: {', '.join(TABLES)}"),
    out_path: str = typer.Argument(..., help="Destination CSV path"),
    db: str = DB_OPTION,
):
    """Write a stored table to CSV."""
    if table_name not in TABLES:
        _fail(f"Unknown table '{table_name}'. Expected one of: {', '.join(TABLES)}")

    store = _get_store(db)
    try:
        n = store.export_csv(table_name, out_path)
    finally:
        store.close()

    console.print(
        Panel(
            f"[bold green]✓ Exported {n} rows[/bold green] from {table_name} to {out_path}",
            border_style="green",
        )
    )


if __name__ == "__main__":
    app()
