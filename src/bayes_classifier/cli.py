"""Command-line interface for the Bayes text classifier.

Provides ``train``, ``categorize``, ``inspect``, and ``reply`` commands
with rich terminal output using the ``click`` and ``rich`` libraries.

Usage::

    bayes-classifier train corpus.json --model model.json --tokenizer porter
    bayes-classifier categorize model.json "is the nightly build green?"
    bayes-classifier inspect model.json
    bayes-classifier reply model.json routes.json "show me the memory graph"
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .classifier import NaiveBayes
from .corpus import load_corpus, train_from_corpus
from .exceptions import BayesClassifierError
from .models import Categorization, ModelStats
from .routing import ResponseRouter
from .tokenizers import available_tokenizers

console = Console()

_LOAD_ERRORS = (BayesClassifierError, OSError, ValueError)


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/] {exc}")
    sys.exit(1)


def _load_model(path: Path) -> NaiveBayes:
    try:
        return NaiveBayes.load(path)
    except _LOAD_ERRORS as e:
        _fail(e)


@click.group()
@click.version_option(package_name="bayes-classifier")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Naive Bayes text classifier.

    Train a classifier from a corpus of labeled examples, categorize new
    text, and route it to canned replies.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@main.command()
@click.argument("corpus", type=click.Path(exists=True, path_type=Path))
@click.option("--model", "-m", type=click.Path(path_type=Path), required=True,
              help="Where to save the trained model.")
@click.option("--tokenizer", "-t", type=click.Choice(available_tokenizers()), default="default",
              help="Tokenizer used for training and inference.")
def train(corpus: Path, model: Path, tokenizer: str) -> None:
    """Train a new classifier from a JSON corpus file.

    Example: bayes-classifier train corpus.json --model model.json
    """
    with console.status("[bold blue]Training classifier...", spinner="dots"):
        try:
            classifier = NaiveBayes(tokenizer=tokenizer)
            learned = train_from_corpus(classifier, load_corpus(corpus))
            classifier.save(model)
        except _LOAD_ERRORS as e:
            _fail(e)

    console.print(
        f"Learned [bold]{learned}[/] documents across "
        f"[bold]{len(classifier.categories)}[/] categories. "
        f"[dim]Model saved to {model}[/]"
    )


@main.command()
@click.argument("model", type=click.Path(exists=True, path_type=Path))
@click.argument("text")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def categorize(model: Path, text: str, output: str) -> None:
    """Categorize TEXT with a saved model.

    Example: bayes-classifier categorize model.json "cheap pills now"
    """
    classifier = _load_model(model)
    try:
        result = classifier.categorize(text)
    except BayesClassifierError as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render_categorization(result)


@main.command()
@click.argument("model", type=click.Path(exists=True, path_type=Path))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def inspect(model: Path, output: str) -> None:
    """Show what a saved model has learned.

    Example: bayes-classifier inspect model.json
    """
    stats = _load_model(model).stats()

    if output == "json":
        click.echo(json.dumps(stats.to_dict(), indent=2))
    else:
        _render_stats(stats, model.name)


@main.command()
@click.argument("model", type=click.Path(exists=True, path_type=Path))
@click.argument("routes", type=click.Path(exists=True, path_type=Path))
@click.argument("text")
def reply(model: Path, routes: Path, text: str) -> None:
    """Categorize TEXT and print the reply routed to its category.

    Exits with status 2 if the winning category has no route.

    Example: bayes-classifier reply model.json routes.json "show the graph"
    """
    classifier = _load_model(model)
    try:
        router = ResponseRouter.from_file(routes, classifier)
        routed = router.reply(text)
    except _LOAD_ERRORS as e:
        _fail(e)

    if routed is None:
        console.print("[dim]No reply for this text.[/]")
        sys.exit(2)

    click.echo(routed.text)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_categorization(result: Categorization) -> None:
    """Render a Categorization as a panel and score table."""
    console.print()
    console.print(Panel(
        f"[bold]{result.category}[/]  (confidence {result.confidence:.0%})",
        title="Category",
        border_style="blue",
    ))

    probabilities = result.probabilities()
    table = Table(title="Scores", show_lines=False)
    table.add_column("#", justify="right", width=4)
    table.add_column("Category", style="cyan")
    table.add_column("Log score", justify="right")
    table.add_column("Probability", justify="right")

    for i, score in enumerate(result.scores, 1):
        style = "bold green" if score.category == result.category else ""
        table.add_row(
            str(i),
            score.category,
            f"{score.score:.4f}",
            f"{probabilities[score.category]:.2%}",
            style=style,
        )

    console.print(table)
    console.print()


def _render_stats(stats: ModelStats, filename: str) -> None:
    """Render ModelStats as a summary panel and per-category table."""
    console.print()
    console.print(Panel(
        f"Documents: {stats.total_documents} | "
        f"Categories: {stats.category_count} | "
        f"Vocabulary: {stats.vocabulary_size} | "
        f"Tokenizer: {stats.tokenizer or 'custom'}",
        title=f"Model — {filename}",
        border_style="blue",
    ))

    if stats.categories:
        table = Table(show_lines=False)
        table.add_column("Category", style="cyan")
        table.add_column("Documents", justify="right")
        table.add_column("Words", justify="right")
        for category in stats.categories:
            table.add_row(
                category,
                str(stats.doc_count.get(category, 0)),
                str(stats.word_count.get(category, 0)),
            )
        console.print(table)
    console.print()


if __name__ == "__main__":
    main()
