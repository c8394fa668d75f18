"""
Command-line interface for DoseGuide.

Commands:
- ask: Answer a question about a topic's protocol
- topics: List supported topics and their knowledge stores
- catalog: List the files in a topic's knowledge store
- upload: Create a knowledge store from protocol documents
- serve: Start the API server
"""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from doseguide.config import get_settings
from doseguide.errors import KnowledgeStoreError
from doseguide.logging import configure_logging

console = Console()


@click.group()
@click.version_option(package_name="doseguide")
def main() -> None:
    """DoseGuide - protocol-locked drug protocol Q&A."""
    configure_logging()


@main.command()
@click.argument("topic")
@click.argument("question")
@click.option("--language", default=None, help="en, ar or auto (default: detect from question)")
@click.option(
    "--style",
    type=click.Choice(["recommended", "detailed", "bullet"]),
    default="recommended",
    help="Answer style",
)
@click.option(
    "--mode",
    type=click.Choice(["hybrid", "verbatim", "short", "link"]),
    default="hybrid",
    help="Output mode",
)
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
def ask(topic: str, question: str, language: str | None, style: str, mode: str, as_json: bool) -> None:
    """Answer QUESTION using only the protocol for TOPIC."""
    from doseguide.api.schemas import outcome_body
    from doseguide.pipeline import AnswerPipeline

    pipeline = AnswerPipeline.from_settings(get_settings())
    outcome = pipeline.answer(
        topic,
        question,
        language=language,
        answer_style=style,
        output_mode=mode,
    )

    if not outcome.topic_supported:
        console.print(f"[red]{outcome.reply}[/red]")
        console.print(f"Supported topics: {', '.join(outcome.supported_topics) or '(none)'}")
        raise SystemExit(2)

    if as_json:
        click.echo(json.dumps(outcome_body(outcome), indent=2, ensure_ascii=False))
        return

    color = "green" if outcome.result.found else "yellow"
    console.print(f"[bold {color}]{outcome.verdict.value}[/bold {color}]")
    if outcome.guardrail:
        console.print(f"[red]guardrail: {outcome.guardrail.value}[/red]")
    console.print(outcome.reply, markup=False)

    if outcome.result.verbatim and mode != "verbatim":
        console.print("\n[blue]Evidence:[/blue]")
        for i, quote in enumerate(outcome.result.verbatim, 1):
            hint = " ".join(h for h in (quote.section_hint, quote.page_hint) if h)
            console.print(f"  {i}) {quote.quote}", markup=False)
            if hint:
                console.print(f"     {hint}", markup=False)

    for warning in outcome.result.warnings:
        console.print(f"[yellow]! {warning}[/yellow]")


@main.command()
def topics() -> None:
    """List supported topics."""
    from doseguide.vectorstore import TopicRegistry

    settings = get_settings()
    registry = TopicRegistry.from_file(settings.vectorstores_path)

    if not len(registry):
        console.print(f"[red]No topics configured in {settings.vectorstores_path}[/red]")
        console.print("Create one with: uv run doseguide upload TOPIC FILE...")
        return

    table = Table(title=f"Topics ({settings.vectorstores_path})")
    table.add_column("Topic")
    table.add_column("Vector store")
    for key, store_id in registry.items():
        table.add_row(key, store_id)
    console.print(table)


@main.command()
@click.argument("topic")
@click.option("--names", is_flag=True, help="Look up file names (slower)")
def catalog(topic: str, names: bool) -> None:
    """List the files attached to TOPIC's knowledge store."""
    from doseguide.vectorstore import KnowledgeStoreClient, TopicRegistry

    settings = get_settings()
    registry = TopicRegistry.from_file(settings.vectorstores_path)
    store_id = registry.resolve(topic)
    if store_id is None:
        console.print(f"[red]Topic not supported: {topic}[/red]")
        raise SystemExit(2)

    client = KnowledgeStoreClient(api_key=settings.openai_api_key.get_secret_value())
    try:
        files = client.list_files(store_id, with_names=names)
    except KnowledgeStoreError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    table = Table(title=f"{topic} ({store_id}): {len(files)} file(s)")
    table.add_column("File id")
    table.add_column("Status")
    table.add_column("Name")
    for f in files:
        table.add_row(f["id"], f["status"] or "", f["filename"] or "")
    console.print(table)


@main.command()
@click.argument("topic")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", default=None, help="Vector store name (default: the topic key)")
def upload(topic: str, files: tuple[Path, ...], name: str | None) -> None:
    """Create a knowledge store for TOPIC from protocol FILES and register it."""
    from doseguide.vectorstore import KnowledgeStoreClient, TopicRegistry

    settings = get_settings()
    registry = TopicRegistry.from_file(settings.vectorstores_path)

    if registry.resolve(topic):
        console.print(f"[yellow]Topic {topic} already has a store; it will be replaced.[/yellow]")

    console.print(f"[yellow]Uploading {len(files)} file(s) for {topic}...[/yellow]")
    client = KnowledgeStoreClient(api_key=settings.openai_api_key.get_secret_value())
    try:
        store_id = client.create_store(name or topic, list(files))
    except KnowledgeStoreError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    registry.with_store(topic, store_id).save(settings.vectorstores_path)
    console.print(f"[green]✓ {topic} → {store_id} saved to {settings.vectorstores_path}[/green]")


@main.command()
@click.option("--host", default=None, help="API host (default: API_HOST)")
@click.option("--port", default=None, type=int, help="API port (default: API_PORT)")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "doseguide.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
