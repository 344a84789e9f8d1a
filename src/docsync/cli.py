"""Command-line interface for docsync."""

import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .core.config import RegistryConfig
from .core.database import create_store_engine
from .core.logging import setup_logging
from .monitoring.metrics import MetricsCollector
from .schema_sync.config import SyncOptions
from .schema_sync.synchronizer import SchemaSynchronizer, sync_data
from .schema_sync.types import SyncPlan
from .store.sqlalchemy_store import SqlAlchemyDocumentStore

console = Console()

REGISTRY_TEMPLATE = """# docsync document registry
document_types:
  - name: "Person"
    table: "public.mt_doc_person"
    payload_column: "data"
    fields:
      - name: "Id"
        type: "guid"
      - name: "Name"
        type: "string"
      - name: "Age"
        type: "int32"
      - name: "Nickname"
        type: "string"
    # Fields also stored in their own column
    duplicated_fields:
      - name: "Name"
        type: "string"
        column: "name"
"""


def _open_store(registry_path: Path, database_url: Optional[str]) -> SqlAlchemyDocumentStore:
    registry = RegistryConfig.from_file(registry_path)
    engine = create_store_engine(database_url)
    return SqlAlchemyDocumentStore(engine, registry.to_mappings())


registry_option = click.option(
    "--registry",
    "-r",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to the document registry file",
)

database_url_option = click.option(
    "--database-url",
    envvar="DOCSYNC_DB_URL",
    help="Database URL (overrides settings)",
)


@click.group()
@click.version_option(version=__version__, prog_name="docsync")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]), default=None,
              help="Log level (overrides settings)")
def cli(log_level: Optional[str]):
    """docsync: keep stored documents in sync with their declared shape."""
    setup_logging(cli_mode=True, level=log_level)


@cli.command()
@registry_option
@database_url_option
@click.option(
    "--keep-duplicated-columns", is_flag=True,
    help="Do not drop duplicated columns of removed fields",
)
@click.option(
    "--metrics-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write Prometheus metrics of this run to a file",
)
def sync(registry: Path, database_url: Optional[str], keep_duplicated_columns: bool,
         metrics_file: Optional[Path]):
    """Synchronize stored documents with the registered document types."""

    metrics = MetricsCollector() if metrics_file else None

    try:
        store = _open_store(registry, database_url)
        store.create_schema()

        console.print(f"[blue]Synchronizing {len(store.document_mappings)} document types...[/blue]")
        sync_data(store, SyncOptions(drop_duplicated_columns=not keep_duplicated_columns), metrics=metrics)
        store.engine.dispose()

        console.print("[green]✓ Synchronization completed[/green]")

    except Exception as e:
        console.print(f"[red]✗ Synchronization failed: {escape(str(e))}[/red]")
        sys.exit(1)

    finally:
        if metrics is not None:
            metrics_file.write_bytes(metrics.export())
            console.print(f"[blue]Metrics written to {metrics_file}[/blue]")


@cli.command()
@registry_option
@database_url_option
@click.option(
    "--keep-duplicated-columns", is_flag=True,
    help="Plan without dropping duplicated columns of removed fields",
)
def plan(registry: Path, database_url: Optional[str], keep_duplicated_columns: bool):
    """Show the changes a sync would apply, without applying them."""

    try:
        store = _open_store(registry, database_url)
        store.create_schema()

        options = SyncOptions(drop_duplicated_columns=not keep_duplicated_columns)
        plans = SchemaSynchronizer(store, options=options).plan()
        store.engine.dispose()

    except Exception as e:
        console.print(f"[red]✗ Planning failed: {escape(str(e))}[/red]")
        sys.exit(1)

    _display_plans(plans)


@cli.command()
@registry_option
def validate(registry: Path):
    """Validate a document registry file."""

    try:
        console.print(f"[blue]Validating registry: {registry}[/blue]")
        registry_config = RegistryConfig.from_file(registry)

        console.print("[green]✓ Registry is valid[/green]")
        _display_registry_summary(registry_config)

    except Exception as e:
        console.print(f"[red]✗ Registry is invalid: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command("init-database")
@database_url_option
def init_database(database_url: Optional[str]):
    """Create the model snapshot table."""

    try:
        console.print("[blue]Initializing database...[/blue]")
        store = SqlAlchemyDocumentStore(create_store_engine(database_url), [])
        store.create_schema()
        store.engine.dispose()
        console.print("[green]Database initialized successfully![/green]")

    except Exception as e:
        console.print(f"[red]Failed to initialize database: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=Path("docsync-registry.yaml"),
    help="Where to write the registry template",
)
def init(output: Path):
    """Write a document registry template."""

    if output.exists():
        console.print(f"[yellow]Registry file already exists: {output}[/yellow]")
        if not click.confirm("Overwrite existing file?"):
            return

    output.write_text(REGISTRY_TEMPLATE)
    console.print(f"[green]Created registry file: {output}[/green]")


def _display_registry_summary(registry: RegistryConfig):
    """Display the registered document types."""

    table = Table(title="Document Types")
    table.add_column("Name", style="cyan")
    table.add_column("Table", style="magenta")
    table.add_column("Fields", style="green")
    table.add_column("Duplicated", style="yellow")

    for document_type in registry.document_types:
        table.add_row(
            document_type.name,
            document_type.table,
            str(len(document_type.fields)),
            str(len(document_type.duplicated_fields)),
        )

    console.print(table)


def _display_plans(plans: List[SyncPlan]):
    """Display the planned changes per document type."""

    if not any(p.has_changes for p in plans):
        console.print("[green]All document types are in sync[/green]")
        return

    table = Table(title="Planned Changes")
    table.add_column("Document Type", style="cyan")
    table.add_column("Change", style="magenta")
    table.add_column("Field", style="green")
    table.add_column("Type", style="yellow")

    for sync_plan in plans:
        if sync_plan.created:
            table.add_row(sync_plan.document_type, "create snapshot", "", f"{len(sync_plan.diff.add)} fields")
            continue
        for live_field in sync_plan.diff.update:
            table.add_row(sync_plan.document_type, "update", live_field.name, str(live_field.type))
        for prop in sync_plan.diff.remove:
            table.add_row(sync_plan.document_type, "remove", prop.name, str(prop.type))
        for live_field in sync_plan.diff.add:
            table.add_row(sync_plan.document_type, "add", live_field.name, str(live_field.type))

    console.print(table)

    statements = [s for p in plans for s in p.statements]
    if statements:
        console.print("[bold]Statements:[/bold]")
        for statement in statements:
            params = f"  {statement.params}" if statement.params else ""
            console.print(f"  {statement.sql}{params}", markup=False)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
