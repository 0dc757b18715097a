"""Statement import commands."""

from pathlib import Path

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.entities import ImportRequest, ImportType
from fintrack.domain.errors import DomainError, ImportFailure
from fintrack.domain.statement_import import StatementImportService
from fintrack.domain.statement_parser import Institution


@click.group()
def import_group():
    """Import bank and credit card statements."""
    pass


@import_group.command("file")
@click.argument("source")
@click.option(
    "--type",
    "import_type",
    type=click.Choice([t.value for t in ImportType]),
    default="bank_statement",
    show_default=True,
)
@click.option(
    "--institution",
    type=click.Choice([i.value for i in Institution]),
    default="other",
    show_default=True,
)
@click.option("--account", "account_id", type=int, help="Account ID the rows are booked against")
@click.pass_context
def import_file(ctx, source: str, import_type: str, institution: str, account_id: int | None):
    """Import a statement from a local file or an http(s) URL.

    Examples:
        fintrack import file ~/Downloads/activity.csv --institution chase --account 1
        fintrack import file statement.csv --type credit_card --institution amex
    """
    service = StatementImportService(ctx.obj["db"])

    path = Path(source).expanduser()
    filesize = path.stat().st_size if path.is_file() else None

    try:
        result = service.process_import(
            ctx.obj["owner"],
            ImportRequest(
                source=str(path) if path.is_file() else source,
                import_type=ImportType(import_type),
                institution=institution,
                filesize=filesize,
                account_id=account_id,
            ),
        )
    except (DomainError, ImportFailure) as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Import ID: {result.import_id}")
    click.echo(f"  Imported: {result.transactions_imported} transactions")
    click.echo(f"  Skipped: {result.duplicates_skipped} duplicates")
    if result.errors:
        click.echo(f"  Errors: {len(result.errors)}")
        for error in result.errors:
            click.echo(f"    {error}", err=True)


@import_group.command("list")
@click.pass_context
def list_imports(ctx) -> None:
    """List previous imports, newest first."""
    imports = StatementImportService(ctx.obj["db"]).list_imports(ctx.obj["owner"])
    if not imports:
        click.echo("No imports found.")
        return

    for record in imports:
        click.echo(
            f"{record.id:3d}  {record.date_imported:%Y-%m-%d %H:%M}  {record.filename:30s} "
            f"{record.status.value:22s} {record.transaction_count} transactions"
        )


@import_group.command("show")
@click.argument("import_id", type=int)
@click.pass_context
def show_import(ctx, import_id: int) -> None:
    """Show one import with its row errors."""
    try:
        record = StatementImportService(ctx.obj["db"]).get_import(import_id, ctx.obj["owner"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    metadata = record.metadata
    click.echo(f"Import {record.id}: {record.filename}")
    click.echo(f"  Type: {record.import_type.value} ({metadata.institution or 'other'})")
    click.echo(f"  Status: {record.status.value}")
    click.echo(f"  Transactions: {record.transaction_count}")
    click.echo(f"  Duplicates skipped: {metadata.duplicates_skipped}")
    if metadata.error:
        click.echo(f"  Failure: {metadata.error}")
    for error in metadata.errors:
        click.echo(f"  - {error}")


@import_group.command("delete")
@click.argument("import_id", type=int)
@click.pass_context
def delete_import(ctx, import_id: int) -> None:
    """Delete an import and every transaction it created."""
    try:
        removed = StatementImportService(ctx.obj["db"]).delete_import(import_id, ctx.obj["owner"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted import {import_id} and {removed} transactions")


def register_commands(cli: click.Group) -> None:
    """Register import commands with main CLI."""
    cli.add_command(import_group, name="import")
