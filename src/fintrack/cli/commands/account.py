"""Account management commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.account import AccountService
from fintrack.domain.entities import AccountType
from fintrack.domain.errors import DomainError
from fintrack.utils.amount_parser import parse_amount

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default="checking", show_default=True
)
@click.option("--balance", default="0", help="Opening balance (e.g., 1000 or 1,250.50)")
@click.pass_context
def create_account(ctx, name: str, account_type: str, balance: str):
    """Create a new account.

    Examples:
        fintrack account create "Checking"
        fintrack account create "Visa" --type credit_card
        fintrack account create "Savings" --type savings --balance 2500
    """
    service = AccountService(ctx.obj["db"])

    try:
        opening = parse_amount(balance)
    except ValueError as e:
        click.echo(f"Error: Invalid balance: {e}", err=True)
        ctx.exit(1)

    try:
        account = service.create_account(
            owner=ctx.obj["owner"], name=name, account_type=account_type, balance=opening
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{account.name}' (ID: {account.id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their balances."""
    service = AccountService(ctx.obj["db"])
    owner = ctx.obj["owner"]

    accounts = service.list_accounts(owner)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type.value:12s} | ${acc.balance:,.2f}"
        )
    click.echo("-" * 60)
    click.echo(f"Total balance: ${service.get_total_balance(owner):,.2f}")


@account_group.command("update")
@click.argument("account_id", type=int)
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="New account type")
@click.pass_context
def update_account(ctx, account_id: int, name: str | None, account_type: str | None) -> None:
    """Rename an account or change its type.

    The balance is maintained by transactions and cannot be set here.

    Examples:
        fintrack account update 1 --name "Joint Checking"
        fintrack account update 2 --type savings
    """
    service = AccountService(ctx.obj["db"])
    owner = ctx.obj["owner"]

    try:
        current = service.require_account(account_id, owner)
        account = service.update_account(
            account_id,
            owner,
            name if name is not None else current.name,
            account_type if account_type is not None else current.account_type,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account '{account.name}' (ID: {account.id})")


@account_group.command("delete")
@click.argument("account_id", type=int)
@click.pass_context
def delete_account(ctx, account_id: int) -> None:
    """Delete an account.

    The account can only be deleted if no transaction references it.

    Examples:
        fintrack account delete 1
    """
    service = AccountService(ctx.obj["db"])

    try:
        service.delete_account(account_id, ctx.obj["owner"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account {account_id}")


def register_commands(cli: click.Group) -> None:
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
