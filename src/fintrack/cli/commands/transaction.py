"""Transaction management commands."""

from dataclasses import replace

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import (
    Transaction,
    TransactionFilters,
    TransactionInput,
    TransactionStatus,
    TransactionType,
)
from fintrack.domain.errors import AtomicWriteFailure, DomainError, NotFoundError
from fintrack.domain.transaction import TransactionService
from fintrack.utils.amount_parser import parse_amount
from fintrack.utils.date_parser import NAMED_DATE_RANGES, parse_date

TRANSACTION_TYPES = [t.value for t in TransactionType]
TRANSACTION_STATUSES = [s.value for s in TransactionStatus]


def _resolve_category(service: CategoryService, owner: str, category: str) -> int:
    """Resolve a category name or ID to an ID."""
    if category.isdigit():
        return service.require_category(int(category), owner).id
    found = service.get_category_by_name(owner, category)
    if found is None:
        raise NotFoundError(f"Category '{category}' not found")
    return found.id


def _echo_transactions(
    transactions: list[Transaction], categories: dict[int, str], accounts: dict[int, str]
) -> None:
    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':<13} {'Account':<16} {'Category':<16} {'Description':<30}"
    )
    click.echo("-" * 100)

    for txn in transactions:
        sign = "+" if txn.transaction_type is TransactionType.INCOME else "-"
        amount_str = f"{sign}${txn.amount:,.2f}"
        account_name = accounts.get(txn.account_id, "") if txn.account_id else ""
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {amount_str:<13} {account_name[:16]:<16} "
            f"{categories.get(txn.category_id, '')[:16]:<16} {txn.description[:30]:<30}"
        )


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--description", required=True, help="Transaction description")
@click.option("--amount", required=True, help="Positive amount (e.g., 54.20)")
@click.option("--type", "transaction_type", type=click.Choice(TRANSACTION_TYPES), required=True)
@click.option("--category", required=True, help="Category name or ID")
@click.option("--date", "txn_date", default="today", help="Date (YYYY-MM-DD, 'today', 'yesterday')")
@click.option("--account", "account_id", type=int, help="Account ID whose balance is affected")
@click.option("--notes", help="Notes")
@click.option("--receipt-url", help="Link to a receipt")
@click.option("--status", type=click.Choice(TRANSACTION_STATUSES), default="completed")
@click.pass_context
def add_transaction(
    ctx,
    description: str,
    amount: str,
    transaction_type: str,
    category: str,
    txn_date: str,
    account_id: int | None,
    notes: str | None,
    receipt_url: str | None,
    status: str,
) -> None:
    """Record a transaction.

    Examples:
        fintrack transaction add --description "Paycheck" --amount 2500 --type income --category Salary --account 1
        fintrack transaction add --description "Groceries" --amount 54.20 --type expense --category Food --date yesterday
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]

    try:
        parsed_date = parse_date(txn_date)
        parsed_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        category_id = _resolve_category(CategoryService(db), owner, category)
        txn = TransactionService(db).create_transaction(
            TransactionInput(
                description=description,
                amount=parsed_amount,
                date=parsed_date,
                transaction_type=TransactionType(transaction_type),
                category_id=category_id,
                owner=owner,
                account_id=account_id,
                notes=notes,
                receipt_url=receipt_url,
                status=TransactionStatus(status),
            )
        )
    except (DomainError, AtomicWriteFailure) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {txn.id}")


@transaction_group.command("list")
@click.option("--search", help="Text to look for in description or notes")
@click.option("--category", help="Category name or ID")
@click.option("--type", "transaction_type", type=click.Choice(TRANSACTION_TYPES))
@click.option("--range", "date_range", type=click.Choice(NAMED_DATE_RANGES))
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@click.option("--min-amount", help="Minimum amount")
@click.option("--max-amount", help="Maximum amount")
@click.option("--status", type=click.Choice(TRANSACTION_STATUSES))
@click.pass_context
def list_transactions(
    ctx,
    search: str | None,
    category: str | None,
    transaction_type: str | None,
    date_range: str | None,
    start_date: str | None,
    end_date: str | None,
    min_amount: str | None,
    max_amount: str | None,
    status: str | None,
) -> None:
    """View transactions with optional filters, newest first."""
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    category_service = CategoryService(db)

    try:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
        low = parse_amount(min_amount) if min_amount else None
        high = parse_amount(max_amount) if max_amount else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        filters = TransactionFilters(
            search=search,
            category_id=_resolve_category(category_service, owner, category) if category else None,
            transaction_type=TransactionType(transaction_type) if transaction_type else None,
            date_range=date_range,
            start_date=start,
            end_date=end,
            min_amount=low,
            max_amount=high,
            status=TransactionStatus(status) if status else None,
        )
        transactions = TransactionService(db).list_transactions(owner, filters)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    categories = {cat.id: cat.name for cat in category_service.list_categories(owner)}
    accounts = {acc.id: acc.name for acc in AccountService(db).list_accounts(owner)}
    _echo_transactions(transactions, categories, accounts)

    income = sum(t.amount for t in transactions if t.transaction_type is TransactionType.INCOME)
    expenses = sum(t.amount for t in transactions if t.transaction_type is TransactionType.EXPENSE)
    click.echo("-" * 100)
    click.echo(
        f"{'TOTAL':<6} Income: ${income:,.2f} | Expenses: ${expenses:,.2f} | "
        f"Count: {len(transactions)}"
    )


@transaction_group.command("recent")
@click.option("--range", "time_range", type=click.Choice(["week", "month", "year"]))
@click.option("--limit", type=int, default=5, show_default=True)
@click.pass_context
def recent_transactions(ctx, time_range: str | None, limit: int) -> None:
    """Show the newest transactions of the last week, month or year (default 30 days)."""
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]

    transactions = TransactionService(db).list_recent_transactions(
        owner, time_range=time_range, limit=limit
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    categories = {cat.id: cat.name for cat in CategoryService(db).list_categories(owner)}
    accounts = {acc.id: acc.name for acc in AccountService(db).list_accounts(owner)}
    _echo_transactions(transactions, categories, accounts)


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--description", help="Transaction description")
@click.option("--amount", help="Positive amount")
@click.option("--type", "transaction_type", type=click.Choice(TRANSACTION_TYPES))
@click.option("--category", help="Category name or ID")
@click.option("--date", "txn_date", help="Date (YYYY-MM-DD, 'today', 'yesterday')")
@click.option("--account", "account_id", type=int, help="Account ID")
@click.option("--no-account", is_flag=True, help="Detach the transaction from its account")
@click.option("--notes", help="Notes")
@click.option("--status", type=click.Choice(TRANSACTION_STATUSES))
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    description: str | None,
    amount: str | None,
    transaction_type: str | None,
    category: str | None,
    txn_date: str | None,
    account_id: int | None,
    no_account: bool,
    notes: str | None,
    status: str | None,
) -> None:
    """Update a transaction.

    Fields not given keep their current value. Account balances follow the
    change of amount, type or account.

    Examples:
        fintrack transaction update 3 --amount 60
        fintrack transaction update 3 --type income --account 2
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = TransactionService(db)

    try:
        changes = {}
        if txn_date is not None:
            changes["date"] = parse_date(txn_date)
        if amount is not None:
            changes["amount"] = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if description is not None:
        changes["description"] = description
    if transaction_type is not None:
        changes["transaction_type"] = TransactionType(transaction_type)
    if notes is not None:
        changes["notes"] = notes
    if status is not None:
        changes["status"] = TransactionStatus(status)
    if no_account:
        changes["account_id"] = None
    elif account_id is not None:
        changes["account_id"] = account_id

    try:
        if category is not None:
            changes["category_id"] = _resolve_category(CategoryService(db), owner, category)
        current = service.get_transaction(transaction_id, owner)
        data = TransactionInput(
            description=current.description,
            amount=current.amount,
            date=current.date,
            transaction_type=current.transaction_type,
            category_id=current.category_id,
            owner=owner,
            account_id=current.account_id,
            notes=current.notes,
            receipt_url=current.receipt_url,
            status=current.status,
        )
        service.update_transaction(transaction_id, replace(data, **changes), owner)
    except (DomainError, AtomicWriteFailure) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction and reverse its effect on the account balance.

    Examples:
        fintrack transaction delete 1
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = TransactionService(db)

    try:
        txn = service.get_transaction(transaction_id, owner)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{txn.date}  {txn.description}  ${txn.amount:,.2f}")
    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id, owner)
    except (DomainError, AtomicWriteFailure) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
