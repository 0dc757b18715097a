"""Dashboard command."""

import click
from fintrack.domain.dashboard import DashboardService


def _format_change(change: float) -> str:
    return f"{change:+.1f}%"


@click.command("dashboard")
@click.option(
    "--range",
    "time_range",
    type=click.Choice(["week", "month", "year"]),
    default="month",
    show_default=True,
)
@click.pass_context
def dashboard(ctx, time_range: str) -> None:
    """Show balance, income, expenses and savings for the period."""
    summary = DashboardService(ctx.obj["db"]).get_dashboard_summary(
        ctx.obj["owner"], time_range=time_range
    )
    change = summary.period_change

    click.echo(f"\nDashboard (last {time_range}):")
    click.echo("-" * 50)
    click.echo(f"{'Total balance':<16} ${summary.total_balance:>12,.2f}  {_format_change(change.balance)}")
    click.echo(f"{'Income':<16} ${summary.income:>12,.2f}  {_format_change(change.income)}")
    click.echo(f"{'Expenses':<16} ${summary.expenses:>12,.2f}  {_format_change(change.expenses)}")
    click.echo(f"{'Savings':<16} ${summary.savings:>12,.2f}  {_format_change(change.savings)}")


def register_commands(cli: click.Group) -> None:
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
