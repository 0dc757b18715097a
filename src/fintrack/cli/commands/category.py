"""Category management commands."""

import click
from fintrack.cli.error_handling import handle_domain_error
from fintrack.domain.category import CategoryService
from fintrack.domain.errors import DomainError


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=click.Choice(["income", "expense"]))
@click.pass_context
def list_categories(ctx, category_type: str | None) -> None:
    """List categories, optionally only income or expense ones."""
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories(ctx.obj["owner"], category_type=category_type)
    if not categories:
        click.echo("No categories found.")
        return

    for cat in categories:
        icon = cat.icon or ""
        click.echo(f"{cat.id:3d}  {cat.name:20s} {cat.category_type.value:8s} {icon}")


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type", "category_type", type=click.Choice(["income", "expense"]), required=True
)
@click.option("--icon", help="Icon name")
@click.option("--color", help="Display color (e.g., #4CAF50)")
@click.pass_context
def create_category(
    ctx, name: str, category_type: str, icon: str | None, color: str | None
) -> None:
    """Create a new category.

    Examples:
        fintrack category create "Pets" --type expense
        fintrack category create "Bonus" --type income --icon star
    """
    service = CategoryService(ctx.obj["db"])

    try:
        category = service.create_category(
            owner=ctx.obj["owner"],
            name=name,
            category_type=category_type,
            icon=icon,
            color=color,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{category.name}' (ID: {category.id})")


@category_group.command("init")
@click.pass_context
def init_categories(ctx) -> None:
    """Create the default categories if none exist yet."""
    service = CategoryService(ctx.obj["db"])
    owner = ctx.obj["owner"]

    if service.list_categories(owner):
        click.echo("Categories already exist. Skipping initialization.")
        return

    categories = service.seed_default_categories(owner)
    click.echo(f"Created {len(categories)} categories.")


def register_commands(cli: click.Group) -> None:
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
