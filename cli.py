"""
Optique CMS CLI.

Operator commands for the database, permissions and collection maintenance.

    python cli.py db-init
    python cli.py seed-permissions --admin-email owner@example.com
    python cli.py check-order
"""

from datetime import timedelta

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="optique-cms",
    help="Optique CMS maintenance CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================


@app.command()
def db_init():
    """Create all tables that do not exist yet."""
    from cms_api.models import Base
    from shared.infrastructure.db import engine

    console.print("[blue]Creating tables...[/blue]")
    Base.metadata.create_all(bind=engine)
    console.print("[green]✓ Tables created/verified[/green]")


@app.command()
def seed_permissions(
    admin_email: str = typer.Option(None, help="Create or promote this user to admin"),
):
    """Create the permissions and the admin/editor roles."""
    from cms_api.seed import ADMIN_ROLE, ensure_user, seed_permissions as seed
    from shared.infrastructure.db import get_db_context

    with get_db_context() as db:
        roles = seed(db)
        console.print(f"[green]✓ Roles ready: {', '.join(sorted(roles))}[/green]")
        if admin_email:
            user = ensure_user(db, admin_email, roles[ADMIN_ROLE])
            console.print(f"[green]✓ {admin_email} is admin (id {user.id})[/green]")


@app.command()
def issue_token(
    email: str = typer.Argument(..., help="Email of an existing user"),
    ttl_minutes: int = typer.Option(60, help="Token lifetime in minutes"),
):
    """Print a bearer token for an existing user."""
    from sqlalchemy import select

    from cms_api.models import User
    from shared.infrastructure.db import get_db_context
    from shared.security.auth import sign_jwt

    with get_db_context() as db:
        user = db.scalar(select(User).where(User.email == email))
        if user is None or not user.is_active:
            console.print(f"[red]✗ No active user with email {email}[/red]")
            raise typer.Exit(1)
        token = sign_jwt({"sub": user.id, "email": user.email}, ttl_seconds=ttl_minutes * 60)

    console.print(token)


# =============================================================================
# Collection Commands
# =============================================================================


def _collection_or_exit(name: str):
    from cms_api.services import COLLECTIONS

    spec = COLLECTIONS.get(name)
    if spec is None:
        console.print(f"[red]Unknown collection '{name}'. Choose from: {', '.join(COLLECTIONS)}[/red]")
        raise typer.Exit(1)
    return spec


@app.command()
def list_collection(
    name: str = typer.Argument(..., help="Collection, e.g. faqs or testimonials"),
    trash: bool = typer.Option(False, "--trash", help="Show soft-deleted records"),
):
    """Show the items of a collection."""
    from cms_api.services import OrderedCollectionService, SoftDeleteService
    from shared.infrastructure.db import get_db_context

    spec = _collection_or_exit(name)
    if trash and not spec.soft_deletable:
        console.print(f"[red]{name} has no trash[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        if trash:
            result = SoftDeleteService(db, spec).list_deleted()
        elif spec.ordered:
            result = OrderedCollectionService(db, spec).list()
        else:
            result = SoftDeleteService(db, spec).list_active()

    if not result.success:
        console.print(f"[red]✗ {result.error}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{name}{' (trash)' if trash else ''}")
    table.add_column("ID", style="cyan")
    if spec.ordered:
        table.add_column("Order", style="green")
    table.add_column("Summary")
    if spec.has_active_flag:
        table.add_column("Active")

    for item in result.data:
        values = item.model_dump()
        summary = next(
            (str(values[field]) for field in ("question", "title", "name", "full_name", "email") if values.get(field)),
            "",
        )
        row = [item.id]
        if spec.ordered:
            row.append(str(item.order))
        row.append(summary[:60])
        if spec.has_active_flag:
            row.append("yes" if item.is_active else "no")
        table.add_row(*row)

    console.print(table)


@app.command()
def check_order():
    """Report order gaps/duplicates and lifecycle inconsistencies."""
    from cms_api.services import (
        ORDERED_COLLECTIONS,
        SOFT_DELETE_COLLECTIONS,
        OrderedCollectionService,
        SoftDeleteService,
    )
    from shared.infrastructure.db import get_db_context

    table = Table(title="Collection invariants")
    table.add_column("Collection", style="cyan")
    table.add_column("Problem", style="red")

    with get_db_context() as db:
        for spec in ORDERED_COLLECTIONS:
            for problem in OrderedCollectionService(db, spec).check_invariants():
                table.add_row(spec.key, problem)
        for spec in SOFT_DELETE_COLLECTIONS:
            breaches = SoftDeleteService(db, spec).find_invariant_breaches()
            for entity_id, problems in breaches.items():
                table.add_row(spec.key, f"{entity_id}: {'; '.join(problems)}")

    if table.row_count:
        console.print(table)
        raise typer.Exit(1)
    console.print("[green]✓ All collections are consistent[/green]")


@app.command()
def renumber(
    name: str = typer.Argument(None, help="Ordered collection; all of them when omitted"),
):
    """Compact the order values of ordered collections."""
    from cms_api.services import ORDERED_COLLECTIONS, OrderedCollectionService
    from shared.infrastructure.db import get_db_context

    specs = [_collection_or_exit(name)] if name else list(ORDERED_COLLECTIONS)
    failed = False

    with get_db_context() as db:
        for spec in specs:
            if not spec.ordered:
                console.print(f"[red]{spec.key} is not ordered[/red]")
                raise typer.Exit(1)
            result = OrderedCollectionService(db, spec).renumber()
            if result.success:
                console.print(f"[green]✓ {spec.key}: {result.message}[/green]")
            else:
                console.print(f"[red]✗ {spec.key}: {result.error}[/red]")
                failed = True

    if failed:
        raise typer.Exit(1)


@app.command()
def purge_trash(
    days: int = typer.Option(30, help="Delete records that have been in the trash longer than this"),
    name: str = typer.Option(None, "--collection", help="Only this collection"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Show what would be deleted"),
):
    """Permanently delete old soft-deleted records."""
    from cms_api.models import utcnow
    from cms_api.services import SOFT_DELETE_COLLECTIONS, SoftDeleteService
    from shared.infrastructure.db import get_db_context

    specs = [_collection_or_exit(name)] if name else list(SOFT_DELETE_COLLECTIONS)
    if any(not spec.soft_deletable for spec in specs):
        console.print(f"[red]{name} has no trash[/red]")
        raise typer.Exit(1)
    cutoff = utcnow() - timedelta(days=days)

    with get_db_context() as db:
        for spec in specs:
            service = SoftDeleteService(db, spec)
            if dry_run:
                count = len(service.repo.find_deleted(deleted_before=cutoff))
                console.print(f"[yellow]{spec.key}: would purge {count}[/yellow]")
                continue
            result = service.purge_deleted_before(cutoff)
            if not result.success:
                console.print(f"[red]✗ {spec.key}: {result.error}[/red]")
                raise typer.Exit(1)
            console.print(f"[green]✓ {spec.key}: {result.message}[/green]")


if __name__ == "__main__":
    app()
