#!/usr/bin/env python3
"""
Database migration runner for the Supabase Postgres database.

Applies the SQL files in migrations/ in filename order and records each one
(with a checksum of its contents) in a tracking table.

Usage:
    python run_migrations.py                  # Apply pending migrations
    python run_migrations.py --status         # Show migration status
    python run_migrations.py --dry-run        # Show what would run
    python run_migrations.py --force 001      # Re-apply one migration

Configuration:
    Set SUPABASE_DB_URL in your .env file to the direct Postgres URI
    (Supabase Dashboard > Settings > Database > Connection string > URI).
"""

import argparse
import hashlib
import sys
from pathlib import Path
from typing import NamedTuple

import psycopg2
from psycopg2 import sql
from rich.console import Console
from rich.table import Table

from shared.config import get_settings

console = Console()

MIGRATIONS_DIR = Path(__file__).parent / "migrations"
MIGRATIONS_TABLE = "_migrations"


class Migration(NamedTuple):
    name: str
    path: Path
    checksum: str


def load_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """All migration files, sorted by name."""
    if not directory.exists():
        console.print(f"[yellow]Warning:[/yellow] Migrations directory not found: {directory}")
        return []
    return [
        Migration(path.name, path, checksum(path.read_text()))
        for path in sorted(directory.glob("*.sql"))
    ]


def checksum(content: str) -> str:
    return hashlib.sha256(content.encode()).hexdigest()[:16]


def connect():
    """Open a connection using SUPABASE_DB_URL, or exit with a hint."""
    settings = get_settings()
    if not settings.supabase_db_url:
        console.print("[red]Error:[/red] SUPABASE_DB_URL is not set.")
        console.print("Set it in your .env file to the Postgres connection URI.")
        sys.exit(1)

    try:
        return psycopg2.connect(settings.supabase_db_url)
    except psycopg2.Error as e:
        console.print(f"[red]Database connection failed:[/red] {e}")
        sys.exit(1)


def ensure_tracking_table(conn) -> None:
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL(
                """
                CREATE TABLE IF NOT EXISTS {} (
                    id SERIAL PRIMARY KEY,
                    name VARCHAR(255) NOT NULL UNIQUE,
                    checksum VARCHAR(64) NOT NULL,
                    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            ).format(sql.Identifier(MIGRATIONS_TABLE))
        )
    conn.commit()


def applied_migrations(conn) -> dict[str, tuple[str, object]]:
    """Map of applied migration name -> (checksum, applied_at)."""
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL("SELECT name, checksum, applied_at FROM {} ORDER BY name").format(
                sql.Identifier(MIGRATIONS_TABLE)
            )
        )
        return {name: (digest, applied_at) for name, digest, applied_at in cur.fetchall()}


def pending_migrations(conn) -> list[Migration]:
    applied = applied_migrations(conn)
    pending = []
    for migration in load_migrations():
        if migration.name not in applied:
            pending.append(migration)
        elif applied[migration.name][0] != migration.checksum:
            console.print(
                f"[yellow]Warning:[/yellow] {migration.name} has changed since it was applied"
            )
    return pending


def apply(conn, migration: Migration, dry_run: bool = False) -> None:
    """Run one migration and record it, in a single transaction."""
    if dry_run:
        console.print(f"[cyan]Would run:[/cyan] {migration.name}")
        return

    console.print(f"[blue]Running:[/blue] {migration.name}...")
    try:
        with conn.cursor() as cur:
            cur.execute(migration.path.read_text())
            cur.execute(
                sql.SQL(
                    "INSERT INTO {} (name, checksum) VALUES (%s, %s) "
                    "ON CONFLICT (name) DO UPDATE SET checksum = EXCLUDED.checksum, applied_at = NOW()"
                ).format(sql.Identifier(MIGRATIONS_TABLE)),
                (migration.name, migration.checksum),
            )
        conn.commit()
    except psycopg2.Error as e:
        conn.rollback()
        console.print(f"[red]✗[/red] {migration.name} failed: {e}")
        raise

    console.print(f"[green]✓[/green] {migration.name} applied")


def show_status(conn) -> None:
    applied = applied_migrations(conn)
    pending = pending_migrations(conn)

    if not applied and not pending:
        console.print("[dim]No migrations found.[/dim]")
        return

    table = Table(title="Migration Status")
    table.add_column("Migration", style="cyan")
    table.add_column("Status")
    table.add_column("Applied At")
    table.add_column("Checksum")

    for name, (digest, applied_at) in applied.items():
        stamp = applied_at.strftime("%Y-%m-%d %H:%M:%S") if applied_at else ""
        table.add_row(name, "[green]Applied[/green]", stamp, digest)
    for migration in pending:
        table.add_row(migration.name, "[yellow]Pending[/yellow]", "", migration.checksum)

    console.print(table)


def force(conn, prefix: str, assume_yes: bool = False) -> None:
    """Re-apply the single migration whose name starts with prefix."""
    found = [m for m in load_migrations() if m.name.startswith(prefix)]
    if len(found) != 1:
        console.print(f"[red]Error:[/red] {len(found)} migrations match '{prefix}'")
        for migration in found:
            console.print(f"  - {migration.name}")
        sys.exit(1)

    migration = found[0]
    console.print(f"[yellow]Warning:[/yellow] re-running {migration.name}")
    if not assume_yes and input("Continue? [y/N] ").lower() != "y":
        console.print("Aborted.")
        return
    apply(conn, migration)


def main():
    parser = argparse.ArgumentParser(description="Run database migrations for Supabase")
    parser.add_argument("--status", action="store_true", help="Show migration status and exit")
    parser.add_argument("--dry-run", action="store_true", help="List pending migrations without running them")
    parser.add_argument("--force", metavar="PREFIX", help="Re-apply one migration by name prefix (e.g. '001')")
    parser.add_argument("--yes", action="store_true", help="Skip the --force confirmation prompt")
    args = parser.parse_args()

    console.print("[bold]Taskboard Database Migrations[/bold]")
    console.print()

    conn = connect()
    try:
        ensure_tracking_table(conn)
        if args.status:
            show_status(conn)
            return
        if args.force:
            force(conn, args.force, assume_yes=args.yes)
            return

        pending = pending_migrations(conn)
        if not pending:
            console.print("[green]All migrations are up to date![/green]")
            return

        console.print(f"Found {len(pending)} pending migration(s)")
        for migration in pending:
            apply(conn, migration, dry_run=args.dry_run)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
