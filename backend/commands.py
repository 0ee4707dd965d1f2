import click
from flask import current_app
from flask.cli import with_appcontext

from errors import InitError
from initializer import initialize
from inspect_schema import inspect_schema
from manifest import BUDGET_TRACKER_MANIFEST
from store import MongoSchemaStore


def _echo_report(report):
    for e in report.entries:
        click.echo(f"{e.outcome.value:<16} {e.spec.describe()}")


def run_init(db, timeout):
    """Initialize `db`, echo the report and return the process exit code."""
    try:
        report = initialize(MongoSchemaStore(db), BUDGET_TRACKER_MANIFEST, deadline=timeout)
    except InitError as e:
        if e.report:
            _echo_report(e.report)
        where = e.entry.describe() if e.entry is not None else "manifest"
        click.echo(f"{type(e).__name__} at {where}: {e}", err=True)
        return 1

    _echo_report(report)
    click.echo("Database initialized successfully")
    return 0


@click.command("init-db")
@click.option("--timeout", type=float, default=None,
              help="Seconds allowed for the whole run (defaults to INIT_TIMEOUT_SECONDS).")
@with_appcontext
def init_db_command(timeout):
    """Create the budget tracker collections and indexes if missing."""
    if timeout is None:
        timeout = current_app.config["INIT_TIMEOUT_SECONDS"]
    code = run_init(current_app.extensions["budget_db"], timeout)
    if code:
        raise SystemExit(code)


@click.command("schema-status")
@with_appcontext
def schema_status_command():
    """Show collections and indexes that are missing or conflict with the manifest."""
    status = inspect_schema(current_app.extensions["budget_db"], BUDGET_TRACKER_MANIFEST)
    if status.in_sync:
        click.echo("Schema is in sync")
        return
    for name in status.missing_collections:
        click.echo(f"missing collection  {name}")
    for name in status.missing_indexes:
        click.echo(f"missing index       {name}")
    for line in status.conflicting_indexes:
        click.echo(f"conflicting index   {line}")
    raise SystemExit(1)
