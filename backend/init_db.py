#!/usr/bin/env python3
"""Deploy hook: create the budget tracker collections and indexes, then exit."""
import logging

import click
from pymongo.errors import PyMongoError

from commands import run_init
from config import Config
from db import open_database


@click.command()
@click.option("--timeout", type=float, default=Config.INIT_TIMEOUT_SECONDS, show_default=True,
              help="Seconds allowed for the whole run.")
def main(timeout):
    logging.basicConfig(level=Config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    try:
        with open_database(Config) as db:
            code = run_init(db, timeout)
    except PyMongoError as e:
        click.echo(f"Could not connect to MongoDB at {Config.MONGODB_URI}: {e}", err=True)
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
