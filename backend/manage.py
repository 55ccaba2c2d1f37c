"""Management commands for the MySkin Aesthetics backend."""

from __future__ import annotations

import logging
from typing import Optional

import click

from myskin.db.seed import ensure_admin_user, seed_categories, set_bank_details
from myskin.db.session import create_tables

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@click.group()
def cli() -> None:
    """Entry point for management commands."""


@cli.command("init-db")
def init_db() -> None:
    """Create all tables in the configured database."""
    create_tables()
    logging.info("Database tables are in place.")


@cli.command("create-admin")
@click.option("--email", required=True, help="Login email for the admin account.")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password for the admin account (prompted when omitted).",
)
@click.option("--name", default=None, help="Display name shown in the back-office.")
def create_admin(email: str, password: str, name: Optional[str]) -> None:
    """Create an admin account, or reset the password of an existing one."""
    if len(password) < 8:
        raise click.ClickException("Password must be at least 8 characters.")
    create_tables()
    admin = ensure_admin_user(email, password, name)
    logging.info("Admin ready (id=%s, email=%s).", admin.id, admin.email)


@cli.command("set-bank-details")
@click.option("--bank-name", required=True)
@click.option("--account-name", required=True)
@click.option("--account-number", required=True)
def bank_details(bank_name: str, account_name: str, account_number: str) -> None:
    """Set the bank account shown to customers paying by transfer."""
    create_tables()
    details = set_bank_details(bank_name, account_name, account_number)
    logging.info("Active bank account set to %s (%s).", details.bank_name, details.account_number)


@cli.command("seed-catalog")
def seed_catalog() -> None:
    """Insert the default product categories that are missing."""
    create_tables()
    created = seed_categories()
    logging.info("Seeded %s categories.", created)


if __name__ == "__main__":
    cli()
