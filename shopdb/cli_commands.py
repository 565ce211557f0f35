"""
Flask CLI commands for store maintenance.

Commands:
- flask init-db: Create missing tables
- flask set-password: Set the password of a user
- flask add-category: Create a product category
- flask best-before: Print units on hand per best-before date
- flask cashbox-status: Print the cash balance and the latest movements
"""

import click

from shopdb.database import get_store
from shopdb.exceptions import NotFoundError, ShopError
from shopdb.services.auth_service import set_user_password
from shopdb.services.cashbox_service import cashbox_entry_label, cashbox_history, cashbox_status
from shopdb.services.catalog_service import add_category
from shopdb.services.inventory_service import bestbeforelist
from shopdb.services.user_service import get_username
from shopdb.utils.formatters import date_de, money_eur


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create all tables that do not exist yet."""
        get_store(app).create_schema()
        click.echo(click.style('Schema ready.', fg='green'))

    @app.cli.command('set-password')
    @click.option('--user', 'user_id', required=True, type=int, help='User id')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='New password')
    def set_password_command(user_id, password):
        """Set the password of a user."""
        try:
            with get_store(app).session_scope() as session:
                set_user_password(session, user_id, password)
        except ShopError as e:
            click.echo(click.style(f'Error: {e.message}', fg='red'))
            return
        click.echo(click.style(f'Password of user {user_id} updated.', fg='green'))

    @app.cli.command('add-category')
    @click.argument('name')
    def add_category_command(name):
        """Create a product category (no-op if it exists)."""
        with get_store(app).session_scope() as session:
            category_id = add_category(session, name)
        click.echo(f'Category {name!r}: id {category_id}')

    @app.cli.command('best-before')
    def best_before_command():
        """Print units on hand per best-before date, newest date first."""
        with get_store(app).session_scope() as session:
            entries = bestbeforelist(session)

        if not entries:
            click.echo('No stock on hand.')
            return
        for entry in entries:
            date = date_de(entry['best_before_date']) or 'unknown'
            click.echo(f"{date:>10}  {entry['amount']:>4} x {entry['name']} ({entry['ean']})")

    @app.cli.command('cashbox-status')
    @click.option('--limit', type=int, default=None, help='Number of movements to show')
    def cashbox_status_command(limit):
        """Print the cash balance and the latest movements."""
        limit = limit or app.config.get('CASHBOX_HISTORY_LIMIT', 10)
        with get_store(app).session_scope() as session:
            balance = cashbox_status(session)
            lines = []
            for entry in cashbox_history(session, limit):
                try:
                    username = get_username(session, entry['user'])
                except NotFoundError:
                    username = None
                lines.append((entry, cashbox_entry_label(entry, username)))

        click.echo(click.style(f'Balance: {money_eur(balance)}', bold=True))
        for entry, label in lines:
            click.echo(f"{date_de(entry['timestamp']):>10}  {money_eur(entry['amount']):>12}  {label}")
