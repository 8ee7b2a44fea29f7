"""
Flask CLI commands: ``flask create-db``, ``flask drop-db``, ``flask seed``.
Schema changes on real databases go through ``flask db upgrade``.
"""
import click
from flask.cli import with_appcontext

from clinic_booking.extensions import db
from clinic_booking.seeds import seed_sample_data


@click.command('create-db')
@with_appcontext
def create_db_command():
    """Create all tables, indexes and the upcoming-appointments view."""
    db.create_all()
    click.echo('Created clinic booking schema')


@click.command('drop-db')
@click.confirmation_option(prompt='Drop every clinic booking table?')
@with_appcontext
def drop_db_command():
    """Drop the view and all tables."""
    db.drop_all()
    click.echo('Dropped clinic booking schema')


@click.command('seed')
@with_appcontext
def seed_command():
    """Load the sample clinic rows into an empty database."""
    if seed_sample_data():
        click.echo('Sample data loaded')
    else:
        click.echo('Database already has patients; nothing loaded')


def register_commands(app):
    app.cli.add_command(create_db_command)
    app.cli.add_command(drop_db_command)
    app.cli.add_command(seed_command)
