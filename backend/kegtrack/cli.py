# Overview: Flask CLI command group for keg bootstrap and inspection.

# backend/kegtrack/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask kegs <command> [options]
#
# - python -m flask kegs seed
#   Load demo kegs, customers and cider types into the running app's store.
# - python -m flask kegs new-ids --count 10
#   Print fresh keg ids with their QR codes (nothing is stored).
# - python -m flask kegs check-qr "sk 12345678"
#   Validate scanned text and show the keg id it maps to.
# - python -m flask kegs stats
#   Keg counts per status.
#
# The store is in memory: `seed` only matters to commands sharing the same
# process (e.g. `stats` after `seed` in a flask shell session).

import click
from flask.cli import with_appcontext

from .extensions import get_store
from .models import KEG_STATUSES
from .schemas import MAX_BATCH_KEGS
from .services.identifier_service import (
    generate_unique_keg_id,
    generate_qr_code,
    extract_keg_id_from_qr,
    is_valid_qr_code,
    normalize_scan,
)
from .services.seed_service import seed_demo_data


@click.group('kegs')
def kegs_group():
    """Keg bootstrap and inspection commands."""


@kegs_group.command('seed')
@with_appcontext
def seed_command():
    """Load demo data into the store."""
    created = seed_demo_data(get_store())
    if not any(created.values()):
        click.echo("SKIP Demo data already loaded")
        return
    for name, count in created.items():
        click.echo(f"PASS {name}: {count}")


@kegs_group.command('new-ids')
@click.option('--count', default=1, type=click.IntRange(1, MAX_BATCH_KEGS), help='How many ids to generate')
@with_appcontext
def new_ids_command(count):
    """Generate keg ids that are not yet in the store."""
    store = get_store()
    issued = set()
    for _ in range(count):
        keg_id = generate_unique_keg_id(lambda candidate: store.keg_exists(candidate) or candidate in issued)
        issued.add(keg_id)
        click.echo(f"{keg_id}\t{generate_qr_code(keg_id)}")


@kegs_group.command('check-qr')
@click.argument('value')
@with_appcontext
def check_qr_command(value):
    """Validate a scanned QR value and look up its keg."""
    qr_code = normalize_scan(value)
    if not is_valid_qr_code(qr_code):
        raise click.ClickException(f"{qr_code!r} is not a keg QR code (expected SK + 8 digits)")

    keg_id = extract_keg_id_from_qr(qr_code)
    keg = get_store().get_keg(keg_id)
    if keg is None:
        click.echo(f"{qr_code} -> {keg_id} (not registered)")
    else:
        click.echo(f"{qr_code} -> {keg_id} [{keg.status}, {keg.size}]")


@kegs_group.command('stats')
@with_appcontext
def stats_command():
    """Show keg counts per status."""
    stats = get_store().get_keg_stats()
    for status in KEG_STATUSES:
        click.echo(f"{status:<10}{stats[status]:>6}")
    click.echo(f"{'total':<10}{stats['total']:>6}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(kegs_group)
